"""
go-gen-proxy Package.

Generates a proxy for a Go package: a package of the same name that
re-exports every exported symbol of the original and routes each exported
function call through an invocation hook, so calls can be observed or
intercepted without changing the original's source.

Usage
-----

Generate and Write
^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import go_gen_proxy as ggp
    result = ggp.generate("./internal/client", "./proxy/client")
    for f in result.files:
        print(f.name)
    # client.go
    # proxy__.go

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from go_gen_proxy import GeneratorConfig, ProxyEngine

    config = GeneratorConfig(noop=True, strict=True)
    result = ProxyEngine(config=config).generate("example.com/mod/client")
    print(result.file("client.go").code)
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from go_gen_proxy.config import GeneratorConfig
from go_gen_proxy.core.engine import GenerationResult, ProxyEngine
from go_gen_proxy.core.writer import write_result
from go_gen_proxy.errors import GenerationError, GoSyntaxError, OutputError, ProxyGenError, ResolutionError

__version__ = "0.1.0"


def generate(
  package: str,
  out_dir: Optional[Union[str, Path]] = None,
  noop: bool = False,
  strict: bool = False,
  config_overrides: Optional[Dict[str, Any]] = None,
) -> GenerationResult:
  """
  Generates (and optionally writes) the proxy of a Go package.

  Args:
      package (str): Package directory or import path.
      out_dir (Optional[Union[str, Path]]): If given, the files are written there.
      noop (bool): Emit plain aliases without hook instrumentation.
      strict (bool): Fail if any exported function must be excluded.
      config_overrides (Optional[Dict]): Extra `GeneratorConfig` fields.

  Returns:
      GenerationResult: The rendered proxy files and exclusions.

  Raises:
      ProxyGenError: On any fatal resolution, parse, generation or write error.
  """
  search = Path(package) if Path(package).is_dir() else None
  config = GeneratorConfig.load(noop=noop, strict=strict, overrides=config_overrides, search_path=search)
  result = ProxyEngine(config=config).generate(package)
  if out_dir is not None:
    write_result(result, Path(out_dir))
  return result


__all__ = [
  "GenerationError",
  "GenerationResult",
  "GeneratorConfig",
  "GoSyntaxError",
  "OutputError",
  "ProxyEngine",
  "ProxyGenError",
  "ResolutionError",
  "__version__",
  "generate",
]
