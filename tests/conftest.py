"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A throwaway Go environment (GOROOT with a few stdlib packages, an empty
  GOPATH) so package location never depends on the host machine.
- Helpers to write Go modules into `tmp_path`.
- Tracer isolation between tests.
"""

import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# Add src to path so we can import 'go_gen_proxy' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from go_gen_proxy.config import GeneratorConfig  # noqa: E402
from go_gen_proxy.core.tracer import reset_tracer  # noqa: E402

# Minimal stand-ins for the stdlib packages referenced by test sources.
_STDLIB = {
  "io": "package io\n\ntype Reader interface {\n\tRead(p []byte) (n int, err error)\n}\n",
  "context": "package context\n\ntype Context interface{}\n",
  "time": "package time\n\ntype Duration int64\n",
  "sync/atomic": "package atomic\n",
  "net/http": "package http\n\ntype Request struct{}\n",
  "math/rand/v2": "package rand\n\nfunc Int() int { return 4 }\n",
}


@pytest.fixture(autouse=True)
def isolated_tracer():
  """Every test starts with an empty trace."""
  reset_tracer()
  yield
  reset_tracer()


@pytest.fixture
def goroot(tmp_path) -> Path:
  root = tmp_path / "goroot"
  for import_path, code in _STDLIB.items():
    pkg_dir = root / "src" / import_path
    pkg_dir.mkdir(parents=True)
    (pkg_dir / f"{import_path.split('/')[-1]}.go").write_text(code, encoding="utf-8")
  return root


@pytest.fixture
def config(tmp_path, goroot) -> GeneratorConfig:
  """Instrumented-mode config pointing at the fake Go environment."""
  gopath = tmp_path / "gopath"
  gopath.mkdir()
  return GeneratorConfig(goroot=goroot, gopath=[gopath])


@pytest.fixture
def write_module(tmp_path) -> Callable[..., Path]:
  """
  Returns a helper writing a Go module and returning the package directory.

  Usage: ``write_module({"a.go": "..."}, module="example.com/m", subdir="lib")``
  """

  def _write(files: Dict[str, str], module: str = "example.com/m", subdir: str = "lib") -> Path:
    mod_root = tmp_path / "mod"
    mod_root.mkdir(exist_ok=True)
    (mod_root / "go.mod").write_text(f"module {module}\n\ngo 1.21\n", encoding="utf-8")
    pkg_dir = mod_root / subdir if subdir else mod_root
    pkg_dir.mkdir(parents=True, exist_ok=True)
    for name, code in files.items():
      (pkg_dir / name).write_text(code, encoding="utf-8")
    return pkg_dir

  return _write
