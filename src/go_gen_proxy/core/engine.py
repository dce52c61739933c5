"""
Proxy Generation Engine.

Orchestrates one run for one package:

1.  **Locate**: map the user's argument to a directory and import path.
2.  **Load**: parse every non-test file (all files are parsed before any
    output is produced).
3.  **Assemble**: classify, rewrite and synthesize each file independently.
4.  **Sidecar**: in instrumented mode, add the hook runtime file.

The engine never touches the output directory; `go_gen_proxy.core.writer`
does that once a `GenerationResult` exists, so a failing run leaves no
partial output behind.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from go_gen_proxy.config import GeneratorConfig
from go_gen_proxy.core.loader import PackageSource, load_package
from go_gen_proxy.core.proxy.assembler import OutputAssembler
from go_gen_proxy.core.proxy.classifier import Exclusion
from go_gen_proxy.core.proxy.imports import ImportResolver
from go_gen_proxy.core.proxy.sidecar import RESERVED_EXPORTS, SIDECAR_IDENTIFIERS, build_sidecar
from go_gen_proxy.core.tracer import get_tracer, reset_tracer
from go_gen_proxy.errors import GenerationError
from go_gen_proxy.locator import PackageLocator, find_module_root
from go_gen_proxy.utils.console import log_warning, logger


class GeneratedFile(BaseModel):
  """One output file."""

  name: str = Field(description="Base file name inside the output directory.")
  code: str = Field(description="Rendered Go source.")


class ExcludedSymbol(BaseModel):
  file: str
  symbol: str
  reason: str


class GenerationResult(BaseModel):
  """
  Structured result of generating one proxy package.
  """

  package: str = Field(description="Package clause name of the original (and the proxy).")
  import_path: str = Field(description="Import path the proxy imports the original under.")
  files: List[GeneratedFile] = Field(default_factory=list, description="Proxy files, sidecar last.")
  exclusions: List[ExcludedSymbol] = Field(default_factory=list, description="Exported functions left out.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="A log of internal trace events.")

  @property
  def has_exclusions(self) -> bool:
    """
    Returns True if any exported function could not be proxied.

    Returns:
        bool: True if the exclusions list is non-empty.
    """
    return len(self.exclusions) > 0

  def file(self, name: str) -> Optional[GeneratedFile]:
    for f in self.files:
      if f.name == name:
        return f
    return None


class ProxyEngine:
  """
  The main generation unit.
  """

  def __init__(self, config: Optional[GeneratorConfig] = None, locator: Optional[PackageLocator] = None):
    """
    Args:
        config (Optional[GeneratorConfig]): Settings; loaded from the
            environment and pyproject.toml when omitted.
        locator (Optional[PackageLocator]): Package lookup; built from
            `config` on first use when omitted.
    """
    self.config = config or GeneratorConfig.load()
    self._locator = locator

  def locator_for(self, target: str) -> PackageLocator:
    if self._locator is None:
      start = Path(target) if Path(target).is_dir() else Path.cwd()
      self._locator = PackageLocator(self.config, module_root=find_module_root(start))
    return self._locator

  def generate(self, target: str) -> GenerationResult:
    """
    Locates, loads and proxies a package.

    Args:
        target (str): Package directory or import path.

    Returns:
        GenerationResult: The rendered proxy files.

    Raises:
        ResolutionError: If the package cannot be found.
        GoSyntaxError: If a source file is malformed.
        GenerationError: If the package cannot be proxied, or (in strict
            mode) any exported function was excluded.
    """
    reset_tracer()
    tracer = get_tracer()
    locator = self.locator_for(target)

    tracer.start_phase("Load", target)
    located = locator.locate(target)
    logger.debug(f"package [path]{located.import_path}[/path] at {located.directory}")
    package = load_package(located)
    tracer.end_phase()

    return self.run(package, locator)

  def run(self, package: PackageSource, locator: Optional[PackageLocator] = None) -> GenerationResult:
    """
    Generates the proxy for an already loaded package.

    Args:
        package (PackageSource): The parsed original package.
        locator (Optional[PackageLocator]): Resolves import package names.

    Returns:
        GenerationResult: Object containing rendered files and exclusions.
    """
    tracer = get_tracer()
    locator = locator or self.locator_for(".")
    instrumented = not self.config.noop

    if instrumented:
      clashes = sorted(RESERVED_EXPORTS & package.top_level_names())
      if clashes:
        raise GenerationError(
          f"package '{package.import_path}' already declares {', '.join(clashes)}, "
          "which the hook runtime needs; use noop mode for this package"
        )

    if instrumented and self.config.sidecar_name in {f.name for f in package.files}:
      raise GenerationError(f"package file '{self.config.sidecar_name}' collides with the sidecar file name")

    assembler = OutputAssembler(
      package,
      self.config,
      ImportResolver(locator),
      reserved=set(SIDECAR_IDENTIFIERS) if instrumented else set(),
    )

    files: List[GeneratedFile] = []
    tracer.start_phase("Rewrite", package.import_path)
    for source in package.files:
      tracer.start_phase(f"File {source.name}")
      proxy = assembler.assemble(source)
      tracer.end_phase()
      if proxy is not None:
        files.append(GeneratedFile(name=proxy.name, code=str(proxy)))
    tracer.end_phase()

    exclusions = assembler.exclusions
    self._report(exclusions)
    if self.config.strict and exclusions:
      names = ", ".join(e.symbol for e in exclusions)
      raise GenerationError(f"strict mode: {len(exclusions)} exported function(s) could not be proxied: {names}")

    if instrumented and files:
      tracer.start_phase("Sidecar", self.config.sidecar_name)
      sidecar = build_sidecar(package.name, package.import_path, self.config.sidecar_name, self.config.tool_identity)
      files.append(GeneratedFile(name=sidecar.name, code=str(sidecar)))
      tracer.end_phase()

    return GenerationResult(
      package=package.name,
      import_path=package.import_path,
      files=files,
      exclusions=[ExcludedSymbol(file=e.file, symbol=e.symbol, reason=e.reason) for e in exclusions],
      trace_events=tracer.export(),
    )

  @staticmethod
  def _report(exclusions: List[Exclusion]) -> None:
    for e in exclusions:
      log_warning(f"{e.file}: skipping [symbol]{e.symbol}[/symbol]: {e.reason}")
