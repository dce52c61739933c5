"""
Import Resolver.

Builds the per-file import table (alias to import path) the proxy uses to
decide which of the original file's imports survive. An import survives only
if a kept function signature references its alias; every other import would
be unused in the proxy and fail compilation.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from go_gen_proxy.core.golang.nodes import ImportSpec, SourceFile
from go_gen_proxy.core.tracer import get_tracer
from go_gen_proxy.locator import PackageLocator
from go_gen_proxy.utils.console import logger


@dataclass
class ImportTable:
  """
  Imports of one original file, keyed by the name code uses to refer to them.

  Attributes:
      paths (Dict[str, str]): Alias (explicit or resolved package name) to import path.
      declared (Dict[str, Optional[str]]): Alias to the name written in the
          source, or None when the import was unaliased.
  """

  paths: Dict[str, str] = field(default_factory=dict)
  declared: Dict[str, Optional[str]] = field(default_factory=dict)

  def add(self, alias: str, path: str, declared: Optional[str]) -> None:
    self.paths[alias] = path
    self.declared[alias] = declared

  @property
  def aliases(self) -> Set[str]:
    return set(self.paths)

  def __contains__(self, alias: str) -> bool:
    return alias in self.paths


class ImportResolver:
  """
  Resolves import aliases and emits the surviving imports.
  """

  def __init__(self, locator: PackageLocator):
    self.locator = locator

  def build_table(self, source: SourceFile) -> ImportTable:
    """
    Resolves every import of `source`.

    Blank (`_`) and dot (`.`) imports are dropped: the former cannot be
    referenced and bare names from the latter are rejected by the classifier.
    Unaliased imports whose package cannot be located are dropped too; any
    function referring to them has no alias to resolve and keeps nothing.

    Args:
        source (SourceFile): The parsed original file.

    Returns:
        ImportTable: The resolved imports.
    """
    tracer = get_tracer()
    table = ImportTable()
    for spec in source.imports:
      if spec.name in ("_", "."):
        tracer.log_import("dropped", spec.path, spec.name)
        continue
      alias = spec.name or self.locator.package_name(spec.path)
      if alias is None:
        logger.debug(f"{source.name}: cannot resolve package name of '{spec.path}', dropping import")
        tracer.log_import("dropped", spec.path)
        continue
      table.add(alias, spec.path, spec.name)
      tracer.log_import("resolved", spec.path, alias)
    return table

  def emit(self, table: ImportTable, used: Iterable[str]) -> List[ImportSpec]:
    """
    Produces the imports needed by the kept signatures.

    Args:
        table (ImportTable): The file's resolved imports.
        used (Iterable[str]): Aliases referenced by kept signatures.

    Returns:
        List[ImportSpec]: One spec per used alias known to the table, sorted by path.
    """
    tracer = get_tracer()
    specs = []
    for alias in sorted(set(used)):
      if alias not in table:
        continue
      path = table.paths[alias]
      specs.append(ImportSpec(path=path, name=table.declared[alias]))
      tracer.log_import("emitted", path, alias)
    return sorted(specs, key=lambda s: (s.path, s.name or ""))
