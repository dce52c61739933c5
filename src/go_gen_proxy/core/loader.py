"""
Package Loading.

Reads and parses the non-test Go files of one package directory into a
`PackageSource`. Every file is parsed before any output is produced, so a
syntax error anywhere aborts the run before the first write.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Set

from go_gen_proxy.core.golang.nodes import FuncDecl, SourceFile, TypeGroup, ValueGroup
from go_gen_proxy.core.golang.parser import GoParser
from go_gen_proxy.errors import GenerationError, GoSyntaxError, OutputError
from go_gen_proxy.locator import LocatedPackage, has_ignore_constraint, is_go_source
from go_gen_proxy.utils.console import logger


@dataclass
class PackageSource:
  """
  A parsed Go package.

  Attributes:
      name (str): Package clause name shared by all files.
      import_path (str): Canonical import path of the package.
      files (List[SourceFile]): Parsed non-test files, sorted by file name.
  """

  name: str
  import_path: str
  files: List[SourceFile] = field(default_factory=list)

  def local_type_names(self) -> Set[str]:
    """Names of every top-level type declared anywhere in the package."""
    return {spec.name for f in self.files for d in f.decls if isinstance(d, TypeGroup) for spec in d.specs}

  def local_value_names(self) -> Set[str]:
    return {n for f in self.files for d in f.decls if isinstance(d, ValueGroup) for spec in d.specs for n in spec.names}

  def top_level_names(self) -> Set[str]:
    """Every identifier declared in package scope (values, types and plain functions)."""
    names: Set[str] = set()
    for f in self.files:
      for d in f.decls:
        if isinstance(d, ValueGroup):
          names.update(n for spec in d.specs for n in spec.names)
        elif isinstance(d, TypeGroup):
          names.update(spec.name for spec in d.specs)
        elif isinstance(d, FuncDecl) and d.receiver is None:
          names.add(d.name)
    names.discard("_")
    return names


def _read_source(path: Path) -> str:
  """
  Reads a Go file, which must be UTF-8 encoded.

  Raises:
      OutputError: If the file cannot be read.
      GoSyntaxError: If the file is not valid UTF-8, positioned at the first bad byte.
  """
  try:
    raw = path.read_bytes()
  except OSError as e:
    raise OutputError(f"cannot read {path}: {e}") from e
  try:
    return raw.decode("utf-8")
  except UnicodeDecodeError as e:
    line = raw.count(b"\n", 0, e.start) + 1
    column = e.start - raw.rfind(b"\n", 0, e.start)
    raise GoSyntaxError("invalid UTF-8 encoding", line, column, filename=path.name) from e


def load_package(located: LocatedPackage) -> PackageSource:
  """
  Parses the package found at `located`.

  Args:
      located (LocatedPackage): Directory and import path of the package.

  Returns:
      PackageSource: The parsed package.

  Raises:
      GoSyntaxError: If any file is malformed or not valid UTF-8.
      GenerationError: If the directory holds no package, several packages,
          or a `main` package (which cannot be imported by a proxy).
      OutputError: If a source file cannot be read.
  """
  by_package: Dict[str, List[SourceFile]] = {}
  for path in sorted(located.directory.iterdir()):
    if not path.is_file() or not is_go_source(path):
      continue
    text = _read_source(path)
    if has_ignore_constraint(text):
      logger.debug(f"skipping {path.name}: build constraint 'ignore'")
      continue
    parsed = GoParser(text, filename=path.name).parse()
    if parsed.package.endswith("_test"):
      continue
    by_package.setdefault(parsed.package, []).append(parsed)

  if not by_package:
    raise GenerationError(f"no buildable Go source files in {located.directory}")
  if len(by_package) > 1:
    names = ", ".join(sorted(by_package))
    raise GenerationError(f"found multiple packages ({names}) in {located.directory}")

  name, files = next(iter(by_package.items()))
  if name == "main":
    raise GenerationError(f"'{located.import_path}' is a main package and cannot be imported by a proxy")
  return PackageSource(name=name, import_path=located.import_path, files=files)
