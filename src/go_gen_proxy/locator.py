"""
Go Package Location.

Maps Go import paths to directories on the build search path and back. The
search order mirrors the go tool: the main module's ``vendor/`` directory,
the main module itself, ``GOROOT/src``, ``GOPATH/src`` and finally the module
cache under ``GOPATH/pkg/mod``.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from go_gen_proxy.config import GeneratorConfig
from go_gen_proxy.core.golang.tokens import GoLexer, TokenType
from go_gen_proxy.errors import GoSyntaxError, ResolutionError
from go_gen_proxy.utils.console import logger

_MODULE_RE = re.compile(r"^\s*module\s+\"?([^\s\"]+)\"?", re.MULTILINE)
_IGNORE_RE = re.compile(r"^//\s*(?:go:build|\+build)\s+ignore\s*$", re.MULTILINE)


@dataclass(frozen=True)
class LocatedPackage:
  """
  A package found on disk.

  Attributes:
      import_path (str): Canonical import path (used in the proxy's import of the original).
      directory (Path): Absolute source directory.
  """

  import_path: str
  directory: Path


def is_go_source(path: Path) -> bool:
  """True for files `go build` compiles into a package (no tests, no `_`/`.` prefixed names)."""
  name = path.name
  return name.endswith(".go") and not name.endswith("_test.go") and not name.startswith(("_", "."))


def has_ignore_constraint(text: str) -> bool:
  """True if the file opts out of every build via a `//go:build ignore` constraint."""
  return bool(_IGNORE_RE.search(text))


def read_package_clause(text: str) -> Optional[str]:
  """
  Extracts the package name from Go source without parsing the rest of the file.

  Args:
      text (str): Go source code.

  Returns:
      Optional[str]: The package name, or None if the clause is missing or malformed.
  """
  expect_name = False
  try:
    for tok in GoLexer().tokenize(text):
      if tok.kind in (TokenType.COMMENT, TokenType.SEMICOLON):
        continue
      if expect_name:
        return tok.value if tok.kind == TokenType.IDENT else None
      if not tok.is_keyword("package"):
        return None
      expect_name = True
  except GoSyntaxError:
    return None
  return None


def find_module_root(start: Path) -> Optional[Path]:
  """Walks up from `start` to the nearest directory containing `go.mod`."""
  current = start.resolve()
  for parent in [current, *current.parents]:
    if (parent / "go.mod").is_file():
      return parent
  return None


def read_module_path(module_root: Path) -> Optional[str]:
  try:
    text = (module_root / "go.mod").read_text(encoding="utf-8")
  except OSError:
    return None
  match = _MODULE_RE.search(text)
  return match.group(1) if match else None


def _escape_module_path(path: str) -> str:
  """Module cache case-encoding: upper-case letters become '!' + lower-case."""
  return "".join(f"!{c.lower()}" if c.isupper() else c for c in path)


class PackageLocator:
  """
  Resolves import paths to package directories and package names.

  Package-name lookups are memoised; the cache is only ever filled during a
  run, so it is safe to share between the files of one package.
  """

  def __init__(self, config: GeneratorConfig, module_root: Optional[Path] = None):
    """
    Args:
        config (GeneratorConfig): Supplies GOROOT, GOPATH and an explicit module root.
        module_root (Optional[Path]): Detected main module directory, used when
            the config does not set one.
    """
    self.config = config
    self.module_root = config.module_root or module_root
    self.module_path = read_module_path(self.module_root) if self.module_root else None
    self._names: Dict[str, Optional[str]] = {}

  def locate(self, target: str) -> LocatedPackage:
    """
    Resolves the user's package argument.

    Args:
        target (str): A directory on disk, or an import path.

    Returns:
        LocatedPackage: Directory and canonical import path.

    Raises:
        ResolutionError: If the package cannot be found, or the import path
            of a directory cannot be derived.
    """
    as_dir = Path(target)
    if as_dir.is_dir():
      directory = as_dir.resolve()
      return LocatedPackage(import_path=self._import_path_for(directory), directory=directory)

    directory = self.find_dir(target)
    if directory is None:
      raise ResolutionError(f"cannot find package '{target}' in any of: {self._describe_roots(target)}")
    return LocatedPackage(import_path=target, directory=directory)

  def find_dir(self, import_path: str) -> Optional[Path]:
    """Returns the first candidate directory holding Go sources, or None."""
    for candidate in self._candidates(import_path):
      if candidate.is_dir() and any(is_go_source(p) for p in candidate.iterdir()):
        return candidate.resolve()
    return None

  def package_name(self, import_path: str) -> Optional[str]:
    """
    Determines the declared package name of an import path.

    Args:
        import_path (str): The unaliased import path from an import spec.

    Returns:
        Optional[str]: Package clause name, or None if the package cannot be resolved.
    """
    if import_path in self._names:
      return self._names[import_path]

    name = None
    directory = self.find_dir(import_path)
    if directory is not None:
      for path in sorted(directory.iterdir()):
        if not is_go_source(path):
          continue
        try:
          text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
          continue
        if has_ignore_constraint(text):
          continue
        name = read_package_clause(text)
        if name:
          break
    logger.debug(f"resolved import [path]{import_path}[/path] -> {name}", extra={"markup": True})
    self._names[import_path] = name
    return name

  def _candidates(self, import_path: str) -> List[Path]:
    candidates: List[Path] = []
    if self.module_root:
      candidates.append(self.module_root / "vendor" / import_path)
      if self.module_path and (import_path == self.module_path or import_path.startswith(self.module_path + "/")):
        rest = import_path[len(self.module_path) :].lstrip("/")
        candidates.append(self.module_root / rest if rest else self.module_root)
    if self.config.goroot:
      candidates.append(self.config.goroot / "src" / import_path)
    for workspace in self.config.gopath:
      candidates.append(workspace / "src" / import_path)
    for workspace in self.config.gopath:
      candidates.extend(self._module_cache_candidates(workspace / "pkg" / "mod", import_path))
    return candidates

  @staticmethod
  def _module_cache_candidates(cache: Path, import_path: str) -> List[Path]:
    """Finds `<module>@<version>/<subdir>` entries for every possible module prefix."""
    if not cache.is_dir():
      return []
    parts = _escape_module_path(import_path).split("/")
    found: List[Path] = []
    for i in range(len(parts), 0, -1):
      parent = cache.joinpath(*parts[: i - 1]) if i > 1 else cache
      if not parent.is_dir():
        continue
      versions = sorted(parent.glob(f"{parts[i - 1]}@*"), reverse=True)
      for version_dir in versions:
        found.append(version_dir.joinpath(*parts[i:]))
    return found

  def _import_path_for(self, directory: Path) -> str:
    module_root = find_module_root(directory)
    if module_root is not None:
      module_path = read_module_path(module_root)
      if module_path:
        rel = directory.relative_to(module_root).as_posix()
        return module_path if rel == "." else f"{module_path}/{rel}"

    roots = [w / "src" for w in self.config.gopath]
    if self.config.goroot:
      roots.append(self.config.goroot / "src")
    for root in roots:
      try:
        rel = directory.relative_to(root.resolve()).as_posix()
      except (ValueError, OSError):
        continue
      if rel != ".":
        return rel

    raise ResolutionError(f"cannot determine the import path of '{directory}': not inside a module or GOPATH")

  def _describe_roots(self, import_path: str) -> str:
    return ", ".join(str(c) for c in self._candidates(import_path)[:6]) or "(no search roots configured)"
