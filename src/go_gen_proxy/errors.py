"""
Error Taxonomy.

All fatal conditions raised by the generator derive from `ProxyGenError` so the
CLI can report them uniformly. Per-symbol exclusions are not errors; they are
recorded on the `GenerationResult` instead.
"""

from typing import Optional


class ProxyGenError(Exception):
  """Base class for every fatal generator failure."""


class ResolutionError(ProxyGenError):
  """Raised when a package path cannot be located on the build search path."""


class GenerationError(ProxyGenError):
  """Raised for structurally unsupported packages (main, mixed packages, reserved names)."""


class OutputError(ProxyGenError):
  """Raised when the output tree cannot be created or written."""


class GoSyntaxError(ProxyGenError, SyntaxError):
  """
  Raised when Go source cannot be tokenized or parsed.

  Attributes:
      filename (Optional[str]): Source file the error belongs to, if known.
      lineno (int): 1-based line of the offending token.
      offset (int): 1-based column of the offending token.
  """

  def __init__(self, message: str, line: int = 0, column: int = 0, filename: Optional[str] = None):
    super().__init__(message)
    self.msg = message
    self.lineno = line
    self.offset = column
    self.filename = filename

  def with_filename(self, filename: str) -> "GoSyntaxError":
    """Returns a copy of the error attributed to `filename`."""
    return GoSyntaxError(self.msg, self.lineno, self.offset, filename)

  def __str__(self) -> str:
    where = f"{self.filename}:" if self.filename else ""
    return f"{where}{self.lineno}:{self.offset}: {self.msg}"
