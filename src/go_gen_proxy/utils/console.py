"""
Central Logging and Console Utilities.

Routes the generator's diagnostics through the standard `logging` library,
rendered by `rich`. The module-level `console` is a proxy whose backend can be
swapped (for example to an in-memory `Console(record=True)` in tests) while
modules keep importing the same object.

Attributes:
    console (_ConsoleProxy): A stable reference to the active Rich Console.
    logger (logging.Logger): The package logger (``go_gen_proxy``).
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

LOGGER_NAME = "go_gen_proxy"
logger = logging.getLogger(LOGGER_NAME)

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "symbol": "bold magenta",
  }
)


class _ConsoleProxy:
  """
  A Proxy wrapper around `rich.console.Console`.

  Printing is forwarded to the backend. Swapping the backend also re-points
  the package logger's `RichHandler`, so `logger.info(...)` follows it.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Resets the proxy to a fresh standard output console."""
    self._backend = Console(theme=_THEME)
    self._configure_logging()

  @property
  def backend(self) -> Console:
    return self._backend

  def _configure_logging(self) -> None:
    for handler in list(logger.handlers):
      if isinstance(handler, RichHandler):
        logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
    if logger.level == logging.NOTSET:
      logger.setLevel(logging.INFO)
    logger.addHandler(rich_handler)

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def export_text(self, **kwargs: Any) -> str:
    """
    Forwards `export_text` (useful for log capturing).

    Args:
        **kwargs: Options passed to console.export_text.

    Returns:
        str: The captured text output.
    """
    return self._backend.export_text(**kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Global helper to inject a specific console instance.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  console.reset()


def get_console() -> Console:
  """Returns the active backend Console."""
  return console.backend


def set_verbose(verbose: bool) -> None:
  """Switches the package logger between DEBUG and INFO."""
  logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg (str): The message content. Can include rich markup like [bold].
  """
  logger.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  logger.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  logger.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  logger.error(f"❌ {msg}", extra={"markup": True})
