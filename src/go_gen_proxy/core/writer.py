"""
Output Writer.

Materializes a `GenerationResult` in the output directory. Files are written
in result order; a write failure aborts with `OutputError` naming the file.
"""

from pathlib import Path
from typing import List

from go_gen_proxy.core.engine import GenerationResult
from go_gen_proxy.errors import OutputError
from go_gen_proxy.utils.console import logger


def write_result(result: GenerationResult, out_dir: Path) -> List[Path]:
  """
  Writes every generated file into `out_dir`, creating it if needed.

  Args:
      result (GenerationResult): The rendered proxy.
      out_dir (Path): Destination directory.

  Returns:
      List[Path]: Paths written, in order.

  Raises:
      OutputError: If the directory cannot be created or a file cannot be written.
  """
  try:
    out_dir.mkdir(parents=True, exist_ok=True)
  except OSError as e:
    raise OutputError(f"cannot create output directory {out_dir}: {e}") from e

  written = []
  for generated in result.files:
    path = out_dir / generated.name
    try:
      path.write_text(generated.code, encoding="utf-8")
    except OSError as e:
      raise OutputError(f"cannot write {path}: {e}") from e
    logger.debug(f"wrote [path]{path}[/path]")
    written.append(path)
  return written
