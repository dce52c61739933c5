"""
Generate Command Handler.

This module implements the logic for the `go-gen-proxy generate` command.
It orchestrates:
1. Configuration loading (pyproject.toml plus CLI overrides).
2. Package location, parsing and proxy generation via the Engine.
3. Output writing, exclusion reporting and trace logging.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from rich.table import Table

from go_gen_proxy.config import GeneratorConfig
from go_gen_proxy.core.engine import ExcludedSymbol, ProxyEngine
from go_gen_proxy.core.tracer import get_tracer
from go_gen_proxy.core.writer import write_result
from go_gen_proxy.errors import ProxyGenError
from go_gen_proxy.utils.console import console, log_error, log_info, log_success, set_verbose


def handle_generate(
  package: str,
  out_dir: Path,
  noop: Optional[bool],
  strict: Optional[bool],
  settings: Dict[str, Any],
  json_trace_path: Optional[Path] = None,
  verbose: bool = False,
) -> int:
  """
  Handles the 'generate' command execution.

  Args:
      package: Package directory or import path of the original package.
      out_dir: Directory where the proxy files are written.
      noop: Override for noop mode (plain aliases, no sidecar).
      strict: If True, any excluded exported function fails the run.
      settings: Additional `key=value` configuration overrides.
      json_trace_path: Optional path to dump execution trace JSON.
      verbose: Enable debug logging.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  set_verbose(verbose)
  package_dir = Path(package)

  try:
    config = GeneratorConfig.load(
      noop=noop,
      strict=strict,
      overrides=settings,
      search_path=package_dir if package_dir.is_dir() else None,
    )
  except ValidationError as e:
    log_error(f"Invalid configuration: {e}")
    return 1

  mode = "noop" if config.noop else "instrumented"
  log_info(f"Generating {mode} proxy for [path]{package}[/path]")

  try:
    result = ProxyEngine(config=config).generate(package)
    written = write_result(result, out_dir)
  except ProxyGenError as e:
    log_error(str(e))
    if json_trace_path:
      _write_trace(get_tracer().export(), json_trace_path)
    return 1

  if json_trace_path:
    _write_trace(result.trace_events, json_trace_path)

  if result.has_exclusions:
    _print_exclusions(result.exclusions)

  if not written:
    log_info(f"Package '{result.import_path}' exports nothing to proxy; no files written.")
    return 0

  log_success(f"Wrote {len(written)} file(s) for [path]{result.import_path}[/path] to [path]{out_dir}[/path]")
  return 0


def _write_trace(events: List[Dict[str, Any]], json_trace_path: Path) -> None:
  try:
    json_trace_path.parent.mkdir(parents=True, exist_ok=True)
    with open(json_trace_path, "wt", encoding="utf-8") as f:
      json.dump(events, f, indent=2)
    log_info(f"Trace saved to [path]{json_trace_path}[/path]")
  except OSError as e:
    log_error(f"Failed to write trace: {e}")


def _print_exclusions(exclusions: List[ExcludedSymbol]) -> None:
  """
  Renders a table of the exported functions left out of the proxy.

  Args:
      exclusions: Excluded symbols with their reasons.
  """
  table = Table(title="Excluded Symbols")
  table.add_column("File", style="cyan")
  table.add_column("Symbol", style="magenta")
  table.add_column("Reason", style="yellow")

  for e in exclusions:
    table.add_row(e.file, e.symbol, e.reason)

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {len(exclusions)} exported function(s) not proxied.")
