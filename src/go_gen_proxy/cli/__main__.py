"""
Main Entry Point for the go-gen-proxy CLI.

This module handles argument parsing and dispatches to the command handlers
defined in `go_gen_proxy.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from go_gen_proxy import __version__
from go_gen_proxy.cli import commands
from go_gen_proxy.config import parse_cli_key_values


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="go-gen-proxy: Go proxy package generator")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: GENERATE ---
  cmd_gen = subparsers.add_parser("generate", help="Generate a proxy package for a Go package")
  cmd_gen.add_argument("package", help="Package directory or import path")
  cmd_gen.add_argument("out_dir", type=Path, help="Directory receiving the proxy files")
  cmd_gen.add_argument(
    "mode",
    nargs="?",
    choices=["noop"],
    default=None,
    help="Pass 'noop' to emit plain aliases without instrumentation",
  )
  cmd_gen.add_argument("--noop", action="store_true", default=None, help="Same as the 'noop' positional")
  cmd_gen.add_argument(
    "--strict",
    action="store_true",
    default=None,
    help="Fail if any exported function has to be excluded (Overrides config)",
  )
  cmd_gen.add_argument(
    "--json-trace", type=Path, default=None, help="Dump the generation trace (phases, symbol decisions) to a JSON file."
  )
  cmd_gen.add_argument(
    "--config",
    nargs="*",
    help="Configuration overrides in key=value format (e.g. alias_prefix=__ goroot=/usr/local/go)",
  )
  cmd_gen.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

  args = parser.parse_args(argv)

  if args.command == "generate":
    noop = True if (args.noop or args.mode == "noop") else None
    settings = parse_cli_key_values(args.config)
    return commands.handle_generate(
      args.package, args.out_dir, noop, args.strict, settings, args.json_trace, args.verbose
    )

  return 0


if __name__ == "__main__":
  sys.exit(main())
