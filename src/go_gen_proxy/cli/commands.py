"""
CLI Command Handlers Facade.

Re-exports handlers from `go_gen_proxy.cli.handlers` so the dispatcher and
tests have a single import point.
"""

from go_gen_proxy.cli.handlers.generate import _print_exclusions, handle_generate

__all__ = ["_print_exclusions", "handle_generate"]
