from .generate import handle_generate, _print_exclusions, _write_trace

__all__ = [
  "_print_exclusions",
  "_write_trace",
  "handle_generate",
]
