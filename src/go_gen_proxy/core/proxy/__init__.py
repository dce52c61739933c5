"""
Proxy Transformation Subpackage.

Turns a parsed original file into its proxy:

- ``classifier``: which declarations are part of the public surface.
- ``imports``: per-file import table and surviving imports.
- ``declarations``: `var`/`const`/`type` rewrites into aliases.
- ``functions``: instrumented forwarders and noop bindings.
- ``assembler``: puts a proxy file together.
- ``sidecar``: the hook runtime file of instrumented proxies.
"""
