"""
Runtime Subpackage.

Reference model of the hook runtime that instrumented proxies carry.
"""

from go_gen_proxy.runtime.hook import UNASSIGNED_CALL_ID, Handler, HookHandle

__all__ = ["UNASSIGNED_CALL_ID", "Handler", "HookHandle"]
