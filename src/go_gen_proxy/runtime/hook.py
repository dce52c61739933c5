"""
Hook Runtime Reference Model.

Python model of the state the generated sidecar keeps in every proxy
package: a process-wide call counter and a swappable invocation handler.
The Go sidecar is the authoritative runtime; this model pins down its
contract so it can be exercised without a Go toolchain:

- Every call that arrives with `UNASSIGNED_CALL_ID` receives a fresh id from
  a counter that is incremented atomically, so ids are unique and gap-free
  under any number of concurrent callers.
- The handler may be replaced at any time; each call observes either the old
  or the new handler, never a torn value.
- With no handler installed, the call passes its inputs through unchanged.
"""

import functools
import threading
from typing import Any, Callable, Optional, Tuple

UNASSIGNED_CALL_ID = -1

Handler = Callable[[str, int], Tuple[str, int]]


class HookHandle:
  """
  Shared hook state of one proxy package.
  """

  def __init__(self, handler: Optional[Handler] = None):
    self._lock = threading.Lock()
    self._counter = 0
    self._handler = handler

  @property
  def handler(self) -> Optional[Handler]:
    return self._handler

  @property
  def last_call_id(self) -> int:
    """The most recently assigned id (0 before the first call)."""
    with self._lock:
      return self._counter

  def set_handler(self, handler: Optional[Handler]) -> None:
    """
    Installs `handler` for all subsequent calls; None uninstalls.

    Args:
        handler (Optional[Handler]): Receives `(func_name, call_id)` and
            returns the pair to pass on.
    """
    with self._lock:
      self._handler = handler

  def clear_handler(self) -> None:
    self.set_handler(None)

  def next_call_id(self) -> int:
    with self._lock:
      self._counter += 1
      return self._counter

  def invoke(self, func_name: str, call_id: int = UNASSIGNED_CALL_ID) -> Tuple[str, int]:
    """
    Mirrors the sidecar's `__invokeHandler`.

    Args:
        func_name (str): Name of the proxied function being called.
        call_id (int): Existing id, or `UNASSIGNED_CALL_ID` to draw a new one.

    Returns:
        Tuple[str, int]: The handler's result, or the inputs (with the
        assigned id) when no handler is installed.
    """
    if call_id == UNASSIGNED_CALL_ID:
      call_id = self.next_call_id()
    with self._lock:
      handler = self._handler
    if handler is None:
      return func_name, call_id
    return handler(func_name, call_id)

  def wrap(self, func_name: str, target: Callable[..., Any]) -> Callable[..., Any]:
    """
    Mirrors an instrumented forwarder: invoke the hook once, then forward.

    Args:
        func_name (str): Name reported to the hook.
        target (Callable): The original function.

    Returns:
        Callable: A wrapper with the same call shape as `target`.
    """

    @functools.wraps(target)
    def forwarder(*args: Any, **kwargs: Any) -> Any:
      self.invoke(func_name)
      return target(*args, **kwargs)

    return forwarder
