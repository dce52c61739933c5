"""
Hook Runtime Sidecar.

Generates the extra file an instrumented proxy package carries. It declares
the public hook API and the helper every forwarder calls:

- ``ProxyInvocationHandler``: the handler function type.
- ``SetProxyInvocationHandler`` / ``GetProxyInvocationHandler``: swap or read
  the handler, stored in an ``atomic.Pointer`` so installation is race free.
- ``__invokeHandler``: assigns a call id from an atomically incremented
  counter when given -1, then delegates to the handler if one is set.

`go_gen_proxy.runtime.hook.HookHandle` models the same contract in Python.
"""

from go_gen_proxy.core.golang.nodes import (
  Block,
  CommentGroup,
  Field,
  FuncDecl,
  FuncType,
  Generic,
  Ident,
  ImportGroup,
  ImportSpec,
  Qualified,
  Signature,
  SourceFile,
  TypeGroup,
  TypeSpec,
  ValueGroup,
  ValueSpec,
)
from go_gen_proxy.core.proxy.assembler import generated_marker
from go_gen_proxy.core.proxy.functions import HOOK_HELPER
from go_gen_proxy.runtime.hook import UNASSIGNED_CALL_ID

HANDLER_TYPE = "ProxyInvocationHandler"
SETTER = "SetProxyInvocationHandler"
GETTER = "GetProxyInvocationHandler"
CALL_COUNTER = "__callId"
HANDLER_SLOT = "__proxyInvocationHandler"

# Exported names the sidecar adds to the proxy package.
RESERVED_EXPORTS = frozenset({HANDLER_TYPE, SETTER, GETTER})
SIDECAR_IDENTIFIERS = RESERVED_EXPORTS | {CALL_COUNTER, HANDLER_SLOT, HOOK_HELPER}


def _handler_signature() -> Signature:
  return Signature(
    params=[Field(["funcName"], Ident("string")), Field(["callId"], Ident("int64"))],
    results=[Field([], Ident("string")), Field([], Ident("int64"))],
  )


def _doc(*lines: str) -> CommentGroup:
  return CommentGroup([f"// {line}" for line in lines])


def _body(*lines: str) -> Block:
  return Block(raw="{\n" + "\n".join(f"\t{line}" if line else "" for line in lines) + "\n}")


def build_sidecar(package_name: str, import_path: str, file_name: str, tool_identity: str) -> SourceFile:
  """
  Builds the sidecar file for an instrumented proxy.

  Args:
      package_name (str): Package clause of the proxy.
      import_path (str): Import path of the proxied package (for the marker).
      file_name (str): Output file name.
      tool_identity (str): Generator name for the marker.

  Returns:
      SourceFile: The sidecar, ready to render.
  """
  handler_type = TypeGroup(
    specs=[TypeSpec(name=HANDLER_TYPE, type=FuncType(_handler_signature()))],
    doc=_doc(
      f"{HANDLER_TYPE} observes every call to a proxied function. It receives the",
      "function name and the call id and returns the pair passed on to later handlers.",
    ),
  )
  counter = ValueGroup(keyword="var", specs=[ValueSpec(names=[CALL_COUNTER], type=Ident("int64"))])
  slot = ValueGroup(
    keyword="var",
    specs=[ValueSpec(names=[HANDLER_SLOT], type=Generic(Qualified("atomic", "Pointer"), [Ident(HANDLER_TYPE)]))],
  )

  setter = FuncDecl(
    name=SETTER,
    signature=Signature(params=[Field(["h"], Ident(HANDLER_TYPE))]),
    body=_body(
      "if h == nil {",
      f"\t{HANDLER_SLOT}.Store(nil)",
      "\treturn",
      "}",
      f"{HANDLER_SLOT}.Store(&h)",
    ),
    doc=_doc(f"{SETTER} installs h for all subsequent proxied calls. A nil h removes the handler."),
  )
  getter = FuncDecl(
    name=GETTER,
    signature=Signature(results=[Field([], Ident(HANDLER_TYPE))]),
    body=_body(
      f"if h := {HANDLER_SLOT}.Load(); h != nil {{",
      "\treturn *h",
      "}",
      "return nil",
    ),
    doc=_doc(f"{GETTER} returns the installed handler, or nil."),
  )
  helper = FuncDecl(
    name=HOOK_HELPER,
    signature=_handler_signature(),
    body=_body(
      f"if callId == {UNASSIGNED_CALL_ID} {{",
      f"\tcallId = atomic.AddInt64(&{CALL_COUNTER}, 1)",
      "}",
      f"h := {HANDLER_SLOT}.Load()",
      "if h == nil {",
      "\treturn funcName, callId",
      "}",
      "return (*h)(funcName, callId)",
    ),
  )

  return SourceFile(
    name=file_name,
    package=package_name,
    header=[generated_marker(tool_identity, import_path)],
    decls=[
      ImportGroup(specs=[ImportSpec(path="sync/atomic")]),
      handler_type,
      counter,
      slot,
      setter,
      getter,
      helper,
    ],
  )
