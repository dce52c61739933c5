"""
Function Proxy Synthesizer.

Instrumented mode replaces each kept function body with a call to the hook
helper followed by a forwarding call into the original package::

    func Get(url string, opts ...Option) (*Response, error) {
        __invokeHandler("Get", -1)
        return __http.Get(url, opts...)
    }

Noop mode binds the name instead: ``var Get = __http.Get``.
"""

import copy

from go_gen_proxy.core.golang.nodes import (
  BasicLit,
  Block,
  CallExpr,
  ExprStmt,
  FuncDecl,
  Ident,
  RawExpr,
  ReturnStmt,
  SelectorExpr,
  ValueGroup,
  ValueSpec,
)
from go_gen_proxy.core.tracer import get_tracer
from go_gen_proxy.runtime.hook import UNASSIGNED_CALL_ID

HOOK_HELPER = "__invokeHandler"


class FunctionProxySynthesizer:
  """
  Builds proxy declarations for kept functions.
  """

  def __init__(self, org_ref: str, hook_helper: str = HOOK_HELPER):
    """
    Args:
        org_ref (str): Import alias of the original package.
        hook_helper (str): Name of the sidecar function invoked before forwarding.
    """
    self.org_ref = org_ref
    self.hook_helper = hook_helper

  def synthesize(self, fn: FuncDecl) -> FuncDecl:
    """
    Creates the instrumented forwarder for `fn`.

    The signature and type parameters are copied unchanged, so variadic and
    generic functions keep their exact shape. Parameter names must all be
    usable identifiers (guaranteed by the classifier).

    Args:
        fn (FuncDecl): The original exported function.

    Returns:
        FuncDecl: A new declaration with a generated body.
    """
    hook_call = CallExpr(
      fun=RawExpr(self.hook_helper),
      args=[BasicLit.string(fn.name), BasicLit(str(UNASSIGNED_CALL_ID))],
    )
    forward = CallExpr(
      fun=SelectorExpr(self.org_ref, fn.name),
      args=[RawExpr(name) for name in fn.signature.param_names()],
      type_args=[Ident(name) for name in fn.type_param_names()],
      ellipsis=fn.signature.variadic,
    )
    last = ReturnStmt([forward]) if fn.signature.has_results else ExprStmt(forward)

    get_tracer().log_kept(fn.name, "forwarder")
    return FuncDecl(
      name=fn.name,
      signature=copy.deepcopy(fn.signature),
      type_params=copy.deepcopy(fn.type_params),
      body=Block(statements=[ExprStmt(hook_call), last]),
      doc=copy.deepcopy(fn.doc),
    )

  def bind_alias(self, fn: FuncDecl) -> ValueGroup:
    """
    Creates the noop binding `var F = __pkg.F`.

    Args:
        fn (FuncDecl): A non-generic exported function.

    Returns:
        ValueGroup: Single-spec var declaration.
    """
    get_tracer().log_kept(fn.name, "alias")
    spec = ValueSpec(names=[fn.name], values=[SelectorExpr(self.org_ref, fn.name)])
    return ValueGroup(keyword="var", specs=[spec], doc=copy.deepcopy(fn.doc))
