"""
Declaration Rewriter.

Turns kept `var`, `const` and `type` declarations into references to the
original package:

- ``var X T = expr`` becomes ``var X = __pkg.X`` (type and initializer dropped).
- ``const C = iota`` becomes ``const C = __pkg.C``.
- ``type T struct{...}`` becomes ``type T = __pkg.T``, a true alias, so methods
  and identity are shared with the original type.

The rewriter never mutates the parsed tree; every output node is fresh.
"""

import copy
from typing import List

from go_gen_proxy.core.golang.nodes import (
  Generic,
  Ident,
  Qualified,
  SelectorExpr,
  TypeExpr,
  TypeGroup,
  TypeSpec,
  ValueGroup,
  ValueSpec,
)
from go_gen_proxy.core.proxy.classifier import KeptTypes, KeptValues
from go_gen_proxy.core.tracer import get_tracer


class DeclarationRewriter:
  """
  Rewrites value and type declarations to point at `org_ref`.

  Attributes:
      org_ref (str): Import alias of the original package in the proxy file.
  """

  def __init__(self, org_ref: str):
    self.org_ref = org_ref

  def rewrite_values(self, kept: KeptValues) -> ValueGroup:
    """
    Args:
        kept (KeptValues): Exported members of a `var`/`const` group.

    Returns:
        ValueGroup: A group of the same keyword binding each name to the original.
    """
    tracer = get_tracer()
    specs: List[ValueSpec] = []
    for spec, names in kept.members:
      specs.append(
        ValueSpec(
          names=list(names),
          values=[SelectorExpr(self.org_ref, n) for n in names],
          doc=copy.deepcopy(spec.doc),
        )
      )
      for n in names:
        tracer.log_kept(n, kept.source.keyword)

    source = kept.source
    return ValueGroup(
      keyword=source.keyword,
      specs=specs,
      doc=copy.deepcopy(source.doc),
      grouped=source.grouped,
    )

  def rewrite_types(self, kept: KeptTypes) -> TypeGroup:
    """
    Args:
        kept (KeptTypes): Exported members of a `type` group.

    Returns:
        TypeGroup: Alias declarations, generic ones keeping their parameter list.
    """
    tracer = get_tracer()
    specs = []
    for spec in kept.specs:
      specs.append(
        TypeSpec(
          name=spec.name,
          type=self.alias_target(spec),
          type_params=copy.deepcopy(spec.type_params),
          assign=True,
          doc=copy.deepcopy(spec.doc),
        )
      )
      tracer.log_kept(spec.name, "type")

    source = kept.source
    return TypeGroup(specs=specs, doc=copy.deepcopy(source.doc), grouped=source.grouped)

  def alias_target(self, spec: TypeSpec) -> TypeExpr:
    """`__pkg.T`, instantiated with the spec's own parameters when generic."""
    target = Qualified(self.org_ref, spec.name)
    params = [n for f in spec.type_params for n in f.names]
    if not params:
      return target
    return Generic(base=target, args=[Ident(p) for p in params])
