"""
Symbol Classifier.

Decides, per top-level declaration, what part of it belongs to the public
surface of the proxy:

- ``var``/``const`` groups keep only their exported members.
- ``type`` groups keep only exported type names.
- Exported top-level functions are kept unless their signature cannot be
  reproduced in another package (see `SymbolClassifier.classify`).

Rejections of exported functions are recorded as `Exclusion`s so callers can
report them; unexported symbols and methods are dropped silently because
they were never part of the public surface (methods travel with their
receiver type through the type alias).
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple, Union

from go_gen_proxy.core.golang.nodes import (
  FuncDecl,
  GoNode,
  Ident,
  ImportGroup,
  InterfaceType,
  LengthRef,
  Method,
  Qualified,
  StructType,
  TypeGroup,
  TypeSpec,
  ValueGroup,
  ValueSpec,
  is_exported,
  iter_type_nodes,
)
from go_gen_proxy.core.tracer import get_tracer

# Predeclared Go identifiers that may appear in type position.
PREDECLARED_TYPES = frozenset(
  {
    "any",
    "bool",
    "byte",
    "comparable",
    "complex64",
    "complex128",
    "error",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "rune",
    "string",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
  }
)

# Predeclared names usable in a constant array length besides type conversions.
PREDECLARED_CONSTANTS = frozenset({"cap", "complex", "false", "imag", "len", "max", "min", "real", "true"})


@dataclass(frozen=True)
class Exclusion:
  """An exported symbol left out of the proxy, and why."""

  file: str
  symbol: str
  reason: str


class Skip:
  """Marker verdict: nothing in the declaration is forwarded."""

  def __repr__(self) -> str:
    return "SKIP"


SKIP = Skip()


@dataclass
class KeptValues:
  """
  Exported members of a `var` or `const` group.

  Attributes:
      source (ValueGroup): The original group (read-only).
      members (List[Tuple[ValueSpec, List[str]]]): Each surviving spec with its exported names.
  """

  source: ValueGroup
  members: List[Tuple[ValueSpec, List[str]]] = field(default_factory=list)


@dataclass
class KeptTypes:
  source: TypeGroup
  specs: List[TypeSpec] = field(default_factory=list)


@dataclass
class KeptFunction:
  """
  An exported function accepted for proxying.

  Attributes:
      decl (FuncDecl): The original declaration (read-only).
      qualifiers (Set[str]): Import aliases its signature references.
  """

  decl: FuncDecl
  qualifiers: Set[str] = field(default_factory=set)


Verdict = Union[Skip, KeptValues, KeptTypes, KeptFunction]


class SymbolClassifier:
  """
  Classifies the declarations of one file.

  Attributes:
      exclusions (List[Exclusion]): Exported symbols rejected so far.
  """

  def __init__(
    self,
    file_name: str,
    local_types: Set[str],
    instrumented: bool = True,
    reserved_params: Optional[Set[str]] = None,
    local_values: Optional[Set[str]] = None,
  ):
    """
    Args:
        file_name (str): Name of the file being classified, for exclusion reports.
        local_types (Set[str]): Every type name declared at package level.
        instrumented (bool): False in noop mode, where functions become plain
            aliases and their signatures are never copied.
        reserved_params (Set[str]): Identifiers a parameter must not shadow
            (the hook helper called from generated bodies).
        local_values (Set[str]): Every var/const name declared at package
            level, checked where array lengths refer to constants.
    """
    self.file_name = file_name
    self.local_types = local_types
    self.instrumented = instrumented
    self.reserved_params = reserved_params or set()
    self.local_values = local_values or set()
    self.exclusions: List[Exclusion] = []

  def classify(self, decl: GoNode) -> Verdict:
    """
    Returns the part of `decl` to keep, or `SKIP`.

    Args:
        decl (GoNode): A top-level declaration of the original file.

    Returns:
        Verdict: `KeptValues`, `KeptTypes`, `KeptFunction` or `SKIP`.
    """
    if isinstance(decl, ValueGroup):
      return self._classify_values(decl)
    if isinstance(decl, TypeGroup):
      return self._classify_types(decl)
    if isinstance(decl, FuncDecl):
      return self._classify_function(decl)
    if isinstance(decl, ImportGroup):
      return SKIP
    raise TypeError(f"Unsupported declaration: {type(decl).__name__}")

  def _classify_values(self, group: ValueGroup) -> Verdict:
    members = []
    for spec in group.specs:
      names = [n for n in spec.names if is_exported(n)]
      if names:
        members.append((spec, names))
    if not members:
      return SKIP
    return KeptValues(source=group, members=members)

  def _classify_types(self, group: TypeGroup) -> Verdict:
    specs = [s for s in group.specs if is_exported(s.name)]
    if not specs:
      return SKIP
    return KeptTypes(source=group, specs=specs)

  def _classify_function(self, fn: FuncDecl) -> Verdict:
    if fn.receiver is not None or not fn.exported:
      return SKIP

    if not self.instrumented:
      if fn.type_params:
        return self.exclude(fn.name, "generic functions cannot be bound without instantiation")
      return KeptFunction(decl=fn)

    names = fn.signature.param_names()
    if any(n is None for n in names):
      return self.exclude(fn.name, "unnamed parameter cannot be forwarded")
    if "_" in names:
      return self.exclude(fn.name, "blank parameter '_' cannot be forwarded")
    shadowed = self.reserved_params.intersection(names)
    if shadowed:
      return self.exclude(fn.name, f"parameter shadows generated identifier '{sorted(shadowed)[0]}'")

    qualifiers, reason = self.signature_references(fn)
    if reason:
      return self.exclude(fn.name, reason)
    return KeptFunction(decl=fn, qualifiers=qualifiers)

  def signature_references(self, fn: FuncDecl) -> Tuple[Set[str], Optional[str]]:
    """
    Walks every type in the signature and type-parameter constraints.

    Names inside array lengths are constants; qualified ones count as import
    references like any other. Anonymous struct and interface types with
    unexported field or method names are only identical to themselves within
    the declaring package, so they cannot be spelled in the proxy.

    Args:
        fn (FuncDecl): The function to inspect.

    Returns:
        Tuple[Set[str], Optional[str]]: Import qualifiers referenced, and the
        rejection reason if some type cannot be referenced from the proxy.
    """
    type_params = set(fn.type_param_names())
    qualifiers: Set[str] = set()
    for node in [*fn.type_params, fn.signature]:
      for sub in iter_type_nodes(node):
        reason = None
        ref = sub.ref if isinstance(sub, LengthRef) else sub
        if isinstance(ref, Qualified):
          qualifiers.add(ref.package)
        elif isinstance(sub, LengthRef):
          reason = self._constant_problem(ref, type_params)
        elif isinstance(sub, Ident):
          reason = self._ident_problem(sub, type_params)
        elif isinstance(sub, StructType):
          reason = self._struct_problem(sub)
        elif isinstance(sub, InterfaceType):
          reason = self._interface_problem(sub)
        if reason:
          return qualifiers, reason
    return qualifiers, None

  def _constant_problem(self, ident: Ident, type_params: Set[str]) -> Optional[str]:
    name = ident.name
    if name in self.local_values:
      return None if ident.exported else f"references unexported constant '{name}'"
    if name in PREDECLARED_CONSTANTS:
      return None
    return self._ident_problem(ident, type_params)

  @staticmethod
  def _struct_problem(struct: StructType) -> Optional[str]:
    for f in struct.fields:
      hidden = [n for n in f.names if not is_exported(n)]
      if hidden:
        return f"references anonymous struct with unexported field '{hidden[0]}'"
    return None

  @staticmethod
  def _interface_problem(iface: InterfaceType) -> Optional[str]:
    for elem in iface.elements:
      if isinstance(elem, Method) and not is_exported(elem.name):
        return f"references interface with unexported method '{elem.name}'"
    return None

  def _ident_problem(self, ident: Ident, type_params: Set[str]) -> Optional[str]:
    name = ident.name
    if name in type_params:
      return None
    if name in self.local_types:
      return None if ident.exported else f"references unexported type '{name}'"
    if name in PREDECLARED_TYPES:
      return None
    return f"references '{name}', which is neither predeclared nor declared in the package"

  def exclude(self, symbol: str, reason: str) -> Skip:
    """Records `symbol` as excluded and returns `SKIP`."""
    self.exclusions.append(Exclusion(file=self.file_name, symbol=symbol, reason=reason))
    get_tracer().log_excluded(symbol, reason)
    return SKIP
