"""
Go AST Nodes.

Defines the data structures for the subset of the Go syntax tree the proxy
generator works on: top-level declarations, full type expressions (so
signatures can be copied verbatim), and the handful of expressions and
statements that generated code needs.

Each node implements `__str__` to emit valid, gofmt-style Go source.
Declarations and types are closed variants: consumers dispatch on the
concrete class (see `TypeExpr` and `Decl` unions at the bottom).
"""

import abc
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union


class GoNode(abc.ABC):
  """Abstract base class for all Go AST nodes."""

  @abc.abstractmethod
  def __str__(self) -> str:
    """Returns the Go source representation of the node."""
    pass


def is_exported(name: str) -> bool:
  """Go visibility rule: an identifier is exported if it starts with an upper-case letter."""
  return bool(name) and name[0].isupper()


# --- Comments ---


@dataclass
class CommentGroup(GoNode):
  """
  A run of adjacent comments (no blank line in between).

  Attributes:
      comments (List[str]): Raw comment texts, including the `//` or `/*` markers.
  """

  comments: List[str] = field(default_factory=list)

  def __str__(self) -> str:
    return "\n".join(self.comments)


# --- Type Expressions ---


@dataclass
class Ident(GoNode):
  """A bare identifier used as a type (e.g. `int`, `Config`, `T`)."""

  name: str

  @property
  def exported(self) -> bool:
    return is_exported(self.name)

  def __str__(self) -> str:
    return self.name


@dataclass
class Qualified(GoNode):
  """A package-qualified reference (e.g. `io.Reader`)."""

  package: str
  name: str

  def __str__(self) -> str:
    return f"{self.package}.{self.name}"


@dataclass
class Generic(GoNode):
  """An instantiated generic type (e.g. `List[int]`, `maps.Map[K, V]`)."""

  base: "TypeExpr"
  args: List["TypeExpr"] = field(default_factory=list)

  def __str__(self) -> str:
    return f"{self.base}[{', '.join(str(a) for a in self.args)}]"


@dataclass
class Ellipsis(GoNode):
  """The variadic marker on a final parameter (e.g. `...string`)."""

  elem: "TypeExpr"

  def __str__(self) -> str:
    return f"...{self.elem}"


@dataclass
class Pointer(GoNode):
  elem: "TypeExpr"

  def __str__(self) -> str:
    return f"*{self.elem}"


@dataclass
class LengthRef(GoNode):
  """A name used inside an array length; it denotes a constant, not a type."""

  ref: Union[Ident, Qualified]

  def __str__(self) -> str:
    return str(self.ref)


@dataclass
class ArrayType(GoNode):
  """
  A slice (`length` is None) or fixed-size array.

  Attributes:
      elem (TypeExpr): Element type.
      length (Optional[str]): Raw length expression text.
      length_refs (List[LengthRef]): Names and `pkg.Name` selectors found in `length`.
  """

  elem: "TypeExpr"
  length: Optional[str] = None
  length_refs: List[LengthRef] = field(default_factory=list, compare=False, repr=False)

  def __str__(self) -> str:
    return f"[{self.length or ''}]{self.elem}"


@dataclass
class MapType(GoNode):
  key: "TypeExpr"
  value: "TypeExpr"

  def __str__(self) -> str:
    return f"map[{self.key}]{self.value}"


@dataclass
class ChanType(GoNode):
  """
  A channel type.

  Attributes:
      elem (TypeExpr): Element type.
      direction (str): One of "both", "send" (`chan<-`) or "recv" (`<-chan`).
  """

  elem: "TypeExpr"
  direction: str = "both"

  def __str__(self) -> str:
    if self.direction == "send":
      return f"chan<- {self.elem}"
    if self.direction == "recv":
      return f"<-chan {self.elem}"
    return f"chan {self.elem}"


@dataclass
class ParenType(GoNode):
  elem: "TypeExpr"

  def __str__(self) -> str:
    return f"({self.elem})"


@dataclass
class Tilde(GoNode):
  """An underlying-type constraint term (e.g. `~int`)."""

  elem: "TypeExpr"

  def __str__(self) -> str:
    return f"~{self.elem}"


@dataclass
class TypeUnion(GoNode):
  """A constraint union (e.g. `~int | ~string`)."""

  terms: List["TypeExpr"] = field(default_factory=list)

  def __str__(self) -> str:
    return " | ".join(str(t) for t in self.terms)


@dataclass
class Field(GoNode):
  """
  A parameter, result, struct field or type parameter.

  Attributes:
      names (List[str]): Declared names; empty for unnamed parameters and embedded fields.
      type (TypeExpr): The field type (or constraint for type parameters).
      tag (Optional[str]): Raw struct tag literal.
  """

  names: List[str]
  type: "TypeExpr"
  tag: Optional[str] = None

  def __str__(self) -> str:
    out = f"{', '.join(self.names)} {self.type}" if self.names else str(self.type)
    if self.tag:
      out += f" {self.tag}"
    return out


@dataclass
class Signature(GoNode):
  """
  Parameters and results of a function or method.
  """

  params: List[Field] = field(default_factory=list)
  results: List[Field] = field(default_factory=list)

  @property
  def variadic(self) -> bool:
    return bool(self.params) and isinstance(self.params[-1].type, Ellipsis)

  @property
  def has_results(self) -> bool:
    return bool(self.results)

  def param_names(self) -> List[Optional[str]]:
    """Flattened parameter names in declaration order; None for an unnamed parameter."""
    names: List[Optional[str]] = []
    for f in self.params:
      if f.names:
        names.extend(f.names)
      else:
        names.append(None)
    return names

  def __str__(self) -> str:
    params = f"({', '.join(str(p) for p in self.params)})"
    if not self.results:
      return params
    if len(self.results) == 1 and not self.results[0].names:
      return f"{params} {self.results[0]}"
    return f"{params} ({', '.join(str(r) for r in self.results)})"


@dataclass
class FuncType(GoNode):
  signature: Signature

  def __str__(self) -> str:
    return f"func{self.signature}"


@dataclass
class StructType(GoNode):
  fields: List[Field] = field(default_factory=list)

  def __str__(self) -> str:
    if not self.fields:
      return "struct{}"
    return "struct{ " + "; ".join(str(f) for f in self.fields) + " }"


@dataclass
class Method(GoNode):
  """An interface method element."""

  name: str
  signature: Signature

  def __str__(self) -> str:
    return f"{self.name}{self.signature}"


@dataclass
class InterfaceType(GoNode):
  """
  An interface literal.

  Attributes:
      elements (List[Union[Method, TypeExpr]]): Methods and embedded/constraint terms.
  """

  elements: List[Union[Method, "TypeExpr"]] = field(default_factory=list)

  def __str__(self) -> str:
    if not self.elements:
      return "interface{}"
    return "interface{ " + "; ".join(str(e) for e in self.elements) + " }"


TypeExpr = Union[
  Ident,
  Qualified,
  Generic,
  Ellipsis,
  Pointer,
  ArrayType,
  MapType,
  ChanType,
  ParenType,
  Tilde,
  TypeUnion,
  FuncType,
  StructType,
  InterfaceType,
]


def iter_type_nodes(node: GoNode) -> Iterator[GoNode]:
  """
  Walks a type expression depth first, yielding each node before its children.

  `LengthRef`s are leaves: the name they wrap is not yielded again.

  Args:
      node (GoNode): A type expression, `Field`, `Signature` or `Method`.

  Yields:
      GoNode: Every node of the type, `node` itself first.
  """
  yield node
  if isinstance(node, (Ident, Qualified, LengthRef)):
    return
  if isinstance(node, Generic):
    yield from iter_type_nodes(node.base)
    for arg in node.args:
      yield from iter_type_nodes(arg)
  elif isinstance(node, ArrayType):
    yield from node.length_refs
    yield from iter_type_nodes(node.elem)
  elif isinstance(node, (Ellipsis, Pointer, ChanType, ParenType, Tilde)):
    yield from iter_type_nodes(node.elem)
  elif isinstance(node, MapType):
    yield from iter_type_nodes(node.key)
    yield from iter_type_nodes(node.value)
  elif isinstance(node, TypeUnion):
    for term in node.terms:
      yield from iter_type_nodes(term)
  elif isinstance(node, FuncType):
    yield from iter_type_nodes(node.signature)
  elif isinstance(node, Signature):
    for f in node.params + node.results:
      yield from iter_type_nodes(f)
  elif isinstance(node, Field):
    yield from iter_type_nodes(node.type)
  elif isinstance(node, StructType):
    for f in node.fields:
      yield from iter_type_nodes(f)
  elif isinstance(node, InterfaceType):
    for elem in node.elements:
      yield from iter_type_nodes(elem)
  elif isinstance(node, Method):
    yield from iter_type_nodes(node.signature)
  else:
    raise TypeError(f"Not a type expression: {type(node).__name__}")


def iter_type_refs(node: GoNode) -> Iterator[Union[Ident, Qualified, LengthRef]]:
  """
  Yields every name referenced inside a type expression.

  Struct field names and interface method names are not references and are
  not yielded; their types are. Names inside array lengths come wrapped in
  `LengthRef`.

  Args:
      node (GoNode): A type expression, `Field`, `Signature` or `Method`.

  Yields:
      Union[Ident, Qualified, LengthRef]: Referenced names, depth first.
  """
  for sub in iter_type_nodes(node):
    if isinstance(sub, (Ident, Qualified, LengthRef)):
      yield sub


# --- Expressions & Statements (generated code only) ---


@dataclass
class RawExpr(GoNode):
  """Verbatim source text of an expression the generator does not inspect."""

  text: str

  def __str__(self) -> str:
    return self.text


@dataclass
class BasicLit(GoNode):
  """A literal, already in Go syntax (e.g. `"Name"`, `-1`)."""

  value: str

  @classmethod
  def string(cls, text: str) -> "BasicLit":
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return cls(f'"{escaped}"')

  def __str__(self) -> str:
    return self.value


@dataclass
class SelectorExpr(GoNode):
  """`x.sel`, used for references into the original package."""

  x: str
  sel: str

  def __str__(self) -> str:
    return f"{self.x}.{self.sel}"


@dataclass
class CallExpr(GoNode):
  """
  A call expression.

  Attributes:
      fun (GoNode): Callee expression.
      args (List[GoNode]): Arguments.
      type_args (List[TypeExpr]): Explicit instantiation (`F[T](...)`).
      ellipsis (bool): If True, the last argument is expanded with `...`.
  """

  fun: GoNode
  args: List[GoNode] = field(default_factory=list)
  type_args: List[GoNode] = field(default_factory=list)
  ellipsis: bool = False

  def __str__(self) -> str:
    fun = str(self.fun)
    if self.type_args:
      fun += f"[{', '.join(str(t) for t in self.type_args)}]"
    args = ", ".join(str(a) for a in self.args)
    if self.ellipsis:
      args += "..."
    return f"{fun}({args})"


@dataclass
class ExprStmt(GoNode):
  expr: GoNode

  def __str__(self) -> str:
    return str(self.expr)


@dataclass
class ReturnStmt(GoNode):
  results: List[GoNode] = field(default_factory=list)

  def __str__(self) -> str:
    if not self.results:
      return "return"
    return "return " + ", ".join(str(r) for r in self.results)


@dataclass
class Block(GoNode):
  """
  A function body.

  Attributes:
      statements (List[GoNode]): Generated statements.
      raw (Optional[str]): Verbatim body text (including braces) of a parsed function.
  """

  statements: List[GoNode] = field(default_factory=list)
  raw: Optional[str] = None

  def __str__(self) -> str:
    if self.raw is not None:
      return self.raw
    if not self.statements:
      return "{\n}"
    inner = "\n".join(f"\t{s}" for s in self.statements)
    return "{\n" + inner + "\n}"


# --- Declarations ---


def _with_doc(doc: Optional[CommentGroup], text: str, indent: str = "") -> str:
  if doc is None or not doc.comments:
    return text
  lines = [f"{indent}{c}" for c in str(doc).split("\n")]
  return "\n".join(lines) + "\n" + text


@dataclass
class ImportSpec(GoNode):
  """
  A single import.

  Attributes:
      path (str): Unquoted import path.
      name (Optional[str]): Explicit alias (including `_` and `.`), or None.
  """

  path: str
  name: Optional[str] = None
  doc: Optional[CommentGroup] = None

  def __str__(self) -> str:
    quoted = f'"{self.path}"'
    return f"{self.name} {quoted}" if self.name else quoted


@dataclass
class ImportGroup(GoNode):
  specs: List[ImportSpec] = field(default_factory=list)
  doc: Optional[CommentGroup] = None

  def __str__(self) -> str:
    if len(self.specs) == 1:
      return _with_doc(self.doc, f"import {self.specs[0]}")
    body = "\n".join(_with_doc(s.doc, f"\t{s}", "\t") for s in self.specs)
    return _with_doc(self.doc, f"import (\n{body}\n)")


@dataclass
class ValueSpec(GoNode):
  """
  One line of a `var` or `const` declaration.

  Attributes:
      names (List[str]): Declared names.
      type (Optional[TypeExpr]): Explicit type, if any.
      values (List[GoNode]): Initializer expressions (may be empty).
  """

  names: List[str]
  type: Optional[GoNode] = None
  values: List[GoNode] = field(default_factory=list)
  doc: Optional[CommentGroup] = None

  def __str__(self) -> str:
    out = ", ".join(self.names)
    if self.type is not None:
      out += f" {self.type}"
    if self.values:
      out += " = " + ", ".join(str(v) for v in self.values)
    return out


@dataclass
class ValueGroup(GoNode):
  """
  A `var` or `const` declaration, grouped or not.

  Attributes:
      keyword (str): "var" or "const".
      specs (List[ValueSpec]): Declared specs in source order.
      grouped (bool): Whether the source used a parenthesized group.
  """

  keyword: str
  specs: List[ValueSpec] = field(default_factory=list)
  doc: Optional[CommentGroup] = None
  grouped: bool = False

  def __str__(self) -> str:
    if len(self.specs) == 1 and not self.grouped:
      return _with_doc(self.doc, f"{self.keyword} {self.specs[0]}")
    body = "\n".join(_with_doc(s.doc, f"\t{s}", "\t") for s in self.specs)
    return _with_doc(self.doc, f"{self.keyword} (\n{body}\n)")


@dataclass
class TypeSpec(GoNode):
  """
  One type declaration.

  Attributes:
      name (str): Declared type name.
      type (TypeExpr): Definition (or aliased type when `assign` is True).
      type_params (List[Field]): Generic parameters.
      assign (bool): True for alias declarations (`type A = B`).
  """

  name: str
  type: GoNode
  type_params: List[Field] = field(default_factory=list)
  assign: bool = False
  doc: Optional[CommentGroup] = None

  def __str__(self) -> str:
    params = f"[{', '.join(str(p) for p in self.type_params)}]" if self.type_params else ""
    eq = " =" if self.assign else ""
    return f"{self.name}{params}{eq} {self.type}"


@dataclass
class TypeGroup(GoNode):
  specs: List[TypeSpec] = field(default_factory=list)
  doc: Optional[CommentGroup] = None
  grouped: bool = False

  def __str__(self) -> str:
    if len(self.specs) == 1 and not self.grouped:
      return _with_doc(self.doc, f"type {self.specs[0]}")
    body = "\n".join(_with_doc(s.doc, f"\t{s}", "\t") for s in self.specs)
    return _with_doc(self.doc, f"type (\n{body}\n)")


@dataclass
class FuncDecl(GoNode):
  """
  A function or method declaration.

  Attributes:
      name (str): Function name.
      signature (Signature): Parameters and results.
      receiver (Optional[Field]): Method receiver; None for plain functions.
      type_params (List[Field]): Generic parameters.
      body (Optional[Block]): Body; None for externally implemented functions.
  """

  name: str
  signature: Signature
  receiver: Optional[Field] = None
  type_params: List[Field] = field(default_factory=list)
  body: Optional[Block] = None
  doc: Optional[CommentGroup] = None

  @property
  def exported(self) -> bool:
    return is_exported(self.name)

  def type_param_names(self) -> List[str]:
    return [n for p in self.type_params for n in p.names]

  def __str__(self) -> str:
    recv = f"({self.receiver}) " if self.receiver else ""
    params = f"[{', '.join(str(p) for p in self.type_params)}]" if self.type_params else ""
    head = f"func {recv}{self.name}{params}{self.signature}"
    if self.body is not None:
      head += f" {self.body}"
    return _with_doc(self.doc, head)


Decl = Union[ImportGroup, ValueGroup, TypeGroup, FuncDecl]


@dataclass
class SourceFile(GoNode):
  """
  A parsed or generated Go file.

  Attributes:
      name (str): Base file name (e.g. "client.go").
      package (str): Package clause name.
      header (List[CommentGroup]): Comments preceding the package clause.
      decls (List[Decl]): Top-level declarations in order.
  """

  name: str
  package: str
  header: List[CommentGroup] = field(default_factory=list)
  decls: List[GoNode] = field(default_factory=list)

  @property
  def imports(self) -> List[ImportSpec]:
    return [s for d in self.decls if isinstance(d, ImportGroup) for s in d.specs]

  def __str__(self) -> str:
    parts = [str(g) for g in self.header if g.comments]
    parts.append(f"package {self.package}")
    parts.extend(str(d) for d in self.decls)
    return "\n\n".join(parts) + "\n"
