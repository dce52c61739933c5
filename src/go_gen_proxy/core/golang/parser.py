"""
Go Parser Implementation.

This module provides the `GoParser`, a recursive descent parser that converts
a stream of tokens (from `GoLexer`) into the declaration-level AST defined in
`nodes.py`.

Capabilities:
- Package clause, leading comments (license headers, build constraints).
- Import, var, const and type declarations (single and grouped).
- Function and method declarations with full signatures, including
  generics, variadic parameters and grouped parameter names.
- Complete type expressions (struct/interface literals, channels, maps,
  function types, constraint unions).
- Doc comments attached to declarations and grouped specs.

Function bodies and initializer expressions are not parsed; their source
text is captured verbatim by offset.
"""

from typing import List, Optional, Tuple

from go_gen_proxy.core.golang.nodes import (
  ArrayType,
  Block,
  ChanType,
  CommentGroup,
  Ellipsis,
  Field,
  FuncDecl,
  FuncType,
  GoNode,
  Generic,
  Ident,
  ImportGroup,
  ImportSpec,
  InterfaceType,
  LengthRef,
  MapType,
  Method,
  ParenType,
  Pointer,
  Qualified,
  RawExpr,
  Signature,
  SourceFile,
  StructType,
  Tilde,
  TypeGroup,
  TypeSpec,
  TypeUnion,
  ValueGroup,
  ValueSpec,
)
from go_gen_proxy.core.golang.tokens import GoLexer, Token, TokenType
from go_gen_proxy.errors import GoSyntaxError

_OPENERS = {"(": ")", "[": "]", "{": "}"}


class GoParser:
  """
  Recursive descent parser for Go source files.
  """

  def __init__(self, code: str, filename: str = "<source>"):
    """
    Initialize the parser.

    Args:
        code: The raw Go source string.
        filename: Base name used for the resulting `SourceFile` and in errors.

    Raises:
        GoSyntaxError: If the source cannot be tokenized.
    """
    self.code = code
    self.filename = filename
    try:
      all_tokens = list(GoLexer().tokenize(code))
    except GoSyntaxError as e:
      raise e.with_filename(filename) from None
    self.comments = [t for t in all_tokens if t.kind == TokenType.COMMENT]
    self.tokens = [t for t in all_tokens if t.kind != TokenType.COMMENT]
    self.pos = 0
    self._docs_by_end_line = {}

  def parse(self) -> SourceFile:
    """
    Parses the entire file.

    Returns:
        SourceFile: The file-level tree.

    Raises:
        GoSyntaxError: On malformed input.
    """
    try:
      return self._parse_file()
    except GoSyntaxError as e:
      if e.filename:
        raise
      raise e.with_filename(self.filename) from None

  # --- Token Helpers ---

  def _peek(self, offset: int = 0) -> Optional[Token]:
    """Looks ahead at the pending token."""
    if self.pos + offset < len(self.tokens):
      return self.tokens[self.pos + offset]
    return None

  def _is_eof(self) -> bool:
    return self.pos >= len(self.tokens)

  def _error(self, message: str, token: Optional[Token] = None) -> GoSyntaxError:
    token = token or self._peek()
    if token is None:
      last = self.tokens[-1] if self.tokens else None
      return GoSyntaxError(f"{message} (unexpected end of file)", last.line if last else 0, last.column if last else 0)
    return GoSyntaxError(f"{message}, found '{token.value.strip() or 'newline'}'", token.line, token.column)

  def _consume(self, kind: Optional[TokenType] = None) -> Token:
    """
    Consumes the current token.

    Args:
        kind: If provided, enforces that the current token matches this type.

    Raises:
        GoSyntaxError: If end of file or type mismatch.
    """
    token = self._peek()
    if token is None:
      raise self._error(f"expected {kind.name if kind else 'token'}")
    if kind and token.kind != kind:
      raise self._error(f"expected {kind.name}")
    self.pos += 1
    return token

  def _match_op(self, value: str) -> bool:
    token = self._peek()
    return token is not None and token.is_op(value)

  def _match_kw(self, value: str) -> bool:
    token = self._peek()
    return token is not None and token.is_keyword(value)

  def _match(self, kind: TokenType) -> bool:
    token = self._peek()
    return token is not None and token.kind == kind

  def _expect_op(self, value: str) -> Token:
    token = self._peek()
    if token is None or not token.is_op(value):
      raise self._error(f"expected '{value}'")
    self.pos += 1
    return token

  def _skip_semicolons(self) -> None:
    while self._match(TokenType.SEMICOLON):
      self.pos += 1

  def _expect_terminator(self, closer: Optional[str] = None) -> None:
    """Accepts `;`, or nothing when the next token closes the enclosing group."""
    if self._match(TokenType.SEMICOLON):
      self.pos += 1
      return
    if self._is_eof() or (closer and self._match_op(closer)):
      return
    raise self._error("expected ';' or newline")

  def _matching_index(self, index: int) -> int:
    """Returns the index of the bracket closing the opener at `index`."""
    stack = []
    for i in range(index, len(self.tokens)):
      tok = self.tokens[i]
      if tok.kind != TokenType.OPERATOR:
        continue
      if tok.value in _OPENERS:
        stack.append(_OPENERS[tok.value])
      elif tok.value in (")", "]", "}"):
        if not stack or stack.pop() != tok.value:
          raise self._error("unbalanced brackets", tok)
        if not stack:
          return i
    raise self._error("unclosed bracket", self.tokens[index])

  def _source_between(self, start: Token, end: Token) -> str:
    return self.code[start.offset : end.end_offset]

  # --- Comments ---

  def _comment_groups(self) -> List[List[Token]]:
    """Groups adjacent comments, ignoring trailing comments that follow code on their line."""
    first_code_offset = {}
    for t in self.tokens:
      if t.kind != TokenType.SEMICOLON:
        first_code_offset.setdefault(t.line, t.offset)

    groups: List[List[Token]] = []
    for c in self.comments:
      if first_code_offset.get(c.line, c.offset) < c.offset:
        continue
      if groups and c.line <= groups[-1][-1].end_line + 1:
        groups[-1].append(c)
      else:
        groups.append([c])
    return groups

  def _doc_for(self, token: Token) -> Optional[CommentGroup]:
    """Finds the comment group ending on the line directly above `token`."""
    group = self._docs_by_end_line.get(token.line - 1)
    if group is None:
      return None
    return CommentGroup([c.value for c in group])

  # --- File Structure ---

  def _parse_file(self) -> SourceFile:
    if not self._match_kw("package"):
      raise self._error("expected 'package' clause")
    pkg_tok = self._consume()
    name = self._consume(TokenType.IDENT).value
    self._expect_terminator()

    header = [
      CommentGroup([c.value for c in group])
      for group in self._comment_groups()
      if group[-1].end_line < pkg_tok.line
    ]
    # The package doc comment is part of the header, not of the first decl.
    self.comments = [c for c in self.comments if c.line > pkg_tok.line]
    self._docs_by_end_line = {group[-1].end_line: group for group in self._comment_groups()}

    decls: List[GoNode] = []
    while True:
      self._skip_semicolons()
      if self._is_eof():
        break
      decls.append(self._parse_decl())
    return SourceFile(name=self.filename, package=name, header=header, decls=decls)

  def _parse_decl(self) -> GoNode:
    token = self._peek()
    doc = self._doc_for(token)
    if token.is_keyword("import"):
      self.pos += 1
      specs, _ = self._parse_group(self._parse_import_spec)
      decl = ImportGroup(specs=specs, doc=doc)
    elif token.is_keyword("var") or token.is_keyword("const"):
      self.pos += 1
      specs, grouped = self._parse_group(self._parse_value_spec)
      decl = ValueGroup(keyword=token.value, specs=specs, doc=doc, grouped=grouped)
    elif token.is_keyword("type"):
      self.pos += 1
      specs, grouped = self._parse_group(self._parse_type_spec)
      decl = TypeGroup(specs=specs, doc=doc, grouped=grouped)
    elif token.is_keyword("func"):
      decl = self._parse_func_decl(doc)
    else:
      raise self._error("expected declaration")
    self._expect_terminator()
    return decl

  def _parse_group(self, parse_spec) -> Tuple[list, bool]:
    """Parses either `spec` or `( spec; spec; ... )`."""
    if not self._match_op("("):
      return [parse_spec(None)], False
    self.pos += 1
    specs = []
    while True:
      self._skip_semicolons()
      if self._match_op(")"):
        self.pos += 1
        return specs, True
      doc = self._doc_for(self._peek()) if self._peek() else None
      specs.append(parse_spec(doc))
      self._expect_terminator(closer=")")

  def _parse_import_spec(self, doc: Optional[CommentGroup]) -> ImportSpec:
    name = None
    if self._match(TokenType.IDENT):
      name = self._consume().value
    elif self._match_op("."):
      self.pos += 1
      name = "."
    path_tok = self._consume(TokenType.STRING)
    return ImportSpec(path=path_tok.value[1:-1], name=name, doc=doc)

  def _parse_value_spec(self, doc: Optional[CommentGroup]) -> ValueSpec:
    names = self._parse_ident_list()
    typ = None
    values: List[GoNode] = []
    if not self._match_op("=") and not self._at_spec_end():
      typ = self._parse_type()
    if self._match_op("="):
      self.pos += 1
      values = self._parse_raw_expr_list()
    return ValueSpec(names=names, type=typ, values=values, doc=doc)

  def _parse_type_spec(self, doc: Optional[CommentGroup]) -> TypeSpec:
    name = self._consume(TokenType.IDENT).value
    type_params: List[Field] = []
    if self._match_op("[") and self._looks_like_type_params():
      type_params = self._parse_type_params()
    assign = False
    if self._match_op("="):
      self.pos += 1
      assign = True
    typ = self._parse_type()
    return TypeSpec(name=name, type=typ, type_params=type_params, assign=assign, doc=doc)

  def _parse_func_decl(self, doc: Optional[CommentGroup]) -> FuncDecl:
    self._consume(TokenType.KEYWORD)
    receiver = None
    if self._match_op("("):
      recv_fields = self._parse_param_list(")")
      if len(recv_fields) != 1:
        raise self._error("method has multiple receivers")
      receiver = recv_fields[0]
    name = self._consume(TokenType.IDENT).value
    type_params: List[Field] = []
    if self._match_op("["):
      type_params = self._parse_type_params()
    signature = self._parse_signature()
    body = None
    if self._match_op("{"):
      end = self._matching_index(self.pos)
      body = Block(raw=self._source_between(self.tokens[self.pos], self.tokens[end]))
      self.pos = end + 1
    return FuncDecl(
      name=name,
      signature=signature,
      receiver=receiver,
      type_params=type_params,
      body=body,
      doc=doc,
    )

  # --- Specs Helpers ---

  def _parse_ident_list(self) -> List[str]:
    names = [self._consume(TokenType.IDENT).value]
    while self._match_op(","):
      self.pos += 1
      names.append(self._consume(TokenType.IDENT).value)
    return names

  def _at_spec_end(self) -> bool:
    return self._is_eof() or self._match(TokenType.SEMICOLON) or self._match_op(")")

  def _parse_raw_expr_list(self) -> List[GoNode]:
    """Captures comma separated expressions verbatim up to the end of the spec."""
    exprs: List[GoNode] = []
    start: Optional[Token] = None
    end: Optional[Token] = None
    while not self._at_spec_end():
      tok = self._peek()
      if tok.is_op(","):
        if start is None:
          raise self._error("expected expression")
        exprs.append(RawExpr(self._source_between(start, end)))
        start = None
        self.pos += 1
        continue
      if tok.kind == TokenType.OPERATOR and tok.value in _OPENERS:
        close = self._matching_index(self.pos)
        start = start or tok
        end = self.tokens[close]
        self.pos = close + 1
        continue
      start = start or tok
      end = tok
      self.pos += 1
    if start is None:
      raise self._error("expected expression")
    exprs.append(RawExpr(self._source_between(start, end)))
    return exprs

  def _looks_like_type_params(self) -> bool:
    """
    Distinguishes `type A[T any] ...` from the array type in `type A [N]int`.

    A type parameter list starts with an identifier followed by something
    that begins a constraint or continues a name list.
    """
    first = self._peek(1)
    second = self._peek(2)
    if first is None or first.kind != TokenType.IDENT or second is None:
      return False
    if second.kind in (TokenType.IDENT,):
      return True
    if second.kind == TokenType.KEYWORD:
      return second.value in ("interface", "func", "chan", "map", "struct")
    return second.kind == TokenType.OPERATOR and second.value in (",", "~", "*", "[", "(")

  # --- Signatures ---

  def _parse_signature(self) -> Signature:
    params = self._parse_param_list(")")
    results: List[Field] = []
    if self._match_op("("):
      results = self._parse_param_list(")")
    elif self._starts_type():
      results = [Field(names=[], type=self._parse_type())]
    return Signature(params=params, results=results)

  def _parse_type_params(self) -> List[Field]:
    fields = self._parse_param_list("]", constraint=True)
    if any(not f.names for f in fields):
      raise self._error("type parameters must be named")
    return fields

  def _parse_param_list(self, closer: str, constraint: bool = False) -> List[Field]:
    """
    Parses `(a, b int, c ...string)` or `(int, error)` style lists.

    Go requires all entries to be either named or unnamed. Entries are first
    read as (optional name, type) pairs; if any entry is named, bare
    identifiers preceding it are names sharing its type.
    """
    opener = self._consume(TokenType.OPERATOR)
    entries: List[Tuple[Optional[str], GoNode]] = []
    while True:
      self._skip_semicolons()
      if self._match_op(closer):
        self.pos += 1
        break
      entries.append(self._parse_param_entry(closer, constraint))
      self._skip_semicolons()
      if self._match_op(","):
        self.pos += 1
      elif not self._match_op(closer):
        raise self._error(f"expected ',' or '{closer}'")

    if not any(name for name, _ in entries):
      return [Field(names=[], type=t) for _, t in entries]

    fields: List[Field] = []
    pending: List[str] = []
    for name, typ in entries:
      if name is None:
        if not isinstance(typ, Ident):
          raise self._error("mixed named and unnamed parameters", opener)
        pending.append(typ.name)
        continue
      fields.append(Field(names=pending + [name], type=typ))
      pending = []
    if pending:
      raise self._error("missing type for parameter", opener)
    return fields

  def _parse_param_entry(self, closer: str, constraint: bool) -> Tuple[Optional[str], GoNode]:
    tok = self._peek()
    parse = self._parse_constraint if constraint else self._parse_param_type
    if tok is not None and tok.kind == TokenType.IDENT and self._ident_is_param_name(closer, constraint):
      self.pos += 1
      return tok.value, parse()
    return None, parse()

  def _ident_is_param_name(self, closer: str, constraint: bool) -> bool:
    nxt = self._peek(1)
    if nxt is None:
      return False
    if nxt.kind in (TokenType.IDENT, TokenType.KEYWORD):
      return nxt.kind == TokenType.IDENT or nxt.value in ("func", "map", "chan", "struct", "interface")
    if nxt.kind != TokenType.OPERATOR:
      return False
    if nxt.value in ("*", "(", "<-", "..."):
      return True
    if constraint and nxt.value == "~":
      return True
    if nxt.value == "[":
      # `a []int` / `a [4]int` (named) versus `List[int]` (unnamed instantiation).
      close = self._matching_index(self.pos + 1)
      after = self.tokens[close + 1] if close + 1 < len(self.tokens) else None
      return after is not None and not (after.is_op(",") or after.is_op(closer))
    return False

  def _parse_param_type(self) -> GoNode:
    if self._match_op("..."):
      self.pos += 1
      return Ellipsis(self._parse_type())
    return self._parse_type()

  # --- Types ---

  def _starts_type(self) -> bool:
    tok = self._peek()
    if tok is None:
      return False
    if tok.kind == TokenType.IDENT:
      return True
    if tok.kind == TokenType.KEYWORD:
      return tok.value in ("func", "map", "chan", "struct", "interface")
    return tok.kind == TokenType.OPERATOR and tok.value in ("*", "[", "(", "<-")

  def _parse_constraint(self) -> GoNode:
    """Parses a constraint term or union (`~int | ~string`)."""
    terms = [self._parse_constraint_term()]
    while self._match_op("|"):
      self.pos += 1
      terms.append(self._parse_constraint_term())
    return terms[0] if len(terms) == 1 else TypeUnion(terms)

  def _parse_constraint_term(self) -> GoNode:
    if self._match_op("~"):
      self.pos += 1
      return Tilde(self._parse_type())
    return self._parse_type()

  def _parse_type(self) -> GoNode:
    """Parses a complete type expression."""
    tok = self._peek()
    if tok is None:
      raise self._error("expected type")

    if tok.kind == TokenType.IDENT:
      return self._parse_type_name()

    if tok.kind == TokenType.KEYWORD:
      if tok.value == "map":
        self.pos += 1
        self._expect_op("[")
        key = self._parse_type()
        self._expect_op("]")
        return MapType(key=key, value=self._parse_type())
      if tok.value == "chan":
        self.pos += 1
        if self._match_op("<-"):
          self.pos += 1
          return ChanType(self._parse_type(), "send")
        return ChanType(self._parse_type())
      if tok.value == "func":
        self.pos += 1
        return FuncType(self._parse_signature())
      if tok.value == "struct":
        self.pos += 1
        return self._parse_struct_body()
      if tok.value == "interface":
        self.pos += 1
        return self._parse_interface_body()

    if tok.kind == TokenType.OPERATOR:
      if tok.value == "*":
        self.pos += 1
        return Pointer(self._parse_type())
      if tok.value == "<-":
        self.pos += 1
        if not self._match_kw("chan"):
          raise self._error("expected 'chan'")
        self.pos += 1
        return ChanType(self._parse_type(), "recv")
      if tok.value == "(":
        self.pos += 1
        inner = self._parse_type()
        self._expect_op(")")
        return ParenType(inner)
      if tok.value == "[":
        return self._parse_array_type()

    raise self._error("expected type")

  def _parse_type_name(self) -> GoNode:
    first = self._consume(TokenType.IDENT).value
    base: GoNode = Ident(first)
    if self._match_op(".") and self._peek(1) is not None and self._peek(1).kind == TokenType.IDENT:
      self.pos += 1
      base = Qualified(package=first, name=self._consume().value)
    if self._match_op("["):
      self.pos += 1
      args = [self._parse_type()]
      while self._match_op(","):
        self.pos += 1
        if self._match_op("]"):
          break
        args.append(self._parse_type())
      self._expect_op("]")
      base = Generic(base=base, args=args)
    return base

  def _parse_array_type(self) -> ArrayType:
    open_tok = self._expect_op("[")
    if self._match_op("]"):
      self.pos += 1
      return ArrayType(self._parse_type())
    close = self._matching_index(self.pos - 1)
    length = self.code[self.tokens[self.pos].offset : self.tokens[close].offset].strip()
    if not length:
      raise self._error("expected array length", open_tok)
    refs = self._length_refs(self.tokens[self.pos : close])
    self.pos = close + 1
    return ArrayType(self._parse_type(), length=length, length_refs=refs)

  @staticmethod
  def _length_refs(tokens: List[Token]) -> List[LengthRef]:
    """Collects the names (`N`) and selectors (`pkg.N`) of a constant expression."""
    refs: List[LengthRef] = []
    i = 0
    while i < len(tokens):
      tok = tokens[i]
      if tok.kind != TokenType.IDENT or (i > 0 and tokens[i - 1].is_op(".")):
        i += 1
        continue
      if i + 2 < len(tokens) and tokens[i + 1].is_op(".") and tokens[i + 2].kind == TokenType.IDENT:
        refs.append(LengthRef(Qualified(tok.value, tokens[i + 2].value)))
        i += 3
        continue
      refs.append(LengthRef(Ident(tok.value)))
      i += 1
    return refs

  def _parse_struct_body(self) -> StructType:
    self._expect_op("{")
    fields: List[Field] = []
    while True:
      self._skip_semicolons()
      if self._match_op("}"):
        self.pos += 1
        return StructType(fields)
      fields.append(self._parse_struct_field())
      self._expect_terminator(closer="}")

  def _parse_struct_field(self) -> Field:
    tok = self._peek()
    if tok is not None and tok.kind == TokenType.IDENT and self._struct_field_is_named():
      names = self._parse_ident_list()
      typ = self._parse_type()
    else:
      typ = self._parse_type()  # embedded: T, *T, pkg.T, T[X]
      names = []
    tag = None
    if self._match(TokenType.STRING):
      tag = self._consume().value
    return Field(names=names, type=typ, tag=tag)

  def _struct_field_is_named(self) -> bool:
    nxt = self._peek(1)
    if nxt is None:
      return False
    if nxt.is_op(","):
      return True
    after_open = self._peek(2)
    if nxt.is_op("[") and after_open is not None and not after_open.is_op("]"):
      close = self._matching_index(self.pos + 1)
      after = self.tokens[close + 1] if close + 1 < len(self.tokens) else None
      return not (after is None or after.kind in (TokenType.SEMICOLON, TokenType.STRING) or after.is_op("}"))
    if nxt.is_op("."):
      return False
    return nxt.kind not in (TokenType.SEMICOLON, TokenType.STRING) and not nxt.is_op("}")

  def _parse_interface_body(self) -> InterfaceType:
    self._expect_op("{")
    elements: List[GoNode] = []
    while True:
      self._skip_semicolons()
      if self._match_op("}"):
        self.pos += 1
        return InterfaceType(elements)
      tok = self._peek()
      nxt = self._peek(1)
      if tok is not None and tok.kind == TokenType.IDENT and nxt is not None and nxt.is_op("("):
        self.pos += 1
        elements.append(Method(name=tok.value, signature=self._parse_signature()))
      else:
        elements.append(self._parse_constraint())
      self._expect_terminator(closer="}")


def parse_source(code: str, filename: str = "<source>") -> SourceFile:
  """Convenience wrapper: parse `code` into a `SourceFile`."""
  return GoParser(code, filename).parse()
