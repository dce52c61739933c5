"""
Go Frontend (Lexer, AST & Parser).

Handles the parsing of Go source text into the declaration-level syntax tree
consumed by the proxy generator, and the rendering of that tree back to Go.
"""

from go_gen_proxy.core.golang.nodes import (
  ArrayType,
  BasicLit,
  Block,
  CallExpr,
  ChanType,
  CommentGroup,
  Ellipsis,
  ExprStmt,
  Field,
  FuncDecl,
  FuncType,
  Generic,
  GoNode,
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
  ReturnStmt,
  SelectorExpr,
  Signature,
  SourceFile,
  StructType,
  Tilde,
  TypeGroup,
  TypeSpec,
  TypeUnion,
  ValueGroup,
  ValueSpec,
  is_exported,
  iter_type_nodes,
  iter_type_refs,
)
from go_gen_proxy.core.golang.parser import GoParser, parse_source
from go_gen_proxy.core.golang.tokens import GoLexer, Token, TokenType

__all__ = [
  "ArrayType",
  "BasicLit",
  "Block",
  "CallExpr",
  "ChanType",
  "CommentGroup",
  "Ellipsis",
  "ExprStmt",
  "Field",
  "FuncDecl",
  "FuncType",
  "Generic",
  "GoLexer",
  "GoNode",
  "GoParser",
  "Ident",
  "ImportGroup",
  "ImportSpec",
  "InterfaceType",
  "LengthRef",
  "MapType",
  "Method",
  "ParenType",
  "Pointer",
  "Qualified",
  "RawExpr",
  "ReturnStmt",
  "SelectorExpr",
  "Signature",
  "SourceFile",
  "StructType",
  "Tilde",
  "Token",
  "TokenType",
  "TypeGroup",
  "TypeSpec",
  "TypeUnion",
  "ValueGroup",
  "ValueSpec",
  "is_exported",
  "iter_type_nodes",
  "iter_type_refs",
  "parse_source",
]
