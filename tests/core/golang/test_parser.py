"""
Tests for the Go Parser.

Verifies:
1.  **File Structure**: package clause, header comments, declaration order.
2.  **Declarations**: imports, grouped var/const/type, functions and methods.
3.  **Signatures**: grouped names, variadics, unnamed params, generics.
4.  **Types**: composite, qualified and constraint expressions.
5.  **Doc Comments**: attached to declarations and grouped specs.
6.  **Errors**: located syntax errors.
"""

import pytest

from go_gen_proxy.core.golang import (
  ArrayType,
  ChanType,
  Ellipsis,
  FuncDecl,
  FuncType,
  Generic,
  Ident,
  ImportGroup,
  InterfaceType,
  LengthRef,
  MapType,
  Method,
  Pointer,
  Qualified,
  StructType,
  Tilde,
  TypeGroup,
  TypeUnion,
  ValueGroup,
  parse_source,
)
from go_gen_proxy.errors import GoSyntaxError


def parse(body, header=""):
  return parse_source(f"{header}package lib\n\n{body}", filename="lib.go")


def only_func(body):
  decls = [d for d in parse(body).decls if isinstance(d, FuncDecl)]
  assert len(decls) == 1
  return decls[0]


# --- File Structure ---


def test_package_clause_and_name():
  f = parse("")
  assert f.package == "lib"
  assert f.name == "lib.go"
  assert f.decls == []


def test_header_comments_kept_separately():
  header = "// Copyright 2024.\n\n//go:build linux\n\n// Package lib does things.\n"
  f = parse("var X = 1\n", header=header)
  assert [g.comments for g in f.header] == [
    ["// Copyright 2024."],
    ["//go:build linux"],
    ["// Package lib does things."],
  ]
  # The package doc does not leak into the first declaration.
  assert f.decls[0].doc is None


def test_missing_package_clause():
  with pytest.raises(GoSyntaxError) as exc:
    parse_source("func F() {}\n", filename="bad.go")
  assert exc.value.filename == "bad.go"
  assert "package" in str(exc.value)


# --- Imports ---


def test_single_and_grouped_imports():
  f = parse('import "fmt"\n\nimport (\n\tio2 "io"\n\t_ "embed"\n\t. "math"\n\t"net/http"\n)\n')
  specs = f.imports
  assert [(s.name, s.path) for s in specs] == [
    (None, "fmt"),
    ("io2", "io"),
    ("_", "embed"),
    (".", "math"),
    (None, "net/http"),
  ]
  assert all(isinstance(d, ImportGroup) for d in f.decls)


# --- Values ---


def test_var_with_type_and_value():
  f = parse("var Timeout time.Duration = 5 * time.Second\n")
  group = f.decls[0]
  assert isinstance(group, ValueGroup)
  spec = group.specs[0]
  assert spec.names == ["Timeout"]
  assert spec.type == Qualified("time", "Duration")
  assert str(spec.values[0]) == "5 * time.Second"


def test_const_group_with_iota_repetition():
  f = parse("const (\n\tA Kind = iota\n\tB\n\tc\n)\n")
  group = f.decls[0]
  assert group.keyword == "const"
  assert group.grouped
  assert [s.names for s in group.specs] == [["A"], ["B"], ["c"]]
  assert group.specs[1].values == []
  assert group.specs[1].type is None


def test_multi_name_value_spec():
  f = parse("var A, b = f(1, 2), map[string]int{\n\t\"x\": 1,\n}\n")
  spec = f.decls[0].specs[0]
  assert spec.names == ["A", "b"]
  assert [str(v) for v in spec.values] == ["f(1, 2)", 'map[string]int{\n\t"x": 1,\n}']


def test_func_literal_initializer_is_raw():
  f = parse("var Handler = func(x int) int {\n\treturn x\n}\n\nfunc After() {}\n")
  assert str(f.decls[0].specs[0].values[0]).startswith("func(x int) int {")
  assert isinstance(f.decls[1], FuncDecl)


# --- Types ---


def test_type_definitions():
  f = parse("type (\n\tID string\n\tpoint struct{ X, Y int }\n\tAlias = ID\n)\n")
  group = f.decls[0]
  assert isinstance(group, TypeGroup)
  assert [s.name for s in group.specs] == ["ID", "point", "Alias"]
  assert group.specs[2].assign
  assert isinstance(group.specs[1].type, StructType)
  assert group.specs[1].type.fields[0].names == ["X", "Y"]


def test_generic_type_and_array_type_disambiguation():
  f = parse("type List[T any] struct{ items []T }\n\ntype Buf [4]byte\n")
  generic, array = f.decls
  assert generic.specs[0].type_params[0].names == ["T"]
  assert generic.specs[0].type_params[0].type == Ident("any")
  assert array.specs[0].type_params == []
  assert array.specs[0].type == ArrayType(Ident("byte"), "4")


def test_array_length_references():
  f = parse("var X [sha256.Size + n*len(a.b.c)]byte\n")
  array = f.decls[0].specs[0].type
  assert array.length == "sha256.Size + n*len(a.b.c)"
  assert array.length_refs == [
    LengthRef(Qualified("sha256", "Size")),
    LengthRef(Ident("n")),
    LengthRef(Ident("len")),
    LengthRef(Qualified("a", "b")),
  ]


def test_struct_embedded_fields_and_tags():
  f = parse('type S struct {\n\tio.Reader\n\t*Base\n\tName string `json:"name"`\n}\n')
  fields = f.decls[0].specs[0].type.fields
  assert fields[0].names == [] and fields[0].type == Qualified("io", "Reader")
  assert fields[1].names == [] and fields[1].type == Pointer(Ident("Base"))
  assert fields[2].names == ["Name"]
  assert fields[2].tag == '`json:"name"`'


def test_interface_methods_and_constraints():
  f = parse("type I interface {\n\tio.Reader\n\tClose() error\n\t~int | ~string\n}\n")
  elements = f.decls[0].specs[0].type.elements
  assert elements[0] == Qualified("io", "Reader")
  assert isinstance(elements[1], Method) and elements[1].name == "Close"
  assert elements[2] == TypeUnion([Tilde(Ident("int")), Tilde(Ident("string"))])


def test_composite_types():
  f = parse("var X map[string][]*pkg.T\n\nvar Y <-chan func(int) error\n\nvar Z chan<- struct{}\n")
  x, y, z = (d.specs[0].type for d in f.decls)
  assert x == MapType(Ident("string"), ArrayType(Pointer(Qualified("pkg", "T"))))
  assert isinstance(y, ChanType) and y.direction == "recv"
  assert isinstance(y.elem, FuncType)
  assert z == ChanType(StructType([]), "send")


# --- Functions ---


def test_func_grouped_params_and_results():
  fn = only_func("func Copy(dst, src string, n int) (written int64, err error) {\n\treturn 0, nil\n}\n")
  assert fn.signature.param_names() == ["dst", "src", "n"]
  assert [r.names for r in fn.signature.results] == [["written"], ["err"]]
  assert fn.body.raw == "{\n\treturn 0, nil\n}"


def test_func_unnamed_params():
  fn = only_func("func F(int, *pkg.T, []byte) error { return nil }\n")
  assert fn.signature.param_names() == [None, None, None]
  assert fn.signature.results[0].type == Ident("error")


def test_func_variadic():
  fn = only_func("func Printf(format string, args ...any) {}\n")
  assert fn.signature.variadic
  assert fn.signature.params[-1].type == Ellipsis(Ident("any"))


def test_func_named_param_of_generic_type():
  fn = only_func("func Sum(xs List[int], n [2]int) int { return 0 }\n")
  assert fn.signature.param_names() == ["xs", "n"]
  assert fn.signature.params[0].type == Generic(Ident("List"), [Ident("int")])


def test_func_unnamed_generic_instantiation_param():
  fn = only_func("func F(List[int]) {}\n")
  assert fn.signature.param_names() == [None]


def test_generic_func_type_params():
  fn = only_func("func Map[S ~[]E, E any, R comparable](s S, f func(E) R) []R { return nil }\n")
  assert fn.type_param_names() == ["S", "E", "R"]
  assert fn.type_params[0].type == Tilde(ArrayType(Ident("E")))


def test_method_receiver():
  fn = only_func("func (l *List[T]) Push(v T) {}\n")
  assert fn.receiver.names == ["l"]
  assert fn.receiver.type == Pointer(Generic(Ident("List"), [Ident("T")]))


def test_func_without_body():
  fn = only_func("func nanotime() int64\n")
  assert fn.body is None


def test_body_with_braces_in_strings():
  fn = only_func('func F() string {\n\treturn "}{"\n}\n')
  assert fn.body.raw == '{\n\treturn "}{"\n}'


def test_func_type_result():
  fn = only_func("func Handler() func(int) (string, error) { return nil }\n")
  result = fn.signature.results[0].type
  assert isinstance(result, FuncType)
  assert len(result.signature.results) == 2


def test_interface_literal_param():
  fn = only_func("func F(v interface{ String() string }) {}\n")
  assert isinstance(fn.signature.params[0].type, InterfaceType)


# --- Doc Comments ---


def test_doc_comments_on_declarations():
  code = "// Get fetches.\n// It may fail.\nfunc Get() {}\n\n// detached\n\nvar X = 1\n"
  f = parse(code)
  assert f.decls[0].doc.comments == ["// Get fetches.", "// It may fail."]
  assert f.decls[1].doc is None


def test_doc_comments_on_grouped_specs():
  f = parse("var (\n\t// A is first.\n\tA = 1\n\tB = 2 // trailing\n)\n")
  specs = f.decls[0].specs
  assert specs[0].doc.comments == ["// A is first."]
  assert specs[1].doc is None


def test_trailing_comment_is_not_doc_of_next_decl():
  f = parse("var X = 1 // x\nvar Y = 2\n")
  assert f.decls[1].doc is None


# --- Errors ---


def test_syntax_error_location():
  with pytest.raises(GoSyntaxError) as exc:
    parse("func F( {\n")
  assert exc.value.filename == "lib.go"
  assert exc.value.lineno == 3


def test_unexpected_top_level_statement():
  with pytest.raises(GoSyntaxError, match="expected declaration"):
    parse("x := 1\n")
