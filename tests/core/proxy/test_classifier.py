"""
Tests for the Symbol Classifier.

Verifies:
1.  Visibility filtering of var/const/type groups.
2.  Acceptance of forwardable exported functions, with their import qualifiers.
3.  Rejection (with a recorded Exclusion) of functions whose signature cannot
    be reproduced outside the package.
4.  Silent skipping of methods and unexported functions.
5.  Noop-mode rules.
"""

from go_gen_proxy.core.golang import parse_source
from go_gen_proxy.core.golang.nodes import TypeGroup, ValueGroup
from go_gen_proxy.core.proxy.classifier import (
  SKIP,
  Exclusion,
  KeptFunction,
  KeptTypes,
  KeptValues,
  SymbolClassifier,
)
from go_gen_proxy.core.tracer import TraceEventType, get_tracer


def classify(code, instrumented=True, extra_types=()):
  f = parse_source(f"package lib\n\n{code}", filename="lib.go")
  local_types = {s.name for d in f.decls if isinstance(d, TypeGroup) for s in d.specs} | set(extra_types)
  local_values = {n for d in f.decls if isinstance(d, ValueGroup) for s in d.specs for n in s.names}
  classifier = SymbolClassifier(
    "lib.go", local_types, instrumented, reserved_params={"__invokeHandler"}, local_values=local_values
  )
  return classifier, [classifier.classify(d) for d in f.decls]


def test_import_decls_are_skipped():
  _, verdicts = classify('import "fmt"\n')
  assert verdicts == [SKIP]


def test_var_group_keeps_only_exported_names():
  _, verdicts = classify("var (\n\tA = 1\n\tb = 2\n\tC, d = 3, 4\n)\n")
  kept = verdicts[0]
  assert isinstance(kept, KeptValues)
  assert [names for _, names in kept.members] == [["A"], ["C"]]


def test_all_unexported_values_skip():
  _, verdicts = classify("const (\n\ta = iota\n\tb\n)\n\nvar _ = 1\n")
  assert verdicts == [SKIP, SKIP]


def test_type_group_keeps_only_exported_names():
  _, verdicts = classify("type (\n\tPublic struct{}\n\tprivate int\n)\n")
  kept = verdicts[0]
  assert isinstance(kept, KeptTypes)
  assert [s.name for s in kept.specs] == ["Public"]


def test_exported_function_kept_with_qualifiers():
  _, verdicts = classify("func Get(ctx context.Context, r io.Reader) (*Response, error) { return nil, nil }\n\ntype Response struct{}\n")
  kept = verdicts[0]
  assert isinstance(kept, KeptFunction)
  assert kept.qualifiers == {"context", "io"}


def test_unexported_function_skipped_without_exclusion():
  classifier, verdicts = classify("func helper() {}\n")
  assert verdicts == [SKIP]
  assert classifier.exclusions == []


def test_methods_skipped_without_exclusion():
  classifier, verdicts = classify("type T struct{}\n\nfunc (t *T) Do() {}\n")
  assert verdicts[1] is SKIP
  assert classifier.exclusions == []


def test_unexported_local_type_rejected():
  classifier, verdicts = classify("type config struct{}\n\nfunc New(c *config) {}\n")
  assert verdicts[1] is SKIP
  assert classifier.exclusions == [Exclusion("lib.go", "New", "references unexported type 'config'")]


def test_unexported_type_nested_in_composite_rejected():
  classifier, verdicts = classify("type item int\n\nfunc All() map[string][]func(item) error { return nil }\n")
  assert verdicts[1] is SKIP
  assert "item" in classifier.exclusions[0].reason


def test_unexported_type_in_result_rejected():
  classifier, verdicts = classify("type state int\n\nfunc Current() (s state) { return 0 }\n")
  assert verdicts[1] is SKIP
  assert classifier.exclusions[0].symbol == "Current"


def test_unnamed_parameter_rejected():
  classifier, verdicts = classify("func Write([]byte) (int, error) { return 0, nil }\n")
  assert verdicts == [SKIP]
  assert "unnamed parameter" in classifier.exclusions[0].reason


def test_blank_parameter_rejected():
  classifier, verdicts = classify("func Ignore(_ int, x int) {}\n")
  assert verdicts == [SKIP]
  assert "blank parameter" in classifier.exclusions[0].reason


def test_parameter_shadowing_hook_helper_rejected():
  classifier, verdicts = classify("func Odd(__invokeHandler int) {}\n")
  assert verdicts == [SKIP]
  assert "__invokeHandler" in classifier.exclusions[0].reason


def test_dot_import_identifier_rejected():
  classifier, verdicts = classify('import . "strings"\n\nfunc Build(b Builder) {}\n')
  assert verdicts[1] is SKIP
  assert "Builder" in classifier.exclusions[0].reason


def test_predeclared_and_type_param_identifiers_allowed():
  _, verdicts = classify("func Max[T comparable](a, b T, opts ...any) (T, error) { return a, nil }\n")
  assert isinstance(verdicts[0], KeptFunction)


def test_exported_local_type_allowed():
  _, verdicts = classify("func Open(name string) *File { return nil }\n", extra_types={"File"})
  assert isinstance(verdicts[0], KeptFunction)


def test_constraint_references_checked():
  classifier, verdicts = classify("type number interface{ ~int }\n\nfunc Sum[T number](xs []T) T { var z T; return z }\n")
  assert verdicts[1] is SKIP
  assert "number" in classifier.exclusions[0].reason


def test_noop_mode_ignores_signature_problems():
  _, verdicts = classify("type config struct{}\n\nfunc New(*config) {}\n", instrumented=False)
  assert isinstance(verdicts[1], KeptFunction)


def test_noop_mode_rejects_generic_functions():
  classifier, verdicts = classify("func Id[T any](v T) T { return v }\n", instrumented=False)
  assert verdicts == [SKIP]
  assert "generic" in classifier.exclusions[0].reason


def test_exclusions_are_traced():
  classify("func Write([]byte) {}\n")
  events = get_tracer().events_of(TraceEventType.SYMBOL_EXCLUDED)
  assert [e.metadata["symbol"] for e in events] == ["Write"]


# --- Array lengths ---


def test_unexported_constant_in_array_length_rejected():
  classifier, verdicts = classify("const size = 4\n\nfunc Sum(x [size]int) int { return 0 }\n")
  assert verdicts[1] is SKIP
  assert classifier.exclusions == [Exclusion("lib.go", "Sum", "references unexported constant 'size'")]


def test_exported_constant_in_array_length_allowed():
  _, verdicts = classify("const N = 4\n\nfunc Sum(x [N * 2]int, y [len(\"ab\")]byte) int { return 0 }\n")
  assert isinstance(verdicts[1], KeptFunction)


def test_qualified_array_length_counts_as_import_use():
  _, verdicts = classify('import "crypto/sha256"\n\nfunc Verify(sum [sha256.Size]byte) bool { return true }\n')
  kept = verdicts[1]
  assert isinstance(kept, KeptFunction)
  assert kept.qualifiers == {"sha256"}


def test_unknown_name_in_array_length_rejected():
  classifier, verdicts = classify("func Pad(b [width]byte) {}\n")
  assert verdicts == [SKIP]
  assert "width" in classifier.exclusions[0].reason


# --- Anonymous struct and interface types ---


def test_anonymous_struct_with_unexported_field_rejected():
  classifier, verdicts = classify("func Apply(opts struct{ retries int }) {}\n")
  assert verdicts == [SKIP]
  assert classifier.exclusions[0].reason == "references anonymous struct with unexported field 'retries'"


def test_anonymous_interface_with_unexported_method_rejected():
  classifier, verdicts = classify("func Run(r interface{ run() error }) {}\n")
  assert verdicts == [SKIP]
  assert classifier.exclusions[0].reason == "references interface with unexported method 'run'"


def test_anonymous_types_with_exported_members_allowed():
  code = "func Serve(cfg struct{ Port int }, h interface{ Handle() error }) {}\n"
  _, verdicts = classify(code)
  assert isinstance(verdicts[0], KeptFunction)
