"""
Tests for the Import Resolver.

Verifies:
1.  Unaliased imports are keyed by their declared package name (which may
    differ from the last path element).
2.  Explicit aliases win; blank and dot imports are dropped.
3.  Unresolvable imports are dropped.
4.  Emission keeps only used aliases, sorted by path, with declared aliases.
"""

from go_gen_proxy.core.golang import parse_source
from go_gen_proxy.core.proxy.imports import ImportResolver
from go_gen_proxy.core.tracer import TraceEventType, get_tracer
from go_gen_proxy.locator import PackageLocator

SOURCE = """package lib

import (
	"context"
	stdio "io"
	"math/rand/v2"
	_ "net/http"
	. "time"
	"example.com/missing"
)
"""


def build(config):
  resolver = ImportResolver(PackageLocator(config))
  table = resolver.build_table(parse_source(SOURCE, "lib.go"))
  return resolver, table


def test_table_keys(config):
  _, table = build(config)
  assert table.paths == {"context": "context", "stdio": "io", "rand": "math/rand/v2"}


def test_declared_aliases_recorded(config):
  _, table = build(config)
  assert table.declared == {"context": None, "stdio": "stdio", "rand": None}


def test_dropped_imports_traced(config):
  build(config)
  actions = [
    (e.metadata["action"], e.metadata["path"]) for e in get_tracer().events_of(TraceEventType.IMPORT_ACTION)
  ]
  assert ("dropped", "net/http") in actions
  assert ("dropped", "time") in actions
  assert ("dropped", "example.com/missing") in actions


def test_emit_only_used_sorted_by_path(config):
  resolver, table = build(config)
  specs = resolver.emit(table, {"stdio", "rand", "context", "unknown"})
  assert [(s.path, s.name) for s in specs] == [
    ("context", None),
    ("io", "stdio"),
    ("math/rand/v2", None),
  ]


def test_emit_nothing_used(config):
  resolver, table = build(config)
  assert resolver.emit(table, set()) == []


def test_same_path_under_two_aliases(config):
  resolver = ImportResolver(PackageLocator(config))
  table = resolver.build_table(parse_source('package lib\n\nimport (\n\ta "io"\n\tb "io"\n)\n', "lib.go"))
  assert [(s.path, s.name) for s in resolver.emit(table, {"a"})] == [("io", "a")]
  assert [(s.path, s.name) for s in resolver.emit(table, {"b", "a"})] == [("io", "a"), ("io", "b")]
