"""
Tests for the Output Writer.
"""

import pytest

from go_gen_proxy.core.engine import GeneratedFile, GenerationResult
from go_gen_proxy.core.writer import write_result
from go_gen_proxy.errors import OutputError


def make_result():
  return GenerationResult(
    package="lib",
    import_path="example.com/m/lib",
    files=[GeneratedFile(name="a.go", code="package lib\n"), GeneratedFile(name="proxy__.go", code="package lib\n")],
  )


def test_writes_files_creating_directory(tmp_path):
  out = tmp_path / "deep" / "out"
  written = write_result(make_result(), out)
  assert written == [out / "a.go", out / "proxy__.go"]
  assert (out / "a.go").read_text(encoding="utf-8") == "package lib\n"


def test_overwrites_existing(tmp_path):
  (tmp_path / "a.go").write_text("stale", encoding="utf-8")
  write_result(make_result(), tmp_path)
  assert (tmp_path / "a.go").read_text(encoding="utf-8") == "package lib\n"


def test_empty_result_writes_nothing(tmp_path):
  out = tmp_path / "out"
  assert write_result(GenerationResult(package="lib", import_path="x"), out) == []
  assert list(out.iterdir()) == []


def test_output_dir_is_a_file(tmp_path):
  blocker = tmp_path / "out"
  blocker.write_text("", encoding="utf-8")
  with pytest.raises(OutputError, match="cannot create output directory"):
    write_result(make_result(), blocker)
