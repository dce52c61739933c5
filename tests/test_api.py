"""
Tests for the top-level `go_gen_proxy.generate` API.
"""

import pytest

import go_gen_proxy as ggp


def overrides(config):
  return {"goroot": config.goroot, "gopath": config.gopath}


def test_generate_without_writing(config, write_module, tmp_path):
  pkg = write_module({"a.go": "package lib\n\nfunc F() {}\n"})
  result = ggp.generate(str(pkg), config_overrides=overrides(config))
  assert [f.name for f in result.files] == ["a.go", "proxy__.go"]
  assert not (tmp_path / "out").exists()


def test_generate_and_write(config, write_module, tmp_path):
  pkg = write_module({"a.go": "package lib\n\nfunc F() {}\n"})
  out = tmp_path / "out"
  ggp.generate(str(pkg), out, noop=True, config_overrides=overrides(config))
  assert (out / "a.go").read_text(encoding="utf-8").endswith("var F = __lib.F\n")


def test_strict_raises(config, write_module):
  pkg = write_module({"a.go": "package lib\n\nfunc F(int) {}\n"})
  with pytest.raises(ggp.GenerationError):
    ggp.generate(str(pkg), strict=True, config_overrides=overrides(config))


def test_errors_share_base():
  for err in (ggp.GenerationError, ggp.ResolutionError, ggp.OutputError, ggp.GoSyntaxError):
    assert issubclass(err, ggp.ProxyGenError)
