"""
Runtime Configuration Store.

Settings are resolved in three layers: field defaults (some read from the Go
environment variables), the ``[tool.go_gen_proxy]`` table of the nearest
``pyproject.toml``, and explicit overrides from the CLI or API callers.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

DEFAULT_TOOL_IDENTITY = "github.com/Qendolin/go-gen-proxy"
DEFAULT_SIDECAR_NAME = "proxy__.go"


def _env_goroot() -> Optional[Path]:
  value = os.environ.get("GOROOT")
  return Path(value) if value else None


def _env_gopath() -> List[Path]:
  value = os.environ.get("GOPATH")
  if value:
    return [Path(p) for p in value.split(os.pathsep) if p]
  return [Path.home() / "go"]


class GeneratorConfig(BaseModel):
  """
  Global configuration container for the proxy generator.
  """

  noop: bool = Field(False, description="Emit plain aliases with no hook instrumentation or sidecar.")
  strict: bool = Field(False, description="If True, any excluded exported symbol fails the run.")
  alias_prefix: str = Field("__", description="Prefix of the synthetic import alias of the original package.")
  sidecar_name: str = Field(DEFAULT_SIDECAR_NAME, description="File name of the hook runtime sidecar.")
  tool_identity: str = Field(DEFAULT_TOOL_IDENTITY, description="Tool name written into the generated-code marker.")
  goroot: Optional[Path] = Field(default_factory=_env_goroot, description="Go installation root (stdlib lookup).")
  gopath: List[Path] = Field(default_factory=_env_gopath, description="GOPATH workspaces searched for packages.")
  module_root: Optional[Path] = Field(None, description="Directory holding go.mod; detected from the input if unset.")

  @field_validator("sidecar_name")
  @classmethod
  def validate_sidecar_name(cls, v: str) -> str:
    """
    Ensures the sidecar is compiled with the package and not as a test.

    Args:
        v (str): The configured file name.

    Returns:
        str: The validated name.

    Raises:
        ValueError: If the name is not a plain, non-test `.go` file name.
    """
    if "/" in v or "\\" in v or not v.endswith(".go") or v.endswith("_test.go"):
      raise ValueError(f"Invalid sidecar file name: '{v}'. Expected a plain '*.go' name that is not a test file.")
    return v

  @field_validator("alias_prefix")
  @classmethod
  def validate_alias_prefix(cls, v: str) -> str:
    if not v or not all(c == "_" or c.isalnum() for c in v) or v[0].isdigit():
      raise ValueError(f"Invalid alias prefix: '{v}'. Must be a Go identifier prefix.")
    return v

  @classmethod
  def load(
    cls,
    noop: Optional[bool] = None,
    strict: Optional[bool] = None,
    overrides: Optional[Dict[str, Any]] = None,
    search_path: Optional[Path] = None,
  ) -> "GeneratorConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        noop (Optional[bool]): Override for the generation mode.
        strict (Optional[bool]): Override for strict mode.
        overrides (Optional[Dict]): Additional `key=value` settings from the CLI.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        GeneratorConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, toml_dir = _load_toml_settings(start_dir)

    settings: Dict[str, Any] = dict(toml_config)
    settings.update(overrides or {})

    if noop is not None:
      settings["noop"] = noop
    if strict is not None:
      settings["strict"] = strict

    # Relative paths in the TOML table are relative to the TOML file.
    if toml_dir:
      for key in ("goroot", "module_root"):
        if key in toml_config and key not in (overrides or {}):
          settings[key] = (toml_dir / Path(toml_config[key])).resolve()
      if "gopath" in toml_config and "gopath" not in (overrides or {}):
        settings["gopath"] = [(toml_dir / Path(p)).resolve() for p in toml_config["gopath"]]

    if isinstance(settings.get("gopath"), str):
      settings["gopath"] = [Path(p) for p in settings["gopath"].split(os.pathsep) if p]

    return cls(**settings)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("go_gen_proxy", {}), parent

  return {}, None


def parse_cli_key_values(items: Optional[List[str]]) -> Dict[str, Any]:
  """
  Parses a list of 'key=value' strings into a dictionary.

  Booleans are inferred; everything else stays a string and is validated by
  `GeneratorConfig`.

  Args:
      items (Optional[List[str]]): List of raw CLI strings directly from argparse.

  Returns:
      Dict[str, Any]: Parsed dictionary.
  """
  if not items:
    return {}

  config = {}
  for item in items:
    if "=" not in item:
      print(f"⚠️  Ignoring invalid config format: '{item}'. Expected 'key=value'.")
      continue

    key, val_str = item.split("=", 1)
    key = key.strip()
    val_str = val_str.strip()

    final_val: Any = val_str
    if val_str.lower() == "true":
      final_val = True
    elif val_str.lower() == "false":
      final_val = False

    config[key] = final_val

  return config
