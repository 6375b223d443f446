# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tgtt configuration file (`tgtt.json`).

The file is a single JSON object. Every key except `output_path` and
`primary_package` is optional; unknown keys are rejected so that typos do not
silently fall back to defaults.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping

from tgtt.core.errors import ConfigError
from tgtt.core.types_core import BASIC_BY_NAME

DEFAULT_CONFIG_NAME = "tgtt.json"

_DEFAULT_CONFIG: dict[str, Any] = {
	"include_unexported": False,
	"output_path": "ts",
	"fallback_type": "any",
	"jobs": 0,
	"search_paths": [],
	"type_mappings": {"time.Time": "string"},
	"primary_package": {"path": ".", "names": [], "type_mappings": {}},
	"secondary_packages": [],
}

_TOP_KEYS = {
	"$schema",
	"include_unexported",
	"output_path",
	"fallback_type",
	"jobs",
	"search_paths",
	"type_mappings",
	"primary_package",
	"secondary_packages",
}
_PACKAGE_KEYS = {"path", "names", "type_mappings"}


@dataclass(frozen=True)
class PackageConfig:
	path: str
	names: List[str] = field(default_factory=list)
	type_mappings: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Config:
	output_path: Path
	primary_package: PackageConfig
	secondary_packages: List[PackageConfig] = field(default_factory=list)
	include_unexported: bool = False
	fallback_type: str = "any"
	jobs: int = 0
	search_paths: List[Path] = field(default_factory=list)
	type_mappings: Dict[str, str] = field(default_factory=dict)
	base_dir: Path = Path(".")


def default_config_text() -> str:
	return json.dumps(_DEFAULT_CONFIG, indent=2) + "\n"


def write_default_config(path: Path, *, force: bool = False) -> None:
	if path.exists() and not force:
		raise ConfigError(f"{path} already exists (use --force to overwrite)")
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(default_config_text(), encoding="utf-8")


def load_config(path: Path | str) -> Config:
	"""
	Read and validate a config file. `-` reads from stdin; relative paths
	inside the file are then resolved against the current directory.
	"""
	if str(path) == "-":
		text = sys.stdin.read()
		base_dir = Path.cwd()
		label = "<stdin>"
	else:
		path = Path(path)
		try:
			text = path.read_text(encoding="utf-8")
		except OSError as err:
			raise ConfigError(f"cannot read config {path}: {err.strerror or err}") from err
		base_dir = path.resolve().parent
		label = str(path)
	try:
		data = json.loads(text)
	except ValueError as err:
		raise ConfigError(f"{label}: invalid JSON: {err}") from err
	return parse_config(data, base_dir=base_dir, label=label)


def parse_config(data: Any, *, base_dir: Path, label: str = "config") -> Config:
	if not isinstance(data, dict):
		raise ConfigError(f"{label}: config must be a JSON object")
	unknown = sorted(set(data.keys()) - _TOP_KEYS)
	if unknown:
		raise ConfigError(f"{label}: unknown fields: {', '.join(unknown)}")

	output_path = data.get("output_path")
	if not isinstance(output_path, str) or not output_path:
		raise ConfigError(f"{label}: 'output_path' must be a non-empty string")
	if "primary_package" not in data:
		raise ConfigError(f"{label}: 'primary_package' is required")
	primary = _package(data["primary_package"], f"{label}: primary_package")

	secondaries_raw = data.get("secondary_packages", [])
	if not isinstance(secondaries_raw, list):
		raise ConfigError(f"{label}: 'secondary_packages' must be an array")
	secondaries = [_package(raw, f"{label}: secondary_packages[{i}]") for i, raw in enumerate(secondaries_raw)]

	include_unexported = data.get("include_unexported", False)
	if not isinstance(include_unexported, bool):
		raise ConfigError(f"{label}: 'include_unexported' must be a boolean")
	fallback_type = data.get("fallback_type", "any")
	if not isinstance(fallback_type, str) or not fallback_type:
		raise ConfigError(f"{label}: 'fallback_type' must be a non-empty string")
	jobs = data.get("jobs", 0)
	if isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 0:
		raise ConfigError(f"{label}: 'jobs' must be an integer >= 0")
	search_paths = _string_list(data.get("search_paths", []), f"{label}: 'search_paths'")

	return Config(
		output_path=base_dir / output_path,
		primary_package=primary,
		secondary_packages=secondaries,
		include_unexported=include_unexported,
		fallback_type=fallback_type,
		jobs=jobs,
		search_paths=[base_dir / p for p in search_paths],
		type_mappings=_mappings(data.get("type_mappings", {}), f"{label}: 'type_mappings'"),
		base_dir=base_dir,
	)


def merged_type_mappings(cfg: Config, import_path: Callable[[str], str] = lambda p: p) -> Dict[str, str]:
	"""
	Global mappings, then the primary package's, then each secondary
	package's; later entries win. Bare keys of a secondary package name its
	own symbols and are qualified with its import path.
	"""
	merged: Dict[str, str] = dict(cfg.type_mappings)
	merged.update(cfg.primary_package.type_mappings)
	for pkg in cfg.secondary_packages:
		path = import_path(pkg.path)
		for key, value in pkg.type_mappings.items():
			if "." not in key and key not in BASIC_BY_NAME:
				key = f"{path}.{key}"
			merged[key] = value
	return merged


def _package(raw: Any, where: str) -> PackageConfig:
	if not isinstance(raw, dict):
		raise ConfigError(f"{where} must be an object")
	unknown = sorted(set(raw.keys()) - _PACKAGE_KEYS)
	if unknown:
		raise ConfigError(f"{where} has unknown fields: {', '.join(unknown)}")
	path = raw.get("path")
	if not isinstance(path, str) or not path:
		raise ConfigError(f"{where}: 'path' must be a non-empty string")
	return PackageConfig(
		path=path,
		names=_string_list(raw.get("names", []), f"{where}: 'names'"),
		type_mappings=_mappings(raw.get("type_mappings", {}), f"{where}: 'type_mappings'"),
	)


def _string_list(raw: Any, where: str) -> List[str]:
	if not isinstance(raw, list) or not all(isinstance(x, str) and x for x in raw):
		raise ConfigError(f"{where} must be an array of non-empty strings")
	return list(raw)


def _mappings(raw: Any, where: str) -> Dict[str, str]:
	if not isinstance(raw, Mapping):
		raise ConfigError(f"{where} must be an object")
	for key, value in raw.items():
		if not key or not isinstance(value, str):
			raise ConfigError(f"{where}: entry {key!r} must map to a string")
	return dict(raw)


__all__ = [
	"DEFAULT_CONFIG_NAME",
	"PackageConfig",
	"Config",
	"default_config_text",
	"write_default_config",
	"load_config",
	"parse_config",
	"merged_type_mappings",
]
