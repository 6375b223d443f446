#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Config file loading and validation."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from tgtt.config import (
	PackageConfig,
	default_config_text,
	load_config,
	merged_type_mappings,
	parse_config,
	write_default_config,
)
from tgtt.core.errors import ConfigError

BASE = Path("/work/app")


def _parse(**data):
	data.setdefault("output_path", "ts")
	data.setdefault("primary_package", {"path": "."})
	return parse_config(data, base_dir=BASE)


def test_defaults_and_relative_paths():
	cfg = _parse(search_paths=["../gopath"])
	assert cfg.output_path == BASE / "ts"
	assert cfg.primary_package == PackageConfig(path=".")
	assert cfg.secondary_packages == []
	assert cfg.include_unexported is False
	assert cfg.fallback_type == "any"
	assert cfg.jobs == 0
	assert cfg.search_paths == [BASE / "../gopath"]
	assert cfg.type_mappings == {}


def test_default_config_round_trips():
	cfg = parse_config(json.loads(default_config_text()), base_dir=BASE)
	assert cfg.type_mappings == {"time.Time": "string"}
	assert cfg.primary_package.path == "."


@pytest.mark.parametrize(
	"data,message",
	[
		([], "must be a JSON object"),
		({"output_path": "ts", "primary_package": {"path": "."}, "outptu": 1}, "unknown fields: outptu"),
		({"primary_package": {"path": "."}}, "'output_path' must be a non-empty string"),
		({"output_path": "ts"}, "'primary_package' is required"),
		({"output_path": "ts", "primary_package": "."}, "primary_package must be an object"),
		({"output_path": "ts", "primary_package": {"path": ""}}, "'path' must be a non-empty string"),
		({"output_path": "ts", "primary_package": {"path": ".", "name": []}}, "unknown fields: name"),
		({"output_path": "ts", "primary_package": {"path": ".", "names": [1]}}, "array of non-empty strings"),
		({"output_path": "ts", "primary_package": {"path": "."}, "secondary_packages": {}}, "must be an array"),
		({"output_path": "ts", "primary_package": {"path": "."}, "jobs": -1}, "'jobs' must be an integer"),
		({"output_path": "ts", "primary_package": {"path": "."}, "jobs": True}, "'jobs' must be an integer"),
		({"output_path": "ts", "primary_package": {"path": "."}, "include_unexported": "yes"}, "must be a boolean"),
		({"output_path": "ts", "primary_package": {"path": "."}, "type_mappings": {"A": 1}}, "must map to a string"),
		({"output_path": "ts", "primary_package": {"path": "."}, "fallback_type": ""}, "'fallback_type'"),
	],
)
def test_invalid_config(data, message):
	with pytest.raises(ConfigError, match=message):
		parse_config(data, base_dir=BASE)


def test_schema_key_is_allowed():
	assert _parse(**{"$schema": "https://example.com/tgtt.schema.json"}).output_path == BASE / "ts"


def test_merged_type_mappings():
	cfg = _parse(
		type_mappings={"time.Time": "string", "int64": "number"},
		primary_package={"path": ".", "type_mappings": {"ID": "string", "int64": "bigint"}},
		secondary_packages=[
			{"path": "./geo", "type_mappings": {"Point": "[number, number]", "float32": "number", "time.Time": "Date"}},
		],
	)
	merged = merged_type_mappings(cfg, lambda p: "example.com/app" + p[1:])
	assert merged == {
		"time.Time": "Date",
		"int64": "bigint",
		"ID": "string",
		"example.com/app/geo.Point": "[number, number]",
		"float32": "number",
	}


def test_load_config_from_file(tmp_path):
	path = tmp_path / "cfg" / "tgtt.json"
	path.parent.mkdir()
	path.write_text(json.dumps({"output_path": "out", "primary_package": {"path": "./models"}}))
	cfg = load_config(path)
	assert cfg.base_dir == path.parent.resolve()
	assert cfg.output_path == path.parent.resolve() / "out"
	assert cfg.primary_package.path == "./models"


def test_load_config_from_stdin(monkeypatch, tmp_path):
	monkeypatch.chdir(tmp_path)
	monkeypatch.setattr("sys.stdin", io.StringIO('{"output_path": "ts", "primary_package": {"path": "."}}'))
	assert load_config("-").base_dir == tmp_path


def test_load_config_errors(tmp_path):
	with pytest.raises(ConfigError, match="cannot read config"):
		load_config(tmp_path / "missing.json")
	bad = tmp_path / "bad.json"
	bad.write_text("{not json")
	with pytest.raises(ConfigError, match="invalid JSON"):
		load_config(bad)


def test_write_default_config(tmp_path):
	path = tmp_path / "tgtt.json"
	write_default_config(path)
	assert path.read_text() == default_config_text()
	with pytest.raises(ConfigError, match="already exists"):
		write_default_config(path)
	path.write_text("{}")
	write_default_config(path, force=True)
	assert json.loads(path.read_text())["output_path"] == "ts"
