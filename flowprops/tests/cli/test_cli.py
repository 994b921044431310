# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from flowprops.cli import main


def _write_file(path: Path, text: str) -> Path:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")
	return path


def _run_json(argv: list[str], capsys: pytest.CaptureFixture[str]) -> tuple[int, dict]:
	rc = main([*argv, "--json"])
	out = capsys.readouterr().out
	payload = json.loads(out) if out.strip() else {}
	return rc, payload


def test_json_reports_generated_tables(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(
		tmp_path / "button.js",
		"""
import React from 'react';
import type {Size} from './types';

export default class Button extends React.Component {
  props: {a: number, size?: Size};
}
""".lstrip(),
	)
	_write_file(tmp_path / "types.js", "export type Size = 'small' | 'large';\n")
	rc, payload = _run_json([str(src)], capsys)
	assert rc == 0
	assert payload["exit_code"] == 0
	assert payload["diagnostics"] == []
	(component,) = payload["components"]
	assert component["file"] == str(src)
	assert (component["class"], component["field"], component["static_field"]) == ("Button", "props", "propTypes")
	assert component["line"] == 5
	assert component["table"] == (
		"static propTypes = {a: _PropTypes.number.isRequired, size: _PropTypes.oneOf(['small', 'large'])};"
	)


def test_conversion_errors_fail_with_a_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(
		tmp_path / "bad.js",
		"class Foo extends React.Component {\n  props: {a: string, [key: string]: number};\n}\n",
	)
	rc, payload = _run_json([str(src)], capsys)
	assert rc == 1
	assert payload["components"] == []
	(diag,) = payload["diagnostics"]
	assert (diag["phase"], diag["code"]) == ("convert", "MixedShapeError")
	assert (diag["file"], diag["line"]) == (str(src), 2)


def test_syntax_errors_are_parser_diagnostics(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(tmp_path / "broken.js", "type = ;\n")
	rc, payload = _run_json([str(src)], capsys)
	assert rc == 1
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "parser"
	assert diag["file"] == str(src)


def test_one_bad_file_does_not_hide_the_others(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	good = _write_file(tmp_path / "good.js", "class A extends React.Component {\n  props: {a: bool};\n}\n")
	bad = _write_file(tmp_path / "bad.js", "class B extends React.Component {\n  props: {a: Nope};\n}\n")
	rc, payload = _run_json([str(bad), str(good)], capsys)
	assert rc == 1
	assert [c["class"] for c in payload["components"]] == ["A"]
	assert [d["code"] for d in payload["diagnostics"]] == ["MissingReference"]


def test_option_flags_reach_the_converter(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(
		tmp_path / "main.js",
		"class A extends React.Component {\n  props: {a: Defaulted<?string>};\n}\n",
	)
	rc, payload = _run_json([str(src), "--has-default-name", "Defaulted"], capsys)
	assert rc == 0
	assert payload["components"][0]["table"] == "static propTypes = {a: _PropTypes.string};"
	rc, payload = _run_json([str(src), "--has-default-name", "Defaulted", "--no-nullable-types"], capsys)
	assert rc == 1
	assert payload["diagnostics"][0]["message"] == "maybe types unsupported"


def test_extension_flag_limits_import_following(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	src = _write_file(
		tmp_path / "main.js",
		"import type {T} from './types';\nclass A extends React.Component {\n  props: {t: T};\n}\n",
	)
	_write_file(tmp_path / "types.flow", "export type T = number;\n")
	rc, _ = _run_json([str(src)], capsys)
	assert rc == 0
	rc, payload = _run_json([str(src), "--extension", ".js"], capsys)
	assert rc == 1
	assert payload["diagnostics"][0]["code"] == "MissingReference"


def test_human_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	good = _write_file(tmp_path / "good.js", "class A extends React.Component {\n  props: {a: bool};\n}\n")
	bad = _write_file(tmp_path / "bad.js", "class B extends React.Component {\n  props = {};\n}\n")
	rc = main([str(good), str(bad)])
	captured = capsys.readouterr()
	assert rc == 1
	assert captured.out == (
		f"{good}:2:3: A\n"
		"static propTypes = {\n"
		"  a: _PropTypes.bool.isRequired,\n"
		"};\n"
	)
	assert captured.err.strip() == (
		f"{bad}:2:3: error: [MissingTypeAnnotation] React component props must have a type annotation"
	)
