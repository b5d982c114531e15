# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

import pytest

from delegc.driver import main

SOURCE = """
trait Trait<T> { fn foo<U>(&self, x: U, y: T); }
fn wrap<T>(x: T) -> T;
reuse Trait::foo;
reuse wrap::<u8> as wrap_u8;
"""


def _write(tmp_path: Path, text: str) -> Path:
	path = tmp_path / "decls.dl"
	path.write_text(text)
	return path


def test_cli_prints_signatures(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	path = _write(tmp_path, SOURCE)
	assert main([str(path)]) == 0
	out = capsys.readouterr()
	assert out.out.splitlines() == [
		"fn foo<This, T, U>(s: &This, x: U, y: T) where This: Trait<T> { <This as Trait<T>>::foo::<U>(s, x, y) }",
		"fn wrap_u8(x: u8) -> u8 { wrap::<u8>(x) }",
	]
	assert out.err == ""


def test_cli_json_payload(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	path = _write(tmp_path, SOURCE + "reuse nowhere;\n")
	assert main([str(path), "--json", "--jobs", "2"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	assert [s["name"] for s in payload["signatures"]] == ["foo", "wrap_u8"]
	assert payload["signatures"][1]["text"] == "fn wrap_u8(x: u8) -> u8 { wrap::<u8>(x) }"
	(diag,) = payload["diagnostics"]
	assert diag["phase"] == "reuse"
	assert diag["code"] == "PATH_RESOLUTION"
	assert diag["file"] == str(path)
	assert diag["line"] == 6


def test_cli_only_filters_declarations(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	path = _write(tmp_path, SOURCE)
	assert main([str(path), "--only", "wrap_u8"]) == 0
	assert capsys.readouterr().out.splitlines() == ["fn wrap_u8(x: u8) -> u8 { wrap::<u8>(x) }"]
	assert main([str(path), "--only", "nope"]) == 1
	assert "UNKNOWN_DECLARATION" in capsys.readouterr().err


def test_cli_reports_parse_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	path = _write(tmp_path, "fn broken(;\n")
	assert main([str(path), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	assert payload["signatures"] == []
	assert payload["diagnostics"][0]["phase"] == "parser"
	assert payload["diagnostics"][0]["line"] == 1


def test_cli_reports_unreadable_source(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
	assert main([str(tmp_path / "missing.dl")]) == 1
	assert "IO_ERROR" in capsys.readouterr().err


def test_cli_rejects_zero_jobs(tmp_path: Path) -> None:
	path = _write(tmp_path, SOURCE)
	with pytest.raises(SystemExit) as excinfo:
		main([str(path), "--jobs", "0"])
	assert excinfo.value.code == 2
