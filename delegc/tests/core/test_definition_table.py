# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from delegc.core.defs import DefinitionError, DefinitionTable, FnSig, InterfaceDef, StructDef, StructField
from delegc.core.diagnostics import Diagnostic, diag_to_json, has_errors
from delegc.core.span import Span
from delegc.core.types import Named


def test_table_lookup_by_full_path() -> None:
	table = DefinitionTable.build(
		functions=[FnSig("m::f")],
		interfaces=[InterfaceDef("Iterable")],
		structs=[StructDef("Bag", fields=(StructField("items", Named("Vec")),))],
	)
	assert table.item_kind("m::f") == "function"
	assert table.item_kind("Iterable") == "interface"
	assert table.item_kind("Bag") == "struct"
	assert table.item_kind("f") is None
	assert table.structs["Bag"].field("items") is not None
	with pytest.raises(TypeError):
		table.functions["g"] = FnSig("g")  # type: ignore[index]


def test_table_rejects_duplicate_paths() -> None:
	with pytest.raises(DefinitionError, match="duplicate definition of `Bag`"):
		DefinitionTable.build(interfaces=[InterfaceDef("Bag")], structs=[StructDef("Bag")])


def test_diagnostic_rendering() -> None:
	diag = Diagnostic(
		message="cannot resolve `x`",
		code="PATH_RESOLUTION",
		phase="reuse",
		span=Span(file="a.dl", line=3, column=7),
		notes=["check the path"],
	)
	assert diag.format_human() == "a.dl:3:7: error[PATH_RESOLUTION]: cannot resolve `x`\n  note: check the path"
	assert has_errors([diag])
	assert not has_errors([Diagnostic(message="fyi", severity="warning")])
	payload = diag_to_json(Diagnostic(message="boom"), "parser", "b.dl")
	assert payload["phase"] == "parser"
	assert payload["file"] == "b.dl"
	assert payload["line"] is None


def test_span_from_loc() -> None:
	assert Span.from_loc(None) == Span()
	assert not Span.from_loc(None).is_known()
	known = Span(line=2, column=1)
	assert Span.from_loc(known) is known
	assert Span.from_loc(known, file="x.dl").describe() == "x.dl:2:1"
	assert Span().describe() == "<input>"
