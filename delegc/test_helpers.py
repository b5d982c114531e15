# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared helpers for tests that synthesize from declaration-file snippets.

They avoid re-spelling the parse → lower → synthesize sequence so test data can
be written the way a user writes a declaration file.
"""

from __future__ import annotations

from typing import Dict, Optional

from delegc.parser import ParsedUnit, parse_source
from delegc.reuse import (
	SynthesisOptions,
	SynthesisResult,
	lower_forwarding_decl,
	render_forwarding,
	synthesize_all,
)


def parse_unit(source: str) -> ParsedUnit:
	return parse_source(source, file="<test>")


def synthesize_source(
	source: str,
	*,
	options: Optional[SynthesisOptions] = None,
	jobs: int = 1,
) -> Dict[str, SynthesisResult]:
	"""
	Parse `source` and synthesize all of its reuse declarations.

	Results are keyed by synthesized function name; tests that reuse the same
	name twice should call `synthesize_all` directly.
	"""
	unit = parse_unit(source)
	pending = [lower_forwarding_decl(d) for d in unit.decls]
	results = synthesize_all(pending, unit.table, options=options, jobs=jobs)
	return {r.pending.name: r for r in results}


def signature_text(source: str, name: str) -> str:
	"""Rendered forwarding function `name`; fails the test with the diagnostics otherwise."""
	res = synthesize_source(source)[name]
	assert res.signature is not None, [d.message for d in res.diagnostics]
	return render_forwarding(res.signature)


__all__ = ["parse_unit", "signature_text", "synthesize_source"]
