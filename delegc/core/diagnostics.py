# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure shared by the parser, the reuse synthesizer and the
driver.

The core never prints anything; it hands `Diagnostic` values to whoever renders
them (the CLI here, a real compiler driver elsewhere).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a diagnostic (error/warning/note) produced for one declaration."""

	message: str
	code: str | None = None
	# Phase label: "parser" for front-end failures, "reuse" for synthesis.
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: List[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def format_human(self) -> str:
		head = f"{self.span.describe()}: {self.severity}"
		if self.code:
			head += f"[{self.code}]"
		lines = [f"{head}: {self.message}"]
		lines.extend(f"  note: {n}" for n in self.notes)
		return "\n".join(lines)


def has_errors(diagnostics: List[Diagnostic]) -> bool:
	return any(d.severity == "error" for d in diagnostics)


def diag_to_json(diag: Diagnostic, phase: str, source: str | None = None) -> Dict[str, Any]:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	return {
		"phase": diag.phase or phase,
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": diag.span.file or source,
		"line": diag.span.line,
		"column": diag.span.column,
		"notes": list(diag.notes),
	}


__all__ = ["Diagnostic", "diag_to_json", "has_errors"]
