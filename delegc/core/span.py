# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source spans attached to declarations and diagnostics.

The parser hands us lark `Meta` objects (or nothing, for items built by hand in
tests). A Span keeps the best-effort file/line/column view of either.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span; `Span()` denotes an unknown location."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from a parser location object.

		Accepts an existing Span (returned unchanged unless `file` is supplied
		and missing), a lark `Meta`/`Token`, or None.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if file is not None and loc.file is None:
				return cls(file, loc.line, loc.column, loc.end_line, loc.end_column)
			return loc
		# lark Meta objects without positions raise on attribute access.
		if getattr(loc, "empty", False):
			return cls(file=file)
		return cls(
			file=file,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
		)

	def is_known(self) -> bool:
		return self.line is not None

	def describe(self) -> str:
		"""Render as `file:line:column` (missing parts omitted)."""
		parts = [self.file or "<input>"]
		if self.line is not None:
			parts.append(str(self.line))
			if self.column is not None:
				parts.append(str(self.column))
		return ":".join(parts)


__all__ = ["Span"]
