# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Structured failures of forwarding synthesis.

Every failure aborts synthesis of one declaration only. Errors carry a stable
`code` so tooling (and tests) can match on them without parsing messages; the
pipeline turns them into `Diagnostic` values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Tuple

from delegc.core.diagnostics import Diagnostic
from delegc.core.span import Span


@dataclass(frozen=True)
class SynthesisError(Exception):
	"""Base class: a structured, serializable synthesis failure."""

	code: ClassVar[str] = "REUSE_ERROR"

	message: str
	span: Span = field(default=Span())
	notes: Tuple[str, ...] = ()

	def __str__(self) -> str:
		return f"[{self.code}] {self.message}"

	def to_dict(self) -> Dict[str, Any]:
		return {
			"code": self.code,
			"message": self.message,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}

	def to_diagnostic(self) -> Diagnostic:
		return Diagnostic(
			message=self.message,
			code=self.code,
			phase="reuse",
			severity="error",
			span=self.span,
			notes=list(self.notes),
		)


class PathResolutionError(SynthesisError):
	"""Target not found, ambiguous, or given malformed generic arguments."""

	code: ClassVar[str] = "PATH_RESOLUTION"


class TypeRelativePathUnsupported(SynthesisError):
	"""Target named through a concrete type (`Bag::len`) instead of an interface."""

	code: ClassVar[str] = "TYPE_RELATIVE_PATH_UNSUPPORTED"


class ConstParameterUnspecified(SynthesisError):
	code: ClassVar[str] = "CONST_PARAMETER_UNSPECIFIED"


class AmbiguousDefaultParameter(SynthesisError):
	code: ClassVar[str] = "AMBIGUOUS_DEFAULT_PARAMETER"


class InvalidReceiverMapping(SynthesisError):
	code: ClassVar[str] = "INVALID_RECEIVER_MAPPING"


class ConflictingParameterBinding(SynthesisError):
	"""A non-defaulted parameter pinned twice with different values."""

	code: ClassVar[str] = "CONFLICTING_PARAMETER_BINDING"


__all__ = [
	"AmbiguousDefaultParameter",
	"ConflictingParameterBinding",
	"ConstParameterUnspecified",
	"InvalidReceiverMapping",
	"PathResolutionError",
	"SynthesisError",
	"TypeRelativePathUnsupported",
]
