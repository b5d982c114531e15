# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Forwarding declarations as handed to the synthesizer.

`reuse Iterable::<Item = T>::any { self.items }` inside `impl<T> Iterable<T> for
Bag<T>` becomes a `ForwardingDecl` whose `target` has two segments, whose
`receiver` projects `self.items`, and whose `impl` records the block's self type
and the generics already in scope.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from delegc.core.defs import GenericParamDef, ReceiverMode
from delegc.core.span import Span
from delegc.core.types import ParamKind, TypeArg


@dataclass(frozen=True)
class PathSegment:
	"""
	One `::`-separated segment of a target reference.

	`args` is None when no generic argument list was written on the segment;
	an empty tuple means `::<>`.
	"""

	name: str
	args: Optional[Tuple[TypeArg, ...]] = None
	bindings: Tuple[Tuple[str, TypeArg], ...] = ()


@dataclass(frozen=True)
class TargetRef:
	segments: Tuple[PathSegment, ...]
	span: Span = field(default=Span(), compare=False)

	def path(self, upto: Optional[int] = None) -> str:
		"""Segment names joined with `::` (the first `upto` segments if given)."""
		segs = self.segments if upto is None else self.segments[:upto]
		return "::".join(seg.name for seg in segs)


@dataclass(frozen=True)
class ReceiverTemplate:
	"""How the target's receiver is obtained from `self`: a field projection chain."""

	fields: Tuple[str, ...] = ()
	span: Span = field(default=Span(), compare=False)

	def expr(self) -> str:
		return ".".join(("self",) + self.fields)

	def apply(self, mode: ReceiverMode) -> str:
		"""Receiver argument for a callee taking `self` in `mode`."""
		expr = self.expr()
		if not self.fields or mode is ReceiverMode.VALUE:
			return expr
		if mode is ReceiverMode.REF_MUT:
			return f"&mut {expr}"
		return f"&{expr}"


@dataclass(frozen=True)
class ImplContext:
	"""The implementation block a declaration sits in."""

	self_type: TypeArg
	generics: Tuple[GenericParamDef, ...] = ()

	def names_in_scope(self) -> Tuple[str, ...]:
		"""Generic names already taken at the declaration site (regions with `'`)."""
		out = ["Self"]
		for param in self.generics:
			out.append(f"'{param.name}" if param.kind is ParamKind.REGION else param.name)
		return tuple(out)


@dataclass(frozen=True)
class ForwardingDecl:
	target: TargetRef
	rename: Optional[str] = None
	receiver: Optional[ReceiverTemplate] = None
	impl: Optional[ImplContext] = None
	span: Span = field(default=Span(), compare=False)

	@property
	def name(self) -> str:
		"""Name of the synthesized function."""
		if self.rename:
			return self.rename
		return self.target.segments[-1].name


@dataclass(frozen=True)
class DescriptorHandle:
	"""
	What resolution reads from a declaration: the target path, the receiver
	projection and the enclosing impl. A pending forwarding carries one of these
	instead of a resolved callee.
	"""

	target: TargetRef
	receiver: Optional[ReceiverTemplate] = None
	impl: Optional[ImplContext] = None
	span: Span = field(default=Span(), compare=False)

	@classmethod
	def from_decl(cls, decl: ForwardingDecl) -> "DescriptorHandle":
		return cls(target=decl.target, receiver=decl.receiver, impl=decl.impl, span=decl.span)


__all__ = ["DescriptorHandle", "ForwardingDecl", "ImplContext", "PathSegment", "ReceiverTemplate", "TargetRef"]
