# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generic-argument trees used throughout the synthesizer.

A `TypeArg` is anything that can fill a generic parameter position or appear in
a signature: a named (possibly applied) type, a reference, a tuple, a region,
a constant value, a placeholder (`_`), or a reference to a generic parameter.

Invariants:
- Nodes are frozen and store children as tuples, so trees are hashable and can
  be shared freely between declarations synthesized in parallel.
- Child order (`children()`) is the traversal order used for slot discovery;
  changing it changes user-visible parameter order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Tuple, Union


class ParamKind(Enum):
	"""Kind of a generic parameter (and of the positions it can fill)."""

	REGION = auto()
	TYPE = auto()
	CONST = auto()


# Declaration order required for generic parameter lists: regions first.
KIND_ORDER: Tuple[ParamKind, ...] = (ParamKind.REGION, ParamKind.TYPE, ParamKind.CONST)


def kind_rank(kind: ParamKind) -> int:
	return KIND_ORDER.index(kind)


class ParamOwner(Enum):
	"""Which generic list a `ParamRef` points into."""

	CONTAINER = auto()  # interface or struct generics
	METHOD = auto()  # generics of the function itself
	IMPL = auto()  # generics of the enclosing impl block; in scope, never substituted
	SYNTH = auto()  # generics of the synthesized forwarding function


class TypeArg:
	"""Base class for generic-argument tree nodes."""

	__slots__ = ()


@dataclass(frozen=True)
class Named(TypeArg):
	"""`Vec<T>`, `i32`, `m::Pair<A, B>` (name carries the full path)."""

	name: str
	args: Tuple[TypeArg, ...] = ()


@dataclass(frozen=True)
class RefType(TypeArg):
	"""`&'a mut T`; `region` is None when elided."""

	inner: TypeArg
	mutable: bool = False
	region: Optional[TypeArg] = None


@dataclass(frozen=True)
class TupleType(TypeArg):
	elems: Tuple[TypeArg, ...] = ()


@dataclass(frozen=True)
class Region(TypeArg):
	"""A pinned region such as `'static` (name stored without the apostrophe)."""

	name: str


@dataclass(frozen=True)
class ConstValue(TypeArg):
	value: Union[int, bool]


@dataclass(frozen=True)
class Infer(TypeArg):
	"""
	Placeholder for an unknown argument.

	`explicit=True` is a `_`/`'_` written in the declaration; `explicit=False`
	marks a position the declaration left out altogether. The distinction only
	matters for constant parameters (see `reuse.policy`).
	"""

	kind: ParamKind = ParamKind.TYPE
	explicit: bool = True


@dataclass(frozen=True)
class ParamRef(TypeArg):
	name: str
	kind: ParamKind
	owner: ParamOwner


@dataclass(frozen=True)
class SelfType(TypeArg):
	"""`Self` inside an interface definition."""


@dataclass(frozen=True)
class InterfaceRef:
	"""An interface applied to arguments, with associated-type bindings."""

	name: str
	args: Tuple[TypeArg, ...] = ()
	bindings: Tuple[Tuple[str, TypeArg], ...] = ()


@dataclass(frozen=True)
class AssocProj(TypeArg):
	"""
	Associated-type projection.

	`Self::Item` is `AssocProj("Item")`; once `Self` is known the projection is
	qualified as `<base as interface>::Item`.
	"""

	name: str
	base: TypeArg = SelfType()
	interface: Optional[InterfaceRef] = None


Position = Tuple[object, ...]


def children(arg: TypeArg) -> Tuple[TypeArg, ...]:
	"""Return the direct sub-arguments of `arg` in traversal order."""
	if isinstance(arg, Named):
		return arg.args
	if isinstance(arg, RefType):
		if arg.region is not None:
			return (arg.region, arg.inner)
		return (arg.inner,)
	if isinstance(arg, TupleType):
		return arg.elems
	return ()


def with_children(arg: TypeArg, new: Tuple[TypeArg, ...]) -> TypeArg:
	"""Rebuild `arg` with replaced children (inverse of `children`)."""
	if isinstance(arg, Named):
		return Named(arg.name, tuple(new))
	if isinstance(arg, RefType):
		if arg.region is not None:
			return RefType(new[1], arg.mutable, new[0])
		return RefType(new[0], arg.mutable, None)
	if isinstance(arg, TupleType):
		return TupleType(tuple(new))
	if new:
		raise ValueError(f"{type(arg).__name__} has no children")
	return arg


def walk(arg: TypeArg, position: Position = ()) -> Iterator[Tuple[Position, TypeArg]]:
	"""Yield `(position, node)` pairs depth-first, outer before inner."""
	yield position, arg
	for index, child in enumerate(children(arg)):
		yield from walk(child, position + (index,))


def contains_infer(arg: TypeArg) -> bool:
	return any(isinstance(node, Infer) for _pos, node in walk(arg))


def is_region_arg(arg: TypeArg) -> bool:
	if isinstance(arg, Region):
		return True
	if isinstance(arg, (Infer, ParamRef)):
		return arg.kind is ParamKind.REGION
	return False


__all__ = [
	"AssocProj",
	"ConstValue",
	"Infer",
	"InterfaceRef",
	"KIND_ORDER",
	"Named",
	"ParamKind",
	"ParamOwner",
	"ParamRef",
	"Position",
	"RefType",
	"Region",
	"SelfType",
	"TupleType",
	"TypeArg",
	"children",
	"contains_infer",
	"is_region_arg",
	"kind_rank",
	"walk",
	"with_children",
]
