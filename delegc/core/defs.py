# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Item definitions and the read-only definition table.

The table is built once (by the parser or by hand in tests) and then only read.
It is passed explicitly to every stage that needs it; nothing here is global,
so independent declarations can be synthesized concurrently against one table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple, Union

from .span import Span
from .types import InterfaceRef, ParamKind, ParamOwner, ParamRef, RefType, SelfType, TypeArg


@dataclass(frozen=True)
class GenericParamDef:
	"""
	A generic parameter declaration.

	`bounds` are the inline bounds (`T: Clone + Debug`); `const_type` is only
	set for constant parameters (`const N: usize`).
	"""

	name: str
	kind: ParamKind = ParamKind.TYPE
	default: Optional[TypeArg] = None
	bounds: Tuple[InterfaceRef, ...] = ()
	const_type: Optional[TypeArg] = None

	def as_ref(self, owner: ParamOwner) -> ParamRef:
		return ParamRef(self.name, self.kind, owner)


@dataclass(frozen=True)
class BoundPredicate:
	"""`subject: bound`."""

	subject: TypeArg
	bound: InterfaceRef


@dataclass(frozen=True)
class AssocEqPredicate:
	"""`<subject as interface>::name == value`."""

	subject: TypeArg
	interface: InterfaceRef
	name: str
	value: TypeArg


Predicate = Union[BoundPredicate, AssocEqPredicate]


class ReceiverMode(Enum):
	VALUE = auto()  # self
	REF = auto()  # &self
	REF_MUT = auto()  # &mut self


@dataclass(frozen=True)
class Receiver:
	mode: ReceiverMode
	region: Optional[TypeArg] = None

	def self_type(self) -> TypeArg:
		"""The receiver's type written in terms of `Self`."""
		if self.mode is ReceiverMode.VALUE:
			return SelfType()
		return RefType(SelfType(), self.mode is ReceiverMode.REF_MUT, self.region)


@dataclass(frozen=True)
class FnParam:
	name: str
	type: TypeArg


@dataclass(frozen=True)
class FnSig:
	"""
	A function or interface-method signature.

	Free functions carry their full path in `name` (`m::foo`); methods carry the
	bare method name.
	"""

	name: str
	generics: Tuple[GenericParamDef, ...] = ()
	params: Tuple[FnParam, ...] = ()
	ret: Optional[TypeArg] = None
	receiver: Optional[Receiver] = None
	where: Tuple[Predicate, ...] = ()
	span: Span = field(default=Span(), compare=False)

	@property
	def simple_name(self) -> str:
		return self.name.rsplit("::", 1)[-1]


@dataclass(frozen=True)
class InterfaceDef:
	name: str
	generics: Tuple[GenericParamDef, ...] = ()
	assoc_types: Tuple[str, ...] = ()
	methods: Tuple[FnSig, ...] = ()
	where: Tuple[Predicate, ...] = ()
	span: Span = field(default=Span(), compare=False)

	def method(self, name: str) -> Optional[FnSig]:
		for sig in self.methods:
			if sig.name == name:
				return sig
		return None


@dataclass(frozen=True)
class StructField:
	name: str
	type: TypeArg


@dataclass(frozen=True)
class StructDef:
	name: str
	generics: Tuple[GenericParamDef, ...] = ()
	fields: Tuple[StructField, ...] = ()
	span: Span = field(default=Span(), compare=False)

	def field(self, name: str) -> Optional[StructField]:
		for fld in self.fields:
			if fld.name == name:
				return fld
		return None


class DefinitionError(ValueError):
	"""Raised when the table cannot be built (duplicate item paths)."""

	def __init__(self, message: str, *, span: Span | None = None) -> None:
		super().__init__(message)
		self.span = span or Span()


@dataclass(frozen=True)
class DefinitionTable:
	"""Read-only lookup of functions, interfaces and structs by full path."""

	functions: Mapping[str, FnSig] = field(default_factory=lambda: MappingProxyType({}))
	interfaces: Mapping[str, InterfaceDef] = field(default_factory=lambda: MappingProxyType({}))
	structs: Mapping[str, StructDef] = field(default_factory=lambda: MappingProxyType({}))

	@classmethod
	def build(
		cls,
		*,
		functions: Iterable[FnSig] = (),
		interfaces: Iterable[InterfaceDef] = (),
		structs: Iterable[StructDef] = (),
	) -> "DefinitionTable":
		seen: dict[str, str] = {}
		fns: dict[str, FnSig] = {}
		ifaces: dict[str, InterfaceDef] = {}
		strs: dict[str, StructDef] = {}
		for label, items, sink in (
			("function", functions, fns),
			("interface", interfaces, ifaces),
			("struct", structs, strs),
		):
			for item in items:
				prior = seen.get(item.name)
				if prior is not None:
					raise DefinitionError(
						f"duplicate definition of `{item.name}` (already defined as a {prior})",
						span=item.span,
					)
				seen[item.name] = label
				sink[item.name] = item  # type: ignore[index]
		return cls(
			functions=MappingProxyType(fns),
			interfaces=MappingProxyType(ifaces),
			structs=MappingProxyType(strs),
		)

	def item_kind(self, path: str) -> Optional[str]:
		if path in self.functions:
			return "function"
		if path in self.interfaces:
			return "interface"
		if path in self.structs:
			return "struct"
		return None


__all__ = [
	"AssocEqPredicate",
	"BoundPredicate",
	"DefinitionError",
	"DefinitionTable",
	"FnParam",
	"FnSig",
	"GenericParamDef",
	"InterfaceDef",
	"Predicate",
	"Receiver",
	"ReceiverMode",
	"StructDef",
	"StructField",
]
