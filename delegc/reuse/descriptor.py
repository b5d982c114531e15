# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Callee descriptor: the resolved, read-only view of a forwarding target.

The descriptor is produced once by `reuse.resolve` and consumed read-only by the
allocator, predicate synthesizer and builder. Its argument tuples mirror the
callee's generic lists position for position; positions the declaration left
open hold `Infer` placeholders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import NoReturn, Optional, Tuple

from delegc.core.defs import FnSig, GenericParamDef, InterfaceDef
from delegc.core.span import Span
from delegc.core.types import TypeArg
from .decl import ReceiverTemplate


class CalleeKind(Enum):
	"""Shape of the forwarding target. Every dispatch on it must be exhaustive."""

	FREE = auto()
	INTERFACE_METHOD = auto()  # `Self` unknown: becomes the `This` parameter
	IMPLEMENTED_INTERFACE_METHOD = auto()  # reused inside an impl; `Self` known


def unhandled_kind(kind: CalleeKind) -> NoReturn:
	raise AssertionError(f"unhandled callee kind {kind!r}")


@dataclass(frozen=True)
class CalleeDescriptor:
	kind: CalleeKind
	# Free-function path, or the interface path for method kinds.
	path: str
	target: FnSig
	interface: Optional[InterfaceDef] = None
	container_args: Tuple[TypeArg, ...] = ()
	method_args: Tuple[TypeArg, ...] = ()
	receiver_expr_template: Optional[ReceiverTemplate] = None
	# Bindings for the interface's associated types, in declaration order.
	assoc_type_bindings: Tuple[Tuple[str, TypeArg], ...] = ()
	# Concrete `Self` for IMPLEMENTED_INTERFACE_METHOD.
	self_type: Optional[TypeArg] = None
	# Generic names already in scope where the forwarding function is emitted.
	scope_names: Tuple[str, ...] = ()
	span: Span = field(default=Span(), compare=False)

	def __post_init__(self) -> None:
		if len(self.container_args) != len(self.container_params):
			raise ValueError(
				f"{self.path}: {len(self.container_args)} container args for {len(self.container_params)} params"
			)
		if len(self.method_args) != len(self.method_params):
			raise ValueError(f"{self.path}: {len(self.method_args)} method args for {len(self.method_params)} params")
		kind = self.kind
		if kind is CalleeKind.FREE:
			if self.interface is not None or self.self_type is not None:
				raise ValueError(f"{self.path}: free function descriptor cannot carry an interface or self type")
		elif kind is CalleeKind.INTERFACE_METHOD:
			if self.interface is None or self.self_type is not None:
				raise ValueError(f"{self.path}: interface method descriptor needs an interface and no self type")
		elif kind is CalleeKind.IMPLEMENTED_INTERFACE_METHOD:
			if self.interface is None or self.self_type is None:
				raise ValueError(f"{self.path}: implemented method descriptor needs an interface and a self type")
		else:
			unhandled_kind(kind)

	@property
	def container_params(self) -> Tuple[GenericParamDef, ...]:
		return self.interface.generics if self.interface is not None else ()

	@property
	def method_params(self) -> Tuple[GenericParamDef, ...]:
		return self.target.generics

	@property
	def has_receiver(self) -> bool:
		return self.target.receiver is not None


__all__ = ["CalleeDescriptor", "CalleeKind", "unhandled_kind"]
