# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Slot allocation.

A slot is a position in the callee's generic arguments whose value is unknown
and must become a generic parameter of the forwarding function. Positions are
tuple paths rooted at the receiver, the container argument list or the method
argument list:

	("receiver",)          the `Self` of an interface method
	("container", 0)       first interface argument
	("method", 0, 1)       second argument nested inside the first method argument

Traversal is depth-first, left to right, outer before inner, over
`[receiver bound, container args, method args]`. The receiver bound
`This: Interface<container args>` visits the container positions once already;
the container pass then meets the same positions again and they collapse.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional, Sequence

from delegc.core.defs import GenericParamDef
from delegc.core.types import Infer, ParamKind, Position, TypeArg, children
from .descriptor import CalleeDescriptor, CalleeKind, unhandled_kind
from .policy import ConstDecision, check_const_argument


class SlotOrigin(Enum):
	RECEIVER = auto()
	CONTAINER = auto()
	METHOD = auto()


RECEIVER_POSITION: Position = ("receiver",)


@dataclass(frozen=True)
class Slot:
	position: Position
	kind: ParamKind
	origin: SlotOrigin
	# Discovery index (0-based) across the whole descriptor.
	order: int
	# The declared parameter when the slot sits directly on one; None for
	# placeholders nested inside an explicit argument and for the receiver.
	param: Optional[GenericParamDef] = None

	@property
	def is_receiver(self) -> bool:
		return self.origin is SlotOrigin.RECEIVER


class _Allocator:
	def __init__(self, descriptor: CalleeDescriptor) -> None:
		self.descriptor = descriptor
		self.slots: List[Slot] = []
		self._seen: Dict[Position, Slot] = {}

	def add(self, position: Position, kind: ParamKind, origin: SlotOrigin, param: Optional[GenericParamDef]) -> None:
		if position in self._seen:
			return
		slot = Slot(position=position, kind=kind, origin=origin, order=len(self.slots), param=param)
		self._seen[position] = slot
		self.slots.append(slot)

	def walk_args(
		self,
		root: str,
		params: Sequence[GenericParamDef],
		args: Sequence[TypeArg],
		origin: SlotOrigin,
	) -> None:
		for index, (param, arg) in enumerate(zip(params, args)):
			position: Position = (root, index)
			if param.kind is ParamKind.CONST:
				if check_const_argument(param, arg, span=self.descriptor.span) is ConstDecision.SLOT:
					self.add(position, ParamKind.CONST, origin, param)
				continue
			if isinstance(arg, Infer):
				self.add(position, param.kind, origin, param)
				continue
			self.walk_nested(arg, position, origin)

	def walk_nested(self, arg: TypeArg, position: Position, origin: SlotOrigin) -> None:
		for index, child in enumerate(children(arg)):
			child_pos = position + (index,)
			if isinstance(child, Infer):
				self.add(child_pos, child.kind, origin, None)
			else:
				self.walk_nested(child, child_pos, origin)


def allocate_slots(descriptor: CalleeDescriptor) -> List[Slot]:
	"""Return the descriptor's slots in discovery order, without duplicates."""
	alloc = _Allocator(descriptor)
	kind = descriptor.kind
	if kind is CalleeKind.INTERFACE_METHOD:
		# This: Interface<container args>
		alloc.add(RECEIVER_POSITION, ParamKind.TYPE, SlotOrigin.RECEIVER, None)
		alloc.walk_args("container", descriptor.container_params, descriptor.container_args, SlotOrigin.CONTAINER)
	elif kind is CalleeKind.FREE or kind is CalleeKind.IMPLEMENTED_INTERFACE_METHOD:
		pass
	else:
		unhandled_kind(kind)
	alloc.walk_args("container", descriptor.container_params, descriptor.container_args, SlotOrigin.CONTAINER)
	alloc.walk_args("method", descriptor.method_params, descriptor.method_args, SlotOrigin.METHOD)
	return alloc.slots


__all__ = ["RECEIVER_POSITION", "Slot", "SlotOrigin", "allocate_slots"]
