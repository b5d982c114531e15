# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Put synthesized parameters back into the slots they were allocated for.

The filled argument lists keep the descriptor's shape exactly: concrete
arguments are copied through and every slot position holds the matching
synthesized parameter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from delegc.core.defs import GenericParamDef
from delegc.core.type_subst import Subst
from delegc.core.types import Infer, InterfaceRef, ParamOwner, Position, TypeArg, children, with_children
from .descriptor import CalleeDescriptor, CalleeKind, unhandled_kind
from .ordering import OrderedParams
from .slots import RECEIVER_POSITION


@dataclass(frozen=True)
class FilledCallee:
	container_args: Tuple[TypeArg, ...]
	method_args: Tuple[TypeArg, ...]
	# `This` for interface methods, the concrete self type inside an impl,
	# None for free functions.
	self_value: Optional[TypeArg]
	# Interface<filled container args>; None for free functions.
	interface_ref: Optional[InterfaceRef]
	subst: Subst


def fill_arg(arg: TypeArg, position: Position, ordered: OrderedParams) -> TypeArg:
	ref = ordered.ref_at(position)
	if ref is not None:
		return ref
	if isinstance(arg, Infer):
		raise AssertionError(f"placeholder at {position!r} was never allocated")
	kids = children(arg)
	if not kids:
		return arg
	return with_children(arg, tuple(fill_arg(k, position + (i,), ordered) for i, k in enumerate(kids)))


def _fill_list(root: str, args: Tuple[TypeArg, ...], ordered: OrderedParams) -> Tuple[TypeArg, ...]:
	return tuple(fill_arg(arg, (root, index), ordered) for index, arg in enumerate(args))


def _param_map(
	owner: ParamOwner,
	params: Tuple[GenericParamDef, ...],
	values: Tuple[TypeArg, ...],
) -> dict[tuple[ParamOwner, str], TypeArg]:
	return {(owner, p.name): v for p, v in zip(params, values)}


def fill_callee(descriptor: CalleeDescriptor, ordered: OrderedParams) -> FilledCallee:
	container = _fill_list("container", descriptor.container_args, ordered)
	method = _fill_list("method", descriptor.method_args, ordered)
	kind = descriptor.kind
	if kind is CalleeKind.FREE:
		self_value: Optional[TypeArg] = None
	elif kind is CalleeKind.INTERFACE_METHOD:
		self_value = ordered.ref_at(RECEIVER_POSITION)
	elif kind is CalleeKind.IMPLEMENTED_INTERFACE_METHOD:
		self_value = descriptor.self_type
	else:
		unhandled_kind(kind)
	iface_ref = None
	if descriptor.interface is not None:
		iface_ref = InterfaceRef(descriptor.interface.name, container)
	params = _param_map(ParamOwner.CONTAINER, descriptor.container_params, container)
	params.update(_param_map(ParamOwner.METHOD, descriptor.method_params, method))
	subst = Subst(
		params=params,
		self_type=self_value,
		assoc=dict(descriptor.assoc_type_bindings),
		assoc_interface=iface_ref,
	)
	return FilledCallee(
		container_args=container,
		method_args=method,
		self_value=self_value,
		interface_ref=iface_ref,
		subst=subst,
	)


__all__ = ["FilledCallee", "fill_arg", "fill_callee"]
