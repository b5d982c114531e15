# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Bound synthesis for forwarding functions.

Emits, in order:
1. the receiver bound `This: Interface<args>` plus one equality per associated
   binding, when `Self` is a synthesized parameter;
2. inline bounds of the interface's parameters, then the interface's `where`
   predicates;
3. inline bounds of the method's parameters, then the method's `where`
   predicates.
Everything is copied with parameters substituted; nothing else is inferred.
An associated type the declaration did not bind stays a projection on `This`
and is left for the downstream checker (it may fail there).
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from delegc.core.defs import AssocEqPredicate, BoundPredicate, GenericParamDef, Predicate
from delegc.core.type_subst import Subst, subst_interface_ref, subst_predicate
from delegc.core.types import TypeArg
from .descriptor import CalleeDescriptor, CalleeKind, unhandled_kind
from .fill import FilledCallee


class _PredicateList:
	def __init__(self) -> None:
		self.items: List[Predicate] = []

	def add(self, pred: Predicate) -> None:
		if pred not in self.items:
			self.items.append(pred)


def _copy_param_bounds(
	out: _PredicateList,
	params: Sequence[GenericParamDef],
	values: Sequence[TypeArg],
	subst: Subst,
) -> None:
	for param, value in zip(params, values):
		for bound in param.bounds:
			out.add(BoundPredicate(value, subst_interface_ref(bound, subst)))


def synthesize_predicates(descriptor: CalleeDescriptor, filled: FilledCallee) -> Tuple[Predicate, ...]:
	out = _PredicateList()
	subst = filled.subst
	kind = descriptor.kind
	if kind is CalleeKind.INTERFACE_METHOD:
		assert filled.self_value is not None and filled.interface_ref is not None
		out.add(BoundPredicate(filled.self_value, filled.interface_ref))
		for name, value in descriptor.assoc_type_bindings:
			out.add(AssocEqPredicate(filled.self_value, filled.interface_ref, name, value))
	elif kind is CalleeKind.FREE or kind is CalleeKind.IMPLEMENTED_INTERFACE_METHOD:
		pass
	else:
		unhandled_kind(kind)
	if descriptor.interface is not None:
		_copy_param_bounds(out, descriptor.container_params, filled.container_args, subst)
		for pred in descriptor.interface.where:
			out.add(subst_predicate(pred, subst))
	_copy_param_bounds(out, descriptor.method_params, filled.method_args, subst)
	for pred in descriptor.target.where:
		out.add(subst_predicate(pred, subst))
	return tuple(out.items)


__all__ = ["synthesize_predicates"]
