# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parameter classification, naming and ordering.

Names are handed out in discovery order so the first occurrence of a name keeps
it; the final list is then grouped regions, types, constants, each group in
discovery order. The result depends only on the descriptor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from delegc.core.defs import AssocEqPredicate, GenericParamDef, Predicate
from delegc.core.types import (
	KIND_ORDER,
	AssocProj,
	InterfaceRef,
	Named,
	ParamKind,
	ParamOwner,
	ParamRef,
	Position,
	Region,
	TypeArg,
	walk,
)
from .descriptor import CalleeDescriptor
from .slots import Slot


@dataclass(frozen=True)
class SynthesisOptions:
	"""Naming knobs for synthesized parameters."""

	this_name: str = "This"
	receiver_name: str = "s"
	anon_type_prefix: str = "P"
	anon_region_prefix: str = "r"


@dataclass(frozen=True)
class AllocatedParam:
	slot: Slot
	param: GenericParamDef

	@property
	def ref(self) -> ParamRef:
		return self.param.as_ref(ParamOwner.SYNTH)


@dataclass(frozen=True)
class OrderedParams:
	params: Tuple[AllocatedParam, ...] = ()

	@property
	def generics(self) -> Tuple[GenericParamDef, ...]:
		return tuple(p.param for p in self.params)

	def ref_at(self, position: Position) -> Optional[ParamRef]:
		for p in self.params:
			if p.slot.position == position:
				return p.ref
		return None


def _scope_key(kind: ParamKind, name: str) -> str:
	return f"'{name}" if kind is ParamKind.REGION else name


def _fresh(base: str, kind: ParamKind, taken: Set[str]) -> str:
	if _scope_key(kind, base) not in taken:
		return base
	suffix = 1
	while _scope_key(kind, f"{base}{suffix}") in taken:
		suffix += 1
	return f"{base}{suffix}"


def name_slots(
	slots: Sequence[Slot],
	*,
	reserved: Iterable[str] = (),
	options: SynthesisOptions = SynthesisOptions(),
) -> List[AllocatedParam]:
	"""
	Give every slot a unique parameter name, in discovery order.

	`reserved` holds names already in scope, regions written with a leading `'`.
	"""
	taken: Set[str] = set(reserved)
	anon: Dict[bool, int] = {True: 0, False: 0}
	out: List[AllocatedParam] = []
	for slot in slots:
		if slot.is_receiver:
			name = _fresh(options.this_name, slot.kind, taken)
		elif slot.param is not None:
			name = _fresh(slot.param.name, slot.kind, taken)
		else:
			is_region = slot.kind is ParamKind.REGION
			prefix = options.anon_region_prefix if is_region else options.anon_type_prefix
			while True:
				name = f"{prefix}{anon[is_region]}"
				anon[is_region] += 1
				if _scope_key(slot.kind, name) not in taken:
					break
		taken.add(_scope_key(slot.kind, name))
		const_type = slot.param.const_type if slot.param is not None else None
		out.append(AllocatedParam(slot, GenericParamDef(name=name, kind=slot.kind, const_type=const_type)))
	return out


def _add_type_names(arg: Optional[TypeArg], out: Set[str]) -> None:
	if arg is None:
		return
	for _pos, node in walk(arg):
		if isinstance(node, Named) and "::" not in node.name:
			out.add(node.name)
		elif isinstance(node, Region):
			out.add(_scope_key(ParamKind.REGION, node.name))
		elif isinstance(node, AssocProj):
			_add_type_names(node.base, out)
			if node.interface is not None:
				_add_interface_names(node.interface, out)


def _add_interface_names(ref: InterfaceRef, out: Set[str]) -> None:
	if "::" not in ref.name:
		out.add(ref.name)
	for arg in ref.args:
		_add_type_names(arg, out)
	for _name, value in ref.bindings:
		_add_type_names(value, out)


def _add_generics_names(params: Iterable[GenericParamDef], out: Set[str]) -> None:
	for param in params:
		_add_type_names(param.default, out)
		_add_type_names(param.const_type, out)
		for bound in param.bounds:
			_add_interface_names(bound, out)


def _add_predicate_names(predicates: Iterable[Predicate], out: Set[str]) -> None:
	for pred in predicates:
		_add_type_names(pred.subject, out)
		if isinstance(pred, AssocEqPredicate):
			_add_interface_names(pred.interface, out)
			_add_type_names(pred.value, out)
		else:
			_add_interface_names(pred.bound, out)


def names_in_use(descriptor: CalleeDescriptor) -> Tuple[str, ...]:
	"""
	Concrete type and region names the forwarding signature may mention.

	Synthesized parameters are named around these as around the names of an
	enclosing scope. Only single-segment names can clash; `m::Foo` cannot.
	"""
	out: Set[str] = set()
	for arg in descriptor.container_args + descriptor.method_args:
		_add_type_names(arg, out)
	for _name, value in descriptor.assoc_type_bindings:
		_add_type_names(value, out)
	_add_type_names(descriptor.self_type, out)
	target = descriptor.target
	for param in target.params:
		_add_type_names(param.type, out)
	_add_type_names(target.ret, out)
	if target.receiver is not None:
		_add_type_names(target.receiver.region, out)
	_add_generics_names(target.generics, out)
	_add_predicate_names(target.where, out)
	iface = descriptor.interface
	if iface is not None:
		if "::" not in iface.name:
			out.add(iface.name)
		_add_generics_names(iface.generics, out)
		_add_predicate_names(iface.where, out)
	return tuple(sorted(out))


def order_params(
	slots: Sequence[Slot],
	*,
	reserved: Iterable[str] = (),
	options: SynthesisOptions = SynthesisOptions(),
) -> OrderedParams:
	named = name_slots(slots, reserved=reserved, options=options)
	groups: Dict[ParamKind, List[AllocatedParam]] = {kind: [] for kind in KIND_ORDER}
	for param in named:
		groups[param.slot.kind].append(param)
	return OrderedParams(tuple(p for kind in KIND_ORDER for p in groups[kind]))


__all__ = ["AllocatedParam", "OrderedParams", "SynthesisOptions", "name_slots", "names_in_use", "order_params"]
