# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from delegc.core.defs import FnSig, GenericParamDef, InterfaceDef
from delegc.core.types import ConstValue, Infer, Named, ParamKind, ParamOwner, ParamRef
from delegc.reuse import CalleeDescriptor, CalleeKind, ConstParameterUnspecified, resolve_descriptor
from delegc.reuse.ordering import SynthesisOptions, name_slots, names_in_use, order_params
from delegc.reuse.slots import RECEIVER_POSITION, SlotOrigin, allocate_slots
from delegc.test_helpers import parse_unit


def _descriptor(src: str) -> CalleeDescriptor:
	unit = parse_unit(src)
	return resolve_descriptor(unit.decls[-1], unit.table)


def test_interface_method_slots_in_discovery_order() -> None:
	desc = _descriptor(
		"""
		trait Trait<A, B> { fn foo<U>(&self, x: U, a: A, b: B); }
		reuse Trait::foo;
		"""
	)
	slots = allocate_slots(desc)
	assert [s.position for s in slots] == [
		RECEIVER_POSITION,
		("container", 0),
		("container", 1),
		("method", 0),
	]
	assert [s.origin for s in slots] == [
		SlotOrigin.RECEIVER,
		SlotOrigin.CONTAINER,
		SlotOrigin.CONTAINER,
		SlotOrigin.METHOD,
	]
	assert [s.order for s in slots] == [0, 1, 2, 3]


def test_interface_method_without_receiver_still_gets_this() -> None:
	desc = _descriptor("trait Make { fn make() -> Self; } reuse Make::make;")
	slots = allocate_slots(desc)
	assert [s.position for s in slots] == [RECEIVER_POSITION]


def test_nested_placeholders_left_to_right_outer_first() -> None:
	desc = _descriptor("fn foo<T, U>(x: T, y: U); reuse foo::<Pair<_, Vec<_>>, &'_ _>;")
	slots = allocate_slots(desc)
	assert [s.position for s in slots] == [
		("method", 0, 0),
		("method", 0, 1, 0),
		("method", 1, 0),
		("method", 1, 1),
	]
	assert [s.kind for s in slots] == [ParamKind.TYPE, ParamKind.TYPE, ParamKind.REGION, ParamKind.TYPE]
	assert all(s.param is None for s in slots)


def test_pinned_positions_allocate_nothing() -> None:
	desc = _descriptor(
		"""
		trait Iterable<Item> { fn any<F>(predicate: F) -> bool; }
		struct Bag<T> { items: Vec<T> }
		impl<T> Iterable<T> for Bag<T> { reuse Iterable::<Item = T>::any; }
		"""
	)
	slots = allocate_slots(desc)
	assert [s.position for s in slots] == [("method", 0)]


def test_const_positions_follow_policy() -> None:
	sig = FnSig(
		"fill",
		generics=(
			GenericParamDef("T"),
			GenericParamDef("N", ParamKind.CONST, const_type=Named("usize")),
			GenericParamDef("M", ParamKind.CONST, default=ConstValue(2), const_type=Named("usize")),
		),
	)
	desc = CalleeDescriptor(
		kind=CalleeKind.FREE,
		path="fill",
		target=sig,
		method_args=(Infer(explicit=False), ConstValue(8), Infer(ParamKind.CONST, explicit=False)),
	)
	slots = allocate_slots(desc)
	assert [(s.position, s.kind) for s in slots] == [
		(("method", 0), ParamKind.TYPE),
		(("method", 2), ParamKind.CONST),
	]
	missing = CalleeDescriptor(
		kind=CalleeKind.FREE,
		path="fill",
		target=sig,
		method_args=(Infer(explicit=False), Infer(ParamKind.CONST, explicit=False), ConstValue(1)),
	)
	with pytest.raises(ConstParameterUnspecified):
		allocate_slots(missing)


def test_descriptor_validates_shape() -> None:
	sig = FnSig("f", generics=(GenericParamDef("T"),))
	with pytest.raises(ValueError, match="method args"):
		CalleeDescriptor(kind=CalleeKind.FREE, path="f", target=sig)
	with pytest.raises(ValueError, match="needs an interface"):
		CalleeDescriptor(
			kind=CalleeKind.INTERFACE_METHOD,
			path="f",
			target=sig,
			method_args=(Infer(),),
		)
	with pytest.raises(ValueError, match="self type"):
		CalleeDescriptor(
			kind=CalleeKind.IMPLEMENTED_INTERFACE_METHOD,
			path="I",
			target=sig,
			interface=InterfaceDef("I"),
			method_args=(Infer(),),
		)


def test_order_params_groups_by_kind_stably() -> None:
	desc = _descriptor("fn mix<T, 'a, const N: usize = 1, U, 'b>(x: &'a T, y: &'b U); reuse mix;")
	ordered = order_params(allocate_slots(desc))
	assert [(g.name, g.kind) for g in ordered.generics] == [
		("a", ParamKind.REGION),
		("b", ParamKind.REGION),
		("T", ParamKind.TYPE),
		("U", ParamKind.TYPE),
		("N", ParamKind.CONST),
	]
	assert all(g.default is None for g in ordered.generics)
	assert ordered.generics[-1].const_type == Named("usize")


def test_name_slots_avoids_reserved_names() -> None:
	desc = _descriptor("fn foo<T>(x: T, y: T); reuse foo::<Pair<_, &'_ _>>;")
	slots = allocate_slots(desc)
	named = name_slots(slots, reserved=("P0", "'r0", "T"))
	assert [p.param.name for p in named] == ["P1", "r1", "P2"]


def test_name_slots_freshens_declared_names_and_this() -> None:
	desc = _descriptor("trait Trait<This> { fn foo<T>(&self, x: T); } reuse Trait::foo;")
	named = name_slots(allocate_slots(desc), reserved=("T",))
	assert [p.param.name for p in named] == ["This", "This1", "T1"]


def test_name_slots_uses_options() -> None:
	desc = _descriptor("trait Make { fn make() -> Self; } reuse Make::make;")
	named = name_slots(allocate_slots(desc), options=SynthesisOptions(this_name="Recv"))
	assert [p.param.name for p in named] == ["Recv"]
	assert named[0].ref == ParamRef("Recv", ParamKind.TYPE, ParamOwner.SYNTH)


def test_names_in_use_collects_single_segment_names() -> None:
	desc = _descriptor(
		"trait Tr<T: Clone> { fn f<U: Into<T>>(&'a self, x: m::Node, y: Pair<U, u8>) -> Out; }"
		" reuse Tr::<Vec<u8>>::f;"
	)
	assert names_in_use(desc) == ("'a", "Clone", "Into", "Out", "Pair", "Tr", "Vec", "u8")
