# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from delegc.core.defs import AssocEqPredicate, BoundPredicate, GenericParamDef
from delegc.core.render import render_generic_param, render_predicate, render_type
from delegc.core.types import (
	AssocProj,
	ConstValue,
	Infer,
	InterfaceRef,
	Named,
	ParamKind,
	ParamOwner,
	ParamRef,
	RefType,
	Region,
	SelfType,
	TupleType,
)


def _p(name: str, kind: ParamKind = ParamKind.TYPE) -> ParamRef:
	return ParamRef(name, kind, ParamOwner.SYNTH)


def test_render_named_and_refs() -> None:
	assert render_type(Named("Vec", (_p("T"),))) == "Vec<T>"
	assert render_type(RefType(_p("T"), mutable=True, region=_p("a", ParamKind.REGION))) == "&'a mut T"
	assert render_type(RefType(Named("str"), region=Region("static"))) == "&'static str"
	assert render_type(RefType(SelfType())) == "&Self"


def test_render_tuples_and_placeholders() -> None:
	assert render_type(TupleType()) == "()"
	assert render_type(TupleType((Named("u8"),))) == "(u8,)"
	assert render_type(TupleType((Named("u8"), Infer()))) == "(u8, _)"
	assert render_type(Infer(ParamKind.REGION)) == "'_"
	assert render_type(ConstValue(3)) == "3"
	assert render_type(ConstValue(False)) == "false"


def test_render_projection_qualifies_once_interface_known() -> None:
	assert render_type(AssocProj("Item")) == "Self::Item"
	qualified = AssocProj("Item", _p("This"), InterfaceRef("Iterable", (_p("T"),)))
	assert render_type(qualified) == "<This as Iterable<T>>::Item"


def test_render_predicates() -> None:
	iface = InterfaceRef("Source")
	assert render_predicate(BoundPredicate(_p("This"), iface)) == "This: Source"
	eq = AssocEqPredicate(_p("This"), iface, "Item", Named("u32"))
	assert render_predicate(eq) == "<This as Source>::Item == u32"
	bound_with_binding = InterfaceRef("Iterable", (), (("Item", Named("u8")),))
	assert render_predicate(BoundPredicate(_p("I"), bound_with_binding)) == "I: Iterable<Item = u8>"


def test_render_generic_params() -> None:
	assert render_generic_param(GenericParamDef("a", ParamKind.REGION)) == "'a"
	assert render_generic_param(GenericParamDef("N", ParamKind.CONST, const_type=Named("usize"))) == "const N: usize"
	bounded = GenericParamDef("T", bounds=(InterfaceRef("Clone"), InterfaceRef("Debug")))
	assert render_generic_param(bounded) == "T: Clone + Debug"
	assert render_generic_param(GenericParamDef("T", default=Named("u8"))) == "T = u8"
