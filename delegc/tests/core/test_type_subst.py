# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from delegc.core.defs import AssocEqPredicate, BoundPredicate
from delegc.core.type_subst import Subst, apply_subst, subst_predicate
from delegc.core.types import (
	AssocProj,
	InterfaceRef,
	Named,
	ParamKind,
	ParamOwner,
	ParamRef,
	RefType,
	SelfType,
)


def _ref(name: str, owner: ParamOwner) -> ParamRef:
	return ParamRef(name, ParamKind.TYPE, owner)


def test_subst_owner_isolated() -> None:
	container_t = _ref("T", ParamOwner.CONTAINER)
	method_t = _ref("T", ParamOwner.METHOD)
	subst = Subst(params={(ParamOwner.CONTAINER, "T"): Named("u8")})
	assert apply_subst(container_t, subst) == Named("u8")
	assert apply_subst(method_t, subst) == method_t


def test_subst_nested_types() -> None:
	t = _ref("T", ParamOwner.METHOD)
	subst = Subst(params={(ParamOwner.METHOD, "T"): Named("i32")})
	ty = RefType(Named("Vec", (Named("Option", (t,)),)), mutable=True)
	assert apply_subst(ty, subst) == RefType(Named("Vec", (Named("Option", (Named("i32"),)),)), mutable=True)


def test_subst_does_not_resubstitute_values() -> None:
	# A replacement that mentions a parameter of the same name is final.
	t_method = _ref("T", ParamOwner.METHOD)
	t_synth = _ref("T", ParamOwner.SYNTH)
	subst = Subst(params={(ParamOwner.METHOD, "T"): t_synth, (ParamOwner.SYNTH, "T"): Named("u8")})
	assert apply_subst(t_method, subst) == t_synth


def test_self_and_projections() -> None:
	this = _ref("This", ParamOwner.SYNTH)
	iface = InterfaceRef("Source")
	subst = Subst(self_type=this, assoc_interface=iface)
	assert apply_subst(SelfType(), subst) == this
	assert apply_subst(AssocProj("Item"), subst) == AssocProj("Item", this, iface)
	pinned = Subst(self_type=this, assoc={"Item": Named("u32")}, assoc_interface=iface)
	assert apply_subst(AssocProj("Item"), pinned) == Named("u32")
	# Unknown Self leaves the projection alone.
	assert apply_subst(AssocProj("Item"), Subst()) == AssocProj("Item")


def test_subst_predicate_rewrites_subject_and_bound() -> None:
	t = _ref("T", ParamOwner.CONTAINER)
	p = _ref("P", ParamOwner.SYNTH)
	subst = Subst(params={(ParamOwner.CONTAINER, "T"): p})
	pred = BoundPredicate(t, InterfaceRef("Into", (t,)))
	assert subst_predicate(pred, subst) == BoundPredicate(p, InterfaceRef("Into", (p,)))
	eq = AssocEqPredicate(SelfType(), InterfaceRef("Source"), "Item", t)
	out = subst_predicate(eq, Subst(params=subst.params, self_type=p))
	assert out == AssocEqPredicate(p, InterfaceRef("Source"), "Item", p)
