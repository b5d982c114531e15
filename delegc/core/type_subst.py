# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Generic parameter substitution helpers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .defs import AssocEqPredicate, BoundPredicate, Predicate
from .types import (
	AssocProj,
	InterfaceRef,
	ParamOwner,
	ParamRef,
	SelfType,
	TypeArg,
	children,
	with_children,
)


@dataclass
class Subst:
	"""
	Owner-scoped parameter substitution plus the meaning of `Self`.

	Replacement values are already expressed in the caller's scope and are
	returned as-is (never substituted a second time).
	"""

	params: Dict[Tuple[ParamOwner, str], TypeArg] = field(default_factory=dict)
	self_type: Optional[TypeArg] = None
	# Associated-type bindings (`Item = T`) and the interface unbound
	# projections get qualified with once `Self` is known.
	assoc: Dict[str, TypeArg] = field(default_factory=dict)
	assoc_interface: Optional[InterfaceRef] = None


def apply_subst(arg: TypeArg, subst: Subst) -> TypeArg:
	"""Apply a substitution to a TypeArg, returning a (possibly new) TypeArg."""
	if isinstance(arg, ParamRef):
		return subst.params.get((arg.owner, arg.name), arg)
	if isinstance(arg, SelfType):
		return subst.self_type if subst.self_type is not None else arg
	if isinstance(arg, AssocProj):
		if isinstance(arg.base, SelfType) and arg.interface is None:
			bound = subst.assoc.get(arg.name)
			if bound is not None:
				return bound
			if subst.self_type is not None:
				return AssocProj(arg.name, subst.self_type, subst.assoc_interface)
			return arg
		iface = subst_interface_ref(arg.interface, subst) if arg.interface is not None else None
		return AssocProj(arg.name, apply_subst(arg.base, subst), iface)
	kids = children(arg)
	if not kids:
		return arg
	return with_children(arg, tuple(apply_subst(k, subst) for k in kids))


def subst_interface_ref(ref: InterfaceRef, subst: Subst) -> InterfaceRef:
	return InterfaceRef(
		ref.name,
		tuple(apply_subst(a, subst) for a in ref.args),
		tuple((name, apply_subst(value, subst)) for name, value in ref.bindings),
	)


def subst_predicate(pred: Predicate, subst: Subst) -> Predicate:
	if isinstance(pred, BoundPredicate):
		return BoundPredicate(apply_subst(pred.subject, subst), subst_interface_ref(pred.bound, subst))
	if isinstance(pred, AssocEqPredicate):
		return AssocEqPredicate(
			apply_subst(pred.subject, subst),
			subst_interface_ref(pred.interface, subst),
			pred.name,
			apply_subst(pred.value, subst),
		)
	raise TypeError(f"unknown predicate {pred!r}")


__all__ = ["Subst", "apply_subst", "subst_interface_ref", "subst_predicate"]
