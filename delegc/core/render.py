# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Textual rendering of types, bounds and generic parameters.

The output is Rust-like and stable; tests and the CLI compare it verbatim.
"""

from __future__ import annotations

from typing import Sequence

from .defs import AssocEqPredicate, BoundPredicate, GenericParamDef, Predicate
from .types import (
	AssocProj,
	ConstValue,
	Infer,
	InterfaceRef,
	Named,
	ParamKind,
	ParamRef,
	RefType,
	Region,
	SelfType,
	TupleType,
	TypeArg,
)


def render_type(arg: TypeArg) -> str:
	if isinstance(arg, Named):
		return arg.name + render_generic_args(arg.args)
	if isinstance(arg, RefType):
		out = "&"
		if arg.region is not None:
			out += render_type(arg.region) + " "
		if arg.mutable:
			out += "mut "
		return out + render_type(arg.inner)
	if isinstance(arg, TupleType):
		if len(arg.elems) == 1:
			return f"({render_type(arg.elems[0])},)"
		return "(" + ", ".join(render_type(e) for e in arg.elems) + ")"
	if isinstance(arg, Region):
		return f"'{arg.name}"
	if isinstance(arg, ConstValue):
		if isinstance(arg.value, bool):
			return "true" if arg.value else "false"
		return str(arg.value)
	if isinstance(arg, Infer):
		return "'_" if arg.kind is ParamKind.REGION else "_"
	if isinstance(arg, ParamRef):
		return f"'{arg.name}" if arg.kind is ParamKind.REGION else arg.name
	if isinstance(arg, SelfType):
		return "Self"
	if isinstance(arg, AssocProj):
		if arg.interface is None:
			return f"{render_type(arg.base)}::{arg.name}"
		return f"<{render_type(arg.base)} as {render_interface_ref(arg.interface)}>::{arg.name}"
	raise TypeError(f"cannot render {arg!r}")


def render_generic_args(args: Sequence[TypeArg], bindings: Sequence[tuple[str, TypeArg]] = ()) -> str:
	"""`<A, B, Item = C>`, or the empty string when there is nothing to show."""
	parts = [render_type(a) for a in args]
	parts.extend(f"{name} = {render_type(value)}" for name, value in bindings)
	if not parts:
		return ""
	return "<" + ", ".join(parts) + ">"


def render_interface_ref(ref: InterfaceRef) -> str:
	return ref.name + render_generic_args(ref.args, ref.bindings)


def render_predicate(pred: Predicate) -> str:
	if isinstance(pred, BoundPredicate):
		return f"{render_type(pred.subject)}: {render_interface_ref(pred.bound)}"
	if isinstance(pred, AssocEqPredicate):
		subject = render_type(pred.subject)
		iface = render_interface_ref(pred.interface)
		return f"<{subject} as {iface}>::{pred.name} == {render_type(pred.value)}"
	raise TypeError(f"cannot render {pred!r}")


def render_generic_param(param: GenericParamDef) -> str:
	if param.kind is ParamKind.REGION:
		out = f"'{param.name}"
	elif param.kind is ParamKind.CONST:
		out = f"const {param.name}"
		if param.const_type is not None:
			out += f": {render_type(param.const_type)}"
	else:
		out = param.name
		if param.bounds:
			out += ": " + " + ".join(render_interface_ref(b) for b in param.bounds)
	if param.default is not None:
		out += f" = {render_type(param.default)}"
	return out


__all__ = [
	"render_generic_args",
	"render_generic_param",
	"render_interface_ref",
	"render_predicate",
	"render_type",
]
