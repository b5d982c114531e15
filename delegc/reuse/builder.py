# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Signature and body construction for forwarding functions.

Construction is two-staged. Lowering a declaration yields a `PendingForwarding`:
the function's name plus an opaque handle on the callee, with its parameters
and return type marked `DEFERRED`. Once the callee is resolved,
`ForwardingBuilder` produces a new, complete `ForwardingSignature`; the pending
node is never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from delegc.core.defs import GenericParamDef, Predicate, ReceiverMode
from delegc.core.render import (
	render_generic_args,
	render_generic_param,
	render_interface_ref,
	render_predicate,
	render_type,
)
from delegc.core.span import Span
from delegc.core.type_subst import apply_subst
from delegc.core.types import InterfaceRef, RefType, TypeArg
from .decl import DescriptorHandle, ForwardingDecl
from .descriptor import CalleeDescriptor, CalleeKind, unhandled_kind
from .fill import FilledCallee
from .ordering import OrderedParams, SynthesisOptions


class _Deferred:
	"""Marker for a signature part that is filled once the callee is resolved."""

	_instance: Optional["_Deferred"] = None

	def __new__(cls) -> "_Deferred":
		if cls._instance is None:
			cls._instance = super().__new__(cls)
		return cls._instance

	def __repr__(self) -> str:
		return "DEFERRED"


DEFERRED = _Deferred()


@dataclass(frozen=True)
class PendingForwarding:
	decl: ForwardingDecl
	handle: DescriptorHandle
	params: Any = DEFERRED
	ret: Any = DEFERRED

	@property
	def name(self) -> str:
		return self.decl.name


def lower_forwarding_decl(decl: ForwardingDecl) -> PendingForwarding:
	return PendingForwarding(decl=decl, handle=DescriptorHandle.from_decl(decl))


@dataclass(frozen=True)
class FormalParam:
	name: str
	type: TypeArg
	# Set for the `self` receiver of a forwarding function inside an impl.
	receiver: Optional[ReceiverMode] = None


@dataclass(frozen=True)
class ForwardCall:
	"""The single call expression a forwarding function's body consists of."""

	kind: CalleeKind
	path: str
	method: Optional[str]
	qself: Optional[TypeArg]
	interface: Optional[InterfaceRef]
	generic_args: Tuple[TypeArg, ...]
	args: Tuple[str, ...]


@dataclass(frozen=True)
class ForwardingSignature:
	name: str
	kind: CalleeKind
	generics: Tuple[GenericParamDef, ...]
	predicates: Tuple[Predicate, ...]
	params: Tuple[FormalParam, ...]
	ret: Optional[TypeArg]
	body: ForwardCall
	span: Span = field(default=Span(), compare=False)


def _fresh_value_name(base: str, taken: set[str]) -> str:
	name = base
	suffix = 1
	while name in taken:
		name = f"{base}{suffix}"
		suffix += 1
	return name


class ForwardingBuilder:
	def __init__(
		self,
		descriptor: CalleeDescriptor,
		*,
		name: str,
		span: Span = Span(),
		options: SynthesisOptions = SynthesisOptions(),
	) -> None:
		self.descriptor = descriptor
		self.name = name
		self.span = span
		self.options = options

	@classmethod
	def from_pending(
		cls,
		pending: PendingForwarding,
		descriptor: CalleeDescriptor,
		*,
		options: SynthesisOptions = SynthesisOptions(),
	) -> "ForwardingBuilder":
		return cls(descriptor, name=pending.name, span=pending.decl.span, options=options)

	def _formal_params(self, filled: FilledCallee) -> Tuple[List[FormalParam], List[str]]:
		desc = self.descriptor
		target = desc.target
		params: List[FormalParam] = []
		args: List[str] = []
		receiver = target.receiver
		if receiver is not None:
			kind = desc.kind
			if kind is CalleeKind.INTERFACE_METHOD:
				taken = {p.name for p in target.params}
				name = _fresh_value_name(self.options.receiver_name, taken)
				params.append(FormalParam(name, apply_subst(receiver.self_type(), filled.subst)))
				args.append(name)
			elif kind is CalleeKind.IMPLEMENTED_INTERFACE_METHOD:
				# `self` here is the impl's own Self, not the callee's.
				outer = replace(filled.subst, self_type=None)
				params.append(FormalParam("self", apply_subst(receiver.self_type(), outer), receiver=receiver.mode))
				template = desc.receiver_expr_template
				args.append(template.apply(receiver.mode) if template is not None else "self")
			elif kind is CalleeKind.FREE:
				raise AssertionError(f"free function `{desc.path}` declares a receiver")
			else:
				unhandled_kind(kind)
		for param in target.params:
			params.append(FormalParam(param.name, apply_subst(param.type, filled.subst)))
			args.append(param.name)
		return params, args

	def _call(self, filled: FilledCallee, args: List[str]) -> ForwardCall:
		desc = self.descriptor
		kind = desc.kind
		if kind is CalleeKind.FREE:
			return ForwardCall(
				kind=kind,
				path=desc.path,
				method=None,
				qself=None,
				interface=None,
				generic_args=filled.method_args,
				args=tuple(args),
			)
		if kind is CalleeKind.INTERFACE_METHOD or kind is CalleeKind.IMPLEMENTED_INTERFACE_METHOD:
			return ForwardCall(
				kind=kind,
				path=desc.path,
				method=desc.target.name,
				qself=filled.self_value,
				interface=filled.interface_ref,
				generic_args=filled.method_args,
				args=tuple(args),
			)
		unhandled_kind(kind)

	def build(
		self,
		ordered: OrderedParams,
		filled: FilledCallee,
		predicates: Tuple[Predicate, ...],
	) -> ForwardingSignature:
		params, args = self._formal_params(filled)
		ret = self.descriptor.target.ret
		return ForwardingSignature(
			name=self.name,
			kind=self.descriptor.kind,
			generics=ordered.generics,
			predicates=predicates,
			params=tuple(params),
			ret=apply_subst(ret, filled.subst) if ret is not None else None,
			body=self._call(filled, args),
			span=self.span,
		)


def render_formal_param(param: FormalParam) -> str:
	if param.receiver is not None:
		ty = param.type
		if not isinstance(ty, RefType):
			return "self"
		out = "&"
		if ty.region is not None:
			out += render_type(ty.region) + " "
		if ty.mutable:
			out += "mut "
		return out + "self"
	return f"{param.name}: {render_type(param.type)}"


def render_call(call: ForwardCall) -> str:
	turbofish = ""
	if call.generic_args:
		turbofish = "::" + render_generic_args(call.generic_args)
	args = ", ".join(call.args)
	if call.kind is CalleeKind.FREE:
		return f"{call.path}{turbofish}({args})"
	assert call.qself is not None and call.interface is not None
	qualified = f"<{render_type(call.qself)} as {render_interface_ref(call.interface)}>"
	return f"{qualified}::{call.method}{turbofish}({args})"


def render_forwarding(sig: ForwardingSignature) -> str:
	"""`fn name<...>(...) -> R where ... { call }` on one line."""
	out = f"fn {sig.name}"
	if sig.generics:
		out += "<" + ", ".join(render_generic_param(g) for g in sig.generics) + ">"
	out += "(" + ", ".join(render_formal_param(p) for p in sig.params) + ")"
	if sig.ret is not None:
		out += f" -> {render_type(sig.ret)}"
	if sig.predicates:
		out += " where " + ", ".join(render_predicate(p) for p in sig.predicates)
	return out + f" {{ {render_call(sig.body)} }}"


def signature_to_json(sig: ForwardingSignature) -> Dict[str, Any]:
	return {
		"name": sig.name,
		"kind": sig.kind.name.lower(),
		"generics": [render_generic_param(g) for g in sig.generics],
		"predicates": [render_predicate(p) for p in sig.predicates],
		"params": [render_formal_param(p) for p in sig.params],
		"ret": render_type(sig.ret) if sig.ret is not None else None,
		"body": render_call(sig.body),
		"text": render_forwarding(sig),
		"line": sig.span.line,
	}


__all__ = [
	"DEFERRED",
	"FormalParam",
	"ForwardCall",
	"ForwardingBuilder",
	"ForwardingSignature",
	"PendingForwarding",
	"lower_forwarding_decl",
	"render_call",
	"render_formal_param",
	"render_forwarding",
	"signature_to_json",
]
