# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Resolve a forwarding declaration's target against the definition table.

Resolution order for `a::b::c`:
1. `a::b::c` names a function: free-function target.
2. `a::b` names an interface: method `c` of that interface (reused inside an
   impl when the declaration sits in one).
3. `a::b` names a struct (or the path starts with `Self`): type-relative
   target, rejected.
4. Otherwise the path does not resolve.

Explicit generic arguments are matched to parameters by kind: region arguments
to region parameters (all or none), the rest positionally to the non-region
parameters. Missing trailing arguments are left open.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from delegc.core.defs import DefinitionTable, FnSig, GenericParamDef, InterfaceDef
from delegc.core.render import render_type
from delegc.core.span import Span
from delegc.core.type_subst import Subst, apply_subst
from delegc.core.types import (
	ConstValue,
	Infer,
	Named,
	ParamKind,
	ParamOwner,
	ParamRef,
	RefType,
	TypeArg,
	contains_infer,
	is_region_arg,
)
from .decl import DescriptorHandle, ForwardingDecl, PathSegment, ReceiverTemplate
from .descriptor import CalleeDescriptor, CalleeKind
from .errors import InvalidReceiverMapping, PathResolutionError, TypeRelativePathUnsupported
from .policy import reconcile_binding

logger = logging.getLogger(__name__)


def _check_arg_kind(param: GenericParamDef, arg: TypeArg, *, what: str, span: Span) -> None:
	"""Reject a type argument for a constant parameter and vice versa."""
	if param.kind is ParamKind.CONST:
		if isinstance(arg, (ConstValue, Infer)):
			return
		if isinstance(arg, ParamRef) and arg.kind is ParamKind.CONST:
			return
		raise PathResolutionError(
			f"type `{render_type(arg)}` supplied for constant parameter `{param.name}` of `{what}`",
			span=span,
		)
	if param.kind is ParamKind.TYPE:
		if isinstance(arg, ConstValue) or (isinstance(arg, ParamRef) and arg.kind is ParamKind.CONST):
			raise PathResolutionError(
				f"constant `{render_type(arg)}` supplied for type parameter `{param.name}` of `{what}`",
				span=span,
			)


def match_generic_args(
	params: Sequence[GenericParamDef],
	explicit: Optional[Sequence[TypeArg]],
	*,
	what: str,
	span: Span = Span(),
) -> Tuple[TypeArg, ...]:
	"""Line explicit arguments up with `params`; open positions become `Infer(explicit=False)`."""
	out: List[TypeArg] = [Infer(p.kind, explicit=False) for p in params]
	if explicit is None:
		return tuple(out)
	region_idx = [i for i, p in enumerate(params) if p.kind is ParamKind.REGION]
	other_idx = [i for i, p in enumerate(params) if p.kind is not ParamKind.REGION]
	region_args = [a for a in explicit if is_region_arg(a)]
	other_args = [a for a in explicit if not is_region_arg(a)]
	if region_args and len(region_args) != len(region_idx):
		raise PathResolutionError(
			f"`{what}` takes {len(region_idx)} region argument(s) but {len(region_args)} were supplied",
			span=span,
		)
	if len(other_args) > len(other_idx):
		raise PathResolutionError(
			f"`{what}` takes at most {len(other_idx)} generic argument(s) but {len(other_args)} were supplied",
			span=span,
		)
	for idx, arg in zip(region_idx, region_args):
		out[idx] = arg
	for idx, arg in zip(other_idx, other_args):
		_check_arg_kind(params[idx], arg, what=what, span=span)
		out[idx] = arg
	return tuple(out)


def _reject_args_on_prefix(segments: Sequence[PathSegment], span: Span) -> None:
	for seg in segments:
		if seg.args is not None or seg.bindings:
			raise PathResolutionError(f"generic arguments are not allowed on path segment `{seg.name}`", span=span)


def _strip_refs(arg: TypeArg) -> TypeArg:
	while isinstance(arg, RefType):
		arg = arg.inner
	return arg


def receiver_self_type(self_type: TypeArg, template: ReceiverTemplate, table: DefinitionTable) -> TypeArg:
	"""Type of `template` evaluated on a `self` of type `self_type` (fields auto-deref)."""
	current = self_type
	for name in template.fields:
		base = _strip_refs(current)
		struct = table.structs.get(base.name) if isinstance(base, Named) else None
		if struct is None:
			raise InvalidReceiverMapping(
				f"cannot project field `{name}`: `{render_type(current)}` is not a struct",
				span=template.span,
			)
		fld = struct.field(name)
		if fld is None:
			raise InvalidReceiverMapping(f"struct `{struct.name}` has no field `{name}`", span=template.span)
		assert isinstance(base, Named)
		if len(base.args) != len(struct.generics):
			raise InvalidReceiverMapping(
				f"`{render_type(base)}` supplies {len(base.args)} argument(s) to `{struct.name}`,"
				f" which takes {len(struct.generics)}",
				span=template.span,
			)
		subst = Subst(params={(ParamOwner.CONTAINER, p.name): a for p, a in zip(struct.generics, base.args)})
		current = apply_subst(fld.type, subst)
	return current


def _resolve_free(handle: DescriptorHandle, fn: FnSig) -> CalleeDescriptor:
	target = handle.target
	_reject_args_on_prefix(target.segments[:-1], target.span)
	last = target.segments[-1]
	if last.bindings:
		raise PathResolutionError(
			f"associated type bindings are not allowed on function `{fn.name}`",
			span=target.span,
		)
	if handle.receiver is not None:
		raise InvalidReceiverMapping(
			f"function `{fn.name}` takes no receiver; drop the `{{ {handle.receiver.expr()} }}` block",
			span=handle.receiver.span,
		)
	method_args = match_generic_args(fn.generics, last.args, what=fn.name, span=target.span)
	return CalleeDescriptor(
		kind=CalleeKind.FREE,
		path=fn.name,
		target=fn,
		method_args=method_args,
		scope_names=handle.impl.names_in_scope() if handle.impl is not None else (),
		span=handle.span,
	)


def _container_args(handle: DescriptorHandle, iface: InterfaceDef) -> Tuple[Tuple[TypeArg, ...], Tuple[Tuple[str, TypeArg], ...]]:
	target = handle.target
	seg = target.segments[-2]
	args = list(match_generic_args(iface.generics, seg.args, what=iface.name, span=target.span))
	assoc: Dict[str, TypeArg] = {}
	seen: set[str] = set()
	for name, value in seg.bindings:
		if name in seen:
			raise PathResolutionError(f"`{name}` is bound more than once", span=target.span)
		seen.add(name)
		index = next((i for i, p in enumerate(iface.generics) if p.name == name), None)
		if index is not None:
			param = iface.generics[index]
			_check_arg_kind(param, value, what=iface.name, span=target.span)
			current = args[index]
			explicit = None if isinstance(current, Infer) and not current.explicit else current
			args[index] = reconcile_binding(param, explicit, value, span=target.span)
			continue
		if name in iface.assoc_types:
			if contains_infer(value):
				raise PathResolutionError(
					f"associated type binding `{name} = {render_type(value)}` may not contain `_`",
					span=target.span,
				)
			assoc[name] = value
			continue
		raise PathResolutionError(
			f"interface `{iface.name}` has no parameter or associated type `{name}`",
			span=target.span,
		)
	ordered_assoc = tuple((name, assoc[name]) for name in iface.assoc_types if name in assoc)
	return tuple(args), ordered_assoc


def _resolve_interface_method(handle: DescriptorHandle, iface: InterfaceDef, table: DefinitionTable) -> CalleeDescriptor:
	target = handle.target
	_reject_args_on_prefix(target.segments[:-2], target.span)
	method_seg = target.segments[-1]
	method = iface.method(method_seg.name)
	if method is None:
		raise PathResolutionError(
			f"interface `{iface.name}` has no method `{method_seg.name}`",
			span=target.span,
		)
	if method_seg.bindings:
		raise PathResolutionError(
			f"associated type bindings belong on the interface segment, not on `{method.name}`",
			span=target.span,
		)
	container_args, assoc = _container_args(handle, iface)
	method_args = match_generic_args(
		method.generics,
		method_seg.args,
		what=f"{iface.name}::{method.name}",
		span=target.span,
	)
	template = handle.receiver
	if handle.impl is None:
		if template is not None:
			raise InvalidReceiverMapping(
				"a receiver expression is only allowed inside an impl block",
				span=template.span,
			)
		return CalleeDescriptor(
			kind=CalleeKind.INTERFACE_METHOD,
			path=iface.name,
			target=method,
			interface=iface,
			container_args=container_args,
			method_args=method_args,
			assoc_type_bindings=assoc,
			span=handle.span,
		)
	self_type = handle.impl.self_type
	if template is not None:
		if method.receiver is None:
			raise InvalidReceiverMapping(
				f"`{iface.name}::{method.name}` takes no receiver; drop the `{{ {template.expr()} }}` block",
				span=template.span,
			)
		self_type = receiver_self_type(self_type, template, table)
	return CalleeDescriptor(
		kind=CalleeKind.IMPLEMENTED_INTERFACE_METHOD,
		path=iface.name,
		target=method,
		interface=iface,
		container_args=container_args,
		method_args=method_args,
		receiver_expr_template=template,
		assoc_type_bindings=assoc,
		self_type=_strip_refs(self_type),
		scope_names=handle.impl.names_in_scope(),
		span=handle.span,
	)


def resolve_handle(handle: DescriptorHandle, table: DefinitionTable) -> CalleeDescriptor:
	"""Build the callee descriptor `handle` refers to, or raise a `SynthesisError`."""
	target = handle.target
	segments = target.segments
	if not segments:
		raise PathResolutionError("empty reuse target", span=handle.span)
	full = target.path()
	if segments[0].name == "Self":
		raise TypeRelativePathUnsupported(
			f"`{full}` is relative to `Self`; name the interface instead",
			span=target.span,
		)
	fn = table.functions.get(full)
	if fn is not None:
		logger.debug("reuse %s: free function %s", full, fn.name)
		return _resolve_free(handle, fn)
	if len(segments) >= 2:
		prefix = target.path(len(segments) - 1)
		iface = table.interfaces.get(prefix)
		if iface is not None:
			logger.debug("reuse %s: method %s of interface %s", full, segments[-1].name, iface.name)
			return _resolve_interface_method(handle, iface, table)
		if prefix in table.structs:
			raise TypeRelativePathUnsupported(
				f"`{full}` names a method through the concrete type `{prefix}`; reuse it through its interface",
				span=target.span,
			)
	raise PathResolutionError(f"cannot resolve `{full}`", span=target.span)


def resolve_descriptor(decl: ForwardingDecl, table: DefinitionTable) -> CalleeDescriptor:
	"""Build the callee descriptor for `decl`, or raise a `SynthesisError`."""
	return resolve_handle(DescriptorHandle.from_decl(decl), table)


__all__ = ["match_generic_args", "receiver_self_type", "resolve_descriptor", "resolve_handle"]
