# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Constant/default parameter policy.

Type and region positions are always inferable and may be left open. Constant
positions are not: there is no mechanism to infer a constant value here, so a
constant must be written out or have a default to fall back to. A defaulted
parameter that is left open still becomes a plain caller-side parameter; the
default value itself is never substituted.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Iterable, Optional

from delegc.core.defs import GenericParamDef
from delegc.core.render import render_type
from delegc.core.span import Span
from delegc.core.types import Infer, TypeArg, contains_infer
from .errors import AmbiguousDefaultParameter, ConflictingParameterBinding, ConstParameterUnspecified


class ConstDecision(Enum):
	COPY = auto()  # explicit value, copied through; no parameter
	SLOT = auto()  # omitted but defaulted; becomes a plain const parameter


def check_const_argument(param: GenericParamDef, arg: TypeArg, *, span: Span = Span()) -> ConstDecision:
	"""Decide what a constant parameter position contributes, or fail."""
	if isinstance(arg, Infer):
		if param.default is None:
			how = "`_` cannot stand for" if arg.explicit else "no value given for"
			raise ConstParameterUnspecified(
				f"{how} constant parameter `{param.name}`",
				span=span,
				notes=("constant arguments of a forwarding target must be written explicitly",),
			)
		if arg.explicit:
			raise AmbiguousDefaultParameter(
				f"`_` given for defaulted constant parameter `{param.name}`",
				span=span,
				notes=(
					"omit the argument to forward the parameter, or write the value to pin it",
				),
			)
		return ConstDecision.SLOT
	if contains_infer(arg):
		raise ConstParameterUnspecified(
			f"constant parameter `{param.name}` given a partially inferred value `{render_type(arg)}`",
			span=span,
		)
	return ConstDecision.COPY


def reconcile_binding(
	param: GenericParamDef,
	explicit: Optional[TypeArg],
	bound: TypeArg,
	*,
	span: Span = Span(),
) -> TypeArg:
	"""
	Pick the value for a container parameter named by an associated binding.

	`explicit` is the positional argument for the same parameter, or None when
	the position was omitted.
	"""
	if explicit is None or explicit == bound:
		return bound
	message = (
		f"parameter `{param.name}` given both `{render_type(explicit)}` and "
		f"`{param.name} = {render_type(bound)}`"
	)
	if param.default is not None:
		raise AmbiguousDefaultParameter(message, span=span)
	raise ConflictingParameterBinding(message, span=span)


def ensure_no_defaults(params: Iterable[GenericParamDef]) -> None:
	"""Synthesized parameters never carry defaults."""
	for param in params:
		if param.default is not None:
			raise AssertionError(f"synthesized parameter `{param.name}` carries a default")


__all__ = ["ConstDecision", "check_const_argument", "ensure_no_defaults", "reconcile_binding"]
