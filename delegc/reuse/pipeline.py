# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Forwarding synthesis pipeline.

resolve → allocate slots → order/name parameters → fill slots → predicates →
build. Each declaration is independent: it only reads the shared definition
table and produces its own result, so a batch can be spread over threads and a
failure in one declaration never affects another.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from delegc.core.defs import DefinitionTable
from delegc.core.diagnostics import Diagnostic
from .builder import ForwardingBuilder, ForwardingSignature, PendingForwarding, lower_forwarding_decl
from .decl import ForwardingDecl
from .descriptor import CalleeDescriptor
from .errors import SynthesisError
from .fill import fill_callee
from .ordering import SynthesisOptions, names_in_use, order_params
from .policy import ensure_no_defaults
from .predicates import synthesize_predicates
from .resolve import resolve_handle
from .slots import allocate_slots

logger = logging.getLogger(__name__)


@dataclass
class SynthesisResult:
	"""Outcome for one declaration: a signature, or diagnostics (never both)."""

	pending: PendingForwarding
	signature: Optional[ForwardingSignature] = None
	descriptor: Optional[CalleeDescriptor] = None
	diagnostics: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return self.signature is not None


def synthesize_signature(
	descriptor: CalleeDescriptor,
	*,
	name: str,
	options: SynthesisOptions = SynthesisOptions(),
	builder: Optional[ForwardingBuilder] = None,
) -> ForwardingSignature:
	"""Run the post-resolution stages on an already resolved descriptor."""
	slots = allocate_slots(descriptor)
	reserved = descriptor.scope_names + names_in_use(descriptor)
	ordered = order_params(slots, reserved=reserved, options=options)
	ensure_no_defaults(ordered.generics)
	filled = fill_callee(descriptor, ordered)
	predicates = synthesize_predicates(descriptor, filled)
	if builder is None:
		builder = ForwardingBuilder(descriptor, name=name, span=descriptor.span, options=options)
	sig = builder.build(ordered, filled, predicates)
	logger.debug("reuse %s: %d slot(s), %d predicate(s)", name, len(slots), len(predicates))
	return sig


def synthesize(
	pending: PendingForwarding,
	table: DefinitionTable,
	*,
	options: Optional[SynthesisOptions] = None,
) -> SynthesisResult:
	opts = options or SynthesisOptions()
	try:
		descriptor = resolve_handle(pending.handle, table)
		builder = ForwardingBuilder.from_pending(pending, descriptor, options=opts)
		sig = synthesize_signature(descriptor, name=pending.name, options=opts, builder=builder)
	except SynthesisError as err:
		logger.debug("reuse %s failed: %s", pending.name, err)
		return SynthesisResult(pending=pending, diagnostics=[err.to_diagnostic()])
	return SynthesisResult(pending=pending, signature=sig, descriptor=descriptor)


def synthesize_decl(
	decl: ForwardingDecl,
	table: DefinitionTable,
	*,
	options: Optional[SynthesisOptions] = None,
) -> SynthesisResult:
	return synthesize(lower_forwarding_decl(decl), table, options=options)


def synthesize_all(
	pending: Sequence[PendingForwarding],
	table: DefinitionTable,
	*,
	options: Optional[SynthesisOptions] = None,
	jobs: int = 1,
) -> List[SynthesisResult]:
	"""Synthesize every pending forwarding; results come back in input order."""
	if jobs <= 1 or len(pending) <= 1:
		return [synthesize(p, table, options=options) for p in pending]
	with ThreadPoolExecutor(max_workers=jobs) as pool:
		return list(pool.map(lambda p: synthesize(p, table, options=options), pending))


__all__ = [
	"SynthesisResult",
	"synthesize",
	"synthesize_all",
	"synthesize_decl",
	"synthesize_signature",
]
