# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Forwarding (`reuse`) signature synthesis.

Public entry points are re-exported here; the stages live in their own modules
(`resolve`, `slots`, `ordering`, `fill`, `predicates`, `builder`) and are
usable one at a time.
"""

from .builder import (
	DEFERRED,
	ForwardCall,
	ForwardingBuilder,
	ForwardingSignature,
	FormalParam,
	PendingForwarding,
	lower_forwarding_decl,
	render_forwarding,
	signature_to_json,
)
from .decl import DescriptorHandle, ForwardingDecl, ImplContext, PathSegment, ReceiverTemplate, TargetRef
from .descriptor import CalleeDescriptor, CalleeKind
from .errors import (
	AmbiguousDefaultParameter,
	ConflictingParameterBinding,
	ConstParameterUnspecified,
	InvalidReceiverMapping,
	PathResolutionError,
	SynthesisError,
	TypeRelativePathUnsupported,
)
from .ordering import SynthesisOptions
from .pipeline import SynthesisResult, synthesize, synthesize_all, synthesize_decl, synthesize_signature
from .resolve import resolve_descriptor, resolve_handle

__all__ = [
	"AmbiguousDefaultParameter",
	"CalleeDescriptor",
	"CalleeKind",
	"ConflictingParameterBinding",
	"ConstParameterUnspecified",
	"DEFERRED",
	"DescriptorHandle",
	"FormalParam",
	"ForwardCall",
	"ForwardingBuilder",
	"ForwardingDecl",
	"ForwardingSignature",
	"ImplContext",
	"InvalidReceiverMapping",
	"PathResolutionError",
	"PathSegment",
	"PendingForwarding",
	"ReceiverTemplate",
	"SynthesisError",
	"SynthesisOptions",
	"SynthesisResult",
	"TargetRef",
	"TypeRelativePathUnsupported",
	"lower_forwarding_decl",
	"render_forwarding",
	"resolve_descriptor",
	"resolve_handle",
	"signature_to_json",
	"synthesize",
	"synthesize_all",
	"synthesize_decl",
	"synthesize_signature",
]
