# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared core of the synthesizer: argument trees, item definitions, substitution,
rendering, spans and diagnostics. Nothing in here knows about forwarding.
"""

__all__ = ["defs", "diagnostics", "render", "span", "type_subst", "types"]
