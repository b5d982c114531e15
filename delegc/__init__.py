# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
delegc: signature synthesis for forwarding (`reuse`) declarations.

Given `reuse path::to::target;`, the `reuse` package computes the forwarding
function's generic parameters, bounds, parameter/return types and the single
call it emits. The CLI entrypoint is `delegc.driver:main`.
"""

__all__ = ["core", "parser", "reuse"]
