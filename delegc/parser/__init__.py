# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Declaration-file front end (lark grammar + tree builder)."""

from .parser import ParseError, ParsedUnit, parse_file, parse_source

__all__ = ["ParseError", "ParsedUnit", "parse_file", "parse_source"]
