# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
delegc command-line driver.

Parses one declaration file, synthesizes every `reuse` declaration in it and
prints the resulting forwarding functions:

  delegc decls.dl                 # one synthesized function per line
  delegc decls.dl --json          # {exit_code, signatures, diagnostics}
  delegc decls.dl --only any -j 4

Failures of individual declarations are reported without stopping the rest;
the exit code is 1 when any error diagnostic was produced.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from delegc.core.diagnostics import Diagnostic, diag_to_json, has_errors
from delegc.core.span import Span
from delegc.parser import ParseError, parse_source
from delegc.reuse import (
	SynthesisOptions,
	lower_forwarding_decl,
	render_forwarding,
	signature_to_json,
	synthesize_all,
)

logger = logging.getLogger(__name__)


def _emit_failure(diags: List[Diagnostic], phase: str, source: Path, *, as_json: bool) -> int:
	if as_json:
		payload = {
			"exit_code": 1,
			"signatures": [],
			"diagnostics": [diag_to_json(d, phase, str(source)) for d in diags],
		}
		print(json.dumps(payload))
	else:
		for d in diags:
			print(d.format_human(), file=sys.stderr)
	return 1


def _jobs(value: str) -> int:
	jobs = int(value)
	if jobs < 1:
		raise argparse.ArgumentTypeError("--jobs must be at least 1")
	return jobs


def main(argv: list[str] | None = None) -> int:
	"""
	Minimal CLI: parse a declaration file, then synthesize each `reuse` item.

	With --json, prints a single payload with the synthesized signatures and
	structured diagnostics; otherwise prints signatures to stdout and
	human-readable diagnostics to stderr.
	"""
	parser = argparse.ArgumentParser(prog="delegc", description="Synthesize forwarding (reuse) signatures")
	parser.add_argument("source", type=Path, help="Path to a declaration file")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit signatures and diagnostics as JSON",
	)
	parser.add_argument(
		"-j",
		"--jobs",
		type=_jobs,
		default=1,
		help="Synthesize declarations on this many threads (default: 1)",
	)
	parser.add_argument(
		"--only",
		dest="only",
		action="append",
		metavar="NAME",
		help="Only synthesize declarations producing this function name (repeatable)",
	)
	parser.add_argument("-v", "--verbose", action="store_true", help="Log synthesis steps to stderr")
	args = parser.parse_args(argv)

	if args.verbose:
		logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

	source_path: Path = args.source
	try:
		text = source_path.read_text()
	except OSError as err:
		diag = Diagnostic(
			message=f"cannot read source: {err.strerror or err}",
			code="IO_ERROR",
			phase="driver",
			span=Span(file=str(source_path)),
		)
		return _emit_failure([diag], "driver", source_path, as_json=args.json)

	try:
		unit = parse_source(text, file=str(source_path))
	except ParseError as err:
		return _emit_failure([err.to_diagnostic()], "parser", source_path, as_json=args.json)

	pending = [lower_forwarding_decl(d) for d in unit.decls]
	diagnostics: List[Diagnostic] = []
	if args.only:
		wanted = set(args.only)
		for name in args.only:
			if not any(p.name == name for p in pending):
				diagnostics.append(
					Diagnostic(
						message=f"no reuse declaration produces `{name}`",
						code="UNKNOWN_DECLARATION",
						phase="driver",
						span=Span(file=str(source_path)),
					)
				)
		pending = [p for p in pending if p.name in wanted]
	logger.debug("%s: %d declaration(s), %d job(s)", source_path, len(pending), args.jobs)

	results = synthesize_all(pending, unit.table, options=SynthesisOptions(), jobs=args.jobs)
	for res in results:
		diagnostics.extend(res.diagnostics)
	exit_code = 1 if has_errors(diagnostics) else 0

	if args.json:
		payload = {
			"exit_code": exit_code,
			"signatures": [signature_to_json(r.signature) for r in results if r.signature is not None],
			"diagnostics": [diag_to_json(d, "reuse", str(source_path)) for d in diagnostics],
		}
		print(json.dumps(payload))
		return exit_code

	for res in results:
		if res.signature is not None:
			print(render_forwarding(res.signature))
	for d in diagnostics:
		print(d.format_human(), file=sys.stderr)
	return exit_code


__all__ = ["main"]
