# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-12
"""
Command-line driver: textual IR file → NASM x86-64 assembly.

Phases (each may stop the build with diagnostics):
  target    resolve --target to a platform descriptor
  parser    read the IR text (minic.ir.parser)
  validate  check the input contract (minic.ir.ir_validate)
  optimizer build the pass pipeline from --disable-pass/--max-iterations
Code generation itself cannot fail.

With --json, diagnostics are printed to stdout as
`{"exit_code": n, "diagnostics": [...]}`; otherwise each diagnostic goes to
stderr as `file:line:col: severity: message`. Under --json stdout carries only
the payload, so assembly is written only when -o is given.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from minic.codegen.x86.codegen import CodegenOptions
from minic.codegen.x86.targets import TARGET_ALIASES, UnknownTargetError, create_target, parse_target_platform
from minic.core.diagnostics import Diagnostic, has_errors
from minic.core.span import Span
from minic.ir.ir_printer import format_program
from minic.ir.ir_validate import validate_program
from minic.ir.parser import IrParseError, parse_ir_file
from minic.opt.pass_manager import MAX_ITERATIONS, PASS_REGISTRY, OptimizerConfig, PassManager
from minic.pipeline import compile_program


def _report(diags: List[Diagnostic], source: Path, *, as_json: bool, exit_code: int) -> None:
	if as_json:
		payload = {
			"exit_code": exit_code,
			"diagnostics": [d.to_json(default_file=str(source)) for d in diags],
		}
		print(json.dumps(payload))
		return
	for d in diags:
		span = d.span if d.span.file else Span.from_loc(d.span, file=str(source))
		print(f"{span.describe()}: {d.severity}: {d.message}", file=sys.stderr)
		for note in d.notes:
			print(f"  note: {note}", file=sys.stderr)


def _fail(diags: List[Diagnostic], source: Path, *, as_json: bool) -> int:
	_report(diags, source, as_json=as_json, exit_code=1)
	return 1


def _build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="minicc", description="Mini-C IR to x86-64 NASM compiler backend")
	parser.add_argument("source", type=Path, help="Path to a textual IR file")
	parser.add_argument(
		"--target",
		default="linux",
		help=f"Target platform (default: linux; one of {', '.join(TARGET_ALIASES)})",
	)
	parser.add_argument("-o", "--output", type=Path, help="Path to output assembly (default: stdout)")
	parser.add_argument("--emit-ir", type=Path, help="Write the optimized IR text to the given path")
	parser.add_argument("-O0", "--no-opt", dest="optimize", action="store_false", help="Skip the optimizer")
	parser.add_argument(
		"--disable-pass",
		dest="disabled_passes",
		action="append",
		default=[],
		metavar="NAME",
		help=f"Disable one optimization pass (repeatable; known: {', '.join(PASS_REGISTRY)})",
	)
	parser.add_argument(
		"--max-iterations",
		type=int,
		default=MAX_ITERATIONS,
		metavar="N",
		help=f"Fixpoint iteration cap per function (default: {MAX_ITERATIONS})",
	)
	parser.add_argument(
		"--no-stack-summary",
		dest="stack_summary",
		action="store_false",
		help="Omit the per-function stack layout comments",
	)
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	parser.add_argument("--stats", action="store_true", help="Print optimizer statistics to stderr")
	return parser


def main(argv: list[str] | None = None) -> int:
	"""
	Compile one IR file. Returns the process exit code (0 on success, 1 when
	any phase reports an error).
	"""
	args = _build_parser().parse_args(argv)
	source: Path = args.source

	try:
		target = create_target(parse_target_platform(args.target))
	except UnknownTargetError as err:
		return _fail([Diagnostic(message=str(err), code="UNKNOWN_TARGET", phase="target")], source, as_json=args.json)

	try:
		config = OptimizerConfig(max_iterations=args.max_iterations).without(args.disabled_passes)
		# Built once here only to surface schedule errors before any output.
		PassManager.from_config(config)
	except ValueError as err:
		return _fail([Diagnostic(message=str(err), code="BAD_PASS_CONFIG", phase="optimizer")], source, as_json=args.json)

	try:
		program = parse_ir_file(source)
	except IrParseError as err:
		diag = Diagnostic(message=str(err), code="IR_SYNTAX", phase="parser", span=err.loc)
		return _fail([diag], source, as_json=args.json)
	except UnicodeDecodeError as err:
		msg = f"cannot decode {source} as UTF-8: {err.reason} at byte {err.start}"
		return _fail([Diagnostic(message=msg, code="IO", phase="parser")], source, as_json=args.json)
	except OSError as err:
		msg = f"cannot read {source}: {err.strerror or err}"
		return _fail([Diagnostic(message=msg, code="IO", phase="parser")], source, as_json=args.json)

	diags = validate_program(program)
	if has_errors(diags):
		return _fail(diags, source, as_json=args.json)

	result = compile_program(
		program,
		target,
		optimizer_config=config,
		codegen_options=CodegenOptions(stack_summary=args.stack_summary),
		optimize=args.optimize,
	)

	if args.stats:
		for line in result.report.format_lines():
			print(line, file=sys.stderr)
	if args.emit_ir is not None:
		args.emit_ir.write_text(format_program(program))
	if args.output is not None:
		args.output.write_text(result.assembly)
	elif not args.json:
		sys.stdout.write(result.assembly)

	_report(diags, source, as_json=args.json, exit_code=0)
	return 0


__all__ = ["main"]
