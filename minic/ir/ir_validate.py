# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Input-contract checks for IR handed to the backend.

The optimizer and code generator assume well-formed IR and never fail on bad
input (they degrade to assembly comments). IR coming from a file is checked
here first so the driver can refuse it with a readable diagnostic instead of
producing commented-out garbage.
"""

from __future__ import annotations

from typing import Dict, List, Set

from minic.core.diagnostics import Diagnostic

from . import ir_nodes as I
from .operands import instr_dest, instr_sources


def _diag(fn: I.IrFunction, message: str, *, severity: str = "error", code: str | None = None) -> Diagnostic:
	return Diagnostic(
		message=f"in function '{fn.name}': {message}",
		code=code,
		phase="validate",
		severity=severity,
	)


def validate_function(fn: I.IrFunction, program: I.IrProgram) -> List[Diagnostic]:
	"""Check one function against the input contract; returns diagnostics (never raises)."""
	diags: List[Diagnostic] = []
	declared_locals = fn.local_types()
	params = fn.param_types()

	labels: Set[str] = set()
	for instr in fn.instructions:
		if isinstance(instr, I.Label):
			if instr.name in labels:
				diags.append(_diag(fn, f"label '{instr.name}' defined more than once", code="IR_DUP_LABEL"))
			labels.add(instr.name)

	allocas: Dict[str, I.IrType] = {}
	defined_temps: Set[int] = set()
	reported_temps: Set[int] = set()

	def _check_value(value: I.IrValue) -> None:
		if isinstance(value, I.Local) and value.name not in declared_locals:
			diags.append(_diag(fn, f"local '%{value.name}' is not declared", code="IR_UNKNOWN_LOCAL"))
		elif isinstance(value, I.Parameter) and value.name not in params:
			diags.append(_diag(fn, f"parameter '${value.name}' is not declared", code="IR_UNKNOWN_PARAM"))
		elif isinstance(value, I.StringConstant) and value.label not in program.strings:
			diags.append(_diag(fn, f"string label '@{value.label}' is not in the string table", code="IR_UNKNOWN_STRING"))

	for instr in fn.instructions:
		for src in instr_sources(instr):
			_check_value(src)
			if isinstance(src, I.Temp) and src.id not in defined_temps and src.id not in reported_temps:
				reported_temps.add(src.id)
				diags.append(_diag(fn, f"temp '%{src.id}' used before definition", code="IR_TEMP_USE_BEFORE_DEF"))
		if isinstance(instr, I.Store):
			_check_value(instr.dest)
		dest = instr_dest(instr)
		if dest is not None:
			_check_value(dest)
			if dest.is_constant:
				diags.append(_diag(fn, f"constant '{dest}' used as a destination", code="IR_CONST_DEST"))
			if isinstance(dest, I.Temp):
				if dest.id in defined_temps:
					diags.append(_diag(fn, f"temp '%{dest.id}' defined more than once", code="IR_TEMP_REDEF"))
				defined_temps.add(dest.id)
		if isinstance(instr, I.Alloca):
			allocas[instr.name] = instr.ty
			declared = declared_locals.get(instr.name)
			if declared is None:
				diags.append(_diag(fn, f"alloca of '%{instr.name}' has no matching local", code="IR_ALLOCA_NO_LOCAL"))
			elif declared != instr.ty:
				diags.append(
					_diag(
						fn,
						f"alloca of '%{instr.name}' has type {instr.ty}, local is declared {declared}",
						code="IR_ALLOCA_TYPE",
					)
				)
		elif isinstance(instr, I.Branch):
			for target in (instr.true_label, instr.false_label):
				if target not in labels:
					diags.append(_diag(fn, f"branch to unknown label '{target}'", code="IR_UNKNOWN_LABEL"))
		elif isinstance(instr, I.Jump):
			if instr.label not in labels:
				diags.append(_diag(fn, f"jump to unknown label '{instr.label}'", code="IR_UNKNOWN_LABEL"))
		elif isinstance(instr, I.Return):
			if instr.ty != fn.return_type:
				diags.append(
					_diag(
						fn,
						f"return of {instr.ty} in function returning {fn.return_type}",
						severity="warning",
						code="IR_RETURN_TYPE",
					)
				)
		elif isinstance(instr, I.Call):
			callee = program.function(instr.func)
			if callee is not None and len(callee.params) != len(instr.args):
				diags.append(
					_diag(
						fn,
						f"call to '{instr.func}' passes {len(instr.args)} argument(s), it takes {len(callee.params)}",
						severity="warning",
						code="IR_CALL_ARITY",
					)
				)

	for name, _ty in fn.locals:
		if name not in allocas:
			diags.append(_diag(fn, f"local '%{name}' has no alloca", severity="warning", code="IR_LOCAL_NO_ALLOCA"))
	return diags


def validate_program(program: I.IrProgram) -> List[Diagnostic]:
	diags: List[Diagnostic] = []
	for fn in program.functions:
		diags.extend(validate_function(fn, program))
	return diags


__all__ = ["validate_function", "validate_program"]
