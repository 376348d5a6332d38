# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-02
"""
IR package: data model, builder, printer, reader and validator.

Pipeline placement:
  (external AST → IR generator) → IR (this package) → minic.opt → minic.codegen.x86

Public API:
  - ir_nodes: IrType/IrValue/instruction dataclasses, IrFunction, IrProgram
  - IrBuilder: counter-owning construction helper
  - format_program / parse_ir: textual round trip
  - validate_program: input-contract checks producing Diagnostics
"""

from . import ir_nodes
from .ir_builder import IrBuilder
from .ir_printer import format_function, format_instr, format_program, format_value
from .ir_validate import validate_function, validate_program

__all__ = [
	"ir_nodes",
	"IrBuilder",
	"format_function",
	"format_instr",
	"format_program",
	"format_value",
	"validate_function",
	"validate_program",
]
