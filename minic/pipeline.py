# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-12
"""
Pipeline facade: optimize an IrProgram in place, then generate assembly.

Pipeline placement:
  IrProgram → minic.opt (fixpoint) → minic.codegen.x86 → assembly text

The driver and the tests go through `compile_program`; nothing here touches
the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from minic.codegen.x86.codegen import CodegenOptions, X86CodeGenerator
from minic.codegen.x86.targets import Target
from minic.ir.ir_nodes import IrProgram
from minic.opt.pass_manager import OptimizationReport, OptimizerConfig, optimize_program


@dataclass
class CompileResult:
	assembly: str
	report: OptimizationReport = field(default_factory=OptimizationReport)


def compile_program(
	program: IrProgram,
	target: Target,
	*,
	optimizer_config: Optional[OptimizerConfig] = None,
	codegen_options: Optional[CodegenOptions] = None,
	optimize: bool = True,
) -> CompileResult:
	"""
	Run the optimizer (unless `optimize` is False) and the x86-64 backend.

	`program` is rewritten in place by the optimizer; callers that need the
	original instructions must copy it first.
	"""
	report = optimize_program(program, optimizer_config) if optimize else OptimizationReport()
	assembly = X86CodeGenerator(target, codegen_options).generate(program)
	return CompileResult(assembly=assembly, report=report)


__all__ = ["CompileResult", "compile_program"]
