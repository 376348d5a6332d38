# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-06
"""
IR optimizer: constant folding, copy propagation, dead-code elimination.

Pipeline placement:
  IR (minic/ir) → optimizer (this package) → x86-64 codegen (minic/codegen/x86)

Public API:
  - PassManager / optimize_program: fixpoint driver (cap: MAX_ITERATIONS rounds)
  - OptimizerConfig: pass selection + iteration cap
  - ConstantFolding, CopyPropagation, DeadCodeElimination: the passes
"""

from .constant_folding import ConstantFolding
from .copy_propagation import CopyPropagation
from .dead_code import DeadCodeElimination
from .pass_base import OptimizationPass
from .pass_manager import (
	DEFAULT_PASSES,
	MAX_ITERATIONS,
	PASS_REGISTRY,
	FunctionReport,
	OptimizationReport,
	OptimizerConfig,
	PassManager,
	PassScheduleError,
	optimize_program,
	schedule_passes,
)

__all__ = [
	"ConstantFolding",
	"CopyPropagation",
	"DeadCodeElimination",
	"OptimizationPass",
	"DEFAULT_PASSES",
	"MAX_ITERATIONS",
	"PASS_REGISTRY",
	"FunctionReport",
	"OptimizationReport",
	"OptimizerConfig",
	"PassManager",
	"PassScheduleError",
	"optimize_program",
	"schedule_passes",
]
