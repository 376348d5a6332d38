# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Dead-code elimination for side-effect-free definitions.

Pass one collects every value read anywhere in the function. Pass two drops
BinaryOp/UnaryOp/Move/Load instructions whose destination was never read.
Everything else (Alloca, Store, Call, Branch, Jump, Label, Return, Print,
Convert/Cast, Comment) is kept unconditionally. Writes to globals are kept as
well since other functions may read them.

One sweep only removes direct dead definitions; chains collapse over
successive pass-manager iterations.
"""

from __future__ import annotations

from typing import List, Set

from minic.ir import ir_nodes as I
from minic.ir.operands import instr_sources

from .pass_base import OptimizationPass

_PURE_DEFS = (I.BinaryOpInstr, I.UnaryOpInstr, I.Move, I.Load)


def collect_used(func: I.IrFunction) -> Set[I.IrValue]:
	used: Set[I.IrValue] = set()
	for instr in func.instructions:
		used.update(instr_sources(instr))
	return used


class DeadCodeElimination(OptimizationPass):
	name = "dead_code_elimination"
	depends_on = ("copy_propagation",)

	def run(self, func: I.IrFunction) -> bool:
		used = collect_used(func)
		kept: List[I.IrInstr] = []
		for instr in func.instructions:
			if (
				isinstance(instr, _PURE_DEFS)
				and instr.dest not in used
				and not isinstance(instr.dest, I.Global)
			):
				continue
			kept.append(instr)
		return self._commit(func, kept)


__all__ = ["DeadCodeElimination", "collect_used"]
