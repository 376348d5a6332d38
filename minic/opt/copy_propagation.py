# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Copy propagation.

A single forward walk with a value → value map:
- `Move(dest, src)` is rewritten to use the mapped source and records
  dest → mapped source;
- every other instruction has its source operands rewritten through the map.

Destinations are never rewritten. The map is not invalidated when a Store
writes to a value it already maps, so a copy recorded before the Store keeps
being propagated after it (pinned by test_copy_propagation_store_does_not_invalidate).
"""

from __future__ import annotations

from typing import Dict, List

from minic.ir import ir_nodes as I
from minic.ir.operands import map_sources

from .pass_base import OptimizationPass


class CopyPropagation(OptimizationPass):
	name = "copy_propagation"
	depends_on = ("constant_folding",)

	def run(self, func: I.IrFunction) -> bool:
		copies: Dict[I.IrValue, I.IrValue] = {}

		def lookup(value: I.IrValue) -> I.IrValue:
			return copies.get(value, value)

		rewritten: List[I.IrInstr] = []
		for instr in func.instructions:
			if isinstance(instr, I.Move):
				src = lookup(instr.src)
				if src != instr.src:
					instr = I.Move(instr.dest, src, instr.ty)
				copies[instr.dest] = src
				rewritten.append(instr)
			else:
				rewritten.append(map_sources(instr, lookup))
		return self._commit(func, rewritten)


__all__ = ["CopyPropagation"]
