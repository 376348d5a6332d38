# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common shape of an IR optimization pass.
"""

from __future__ import annotations

from typing import List, Tuple

from minic.ir.ir_nodes import IrFunction, IrInstr


class OptimizationPass:
	"""
	One function-local IR rewrite.

	Subclasses set `name` and `depends_on` (names of passes that should run
	before this one within an iteration) and implement `run`.

	Entry point:
	  run(func: IrFunction) -> bool   # True if func.instructions changed
	"""

	name: str = ""
	depends_on: Tuple[str, ...] = ()

	def run(self, func: IrFunction) -> bool:
		raise NotImplementedError

	@staticmethod
	def _commit(func: IrFunction, rewritten: List[IrInstr]) -> bool:
		"""Replace the instruction list in place; report whether anything differs."""
		changed = rewritten != func.instructions
		if changed:
			func.instructions[:] = rewritten
		return changed

	def __repr__(self) -> str:
		return f"<{type(self).__name__} {self.name}>"


__all__ = ["OptimizationPass"]
