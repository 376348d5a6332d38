# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Operand traversal over IR instructions.

Passes and codegen ask the same two questions of every instruction ("what
does it define?", "what does it read?"); the answers live here so the
instruction dataclasses stay plain data.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Optional

from . import ir_nodes as I

# Instructions whose `dest` field is a definition (Store.dest is a write
# through an address, not a definition).
DEFINING_INSTRS = (I.Load, I.BinaryOpInstr, I.UnaryOpInstr, I.Call, I.Move, I.Convert)


def instr_dest(instr: I.IrInstr) -> Optional[I.IrValue]:
	"""Value defined by `instr`, or None."""
	if isinstance(instr, DEFINING_INSTRS):
		return instr.dest
	return None


def instr_sources(instr: I.IrInstr) -> List[I.IrValue]:
	"""Every value `instr` reads, in operand order."""
	if isinstance(instr, I.Load):
		return [instr.src]
	if isinstance(instr, I.Store):
		return [instr.value]
	if isinstance(instr, I.BinaryOpInstr):
		return [instr.left, instr.right]
	if isinstance(instr, I.UnaryOpInstr):
		return [instr.operand]
	if isinstance(instr, I.Call):
		return list(instr.args)
	if isinstance(instr, I.Branch):
		return [instr.cond]
	if isinstance(instr, I.Return):
		return [] if instr.value is None else [instr.value]
	if isinstance(instr, I.Print):
		return [instr.format, *instr.args]
	if isinstance(instr, (I.Move, I.Convert)):
		return [instr.src]
	return []


def map_sources(instr: I.IrInstr, fn: Callable[[I.IrValue], I.IrValue]) -> I.IrInstr:
	"""
	Return a copy of `instr` with every source operand passed through `fn`.

	Destinations are never touched. Instructions without sources are returned
	as-is (same object).
	"""
	if isinstance(instr, I.Load):
		return replace(instr, src=fn(instr.src))
	if isinstance(instr, I.Store):
		return replace(instr, value=fn(instr.value))
	if isinstance(instr, I.BinaryOpInstr):
		return replace(instr, left=fn(instr.left), right=fn(instr.right))
	if isinstance(instr, I.UnaryOpInstr):
		return replace(instr, operand=fn(instr.operand))
	if isinstance(instr, I.Call):
		return replace(instr, args=[fn(a) for a in instr.args])
	if isinstance(instr, I.Branch):
		return replace(instr, cond=fn(instr.cond))
	if isinstance(instr, I.Return):
		if instr.value is None:
			return instr
		return replace(instr, value=fn(instr.value))
	if isinstance(instr, I.Print):
		return replace(instr, format=fn(instr.format), args=[fn(a) for a in instr.args])
	if isinstance(instr, (I.Move, I.Convert)):
		return replace(instr, src=fn(instr.src))
	return instr


__all__ = ["DEFINING_INSTRS", "instr_dest", "instr_sources", "map_sources"]
