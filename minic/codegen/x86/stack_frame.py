# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-09
"""
Stack frame layout for one IR function.

Every IR value that lives in memory gets a fixed slot below the frame pointer;
there is no register allocation. The layout is computed up front, before any
instruction of the function is emitted, so the prologue can reserve the whole
frame with a single `sub rsp, N`.

Layout, growing downwards from rbp:
  1. a reserved 32-byte block (same on every target);
  2. declared locals, in declaration order, each sized by the target's type
     table (i32: 4, f64: 8, i8: 1, str/pointers: 8, void: 0);
  3. one 8-byte slot per temp, at its first definition (BinaryOp, UnaryOp,
     Load, Move, Call, Convert/Cast);
  4. one 8-byte home slot per parameter (register arguments are spilled here).
The running total is rounded up to the target's stack alignment (16).

A slot's offset is the negated running total after adding it, so every
offset is strictly negative and slots never overlap.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from minic.ir import ir_nodes as I

from .targets import Target

RESERVED_BYTES = 32
TEMP_SLOT_BYTES = 8
PARAM_SLOT_BYTES = 8

# Instructions whose Temp destination gets a slot.
_TEMP_DEFINING = (I.BinaryOpInstr, I.UnaryOpInstr, I.Load, I.Move, I.Call, I.Convert)


@dataclass(frozen=True)
class Slot:
	"""One stack slot: `[rbp + offset]`, `size` bytes, holding a value of `ty`."""

	label: str
	offset: int
	size: int
	ty: I.IrType
	kind: str  # "local" | "temp" | "param"


@dataclass
class FrameLayout:
	"""Result of StackFrameAllocator.allocate for one function."""

	function: str
	locals: Dict[str, Slot] = field(default_factory=dict)
	temps: Dict[int, Slot] = field(default_factory=dict)
	params: Dict[str, Slot] = field(default_factory=dict)
	used_bytes: int = RESERVED_BYTES
	frame_size: int = 0

	def slot_for(self, value: I.IrValue) -> Optional[Slot]:
		if isinstance(value, I.Local):
			return self.locals.get(value.name)
		if isinstance(value, I.Temp):
			return self.temps.get(value.id)
		if isinstance(value, I.Parameter):
			return self.params.get(value.name)
		return None

	def offset_of(self, value: I.IrValue) -> Optional[int]:
		slot = self.slot_for(value)
		return None if slot is None else slot.offset

	def type_of(self, value: I.IrValue) -> Optional[I.IrType]:
		slot = self.slot_for(value)
		return None if slot is None else slot.ty

	def slots(self) -> List[Slot]:
		"""All slots, nearest to rbp first."""
		every = [*self.locals.values(), *self.temps.values(), *self.params.values()]
		return sorted(every, key=lambda s: -s.offset)


def align_up(value: int, alignment: int) -> int:
	return (value + alignment - 1) & ~(alignment - 1)


class StackFrameAllocator:
	"""
	Computes FrameLayouts. One allocator is reused for every function of a
	program; `allocate` resets its state first.
	"""

	def __init__(self, target: Target) -> None:
		self.target = target
		self._total = RESERVED_BYTES
		self._layout: Optional[FrameLayout] = None

	def reset(self) -> None:
		self._total = RESERVED_BYTES
		self._layout = None

	def _push(self, size: int) -> int:
		self._total += size
		return -self._total

	def type_size(self, ty: I.IrType) -> int:
		return self.target.type_info(ty.layout_name).size

	def allocate(self, func: I.IrFunction) -> FrameLayout:
		self.reset()
		layout = FrameLayout(function=func.name)
		self._layout = layout

		for name, ty in func.locals:
			if name in layout.locals:
				continue
			size = self.type_size(ty)
			layout.locals[name] = Slot(f"%{name}", self._push(size), size, ty, "local")

		for instr in func.instructions:
			if not isinstance(instr, _TEMP_DEFINING):
				continue
			dest = instr.dest
			if not isinstance(dest, I.Temp) or dest.id in layout.temps:
				continue
			layout.temps[dest.id] = Slot(
				f"%{dest.id}", self._push(TEMP_SLOT_BYTES), TEMP_SLOT_BYTES, _defined_type(instr), "temp"
			)

		for name, ty in func.params:
			if name in layout.params:
				continue
			layout.params[name] = Slot(f"${name}", self._push(PARAM_SLOT_BYTES), PARAM_SLOT_BYTES, ty, "param")

		layout.used_bytes = self._total
		layout.frame_size = align_up(self._total, self.target.stack_alignment)
		return layout

	@property
	def current(self) -> Optional[FrameLayout]:
		return self._layout


def _defined_type(instr: I.IrInstr) -> I.IrType:
	if isinstance(instr, I.Call):
		return instr.return_type
	if isinstance(instr, I.Convert):
		return instr.dest_type
	if isinstance(instr, I.BinaryOpInstr) and instr.op.is_comparison:
		return I.INT
	return instr.ty  # type: ignore[attr-defined]


__all__ = [
	"RESERVED_BYTES",
	"TEMP_SLOT_BYTES",
	"PARAM_SLOT_BYTES",
	"Slot",
	"FrameLayout",
	"StackFrameAllocator",
	"align_up",
]
