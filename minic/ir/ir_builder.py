# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-03
"""
IrBuilder: incremental construction of an IrProgram.

This is the API the (external) AST → IR generator programs against, and what
the tests use to build IR by hand. It owns every counter the IR needs:
- temp ids (`%0`, `%1`, ...) and label suffixes live on the builder;
- string labels (`str_<n>`) live on the IrProgram (see IrProgram.intern_string).

Nothing here is process-global: two builders never share numbering.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from . import ir_nodes as I

# printf format used when a print statement has no explicit format string.
DEFAULT_FORMATS = {
	I.TypeKind.INT: "%d\n",
	I.TypeKind.FLOAT: "%.6f\n",
	I.TypeKind.CHAR: "%c\n",
	I.TypeKind.STRING: "%s\n",
}


class IrBuilder:
	"""
	Helper to construct IR functions instruction by instruction.

	Typical use:
	  b = IrBuilder()
	  b.begin_function("main", I.INT)
	  x = b.declare_local("x", I.INT)
	  b.store(I.IntConstant(42), x, I.INT)
	  t = b.load(x, I.INT)
	  b.ret(t, I.INT)
	  program = b.program
	"""

	def __init__(self, program: Optional[I.IrProgram] = None) -> None:
		self.program = program if program is not None else I.IrProgram()
		self.func: Optional[I.IrFunction] = None
		self._temp_counter = 0
		self._label_counter = 0

	# Scaffolding

	def begin_function(
		self,
		name: str,
		return_type: I.IrType,
		params: Sequence[Tuple[str, I.IrType]] = (),
	) -> I.IrFunction:
		"""Create a function, append it to the program and make it current."""
		fn = I.IrFunction(name=name, return_type=return_type, params=list(params))
		self.program.functions.append(fn)
		self.func = fn
		return fn

	def _current(self) -> I.IrFunction:
		if self.func is None:
			raise RuntimeError("IrBuilder: no current function (call begin_function first)")
		return self.func

	def new_temp(self) -> I.Temp:
		temp = I.Temp(self._temp_counter)
		self._temp_counter += 1
		return temp

	def new_label(self, hint: str) -> str:
		"""Fresh label `<hint>_<n>`; `n` is unique across the whole builder."""
		label = f"{hint}_{self._label_counter}"
		self._label_counter += 1
		return label

	def emit(self, instr: I.IrInstr) -> I.IrInstr:
		self._current().instructions.append(instr)
		return instr

	# Strings

	def string_literal(self, content: str) -> I.StringConstant:
		return I.StringConstant(self.program.intern_string(content))

	def default_format(self, ty: I.IrType) -> I.StringConstant:
		"""Synthesized printf format for a bare `print(value)` of type `ty`."""
		return self.string_literal(DEFAULT_FORMATS.get(ty.kind, "%d\n"))

	# Instructions

	def declare_local(self, name: str, ty: I.IrType) -> I.Local:
		"""Record a local on the function and emit its Alloca."""
		fn = self._current()
		if name not in fn.local_types():
			fn.locals.append((name, ty))
		self.emit(I.Alloca(ty, name))
		return I.Local(name)

	def load(self, src: I.IrValue, ty: I.IrType) -> I.Temp:
		dest = self.new_temp()
		self.emit(I.Load(dest, src, ty))
		return dest

	def store(self, value: I.IrValue, dest: I.IrValue, ty: I.IrType) -> None:
		self.emit(I.Store(value, dest, ty))

	def binary(self, op: I.BinaryOp, left: I.IrValue, right: I.IrValue, ty: I.IrType) -> I.Temp:
		dest = self.new_temp()
		self.emit(I.BinaryOpInstr(dest, op, left, right, ty))
		return dest

	def unary(self, op: I.UnaryOp, operand: I.IrValue, ty: I.IrType) -> I.Temp:
		dest = self.new_temp()
		self.emit(I.UnaryOpInstr(dest, op, operand, ty))
		return dest

	def move(self, dest: I.IrValue, src: I.IrValue, ty: I.IrType) -> None:
		self.emit(I.Move(dest, src, ty))

	def call(self, func: str, args: Iterable[I.IrValue], return_type: I.IrType) -> Optional[I.Temp]:
		"""Emit a call; returns the result temp, or None for void callees."""
		dest = None if return_type.is_void else self.new_temp()
		self.emit(I.Call(dest, func, list(args), return_type))
		return dest

	def convert(self, src: I.IrValue, src_type: I.IrType, dest_type: I.IrType) -> I.Temp:
		dest = self.new_temp()
		self.emit(I.Convert(dest, src, dest_type, src_type))
		return dest

	def cast(self, src: I.IrValue, src_type: I.IrType, dest_type: I.IrType) -> I.Temp:
		dest = self.new_temp()
		self.emit(I.Cast(dest, src, dest_type, src_type))
		return dest

	def branch(self, cond: I.IrValue, true_label: str, false_label: str) -> None:
		self.emit(I.Branch(cond, true_label, false_label))

	def jump(self, label: str) -> None:
		self.emit(I.Jump(label))

	def label(self, name: str) -> None:
		self.emit(I.Label(name))

	def ret(self, value: Optional[I.IrValue], ty: I.IrType) -> None:
		self.emit(I.Return(value, ty))

	def print(self, fmt: I.IrValue, args: List[I.IrValue]) -> None:
		self.emit(I.Print(fmt, list(args)))

	def print_value(self, value: I.IrValue, ty: I.IrType) -> None:
		"""`print(value)` with the synthesized default format for `ty`."""
		self.emit(I.Print(self.default_format(ty), [value]))

	def comment(self, text: str) -> None:
		self.emit(I.Comment(text))


__all__ = ["IrBuilder", "DEFAULT_FORMATS"]
