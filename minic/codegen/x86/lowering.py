# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-10
"""
Per-instruction lowering of Mini-C IR to x86-64.

Pipeline placement:
  optimized IR → FunctionLowerer (this file, one instance per function) → AsmEmitter lines

Machine model:
  - every IR value lives in its stack slot (see stack_frame.py); registers are
    only used within a single instruction's expansion;
  - rax/eax/al is the integer scratch and accumulator, rcx/ecx the second
    integer operand, rdx/edx the remainder of a division;
  - xmm0/xmm1 are the floating scratch registers;
  - float literals never appear as instruction operands: their IEEE bit
    pattern goes through rax first.
  - IR block labels are emitted as `<function symbol>.<label>`.

Failure policy: lowering never raises. When an operand has no machine
location, or an operation has no lowering, the instruction is replaced by a
comment and its destination (when addressable) is set to zero.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from minic.ir import ir_nodes as I
from minic.ir.ir_printer import format_instr, format_value
from minic.ir.operands import instr_dest

from .abi import ArgLocation, assign_argument_registers, vector_register_count
from .emitter import AsmEmitter
from .instruction import Imm, LabelRef, Mem, Mnemonic, Operand, Reg, Register, RipRel, Size
from .stack_frame import FrameLayout
from .targets import Target

M = Mnemonic
R = Register

_SETCC = {
	I.BinaryOp.EQ: M.SETE,
	I.BinaryOp.NE: M.SETNE,
	I.BinaryOp.LT: M.SETL,
	I.BinaryOp.LE: M.SETLE,
	I.BinaryOp.GT: M.SETG,
	I.BinaryOp.GE: M.SETGE,
}
_INT_ARITH = {
	I.BinaryOp.ADD: M.ADD,
	I.BinaryOp.SUB: M.SUB,
	I.BinaryOp.MUL: M.IMUL,
}
_FLOAT_ARITH = {
	I.BinaryOp.ADD: M.ADDSD,
	I.BinaryOp.SUB: M.SUBSD,
	I.BinaryOp.MUL: M.MULSD,
	I.BinaryOp.DIV: M.DIVSD,
}

_MEMORY_VALUES = (I.Local, I.Temp, I.Parameter, I.Global)


class LoweringError(Exception):
	"""An operand without a machine location; handled inside FunctionLowerer.lower."""


def size_of(ty: I.IrType) -> Size:
	"""Width of a value of `ty` in its stack slot."""
	if ty.kind is I.TypeKind.INT:
		return Size.DWORD
	if ty.kind is I.TypeKind.CHAR:
		return Size.BYTE
	return Size.QWORD


def _work_size(size: Size) -> Size:
	"""Narrow integers are computed in 32-bit registers."""
	return Size.QWORD if size is Size.QWORD else Size.DWORD


def fit_immediate(value: int, size: Size) -> int:
	"""Wrap `value` into the signed range of `size`."""
	bits = size.value * 8
	value &= (1 << bits) - 1
	return value - (1 << bits) if value >> (bits - 1) else value


def _constant_type(value: I.IrValue) -> Optional[I.IrType]:
	if isinstance(value, I.IntConstant):
		return I.INT
	if isinstance(value, I.FloatConstant):
		return I.FLOAT
	if isinstance(value, I.CharConstant):
		return I.CHAR
	if isinstance(value, I.StringConstant):
		return I.STRING
	return None


class FunctionLowerer:
	"""
	Lowers the instructions of one function into `emitter`.

	Entry points:
	  spill_parameters()           # right after the frame is allocated
	  lower(instr, is_last=False)  # once per IR instruction, in order
	"""

	def __init__(
		self,
		target: Target,
		emitter: AsmEmitter,
		layout: FrameLayout,
		func: I.IrFunction,
		*,
		epilogue_label: str,
		ir_comments: bool = False,
	) -> None:
		self.target = target
		self.emitter = emitter
		self.layout = layout
		self.func = func
		self.epilogue_label = epilogue_label
		self.ir_comments = ir_comments
		self._handlers: Dict[type, Callable[..., None]] = {
			I.Alloca: self._lower_alloca,
			I.Load: self._lower_load,
			I.Store: self._lower_store,
			I.Move: self._lower_move,
			I.BinaryOpInstr: self._lower_binary,
			I.UnaryOpInstr: self._lower_unary,
			I.Call: self._lower_call,
			I.Print: self._lower_print,
			I.Branch: self._lower_branch,
			I.Jump: self._lower_jump,
			I.Label: self._lower_label,
			I.Return: self._lower_return,
			I.Convert: self._lower_convert,
			I.Cast: self._lower_convert,
			I.Comment: self._lower_comment,
		}

	# Emission helpers

	def _emit(self, mnemonic: Mnemonic, *operands: Operand, size: Optional[Size] = None, comment: Optional[str] = None) -> None:
		self.emitter.emit_instruction(mnemonic, operands, size=size, comment=comment)

	def _comment(self, text: str) -> None:
		self.emitter.emit_comment(text)

	# Operand resolution

	def _mem(self, value: I.IrValue) -> Operand:
		"""Memory operand holding `value`; raises LoweringError when it has none."""
		if isinstance(value, I.Global):
			return RipRel(self.target.symbol(value.name))
		offset = self.layout.offset_of(value)
		if offset is not None:
			return Mem(self.target.frame_pointer, offset)
		if isinstance(value, (I.Local, I.Temp, I.Parameter)):
			raise LoweringError(f"no stack slot for {format_value(value)}")
		raise LoweringError(f"{format_value(value)} is not addressable")

	def _value_type(self, value: I.IrValue) -> I.IrType:
		ty = _constant_type(value)
		if ty is None:
			ty = self.layout.type_of(value)
		return ty if ty is not None else I.INT

	def _imm(self, value: I.IrValue, size: Size) -> Imm:
		if isinstance(value, I.IntConstant):
			return Imm(fit_immediate(value.value, size))
		if isinstance(value, I.CharConstant):
			return Imm(ord(value.value))
		if isinstance(value, I.FloatConstant):
			return Imm(fit_immediate(value.bits, Size.QWORD))
		raise LoweringError(f"{format_value(value)} is not an immediate")

	def _load_gp(self, value: I.IrValue, family: Register, size: Size, *, src_size: Optional[Size] = None) -> Register:
		"""
		Load `value` into `family` viewed at `size` and return the register view.

		Narrow memory sources are sign-extended; wider ones are read at `size`.
		Float literals and string addresses always fill the whole 64-bit register.
		"""
		src_size = src_size or size
		view = family.sized(size)
		if isinstance(value, I.FloatConstant):
			self._emit(M.MOV, Reg(family), self._imm(value, Size.QWORD), comment=f"float {value.value!r} as raw bits")
			return family
		if isinstance(value, I.StringConstant):
			self._emit(M.LEA, Reg(family), RipRel(value.label))
			return family
		if isinstance(value, (I.IntConstant, I.CharConstant)):
			self._emit(M.MOV, Reg(view), self._imm(value, size))
			return view
		mem = self._mem(value)
		if src_size is Size.BYTE and size is not Size.BYTE:
			self._emit(M.MOVSX, Reg(view), mem, size=Size.BYTE)
		elif src_size is Size.DWORD and size is Size.QWORD:
			self._emit(M.MOVSXD, Reg(view), mem, size=Size.DWORD)
		else:
			self._emit(M.MOV, Reg(view), mem, size=size)
		return view

	def _load_xmm(self, value: I.IrValue, xmm: Register) -> None:
		if isinstance(value, (I.FloatConstant, I.IntConstant)):
			literal = value if isinstance(value, I.FloatConstant) else I.FloatConstant(float(value.value))
			self._emit(M.MOV, Reg(R.RAX), self._imm(literal, Size.QWORD), comment=f"float {literal.value!r} as raw bits")
			self._emit(M.MOVQ, Reg(xmm), Reg(R.RAX))
			return
		if not isinstance(value, _MEMORY_VALUES):
			raise LoweringError(f"{format_value(value)} is not a float value")
		self._emit(M.MOVSD, Reg(xmm), self._mem(value), size=Size.QWORD)

	def _store_gp(self, dst: Operand, family: Register, size: Size) -> None:
		self._emit(M.MOV, dst, Reg(family.sized(size)), size=size)

	def _store_zero(self, dest: I.IrValue, fallback: I.IrType) -> None:
		ty = self.layout.type_of(dest) or fallback
		size = size_of(ty)
		self._emit(M.MOV, self._mem(dest), Imm(0), size=size)

	# Entry points

	def spill_parameters(self) -> None:
		"""Copy register arguments into their home slots."""
		if not self.func.params:
			return
		types = [ty for _name, ty in self.func.params]
		locations = assign_argument_registers(self.target, [ty.is_float for ty in types])
		for (name, ty), loc in zip(self.func.params, locations):
			dst = self._mem(I.Parameter(name))
			if loc is None:
				self._comment(f"parameter ${name} is passed on the stack: not supported")
			elif ty.is_float and loc.xmm_reg is not None:
				self._emit(M.MOVSD, dst, Reg(loc.xmm_reg), size=Size.QWORD, comment=f"spill ${name}")
			elif loc.int_reg is not None:
				self._emit(M.MOV, dst, Reg(loc.int_reg), size=Size.QWORD, comment=f"spill ${name}")

	def lower(self, instr: I.IrInstr, *, is_last: bool = False) -> None:
		if self.ir_comments and not isinstance(instr, (I.Comment, I.Label)):
			self._comment(f"IR: {format_instr(instr)}")
		handler = self._handlers.get(type(instr))
		if handler is None:
			self._comment(f"unsupported IR instruction {type(instr).__name__}; skipped")
			return
		try:
			if isinstance(instr, I.Return):
				self._lower_return(instr, is_last=is_last)
			else:
				handler(instr)
		except LoweringError as err:
			self._comment(f"cannot lower `{format_instr(instr)}`: {err}")
			self._neutral_default(instr, is_last=is_last)

	def _neutral_default(self, instr: I.IrInstr, *, is_last: bool) -> None:
		if isinstance(instr, I.Return):
			self._emit(M.XOR, Reg(R.EAX), Reg(R.EAX))
			if not is_last:
				self._emit(M.JMP, LabelRef(self.epilogue_label))
			return
		dest = instr_dest(instr)
		if dest is None:
			return
		try:
			self._store_zero(dest, I.INT)
		except LoweringError:
			pass

	# Data movement

	def _lower_alloca(self, instr: I.Alloca) -> None:
		slot = self.layout.locals.get(instr.name)
		if slot is None:
			self._comment(f"alloca {instr.ty} {instr.name}: not a declared local, no slot")
			return
		self._comment(f"alloca {instr.ty} {instr.name} at {Mem(self.target.frame_pointer, slot.offset).render()} ({slot.size} bytes)")

	def _move(self, dest: I.IrValue, src: I.IrValue, ty: I.IrType) -> None:
		dst = self._mem(dest)
		size = size_of(ty)
		if isinstance(src, I.FloatConstant):
			self._load_gp(src, R.RAX, Size.QWORD)
			self._store_gp(dst, R.RAX, Size.QWORD)
		elif isinstance(src, I.StringConstant):
			self._load_gp(src, R.RAX, Size.QWORD)
			self._store_gp(dst, R.RAX, Size.QWORD)
		elif isinstance(src, (I.IntConstant, I.CharConstant)):
			imm = self._imm(src, size)
			if size is Size.QWORD and not imm.fits_imm32:
				self._emit(M.MOV, Reg(R.RAX), imm)
				self._store_gp(dst, R.RAX, size)
			else:
				self._emit(M.MOV, dst, imm, size=size)
		else:
			self._load_gp(src, R.RAX, size)
			self._store_gp(dst, R.RAX, size)

	def _lower_load(self, instr: I.Load) -> None:
		self._move(instr.dest, instr.src, instr.ty)

	def _lower_store(self, instr: I.Store) -> None:
		self._move(instr.dest, instr.value, instr.ty)

	def _lower_move(self, instr: I.Move) -> None:
		self._move(instr.dest, instr.src, instr.ty)

	def _lower_convert(self, instr: I.Convert) -> None:
		kw = "cast" if isinstance(instr, I.Cast) else "convert"
		dst = self._mem(instr.dest)
		dest_size = size_of(instr.dest_type)
		self._comment(f"{kw} {instr.src_type} -> {instr.dest_type}: bit copy, no numeric conversion")
		self._load_gp(instr.src, R.RAX, dest_size, src_size=size_of(instr.src_type))
		self._store_gp(dst, R.RAX, dest_size)

	# Arithmetic

	def _int_rhs(self, value: I.IrValue, work: Size, operand_size: Size) -> Operand:
		"""Right operand for a two-operand integer instruction against rax."""
		if isinstance(value, (I.IntConstant, I.CharConstant)):
			imm = self._imm(value, work)
			if imm.fits_imm32:
				return imm
		elif isinstance(value, _MEMORY_VALUES) and operand_size is work:
			return self._mem(value)
		return Reg(self._load_gp(value, R.RCX, work, src_size=operand_size))

	def _lower_binary(self, instr: I.BinaryOpInstr) -> None:
		if instr.ty.is_float:
			self._lower_float_binary(instr)
		else:
			self._lower_int_binary(instr)

	def _lower_int_binary(self, instr: I.BinaryOpInstr) -> None:
		op = instr.op
		dst = self._mem(instr.dest)
		operand_size = size_of(instr.ty)
		work = _work_size(operand_size)
		acc = R.RAX.sized(work)
		self._load_gp(instr.left, R.RAX, work, src_size=operand_size)

		if op in _INT_ARITH:
			rhs = self._int_rhs(instr.right, work, operand_size)
			self._emit(_INT_ARITH[op], Reg(acc), rhs, size=work if rhs.is_memory else None)
			self._store_gp(dst, R.RAX, operand_size)
		elif op in (I.BinaryOp.DIV, I.BinaryOp.MOD):
			divisor = self._load_gp(instr.right, R.RCX, work, src_size=operand_size)
			self._emit(M.CDQ if work is Size.DWORD else M.CQO, comment="sign-extend dividend")
			self._emit(M.IDIV, Reg(divisor))
			self._store_gp(dst, R.RAX if op is I.BinaryOp.DIV else R.RDX, operand_size)
		elif op.is_comparison:
			rhs = self._int_rhs(instr.right, work, operand_size)
			self._emit(M.CMP, Reg(acc), rhs, size=work if rhs.is_memory else None)
			self._emit(_SETCC[op], Reg(R.AL))
			self._emit(M.MOVZX, Reg(R.EAX), Reg(R.AL))
			self._store_gp(dst, R.RAX, Size.DWORD)
		elif op.is_logical:
			self._emit(M.CMP, Reg(acc), Imm(0))
			self._emit(M.SETNE, Reg(R.AL))
			self._emit(M.MOVZX, Reg(R.EAX), Reg(R.AL))
			other = self._load_gp(instr.right, R.RCX, work, src_size=operand_size)
			self._emit(M.CMP, Reg(other), Imm(0))
			self._emit(M.SETNE, Reg(R.CL))
			self._emit(M.MOVZX, Reg(R.ECX), Reg(R.CL))
			self._emit(M.AND if op is I.BinaryOp.AND else M.OR, Reg(R.EAX), Reg(R.ECX))
			self._store_gp(dst, R.RAX, Size.DWORD)
		else:
			self._comment(f"unsupported integer operation '{op.value}'; result set to 0")
			self._store_zero(instr.dest, instr.ty)

	def _lower_float_binary(self, instr: I.BinaryOpInstr) -> None:
		dst = self._mem(instr.dest)
		mnemonic = _FLOAT_ARITH.get(instr.op)
		if mnemonic is None:
			self._comment(f"unsupported float operation '{instr.op.value}'; result set to 0")
			self._store_zero(instr.dest, instr.ty)
			return
		self._load_xmm(instr.left, R.XMM0)
		if isinstance(instr.right, _MEMORY_VALUES):
			self._emit(mnemonic, Reg(R.XMM0), self._mem(instr.right), size=Size.QWORD)
		else:
			self._load_xmm(instr.right, R.XMM1)
			self._emit(mnemonic, Reg(R.XMM0), Reg(R.XMM1))
		self._emit(M.MOVSD, dst, Reg(R.XMM0), size=Size.QWORD)

	def _lower_unary(self, instr: I.UnaryOpInstr) -> None:
		dst = self._mem(instr.dest)
		if instr.ty.is_float:
			if instr.op is not I.UnaryOp.NEG:
				self._comment(f"unsupported float operation '{instr.op.value}'; result set to 0")
				self._store_zero(instr.dest, instr.ty)
				return
			self._load_gp(instr.operand, R.RAX, Size.QWORD)
			self._emit(M.BTC, Reg(R.RAX), Imm(63), comment="flip the sign bit")
			self._store_gp(dst, R.RAX, Size.QWORD)
			return
		size = size_of(instr.ty)
		acc = self._load_gp(instr.operand, R.RAX, _work_size(size), src_size=size)
		if instr.op is I.UnaryOp.NEG:
			self._emit(M.NEG, Reg(acc))
		else:
			self._emit(M.CMP, Reg(acc), Imm(0))
			self._emit(M.SETE, Reg(R.AL))
			self._emit(M.MOVZX, Reg(R.EAX), Reg(R.AL))
		self._store_gp(dst, R.RAX, size)

	# Control flow

	def _block_label(self, name: str) -> str:
		"""`main.end_0` for IR label `end_0` in main; IR labels are only unique per function."""
		return f"{self.target.symbol(self.func.name)}.{name}"

	def _lower_branch(self, instr: I.Branch) -> None:
		ty = self._value_type(instr.cond)
		size = size_of(ty)
		acc = self._load_gp(instr.cond, R.RAX, _work_size(size), src_size=size)
		self._emit(M.CMP, Reg(acc), Imm(0))
		self._emit(M.JE, LabelRef(self._block_label(instr.false_label)))
		self._emit(M.JMP, LabelRef(self._block_label(instr.true_label)))

	def _lower_jump(self, instr: I.Jump) -> None:
		self._emit(M.JMP, LabelRef(self._block_label(instr.label)))

	def _lower_label(self, instr: I.Label) -> None:
		self.emitter.emit_label(self._block_label(instr.name))

	def _lower_return(self, instr: I.Return, *, is_last: bool = False) -> None:
		value = instr.value
		if value is None or instr.ty.is_void:
			self._emit(M.XOR, Reg(R.EAX), Reg(R.EAX))
		elif instr.ty.is_float:
			self._load_xmm(value, self.target.float_return_reg)
		else:
			size = size_of(instr.ty)
			self._load_gp(value, self.target.return_reg, _work_size(size), src_size=size)
		if not is_last:
			self._emit(M.JMP, LabelRef(self.epilogue_label))

	def _lower_comment(self, instr: I.Comment) -> None:
		self._comment(instr.text)

	# Calls

	def _load_arguments(
		self,
		args: Sequence[I.IrValue],
		types: Sequence[I.IrType],
		locations: Sequence[Optional[ArgLocation]],
		*,
		first_position: int = 0,
	) -> None:
		for idx, (arg, ty, loc) in enumerate(zip(args, types, locations)):
			if loc is None:
				self._comment(
					f"argument {first_position + idx} ({format_value(arg)}) dropped: "
					"no argument register left and stack arguments are not supported"
				)
				continue
			if ty.is_float:
				if loc.int_reg is not None:
					self._load_gp(arg, loc.int_reg, Size.QWORD)
					if loc.xmm_reg is not None:
						self._emit(M.MOVQ, Reg(loc.xmm_reg), Reg(loc.int_reg))
				elif loc.xmm_reg is not None:
					self._load_xmm(arg, loc.xmm_reg)
				continue
			size = size_of(ty)
			assert loc.int_reg is not None
			self._load_gp(arg, loc.int_reg, _work_size(size), src_size=size)

	def _emit_call(self, name: str) -> None:
		shadow = self.target.shadow_space
		if shadow:
			self._emit(M.SUB, Reg(self.target.stack_pointer), Imm(shadow), comment="shadow space")
		self.emitter.emit_line(self.target.format_function_call(name))
		if shadow:
			self._emit(M.ADD, Reg(self.target.stack_pointer), Imm(shadow))

	def _argument_types(self, instr: I.Call) -> List[I.IrType]:
		return [self._value_type(arg) for arg in instr.args]

	def _lower_call(self, instr: I.Call) -> None:
		dst = self._mem(instr.dest) if instr.dest is not None else None
		self._comment(f"call {instr.func} with {len(instr.args)} args")
		types = self._argument_types(instr)
		locations = assign_argument_registers(self.target, [ty.is_float for ty in types])
		self._load_arguments(instr.args, types, locations)
		self._emit_call(instr.func)
		if dst is None:
			return
		if instr.return_type.is_float:
			self._emit(M.MOVSD, dst, Reg(self.target.float_return_reg), size=Size.QWORD)
		else:
			self._store_gp(dst, self.target.return_reg, size_of(instr.return_type))

	def _lower_print(self, instr: I.Print) -> None:
		self._comment(f"print with {len(instr.args)} args")
		format_reg = self.target.int_param_regs[0]
		if isinstance(instr.format, I.StringConstant):
			self._emit(M.LEA, Reg(format_reg), RipRel(instr.format.label), comment="format string")
		else:
			self._load_gp(instr.format, format_reg, Size.QWORD)
		types = [self._value_type(arg) for arg in instr.args]
		locations = assign_argument_registers(self.target, [ty.is_float for ty in types], first_position=1)
		self._load_arguments(instr.args, types, locations, first_position=1)
		vectors = vector_register_count(locations)
		self._emit(M.MOV, Reg(R.EAX), Imm(vectors), comment="vector registers used")
		self._emit_call("printf")


__all__ = ["FunctionLowerer", "LoweringError", "size_of", "fit_immediate"]
