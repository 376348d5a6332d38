# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-06
"""
Constant folding and algebraic simplification of BinaryOp instructions.

A BinaryOp whose operands are both int constants (or both float constants) is
evaluated here and replaced by `Move(dest, result)`. Otherwise a handful of
identities are applied (x+0, x-0, x*1, x*0, x/1). Nothing else is touched.

Int arithmetic follows the target: two's complement i64 with wrap-around,
division truncating toward zero, remainder taking the dividend's sign.
Division or remainder by a constant zero is never folded; the instruction is
kept so the program still traps at run time.
"""

from __future__ import annotations

import sys
from typing import Callable, Dict, List, Optional

from minic.ir import ir_nodes as I

from .pass_base import OptimizationPass

_U64 = 1 << 64
_I64_SIGN = 1 << 63


def wrap_i64(value: int) -> int:
	value &= _U64 - 1
	return value - _U64 if value & _I64_SIGN else value


def _trunc_div(left: int, right: int) -> int:
	quotient = abs(left) // abs(right)
	return quotient if (left < 0) == (right < 0) else -quotient


def _trunc_mod(left: int, right: int) -> int:
	return left - right * _trunc_div(left, right)


_INT_COMPARE: Dict[I.BinaryOp, Callable[[int, int], bool]] = {
	I.BinaryOp.EQ: lambda a, b: a == b,
	I.BinaryOp.NE: lambda a, b: a != b,
	I.BinaryOp.LT: lambda a, b: a < b,
	I.BinaryOp.LE: lambda a, b: a <= b,
	I.BinaryOp.GT: lambda a, b: a > b,
	I.BinaryOp.GE: lambda a, b: a >= b,
}


def fold_int(op: I.BinaryOp, left: int, right: int) -> Optional[I.IrValue]:
	"""Evaluate `left op right` on i64 constants; None when the op is not foldable."""
	if op is I.BinaryOp.ADD:
		return I.IntConstant(wrap_i64(left + right))
	if op is I.BinaryOp.SUB:
		return I.IntConstant(wrap_i64(left - right))
	if op is I.BinaryOp.MUL:
		return I.IntConstant(wrap_i64(left * right))
	if op is I.BinaryOp.DIV:
		if right == 0:
			return None
		return I.IntConstant(wrap_i64(_trunc_div(left, right)))
	if op is I.BinaryOp.MOD:
		if right == 0:
			return None
		return I.IntConstant(wrap_i64(_trunc_mod(left, right)))
	compare = _INT_COMPARE.get(op)
	if compare is not None:
		return I.IntConstant(1 if compare(left, right) else 0)
	return None


def _float_eq(left: float, right: float) -> bool:
	return abs(left - right) < sys.float_info.epsilon


_FLOAT_COMPARE: Dict[I.BinaryOp, Callable[[float, float], bool]] = {
	I.BinaryOp.EQ: _float_eq,
	I.BinaryOp.NE: lambda a, b: not _float_eq(a, b),
	I.BinaryOp.LT: lambda a, b: a < b,
	I.BinaryOp.LE: lambda a, b: a <= b,
	I.BinaryOp.GT: lambda a, b: a > b,
	I.BinaryOp.GE: lambda a, b: a >= b,
}


def fold_float(op: I.BinaryOp, left: float, right: float) -> Optional[I.IrValue]:
	"""Evaluate `left op right` on f64 constants; comparisons produce IntConstant 0/1."""
	if op is I.BinaryOp.ADD:
		return I.FloatConstant(left + right)
	if op is I.BinaryOp.SUB:
		return I.FloatConstant(left - right)
	if op is I.BinaryOp.MUL:
		return I.FloatConstant(left * right)
	if op is I.BinaryOp.DIV:
		if right == 0.0:
			return None
		return I.FloatConstant(left / right)
	compare = _FLOAT_COMPARE.get(op)
	if compare is not None:
		return I.IntConstant(1 if compare(left, right) else 0)
	return None


def _is_int(value: I.IrValue, n: int) -> bool:
	return isinstance(value, I.IntConstant) and value.value == n


def simplify_identity(instr: I.BinaryOpInstr) -> Optional[I.IrValue]:
	"""
	Value `instr` reduces to under the algebraic identities, or None.

	  x + 0, 0 + x -> x
	  x - 0        -> x
	  x * 1, 1 * x -> x
	  x * 0, 0 * x -> 0
	  x / 1        -> x
	"""
	op, left, right = instr.op, instr.left, instr.right
	if op is I.BinaryOp.ADD:
		if _is_int(right, 0):
			return left
		if _is_int(left, 0):
			return right
	elif op is I.BinaryOp.SUB:
		if _is_int(right, 0):
			return left
	elif op is I.BinaryOp.MUL:
		if _is_int(right, 0) or _is_int(left, 0):
			return I.IntConstant(0)
		if _is_int(right, 1):
			return left
		if _is_int(left, 1):
			return right
	elif op is I.BinaryOp.DIV:
		if _is_int(right, 1):
			return left
	return None


def fold_binary(instr: I.BinaryOpInstr) -> I.IrInstr:
	"""Folded/simplified replacement for `instr`, or `instr` itself."""
	left, right = instr.left, instr.right
	result: Optional[I.IrValue]
	if isinstance(left, I.IntConstant) and isinstance(right, I.IntConstant):
		result = fold_int(instr.op, left.value, right.value)
	elif isinstance(left, I.FloatConstant) and isinstance(right, I.FloatConstant):
		result = fold_float(instr.op, left.value, right.value)
	else:
		result = simplify_identity(instr)
	if result is None:
		return instr
	return I.Move(instr.dest, result, instr.ty)


class ConstantFolding(OptimizationPass):
	"""Fold constant BinaryOps into Moves (see module docstring)."""

	name = "constant_folding"
	depends_on = ()

	def run(self, func: I.IrFunction) -> bool:
		rewritten: List[I.IrInstr] = []
		for instr in func.instructions:
			if isinstance(instr, I.BinaryOpInstr):
				rewritten.append(fold_binary(instr))
			else:
				rewritten.append(instr)
		return self._commit(func, rewritten)


__all__ = ["ConstantFolding", "fold_binary", "fold_int", "fold_float", "simplify_identity", "wrap_i64"]
