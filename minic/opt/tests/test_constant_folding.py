# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import pytest

from minic.ir import ir_nodes as I
from minic.opt.constant_folding import ConstantFolding, fold_float, fold_int, wrap_i64

ADD, SUB, MUL, DIV, MOD = I.BinaryOp.ADD, I.BinaryOp.SUB, I.BinaryOp.MUL, I.BinaryOp.DIV, I.BinaryOp.MOD
X = I.Local("x")
T0 = I.Temp(0)


def _fn(*instrs):
	return I.IrFunction("f", I.INT, instructions=list(instrs))


def _fold(op, left, right, ty=I.INT):
	fn = _fn(I.BinaryOpInstr(T0, op, left, right, ty))
	changed = ConstantFolding().run(fn)
	return changed, fn.instructions[0]


def test_int_addition_folds_to_move():
	changed, instr = _fold(ADD, I.IntConstant(2), I.IntConstant(3))
	assert changed
	assert instr == I.Move(T0, I.IntConstant(5), I.INT)


def test_division_by_zero_is_left_alone():
	original = I.BinaryOpInstr(T0, DIV, I.IntConstant(7), I.IntConstant(0), I.INT)
	fn = _fn(original)
	assert ConstantFolding().run(fn) is False
	assert fn.instructions == [original]
	assert fold_int(MOD, 7, 0) is None


def test_multiply_by_zero_folds_to_zero():
	changed, instr = _fold(MUL, X, I.IntConstant(0))
	assert changed
	assert instr == I.Move(T0, I.IntConstant(0), I.INT)
	assert _fold(MUL, I.IntConstant(0), X)[1] == I.Move(T0, I.IntConstant(0), I.INT)


@pytest.mark.parametrize(
	"op, left, right",
	[
		(ADD, X, I.IntConstant(0)),
		(ADD, I.IntConstant(0), X),
		(SUB, X, I.IntConstant(0)),
		(MUL, X, I.IntConstant(1)),
		(MUL, I.IntConstant(1), X),
		(DIV, X, I.IntConstant(1)),
	],
)
def test_identities_reduce_to_the_variable(op, left, right):
	changed, instr = _fold(op, left, right)
	assert changed
	assert instr == I.Move(T0, X, I.INT)


def test_non_identities_pass_through():
	for op, left, right in [(SUB, I.IntConstant(0), X), (DIV, I.IntConstant(1), X), (ADD, X, X)]:
		changed, instr = _fold(op, left, right)
		assert not changed
		assert isinstance(instr, I.BinaryOpInstr)


def test_mixed_constant_kinds_are_not_folded():
	changed, _ = _fold(ADD, I.IntConstant(1), I.FloatConstant(2.0))
	assert not changed


def test_truncating_division_and_remainder():
	assert fold_int(DIV, -7, 2) == I.IntConstant(-3)
	assert fold_int(MOD, -7, 2) == I.IntConstant(-1)
	assert fold_int(MOD, 7, -2) == I.IntConstant(1)


def test_int_arithmetic_wraps_to_64_bits():
	assert fold_int(ADD, 2**63 - 1, 1) == I.IntConstant(-(2**63))
	assert wrap_i64(2**64 + 5) == 5


def test_comparisons_yield_zero_or_one():
	assert fold_int(I.BinaryOp.LT, 1, 2) == I.IntConstant(1)
	assert fold_int(I.BinaryOp.GE, 1, 2) == I.IntConstant(0)
	assert fold_float(I.BinaryOp.GT, 2.5, 1.0) == I.IntConstant(1)


def test_float_folding():
	changed, instr = _fold(ADD, I.FloatConstant(1.5), I.FloatConstant(2.25), I.FLOAT)
	assert changed
	assert instr == I.Move(T0, I.FloatConstant(3.75), I.FLOAT)
	assert fold_float(DIV, 1.0, 0.0) is None
	assert fold_float(MOD, 5.0, 2.0) is None


def test_float_equality_uses_epsilon():
	assert fold_float(I.BinaryOp.EQ, 0.1 + 0.2, 0.3) == I.IntConstant(1)
	assert fold_float(I.BinaryOp.NE, 0.1 + 0.2, 0.3) == I.IntConstant(0)
	assert fold_float(I.BinaryOp.EQ, 1.0, 1.5) == I.IntConstant(0)
