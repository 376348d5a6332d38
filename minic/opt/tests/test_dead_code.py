# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from minic.ir import ir_nodes as I
from minic.opt.dead_code import DeadCodeElimination, collect_used

T0, T1 = I.Temp(0), I.Temp(1)
A = I.Local("a")


def _run(*instrs):
	fn = I.IrFunction("f", I.INT, instructions=list(instrs))
	changed = DeadCodeElimination().run(fn)
	return changed, fn.instructions


def test_read_temp_is_kept_and_unread_temp_is_dropped():
	used = I.BinaryOpInstr(T0, I.BinaryOp.ADD, A, I.IntConstant(1), I.INT)
	unused = I.BinaryOpInstr(T1, I.BinaryOp.ADD, A, I.IntConstant(2), I.INT)
	changed, instrs = _run(used, unused, I.Return(T0, I.INT))
	assert changed
	assert instrs == [used, I.Return(T0, I.INT)]


def test_side_effecting_instructions_are_kept():
	instrs_in = [
		I.Alloca(I.INT, "a"),
		I.Call(T0, "f", [], I.INT),
		I.Store(I.IntConstant(1), A, I.INT),
		I.Convert(T1, A, I.FLOAT, I.INT),
		I.Print(I.StringConstant("str_0"), []),
		I.Comment("kept"),
		I.Label("l"),
		I.Jump("l"),
	]
	changed, instrs = _run(*instrs_in)
	assert not changed
	assert instrs == instrs_in


def test_unread_move_load_and_unary_are_dropped():
	changed, instrs = _run(
		I.Move(T0, I.IntConstant(1), I.INT),
		I.Load(T1, A, I.INT),
		I.UnaryOpInstr(I.Temp(2), I.UnaryOp.NOT, A, I.INT),
		I.Return(None, I.VOID),
	)
	assert changed
	assert instrs == [I.Return(None, I.VOID)]


def test_writes_to_globals_are_kept():
	write = I.Move(I.Global("counter"), I.IntConstant(1), I.INT)
	changed, instrs = _run(write, I.Return(None, I.VOID))
	assert not changed
	assert instrs[0] == write


def test_load_and_convert_sources_count_as_uses():
	fn = I.IrFunction(
		"f",
		I.INT,
		instructions=[
			I.Move(T0, I.IntConstant(1), I.INT),
			I.Load(T1, T0, I.INT),
			I.Convert(I.Temp(2), T1, I.FLOAT, I.INT),
		],
	)
	assert {T0, T1} <= collect_used(fn)
	assert DeadCodeElimination().run(fn) is False
