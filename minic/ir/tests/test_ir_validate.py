# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from minic.core.diagnostics import has_errors
from minic.ir import ir_nodes as I
from minic.ir.ir_validate import validate_program
from minic.ir.parser import parse_ir


def _program(*instrs, locals=(), params=(), ret=I.INT):
	fn = I.IrFunction("main", ret, params=list(params), locals=list(locals), instructions=list(instrs))
	return I.IrProgram(functions=[fn])


def _codes(program):
	return [d.code for d in validate_program(program)]


def test_well_formed_programs_pass(arith_program, sample_ir_text):
	assert validate_program(arith_program) == []
	assert validate_program(parse_ir(sample_ir_text)) == []


def test_temp_used_before_definition():
	program = _program(
		I.Move(I.Temp(1), I.Temp(0), I.INT),
		I.Move(I.Temp(0), I.IntConstant(1), I.INT),
		I.Return(I.Temp(1), I.INT),
	)
	diags = validate_program(program)
	assert [d.code for d in diags] == ["IR_TEMP_USE_BEFORE_DEF"]
	assert diags[0].phase == "validate"
	assert "main" in diags[0].message


def test_temp_defined_twice():
	program = _program(
		I.Move(I.Temp(0), I.IntConstant(1), I.INT),
		I.Move(I.Temp(0), I.IntConstant(2), I.INT),
		I.Return(I.Temp(0), I.INT),
	)
	assert _codes(program) == ["IR_TEMP_REDEF"]


def test_forward_jump_is_fine_but_unknown_label_is_not():
	program = _program(
		I.Jump("done"),
		I.Branch(I.IntConstant(1), "done", "nowhere"),
		I.Label("done"),
		I.Return(I.IntConstant(0), I.INT),
	)
	assert _codes(program) == ["IR_UNKNOWN_LABEL"]


def test_unknown_names():
	program = _program(
		I.Store(I.Parameter("n"), I.Local("ghost"), I.INT),
		I.Print(I.StringConstant("str_9"), []),
		I.Return(I.IntConstant(0), I.INT),
	)
	assert sorted(_codes(program)) == ["IR_UNKNOWN_LOCAL", "IR_UNKNOWN_PARAM", "IR_UNKNOWN_STRING"]


def test_alloca_must_match_declared_local():
	program = _program(
		I.Alloca(I.FLOAT, "x"),
		I.Alloca(I.INT, "y"),
		I.Return(I.IntConstant(0), I.INT),
		locals=[("x", I.INT)],
	)
	assert _codes(program) == ["IR_ALLOCA_TYPE", "IR_ALLOCA_NO_LOCAL"]


def test_warnings_do_not_stop_the_build():
	callee = I.IrFunction("f", I.INT, params=[("a", I.INT)], instructions=[I.Return(I.Parameter("a"), I.INT)])
	main = I.IrFunction(
		"main",
		I.INT,
		locals=[("unused", I.INT)],
		instructions=[
			I.Call(I.Temp(0), "f", [], I.INT),
			I.Return(I.FloatConstant(1.0), I.FLOAT),
		],
	)
	diags = validate_program(I.IrProgram(functions=[callee, main]))
	assert sorted(d.code for d in diags) == ["IR_CALL_ARITY", "IR_LOCAL_NO_ALLOCA", "IR_RETURN_TYPE"]
	assert all(d.severity == "warning" for d in diags)
	assert not has_errors(diags)


def test_constant_destination_is_an_error():
	program = _program(I.Move(I.IntConstant(1), I.IntConstant(2), I.INT), I.Return(None, I.INT))
	assert _codes(program) == ["IR_CONST_DEST"]
