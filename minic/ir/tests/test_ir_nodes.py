# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from minic.ir import ir_nodes as I


def test_float_constant_identity_uses_bit_pattern():
	assert I.FloatConstant(float("nan")) == I.FloatConstant(float("nan"))
	assert I.FloatConstant(0.0) != I.FloatConstant(-0.0)
	assert len({I.FloatConstant(1.5), I.FloatConstant(1.5)}) == 1
	assert I.FloatConstant(1.5).bits == 0x3FF8000000000000


def test_values_key_dicts_by_value():
	table = {I.Temp(1): I.IntConstant(3), I.Local("x"): I.Temp(1)}
	assert table[I.Temp(1)] == I.IntConstant(3)
	assert table[I.Local("x")] == I.Temp(1)
	assert I.Local("x") != I.Parameter("x")
	assert I.IntConstant(1).is_constant
	assert not I.Temp(0).is_constant


def test_type_names():
	assert str(I.INT) == "i32"
	assert str(I.FLOAT) == "f64"
	assert str(I.IrType.pointer(I.CHAR)) == "i8*"
	assert I.IrType.pointer(I.INT).layout_name == "ptr"
	assert I.STRING.layout_name == "str"
	assert I.VOID.is_void and I.FLOAT.is_float


def test_value_rendering():
	assert str(I.Temp(3)) == "%3"
	assert str(I.Local("x")) == "%x"
	assert str(I.Parameter("n")) == "$n"
	assert str(I.Global("counter")) == "@counter"
	assert str(I.StringConstant("str_0")) == "@str_0"


def test_operator_classification():
	assert I.BinaryOp.LE.is_comparison
	assert not I.BinaryOp.ADD.is_comparison
	assert I.BinaryOp.OR.is_logical
	assert not I.BinaryOp.EQ.is_logical


def test_intern_string_dedups_by_content():
	program = I.IrProgram()
	first = program.intern_string("hi")
	again = program.intern_string("hi")
	other = program.intern_string("bye")
	assert first == again == "str_0"
	assert other == "str_1"
	assert program.strings == {"str_0": "hi", "str_1": "bye"}


def test_add_string_returns_existing_label_for_known_content():
	program = I.IrProgram()
	assert program.add_string("greeting", "hi") == "greeting"
	assert program.add_string("other", "hi") == "greeting"
	assert "other" not in program.strings


def test_intern_string_skips_labels_already_taken():
	program = I.IrProgram(strings={"str_0": "a"})
	assert program.intern_string("a") == "str_0"
	assert program.intern_string("b") == "str_1"


def test_function_lookup():
	fn = I.IrFunction("main", I.INT, params=[("n", I.INT)], locals=[("x", I.CHAR)])
	program = I.IrProgram(functions=[fn])
	assert program.function("main") is fn
	assert program.function("missing") is None
	assert fn.param_types() == {"n": I.INT}
	assert fn.local_types() == {"x": I.CHAR}


def test_cast_is_a_convert():
	cast = I.Cast(I.Temp(0), I.Local("x"), I.INT, I.FLOAT)
	assert isinstance(cast, I.Convert)
	assert cast != I.Convert(I.Temp(0), I.Local("x"), I.INT, I.FLOAT)
