# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from minic.codegen.x86.stack_frame import RESERVED_BYTES, StackFrameAllocator, align_up
from minic.codegen.x86.targets import LINUX_X64, WINDOWS_X64
from minic.ir import ir_nodes as I


def test_int_float_char_locals(locals_program):
	layout = StackFrameAllocator(LINUX_X64).allocate(locals_program.functions[0])
	assert layout.offset_of(I.Local("a")) == -36
	assert layout.offset_of(I.Local("b")) == -44
	assert layout.offset_of(I.Local("c")) == -45
	assert layout.used_bytes == 45
	assert layout.frame_size == 48


def test_same_layout_on_every_target(locals_program):
	fn = locals_program.functions[0]
	linux = StackFrameAllocator(LINUX_X64).allocate(fn)
	windows = StackFrameAllocator(WINDOWS_X64).allocate(fn)
	assert linux.slots() == windows.slots()
	assert linux.frame_size == windows.frame_size


def test_temps_get_one_slot_at_first_definition():
	fn = I.IrFunction(
		"f",
		I.INT,
		locals=[("x", I.INT)],
		instructions=[
			I.Alloca(I.INT, "x"),
			I.Load(I.Temp(0), I.Local("x"), I.INT),
			I.BinaryOpInstr(I.Temp(1), I.BinaryOp.LT, I.Temp(0), I.IntConstant(3), I.FLOAT),
			I.Move(I.Temp(0), I.IntConstant(1), I.INT),
			I.Convert(I.Temp(2), I.Temp(1), I.FLOAT, I.INT),
			I.Store(I.Temp(2), I.Local("x"), I.INT),
		],
	)
	layout = StackFrameAllocator(LINUX_X64).allocate(fn)
	assert layout.offset_of(I.Temp(0)) == -44
	assert layout.offset_of(I.Temp(1)) == -52
	assert layout.offset_of(I.Temp(2)) == -60
	assert layout.type_of(I.Temp(1)) == I.INT
	assert layout.type_of(I.Temp(2)) == I.FLOAT
	assert layout.frame_size == 64


def test_parameters_get_home_slots_after_temps():
	fn = I.IrFunction(
		"add",
		I.INT,
		params=[("a", I.INT), ("b", I.FLOAT)],
		instructions=[I.BinaryOpInstr(I.Temp(0), I.BinaryOp.ADD, I.Parameter("a"), I.IntConstant(1), I.INT)],
	)
	layout = StackFrameAllocator(LINUX_X64).allocate(fn)
	assert layout.offset_of(I.Temp(0)) == -40
	assert layout.offset_of(I.Parameter("a")) == -48
	assert layout.offset_of(I.Parameter("b")) == -56
	assert [slot.kind for slot in layout.slots()] == ["temp", "param", "param"]


def test_allocator_resets_between_functions(locals_program):
	allocator = StackFrameAllocator(LINUX_X64)
	allocator.allocate(locals_program.functions[0])
	empty = allocator.allocate(I.IrFunction("g", I.VOID))
	assert empty.slots() == []
	assert empty.frame_size == RESERVED_BYTES
	assert allocator.current is empty


def test_offsets_negative_and_frame_aligned():
	fn = I.IrFunction("f", I.INT, locals=[(f"v{i}", I.CHAR) for i in range(7)] + [("s", I.STRING), ("nothing", I.VOID)])
	layout = StackFrameAllocator(LINUX_X64).allocate(fn)
	assert all(slot.offset < 0 for slot in layout.slots())
	assert layout.frame_size % 16 == 0
	assert layout.offset_of(I.Local("s")) == -47
	assert layout.locals["nothing"].size == 0
	assert layout.offset_of(I.IntConstant(1)) is None


def test_align_up():
	assert align_up(45, 16) == 48
	assert align_up(48, 16) == 48
	assert align_up(0, 16) == 0
