# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""compile_program: optimizer + backend in one call."""

from minic.codegen.x86.codegen import CodegenOptions
from minic.codegen.x86.targets import LINUX_X64, WINDOWS_X64
from minic.ir import ir_nodes as I
from minic.opt.pass_manager import OptimizerConfig
from minic.pipeline import compile_program


def _lines(asm):
	return [" ".join(line.split()) for line in asm.splitlines()]


def test_optimized_program_stores_folded_constant(arith_program):
	result = compile_program(arith_program, LINUX_X64)
	lines = _lines(result.assembly)
	assert "mov dword [rbp-36], 5" in lines
	assert "add eax, 3" not in lines
	assert result.report.for_function("main").iterations >= 1
	assert len(arith_program.function("main").instructions) == 4


def test_unoptimized_program_keeps_arithmetic(arith_program):
	result = compile_program(arith_program, LINUX_X64, optimize=False)
	lines = _lines(result.assembly)
	assert "mov eax, 2" in lines
	assert "add eax, 3" in lines
	assert result.report.functions == []


def test_config_and_options_are_forwarded(arith_program):
	config = OptimizerConfig(passes=("constant_folding",), max_iterations=1)
	result = compile_program(
		arith_program,
		WINDOWS_X64,
		optimizer_config=config,
		codegen_options=CodegenOptions(stack_summary=False),
	)
	report = result.report.for_function("main")
	assert report.iterations == 1
	assert list(report.changes) == ["constant_folding"]
	assert "Stack layout" not in result.assembly
	assert "main:" in _lines(result.assembly)


def test_empty_program_still_has_entry_point():
	result = compile_program(I.IrProgram(), LINUX_X64)
	assert "_start:" in _lines(result.assembly)
