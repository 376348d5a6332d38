# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared fixtures: small hand-built IR programs and a textual IR file."""

from __future__ import annotations

from pathlib import Path

import pytest

from minic.ir import ir_nodes as I
from minic.ir.ir_builder import IrBuilder

SAMPLE_IR = """; IR Program Generated by Mini-C Compiler

@str_0 = constant "%d\\n"

define i32 @add(i32 $a, i32 $b) {
  %0 = add i32 $a, $b
  ret i32 %0
}

define i32 @main() {
  %x = alloca i32
  store i32 42, %x
  %1 = load i32, %x
  %2 = call i32 @add(%1, 1)
  br %2, label then_0, label end_1
then_0:
  print @str_0, [%2]
  jmp label end_1
end_1:
  %3 = convert i32 %2 to f64
  ret i32 0
}
"""


@pytest.fixture
def builder() -> IrBuilder:
	return IrBuilder()


@pytest.fixture
def arith_program() -> I.IrProgram:
	"""
	int main() { int x = (2 + 3) * 1; return x; }  plus one unused `x + 0`.
	"""
	b = IrBuilder()
	b.begin_function("main", I.INT)
	x = b.declare_local("x", I.INT)
	t0 = b.binary(I.BinaryOp.ADD, I.IntConstant(2), I.IntConstant(3), I.INT)
	t1 = b.binary(I.BinaryOp.MUL, t0, I.IntConstant(1), I.INT)
	b.store(t1, x, I.INT)
	t2 = b.load(x, I.INT)
	b.binary(I.BinaryOp.ADD, t2, I.IntConstant(0), I.INT)
	b.ret(t2, I.INT)
	return b.program


@pytest.fixture
def locals_program() -> I.IrProgram:
	"""int a; float b; char c; return 0;"""
	b = IrBuilder()
	b.begin_function("main", I.INT)
	b.declare_local("a", I.INT)
	b.declare_local("b", I.FLOAT)
	b.declare_local("c", I.CHAR)
	b.ret(I.IntConstant(0), I.INT)
	return b.program


@pytest.fixture
def sample_ir_text() -> str:
	return SAMPLE_IR


@pytest.fixture
def ir_file(tmp_path: Path) -> Path:
	path = tmp_path / "sample.ir"
	path.write_text(SAMPLE_IR)
	return path
