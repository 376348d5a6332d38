# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Textual rendering of the Mini-C IR.

The output is the same language `minic.ir.parser` reads back, so `--emit-ir`
dumps can be edited by hand and fed to the driver again.
"""

from __future__ import annotations

from typing import Iterable

from . import ir_nodes as I

PROGRAM_HEADER = "; IR Program Generated by Mini-C Compiler"

_ESCAPES = {
	"\\": "\\\\",
	"\n": "\\n",
	"\t": "\\t",
	"\r": "\\r",
	"\0": "\\x00",
}


def escape_text(text: str, quote: str) -> str:
	"""
	Escape `text` for a quoted IR literal.

	Printable ASCII passes through; anything else is written as UTF-8 `\\xHH`
	bytes, which the reader decodes back.
	"""
	out: list[str] = []
	for ch in text:
		if ch in _ESCAPES:
			out.append(_ESCAPES[ch])
		elif ch == quote:
			out.append("\\" + ch)
		elif " " <= ch <= "~":
			out.append(ch)
		else:
			out.extend(f"\\x{b:02x}" for b in ch.encode("utf-8"))
	return "".join(out)


def format_value(value: I.IrValue) -> str:
	if isinstance(value, I.CharConstant):
		return f"'{escape_text(value.value, quote=chr(39))}'"
	return str(value)


def _values(values: Iterable[I.IrValue]) -> str:
	return ", ".join(format_value(v) for v in values)


def format_instr(instr: I.IrInstr) -> str:
	"""One instruction, without indentation."""
	if isinstance(instr, I.Alloca):
		return f"%{instr.name} = alloca {instr.ty}"
	if isinstance(instr, I.Load):
		return f"{format_value(instr.dest)} = load {instr.ty}, {format_value(instr.src)}"
	if isinstance(instr, I.Store):
		return f"store {instr.ty} {format_value(instr.value)}, {format_value(instr.dest)}"
	if isinstance(instr, I.BinaryOpInstr):
		return (
			f"{format_value(instr.dest)} = {instr.op.value} {instr.ty} "
			f"{format_value(instr.left)}, {format_value(instr.right)}"
		)
	if isinstance(instr, I.UnaryOpInstr):
		return f"{format_value(instr.dest)} = {instr.op.value} {instr.ty} {format_value(instr.operand)}"
	if isinstance(instr, I.Call):
		call = f"call {instr.return_type} @{instr.func}({_values(instr.args)})"
		if instr.dest is None:
			return call
		return f"{format_value(instr.dest)} = {call}"
	if isinstance(instr, I.Branch):
		return f"br {format_value(instr.cond)}, label {instr.true_label}, label {instr.false_label}"
	if isinstance(instr, I.Jump):
		return f"jmp label {instr.label}"
	if isinstance(instr, I.Label):
		return f"{instr.name}:"
	if isinstance(instr, I.Return):
		if instr.value is None:
			return f"ret {instr.ty}"
		return f"ret {instr.ty} {format_value(instr.value)}"
	if isinstance(instr, I.Print):
		return f"print {format_value(instr.format)}, [{_values(instr.args)}]"
	if isinstance(instr, I.Move):
		return f"{format_value(instr.dest)} = mov {instr.ty} {format_value(instr.src)}"
	if isinstance(instr, I.Convert):
		kw = "cast" if isinstance(instr, I.Cast) else "convert"
		return (
			f"{format_value(instr.dest)} = {kw} {instr.src_type} "
			f"{format_value(instr.src)} to {instr.dest_type}"
		)
	if isinstance(instr, I.Comment):
		return f"; {instr.text}"
	return f"; <unknown instruction {type(instr).__name__}>"


def format_function(fn: I.IrFunction) -> str:
	params = ", ".join(f"{ty} ${name}" for name, ty in fn.params)
	lines = [f"define {fn.return_type} @{fn.name}({params}) {{"]
	for instr in fn.instructions:
		if isinstance(instr, I.Label):
			lines.append(format_instr(instr))
		else:
			lines.append(f"  {format_instr(instr)}")
	lines.append("}")
	return "\n".join(lines)


def format_program(program: I.IrProgram) -> str:
	parts = [PROGRAM_HEADER, ""]
	if program.strings:
		for label, content in program.strings.items():
			parts.append(f'@{label} = constant "{escape_text(content, quote=chr(34))}"')
		parts.append("")
	for fn in program.functions:
		parts.append(format_function(fn))
		parts.append("")
	return "\n".join(parts)


__all__ = ["PROGRAM_HEADER", "escape_text", "format_value", "format_instr", "format_function", "format_program"]
