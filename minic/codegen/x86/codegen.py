# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-11
"""
IR program → NASM x86-64 document.

Pipeline placement:
  optimized IrProgram → X86CodeGenerator (this file) → assembly text

Document order:
  header comments
  preamble directives
  global / extern declarations
  data section (deduplicated string table)
  text section (+ target bootstrap)
  one block per function:
    label, prologue, `sub rsp, N`, parameter spills,
    lowered body, epilogue label, stack layout summary, epilogue

Per-instruction lowering lives in lowering.py; this module only sequences the
document and owns the per-function frame allocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from minic.ir import ir_nodes as I
from minic.ir.ir_printer import escape_text
from minic.ir.operands import instr_dest, instr_sources

from .emitter import AsmEmitter
from .instruction import Imm, Mem, Mnemonic, Reg
from .lowering import FunctionLowerer
from .stack_frame import FrameLayout, StackFrameAllocator
from .targets import Target

TITLE = "MINI-C COMPILER GENERATED ASSEMBLY (FROM IR)"


@dataclass
class CodegenOptions:
	"""
	stack_summary: emit the per-function stack layout comment block.
	ir_comments: precede each lowered instruction with its IR text.
	"""

	stack_summary: bool = True
	ir_comments: bool = False


def referenced_globals(program: I.IrProgram) -> List[str]:
	"""Names of Global values read or written anywhere in `program`, first use first."""
	names: List[str] = []
	for fn in program.functions:
		for instr in fn.instructions:
			values = list(instr_sources(instr))
			dest = instr_dest(instr)
			if dest is not None:
				values.append(dest)
			if isinstance(instr, I.Store):
				values.append(instr.dest)
			for value in values:
				if isinstance(value, I.Global) and value.name not in names:
					names.append(value.name)
	return names


def undefined_callees(program: I.IrProgram) -> List[str]:
	defined = {fn.name for fn in program.functions}
	names: List[str] = []
	for fn in program.functions:
		for instr in fn.instructions:
			if isinstance(instr, I.Call) and instr.func not in defined and instr.func not in names:
				names.append(instr.func)
	return names


class X86CodeGenerator:
	"""
	Generates one assembly document per call to `generate`.

	The program is treated as read-only. A StackFrameAllocator is reused
	across functions and reset for each one.
	"""

	def __init__(self, target: Target, options: Optional[CodegenOptions] = None) -> None:
		self.target = target
		self.options = options or CodegenOptions()
		self.allocator = StackFrameAllocator(target)
		self.emitter = AsmEmitter()

	def generate(self, program: I.IrProgram) -> str:
		self.emitter = AsmEmitter()
		self._emit_header()
		self._emit_declarations(program)
		self._emit_data(program)
		self._emit_text_start()
		for fn in program.functions:
			self._emit_function(fn)
		return self.emitter.text()

	# Document sections

	def _emit_header(self) -> None:
		out = self.emitter
		out.emit_section_header(TITLE)
		for line in self.target.header_lines():
			out.emit_comment(line)
		out.emit_comment("Generated from: Intermediate Representation")
		out.emit_line()
		out.emit_lines(self.target.directives)
		out.emit_line()

	def _emit_declarations(self, program: I.IrProgram) -> None:
		out = self.emitter
		out.emit_lines(self.target.global_declarations(fn.name for fn in program.functions))
		extra = [*undefined_callees(program), *referenced_globals(program)]
		out.emit_lines(self.target.extern_declarations(extra))
		out.emit_line()

	def _emit_data(self, program: I.IrProgram) -> None:
		out = self.emitter
		out.emit_line(self.target.data_section)
		if not program.strings:
			out.emit_comment("No string literals found")
		for label, content in program.strings.items():
			out.emit_comment(f"String constant: \"{escape_text(content, quote=chr(34))}\"")
			out.emit_line(self.target.format_string_literal(label, content))
		out.emit_line()

	def _emit_text_start(self) -> None:
		out = self.emitter
		out.emit_line(self.target.text_section)
		out.emit_line()
		if self.target.entry_symbol is None:
			return
		out.emit_subsection_header("Process entry point")
		out.emit_label(self.target.entry_symbol)
		out.emit_lines(t.render() for t in self.target.bootstrap)
		out.emit_line()

	# Functions

	def _emit_function(self, fn: I.IrFunction) -> None:
		out = self.emitter
		layout = self.allocator.allocate(fn)
		symbol = self.target.symbol(fn.name)
		epilogue_label = f"{symbol}_epilogue"

		out.emit_subsection_header(f"Function: {fn.name}")
		out.emit_label(symbol)
		out.emit_lines(t.render() for t in self.target.prologue)
		out.emit_instruction(
			Mnemonic.SUB,
			(Reg(self.target.stack_pointer), Imm(layout.frame_size)),
			comment=f"allocate {layout.frame_size} bytes for locals and temps",
		)

		lowerer = FunctionLowerer(
			self.target,
			out,
			layout,
			fn,
			epilogue_label=epilogue_label,
			ir_comments=self.options.ir_comments,
		)
		lowerer.spill_parameters()
		last = len(fn.instructions) - 1
		for idx, instr in enumerate(fn.instructions):
			lowerer.lower(instr, is_last=idx == last)

		out.emit_label(epilogue_label)
		if self.options.stack_summary:
			self._emit_stack_summary(layout)
		out.emit_lines(t.render() for t in self.target.epilogue)
		out.emit_line()

	def _emit_stack_summary(self, layout: FrameLayout) -> None:
		out = self.emitter
		out.emit_comment(f"Stack layout: {layout.frame_size} bytes ({layout.used_bytes} used)")
		slots = layout.slots()
		if not slots:
			out.emit_comment("  (no slots)")
		for slot in slots:
			where = Mem(self.target.frame_pointer, slot.offset).render()
			out.emit_comment(f"  {where:<10} {slot.label:<12} {str(slot.ty):<6} {slot.size} bytes ({slot.kind})")


def generate_assembly(program: I.IrProgram, target: Target, options: Optional[CodegenOptions] = None) -> str:
	return X86CodeGenerator(target, options).generate(program)


__all__ = [
	"CodegenOptions",
	"X86CodeGenerator",
	"generate_assembly",
	"referenced_globals",
	"undefined_callees",
	"TITLE",
]
