# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-05
"""
Reader for the textual Mini-C IR (see ir.lark).

The tree produced by lark is walked by hand into `minic.ir.ir_nodes` objects.
Two details are resolved here rather than in the grammar:
- `@name` operands are string-table references when `name` is a declared
  string label, globals otherwise;
- a function's locals list is rebuilt from its `alloca` lines, in order.
"""

from __future__ import annotations

import codecs
from pathlib import Path
from typing import Dict, List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from minic.core.span import Span
from minic.ir import ir_nodes as I

_GRAMMAR_PATH = Path(__file__).with_name("ir.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

_BASE_TYPES = {
	"i32": I.INT,
	"f64": I.FLOAT,
	"i8": I.CHAR,
	"str": I.STRING,
	"void": I.VOID,
}


class IrParseError(ValueError):
	"""
	Malformed textual IR.

	Carries a best-effort location (`loc`, a Span) so the driver can report a
	pinned parser diagnostic instead of a traceback.
	"""

	def __init__(self, message: str, *, loc: Span) -> None:
		super().__init__(message)
		self.loc = loc


def _name(node: Tree) -> str:
	return node.data if isinstance(node.data, str) else node.data.value


def _decode_escaped(raw: str) -> str:
	"""
	Decode the inside of a quoted IR literal.

	Python-style escapes are interpreted first (unicode_escape), then the result
	is reinterpreted as latin-1 bytes and decoded as UTF-8 so `\\xHH` runs spell
	multi-byte characters.
	"""
	unescaped = codecs.decode(raw, "unicode_escape")
	return unescaped.encode("latin-1").decode("utf-8")


class _IrTreeReader:
	"""Turns one lark parse tree into an IrProgram."""

	def __init__(self, filename: Optional[str]) -> None:
		self.filename = filename
		self.program = I.IrProgram()
		# Declared label → label kept in the (deduplicated) string table.
		self._string_labels: Dict[str, str] = {}

	def _span(self, node: object) -> Span:
		if isinstance(node, Tree):
			meta = node.meta
			if getattr(meta, "empty", True):
				return Span(file=self.filename)
			return Span.from_loc(meta, file=self.filename)
		return Span.from_loc(node, file=self.filename)

	def _error(self, message: str, node: object) -> IrParseError:
		return IrParseError(message, loc=self._span(node))

	def read(self, tree: Tree) -> I.IrProgram:
		items = [c for c in tree.children if isinstance(c, Tree)]
		for item in items:
			if _name(item) == "string_decl":
				self._read_string_decl(item)
		for item in items:
			if _name(item) == "function":
				fn = self._read_function(item)
				if self.program.function(fn.name) is not None:
					raise self._error(f"duplicate function '@{fn.name}'", item)
				self.program.functions.append(fn)
		return self.program

	def _read_string_decl(self, node: Tree) -> None:
		label_tok, text_tok = node.children
		label = str(label_tok)[1:]
		if label in self._string_labels:
			raise self._error(f"duplicate string label '@{label}'", label_tok)
		try:
			content = _decode_escaped(str(text_tok)[1:-1])
		except UnicodeDecodeError as err:
			raise self._error(f"invalid string literal: {err}", text_tok) from err
		self._string_labels[label] = self.program.add_string(label, content)

	# Types and operands

	def _type(self, node: Tree) -> I.IrType:
		kind = _name(node)
		if kind == "pointer_type":
			return I.IrType.pointer(self._type(node.children[0]))
		if kind == "base_type":
			return _BASE_TYPES[str(node.children[0])]
		raise self._error(f"expected a type, got {kind}", node)

	def _operand(self, node: Tree) -> I.IrValue:
		kind = _name(node)
		tok = node.children[0]
		text = str(tok)
		if kind == "local":
			return I.Local(text[1:])
		if kind == "temp":
			return I.Temp(int(text[1:]))
		if kind == "param_ref":
			return I.Parameter(text[1:])
		if kind == "global_ref":
			name = text[1:]
			label = self._string_labels.get(name)
			if label is not None:
				return I.StringConstant(label)
			return I.Global(name)
		if kind == "int_const":
			return I.IntConstant(int(text))
		if kind == "float_const":
			return I.FloatConstant(float(text))
		if kind == "char_const":
			try:
				value = _decode_escaped(text[1:-1])
			except UnicodeDecodeError as err:
				raise self._error(f"invalid character literal {text}: {err}", tok) from err
			if len(value) != 1:
				raise self._error(f"character literal must hold exactly one character: {text}", tok)
			return I.CharConstant(value)
		raise self._error(f"unexpected operand node {kind}", node)

	def _operands(self, node: Tree) -> List[I.IrValue]:
		return [self._operand(c) for c in node.children]

	# Functions

	def _read_function(self, node: Tree) -> I.IrFunction:
		ret_node, name_tok, params_node, *body = node.children
		fn = I.IrFunction(name=str(name_tok)[1:], return_type=self._type(ret_node))
		for param in params_node.children:
			ty_node, param_tok = param.children
			fn.params.append((str(param_tok)[1:], self._type(ty_node)))
		for instr_node in body:
			instr = self._instr(instr_node)
			if isinstance(instr, I.Alloca) and instr.name not in fn.local_types():
				fn.locals.append((instr.name, instr.ty))
			fn.instructions.append(instr)
		return fn

	def _instr(self, node: Tree) -> I.IrInstr:
		kind = _name(node)
		ch = node.children
		if kind == "alloca":
			dest = self._operand(ch[0])
			if not isinstance(dest, I.Local):
				raise self._error("alloca destination must be a local (%name)", node)
			return I.Alloca(self._type(ch[1]), dest.name)
		if kind == "load":
			return I.Load(self._operand(ch[0]), self._operand(ch[2]), self._type(ch[1]))
		if kind == "store":
			return I.Store(self._operand(ch[1]), self._operand(ch[2]), self._type(ch[0]))
		if kind == "binop":
			dest, op_tok, ty, left, right = ch
			return I.BinaryOpInstr(
				self._operand(dest),
				I.BinaryOp(str(op_tok)),
				self._operand(left),
				self._operand(right),
				self._type(ty),
			)
		if kind == "unop":
			dest, op_tok, ty, operand = ch
			return I.UnaryOpInstr(self._operand(dest), I.UnaryOp(str(op_tok)), self._operand(operand), self._type(ty))
		if kind == "call":
			if len(ch) == 4:
				dest_node, ty, func_tok, args = ch
				dest: Optional[I.IrValue] = self._operand(dest_node)
			else:
				ty, func_tok, args = ch
				dest = None
			return I.Call(dest, str(func_tok)[1:], self._operands(args), self._type(ty))
		if kind == "branch":
			cond, true_tok, false_tok = ch
			return I.Branch(self._operand(cond), str(true_tok), str(false_tok))
		if kind == "jump":
			return I.Jump(str(ch[0]))
		if kind == "ret":
			value = self._operand(ch[1]) if len(ch) > 1 else None
			return I.Return(value, self._type(ch[0]))
		if kind == "print":
			return I.Print(self._operand(ch[0]), self._operands(ch[1]))
		if kind == "move":
			return I.Move(self._operand(ch[0]), self._operand(ch[2]), self._type(ch[1]))
		if kind == "convert":
			dest, kw_tok, src_ty, src, dest_ty = ch
			cls = I.Cast if str(kw_tok) == "cast" else I.Convert
			return cls(self._operand(dest), self._operand(src), self._type(dest_ty), self._type(src_ty))
		if kind == "label_def":
			return I.Label(str(ch[0])[:-1])
		if kind == "comment":
			text = str(ch[0])[1:]
			return I.Comment(text[1:] if text.startswith(" ") else text)
		raise self._error(f"unexpected instruction node {kind}", node)


def parse_ir(source: str, filename: Optional[str] = None) -> I.IrProgram:
	"""
	Parse textual IR into an IrProgram.

	Raises IrParseError for syntax errors and for the few structural problems
	the grammar cannot express (non-local alloca targets, duplicate names).
	"""
	if not source.endswith("\n"):
		source += "\n"
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		span = Span(
			file=filename,
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
			raw=err,
		)
		raise IrParseError(f"syntax error in IR: {err}", loc=span) from err
	return _IrTreeReader(filename).read(tree)


def parse_ir_file(path: Path) -> I.IrProgram:
	return parse_ir(path.read_text(encoding="utf-8"), filename=str(path))


__all__ = ["IrParseError", "parse_ir", "parse_ir_file"]
