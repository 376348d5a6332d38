# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-02
"""
Mini-C Intermediate Representation (IR).

Pipeline placement:
  C source → AST → IR (this file) → optimizer (minic/opt) → x86-64 codegen (minic/codegen/x86)

The IR is flat and explicitly typed:
- one ordered instruction list per function (no basic-block graph);
- control flow via Label / Jump / Branch;
- every instruction carries the type it operates on, codegen never infers one.

There is no behaviour here beyond value identity and string interning; operand
traversal lives in `minic.ir.operands`.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple


class TypeKind(Enum):
	INT = auto()
	FLOAT = auto()
	CHAR = auto()
	STRING = auto()
	VOID = auto()
	POINTER = auto()


_TYPE_NAMES = {
	TypeKind.INT: "i32",
	TypeKind.FLOAT: "f64",
	TypeKind.CHAR: "i8",
	TypeKind.STRING: "str",
	TypeKind.VOID: "void",
}


@dataclass(frozen=True)
class IrType:
	"""
	IR type. `inner` is only set for POINTER.

	Use the module constants (INT, FLOAT, ...) and `IrType.pointer()` rather than
	constructing instances by hand.
	"""

	kind: TypeKind
	inner: Optional["IrType"] = None

	@classmethod
	def pointer(cls, inner: "IrType") -> "IrType":
		return cls(TypeKind.POINTER, inner)

	@property
	def is_float(self) -> bool:
		return self.kind is TypeKind.FLOAT

	@property
	def is_void(self) -> bool:
		return self.kind is TypeKind.VOID

	@property
	def layout_name(self) -> str:
		"""Key into a target's primitive size/alignment table."""
		if self.kind is TypeKind.POINTER:
			return "ptr"
		return _TYPE_NAMES[self.kind]

	def __str__(self) -> str:
		if self.kind is TypeKind.POINTER:
			return f"{self.inner}*"
		return _TYPE_NAMES[self.kind]


INT = IrType(TypeKind.INT)
FLOAT = IrType(TypeKind.FLOAT)
CHAR = IrType(TypeKind.CHAR)
STRING = IrType(TypeKind.STRING)
VOID = IrType(TypeKind.VOID)


class BinaryOp(Enum):
	ADD = "add"
	SUB = "sub"
	MUL = "mul"
	DIV = "div"
	MOD = "mod"
	EQ = "eq"
	NE = "ne"
	LT = "lt"
	LE = "le"
	GT = "gt"
	GE = "ge"
	AND = "and"
	OR = "or"

	@property
	def is_comparison(self) -> bool:
		return self in _COMPARISONS

	@property
	def is_logical(self) -> bool:
		return self in (BinaryOp.AND, BinaryOp.OR)


_COMPARISONS = frozenset(
	{BinaryOp.EQ, BinaryOp.NE, BinaryOp.LT, BinaryOp.LE, BinaryOp.GT, BinaryOp.GE}
)


class UnaryOp(Enum):
	NEG = "neg"
	NOT = "not"


# Values


class IrValue:
	"""Base class for IR operands. Every subclass is immutable and hashable."""

	__slots__ = ()

	@property
	def is_constant(self) -> bool:
		return False


@dataclass(frozen=True)
class IntConstant(IrValue):
	value: int

	@property
	def is_constant(self) -> bool:
		return True

	def __str__(self) -> str:
		return str(self.value)


@dataclass(frozen=True, eq=False)
class FloatConstant(IrValue):
	"""
	64-bit float literal.

	Equality and hashing use the IEEE-754 bit pattern so the value can key dicts:
	NaN equals itself and 0.0 differs from -0.0.
	"""

	value: float

	@property
	def is_constant(self) -> bool:
		return True

	@property
	def bits(self) -> int:
		return float_bits(self.value)

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, FloatConstant):
			return NotImplemented
		return self.bits == other.bits

	def __hash__(self) -> int:
		return hash((FloatConstant, self.bits))

	def __str__(self) -> str:
		return repr(self.value)


@dataclass(frozen=True)
class CharConstant(IrValue):
	value: str

	@property
	def is_constant(self) -> bool:
		return True

	def __str__(self) -> str:
		return f"'{self.value}'"


@dataclass(frozen=True)
class StringConstant(IrValue):
	"""Reference to an entry of the program string table, by label."""

	label: str

	@property
	def is_constant(self) -> bool:
		return True

	def __str__(self) -> str:
		return f"@{self.label}"


@dataclass(frozen=True)
class Local(IrValue):
	name: str

	def __str__(self) -> str:
		return f"%{self.name}"


@dataclass(frozen=True)
class Temp(IrValue):
	id: int

	def __str__(self) -> str:
		return f"%{self.id}"


@dataclass(frozen=True)
class Parameter(IrValue):
	name: str

	def __str__(self) -> str:
		return f"${self.name}"


@dataclass(frozen=True)
class Global(IrValue):
	name: str

	def __str__(self) -> str:
		return f"@{self.name}"


def float_bits(value: float) -> int:
	"""Raw IEEE-754 binary64 pattern of `value` as an unsigned integer."""
	return struct.unpack("<Q", struct.pack("<d", value))[0]


# Instructions


class IrInstr:
	"""Base class for IR instructions."""
	pass


@dataclass
class Alloca(IrInstr):
	"""Declare stack storage for local `name`."""
	ty: IrType
	name: str


@dataclass
class Load(IrInstr):
	"""dest = *src"""
	dest: IrValue
	src: IrValue
	ty: IrType


@dataclass
class Store(IrInstr):
	"""*dest = value"""
	value: IrValue
	dest: IrValue
	ty: IrType


@dataclass
class BinaryOpInstr(IrInstr):
	"""dest = left <op> right"""
	dest: IrValue
	op: BinaryOp
	left: IrValue
	right: IrValue
	ty: IrType


@dataclass
class UnaryOpInstr(IrInstr):
	"""dest = <op> operand"""
	dest: IrValue
	op: UnaryOp
	operand: IrValue
	ty: IrType


@dataclass
class Call(IrInstr):
	"""[dest =] func(args...); dest is None for calls whose result is discarded."""
	dest: Optional[IrValue]
	func: str
	args: List[IrValue]
	return_type: IrType


@dataclass
class Branch(IrInstr):
	"""if cond != 0 goto true_label else goto false_label"""
	cond: IrValue
	true_label: str
	false_label: str


@dataclass
class Jump(IrInstr):
	label: str


@dataclass
class Label(IrInstr):
	name: str


@dataclass
class Return(IrInstr):
	value: Optional[IrValue]
	ty: IrType


@dataclass
class Print(IrInstr):
	"""Built-in printf: `format` is normally a StringConstant."""
	format: IrValue
	args: List[IrValue] = field(default_factory=list)


@dataclass
class Move(IrInstr):
	"""dest = src (no memory access semantics)."""
	dest: IrValue
	src: IrValue
	ty: IrType


@dataclass
class Convert(IrInstr):
	"""dest = (dest_type) src, implicit conversion inserted by IR generation."""
	dest: IrValue
	src: IrValue
	dest_type: IrType
	src_type: IrType


@dataclass
class Cast(Convert):
	"""Explicit source-level cast; lowered exactly like Convert."""
	pass


@dataclass
class Comment(IrInstr):
	text: str


# Functions and programs


@dataclass
class IrFunction:
	"""
	One function: signature, declared locals (drive the stack layout) and a flat
	instruction list that the optimizer rewrites in place.
	"""

	name: str
	return_type: IrType
	params: List[Tuple[str, IrType]] = field(default_factory=list)
	locals: List[Tuple[str, IrType]] = field(default_factory=list)
	instructions: List[IrInstr] = field(default_factory=list)

	def param_types(self) -> Dict[str, IrType]:
		return dict(self.params)

	def local_types(self) -> Dict[str, IrType]:
		return dict(self.locals)


@dataclass
class IrProgram:
	"""
	Functions plus the global string table.

	The string table maps label → content and is deduplicated by content:
	`intern_string` hands out `str_<n>` labels from a counter owned by this
	program instance.
	"""

	functions: List[IrFunction] = field(default_factory=list)
	strings: Dict[str, str] = field(default_factory=dict)
	_labels_by_content: Dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)
	_next_string_id: int = field(default=0, init=False, repr=False, compare=False)

	def __post_init__(self) -> None:
		for label, content in list(self.strings.items()):
			self._labels_by_content.setdefault(content, label)

	def intern_string(self, content: str) -> str:
		"""Return the label for `content`, allocating one on first sight."""
		label = self._labels_by_content.get(content)
		if label is not None:
			return label
		label = f"str_{self._next_string_id}"
		while label in self.strings:
			self._next_string_id += 1
			label = f"str_{self._next_string_id}"
		self._next_string_id += 1
		self.strings[label] = content
		self._labels_by_content[content] = label
		return label

	def add_string(self, label: str, content: str) -> str:
		"""
		Register a string under an explicit label (textual IR input).

		If the content is already present the existing label wins and is returned,
		keeping the table deduplicated.
		"""
		existing = self._labels_by_content.get(content)
		if existing is not None:
			return existing
		self.strings[label] = content
		self._labels_by_content[content] = label
		return label

	def function(self, name: str) -> Optional[IrFunction]:
		for fn in self.functions:
			if fn.name == name:
				return fn
		return None


__all__ = [
	"TypeKind",
	"IrType",
	"INT",
	"FLOAT",
	"CHAR",
	"STRING",
	"VOID",
	"BinaryOp",
	"UnaryOp",
	"IrValue",
	"IntConstant",
	"FloatConstant",
	"CharConstant",
	"StringConstant",
	"Local",
	"Temp",
	"Parameter",
	"Global",
	"float_bits",
	"IrInstr",
	"Alloca",
	"Load",
	"Store",
	"BinaryOpInstr",
	"UnaryOpInstr",
	"Call",
	"Branch",
	"Jump",
	"Label",
	"Return",
	"Print",
	"Move",
	"Convert",
	"Cast",
	"Comment",
	"IrFunction",
	"IrProgram",
]
