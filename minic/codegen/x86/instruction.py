# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-08
"""
x86-64 vocabulary for the emitter: mnemonics, registers, operand widths and
operand values.

Only what the Mini-C lowering emits is modelled. Operands render themselves to
NASM syntax; nothing here checks that an operand combination is encodable.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class Size(Enum):
	"""Operand width; `.keyword` is the NASM size specifier."""

	BYTE = 1
	WORD = 2
	DWORD = 4
	QWORD = 8

	@property
	def keyword(self) -> str:
		return self.name.lower()


class Mnemonic(Enum):
	MOV = "mov"
	MOVSD = "movsd"
	MOVZX = "movzx"
	MOVSX = "movsx"
	MOVSXD = "movsxd"
	MOVQ = "movq"
	LEA = "lea"
	PUSH = "push"
	POP = "pop"
	ADD = "add"
	SUB = "sub"
	IMUL = "imul"
	IDIV = "idiv"
	NEG = "neg"
	CQO = "cqo"
	CDQ = "cdq"
	ADDSD = "addsd"
	SUBSD = "subsd"
	MULSD = "mulsd"
	DIVSD = "divsd"
	CMP = "cmp"
	SETE = "sete"
	SETNE = "setne"
	SETL = "setl"
	SETLE = "setle"
	SETG = "setg"
	SETGE = "setge"
	JMP = "jmp"
	JE = "je"
	CALL = "call"
	RET = "ret"
	AND = "and"
	OR = "or"
	XOR = "xor"
	BTC = "btc"
	SYSCALL = "syscall"


class Register(Enum):
	RAX = "rax"
	RBX = "rbx"
	RCX = "rcx"
	RDX = "rdx"
	RSI = "rsi"
	RDI = "rdi"
	RSP = "rsp"
	RBP = "rbp"
	R8 = "r8"
	R9 = "r9"
	R10 = "r10"
	R11 = "r11"
	EAX = "eax"
	EBX = "ebx"
	ECX = "ecx"
	EDX = "edx"
	ESI = "esi"
	EDI = "edi"
	R8D = "r8d"
	R9D = "r9d"
	R10D = "r10d"
	R11D = "r11d"
	AX = "ax"
	CX = "cx"
	DX = "dx"
	AL = "al"
	BL = "bl"
	CL = "cl"
	DL = "dl"
	SIL = "sil"
	DIL = "dil"
	R8B = "r8b"
	R9B = "r9b"
	XMM0 = "xmm0"
	XMM1 = "xmm1"
	XMM2 = "xmm2"
	XMM3 = "xmm3"
	XMM4 = "xmm4"
	XMM5 = "xmm5"
	XMM6 = "xmm6"
	XMM7 = "xmm7"

	@property
	def is_xmm(self) -> bool:
		return self.value.startswith("xmm")

	def sized(self, size: Size) -> "Register":
		"""
		The same architectural register viewed at `size` (RAX → EAX/AL ...).

		XMM registers have no narrower views and are returned unchanged.
		"""
		if self.is_xmm:
			return self
		family = _FAMILY_OF[self]
		return _VIEWS[family][size]


# 64-bit register -> {width: view}; only the views the lowering uses are listed.
_VIEWS: Dict[Register, Dict[Size, Register]] = {
	Register.RAX: {Size.QWORD: Register.RAX, Size.DWORD: Register.EAX, Size.WORD: Register.AX, Size.BYTE: Register.AL},
	Register.RBX: {Size.QWORD: Register.RBX, Size.DWORD: Register.EBX, Size.BYTE: Register.BL},
	Register.RCX: {Size.QWORD: Register.RCX, Size.DWORD: Register.ECX, Size.WORD: Register.CX, Size.BYTE: Register.CL},
	Register.RDX: {Size.QWORD: Register.RDX, Size.DWORD: Register.EDX, Size.WORD: Register.DX, Size.BYTE: Register.DL},
	Register.RSI: {Size.QWORD: Register.RSI, Size.DWORD: Register.ESI, Size.BYTE: Register.SIL},
	Register.RDI: {Size.QWORD: Register.RDI, Size.DWORD: Register.EDI, Size.BYTE: Register.DIL},
	Register.R8: {Size.QWORD: Register.R8, Size.DWORD: Register.R8D, Size.BYTE: Register.R8B},
	Register.R9: {Size.QWORD: Register.R9, Size.DWORD: Register.R9D, Size.BYTE: Register.R9B},
	Register.R10: {Size.QWORD: Register.R10, Size.DWORD: Register.R10D},
	Register.R11: {Size.QWORD: Register.R11, Size.DWORD: Register.R11D},
	Register.RSP: {Size.QWORD: Register.RSP},
	Register.RBP: {Size.QWORD: Register.RBP},
}

_FAMILY_OF: Dict[Register, Register] = {}
for _family, _views in _VIEWS.items():
	for _view in _views.values():
		_FAMILY_OF.setdefault(_view, _family)


# Operands


class Operand:
	"""Base class for rendered instruction operands."""

	is_memory = False

	def render(self) -> str:
		raise NotImplementedError

	def __str__(self) -> str:
		return self.render()


@dataclass(frozen=True)
class Reg(Operand):
	reg: Register

	def render(self) -> str:
		return self.reg.value


@dataclass(frozen=True)
class Imm(Operand):
	value: int

	def render(self) -> str:
		return str(self.value)

	@property
	def fits_imm32(self) -> bool:
		return -(1 << 31) <= self.value < (1 << 31)


@dataclass(frozen=True)
class Mem(Operand):
	"""`[base±offset]`, e.g. a stack slot `[rbp-8]`."""

	base: Register
	offset: int = 0
	is_memory = True

	def render(self) -> str:
		if self.offset == 0:
			return f"[{self.base.value}]"
		sign = "+" if self.offset > 0 else "-"
		return f"[{self.base.value}{sign}{abs(self.offset)}]"


@dataclass(frozen=True)
class RipRel(Operand):
	"""RIP-relative memory reference to a data label: `[rel name]`."""

	label: str
	is_memory = True

	def render(self) -> str:
		return f"[rel {self.label}]"


@dataclass(frozen=True)
class LabelRef(Operand):
	"""Bare label (jump/call target); rendered verbatim."""

	name: str

	def render(self) -> str:
		return self.name


@dataclass(frozen=True)
class Raw(Operand):
	"""Pre-formatted operand text; rendered verbatim."""

	text: str

	def render(self) -> str:
		return self.text


def render_operands(operands: Tuple[Operand, ...], size: Size | None = None) -> str:
	"""
	Join operands NASM-style. With `size`, the first memory operand gets the
	width keyword (`dword [rbp-4]`); no other operand is annotated.
	"""
	parts = []
	annotated = size is None
	for operand in operands:
		text = operand.render()
		if not annotated and operand.is_memory:
			text = f"{size.keyword} {text}"
			annotated = True
		parts.append(text)
	return ", ".join(parts)


__all__ = [
	"Size",
	"Mnemonic",
	"Register",
	"Operand",
	"Reg",
	"Imm",
	"Mem",
	"RipRel",
	"LabelRef",
	"Raw",
	"render_operands",
]
