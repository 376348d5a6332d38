# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-08
"""
Target descriptors: one immutable record per supported OS/ABI.

Supported platforms:
  - windows-x64: Microsoft x64 convention. Four integer argument registers
    (rcx, rdx, r8, r9) whose slots are shared with xmm0-xmm3, 32 bytes of
    caller-reserved shadow space, unprefixed symbols.
  - linux-x64: System V ABI. Six integer argument registers, float arguments
    in xmm0-xmm7 allocated independently, no shadow space. Emits its own
    `_start` that calls `main` and exits through the `exit` syscall.
  - macos-x64: System V layout with Apple's underscore-prefixed symbols.

Selection goes through `create_target(platform)`; `parse_target_platform`
resolves user-facing spellings ("win64", "darwin", ...) to a platform id.
Everything that varies between targets lives in these records; the lowering
code itself is target-agnostic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .emitter import format_instruction
from .instruction import Imm, LabelRef, Mnemonic, Operand, Reg, Register


class TargetPlatform(Enum):
	WINDOWS_X64 = "windows-x64"
	LINUX_X64 = "linux-x64"
	MACOS_X64 = "macos-x64"


class CallingConvention(Enum):
	MICROSOFT_X64 = "Microsoft x64"
	SYSTEM_V = "System V ABI"
	APPLE_X64 = "Apple x64 ABI"


class UnknownTargetError(ValueError):
	"""Raised by parse_target_platform for an unrecognised platform string."""

	def __init__(self, text: str) -> None:
		super().__init__(f"Unknown target platform: {text}")
		self.text = text


@dataclass(frozen=True)
class TypeInfo:
	size: int
	align: int


@dataclass(frozen=True)
class TemplateInstr:
	"""One fixed instruction of a prologue/epilogue/bootstrap template."""

	mnemonic: Mnemonic
	operands: Tuple[Operand, ...] = ()
	comment: Optional[str] = None

	def render(self, *, with_comment: bool = True) -> str:
		return format_instruction(
			self.mnemonic,
			self.operands,
			comment=self.comment if with_comment else None,
		)


_TYPE_TABLE: Mapping[str, TypeInfo] = MappingProxyType(
	{
		"int": TypeInfo(4, 4),
		"i32": TypeInfo(4, 4),
		"float": TypeInfo(4, 4),
		"f32": TypeInfo(4, 4),
		"double": TypeInfo(8, 8),
		"f64": TypeInfo(8, 8),
		"char": TypeInfo(1, 1),
		"i8": TypeInfo(1, 1),
		"str": TypeInfo(8, 8),
		"ptr": TypeInfo(8, 8),
		"void": TypeInfo(0, 1),
	}
)
_DEFAULT_TYPE_INFO = TypeInfo(8, 8)

_RBP = Reg(Register.RBP)
_RSP = Reg(Register.RSP)

_FRAME_PROLOGUE = (
	TemplateInstr(Mnemonic.PUSH, (_RBP,), "save caller's frame"),
	TemplateInstr(Mnemonic.MOV, (_RBP, _RSP), "set up frame"),
)
_FRAME_EPILOGUE = (
	TemplateInstr(Mnemonic.MOV, (_RSP, _RBP), "restore stack pointer"),
	TemplateInstr(Mnemonic.POP, (_RBP,), "restore frame"),
	TemplateInstr(Mnemonic.RET, (), "return"),
)

_SYSV_INT_PARAMS = (Register.RDI, Register.RSI, Register.RDX, Register.RCX, Register.R8, Register.R9)
_SYSV_FLOAT_PARAMS = (
	Register.XMM0,
	Register.XMM1,
	Register.XMM2,
	Register.XMM3,
	Register.XMM4,
	Register.XMM5,
	Register.XMM6,
	Register.XMM7,
)


@dataclass(frozen=True)
class Target:
	"""
	Assembly conventions of one platform.

	`shared_arg_slots` models Microsoft x64: argument N uses either the N-th
	integer or the N-th xmm register, so a float argument consumes an integer
	slot too. System V style targets number integer and float arguments
	independently.
	"""

	platform: TargetPlatform
	calling_convention: CallingConvention
	arch_name: str
	directives: Tuple[str, ...]
	int_param_regs: Tuple[Register, ...]
	float_param_regs: Tuple[Register, ...]
	shared_arg_slots: bool = False
	symbol_prefix: str = ""
	data_section: str = "section .data"
	text_section: str = "section .text"
	runtime_externs: Tuple[str, ...] = ("printf", "exit")
	prologue: Tuple[TemplateInstr, ...] = _FRAME_PROLOGUE
	epilogue: Tuple[TemplateInstr, ...] = _FRAME_EPILOGUE
	return_reg: Register = Register.RAX
	float_return_reg: Register = Register.XMM0
	stack_pointer: Register = Register.RSP
	frame_pointer: Register = Register.RBP
	stack_alignment: int = 16
	shadow_space: int = 0
	entry_symbol: Optional[str] = None
	bootstrap: Tuple[TemplateInstr, ...] = ()
	type_table: Mapping[str, TypeInfo] = field(default_factory=lambda: _TYPE_TABLE, hash=False, compare=False)

	@property
	def name(self) -> str:
		return self.arch_name

	@property
	def calling_convention_name(self) -> str:
		return self.calling_convention.value

	# Symbols

	def symbol(self, name: str) -> str:
		"""Assembly-level spelling of a C-level symbol name."""
		return f"{self.symbol_prefix}{name}"

	def format_global(self, name: str) -> str:
		return f"global {self.symbol(name)}"

	def format_extern(self, name: str) -> str:
		return f"extern {self.symbol(name)}"

	def global_declarations(self, symbols: Iterable[str]) -> List[str]:
		"""`global` lines for the given C symbols plus the bootstrap entry point."""
		lines = []
		if self.entry_symbol is not None:
			lines.append(f"global {self.entry_symbol}")
		lines.extend(self.format_global(s) for s in symbols)
		return lines

	def extern_declarations(self, extra: Sequence[str] = ()) -> List[str]:
		names: List[str] = []
		for name in (*self.runtime_externs, *extra):
			if name not in names:
				names.append(name)
		return [self.format_extern(n) for n in names]

	def format_function_call(self, name: str) -> str:
		return format_instruction(Mnemonic.CALL, (LabelRef(self.symbol(name)),))

	# Data

	def format_string_literal(self, label: str, content: str) -> str:
		"""
		`db` directive for a C string.

		`%f` is pinned to `%.2f`, a single trailing newline is folded into the
		terminator, and the literal always ends with a newline byte and NUL.
		Bytes outside printable ASCII (and `"`) are written numerically.
		"""
		text = content.replace("%f", "%.2f")
		if text.endswith("\n"):
			text = text[:-1]
		pieces: List[str] = []
		run: List[str] = []
		for ch in text:
			if " " <= ch <= "~" and ch != '"':
				run.append(ch)
				continue
			if run:
				pieces.append('"' + "".join(run) + '"')
				run = []
			pieces.extend(str(b) for b in ch.encode("utf-8"))
		if run:
			pieces.append('"' + "".join(run) + '"')
		pieces.extend(["10", "0"])
		return f"    {label}: db {', '.join(pieces)}"

	def type_info(self, name: str) -> TypeInfo:
		return self.type_table.get(name, _DEFAULT_TYPE_INFO)

	def header_lines(self) -> List[str]:
		return [f"Target: {self.arch_name}", f"Calling Convention: {self.calling_convention_name}"]


WINDOWS_X64 = Target(
	platform=TargetPlatform.WINDOWS_X64,
	calling_convention=CallingConvention.MICROSOFT_X64,
	arch_name="x86-64 Windows",
	directives=("bits 64", "default rel"),
	int_param_regs=(Register.RCX, Register.RDX, Register.R8, Register.R9),
	float_param_regs=(Register.XMM0, Register.XMM1, Register.XMM2, Register.XMM3),
	shared_arg_slots=True,
	shadow_space=32,
)

LINUX_X64 = Target(
	platform=TargetPlatform.LINUX_X64,
	calling_convention=CallingConvention.SYSTEM_V,
	arch_name="x86-64 Linux",
	directives=("bits 64", "default rel"),
	int_param_regs=_SYSV_INT_PARAMS,
	float_param_regs=_SYSV_FLOAT_PARAMS,
	entry_symbol="_start",
	bootstrap=(
		TemplateInstr(Mnemonic.CALL, (LabelRef("main"),), "run the program"),
		TemplateInstr(Mnemonic.MOV, (Reg(Register.RDI), Reg(Register.RAX)), "exit status = main's result"),
		TemplateInstr(Mnemonic.MOV, (Reg(Register.RAX), Imm(60)), "sys_exit"),
		TemplateInstr(Mnemonic.SYSCALL),
	),
)

MACOS_X64 = Target(
	platform=TargetPlatform.MACOS_X64,
	calling_convention=CallingConvention.APPLE_X64,
	arch_name="x86-64 macOS",
	directives=("bits 64", "default rel"),
	int_param_regs=_SYSV_INT_PARAMS,
	float_param_regs=_SYSV_FLOAT_PARAMS,
	symbol_prefix="_",
)

_TARGETS = {
	TargetPlatform.WINDOWS_X64: WINDOWS_X64,
	TargetPlatform.LINUX_X64: LINUX_X64,
	TargetPlatform.MACOS_X64: MACOS_X64,
}

_ALIASES = {
	"windows": TargetPlatform.WINDOWS_X64,
	"win": TargetPlatform.WINDOWS_X64,
	"windows-x64": TargetPlatform.WINDOWS_X64,
	"win64": TargetPlatform.WINDOWS_X64,
	"linux": TargetPlatform.LINUX_X64,
	"linux-x64": TargetPlatform.LINUX_X64,
	"linux64": TargetPlatform.LINUX_X64,
	"macos": TargetPlatform.MACOS_X64,
	"darwin": TargetPlatform.MACOS_X64,
	"macos-x64": TargetPlatform.MACOS_X64,
	"darwin-x64": TargetPlatform.MACOS_X64,
}

TARGET_ALIASES: Tuple[str, ...] = tuple(_ALIASES)


def create_target(platform: TargetPlatform) -> Target:
	return _TARGETS[platform]


def parse_target_platform(text: str) -> TargetPlatform:
	"""Resolve a case-insensitive platform name/alias; raises UnknownTargetError."""
	platform = _ALIASES.get(text.strip().lower())
	if platform is None:
		raise UnknownTargetError(text)
	return platform


def all_targets() -> List[Target]:
	return list(_TARGETS.values())


__all__ = [
	"TargetPlatform",
	"CallingConvention",
	"UnknownTargetError",
	"TypeInfo",
	"TemplateInstr",
	"Target",
	"WINDOWS_X64",
	"LINUX_X64",
	"MACOS_X64",
	"TARGET_ALIASES",
	"create_target",
	"parse_target_platform",
	"all_targets",
]
