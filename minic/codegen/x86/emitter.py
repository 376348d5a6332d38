# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Line-oriented assembly text buffer.

AsmEmitter only formats: it never checks operand counts, widths or
encodability. Callers (the lowering code) are responsible for emitting valid
instructions.

Layout conventions:
  label:
      mnemonic operands                 (mnemonic padded to 8 columns)
      mnemonic operands            ; c  (operands padded to 20 columns)
  ; comment
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Union

from .instruction import Mnemonic, Operand, Size, render_operands

INDENT = "    "
MNEMONIC_WIDTH = 8
OPERANDS_WIDTH = 20
COMMENT_COLUMN = 40


def format_instruction(
	mnemonic: Union[Mnemonic, str],
	operands: Sequence[Operand] = (),
	*,
	size: Optional[Size] = None,
	comment: Optional[str] = None,
) -> str:
	"""Render one instruction line (with leading indentation)."""
	name = mnemonic.value if isinstance(mnemonic, Mnemonic) else mnemonic
	ops = render_operands(tuple(operands), size)
	if comment:
		return f"{INDENT}{name:<{MNEMONIC_WIDTH}} {ops:<{OPERANDS_WIDTH}} ; {comment}"
	if not ops:
		return f"{INDENT}{name}"
	return f"{INDENT}{name:<{MNEMONIC_WIDTH}} {ops}"


class AsmEmitter:
	"""Accumulates assembly lines; `text()` joins them into the final document."""

	def __init__(self) -> None:
		self.lines: List[str] = []

	def emit_line(self, line: str = "") -> None:
		self.lines.append(line)

	def emit_lines(self, lines: Iterable[str]) -> None:
		self.lines.extend(lines)

	def emit_comment(self, text: str) -> None:
		"""One `; ` line per line of `text`."""
		self.lines.extend(f"; {line}" for line in text.splitlines() or [""])

	def emit_line_with_comment(self, line: str, comment: str) -> None:
		self.lines.append(f"{line:<{COMMENT_COLUMN}} ; {comment}")

	def emit_label(self, name: str) -> None:
		self.lines.append(f"{name}:")

	def emit_instruction(
		self,
		mnemonic: Union[Mnemonic, str],
		operands: Sequence[Operand] = (),
		*,
		size: Optional[Size] = None,
		comment: Optional[str] = None,
	) -> None:
		self.lines.append(format_instruction(mnemonic, operands, size=size, comment=comment))

	def emit_section_header(self, title: str) -> None:
		rule = "; " + "=" * 60
		self.lines.extend([rule, f"; {title}", rule])

	def emit_subsection_header(self, title: str) -> None:
		rule = "; " + "-" * 40
		self.lines.extend([rule, f"; {title}", rule])

	def text(self) -> str:
		return "\n".join(self.lines) + "\n"


__all__ = ["AsmEmitter", "format_instruction", "INDENT"]
