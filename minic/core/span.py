# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source locations for textual IR diagnostics.

The IR reader tags parse errors and validator findings with a Span; the core
(optimizer, codegen) never produces one because it never fails.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Best-effort file/line/column plus the raw parser object (lark token/meta/error)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Build a Span from a lark Token, Tree meta, UnexpectedInput or another Span.

		Missing attributes stay None; `file` overrides whatever the object carries.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc if file is None else replace(loc, file=file)
		return cls(
			file=file or getattr(loc, "file", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	def describe(self) -> str:
		"""`file:line:col` with `?` for unknown parts."""
		file = self.file or "<ir>"
		line = "?" if self.line is None else str(self.line)
		column = "?" if self.column is None else str(self.column)
		return f"{file}:{line}:{column}"


__all__ = ["Span"]
