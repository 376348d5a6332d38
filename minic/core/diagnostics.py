# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic records shared by the IR reader, the IR validator and the driver.

The backend itself reports nothing through this channel: lowering degrades to
assembly comments instead of failing. Diagnostics only exist on the path that
turns user-supplied text into an IrProgram.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .span import Span


@dataclass
class Diagnostic:
	"""One error/warning with a phase label ("parser", "validate", "target", ...)."""

	message: str
	code: str | None = None
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	@property
	def is_error(self) -> bool:
		return self.severity == "error"

	def to_json(self, *, default_file: str | None = None) -> dict:
		"""Structured form used by `--json` output."""
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file or default_file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
	return any(d.is_error for d in diagnostics)


__all__ = ["Diagnostic", "has_errors"]
