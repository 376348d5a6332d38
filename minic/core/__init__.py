"""
minic.core: shared diagnostics and source spans.

Modules:
  - diagnostics: Diagnostic record + helpers
  - span: Span (file/line/column of textual IR)
"""

from .diagnostics import Diagnostic, has_errors
from .span import Span

__all__ = ["Diagnostic", "Span", "has_errors"]
