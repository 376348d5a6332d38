# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Textual IR reader (lark LALR grammar in ir.lark).
"""

from .parser import IrParseError, parse_ir, parse_ir_file

__all__ = ["IrParseError", "parse_ir", "parse_ir_file"]
