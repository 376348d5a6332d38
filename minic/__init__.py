# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-02
"""
minic: Mini-C compiler backend.

Lowers the Mini-C intermediate representation (IR) to NASM-flavoured x86-64
assembly for Windows, Linux and macOS. The CLI entrypoint is
`minic.driver:main`.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
