# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Backends. Only x86-64 NASM output exists (minic.codegen.x86).
"""
