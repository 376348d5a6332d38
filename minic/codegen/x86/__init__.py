# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-08
"""
x86-64 NASM backend.

Pipeline placement:
  optimized IR (minic.opt) → X86CodeGenerator (this package) → assembly text

Public API:
  - Target / create_target / parse_target_platform: per-OS ABI descriptors
  - StackFrameAllocator: fixed-slot frame layout
  - AsmEmitter: line formatting
  - X86CodeGenerator / generate_assembly / CodegenOptions: the orchestrator
"""

from .codegen import CodegenOptions, X86CodeGenerator, generate_assembly
from .emitter import AsmEmitter
from .stack_frame import FrameLayout, Slot, StackFrameAllocator
from .targets import (
	LINUX_X64,
	MACOS_X64,
	TARGET_ALIASES,
	WINDOWS_X64,
	CallingConvention,
	Target,
	TargetPlatform,
	UnknownTargetError,
	all_targets,
	create_target,
	parse_target_platform,
)

__all__ = [
	"CodegenOptions",
	"X86CodeGenerator",
	"generate_assembly",
	"AsmEmitter",
	"FrameLayout",
	"Slot",
	"StackFrameAllocator",
	"LINUX_X64",
	"MACOS_X64",
	"WINDOWS_X64",
	"TARGET_ALIASES",
	"CallingConvention",
	"Target",
	"TargetPlatform",
	"UnknownTargetError",
	"all_targets",
	"create_target",
	"parse_target_platform",
]
