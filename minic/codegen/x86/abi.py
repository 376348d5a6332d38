# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Argument-register assignment shared by call lowering and parameter spills.

Callers and callees must agree on where each argument lives, so both sides go
through `assign_argument_registers`. Only register arguments exist; anything
that would go on the stack comes back as None and is reported by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .instruction import Register
from .targets import Target


@dataclass(frozen=True)
class ArgLocation:
	"""
	Where one argument travels.

	int_reg: general-purpose register (ints, pointers; on shared-slot targets
	  also the raw bits of a float argument, as variadic callees expect).
	xmm_reg: floating register for float arguments.
	"""

	int_reg: Optional[Register] = None
	xmm_reg: Optional[Register] = None


def assign_argument_registers(
	target: Target,
	is_float: Sequence[bool],
	*,
	first_position: int = 0,
) -> List[Optional[ArgLocation]]:
	"""
	Map each argument (float or not) to registers, in order.

	`first_position` skips leading slots already taken (print's format string
	occupies slot 0). Returns None for arguments that do not fit.
	"""
	int_regs = target.int_param_regs
	float_regs = target.float_param_regs
	out: List[Optional[ArgLocation]] = []
	if target.shared_arg_slots:
		for idx, flt in enumerate(is_float):
			pos = first_position + idx
			if pos >= len(int_regs):
				out.append(None)
			elif flt:
				xmm = float_regs[pos] if pos < len(float_regs) else None
				out.append(ArgLocation(int_reg=int_regs[pos], xmm_reg=xmm))
			else:
				out.append(ArgLocation(int_reg=int_regs[pos]))
		return out

	next_int = first_position
	next_float = 0
	for flt in is_float:
		if flt:
			if next_float >= len(float_regs):
				out.append(None)
				continue
			out.append(ArgLocation(xmm_reg=float_regs[next_float]))
			next_float += 1
		else:
			if next_int >= len(int_regs):
				out.append(None)
				continue
			out.append(ArgLocation(int_reg=int_regs[next_int]))
			next_int += 1
	return out


def vector_register_count(locations: Sequence[Optional[ArgLocation]]) -> int:
	"""Number of xmm registers carrying arguments (the `al` value for variadic calls)."""
	return sum(1 for loc in locations if loc is not None and loc.xmm_reg is not None)


__all__ = ["ArgLocation", "assign_argument_registers", "vector_register_count"]
