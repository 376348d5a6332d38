# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-06
"""
Pass manager: runs the optimization passes to a per-function fixpoint.

Pipeline placement:
  IR (minic/ir) → PassManager (this file, rewrites instruction lists in place) → codegen

For every function the full pass list is re-run until one complete round
changes nothing, or `max_iterations` rounds have run. The cap only exists to
stop passes that keep undoing each other; well-behaved pipelines converge in a
few rounds.

Pass order within a round comes from each pass's `depends_on`: the list is
sorted topologically, keeping registration order among independent passes.
Dependencies on passes that are not in the list are ignored (disabling
constant folding does not disable copy propagation); a cycle is an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Type

from minic.ir.ir_nodes import IrFunction, IrProgram

from .constant_folding import ConstantFolding
from .copy_propagation import CopyPropagation
from .dead_code import DeadCodeElimination
from .pass_base import OptimizationPass

MAX_ITERATIONS = 10

PASS_REGISTRY: Dict[str, Type[OptimizationPass]] = {
	ConstantFolding.name: ConstantFolding,
	CopyPropagation.name: CopyPropagation,
	DeadCodeElimination.name: DeadCodeElimination,
}

DEFAULT_PASSES: tuple[str, ...] = tuple(PASS_REGISTRY)


class PassScheduleError(ValueError):
	"""Unknown pass name or a dependency cycle among the requested passes."""


@dataclass
class OptimizerConfig:
	"""Which passes to run and how many fixpoint rounds to allow."""

	passes: Sequence[str] = DEFAULT_PASSES
	max_iterations: int = MAX_ITERATIONS

	def without(self, disabled: Iterable[str]) -> "OptimizerConfig":
		disabled_set = set(disabled)
		unknown = sorted(disabled_set - set(PASS_REGISTRY))
		if unknown:
			raise PassScheduleError(
				f"unknown optimization pass(es): {', '.join(unknown)} "
				f"(known: {', '.join(PASS_REGISTRY)})"
			)
		return OptimizerConfig(
			passes=tuple(p for p in self.passes if p not in disabled_set),
			max_iterations=self.max_iterations,
		)


@dataclass
class FunctionReport:
	"""What the fixpoint loop did to one function."""

	name: str
	iterations: int = 0
	changes: Dict[str, int] = field(default_factory=dict)
	hit_cap: bool = False

	@property
	def changed(self) -> bool:
		return any(self.changes.values())


@dataclass
class OptimizationReport:
	functions: List[FunctionReport] = field(default_factory=list)

	def for_function(self, name: str) -> Optional[FunctionReport]:
		for report in self.functions:
			if report.name == name:
				return report
		return None

	def format_lines(self) -> List[str]:
		"""Human-readable summary, one line per function (used by `--stats`)."""
		lines = []
		for report in self.functions:
			counts = ", ".join(f"{name}={n}" for name, n in report.changes.items())
			cap = " (iteration cap reached)" if report.hit_cap else ""
			lines.append(f"opt: {report.name}: {report.iterations} iteration(s); {counts}{cap}")
		return lines


def schedule_passes(passes: Sequence[OptimizationPass]) -> List[OptimizationPass]:
	"""
	Order `passes` so each runs after the passes it depends on.

	Stable: among passes whose dependencies are satisfied, the earliest in the
	input wins. Raises PassScheduleError on a cycle.
	"""
	present = {p.name for p in passes}
	pending = list(passes)
	ordered: List[OptimizationPass] = []
	done: set[str] = set()
	while pending:
		for idx, candidate in enumerate(pending):
			deps = [d for d in candidate.depends_on if d in present]
			if all(d in done for d in deps):
				ordered.append(pending.pop(idx))
				done.add(candidate.name)
				break
		else:
			names = ", ".join(p.name for p in pending)
			raise PassScheduleError(f"dependency cycle among optimization passes: {names}")
	return ordered


def default_passes() -> List[OptimizationPass]:
	return [PASS_REGISTRY[name]() for name in DEFAULT_PASSES]


class PassManager:
	"""
	Runs a scheduled pass list to a fixpoint on each function.

	Entry points:
	  run_function(func) -> FunctionReport
	  run(program) -> OptimizationReport
	"""

	def __init__(
		self,
		passes: Optional[Sequence[OptimizationPass]] = None,
		*,
		max_iterations: int = MAX_ITERATIONS,
	) -> None:
		if max_iterations < 1:
			raise ValueError("max_iterations must be at least 1")
		self.passes = schedule_passes(default_passes() if passes is None else list(passes))
		self.max_iterations = max_iterations

	@classmethod
	def from_config(cls, config: OptimizerConfig) -> "PassManager":
		unknown = [name for name in config.passes if name not in PASS_REGISTRY]
		if unknown:
			raise PassScheduleError(f"unknown optimization pass(es): {', '.join(unknown)}")
		return cls([PASS_REGISTRY[name]() for name in config.passes], max_iterations=config.max_iterations)

	@property
	def pass_names(self) -> List[str]:
		return [p.name for p in self.passes]

	def run_function(self, func: IrFunction) -> FunctionReport:
		report = FunctionReport(name=func.name, changes={p.name: 0 for p in self.passes})
		if not self.passes:
			return report
		changed = True
		while changed and report.iterations < self.max_iterations:
			report.iterations += 1
			changed = False
			for opt_pass in self.passes:
				if opt_pass.run(func):
					report.changes[opt_pass.name] += 1
					changed = True
		report.hit_cap = changed
		return report

	def run(self, program: IrProgram) -> OptimizationReport:
		return OptimizationReport(functions=[self.run_function(fn) for fn in program.functions])


def optimize_program(program: IrProgram, config: Optional[OptimizerConfig] = None) -> OptimizationReport:
	"""Optimize every function of `program` in place."""
	manager = PassManager.from_config(config or OptimizerConfig())
	return manager.run(program)


__all__ = [
	"MAX_ITERATIONS",
	"PASS_REGISTRY",
	"DEFAULT_PASSES",
	"PassScheduleError",
	"OptimizerConfig",
	"FunctionReport",
	"OptimizationReport",
	"PassManager",
	"schedule_passes",
	"default_passes",
	"optimize_program",
]
