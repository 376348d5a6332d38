# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import pytest

from minic.ir import ir_nodes as I
from minic.opt import (
	DEFAULT_PASSES,
	MAX_ITERATIONS,
	ConstantFolding,
	CopyPropagation,
	DeadCodeElimination,
	OptimizationPass,
	OptimizerConfig,
	PassManager,
	PassScheduleError,
	optimize_program,
	schedule_passes,
)


class _AlwaysChanges(OptimizationPass):
	name = "always_changes"

	def run(self, func):
		return True


class _Needs(OptimizationPass):
	def __init__(self, name, *deps):
		self.name = name
		self.depends_on = deps

	def run(self, func):
		return False


def test_pipeline_reaches_a_fixpoint(arith_program):
	report = optimize_program(arith_program)
	main = arith_program.functions[0]
	assert main.instructions == [
		I.Alloca(I.INT, "x"),
		I.Store(I.IntConstant(5), I.Local("x"), I.INT),
		I.Load(I.Temp(2), I.Local("x"), I.INT),
		I.Return(I.Temp(2), I.INT),
	]
	fn_report = report.for_function("main")
	assert fn_report.iterations == 2
	assert not fn_report.hit_cap
	assert fn_report.changes == {"constant_folding": 1, "copy_propagation": 1, "dead_code_elimination": 1}


def test_second_run_changes_nothing(arith_program):
	optimize_program(arith_program)
	snapshot = list(arith_program.functions[0].instructions)
	report = optimize_program(arith_program)
	assert arith_program.functions[0].instructions == snapshot
	assert not report.functions[0].changed
	assert report.functions[0].iterations == 1


def test_iteration_cap_stops_oscillating_passes():
	fn = I.IrFunction("loop", I.VOID)
	report = PassManager([_AlwaysChanges()], max_iterations=3).run_function(fn)
	assert report.iterations == 3
	assert report.hit_cap
	assert PassManager().max_iterations == MAX_ITERATIONS == 10


def test_schedule_respects_dependencies_and_is_stable():
	ordered = schedule_passes([DeadCodeElimination(), CopyPropagation(), ConstantFolding()])
	assert [p.name for p in ordered] == list(DEFAULT_PASSES)
	independent = schedule_passes([_Needs("b"), _Needs("a")])
	assert [p.name for p in independent] == ["b", "a"]


def test_missing_dependencies_are_ignored():
	manager = PassManager([DeadCodeElimination()])
	assert manager.pass_names == ["dead_code_elimination"]


def test_dependency_cycle_is_rejected():
	with pytest.raises(PassScheduleError, match="cycle"):
		PassManager([_Needs("a", "b"), _Needs("b", "a")])


def test_config_without_disables_passes():
	config = OptimizerConfig().without(["copy_propagation"])
	assert tuple(config.passes) == ("constant_folding", "dead_code_elimination")
	assert PassManager.from_config(config).pass_names == ["constant_folding", "dead_code_elimination"]
	with pytest.raises(PassScheduleError, match="unknown"):
		OptimizerConfig().without(["inline"])


def test_invalid_iteration_cap():
	with pytest.raises(ValueError):
		PassManager(max_iterations=0)


def test_report_lines(arith_program):
	lines = optimize_program(arith_program).format_lines()
	assert lines == ["opt: main: 2 iteration(s); constant_folding=1, copy_propagation=1, dead_code_elimination=1"]


def test_empty_pass_list_leaves_function_alone(arith_program):
	before = list(arith_program.functions[0].instructions)
	report = optimize_program(arith_program, OptimizerConfig(passes=()))
	assert arith_program.functions[0].instructions == before
	assert report.functions[0].iterations == 0
