# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""End-to-end runs of the `minicc` driver."""

from __future__ import annotations

import json

from minic.driver import main
from minic.ir.ir_printer import PROGRAM_HEADER


def _json_run(argv, capsys):
	exit_code = main([*argv, "--json"])
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == exit_code
	return exit_code, payload["diagnostics"]


def test_writes_assembly_to_output_file(ir_file, tmp_path):
	out = tmp_path / "sample.s"
	assert main([str(ir_file), "--target", "macos", "-o", str(out)]) == 0
	asm = out.read_text()
	assert "_main:" in asm
	assert "_add:" in asm
	assert "extern _add" not in asm


def test_writes_assembly_to_stdout(ir_file, capsys):
	assert main([str(ir_file)]) == 0
	captured = capsys.readouterr()
	assert "MINI-C COMPILER GENERATED ASSEMBLY" in captured.out
	assert "_start:" in captured.out
	assert captured.err == ""


def test_json_success_keeps_stdout_clean(ir_file, tmp_path, capsys):
	out = tmp_path / "sample.s"
	exit_code, diags = _json_run([str(ir_file), "-o", str(out)], capsys)
	assert exit_code == 0
	assert diags == []
	assert out.exists()


def test_unknown_target(ir_file, capsys):
	exit_code, diags = _json_run([str(ir_file), "--target", "solaris"], capsys)
	assert exit_code == 1
	assert diags[0]["phase"] == "target"
	assert diags[0]["message"] == "Unknown target platform: solaris"


def test_syntax_error_is_pinned(tmp_path, capsys):
	src = tmp_path / "bad.ir"
	src.write_text("define i32 @main() {\n  ret i32 ?\n}\n")
	exit_code, diags = _json_run([str(src)], capsys)
	assert exit_code == 1
	assert diags[0]["phase"] == "parser"
	assert diags[0]["line"] == 2
	assert diags[0]["file"] == str(src)


def test_validation_errors_stop_the_build(tmp_path, capsys):
	src = tmp_path / "bad_label.ir"
	src.write_text("define i32 @main() {\n  jmp label nowhere\n  ret i32 0\n}\n")
	out = tmp_path / "bad_label.s"
	assert main([str(src), "-o", str(out)]) == 1
	err = capsys.readouterr().err
	assert err.startswith(f"{src}:?:?: error: in function 'main': jump to unknown label 'nowhere'")
	assert not out.exists()


def test_validation_json_payload(tmp_path, capsys):
	src = tmp_path / "bad_label.ir"
	src.write_text("define i32 @main() {\n  jmp label nowhere\n  ret i32 0\n}\n")
	exit_code, diags = _json_run([str(src)], capsys)
	assert exit_code == 1
	assert [d["phase"] for d in diags] == ["validate"]
	assert diags[0]["file"] == str(src)


def test_emit_ir_writes_optimized_ir(ir_file, tmp_path, capsys):
	ir_out = tmp_path / "opt.ir"
	assert main([str(ir_file), "--emit-ir", str(ir_out)]) == 0
	text = ir_out.read_text()
	assert text.startswith(PROGRAM_HEADER)
	assert "define i32 @main()" in text


def test_no_opt_keeps_ir_unchanged(ir_file, tmp_path, sample_ir_text):
	ir_out = tmp_path / "same.ir"
	assert main([str(ir_file), "-O0", "--emit-ir", str(ir_out), "-o", str(tmp_path / "out.s")]) == 0
	assert ir_out.read_text() == sample_ir_text


def test_stats_go_to_stderr(ir_file, capsys):
	assert main([str(ir_file), "--stats"]) == 0
	err = capsys.readouterr().err
	assert "opt: add:" in err
	assert "opt: main:" in err


def test_unknown_pass_is_rejected(ir_file, capsys):
	exit_code, diags = _json_run([str(ir_file), "--disable-pass", "bogus"], capsys)
	assert exit_code == 1
	assert diags[0]["phase"] == "optimizer"
	assert "bogus" in diags[0]["message"]


def test_zero_iteration_cap_is_rejected(ir_file, capsys):
	exit_code, diags = _json_run([str(ir_file), "--max-iterations", "0"], capsys)
	assert exit_code == 1
	assert diags[0]["phase"] == "optimizer"


def test_missing_source_file(tmp_path, capsys):
	exit_code, diags = _json_run([str(tmp_path / "nope.ir")], capsys)
	assert exit_code == 1
	assert diags[0]["phase"] == "parser"
	assert diags[0]["message"].startswith("cannot read")


def test_no_stack_summary_flag(ir_file, capsys):
	assert main([str(ir_file), "--no-stack-summary"]) == 0
	assert "Stack layout" not in capsys.readouterr().out


def test_source_that_is_not_utf8(tmp_path, capsys):
	src = tmp_path / "latin1.ir"
	src.write_bytes(b"; \xff\xfe\n")
	exit_code, diags = _json_run([str(src)], capsys)
	assert exit_code == 1
	assert diags[0]["phase"] == "parser"
	assert diags[0]["message"] == f"cannot decode {src} as UTF-8: invalid start byte at byte 2"
