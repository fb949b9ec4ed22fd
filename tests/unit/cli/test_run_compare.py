# tests/unit/cli/test_run_compare.py
# Target: ddrconf/cli/run_compare.py

import json
from pathlib import Path

import pytest

from ddrconf.cli.run_compare import main
from ddrconf.cli.run_dump import main as dump_main
from ddrconf.tool_version import TOOL_VERSION


SAMPLES = Path(__file__).resolve().parents[3] / "samples"


# =============================================================================
# SHARED HELPERS
# =============================================================================

def _run(*argv) -> int:
    with pytest.raises(SystemExit) as info:
        main([str(a) for a in argv])
    return info.value.code


@pytest.fixture
def pair(write_json, small_payload):
    """Write LEFT and RIGHT copies of small_payload; returns a writer for RIGHT overrides."""
    def _pair(**right_overrides):
        right = dict(small_payload, **right_overrides)
        return write_json(small_payload, "left.json"), write_json(right, "right.json")
    return _pair


class TestSuccessfulRuns:

    def test_identical_inputs_exit_zero(self, pair, capsys):
        left, right = pair()
        assert _run("--left", left, "--right", right, "--no-color") == 0
        out = capsys.readouterr().out
        assert "I: COMPARISON COMPLETE" in out
        assert "\x1b[" not in out

    def test_differences_are_findings_not_failures(self, pair, capsys):
        left, right = pair(ddrphy_pie=[["0xd0000", 0], ["0x90000", "0x11"], ["0xd0000", 1]])
        assert _run("--left", left, "--right", right, "--no-color") == 0
        assert "I: Registers match, 1 value differences" in capsys.readouterr().out

    def test_sample_boards(self, capsys):
        code = _run(
            "--left", SAMPLES / "board_a.json",
            "--right", SAMPLES / "board_b.json",
            "--no-color",
        )
        assert code == 0
        out = capsys.readouterr().out
        assert "W: Registers match, different order" in out
        assert "bypass: 0 → 1" in out
        assert "drate: 3200 → 3733" in out

    def test_output_file_is_uncolored(self, pair, tmp_path, capsys):
        left, right = pair()
        report = tmp_path / "report.txt"
        assert _run("--left", left, "--right", right, "--output", report) == 0
        text = report.read_text(encoding="utf-8")
        assert "DDR Configuration Comparison Tool" in text
        assert "\x1b[" not in text
        assert capsys.readouterr().out == ""

    def test_summary_json(self, pair, tmp_path):
        left, right = pair(fsp_cfg=[{"bypass": 1, "ddrc_cfg": [["0x3d402064", "0x28"], ["0x3d4020dc", "0x840000"]]}])
        summary_path = tmp_path / "out" / "summary.json"
        assert _run("--left", left, "--right", right, "--no-color", "--summary-json", summary_path) == 0
        summary = json.loads(summary_path.read_text(encoding="utf-8"))
        assert summary["identical"] is False
        assert summary["scalar_differences"] == 1
        assert summary["tool_version"] == TOOL_VERSION
        assert summary["run_id"].startswith("CMP-")

    def test_dump_input_accepted(self, pair, tmp_path, capsys):
        left, right = pair()
        dump_path = tmp_path / "left.dump"
        with pytest.raises(SystemExit):
            dump_main([str(left), "--output", str(dump_path)])
        assert _run("--left", dump_path, "--right", right, "--no-color") == 0


class TestFailureExitCodes:

    def test_missing_file_exits_2(self, pair, tmp_path, capsys):
        left, _ = pair()
        assert _run("--left", left, "--right", tmp_path / "absent.json", "--no-color") == 2
        err = capsys.readouterr().err
        assert "RESULT: FAIL" in err
        assert "INTEGRITY_FAILURE" in err

    def test_format_version_mismatch_exits_3(self, pair, capsys):
        left, right = pair(format_version="2.0.0")
        assert _run("--left", left, "--right", right) == 3
        assert "DATA_CORRUPTION" in capsys.readouterr().err

    def test_invalid_window_exits_3(self, pair, capsys):
        left, right = pair()
        assert _run("--left", left, "--right", right, "--window", "0") == 3
        assert "CONTRACT_VIOLATION" in capsys.readouterr().err

    def test_setpoint_count_mismatch_exits_1_after_report(self, pair, capsys):
        left, right = pair(fsp_cfg=[])
        assert _run("--left", left, "--right", right, "--no-color") == 1
        captured = capsys.readouterr()
        assert "E: Number of FSP entries do not match!" in captured.out
        assert "I: COMPARISON COMPLETE" in captured.out
        assert "CARDINALITY_MISMATCH" in captured.err

    def test_internal_error_exits_1(self, write_json, small_payload, capsys):
        # LEFT writes 0x3d400304 twice, RIGHT once.
        left = write_json(
            dict(small_payload, ddrc_cfg=[["0x3d400304", 1], ["0x3d400304", 2], ["0x3d400030", 1]]),
            "left.json",
        )
        right = write_json(dict(small_payload, ddrc_cfg=[["0x3d400304", 1], ["0x3d400030", 1]]), "right.json")
        assert _run("--left", left, "--right", right, "--no-color") == 1
        assert "COMPARISON_INTERNAL_ERROR" in capsys.readouterr().err

    def test_failure_record_written(self, pair, tmp_path):
        left, _ = pair()
        record_dir = tmp_path / "records"
        code = _run("--left", left, "--right", tmp_path / "absent.json", "--record-dir", record_dir)
        assert code == 2
        records = list(record_dir.glob("CMP-*_FAIL_*.json"))
        assert len(records) == 1
        record = json.loads(records[0].read_text(encoding="utf-8"))
        assert record["failure_type_id"] == "INTEGRITY_FAILURE"
        assert record["exit_code"] == 2
