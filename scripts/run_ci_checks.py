#!/usr/bin/env python3
# =============================================================================
# ddrconf -- CI CHECKS RUNNER
# File:   scripts/run_ci_checks.py
# =============================================================================
#
# PURPOSE
# -------
# Runs the CI gate in two sequential stages:
#   Stage 1: pytest (all tests + coverage enforcement >= 90%)
#   Stage 2: sample comparison (ddrconfcmp over samples/ must exit 0)
#
# Exit codes:
#   0 -- All stages passed.
#   1 -- Stage 1 (pytest) failed.
#   2 -- Stage 2 (sample comparison) failed.
#
# Usage:
#   python scripts/run_ci_checks.py
# =============================================================================

from __future__ import annotations

import subprocess
import sys
import pathlib

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
_REPO_ROOT = pathlib.Path(__file__).parent.parent
_PYTHON    = sys.executable
_SAMPLES   = _REPO_ROOT / "samples"


def _separator(char: str = "=", width: int = 72) -> str:
    return char * width


def _run(cmd: list[str], label: str) -> int:
    """
    Run a subprocess command, stream stdout/stderr live, return exit code.
    """
    print(_separator())
    print(f"CI STAGE: {label}")
    print(f"CMD:      {' '.join(cmd)}")
    print(_separator("-"))
    sys.stdout.flush()

    proc = subprocess.run(
        cmd,
        cwd=str(_REPO_ROOT),
    )
    return proc.returncode


def _fail(stage: str, rc: int, code: int) -> int:
    print(_separator())
    print(f"CI RESULT: FAIL  [stage={stage}  exit_code={rc}]")
    print(_separator())
    sys.stdout.flush()
    return code


def main() -> int:
    print(_separator())
    print("ddrconf CI GATE -- starting")
    print(_separator())
    sys.stdout.flush()

    # ------------------------------------------------------------------
    # Stage 1: pytest with coverage (pytest-cov).
    # ------------------------------------------------------------------
    pytest_rc = _run(
        [
            _PYTHON, "-m", "pytest",
            "--cov=ddrconf",
            "--cov-report=term-missing",
            "--cov-fail-under=90",
        ],
        "pytest (tests + coverage >= 90%)",
    )
    if pytest_rc != 0:
        return _fail("pytest", pytest_rc, 1)

    print(_separator("-"))
    print("CI STAGE pytest: PASS")

    # ------------------------------------------------------------------
    # Stage 2: compare the two sample boards end to end.
    # Differences are findings; only a non-zero exit blocks.
    # ------------------------------------------------------------------
    sample_rc = _run(
        [
            _PYTHON, "-m", "ddrconf.cli.run_compare",
            "--left", str(_SAMPLES / "board_a.json"),
            "--right", str(_SAMPLES / "board_b.json"),
            "--no-color",
        ],
        "sample comparison (ddrconfcmp)",
    )
    if sample_rc != 0:
        return _fail("sample", sample_rc, 2)

    print(_separator("-"))
    print("CI STAGE sample: PASS")

    print(_separator())
    print("CI RESULT: PASS  [stages=pytest,sample]")
    print(_separator())
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
