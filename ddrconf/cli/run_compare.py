# ddrconf/cli/run_compare.py
# DDR Configuration Comparison Tool -- Entry Point.
#
# Standard invocation:
#   ddrconfcmp --left board_a.json --right board_b.json
#   python -m ddrconf.cli.run_compare --left a.dump --right b.dump --list-duplicates
#
# EXIT CODES:
#   0  -- Report produced. Differences are findings, not failures.
#   1  -- Report produced, but a section was aborted (CARDINALITY_MISMATCH)
#         or a comparison branch hit an internal error.
#   2  -- INTEGRITY_FAILURE (missing or unreadable input, CRC mismatch).
#   3  -- DATA_CORRUPTION or CONTRACT_VIOLATION.
#   4  -- Internal tool error.
#
# Single-threaded. The six sections are compared in declaration order.

import argparse
import json
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import colorama

from ddrconf.cli.failure_handler import FailureHandler
from ddrconf.engine.domain import DEFAULT_MAX_DEPTH, DEFAULT_WINDOW, CompareOptions
from ddrconf.engine.exceptions import ComparisonError
from ddrconf.report.renderer import RenderOptions, ReportRenderer
from ddrconf.report.table_checker import TableChecker
from ddrconf.tables.loader import TimingLoader
from ddrconf.tool_version import TOOL_VERSION


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=f"DDR Configuration Comparison Tool v{TOOL_VERSION}",
        prog="ddrconfcmp",
    )
    parser.add_argument(
        "--left",
        required=True,
        help="LEFT timing file (JSON or ddrconfdump output).",
    )
    parser.add_argument(
        "--right",
        required=True,
        help="RIGHT timing file (JSON or ddrconfdump output).",
    )
    parser.add_argument(
        "--list-duplicates",
        action="store_true",
        default=False,
        help="Show detailed list of duplicate registers.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the report to this file instead of stdout. Implies --no-color.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable ANSI colors.",
    )
    parser.add_argument(
        "--window",
        type=int,
        default=DEFAULT_WINDOW,
        help=f"Block aligner lookahead window (default {DEFAULT_WINDOW}).",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Nested common-register comparisons allowed (default {DEFAULT_MAX_DEPTH}).",
    )
    parser.add_argument(
        "--show-identical-ranges",
        action="store_true",
        default=False,
        help="Show long identical runs inside reordered tables.",
    )
    parser.add_argument(
        "--summary-json",
        default=None,
        help="Write a machine-readable summary of the run to this path.",
    )
    parser.add_argument(
        "--record-dir",
        default=None,
        help="Directory for failure records.",
    )
    return parser.parse_args(argv)


def _write_summary(path: Path, summary: dict) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=4)
    except OSError as exc:
        raise RuntimeError(
            f"INTEGRITY_FAILURE: Cannot write summary JSON {path}: {exc}"
        ) from exc


def main(argv: Optional[List[str]] = None) -> None:
    """
    Load both sides, compare all six sections, render the report.

    Pipeline:
      TimingLoader (LEFT, RIGHT)
      TableChecker
      ReportRenderer
      summary JSON (optional)
      FailureHandler -- invoked only on failure

    Exits 0 when the report was produced and no section was aborted.
    """
    args   = _parse_args(argv)
    run_id = "CMP-" + datetime.now(timezone.utc).strftime("%Y%m%d") + "-" + str(uuid.uuid4())[:8].upper()

    fh = FailureHandler(
        run_id=run_id,
        record_dir=Path(args.record_dir) if args.record_dir else None,
        left_path=args.left,
        right_path=args.right,
    )

    # -----------------------------------------------------------------------
    # OPTIONS
    # -----------------------------------------------------------------------
    color = not args.no_color and args.output is None
    try:
        compare_options = CompareOptions(window=args.window, max_depth=args.max_depth)
        render_options  = RenderOptions(
            list_duplicates=args.list_duplicates,
            color=color,
            show_identical_ranges=args.show_identical_ranges,
        )
    except ComparisonError as exc:
        fh.handle("CONTRACT_VIOLATION", exc.message)

    # -----------------------------------------------------------------------
    # LOAD
    # -----------------------------------------------------------------------
    loader = TimingLoader()
    try:
        left  = loader.load(Path(args.left))
        right = loader.load(Path(args.right))
    except RuntimeError as exc:
        fh.handle_from_exception(exc)

    # -----------------------------------------------------------------------
    # COMPARE
    # -----------------------------------------------------------------------
    try:
        report = TableChecker(compare_options).check(left, right)
    except Exception as exc:
        fh.handle("TOOL_INTERNAL_ERROR", f"Comparison failed: {exc}")

    # -----------------------------------------------------------------------
    # RENDER
    # -----------------------------------------------------------------------
    try:
        if args.output is not None:
            with open(args.output, "w", encoding="utf-8") as f:
                ReportRenderer(render_options, f).render(report)
        else:
            if color:
                colorama.just_fix_windows_console()
            ReportRenderer(render_options, sys.stdout).render(report)
    except OSError as exc:
        fh.handle("INTEGRITY_FAILURE", f"Cannot write report {args.output}: {exc}")

    if args.summary_json:
        summary = report.to_dict()
        summary["run_id"]       = run_id
        summary["tool_version"] = TOOL_VERSION
        summary["generated_at"] = _now_iso()
        try:
            _write_summary(Path(args.summary_json), summary)
        except RuntimeError as exc:
            fh.handle_from_exception(exc)

    # -----------------------------------------------------------------------
    # RESULT
    # -----------------------------------------------------------------------
    if report.aborted_sections:
        fh.handle(
            "CARDINALITY_MISMATCH",
            "Sections aborted: " + ", ".join(report.aborted_sections),
        )
    if report.internal_errors:
        fh.handle(
            "COMPARISON_INTERNAL_ERROR",
            f"{report.internal_errors} comparison branch(es) abandoned; see report.",
        )

    sys.exit(0)


if __name__ == "__main__":
    main()
