# ddrconf/cli/run_dump.py
# DDR Configuration Dump Tool -- Entry Point.
#
# Standard invocation:
#   ddrconfdump board_a.json
#   python -m ddrconf.cli.run_dump board_a.json --output board_a.dump
#
# The dump lists every non-empty table with entry count, packed size and
# CRC. It is accepted back as input by ddrconfcmp.
#
# EXIT CODES:
#   0  -- Dump written.
#   2  -- INTEGRITY_FAILURE.
#   3  -- DATA_CORRUPTION.
#   4  -- Internal tool error.

import argparse
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ddrconf.cli.failure_handler import FailureHandler
from ddrconf.tables.dump_writer import DumpWriter
from ddrconf.tables.loader import TimingLoader
from ddrconf.tool_version import TOOL_VERSION


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=f"DDR Configuration Dump Tool v{TOOL_VERSION}",
        prog="ddrconfdump",
    )
    parser.add_argument(
        "input",
        help="Timing file to dump (JSON or ddrconfdump output).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the dump to this file instead of stdout.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args   = _parse_args(argv)
    run_id = "DMP-" + datetime.now(timezone.utc).strftime("%Y%m%d") + "-" + str(uuid.uuid4())[:8].upper()
    fh     = FailureHandler(run_id=run_id, left_path=args.input)

    try:
        config = TimingLoader().load(Path(args.input))
    except RuntimeError as exc:
        fh.handle_from_exception(exc)

    try:
        if args.output is not None:
            with open(args.output, "w", encoding="utf-8") as f:
                DumpWriter(f).write(config)
        else:
            DumpWriter(sys.stdout).write(config)
    except OSError as exc:
        fh.handle("INTEGRITY_FAILURE", f"Cannot write dump {args.output}: {exc}")

    sys.exit(0)


if __name__ == "__main__":
    main()
