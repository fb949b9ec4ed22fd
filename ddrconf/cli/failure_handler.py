# ddrconf/cli/failure_handler.py
# FailureHandler -- converts hard failures into an exit code.
#
# On any hard failure:
#   1. Build a FailureRecord.
#   2. Write it as JSON to the record directory, when one is configured.
#   3. Write the failure summary to stderr.
#   4. sys.exit(exit_code) -- always the last operation.
#
# If writing the record itself fails, partial information goes to stderr
# and the process exits 4.

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ddrconf.cli.failure_record import FAILURE_TYPES, FailureRecord
from ddrconf.tool_version import TOOL_VERSION


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class FailureHandler:
    """
    Enforces the hard failure policy of the command-line tools.
    """

    def __init__(
        self,
        run_id:     str,
        record_dir: Optional[Path] = None,
        left_path:  str = "",
        right_path: str = "",
    ):
        self._run_id     = run_id
        self._record_dir = record_dir
        self._left_path  = left_path
        self._right_path = right_path

    def _record_dict(self, record: FailureRecord) -> dict:
        return {
            "failure_type_id": record.failure_type_id,
            "exit_code":       record.exit_code,
            "detected_at_iso": record.detected_at_iso,
            "run_id":          record.run_id,
            "tool_version":    record.tool_version,
            "left_path":       record.left_path,
            "right_path":      record.right_path,
            "detail":          record.detail,
        }

    def handle(self, failure_type_id: str, detail: str) -> None:
        """
        Execute the hard failure policy. This method does not return.
        """
        exit_code   = FAILURE_TYPES.get(failure_type_id, 4)
        detected_at = _now_iso()

        record = FailureRecord(
            failure_type_id=failure_type_id,
            exit_code=exit_code,
            detected_at_iso=detected_at,
            run_id=self._run_id,
            tool_version=TOOL_VERSION,
            left_path=self._left_path,
            right_path=self._right_path,
            detail=detail,
        )

        filepath = None
        try:
            if self._record_dir is not None:
                self._record_dir.mkdir(parents=True, exist_ok=True)
                ts_compact = detected_at.replace(":", "").replace("-", "").replace("+", "Z")[:16]
                filepath   = self._record_dir / f"{self._run_id}_FAIL_{ts_compact}.json"
                with open(filepath, "w", encoding="utf-8") as f:
                    json.dump(self._record_dict(record), f, indent=4)

            sys.stderr.write(
                f"RESULT: FAIL\n"
                f"Failure type:   {failure_type_id}\n"
                f"Exit code:      {exit_code}\n"
                f"Detail:         {detail[:200]}\n"
                + (f"Record written: {filepath}\n" if filepath is not None else "")
            )

        except Exception as exc:
            sys.stderr.write(
                f"TOOL_INTERNAL_ERROR: FailureHandler failed to write record: {exc}\n"
                f"Original failure: {failure_type_id} -- {detail}\n"
            )
            sys.exit(4)

        sys.exit(exit_code)

    def handle_from_exception(self, exc: Exception) -> None:
        """
        Parse failure_type_id from the exception message and invoke handle().

        Convention: RuntimeError messages of this tool start with
        FAILURE_TYPE_ID: detail
        """
        msg = str(exc)
        failure_type_id = "TOOL_INTERNAL_ERROR"
        for known_type in FAILURE_TYPES:
            if msg.startswith(known_type + ":") or msg.startswith(known_type + " "):
                failure_type_id = known_type
                break
        self.handle(failure_type_id=failure_type_id, detail=msg)
