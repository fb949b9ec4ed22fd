# ddrconf/cli/failure_record.py
# FailureRecord data class and failure type registry.

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# FAILURE TYPE REGISTRY
# ---------------------------------------------------------------------------
# Exit code mapping:
#   Code 0 -- report produced (differences are findings, not failures)
#   Code 1 -- report produced, but a section was aborted or a comparison
#             branch hit an internal error
#   Code 2 -- INTEGRITY_FAILURE (missing or unreadable input, CRC mismatch)
#   Code 3 -- DATA_CORRUPTION, CONTRACT_VIOLATION
#   Code 4 -- Internal tool errors

FAILURE_TYPES = {
    # Exit Code 1
    "CARDINALITY_MISMATCH":      1,
    "COMPARISON_INTERNAL_ERROR": 1,
    # Exit Code 2
    "INTEGRITY_FAILURE":         2,
    # Exit Code 3
    "DATA_CORRUPTION":           3,
    "CONTRACT_VIOLATION":        3,
    # Exit Code 4
    "TOOL_INTERNAL_ERROR":       4,
}


@dataclass
class FailureRecord:
    """
    Failure record written by the FailureHandler when --record-dir is given.

    Fields:
      failure_type_id -- Key from FAILURE_TYPES registry.
      exit_code       -- Integer exit code (1-4).
      detected_at_iso -- UTC ISO-8601 timestamp of failure detection.
      run_id          -- Run identifier for this invocation.
      tool_version    -- TOOL_VERSION at time of failure.
      left_path       -- LEFT input path. Empty if not applicable.
      right_path      -- RIGHT input path. Empty if not applicable.
      detail          -- Human-readable failure description.
    """
    failure_type_id: str
    exit_code:       int
    detected_at_iso: str
    run_id:          str
    tool_version:    str
    left_path:       str
    right_path:      str
    detail:          str
