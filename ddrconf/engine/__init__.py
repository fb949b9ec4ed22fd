from .exceptions import (
    CardinalityMismatchError,
    ComparisonError,
    InternalConsistencyError,
    RegisterValidationError,
)
from .domain import (
    BLOCK_DISPLAY_CAP,
    CONTROLLER_POLICY,
    DEFAULT_MAX_DEPTH,
    DEFAULT_WINDOW,
    IDENTICAL_RUN_MIN,
    PHY_POLICY,
    CompareOptions,
    Entry,
    Sequence,
    WidthClass,
    WidthPolicy,
    make_sequence,
    sequence_policy,
    width_policy,
)
from .duplicates import (
    LEFT,
    RIGHT,
    DuplicateGroup,
    duplicates_in_value_diffs,
    find_duplicates,
)
from .set_analyzer import Partition, partition, unique_entries
from .ordering import Alignment, Block, MatchedRun, align, align_sequences, same_order
from .value_diff import ValueDelta, diff_values
from .comparator import ComparisonOutcome, OutcomeKind, compare
from .checksum import compute_crc32, pack_sequence, table_bytes, table_crc

__all__ = [
    # Exceptions
    "ComparisonError",
    "RegisterValidationError",
    "InternalConsistencyError",
    "CardinalityMismatchError",
    # Domain
    "DEFAULT_WINDOW",
    "DEFAULT_MAX_DEPTH",
    "BLOCK_DISPLAY_CAP",
    "IDENTICAL_RUN_MIN",
    "WidthClass",
    "WidthPolicy",
    "CONTROLLER_POLICY",
    "PHY_POLICY",
    "width_policy",
    "Entry",
    "Sequence",
    "make_sequence",
    "sequence_policy",
    "CompareOptions",
    # Duplicate Detector
    "LEFT",
    "RIGHT",
    "DuplicateGroup",
    "find_duplicates",
    "duplicates_in_value_diffs",
    # Set Analyzer
    "Partition",
    "partition",
    "unique_entries",
    # Order Classifier / Block Aligner
    "Block",
    "MatchedRun",
    "Alignment",
    "same_order",
    "align",
    "align_sequences",
    # Value Differ
    "ValueDelta",
    "diff_values",
    # Orchestration
    "OutcomeKind",
    "ComparisonOutcome",
    "compare",
    # Checksum
    "compute_crc32",
    "pack_sequence",
    "table_crc",
    "table_bytes",
]
