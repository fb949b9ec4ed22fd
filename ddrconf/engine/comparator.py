# =============================================================================
# ddrconf -- REGISTER-ARRAY COMPARISON ENGINE
# File:   ddrconf/engine/comparator.py
# =============================================================================
#
# SCOPE
# -----
# Top-level comparison of two register Sequences. Produces a finished
# ComparisonOutcome; rendering is done elsewhere from that value.
#
# STATE MACHINE
# -------------
#   Init
#     -> DuplicateScan                 (advisory, always runs)
#     -> LengthCheck
#          unequal -> SetAnalyzer -> nested compare(common subsets)
#                  -> STRUCTURAL_MISMATCH
#          equal   -> SetCheck
#     -> SetCheck
#          unique addresses -> STRUCTURAL_MISMATCH
#     -> OrderCheck
#          same      -> ValueDiff(positional)   -> MATCH_SAME_ORDER
#          different -> BlockAlign -> ValueDiff(first match) -> MATCH_REORDERED
#
# The nested outcome is attached for display only. A length mismatch is
# always STRUCTURAL_MISMATCH at its own level, whatever the nested result.
#
# FAILURE CONTAINMENT
# -------------------
# InternalConsistencyError and MemoryError raised while building the common
# subsets of a length mismatch are recorded as internal_error on the
# outcome of that branch. Equal-length tables never build them.
# compare() itself returns normally so sibling tables are still compared.
#
# RECURSION
# ---------
# depth counts nested calls below the top-level call. When depth reaches
# CompareOptions.max_depth the nested comparison is skipped and the outcome
# is marked nested_skipped.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from .domain import CompareOptions, Entry, Sequence
from .duplicates import (
    LEFT,
    RIGHT,
    DuplicateGroup,
    duplicates_in_value_diffs,
    find_duplicates,
)
from .exceptions import InternalConsistencyError
from .ordering import Block, MatchedRun, align_sequences, same_order
from .set_analyzer import Partition, partition, unique_entries
from .value_diff import ValueDelta, diff_values


MEMORY_ERROR_DETAIL: str = "Memory allocation failed for common register comparison"


# =============================================================================
# SECTION 1 -- OUTCOME
# =============================================================================

class OutcomeKind(str, Enum):
    """
    STRUCTURAL_MISMATCH -- address sets or lengths differ.
    MATCH_SAME_ORDER    -- same addresses at every position.
    MATCH_REORDERED     -- same address set, different order.
    """
    STRUCTURAL_MISMATCH = "STRUCTURAL_MISMATCH"
    MATCH_SAME_ORDER    = "MATCH_SAME_ORDER"
    MATCH_REORDERED     = "MATCH_REORDERED"


@dataclass(frozen=True)
class ComparisonOutcome:
    """
    Result of one compare() call.

    Fields:
      kind             -- OutcomeKind.
      left             -- LEFT sequence as compared.
      right            -- RIGHT sequence as compared.
      depth            -- nesting level, 0 for the top-level call.
      left_duplicates  -- DuplicateGroups of LEFT.
      right_duplicates -- DuplicateGroups of RIGHT.
      value_diffs      -- ValueDeltas. Empty for STRUCTURAL_MISMATCH.
      blocks           -- relocated Blocks. MATCH_REORDERED only.
      matched_runs     -- MatchedRuns found while aligning.
      partition        -- Partition. STRUCTURAL_MISMATCH only, None when
                          the partition itself could not be built.
      nested           -- outcome of the common-subset comparison, or None.
      nested_skipped   -- True when the depth guard prevented nesting.
      internal_error   -- non-empty when this branch was abandoned.
      interference     -- duplicate groups whose address has a value delta.
    """
    kind:             OutcomeKind
    left:             Sequence
    right:            Sequence
    depth:            int
    left_duplicates:  Tuple[DuplicateGroup, ...]
    right_duplicates: Tuple[DuplicateGroup, ...]
    value_diffs:      Tuple[ValueDelta, ...] = ()
    blocks:           Tuple[Block, ...] = ()
    matched_runs:     Tuple[MatchedRun, ...] = ()
    partition:        Optional[Partition] = None
    nested:           Optional["ComparisonOutcome"] = None
    nested_skipped:   bool = False
    internal_error:   str = ""
    interference:     Tuple[DuplicateGroup, ...] = ()

    @property
    def value_diff_count(self) -> int:
        return len(self.value_diffs)

    @property
    def is_structural_mismatch(self) -> bool:
        return self.kind is OutcomeKind.STRUCTURAL_MISMATCH

    @property
    def has_internal_error(self) -> bool:
        """True if this branch or any nested branch was abandoned."""
        if self.internal_error:
            return True
        return self.nested is not None and self.nested.has_internal_error

    @property
    def left_count(self) -> int:
        return len(self.left)

    @property
    def right_count(self) -> int:
        return len(self.right)


# =============================================================================
# SECTION 2 -- HELPERS
# =============================================================================

def _mismatch(
    left:       Sequence,
    right:      Sequence,
    depth:      int,
    duplicates: Tuple[Tuple[DuplicateGroup, ...], Tuple[DuplicateGroup, ...]],
    **fields,
) -> ComparisonOutcome:
    return ComparisonOutcome(
        kind=OutcomeKind.STRUCTURAL_MISMATCH,
        left=left,
        right=right,
        depth=depth,
        left_duplicates=duplicates[0],
        right_duplicates=duplicates[1],
        **fields,
    )


def _compare_length_mismatch(
    left:       Sequence,
    right:      Sequence,
    options:    CompareOptions,
    depth:      int,
    duplicates: Tuple[Tuple[DuplicateGroup, ...], Tuple[DuplicateGroup, ...]],
) -> ComparisonOutcome:
    try:
        parts = partition(left, right)
    except InternalConsistencyError as exc:
        return _mismatch(
            left, right, depth, duplicates,
            partition=unique_entries(left, right),
            internal_error=exc.message,
        )
    except MemoryError:
        return _mismatch(left, right, depth, duplicates, internal_error=MEMORY_ERROR_DETAIL)

    if not parts.has_common:
        return _mismatch(left, right, depth, duplicates, partition=parts)

    if depth >= options.max_depth:
        return _mismatch(
            left, right, depth, duplicates,
            partition=parts,
            nested_skipped=True,
        )

    try:
        nested = compare(parts.common_left, parts.common_right, options, depth + 1)
    except MemoryError:
        return _mismatch(
            left, right, depth, duplicates,
            partition=parts,
            internal_error=MEMORY_ERROR_DETAIL,
        )

    return _mismatch(left, right, depth, duplicates, partition=parts, nested=nested)


# =============================================================================
# SECTION 3 -- compare
# =============================================================================

def compare(
    left:    Iterable[Entry],
    right:   Iterable[Entry],
    options: Optional[CompareOptions] = None,
    depth:   int = 0,
) -> ComparisonOutcome:
    """
    Compare two register sequences and return a ComparisonOutcome.

    Never mutates its inputs. Never raises for structural differences,
    reordering, value drift or duplicates: those are reported outcomes.
    """
    if options is None:
        options = CompareOptions()
    left  = tuple(left)
    right = tuple(right)

    duplicates = (find_duplicates(left, LEFT), find_duplicates(right, RIGHT))

    if len(left) != len(right):
        return _compare_length_mismatch(left, right, options, depth, duplicates)

    # No common-subset recursion here, so unequal duplicate counts are
    # an ordinary structural difference.
    parts = unique_entries(left, right)
    if not parts.same_address_set:
        return _mismatch(left, right, depth, duplicates, partition=parts)

    if same_order(left, right):
        deltas = diff_values(left, right, positional=True)
        return ComparisonOutcome(
            kind=OutcomeKind.MATCH_SAME_ORDER,
            left=left,
            right=right,
            depth=depth,
            left_duplicates=duplicates[0],
            right_duplicates=duplicates[1],
            value_diffs=deltas,
            interference=duplicates_in_value_diffs(deltas, *duplicates),
        )

    alignment = align_sequences(left, right, options.window)
    deltas = diff_values(left, right, positional=False)
    return ComparisonOutcome(
        kind=OutcomeKind.MATCH_REORDERED,
        left=left,
        right=right,
        depth=depth,
        left_duplicates=duplicates[0],
        right_duplicates=duplicates[1],
        value_diffs=deltas,
        blocks=alignment.blocks,
        matched_runs=alignment.matched_runs,
        interference=duplicates_in_value_diffs(deltas, *duplicates),
    )


__all__ = [
    "MEMORY_ERROR_DETAIL",
    "OutcomeKind",
    "ComparisonOutcome",
    "compare",
]
