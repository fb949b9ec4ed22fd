# =============================================================================
# ddrconf -- REGISTER-ARRAY COMPARISON ENGINE
# File:   ddrconf/engine/set_analyzer.py
# =============================================================================
#
# SCOPE
# -----
# Set Analyzer: partitions two sequences by address membership.
#
#   left_only    -- LEFT entries whose address never occurs in RIGHT.
#   right_only   -- RIGHT entries whose address never occurs in LEFT.
#   common_left  -- LEFT entries whose address occurs in RIGHT.
#   common_right -- RIGHT entries whose address occurs in LEFT.
#
# Every list keeps its side's original relative order. Membership is
# tested per occurrence, so a duplicated address contributes every
# occurrence to its list.
#
# INVARIANT
# ---------
# len(common_left) == len(common_right). A violation can only come from an
# address duplicated a different number of times on the two sides and
# raises InternalConsistencyError. The caller abandons that branch.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .domain import Entry, Sequence
from .exceptions import InternalConsistencyError


@dataclass(frozen=True)
class Partition:
    """
    Result of partition().

    Fields:
      left_only          -- LEFT entries absent from RIGHT.
      left_only_indices  -- original LEFT index of each left_only entry.
      right_only         -- RIGHT entries absent from LEFT.
      right_only_indices -- original RIGHT index of each right_only entry.
      common_left        -- LEFT entries also addressed in RIGHT.
      common_right       -- RIGHT entries also addressed in LEFT.
    """
    left_only:          Tuple[Entry, ...]
    left_only_indices:  Tuple[int, ...]
    right_only:         Tuple[Entry, ...]
    right_only_indices: Tuple[int, ...]
    common_left:        Sequence
    common_right:       Sequence

    @property
    def same_address_set(self) -> bool:
        return not self.left_only and not self.right_only

    @property
    def has_common(self) -> bool:
        return len(self.common_left) > 0


def _split(
    seq:   Sequence,
    other: frozenset,
) -> Tuple[List[Entry], List[int], List[Entry]]:
    only:    List[Entry] = []
    indices: List[int]   = []
    common:  List[Entry] = []
    for index, entry in enumerate(seq):
        if entry.address in other:
            common.append(entry)
        else:
            only.append(entry)
            indices.append(index)
    return only, indices, common


def unique_entries(left: Sequence, right: Sequence) -> Partition:
    """
    Partition without the common-subset length check.

    Used to report unique registers for a branch whose common subsets
    cannot be paired. The common fields may then differ in length.
    """
    left_addresses  = frozenset(entry.address for entry in left)
    right_addresses = frozenset(entry.address for entry in right)

    left_only, left_idx, common_left    = _split(left, right_addresses)
    right_only, right_idx, common_right = _split(right, left_addresses)

    return Partition(
        left_only=tuple(left_only),
        left_only_indices=tuple(left_idx),
        right_only=tuple(right_only),
        right_only_indices=tuple(right_idx),
        common_left=tuple(common_left),
        common_right=tuple(common_right),
    )


def partition(left: Sequence, right: Sequence) -> Partition:
    """
    Partition left and right into unique and common entries.

    Raises:
        InternalConsistencyError if the common subsets differ in length.
        MemoryError propagates unchanged; the comparator contains it.
    """
    result = unique_entries(left, right)
    if len(result.common_left) != len(result.common_right):
        raise InternalConsistencyError(len(result.common_left), len(result.common_right))
    return result


__all__ = [
    "Partition",
    "partition",
    "unique_entries",
]
