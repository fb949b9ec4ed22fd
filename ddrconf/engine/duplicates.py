# =============================================================================
# ddrconf -- REGISTER-ARRAY COMPARISON ENGINE
# File:   ddrconf/engine/duplicates.py
# =============================================================================
#
# SCOPE
# -----
# Duplicate Detector: groups every occurrence of an address that appears
# more than once within one side's Sequence.
#
# The detector gathers occurrences only. Whether a group is redundant
# (all values equal) or conflicting (values differ) is a property of the
# group, read by the renderer.
#
# Also computes which duplicate groups take part in value differences,
# so the report can flag deltas that may be hidden by first-match pairing.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from .domain import Sequence
from .value_diff import ValueDelta


LEFT:  str = "LEFT"
RIGHT: str = "RIGHT"


@dataclass(frozen=True)
class DuplicateGroup:
    """
    All occurrences of one duplicated address within one side.

    Fields:
      address   -- duplicated register address.
      positions -- ((index, value), ...) in first-to-last order, len >= 2.
      side      -- LEFT or RIGHT.
    """
    address:   int
    positions: Tuple[Tuple[int, int], ...]
    side:      str

    @property
    def count(self) -> int:
        return len(self.positions)

    @property
    def indices(self) -> Tuple[int, ...]:
        return tuple(index for index, _ in self.positions)

    @property
    def values(self) -> Tuple[int, ...]:
        return tuple(value for _, value in self.positions)

    @property
    def is_conflicting(self) -> bool:
        """True when the occurrences do not all carry the same value."""
        return len(set(self.values)) > 1


def find_duplicates(seq: Sequence, side: str = LEFT) -> Tuple[DuplicateGroup, ...]:
    """
    Return one DuplicateGroup per address occurring more than once in seq.

    Groups are ordered by first occurrence. Addresses that occur once are
    omitted. An empty sequence yields no groups. O(n).
    """
    occurrences: Dict[int, List[Tuple[int, int]]] = {}
    for index, entry in enumerate(seq):
        occurrences.setdefault(entry.address, []).append((index, entry.value))

    return tuple(
        DuplicateGroup(address=address, positions=tuple(positions), side=side)
        for address, positions in occurrences.items()
        if len(positions) > 1
    )


def duplicates_in_value_diffs(
    deltas:           Iterable[ValueDelta],
    left_duplicates:  Iterable[DuplicateGroup],
    right_duplicates: Iterable[DuplicateGroup],
) -> Tuple[DuplicateGroup, ...]:
    """
    Duplicate groups whose address also carries a value difference.

    Left groups are listed before right groups. Each address is reported
    once; when both sides duplicate it, the left group is kept.
    """
    diff_addresses = {delta.address for delta in deltas}
    reported = set()
    involved: List[DuplicateGroup] = []
    for group in tuple(left_duplicates) + tuple(right_duplicates):
        if group.address in diff_addresses and group.address not in reported:
            reported.add(group.address)
            involved.append(group)
    return tuple(involved)


__all__ = [
    "LEFT",
    "RIGHT",
    "DuplicateGroup",
    "find_duplicates",
    "duplicates_in_value_diffs",
]
