# =============================================================================
# ddrconf -- REGISTER-ARRAY COMPARISON ENGINE
# File:   ddrconf/engine/value_diff.py
# =============================================================================
#
# SCOPE
# -----
# Value Differ: per-address value deltas between two sequences whose
# address sets are already verified equal.
#
# PAIRING POLICY
# --------------
# positional=True   left[i] is paired with right[i]. Used when the order
#                   classifier reports the same order.
# positional=False  left[i] is paired with the FIRST right entry carrying
#                   the same address. Later right duplicates are never
#                   visited, so a difference held only by a later right
#                   occurrence is not reported. The report flags every
#                   duplicate address involved in a delta instead.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .domain import Sequence


@dataclass(frozen=True)
class ValueDelta:
    """
    One register whose value differs between the two sides.

    Fields:
      address     -- register address.
      left_value  -- value on the LEFT side.
      right_value -- value on the RIGHT side.
      left_index  -- position of the entry in LEFT.
      right_index -- position of the paired entry in RIGHT.
    """
    address:     int
    left_value:  int
    right_value: int
    left_index:  int
    right_index: int


def _first_positions(seq: Sequence) -> Dict[int, int]:
    first: Dict[int, int] = {}
    for index, entry in enumerate(seq):
        first.setdefault(entry.address, index)
    return first


def diff_values(
    left:       Sequence,
    right:      Sequence,
    positional: bool = True,
) -> Tuple[ValueDelta, ...]:
    """
    Return the deltas between left and right, in left order.

    Only entries whose values differ are returned. The length of the
    result is the authoritative value-difference count.
    """
    deltas: List[ValueDelta] = []

    if positional:
        for index, (l_entry, r_entry) in enumerate(zip(left, right)):
            if l_entry.value != r_entry.value:
                deltas.append(ValueDelta(
                    address=l_entry.address,
                    left_value=l_entry.value,
                    right_value=r_entry.value,
                    left_index=index,
                    right_index=index,
                ))
        return tuple(deltas)

    first_in_right = _first_positions(right)
    for index, l_entry in enumerate(left):
        r_index = first_in_right.get(l_entry.address)
        if r_index is None:
            continue
        r_value = right[r_index].value
        if l_entry.value != r_value:
            deltas.append(ValueDelta(
                address=l_entry.address,
                left_value=l_entry.value,
                right_value=r_value,
                left_index=index,
                right_index=r_index,
            ))
    return tuple(deltas)


__all__ = [
    "ValueDelta",
    "diff_values",
]
