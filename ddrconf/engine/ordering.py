# =============================================================================
# ddrconf -- REGISTER-ARRAY COMPARISON ENGINE
# File:   ddrconf/engine/ordering.py
# =============================================================================
#
# SCOPE
# -----
# Order Classifier and Block Aligner.
#
# same_order() reports whether two equal-length sequences carry the same
# address at every position.
#
# align() partitions the region where the order differs into relocated
# blocks using a bounded lookahead window. It is a heuristic, not an
# optimal LCS: running time is O(n * window). Register tables relocate
# short contiguous runs, which the window captures.
#
# ALGORITHM
# ---------
# Two cursors i (LEFT) and j (RIGHT):
#   1  While left[i].address == right[j].address advance both. The run is
#      recorded as a MatchedRun, never as a Block.
#   2  On mismatch, advance i until left[i].address occurs in
#      right[j : j + window]; then advance j until right[j].address occurs
#      in left[i : i + window]. The swept spans form one Block.
#   3  If neither cursor moved (crossing entries such as [A, B] vs [B, A])
#      advance both in lock-step until the addresses swept on each side
#      balance. The balanced spans form one Block.
#   4  When one cursor reaches its end, the other side's tail becomes a
#      final one-sided Block.
#
# Every iteration advances at least one cursor, so the walk terminates.
#
# WINDOW EFFECT
# -------------
# A run relocated farther than `window` positions is not recognised as a
# pair: it is reported as a one-sided block on each side instead of one
# two-sided block.
# =============================================================================

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Tuple

from .domain import DEFAULT_WINDOW, Sequence


@dataclass(frozen=True)
class Block:
    """
    A contiguous run of entries at a displaced position.

    Ranges are half-open (start, stop) index pairs. One side may be empty
    (start == stop) when the block has no counterpart span.
    """
    left_range:  Tuple[int, int]
    right_range: Tuple[int, int]

    @property
    def left_count(self) -> int:
        return self.left_range[1] - self.left_range[0]

    @property
    def right_count(self) -> int:
        return self.right_range[1] - self.right_range[0]

    @property
    def is_one_sided(self) -> bool:
        return self.left_count == 0 or self.right_count == 0


@dataclass(frozen=True)
class MatchedRun:
    """A run of positions where both sides carry the same addresses."""
    left_range:  Tuple[int, int]
    right_range: Tuple[int, int]

    @property
    def length(self) -> int:
        return self.left_range[1] - self.left_range[0]


@dataclass(frozen=True)
class Alignment:
    """Blocks and matched runs found by align_sequences()."""
    blocks:       Tuple[Block, ...]
    matched_runs: Tuple[MatchedRun, ...]


def same_order(left: Sequence, right: Sequence) -> bool:
    """
    True iff left and right have equal length and the same address at
    every position.
    """
    if len(left) != len(right):
        return False
    return all(l.address == r.address for l, r in zip(left, right))


def _in_window(address: int, seq: Sequence, start: int, window: int) -> bool:
    stop = min(start + window, len(seq))
    for k in range(start, stop):
        if seq[k].address == address:
            return True
    return False


def _balance(left: Sequence, right: Sequence, i: int, j: int) -> Tuple[int, int]:
    """
    Advance both cursors in lock-step until the swept address multisets
    are equal or either side is exhausted.
    """
    pending: Counter = Counter()
    while i < len(left) and j < len(right):
        pending[left[i].address] += 1
        pending[right[j].address] -= 1
        i += 1
        j += 1
        if not any(pending.values()):
            break
    return i, j


def align_sequences(
    left:   Sequence,
    right:  Sequence,
    window: int = DEFAULT_WINDOW,
) -> Alignment:
    """Walk both sequences and return every Block and MatchedRun."""
    if window < 1:
        raise ValueError("window must be >= 1")

    n, m = len(left), len(right)
    i = j = 0
    blocks: List[Block] = []
    runs:   List[MatchedRun] = []

    while i < n and j < m:
        if left[i].address == right[j].address:
            start_i, start_j = i, j
            while i < n and j < m and left[i].address == right[j].address:
                i += 1
                j += 1
            runs.append(MatchedRun((start_i, i), (start_j, j)))
            continue

        block_i, block_j = i, j

        while i < n and not _in_window(left[i].address, right, j, window):
            i += 1
        while j < m and not _in_window(right[j].address, left, i, window):
            j += 1

        if i == block_i and j == block_j:
            i, j = _balance(left, right, i, j)

        blocks.append(Block((block_i, i), (block_j, j)))

    if i < n:
        blocks.append(Block((i, n), (m, m)))
    if j < m:
        blocks.append(Block((n, n), (j, m)))

    return Alignment(blocks=tuple(blocks), matched_runs=tuple(runs))


def align(
    left:   Sequence,
    right:  Sequence,
    window: int = DEFAULT_WINDOW,
) -> Tuple[Block, ...]:
    """
    Return the relocated blocks between left and right.

    Precondition: same address set, same_order(left, right) is False.
    """
    return align_sequences(left, right, window).blocks


__all__ = [
    "Block",
    "MatchedRun",
    "Alignment",
    "same_order",
    "align_sequences",
    "align",
]
