# =============================================================================
# ddrconf -- REGISTER-ARRAY COMPARISON ENGINE
# File:   ddrconf/engine/domain.py
# =============================================================================
#
# SCOPE
# -----
# Frozen domain types shared by every engine stage: the register Entry, the
# width policy record, and the explicit option record for one comparison.
#
# No comparison logic lives here.
#
# WIDTH POLICY
# ------------
# Controller tables carry 32-bit addresses and 32-bit values. PHY tables
# carry 32-bit stored addresses displayed as 20-bit, and 16-bit values.
# The width class selects display formatting and the packed byte layout
# used for size and CRC accounting. It never influences comparison logic.
#
# VALIDATION
# ----------
# Entry validates in this order and raises RegisterValidationError:
#   1  address and value are int (bool rejected).
#   2  address and value are >= 0.
#   3  address and value fit the width class storage.
# There is no silent masking or truncation of out-of-range values.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple

from .exceptions import RegisterValidationError


# =============================================================================
# SECTION 1 -- DEFAULTS
# =============================================================================

DEFAULT_WINDOW:      int = 50    # Block Aligner lookahead window
DEFAULT_MAX_DEPTH:   int = 1     # nested common-subset comparisons allowed
BLOCK_DISPLAY_CAP:   int = 10    # entries shown per relocated block
IDENTICAL_RUN_MIN:   int = 10    # matched runs shown only when longer


# =============================================================================
# SECTION 2 -- WIDTH CLASS AND POLICY
# =============================================================================

class WidthClass(str, Enum):
    """
    Register table width class.

    CONTROLLER -- DDR controller tables, 32-bit address / 32-bit value.
    PHY        -- DDR PHY tables, 20-bit address / 16-bit value.
    """
    CONTROLLER = "CONTROLLER"
    PHY        = "PHY"


@dataclass(frozen=True)
class WidthPolicy:
    """
    Capability record for one width class.

    Fields:
      width_class   -- the class this policy describes.
      addr_digits   -- hex digits used to display an address.
      value_digits  -- hex digits used to display a value.
      max_address   -- largest storable address.
      max_value     -- largest storable value.
      struct_format -- packed little-endian layout of one entry.
      entry_bytes   -- size of one packed entry.
      column_width  -- width of one side-by-side report column.
    """
    width_class:   WidthClass
    addr_digits:   int
    value_digits:  int
    max_address:   int
    max_value:     int
    struct_format: str
    entry_bytes:   int
    column_width:  int

    def format_address(self, address: int) -> str:
        return "0x{:0{}x}".format(address, self.addr_digits)

    def format_value(self, value: int) -> str:
        return "0x{:0{}x}".format(value, self.value_digits)


CONTROLLER_POLICY = WidthPolicy(
    width_class=WidthClass.CONTROLLER,
    addr_digits=8,
    value_digits=8,
    max_address=0xFFFFFFFF,
    max_value=0xFFFFFFFF,
    struct_format="<II",
    entry_bytes=8,
    column_width=40,
)

PHY_POLICY = WidthPolicy(
    width_class=WidthClass.PHY,
    addr_digits=5,
    value_digits=4,
    max_address=0xFFFFFFFF,
    max_value=0xFFFF,
    struct_format="<IH",
    entry_bytes=6,
    column_width=37,
)

_POLICIES = {
    WidthClass.CONTROLLER: CONTROLLER_POLICY,
    WidthClass.PHY:        PHY_POLICY,
}


def width_policy(width_class: WidthClass) -> WidthPolicy:
    """Return the WidthPolicy for width_class."""
    return _POLICIES[WidthClass(width_class)]


# =============================================================================
# SECTION 3 -- ENTRY
# =============================================================================

def _check_register_int(field_name: str, value: int, maximum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise RegisterValidationError(
            field_name=field_name,
            value=value,
            constraint="must be an int",
        )
    if value < 0:
        raise RegisterValidationError(
            field_name=field_name,
            value=value,
            constraint="must be >= 0",
        )
    if value > maximum:
        raise RegisterValidationError(
            field_name=field_name,
            value=value,
            constraint="must be <= 0x{:x}".format(maximum),
        )


@dataclass(frozen=True)
class Entry:
    """
    One register configuration pair.

    Fields:
      address     -- register address.
      value       -- value written to the register.
      width_class -- display/storage class; ignored by comparison logic.
    """
    address:     int
    value:       int
    width_class: WidthClass = WidthClass.CONTROLLER

    def __post_init__(self) -> None:
        policy = width_policy(self.width_class)
        _check_register_int("address", self.address, policy.max_address)
        _check_register_int("value", self.value, policy.max_value)

    @property
    def policy(self) -> WidthPolicy:
        return width_policy(self.width_class)


# An ordered register table. Duplicate addresses are legal.
Sequence = Tuple[Entry, ...]


def make_sequence(
    pairs:       Iterable[Tuple[int, int]],
    width_class: WidthClass = WidthClass.CONTROLLER,
) -> Sequence:
    """Build a Sequence from (address, value) pairs."""
    return tuple(Entry(address, value, width_class) for address, value in pairs)


def sequence_policy(*sequences: Sequence) -> WidthPolicy:
    """
    Width policy of the first non-empty sequence, CONTROLLER if all are empty.
    """
    for seq in sequences:
        if seq:
            return seq[0].policy
    return CONTROLLER_POLICY


# =============================================================================
# SECTION 4 -- OPTIONS
# =============================================================================

@dataclass(frozen=True)
class CompareOptions:
    """
    Explicit configuration for one compare() call.

    Fields:
      window    -- Block Aligner lookahead window, >= 1.
      max_depth -- number of nested common-subset comparisons permitted
                   below the top-level call, >= 0.
    """
    window:    int = DEFAULT_WINDOW
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if isinstance(self.window, bool) or not isinstance(self.window, int) or self.window < 1:
            raise RegisterValidationError(
                field_name="window",
                value=self.window,
                constraint="must be an int >= 1",
            )
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 0:
            raise RegisterValidationError(
                field_name="max_depth",
                value=self.max_depth,
                constraint="must be an int >= 0",
            )


__all__ = [
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
]
