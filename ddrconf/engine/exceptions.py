# =============================================================================
# ddrconf -- REGISTER-ARRAY COMPARISON ENGINE
# File:   ddrconf/engine/exceptions.py
# =============================================================================
#
# SCOPE
# -----
# Exception hierarchy for the comparison engine and the section checker.
# All exceptions are pure value objects: no side effects, no I/O.
#
# EXCEPTION HIERARCHY
# -------------------
#   ComparisonError(Exception)                    -- base; never raised directly
#     RegisterValidationError(ComparisonError)    -- malformed entry or option
#     InternalConsistencyError(ComparisonError)   -- common subsets disagree
#     CardinalityMismatchError(ComparisonError)   -- FSP group counts differ
#
# Structural mismatch, reordering, value drift and duplicate registers are
# findings, not errors. None of them raise.
#
# MESSAGE CONTRACT
# ----------------
# Every message is deterministic, ASCII-only, non-empty and names the
# offending field or table.
# =============================================================================

from __future__ import annotations

from typing import Any


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class ComparisonError(Exception):
    """
    Base class for all engine exceptions.

    Attributes:
        message:    Human-readable description. Always non-empty.
        field_name: Name of the offending field or table, or "".
        value:      Offending value, or None for relational violations.
    """

    def __init__(
        self,
        message:    str,
        field_name: str = "",
        value:      Any = None,
    ) -> None:
        if not isinstance(message, str) or not message:
            raise ValueError(
                "ComparisonError: message must be a non-empty string"
            )
        if not isinstance(field_name, str):
            raise ValueError(
                "ComparisonError: field_name must be a string"
            )
        super().__init__(message)
        self.message:    str = message
        self.field_name: str = field_name
        self.value:      Any = value

    def __repr__(self) -> str:
        return (
            self.__class__.__name__
            + "(field_name=" + repr(self.field_name)
            + ", value=" + repr(self.value)
            + ", message=" + repr(self.message)
            + ")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComparisonError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.field_name == other.field_name
            and self.value == other.value
            and self.message == other.message
        )

    __hash__ = Exception.__hash__


# =============================================================================
# CONCRETE EXCEPTIONS
# =============================================================================

class RegisterValidationError(ComparisonError):
    """
    Raised when an Entry field or an option violates a type or range
    constraint.

    Message format:
        "RegisterValidationError: field '<field_name>' violates constraint
         '<constraint>': got <value>."
    """

    def __init__(self, field_name: str, value: Any, constraint: str) -> None:
        if not field_name:
            raise ValueError(
                "RegisterValidationError: field_name must be a non-empty string"
            )
        if not isinstance(constraint, str) or not constraint:
            raise ValueError(
                "RegisterValidationError: constraint must be a non-empty string"
            )
        message = (
            "RegisterValidationError: field '"
            + field_name
            + "' violates constraint '"
            + constraint
            + "': got "
            + repr(value)
            + "."
        )
        super().__init__(message=message, field_name=field_name, value=value)
        self.constraint: str = constraint


class InternalConsistencyError(ComparisonError):
    """
    Raised by the Set Analyzer when the two extracted common subsets have
    different lengths. This happens only when an address is duplicated a
    different number of times on the two sides.
    """

    def __init__(self, common_left: int, common_right: int) -> None:
        message = (
            "InternalConsistencyError: common register counts don't match ("
            + str(common_left)
            + " vs "
            + str(common_right)
            + ")"
        )
        super().__init__(
            message=message,
            field_name="common_registers",
            value=(common_left, common_right),
        )
        self.common_left:  int = common_left
        self.common_right: int = common_right


class CardinalityMismatchError(ComparisonError):
    """
    Raised when the two sides declare a different number of per-frequency-
    setpoint groups for one section. Aborts that section only.
    """

    def __init__(self, section: str, left_count: int, right_count: int) -> None:
        if not section:
            raise ValueError(
                "CardinalityMismatchError: section must be a non-empty string"
            )
        message = (
            "CardinalityMismatchError: section '"
            + section
            + "' entry counts do not match: Left="
            + str(left_count)
            + ", Right="
            + str(right_count)
            + "."
        )
        super().__init__(
            message=message,
            field_name=section,
            value=(left_count, right_count),
        )
        self.left_count:  int = left_count
        self.right_count: int = right_count


__all__ = [
    "ComparisonError",
    "RegisterValidationError",
    "InternalConsistencyError",
    "CardinalityMismatchError",
]
