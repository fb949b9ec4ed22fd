# ddrconf/report/data_models.py
# Report data classes produced by TableChecker and consumed by
# ReportRenderer and the --summary-json writer.
# All records are frozen. No rendering or I/O happens here.

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from ddrconf.engine.comparator import ComparisonOutcome, OutcomeKind
from ddrconf.engine.domain import WidthClass, WidthPolicy, width_policy
from ddrconf.engine.duplicates import DuplicateGroup


def _nested_chain(outcome: ComparisonOutcome) -> Iterator[ComparisonOutcome]:
    current: Optional[ComparisonOutcome] = outcome
    while current is not None:
        yield current
        current = current.nested


@dataclass(frozen=True)
class TableComparison:
    """
    Comparison of one named register table.

    Fields:
      name        -- qualified table name, e.g. "fsp_msg[1].fsp_phy_cfg".
      width_class -- WidthClass of both sides.
      outcome     -- engine ComparisonOutcome.
      left_crc    -- table CRC of LEFT.
      right_crc   -- table CRC of RIGHT.
      left_bytes  -- packed size of LEFT.
      right_bytes -- packed size of RIGHT.
    """
    name:        str
    width_class: WidthClass
    outcome:     ComparisonOutcome
    left_crc:    int
    right_crc:   int
    left_bytes:  int
    right_bytes: int

    @property
    def policy(self) -> WidthPolicy:
        return width_policy(self.width_class)

    @property
    def interference(self) -> Tuple[DuplicateGroup, ...]:
        return self.outcome.interference

    @property
    def value_differences(self) -> int:
        """Value deltas of this table, including those of nested common subsets."""
        return sum(o.value_diff_count for o in _nested_chain(self.outcome))

    @property
    def duplicate_count(self) -> int:
        return len(self.outcome.left_duplicates) + len(self.outcome.right_duplicates)


@dataclass(frozen=True)
class ScalarDelta:
    """
    Differing scalar field of one setpoint group (bypass, drate, fw_type).
    """
    field_name:  str
    left_value:  int
    right_value: int


@dataclass(frozen=True)
class GroupReport:
    """
    One frequency-setpoint group of a grouped section.

    Fields:
      index         -- setpoint index.
      scalar_deltas -- ScalarDelta records, empty when all scalars agree.
      tables        -- TableComparison per table of the group.
    """
    index:         int
    scalar_deltas: Tuple[ScalarDelta, ...]
    tables:        Tuple[TableComparison, ...]


@dataclass(frozen=True)
class SectionReport:
    """
    One of the six top-level sections.

    Fields:
      name        -- section name, e.g. "fsp_cfg".
      grouped     -- True for fsp_cfg / fsp_msg.
      tables      -- TableComparison list of an ungrouped section.
      groups      -- GroupReport list of a grouped section.
      left_count  -- LEFT group count (grouped sections only).
      right_count -- RIGHT group count (grouped sections only).
      aborted     -- CARDINALITY_MISMATCH detail when the section was aborted.
      error       -- detail of a contained ComparisonError.
    """
    name:        str
    grouped:     bool = False
    tables:      Tuple[TableComparison, ...] = ()
    groups:      Tuple[GroupReport, ...] = ()
    left_count:  int = 0
    right_count: int = 0
    aborted:     str = ""
    error:       str = ""

    def all_tables(self) -> Iterator[TableComparison]:
        yield from self.tables
        for group in self.groups:
            yield from group.tables

    @property
    def structural_mismatches(self) -> int:
        return sum(1 for t in self.all_tables() if t.outcome.is_structural_mismatch)

    @property
    def value_differences(self) -> int:
        return sum(t.value_differences for t in self.all_tables())

    @property
    def scalar_differences(self) -> int:
        return sum(len(g.scalar_deltas) for g in self.groups)

    @property
    def internal_errors(self) -> int:
        count = sum(1 for t in self.all_tables() if t.outcome.has_internal_error)
        return count + (1 if self.error else 0)


@dataclass(frozen=True)
class RunReport:
    """
    Result of one TableChecker.check() call.

    Fields:
      left_name         -- LEFT label.
      right_name        -- RIGHT label.
      sections          -- six SectionReports in declaration order.
      left_total_bytes  -- packed size of every LEFT table.
      right_total_bytes -- packed size of every RIGHT table.
    """
    left_name:         str
    right_name:        str
    sections:          Tuple[SectionReport, ...]
    left_total_bytes:  int
    right_total_bytes: int

    @property
    def structural_mismatches(self) -> int:
        return sum(s.structural_mismatches for s in self.sections)

    @property
    def value_differences(self) -> int:
        return sum(s.value_differences for s in self.sections)

    @property
    def scalar_differences(self) -> int:
        return sum(s.scalar_differences for s in self.sections)

    @property
    def aborted_sections(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self.sections if s.aborted)

    @property
    def internal_errors(self) -> int:
        return sum(s.internal_errors for s in self.sections)

    @property
    def is_identical(self) -> bool:
        return (
            self.structural_mismatches == 0
            and self.value_differences == 0
            and self.scalar_differences == 0
            and not self.aborted_sections
            and self.internal_errors == 0
            and all(
                t.outcome.kind is OutcomeKind.MATCH_SAME_ORDER
                for s in self.sections for t in s.all_tables()
            )
        )

    def to_dict(self) -> dict:
        """Machine-readable summary written by --summary-json."""
        return {
            "left":                  self.left_name,
            "right":                 self.right_name,
            "identical":             self.is_identical,
            "structural_mismatches": self.structural_mismatches,
            "value_differences":     self.value_differences,
            "scalar_differences":    self.scalar_differences,
            "aborted_sections":      list(self.aborted_sections),
            "internal_errors":       self.internal_errors,
            "left_total_bytes":      self.left_total_bytes,
            "right_total_bytes":     self.right_total_bytes,
            "tables": [
                {
                    "name":              t.name,
                    "outcome":           t.outcome.kind.value,
                    "value_differences": t.value_differences,
                    "duplicates":        t.duplicate_count,
                    "left_crc":          "0x{:08x}".format(t.left_crc),
                    "right_crc":         "0x{:08x}".format(t.right_crc),
                }
                for s in self.sections for t in s.all_tables()
            ],
        }
