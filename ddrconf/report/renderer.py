# ddrconf/report/renderer.py
# ReportRenderer -- turns a finished RunReport into the hierarchical text
# report. Rendering only: every finding is already computed by TableChecker.
#
# Message prefixes:
#   E: red     -- errors (set mismatch, aborted section, internal error)
#   W: yellow  -- warnings (structural differences, reordering)
#   I: yellow  -- information (counts, headers)
#   green      -- success lines, no prefix
# Colors are emitted through colorama and disabled by RenderOptions.color.

import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from colorama import Fore, Style

from ddrconf.engine.checksum import table_crc
from ddrconf.engine.comparator import ComparisonOutcome, OutcomeKind
from ddrconf.engine.domain import (
    BLOCK_DISPLAY_CAP,
    IDENTICAL_RUN_MIN,
    Sequence,
    WidthPolicy,
)
from ddrconf.engine.duplicates import LEFT, DuplicateGroup
from ddrconf.engine.exceptions import RegisterValidationError
from ddrconf.engine.ordering import Block, MatchedRun
from ddrconf.report.data_models import (
    GroupReport,
    RunReport,
    SectionReport,
    TableComparison,
)


RULE_WIDTH:             int = 75
BOX_WIDTH:              int = 73
GROUP_BOX_WIDTH:        int = 66
REORDER_COLUMN_WIDTH:   int = 35
DUPLICATE_COLUMN_WIDTH: int = 37


@dataclass(frozen=True)
class RenderOptions:
    """
    Explicit renderer configuration.

    Fields:
      list_duplicates       -- expand duplicate groups instead of a count.
      color                 -- emit ANSI colors through colorama.
      show_identical_ranges -- show matched runs longer than IDENTICAL_RUN_MIN
                               inside reordered tables.
      block_display_cap     -- entries shown per relocated block.
    """
    list_duplicates:       bool = False
    color:                 bool = True
    show_identical_ranges: bool = False
    block_display_cap:     int  = BLOCK_DISPLAY_CAP

    def __post_init__(self) -> None:
        if isinstance(self.block_display_cap, bool) or not isinstance(self.block_display_cap, int):
            raise RegisterValidationError(
                field_name="block_display_cap",
                value=self.block_display_cap,
                constraint="must be an int",
            )
        if self.block_display_cap < 1:
            raise RegisterValidationError(
                field_name="block_display_cap",
                value=self.block_display_cap,
                constraint="must be >= 1",
            )


def _kb(size: int) -> str:
    return "{:.2f}".format(size / 1024.0)


def _entry(policy: WidthPolicy, index: int, seq: Sequence, digits: int = 3) -> str:
    entry = seq[index]
    return "[{:{}d}] Reg {} = {}".format(
        index, digits, policy.format_address(entry.address), policy.format_value(entry.value),
    )


class ReportRenderer:
    """Writes a RunReport to a text stream."""

    def __init__(self, options: Optional[RenderOptions] = None, stream: Optional[TextIO] = None):
        self._options = options if options is not None else RenderOptions()
        self._stream = stream if stream is not None else sys.stdout

    # -----------------------------------------------------------------------
    # Primitives
    # -----------------------------------------------------------------------

    def _write(self, text: str = "") -> None:
        self._stream.write(text + "\n")

    def _paint(self, color: str, text: str) -> str:
        if not self._options.color:
            return text
        return color + Style.BRIGHT + text + Style.RESET_ALL

    def error(self, indent: str, text: str) -> None:
        self._write(indent + self._paint(Fore.RED, "E: " + text))

    def warning(self, indent: str, text: str) -> None:
        self._write(indent + self._paint(Fore.YELLOW, "W: " + text))

    def info(self, indent: str, text: str) -> None:
        self._write(indent + self._paint(Fore.YELLOW, "I: " + text))

    def success(self, indent: str, text: str) -> None:
        self._write(indent + self._paint(Fore.GREEN, text))

    def _side_by_side(self, indent: str, left: str, right: str, width: int) -> None:
        self._write("{}  {:<{}}  {}".format(indent, left, width, right).rstrip())

    def _columns_header(self, indent: str, width: int) -> None:
        self._side_by_side(indent, "LEFT", "RIGHT", width)
        self._write("{}  {}  {}".format(indent, "─" * width, "─" * width))

    def _box(self, title: str) -> None:
        self._write("┌" + "─" * BOX_WIDTH + "┐")
        self._write("│ " + title.ljust(BOX_WIDTH - 1) + "│")
        self._write("└" + "─" * BOX_WIDTH + "┘")

    def _group_box_open(self, indent: str, title: str, width: int) -> None:
        head = "┌─── " + title + " "
        self._write(indent + head + "─" * max(width - len(head) + 1, 1) + "┐")

    def _group_box_close(self, indent: str, width: int) -> None:
        self._write(indent + "└" + "─" * width + "┘")

    # -----------------------------------------------------------------------
    # One outcome
    # -----------------------------------------------------------------------

    def _table_header(
        self,
        indent:    str,
        policy:    WidthPolicy,
        left:      Sequence,
        right:     Sequence,
        left_crc:  int,
        right_crc: int,
    ) -> None:
        lbytes = len(left) * policy.entry_bytes
        rbytes = len(right) * policy.entry_bytes
        self._write(f"{indent}Entries: Left={len(left)}, Right={len(right)}")
        self._write(
            f"{indent}Size:    Left={lbytes} bytes ({_kb(lbytes)} kB), "
            f"Right={rbytes} bytes ({_kb(rbytes)} kB)"
        )
        self._write(f"{indent}CRC:     Left=0x{left_crc:08x}, Right=0x{right_crc:08x}")

    def _unique_registers(self, indent: str, policy: WidthPolicy, outcome: ComparisonOutcome) -> None:
        parts = outcome.partition
        if parts is None or parts.same_address_set:
            return
        width = policy.column_width
        self.info(indent, "Unique registers:")
        self._columns_header(indent, width)
        left_lines = [_entry(policy, i, outcome.left) for i in parts.left_only_indices]
        right_lines = [_entry(policy, i, outcome.right) for i in parts.right_only_indices]
        for k in range(max(len(left_lines), len(right_lines))):
            self._side_by_side(
                indent,
                left_lines[k] if k < len(left_lines) else "",
                right_lines[k] if k < len(right_lines) else "",
                width,
            )

    def _common_registers(self, indent: str, policy: WidthPolicy, outcome: ComparisonOutcome) -> None:
        self._write()
        self._write(indent + "┌─ Comparing common registers " + "─" * 30 + "┐")
        nested_indent = indent + "  "
        if outcome.internal_error:
            self.error(indent, "Internal error: " + outcome.internal_error)
        elif outcome.partition is None or not outcome.partition.has_common:
            self.info(indent, "No common registers found")
        elif outcome.nested_skipped:
            self.info(
                nested_indent,
                f"{len(outcome.partition.common_left)} common registers, "
                "nested comparison skipped at depth limit",
            )
        elif outcome.nested is not None:
            nested = outcome.nested
            self._table_header(
                nested_indent, policy, nested.left, nested.right,
                table_crc(nested.left, policy), table_crc(nested.right, policy),
            )
            self.render_outcome(nested_indent, policy, nested)
            self._summary(nested_indent, nested)
        self._write(indent + "└" + "─" * 58 + "┘")

    def _set_mismatch(self, indent: str, policy: WidthPolicy, outcome: ComparisonOutcome) -> None:
        parts = outcome.partition
        self.error(indent, "Arrays have same length but different register sets!")
        if parts is None:
            return
        if parts.left_only_indices:
            self.info(indent, "Registers in LEFT but not in RIGHT:")
            for i in parts.left_only_indices:
                self._write(indent + "    " + _entry(policy, i, outcome.left))
        if parts.right_only_indices:
            self.info(indent, "Registers in RIGHT but not in LEFT:")
            for i in parts.right_only_indices:
                self._write(indent + "    " + _entry(policy, i, outcome.right))

    def _value_diffs(self, indent: str, policy: WidthPolicy, outcome: ComparisonOutcome, digits: int) -> None:
        self.info(indent, "Register value differences:")
        for delta in outcome.value_diffs:
            self._write("{}    [{:{}d}] Reg {}: {} → {}".format(
                indent, delta.left_index, digits,
                policy.format_address(delta.address),
                policy.format_value(delta.left_value),
                policy.format_value(delta.right_value),
            ))

    def _block_lines(self, policy: WidthPolicy, seq: Sequence, span: tuple) -> List[str]:
        start, stop = span
        cap = self._options.block_display_cap
        lines = [_entry(policy, i, seq, 4) for i in range(start, min(stop, start + cap))]
        if stop - start > cap:
            lines.append("... ({} more)".format(stop - start - cap))
        return lines

    def _block(self, indent: str, policy: WidthPolicy, outcome: ComparisonOutcome, block: Block) -> None:
        left_lines = self._block_lines(policy, outcome.left, block.left_range)
        right_lines = self._block_lines(policy, outcome.right, block.right_range)
        for k in range(max(len(left_lines), len(right_lines))):
            self._side_by_side(
                indent,
                left_lines[k] if k < len(left_lines) else "",
                right_lines[k] if k < len(right_lines) else "",
                REORDER_COLUMN_WIDTH,
            )

    def _matched_run(self, indent: str, run: MatchedRun) -> None:
        (li, lj), (ri, rj) = run.left_range, run.right_range
        self._write(
            "{}  [{:4d}-{:4d}] ({} registers)           [{:4d}-{:4d}] ({} registers)".format(
                indent, li, lj - 1, lj - li, ri, rj - 1, rj - ri,
            )
        )

    def _reordered(self, indent: str, policy: WidthPolicy, outcome: ComparisonOutcome) -> None:
        self.warning(indent, "Registers match, different order")
        self.info(indent, "Reordered registers:")
        self._columns_header(indent, REORDER_COLUMN_WIDTH)

        items = [(b.left_range[0], 1, b) for b in outcome.blocks]
        if self._options.show_identical_ranges:
            items.extend(
                (r.left_range[0], 0, r)
                for r in outcome.matched_runs if r.length > IDENTICAL_RUN_MIN
            )
        for _, _, item in sorted(items, key=lambda t: (t[0], t[1])):
            if isinstance(item, MatchedRun):
                self._matched_run(indent, item)
            else:
                self._block(indent, policy, outcome, item)

        if outcome.value_diffs:
            self.info(indent, f"Value differences: {outcome.value_diff_count}")
            self._value_diffs(indent, policy, outcome, 4)

    def render_outcome(self, indent: str, policy: WidthPolicy, outcome: ComparisonOutcome) -> None:
        """Render the body of one outcome below its table header."""
        if outcome.kind is OutcomeKind.STRUCTURAL_MISMATCH:
            if outcome.left_count != outcome.right_count:
                self.warning(indent, "Structural differences found")
                self._unique_registers(indent, policy, outcome)
                self._common_registers(indent, policy, outcome)
            else:
                self._set_mismatch(indent, policy, outcome)
        elif outcome.kind is OutcomeKind.MATCH_SAME_ORDER:
            if outcome.value_diffs:
                self.info(indent, f"Registers match, {outcome.value_diff_count} value differences")
                self._value_diffs(indent, policy, outcome, 3)
        else:
            self._reordered(indent, policy, outcome)

    def _summary(self, indent: str, outcome: ComparisonOutcome) -> None:
        if outcome.kind is OutcomeKind.MATCH_SAME_ORDER and not outcome.value_diffs:
            self.success(indent, "Registers and values match")

    # -----------------------------------------------------------------------
    # Duplicates
    # -----------------------------------------------------------------------

    @staticmethod
    def _paired_value(outcome: ComparisonOutcome, group: DuplicateGroup, index: int) -> int:
        """
        Value on the other side that the occurrence at index is compared with:
        the same position for same-order tables, otherwise the first other-side
        entry with the same address.
        """
        other = outcome.right if group.side == LEFT else outcome.left
        if outcome.kind is OutcomeKind.MATCH_SAME_ORDER:
            return other[index].value
        return next(entry.value for entry in other if entry.address == group.address)

    def _interference(self, indent: str, policy: WidthPolicy, outcome: ComparisonOutcome) -> None:
        if not outcome.interference:
            return
        self.warning(indent, "Duplicate registers involved in value differences:")
        for address in [g.address for g in outcome.interference]:
            groups = [
                g for g in outcome.left_duplicates + outcome.right_duplicates
                if g.address == address
            ]
            for group in groups:
                own, other = ("Left", "Right") if group.side == LEFT else ("Right", "Left")
                positions = " ".join("[{}]".format(i) for i in group.indices)
                self._write("{}    Reg {}: duplicated {} times in {} at indices: {}".format(
                    indent, policy.format_address(address), group.count,
                    group.side, positions,
                ))
                for index, value in group.positions:
                    self._write("{}        [{}] {}={}, {}={}".format(
                        indent, index,
                        own, policy.format_value(value),
                        other, policy.format_value(self._paired_value(outcome, group, index)),
                    ))

    def _duplicate_cell(self, policy: WidthPolicy, group: DuplicateGroup) -> str:
        kind = "conflicting" if group.is_conflicting else "redundant"
        return "{} ({} times, {})".format(policy.format_address(group.address), group.count, kind)

    def _duplicates(self, indent: str, policy: WidthPolicy, outcome: ComparisonOutcome) -> None:
        left, right = outcome.left_duplicates, outcome.right_duplicates
        if not left and not right:
            return
        self._interference(indent, policy, outcome)
        if not self._options.list_duplicates:
            self.info(
                indent,
                f"Duplicate registers found: {len(left) + len(right)} "
                "(use --list-duplicates for details)",
            )
            return
        self.info(indent, "Duplicate registers:")
        self._columns_header(indent, DUPLICATE_COLUMN_WIDTH)
        for k in range(max(len(left), len(right))):
            self._side_by_side(
                indent,
                self._duplicate_cell(policy, left[k]) if k < len(left) else "",
                self._duplicate_cell(policy, right[k]) if k < len(right) else "",
                DUPLICATE_COLUMN_WIDTH,
            )

    # -----------------------------------------------------------------------
    # Tables and sections
    # -----------------------------------------------------------------------

    def render_table(self, indent: str, table: TableComparison) -> None:
        """Header, outcome body, summary line and duplicate report of one table."""
        outcome = table.outcome
        policy = table.policy
        self._table_header(
            indent, policy, outcome.left, outcome.right, table.left_crc, table.right_crc,
        )
        self.render_outcome(indent, policy, outcome)
        self._summary(indent, outcome)
        self._duplicates(indent, policy, outcome)

    def _section_error(self, section: SectionReport) -> None:
        if section.error:
            self.error("  ", "Internal error: " + section.error)

    def _fsp_cfg_group(self, group: GroupReport) -> None:
        self._write(f"\n  FSP {group.index}:")
        self._group_box_open("  ", "ddrc_cfg", GROUP_BOX_WIDTH)
        for table in group.tables:
            self.render_table("    ", table)
        for delta in group.scalar_deltas:
            self._write(f"    {delta.field_name}: {delta.left_value} → {delta.right_value}")
        self._group_box_close("  ", GROUP_BOX_WIDTH)

    def _fsp_msg_group(self, group: GroupReport) -> None:
        self._write(f"\n  FSP Message {group.index}:")
        for delta in group.scalar_deltas:
            self._write(f"    {delta.field_name}: {delta.left_value} → {delta.right_value}")
        for table in group.tables:
            self._write()
            self._group_box_open("    ", table.name.split(".", 1)[-1], GROUP_BOX_WIDTH - 4)
            self.render_table("      ", table)
            self._group_box_close("    ", GROUP_BOX_WIDTH - 4)

    def render_section(self, section: SectionReport) -> None:
        self._box("Checking " + section.name)
        if section.name == "fsp_cfg":
            self._write(f"  FSP Entries: Left={section.left_count}, Right={section.right_count}")
            if section.aborted:
                self.error("  ", "Number of FSP entries do not match!")
            for group in section.groups:
                self._fsp_cfg_group(group)
        elif section.name == "fsp_msg":
            self._write(
                f"  FSP Message Entries: Left={section.left_count}, Right={section.right_count}"
            )
            if section.aborted:
                self.error("  ", "Number of FSP message entries do not match!")
            for group in section.groups:
                self._fsp_msg_group(group)
            if section.structural_mismatches:
                self._write()
                self.warning("  ", "Structural errors found")
        else:
            for table in section.tables:
                self.render_table("  ", table)
        self._section_error(section)
        self._write()

    # -----------------------------------------------------------------------
    # Run
    # -----------------------------------------------------------------------

    def _banner(self, title: str) -> None:
        self._write("═" * RULE_WIDTH)
        self._write(title.center(RULE_WIDTH).rstrip())
        self._write("═" * RULE_WIDTH)

    def _totals(self, report: RunReport) -> None:
        self._box("Total Configuration Sizes")
        left, right = report.left_total_bytes, report.right_total_bytes
        self._write(f"  Left:  {left} bytes ({_kb(left)} kB)")
        self._write(f"  Right: {right} bytes ({_kb(right)} kB)")
        if left != right:
            diff = right - left
            self._write("  Difference: {:+d} bytes ({:+.2f} kB)".format(diff, diff / 1024.0))
        self._write()

    def render(self, report: RunReport) -> None:
        """Write the complete report: banner, six sections, totals, footer."""
        self._write()
        self._banner("DDR Configuration Comparison Tool")
        if report.left_name or report.right_name:
            self._write(f"  Left:  {report.left_name}")
            self._write(f"  Right: {report.right_name}")
        self._write()

        for section in report.sections:
            self.render_section(section)

        self._totals(report)

        self._write("═" * RULE_WIDTH)
        self.info(" " * 22, "COMPARISON COMPLETE")
        self._write("═" * RULE_WIDTH)
        self._write()
