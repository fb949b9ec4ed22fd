# ddrconf/report/table_checker.py
# TableChecker -- runs the engine over every table of two TimingConfigs.
#
# Sections, always attempted in declaration order:
#   ddrc_cfg, fsp_cfg, ddrphy_cfg, fsp_msg, ddrphy_trained_csr, ddrphy_pie
#
# Grouped sections (fsp_cfg, fsp_msg) check the setpoint count first. A count
# mismatch aborts that section only (CARDINALITY_MISMATCH); the remaining
# sections still run. A ComparisonError raised inside one section is
# contained in that section's report.
#
# Scalars (bypass, drate, fw_type) are compared by inequality only.

from typing import Callable, List, Optional, Tuple

from ddrconf.engine.checksum import table_bytes, table_crc
from ddrconf.engine.comparator import compare
from ddrconf.engine.domain import CompareOptions, Sequence, WidthClass, width_policy
from ddrconf.engine.exceptions import CardinalityMismatchError, ComparisonError
from ddrconf.report.data_models import (
    GroupReport,
    RunReport,
    ScalarDelta,
    SectionReport,
    TableComparison,
)
from ddrconf.tables.timing import FspCfg, FspMsg, TimingConfig


SECTION_NAMES: Tuple[str, ...] = (
    "ddrc_cfg",
    "fsp_cfg",
    "ddrphy_cfg",
    "fsp_msg",
    "ddrphy_trained_csr",
    "ddrphy_pie",
)


def _scalar_deltas(pairs: List[Tuple[str, int, int]]) -> Tuple[ScalarDelta, ...]:
    return tuple(
        ScalarDelta(field_name=name, left_value=int(left), right_value=int(right))
        for name, left, right in pairs
        if left != right
    )


class TableChecker:
    """Compares two TimingConfigs section by section into a RunReport."""

    def __init__(self, options: Optional[CompareOptions] = None):
        self._options = options if options is not None else CompareOptions()

    # -----------------------------------------------------------------------
    # Single table
    # -----------------------------------------------------------------------

    def compare_table(
        self,
        name:        str,
        width_class: WidthClass,
        left:        Sequence,
        right:       Sequence,
    ) -> TableComparison:
        policy = width_policy(width_class)
        return TableComparison(
            name=name,
            width_class=width_class,
            outcome=compare(left, right, self._options),
            left_crc=table_crc(left, policy),
            right_crc=table_crc(right, policy),
            left_bytes=table_bytes(left, policy),
            right_bytes=table_bytes(right, policy),
        )

    # -----------------------------------------------------------------------
    # Sections
    # -----------------------------------------------------------------------

    def _plain_section(
        self,
        name:        str,
        width_class: WidthClass,
        left:        Sequence,
        right:       Sequence,
    ) -> SectionReport:
        return SectionReport(
            name=name,
            tables=(self.compare_table(name, width_class, left, right),),
        )

    def _fsp_cfg_section(self, left: TimingConfig, right: TimingConfig) -> SectionReport:
        groups = []
        for i, (lfsp, rfsp) in enumerate(zip(left.fsp_cfg, right.fsp_cfg)):
            groups.append(self._fsp_cfg_group(i, lfsp, rfsp))
        return SectionReport(
            name="fsp_cfg",
            grouped=True,
            groups=tuple(groups),
            left_count=len(left.fsp_cfg),
            right_count=len(right.fsp_cfg),
        )

    def _fsp_cfg_group(self, index: int, left: FspCfg, right: FspCfg) -> GroupReport:
        table = self.compare_table(
            f"fsp_cfg[{index}].ddrc_cfg", WidthClass.CONTROLLER, left.ddrc_cfg, right.ddrc_cfg,
        )
        return GroupReport(
            index=index,
            scalar_deltas=_scalar_deltas([("bypass", left.bypass, right.bypass)]),
            tables=(table,),
        )

    def _fsp_msg_section(self, left: TimingConfig, right: TimingConfig) -> SectionReport:
        groups = []
        for i, (lmsg, rmsg) in enumerate(zip(left.fsp_msg, right.fsp_msg)):
            groups.append(self._fsp_msg_group(i, lmsg, rmsg))
        return SectionReport(
            name="fsp_msg",
            grouped=True,
            groups=tuple(groups),
            left_count=len(left.fsp_msg),
            right_count=len(right.fsp_msg),
        )

    def _fsp_msg_group(self, index: int, left: FspMsg, right: FspMsg) -> GroupReport:
        tables = tuple(
            self.compare_table(f"fsp_msg[{index}].{name}", WidthClass.PHY, ltable, rtable)
            for (name, ltable), (_, rtable) in zip(left.tables(), right.tables())
        )
        return GroupReport(
            index=index,
            scalar_deltas=_scalar_deltas([
                ("drate",   left.drate,   right.drate),
                ("fw_type", left.fw_type, right.fw_type),
            ]),
            tables=tables,
        )

    def _guarded(
        self,
        name:        str,
        build:       Callable[[], SectionReport],
        left_count:  Optional[int] = None,
        right_count: Optional[int] = None,
    ) -> SectionReport:
        """
        Run one section builder, containing its failures to that section.
        """
        grouped = left_count is not None
        try:
            if grouped and left_count != right_count:
                raise CardinalityMismatchError(name, left_count, right_count)
            return build()
        except CardinalityMismatchError as exc:
            return SectionReport(
                name=name,
                grouped=True,
                left_count=exc.left_count,
                right_count=exc.right_count,
                aborted=f"CARDINALITY_MISMATCH: {exc.message}",
            )
        except ComparisonError as exc:
            return SectionReport(
                name=name,
                grouped=grouped,
                left_count=left_count or 0,
                right_count=right_count or 0,
                error=exc.message,
            )

    # -----------------------------------------------------------------------
    # Run
    # -----------------------------------------------------------------------

    def check(self, left: TimingConfig, right: TimingConfig) -> RunReport:
        """
        Compare every section of left against right.

        Never raises for differences. Every section is attempted.
        """
        sections = (
            self._guarded("ddrc_cfg", lambda: self._plain_section(
                "ddrc_cfg", WidthClass.CONTROLLER, left.ddrc_cfg, right.ddrc_cfg)),
            self._guarded("fsp_cfg", lambda: self._fsp_cfg_section(left, right),
                          len(left.fsp_cfg), len(right.fsp_cfg)),
            self._guarded("ddrphy_cfg", lambda: self._plain_section(
                "ddrphy_cfg", WidthClass.PHY, left.ddrphy_cfg, right.ddrphy_cfg)),
            self._guarded("fsp_msg", lambda: self._fsp_msg_section(left, right),
                          len(left.fsp_msg), len(right.fsp_msg)),
            self._guarded("ddrphy_trained_csr", lambda: self._plain_section(
                "ddrphy_trained_csr", WidthClass.PHY,
                left.ddrphy_trained_csr, right.ddrphy_trained_csr)),
            self._guarded("ddrphy_pie", lambda: self._plain_section(
                "ddrphy_pie", WidthClass.PHY, left.ddrphy_pie, right.ddrphy_pie)),
        )

        return RunReport(
            left_name=left.name,
            right_name=right.name,
            sections=sections,
            left_total_bytes=left.total_bytes(),
            right_total_bytes=right.total_bytes(),
        )
