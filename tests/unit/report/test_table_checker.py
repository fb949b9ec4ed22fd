# tests/unit/report/test_table_checker.py
# Target: ddrconf/report/table_checker.py, ddrconf/report/data_models.py

import json

import pytest

from ddrconf.engine import CompareOptions, OutcomeKind, WidthClass, make_sequence
from ddrconf.report import SECTION_NAMES, TableChecker


# =============================================================================
# SHARED HELPERS
# =============================================================================

def _section(report, name):
    return next(s for s in report.sections if s.name == name)


def _table(report, name):
    for section in report.sections:
        for table in section.all_tables():
            if table.name == name:
                return table
    raise KeyError(name)


class TestIdenticalRun:

    def test_every_section_present_in_order(self, small_config):
        report = TableChecker().check(small_config, small_config)
        assert tuple(s.name for s in report.sections) == SECTION_NAMES

    def test_identical_configs(self, small_config):
        report = TableChecker().check(small_config, small_config)
        assert report.is_identical
        assert report.structural_mismatches == 0
        assert report.value_differences == 0
        assert report.aborted_sections == ()
        assert report.left_total_bytes == report.right_total_bytes == small_config.total_bytes()

    def test_grouped_tables_are_named_by_setpoint(self, small_config):
        report = TableChecker().check(small_config, small_config)
        names = [t.name for t in _section(report, "fsp_msg").all_tables()]
        assert names == [
            "fsp_msg[0].fsp_phy_cfg",
            "fsp_msg[0].fsp_phy_msgh_cfg",
            "fsp_msg[0].fsp_phy_pie_cfg",
        ]


class TestFindings:

    def test_counts(self, small_config, changed_config):
        report = TableChecker().check(small_config, changed_config)
        assert not report.is_identical
        assert report.structural_mismatches == 1
        assert report.value_differences == 1
        assert report.scalar_differences == 2
        assert report.internal_errors == 0
        assert report.right_total_bytes - report.left_total_bytes == 6

    def test_outcome_per_table(self, small_config, changed_config):
        report = TableChecker().check(small_config, changed_config)
        assert _table(report, "ddrc_cfg").outcome.kind is OutcomeKind.MATCH_REORDERED
        assert _table(report, "ddrphy_cfg").outcome.kind is OutcomeKind.STRUCTURAL_MISMATCH
        assert _table(report, "ddrphy_pie").outcome.kind is OutcomeKind.MATCH_SAME_ORDER

    def test_scalar_deltas(self, small_config, changed_config):
        report = TableChecker().check(small_config, changed_config)
        bypass = _section(report, "fsp_cfg").groups[0].scalar_deltas
        drate = _section(report, "fsp_msg").groups[0].scalar_deltas
        assert [(d.field_name, d.left_value, d.right_value) for d in bypass] == [("bypass", 0, 1)]
        assert [(d.field_name, d.left_value, d.right_value) for d in drate] == [("drate", 3200, 3733)]

    def test_interference_on_duplicated_address(self, small_config, changed_config):
        table = _table(TableChecker().check(small_config, changed_config), "ddrphy_pie")
        assert [g.address for g in table.interference] == [0xd0000]
        assert table.duplicate_count == 2

    def test_crc_and_size_recorded(self, small_config, changed_config):
        table = _table(TableChecker().check(small_config, changed_config), "ddrphy_cfg")
        assert table.left_bytes == 12
        assert table.right_bytes == 18
        assert table.left_crc != table.right_crc

    def test_nested_value_differences_are_counted(self):
        table = TableChecker().compare_table(
            "ddrc_cfg", WidthClass.CONTROLLER,
            make_sequence([(1, 0), (2, 0), (3, 0)]),
            make_sequence([(1, 9), (2, 0)]),
        )
        assert table.outcome.value_diff_count == 0
        assert table.value_differences == 1

    def test_options_reach_the_engine(self):
        checker = TableChecker(CompareOptions(max_depth=0))
        table = checker.compare_table(
            "ddrc_cfg", WidthClass.CONTROLLER,
            make_sequence([(1, 0), (2, 0)]),
            make_sequence([(1, 0)]),
        )
        assert table.outcome.nested_skipped


class TestCardinality:

    def test_setpoint_count_mismatch_aborts_section_only(self, small_config, extra_setpoint_config):
        report = TableChecker().check(small_config, extra_setpoint_config)
        section = _section(report, "fsp_cfg")
        assert section.aborted.startswith("CARDINALITY_MISMATCH: ")
        assert "Left=1, Right=2" in section.aborted
        assert section.groups == ()
        assert report.aborted_sections == ("fsp_cfg",)
        assert len(report.sections) == len(SECTION_NAMES)
        assert _section(report, "ddrphy_pie").tables

    def test_aborted_run_is_not_identical(self, small_config, extra_setpoint_config):
        assert not TableChecker().check(small_config, extra_setpoint_config).is_identical


class TestSummaryDict:

    def test_to_dict_is_json_serialisable(self, small_config, changed_config):
        summary = TableChecker().check(small_config, changed_config).to_dict()
        decoded = json.loads(json.dumps(summary))
        assert decoded["left"] == "small"
        assert decoded["right"] == "changed"
        assert decoded["identical"] is False
        assert decoded["value_differences"] == 1
        assert decoded["aborted_sections"] == []

    def test_to_dict_lists_every_table(self, small_config):
        summary = TableChecker().check(small_config, small_config).to_dict()
        names = [t["name"] for t in summary["tables"]]
        assert names == [name for name, _, _ in small_config.iter_tables()]
        assert summary["tables"][0]["outcome"] == "MATCH_SAME_ORDER"
        assert summary["tables"][0]["left_crc"].startswith("0x")

    @pytest.mark.parametrize("key", [
        "structural_mismatches", "scalar_differences", "internal_errors",
        "left_total_bytes", "right_total_bytes",
    ])
    def test_to_dict_keys(self, small_config, key):
        assert key in TableChecker().check(small_config, small_config).to_dict()
