# tests/unit/tables/test_dump_writer.py
# Target: ddrconf/tables/dump_writer.py

import io

from ddrconf.engine import WidthClass, make_sequence, table_crc
from ddrconf.tables import DumpWriter, TimingConfig
from ddrconf.tables.dump_writer import DUMP_FOOTER, DUMP_RULE, DUMP_TITLE


# =============================================================================
# SHARED HELPERS
# =============================================================================

def _dump(config: TimingConfig) -> str:
    buf = io.StringIO()
    DumpWriter(buf).write(config)
    return buf.getvalue()


def _table_block(name, width_class, table):
    buf = io.StringIO()
    DumpWriter(buf).write_table(name, width_class, table)
    return buf.getvalue().splitlines()


class TestWriteTable:

    def test_controller_block_layout(self):
        table = make_sequence([(0x3d400304, 1), (0x3d400030, 0xa3080020)])
        lines = _table_block("ddrc_cfg", WidthClass.CONTROLLER, table)
        assert lines == [
            "",
            "ddrc_cfg",
            "entries=2, size=16 bytes",
            "crc32=0x{:08x}".format(table_crc(table)),
            "[   0]={0x3d400304, 0x00000001}",
            "[   1]={0x3d400030, 0xa3080020}",
        ]

    def test_phy_rows_use_narrow_columns(self):
        table = make_sequence([(0x100a0, 0x1)], WidthClass.PHY)
        lines = _table_block("ddrphy_cfg", WidthClass.PHY, table)
        assert lines[2] == "entries=1, size=6 bytes"
        assert lines[4] == "[   0]={0x100a0, 0x0001}"

    def test_empty_table_is_omitted(self):
        assert _table_block("ddrphy_pie", WidthClass.PHY, ()) == []


class TestWrite:

    def test_banner_and_footer(self, small_config):
        lines = _dump(small_config).splitlines()
        assert lines[0] == DUMP_RULE
        assert lines[1].strip() == DUMP_TITLE
        assert lines[2] == DUMP_RULE
        assert DUMP_FOOTER in [line.strip() for line in lines[-4:]]

    def test_tables_in_declaration_order(self, small_config):
        text = _dump(small_config)
        names = [
            "ddrc_cfg\n",
            "fsp_cfg[0].ddrc_cfg\n",
            "fsp_cfg[0].bypass=0\n",
            "ddrphy_cfg\n",
            "fsp_msg[0].drate=3200\n",
            "fsp_msg[0].fw_type=0\n",
            "fsp_msg[0].fsp_phy_cfg\n",
            "fsp_msg[0].fsp_phy_msgh_cfg\n",
            "ddrphy_trained_csr\n",
            "ddrphy_pie\n",
        ]
        positions = [text.index("\n" + name) for name in names]
        assert positions == sorted(positions)

    def test_empty_message_table_not_written(self, small_config):
        assert "fsp_phy_pie_cfg" not in _dump(small_config)

    def test_empty_config_is_banners_only(self):
        text = _dump(TimingConfig())
        assert "entries=" not in text
        assert DUMP_TITLE in text
