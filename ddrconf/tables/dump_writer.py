# ddrconf/tables/dump_writer.py
# DumpWriter -- writes a TimingConfig in the ddrconfdump text format.
#
# Format (one block per non-empty table, in declaration order):
#
#   <qualified table name>
#   entries=<n>, size=<bytes> bytes
#   crc32=0x<8 hex digits>
#   [   0]={0x<addr>, 0x<value>}
#
# Controller rows use 8/8 hex digits, PHY rows 5/4. Empty tables are
# omitted. fsp_cfg[i].bypass follows each setpoint's controller table;
# fsp_msg[i].drate and fsp_msg[i].fw_type precede each message group.
# TimingLoader reads this format back and verifies entries and crc32.

import sys
from typing import Optional, TextIO

from ddrconf.engine.checksum import table_bytes, table_crc
from ddrconf.engine.domain import Sequence, WidthClass, width_policy
from ddrconf.tables.timing import TimingConfig


DUMP_RULE: str = "═" * 75
DUMP_TITLE: str = "DDR Configuration Dump Tool"
DUMP_FOOTER: str = "DUMP COMPLETE"


class DumpWriter:
    """Writes the dump of one TimingConfig to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream if stream is not None else sys.stdout

    def _line(self, text: str = "") -> None:
        self._stream.write(text + "\n")

    def _banner(self, title: str) -> None:
        self._line(DUMP_RULE)
        self._line(title.center(len(DUMP_RULE)).rstrip())
        self._line(DUMP_RULE)

    def write_table(self, name: str, width_class: WidthClass, table: Sequence) -> None:
        if not table:
            return
        policy = width_policy(width_class)
        self._line()
        self._line(name)
        self._line(f"entries={len(table)}, size={table_bytes(table, policy)} bytes")
        self._line(f"crc32=0x{table_crc(table, policy):08x}")
        for i, entry in enumerate(table):
            self._line(
                f"[{i:4d}]={{{policy.format_address(entry.address)}, "
                f"{policy.format_value(entry.value)}}}"
            )

    def write(self, config: TimingConfig) -> None:
        """Write banner, every table of config in declaration order, footer."""
        self._banner(DUMP_TITLE)

        self.write_table("ddrc_cfg", WidthClass.CONTROLLER, config.ddrc_cfg)

        for i, fsp in enumerate(config.fsp_cfg):
            self.write_table(f"fsp_cfg[{i}].ddrc_cfg", WidthClass.CONTROLLER, fsp.ddrc_cfg)
            self._line()
            self._line(f"fsp_cfg[{i}].bypass={fsp.bypass}")

        self.write_table("ddrphy_cfg", WidthClass.PHY, config.ddrphy_cfg)

        for i, msg in enumerate(config.fsp_msg):
            self._line()
            self._line(f"fsp_msg[{i}].drate={msg.drate}")
            self._line(f"fsp_msg[{i}].fw_type={int(msg.fw_type)}")
            for table_name, table in msg.tables():
                self.write_table(f"fsp_msg[{i}].{table_name}", WidthClass.PHY, table)

        self.write_table("ddrphy_trained_csr", WidthClass.PHY, config.ddrphy_trained_csr)
        self.write_table("ddrphy_pie", WidthClass.PHY, config.ddrphy_pie)

        self._line()
        self._banner(DUMP_FOOTER)
        self._line()
