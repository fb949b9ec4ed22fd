# ddrconf/tables/timing.py
# TimingConfig, FspCfg and FspMsg data classes.
# One TimingConfig holds every register table of one side of a comparison.

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Tuple

from ddrconf.engine.checksum import table_bytes
from ddrconf.engine.domain import Sequence, WidthClass, width_policy


class FwType(IntEnum):
    """PHY training firmware image type."""
    FW_1D_IMAGE = 0
    FW_2D_IMAGE = 1


@dataclass(frozen=True)
class FspCfg:
    """
    Controller configuration of one frequency setpoint.

    Fields:
      ddrc_cfg -- controller register table for this setpoint.
      bypass   -- bypass flag, compared by inequality only.
    """
    ddrc_cfg: Sequence = ()
    bypass:   int      = 0


@dataclass(frozen=True)
class FspMsg:
    """
    PHY message group of one frequency setpoint.

    Fields:
      drate            -- data rate, compared by inequality only.
      fw_type          -- FwType, compared by inequality only.
      fsp_phy_cfg      -- setpoint PHY configuration.
      fsp_phy_msgh_cfg -- setpoint message block header.
      fsp_phy_pie_cfg  -- setpoint PIE.
    """
    drate:            int    = 0
    fw_type:          FwType = FwType.FW_1D_IMAGE
    fsp_phy_cfg:      Sequence = ()
    fsp_phy_msgh_cfg: Sequence = ()
    fsp_phy_pie_cfg:  Sequence = ()

    def tables(self) -> Tuple[Tuple[str, Sequence], ...]:
        return (
            ("fsp_phy_cfg",      self.fsp_phy_cfg),
            ("fsp_phy_msgh_cfg", self.fsp_phy_msgh_cfg),
            ("fsp_phy_pie_cfg",  self.fsp_phy_pie_cfg),
        )


@dataclass(frozen=True)
class TimingConfig:
    """
    Complete DRAM timing configuration of one side.

    Fields:
      name               -- label shown in the report (file name by default).
      ddrc_cfg           -- controller base table.
      fsp_cfg            -- per-setpoint controller tables.
      ddrphy_cfg         -- PHY base table.
      fsp_msg            -- per-setpoint PHY message groups.
      ddrphy_trained_csr -- PHY trained CSR table.
      ddrphy_pie         -- PHY PIE table.
    """
    name:               str = ""
    ddrc_cfg:           Sequence = ()
    fsp_cfg:            Tuple[FspCfg, ...] = field(default_factory=tuple)
    ddrphy_cfg:         Sequence = ()
    fsp_msg:            Tuple[FspMsg, ...] = field(default_factory=tuple)
    ddrphy_trained_csr: Sequence = ()
    ddrphy_pie:         Sequence = ()

    def iter_tables(self) -> Iterator[Tuple[str, WidthClass, Sequence]]:
        """Yield (qualified_name, width_class, table) in declaration order."""
        yield "ddrc_cfg", WidthClass.CONTROLLER, self.ddrc_cfg
        for i, fsp in enumerate(self.fsp_cfg):
            yield "fsp_cfg[{}].ddrc_cfg".format(i), WidthClass.CONTROLLER, fsp.ddrc_cfg
        yield "ddrphy_cfg", WidthClass.PHY, self.ddrphy_cfg
        for i, msg in enumerate(self.fsp_msg):
            for table_name, table in msg.tables():
                yield "fsp_msg[{}].{}".format(i, table_name), WidthClass.PHY, table
        yield "ddrphy_trained_csr", WidthClass.PHY, self.ddrphy_trained_csr
        yield "ddrphy_pie", WidthClass.PHY, self.ddrphy_pie

    def total_bytes(self) -> int:
        """Packed size of every register table of this side."""
        return sum(
            table_bytes(table, width_policy(width_class))
            for _, width_class, table in self.iter_tables()
        )
