from dataclasses import replace

import pytest

from ddrconf.engine import WidthClass, make_sequence
from ddrconf.tables import FspCfg, TimingConfig


@pytest.fixture
def changed_config(small_config) -> TimingConfig:
    """
    small_config with one finding per section kind:
      ddrc_cfg   -- first two registers swapped
      fsp_cfg    -- bypass 0 -> 1
      ddrphy_cfg -- extra register 0x100a2
      fsp_msg    -- drate 3200 -> 3733
      ddrphy_pie -- last 0xd0000 write 1 -> 5 (duplicated address)
    """
    ddrc = small_config.ddrc_cfg
    pie = small_config.ddrphy_pie
    return replace(
        small_config,
        name="changed",
        ddrc_cfg=(ddrc[1], ddrc[0], ddrc[2]),
        fsp_cfg=(replace(small_config.fsp_cfg[0], bypass=1),),
        ddrphy_cfg=small_config.ddrphy_cfg + make_sequence([(0x100a2, 2)], WidthClass.PHY),
        fsp_msg=(replace(small_config.fsp_msg[0], drate=3733),),
        ddrphy_pie=pie[:2] + make_sequence([(0xd0000, 5)], WidthClass.PHY),
    )


@pytest.fixture
def extra_setpoint_config(small_config) -> TimingConfig:
    """small_config with a second, empty controller setpoint."""
    return replace(small_config, fsp_cfg=small_config.fsp_cfg + (FspCfg(),))
