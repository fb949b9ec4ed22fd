import json

import pytest

from ddrconf.engine import WidthClass, make_sequence
from ddrconf.tables import FspCfg, FspMsg, FwType, TimingConfig
from ddrconf.tool_version import STORAGE_FORMAT_VERSION


def _phy(*pairs):
    return make_sequence(pairs, WidthClass.PHY)


@pytest.fixture
def small_config() -> TimingConfig:
    """One setpoint, one message group, every table kind populated except fsp_phy_pie_cfg."""
    return TimingConfig(
        name="small",
        ddrc_cfg=make_sequence([(0x3d400304, 1), (0x3d400030, 1), (0x3d400000, 0xa3080020)]),
        fsp_cfg=(
            FspCfg(ddrc_cfg=make_sequence([(0x3d402064, 0x28), (0x3d4020dc, 0x840000)]), bypass=0),
        ),
        ddrphy_cfg=_phy((0x100a0, 0), (0x100a1, 1)),
        fsp_msg=(
            FspMsg(
                drate=3200,
                fw_type=FwType.FW_1D_IMAGE,
                fsp_phy_cfg=_phy((0x200b2, 0x124)),
                fsp_phy_msgh_cfg=_phy((0xd0000, 0), (0x54008, 0x61)),
            ),
        ),
        ddrphy_trained_csr=_phy((0x200b2, 0)),
        ddrphy_pie=_phy((0xd0000, 0), (0x90000, 0x10), (0xd0000, 1)),
    )


@pytest.fixture
def small_payload() -> dict:
    """JSON document equivalent to small_config."""
    return {
        "format_version": STORAGE_FORMAT_VERSION,
        "name": "small",
        "ddrc_cfg": [["0x3d400304", "0x1"], ["0x3d400030", 1], ["0x3d400000", "0xa3080020"]],
        "fsp_cfg": [
            {"bypass": 0, "ddrc_cfg": [["0x3d402064", "0x28"], {"reg": "0x3d4020dc", "val": "0x840000"}]},
        ],
        "ddrphy_cfg": [["0x100a0", 0], ["0x100a1", 1]],
        "fsp_msg": [
            {
                "drate": 3200,
                "fw_type": "FW_1D_IMAGE",
                "fsp_phy_cfg": [["0x200b2", "0x124"]],
                "fsp_phy_msgh_cfg": [["0xd0000", 0], ["0x54008", "0x61"]],
                "fsp_phy_pie_cfg": [],
            },
        ],
        "ddrphy_trained_csr": [["0x200b2", 0]],
        "ddrphy_pie": [["0xd0000", 0], ["0x90000", "0x10"], ["0xd0000", 1]],
    }


@pytest.fixture
def write_json(tmp_path):
    """Write a payload to tmp_path/<filename> and return the path."""
    def _write(payload, filename="timing.json"):
        path = tmp_path / filename
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path
    return _write
