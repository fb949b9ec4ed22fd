# tests/unit/engine/test_checksum.py
# Target: ddrconf/engine/checksum.py

import zlib

from ddrconf.engine import (
    PHY_POLICY,
    compute_crc32,
    pack_sequence,
    table_bytes,
    table_crc,
)


class TestComputeCrc32:

    def test_empty_input_is_zero(self):
        assert compute_crc32(b"") == 0

    def test_single_zero_byte(self):
        assert compute_crc32(b"\x00") == 0xD202EF8D

    def test_is_not_zlib_crc32(self):
        data = b"\x10\x00\x00\x00\x01\x00\x00\x00"
        assert compute_crc32(data) != zlib.crc32(data)

    def test_deterministic(self):
        data = bytes(range(64))
        assert compute_crc32(data) == compute_crc32(bytes(range(64)))

    def test_fits_in_32_bits(self):
        assert 0 <= compute_crc32(b"\xff" * 100) <= 0xFFFFFFFF


class TestPacking:

    def test_controller_entries_pack_to_eight_bytes(self, two_entries):
        packed = pack_sequence(two_entries)
        assert packed[:8] == b"\x10\x00\x00\x00\x01\x00\x00\x00"
        assert len(packed) == 16

    def test_phy_entries_pack_to_six_bytes(self, phy_entries):
        packed = pack_sequence(phy_entries)
        assert len(packed) == 18
        assert packed[:6] == b"\xa0\x00\x01\x00\x00\x00"

    def test_table_bytes(self, three_entries, phy_entries):
        assert table_bytes(three_entries) == 24
        assert table_bytes(phy_entries) == 18
        assert table_bytes(()) == 0

    def test_explicit_policy_overrides_entry_class(self, two_entries):
        assert table_bytes(two_entries, PHY_POLICY) == 12


class TestTableCrc:

    def test_empty_table_is_zero(self):
        assert table_crc(()) == 0

    def test_order_changes_checksum(self, two_entries, swapped_entries):
        assert table_crc(two_entries) != table_crc(swapped_entries)

    def test_matches_crc_of_packed_bytes(self, phy_entries):
        assert table_crc(phy_entries) == compute_crc32(pack_sequence(phy_entries))
