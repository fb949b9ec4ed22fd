# ddrconf/engine/checksum.py
# Table checksum and size accounting for the report header and the dump tool.
#
# The checksum is the 4-bit table-driven CRC used by the board firmware
# tools: 16-entry table, initial value 0, two nibble steps per byte (low
# nibble first), no final XOR. It is NOT zlib.crc32; values must match the
# firmware tooling bit for bit.
#
# Entries are packed little-endian before checksumming:
#   CONTROLLER  "<II"  8 bytes per entry
#   PHY         "<IH"  6 bytes per entry (packed, no padding)

import struct
from typing import Optional, Tuple

from ddrconf.engine.domain import Sequence, WidthPolicy, sequence_policy


_CRC_TABLE: Tuple[int, ...] = (
    0x4DBDF21C, 0x500AE278, 0x76D3D2D4, 0x6B64C2B0,
    0x3B61B38C, 0x26D6A3E8, 0x000F9344, 0x1DB88320,
    0xA005713C, 0xBDB26158, 0x9B6B51F4, 0x86DC4190,
    0xD6D930AC, 0xCB6E20C8, 0xEDB71064, 0xF0000000,
)


def compute_crc32(data: bytes) -> int:
    """Return the 32-bit nibble-table CRC of data."""
    crc = 0
    for byte in data:
        crc = (crc >> 4) ^ _CRC_TABLE[(crc ^ byte) & 0x0F]
        crc = (crc >> 4) ^ _CRC_TABLE[(crc ^ (byte >> 4)) & 0x0F]
    return crc


def pack_sequence(seq: Sequence, policy: Optional[WidthPolicy] = None) -> bytes:
    """Pack seq into its firmware byte layout."""
    if policy is None:
        policy = sequence_policy(seq)
    return b"".join(
        struct.pack(policy.struct_format, entry.address, entry.value)
        for entry in seq
    )


def table_crc(seq: Sequence, policy: Optional[WidthPolicy] = None) -> int:
    """CRC of the packed table. An empty table checksums to 0."""
    return compute_crc32(pack_sequence(seq, policy))


def table_bytes(seq: Sequence, policy: Optional[WidthPolicy] = None) -> int:
    """Packed size of seq in bytes."""
    if policy is None:
        policy = sequence_policy(seq)
    return len(seq) * policy.entry_bytes
