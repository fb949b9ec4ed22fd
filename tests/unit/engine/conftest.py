import pytest

from ddrconf.engine import Entry, WidthClass, make_sequence


@pytest.fixture
def two_entries():
    """[(0x10, 1), (0x20, 2)] controller table."""
    return make_sequence([(0x10, 1), (0x20, 2)])


@pytest.fixture
def swapped_entries():
    """two_entries with the order of its entries swapped."""
    return make_sequence([(0x20, 2), (0x10, 1)])


@pytest.fixture
def three_entries():
    """[(0x10, 1), (0x20, 2), (0x30, 3)] controller table."""
    return make_sequence([(0x10, 1), (0x20, 2), (0x30, 3)])


@pytest.fixture
def phy_entries():
    """Small PHY table with 20-bit addresses and 16-bit values."""
    return (
        Entry(0x100a0, 0x0000, WidthClass.PHY),
        Entry(0x100a1, 0x0001, WidthClass.PHY),
        Entry(0x20110, 0xffff, WidthClass.PHY),
    )
