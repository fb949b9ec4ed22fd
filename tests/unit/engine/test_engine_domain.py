import pytest

from ddrconf.engine import (
    CONTROLLER_POLICY,
    DEFAULT_MAX_DEPTH,
    DEFAULT_WINDOW,
    PHY_POLICY,
    CompareOptions,
    Entry,
    RegisterValidationError,
    WidthClass,
    make_sequence,
    sequence_policy,
    width_policy,
)


class TestWidthPolicy:

    def test_controller_policy_formats_eight_digits(self):
        assert CONTROLLER_POLICY.format_address(0x10) == "0x00000010"
        assert CONTROLLER_POLICY.format_value(0xabc) == "0x00000abc"

    def test_phy_policy_formats_five_and_four_digits(self):
        assert PHY_POLICY.format_address(0x100a0) == "0x100a0"
        assert PHY_POLICY.format_value(0x12) == "0x0012"

    def test_entry_sizes(self):
        assert CONTROLLER_POLICY.entry_bytes == 8
        assert PHY_POLICY.entry_bytes == 6

    def test_column_widths(self):
        assert CONTROLLER_POLICY.column_width == 40
        assert PHY_POLICY.column_width == 37

    def test_width_policy_lookup(self):
        assert width_policy(WidthClass.CONTROLLER) is CONTROLLER_POLICY
        assert width_policy(WidthClass.PHY) is PHY_POLICY

    def test_width_policy_accepts_string_value(self):
        assert width_policy("PHY") is PHY_POLICY

    def test_width_class_is_str_enum(self):
        assert WidthClass.PHY == "PHY"


class TestEntry:

    def test_valid_controller_entry(self):
        entry = Entry(0x3d400304, 0xffffffff)
        assert entry.address == 0x3d400304
        assert entry.value == 0xffffffff
        assert entry.width_class is WidthClass.CONTROLLER

    def test_entry_is_frozen(self):
        entry = Entry(1, 2)
        with pytest.raises(Exception):
            entry.value = 3  # type: ignore[misc]

    def test_negative_address_rejected(self):
        with pytest.raises(RegisterValidationError, match="address"):
            Entry(-1, 0)

    def test_bool_value_rejected(self):
        with pytest.raises(RegisterValidationError, match="must be an int"):
            Entry(0x10, True)

    def test_float_address_rejected(self):
        with pytest.raises(RegisterValidationError):
            Entry(1.0, 0)  # type: ignore[arg-type]

    def test_controller_value_above_32_bits_rejected(self):
        with pytest.raises(RegisterValidationError, match="value"):
            Entry(0x10, 0x1_0000_0000)

    def test_phy_value_above_16_bits_rejected(self):
        with pytest.raises(RegisterValidationError, match="value"):
            Entry(0x100a0, 0x10000, WidthClass.PHY)

    def test_phy_value_at_16_bit_limit_accepted(self):
        assert Entry(0x100a0, 0xffff, WidthClass.PHY).value == 0xffff

    def test_policy_property(self):
        assert Entry(1, 1, WidthClass.PHY).policy is PHY_POLICY

    def test_equal_entries_compare_equal(self):
        assert Entry(1, 2) == Entry(1, 2)
        assert Entry(1, 2) != Entry(1, 3)


class TestSequences:

    def test_make_sequence_returns_tuple(self):
        seq = make_sequence([(1, 2), (3, 4)])
        assert isinstance(seq, tuple)
        assert seq == (Entry(1, 2), Entry(3, 4))

    def test_make_sequence_with_width_class(self):
        seq = make_sequence([(0x100a0, 1)], WidthClass.PHY)
        assert seq[0].width_class is WidthClass.PHY

    def test_sequence_policy_first_non_empty(self, phy_entries):
        assert sequence_policy((), phy_entries) is PHY_POLICY

    def test_sequence_policy_defaults_to_controller(self):
        assert sequence_policy((), ()) is CONTROLLER_POLICY


class TestCompareOptions:

    def test_defaults(self):
        options = CompareOptions()
        assert options.window == DEFAULT_WINDOW == 50
        assert options.max_depth == DEFAULT_MAX_DEPTH == 1

    def test_zero_window_rejected(self):
        with pytest.raises(RegisterValidationError, match="window"):
            CompareOptions(window=0)

    def test_negative_depth_rejected(self):
        with pytest.raises(RegisterValidationError, match="max_depth"):
            CompareOptions(max_depth=-1)

    def test_zero_depth_accepted(self):
        assert CompareOptions(max_depth=0).max_depth == 0

    def test_bool_window_rejected(self):
        with pytest.raises(RegisterValidationError):
            CompareOptions(window=True)
