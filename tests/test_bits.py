from __future__ import annotations
import pytest # type: ignore
from hllsketch.lib.bits import leading_zero_count, population_count

@pytest.mark.quick
class TestBitsQuick:
    """Quick tests for the 32-bit helpers."""

    @pytest.mark.parametrize("value,expected", [
        (0, 0),
        (1, 1),
        (0b1011, 3),
        (0x80000000, 1),
        (0xFFFFFFFF, 32),
        (0x55555555, 16),
    ])
    def test_population_count(self, value, expected):
        assert population_count(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (0, 32),
        (1, 31),
        (0x00010000, 15),
        (0x7FFFFFFF, 1),
        (0x80000000, 0),
        (0xFFFFFFFF, 0),
    ])
    def test_leading_zero_count(self, value, expected):
        assert leading_zero_count(value) == expected

    def test_leading_zero_count_matches_bit_length(self):
        for shift in range(32):
            value = (1 << shift) | ((1 << shift) - 1) // 3
            assert leading_zero_count(value) == 32 - value.bit_length()

    def test_rejects_values_outside_32_bits(self):
        with pytest.raises(ValueError):
            population_count(1 << 32)
        with pytest.raises(ValueError):
            leading_zero_count(-1)
