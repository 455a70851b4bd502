#!/usr/bin/env python3
"""Unit tests for string-or-number field decoding.

Tests cover:
    - FlexibleInt decoding from numbers, digit strings and empty strings
    - Encoding back to the vendor's canonical form
    - Identifier normalization with flexible_str
"""
import sys

import pytest

sys.path.insert(0, str(__file__).rsplit("/tests", 1)[0])
from src.maas360.api.flexible import FlexibleInt, flexible_int, flexible_str

# ============================================
# FlexibleInt Tests
# ============================================

class TestFlexibleIntDecode:
    """Test FlexibleInt.from_json."""

    def test_number_and_string_agree(self):
        """123 and "123" decode to the same present value."""
        assert FlexibleInt.from_json(123) == FlexibleInt.from_json("123")
        assert FlexibleInt.from_json(123) == FlexibleInt(123, True)

    def test_empty_string_is_absent(self):
        value = FlexibleInt.from_json("")
        assert not value.is_set
        assert value.value == 0

    @pytest.mark.parametrize("raw", ["abc", "12a", " 12", "1.5", None, 1.5, {}, [], True])
    def test_unusable_values_are_absent(self, raw):
        assert FlexibleInt.from_json(raw) == FlexibleInt()

    def test_negative_and_signed_strings(self):
        assert FlexibleInt.from_json("-42") == FlexibleInt(-42, True)
        assert FlexibleInt.from_json("+7") == FlexibleInt(7, True)

    def test_zero_is_present(self):
        """Zero is a real value, unlike the empty string."""
        value = FlexibleInt.from_json("0")
        assert value.is_set
        assert int(value) == 0

    def test_int64_bounds(self):
        assert FlexibleInt.from_json(str(2 ** 63 - 1)).is_set
        assert not FlexibleInt.from_json(str(2 ** 63)).is_set
        assert not FlexibleInt.from_json(2 ** 63).is_set

    def test_epoch_millis(self):
        value = FlexibleInt.from_json("1700000000000")
        assert int(value) == 1700000000000


class TestFlexibleIntEncode:
    """Test FlexibleInt.to_json."""

    def test_present_encodes_as_number(self):
        assert FlexibleInt.from_json("123").to_json() == 123

    def test_absent_encodes_as_empty_string(self):
        assert FlexibleInt.from_json("").to_json() == ""

    @pytest.mark.parametrize("raw", [123, ""])
    def test_canonical_forms_are_stable(self, raw):
        once = FlexibleInt.from_json(raw).to_json()
        assert FlexibleInt.from_json(once).to_json() == once

    def test_str(self):
        assert str(FlexibleInt.from_json(5)) == "5"
        assert str(FlexibleInt()) == ""


# ============================================
# Helper Tests
# ============================================

class TestHelpers:
    """Test flexible_int and flexible_str."""

    def test_flexible_int(self):
        assert flexible_int("15") == 15
        assert flexible_int("") == 0
        assert flexible_int(None) == 0

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("ABC123", "ABC123"),
            (351756051523999, "351756051523999"),
            (3.51756051523999e14, "351756051523999"),
            (True, "true"),
            ("", None),
            (None, None),
        ],
    )
    def test_flexible_str(self, raw, expected):
        assert flexible_str(raw) == expected


# ============================================
# Run tests
# ============================================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
