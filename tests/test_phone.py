"""Tests for phone number normalization."""

import pytest

from call_handler.core.phone import normalize_phone


class TestNormalizePhone:
    """Tests for normalize_phone."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("+61 2 9876 5432", "+61298765432"),
            ("+1 (281) 788-2316", "+12817882316"),
            ("61298765432", "+61298765432"),
            ("0412 345 678", "+0412345678"),
            (61298765432, "+61298765432"),
            ("12345", "12345"),
        ],
    )
    def test_normalizes_formats(self, raw, expected):
        """Formatting characters are stripped and a country prefix is added."""
        assert normalize_phone(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "anonymous", "+"])
    def test_returns_none_without_digits(self, raw):
        """Values with no digits are not phone numbers."""
        assert normalize_phone(raw) is None

    def test_same_number_in_different_formats_compares_equal(self):
        """Numbers differing only in formatting normalize identically."""
        assert normalize_phone("+61 (2) 9876-5432") == normalize_phone("61 2 9876 5432")
