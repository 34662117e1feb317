# tests/unit/test_helpers.py
"""
Unit tests for utility helpers
"""
import pytest
from datetime import datetime, timezone

from utils.errors import ValidationError
from utils.helpers import (
    normalize_address, is_valid_address, safe_float, safe_int, parse_flag,
    get_nested, round_score, clamp, mean, isoformat_utc,
)


@pytest.mark.unit
class TestAddressValidation:
    """Contract address checks"""

    def test_trims_and_preserves_case(self):
        assert normalize_address("  0x2::sui::SUI \n") == "0x2::sui::SUI"

    @pytest.mark.parametrize("address", ["", "    ", "0x2", "abcd", None, 12345])
    def test_rejects_short_or_missing(self, address):
        with pytest.raises(ValidationError):
            normalize_address(address)

    def test_minimum_length_is_inclusive(self):
        assert normalize_address("abcde") == "abcde"
        assert is_valid_address("abcde")
        assert not is_valid_address(" abcd ")


@pytest.mark.unit
class TestPayloadExtraction:
    """Defensive conversions of provider values"""

    def test_safe_float(self):
        assert safe_float("12.5") == 12.5
        assert safe_float(None) == 0.0
        assert safe_float("n/a", default=-1.0) == -1.0
        assert safe_float(True) == 0.0

    def test_safe_int(self):
        assert safe_int("1200") == 1200
        assert safe_int("1200.9") == 1200
        assert safe_int("") == 0
        assert safe_int("1e400") == 0
        assert safe_int("-1e400", default=7) == 7

    def test_parse_flag(self):
        assert parse_flag("1") is True
        assert parse_flag(1) is True
        assert parse_flag("0") is False
        assert parse_flag(0) is False
        assert parse_flag(None) is None
        assert parse_flag("") is None
        assert parse_flag("yes") is None

    def test_get_nested(self):
        data = {"market_data": {"current_price": {"usd": 1.5}}}
        assert get_nested(data, "market_data", "current_price", "usd") == 1.5
        assert get_nested(data, "market_data", "missing", "usd", default=0) == 0
        assert get_nested(None, "a") is None


@pytest.mark.unit
class TestScoreMath:
    """Rounding and aggregation"""

    def test_round_score_is_half_up(self):
        assert round_score(0.125) == 0.13
        assert round_score(0.875) == 0.88
        assert round_score(0.0325) == 0.03
        assert round_score(0.335) == 0.34

    def test_clamp(self):
        assert clamp(1.2) == 1.0
        assert clamp(-0.1) == 0.0
        assert clamp(0.5) == 0.5

    def test_mean_of_empty_is_zero(self):
        assert mean([]) == 0.0
        assert mean([1.0, 0.0, 0.5]) == 0.5

    def test_isoformat_utc(self):
        dt = datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
        assert isoformat_utc(dt) == "2024-05-01T12:00:00.123Z"
