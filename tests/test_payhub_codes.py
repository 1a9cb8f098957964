"""Tests for the PayHub code tables."""

import pytest

from payhub_sdk.connectors.base import StandardErrorCode
from payhub_sdk.connectors.payhub_codes import (
    AVS_CODE_TRANSLATOR,
    CVV_CODE_TRANSLATOR,
    STANDARD_ERROR_CODE_MAPPING,
    avs_message,
    cvv_message,
    standard_error_code,
)


class TestCvvTable:
    """Tests for CVV result translation."""

    @pytest.mark.parametrize("code,meaning", [
        ("M", "CVV matches"),
        ("N", "CVV does not match"),
        ("P", "CVV not processed"),
        ("S", "CVV should have been present"),
        ("U", "CVV request unable to be processed by issuer"),
    ])
    def test_known_codes(self, code, meaning):
        """Test every documented CVV code."""
        assert cvv_message(code) == meaning

    def test_table_size(self):
        assert len(CVV_CODE_TRANSLATOR) == 5

    @pytest.mark.parametrize("code", ["X", "m", "", None])
    def test_unknown_code_has_no_mapping(self, code):
        """Test that unknown codes yield None instead of raising."""
        assert cvv_message(code) is None


class TestAvsTable:
    """Tests for AVS result translation."""

    def test_exact_match(self):
        assert avs_message("Y") == "Exact Match, Address and five character ZIP match."

    def test_zip_only_match(self):
        assert avs_message("Z") == "Zip Match, Five character numeric ZIP match only."

    def test_not_requested(self):
        assert avs_message("0") == "Approved, Address verification was not requested."

    def test_amex_codes_present(self):
        """Test that the AMEX-only codes 1-8 are all documented."""
        for code in "12345678":
            assert "AMEX only" in avs_message(code)

    def test_every_entry_has_a_message(self):
        assert len(AVS_CODE_TRANSLATOR) == 26
        assert all(isinstance(m, str) and m for m in AVS_CODE_TRANSLATOR.values())

    @pytest.mark.parametrize("code", ["E", "9", "YY", None])
    def test_unknown_code_has_no_mapping(self, code):
        assert avs_message(code) is None


class TestStandardErrorCodeMapping:
    """Tests for processor code -> standard error taxonomy."""

    @pytest.mark.parametrize("code,expected", [
        ("14", StandardErrorCode.INVALID_NUMBER),
        ("80", StandardErrorCode.INVALID_EXPIRY_DATE),
        ("82", StandardErrorCode.INVALID_CVC),
        ("54", StandardErrorCode.EXPIRED_CARD),
        ("01", StandardErrorCode.CALL_ISSUER),
        ("02", StandardErrorCode.CALL_ISSUER),
        ("04", StandardErrorCode.PICKUP_CARD),
        ("43", StandardErrorCode.PICKUP_CARD),
    ])
    def test_mapped_codes(self, code, expected):
        assert standard_error_code(code) is expected

    def test_decline_codes_share_one_entry(self):
        """Test that all decline codes collapse onto card_declined."""
        for code in ("05", "51", "61", "62", "65", "93"):
            assert standard_error_code(code) is StandardErrorCode.CARD_DECLINED

    @pytest.mark.parametrize("code", ["00", "12", "99", "5", None])
    def test_unmapped_code_has_no_mapping(self, code):
        """Test that unmapped codes do not fall back to a catch-all."""
        assert standard_error_code(code) is None

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            STANDARD_ERROR_CODE_MAPPING["99"] = StandardErrorCode.CARD_DECLINED
        with pytest.raises(TypeError):
            CVV_CODE_TRANSLATOR["X"] = "made up"
