"""Тесты для модуля units: целочисленный домен сумм, адресов и времени."""

import pytest

from strategy_vault.core.domain.units import (
    I128_MAX,
    I128_MIN,
    U64_MAX,
    InvalidAmountError,
    saturating_add_u64,
    validate_address,
    validate_amount,
    validate_signed_amount,
    validate_timestamp,
)


class TestValidateAmount:
    """Неотрицательные суммы в базовых единицах"""

    def test_valid_amounts_returned_unchanged(self):
        assert validate_amount(0) == 0
        assert validate_amount(100) == 100
        assert validate_amount(I128_MAX) == I128_MAX

    def test_negative_rejected(self):
        with pytest.raises(InvalidAmountError, match="negative"):
            validate_amount(-1)

    def test_overflow_rejected(self):
        with pytest.raises(InvalidAmountError, match="I128_MAX"):
            validate_amount(I128_MAX + 1)

    @pytest.mark.parametrize("value", [1.0, "100", None, True, False])
    def test_non_integer_rejected(self, value):
        """float, строки и bool — не суммы"""
        with pytest.raises(InvalidAmountError):
            validate_amount(value)

    def test_invalid_amount_is_value_error(self):
        assert issubclass(InvalidAmountError, ValueError)
        assert InvalidAmountError.code == 4040

    def test_parameter_name_in_message(self):
        with pytest.raises(InvalidAmountError, match="shares"):
            validate_amount(-5, "shares")


class TestValidateSignedAmount:
    """Знаковые суммы (net flow)"""

    def test_range_bounds(self):
        assert validate_signed_amount(I128_MIN) == I128_MIN
        assert validate_signed_amount(-20) == -20
        assert validate_signed_amount(I128_MAX) == I128_MAX

    def test_out_of_range(self):
        with pytest.raises(InvalidAmountError):
            validate_signed_amount(I128_MIN - 1)
        with pytest.raises(InvalidAmountError):
            validate_signed_amount(I128_MAX + 1)


class TestValidateTimestamp:

    def test_bounds(self):
        assert validate_timestamp(0) == 0
        assert validate_timestamp(U64_MAX) == U64_MAX

    def test_out_of_range(self):
        with pytest.raises(InvalidAmountError):
            validate_timestamp(-1)
        with pytest.raises(InvalidAmountError):
            validate_timestamp(U64_MAX + 1)


class TestValidateAddress:

    def test_valid(self):
        assert validate_address("GALICE") == "GALICE"

    @pytest.mark.parametrize("value", ["", "   ", None, 42])
    def test_empty_or_non_string(self, value):
        with pytest.raises(ValueError):
            validate_address(value)

    def test_surrounding_whitespace(self):
        with pytest.raises(ValueError, match="whitespace"):
            validate_address(" alice")


class TestSaturatingAdd:

    def test_regular_sum(self):
        assert saturating_add_u64(1_000, 3_600) == 4_600

    def test_saturates_at_u64_max(self):
        """Огромный lock_duration не переполняет unlock time"""
        assert saturating_add_u64(1_000, U64_MAX) == U64_MAX
