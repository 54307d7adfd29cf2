"""
Тесты для модуля Fixed-Point Math

Проверяет:
1. Floor/Ceil округление mul_div
2. Инварианты floor * d <= x * y <= ceil * d
3. Защиту от деления на ноль и отрицательных операндов
4. Точность на суммах за пределами float
"""

import pytest

from strategy_vault.core.domain.units import I128_MAX
from strategy_vault.core.math.fixed_point import (
    Rounding,
    mul_div,
    mul_div_ceil,
    mul_div_floor,
)

# =============================================================================
# ТЕСТЫ ОКРУГЛЕНИЯ
# =============================================================================


class TestMulDivFloor:
    """Тесты для mul_div_floor"""

    def test_exact_division(self) -> None:
        assert mul_div_floor(100, 120, 100) == 120

    def test_rounds_down(self) -> None:
        """100 * 3 / 7 = 42.857 → 42"""
        assert mul_div_floor(100, 3, 7) == 42

    def test_result_below_one_is_zero(self) -> None:
        assert mul_div_floor(1, 1, 2) == 0

    def test_zero_operand(self) -> None:
        assert mul_div_floor(0, 10**18, 7) == 0


class TestMulDivCeil:
    """Тесты для mul_div_ceil"""

    def test_exact_division_not_bumped(self) -> None:
        """Точное деление не округляется вверх"""
        assert mul_div_ceil(10, 10, 100) == 1

    def test_rounds_up(self) -> None:
        """100 * 3 / 7 = 42.857 → 43"""
        assert mul_div_ceil(100, 3, 7) == 43

    def test_smallest_fraction_rounds_up(self) -> None:
        assert mul_div_ceil(1, 1, 2) == 1

    def test_zero_operand(self) -> None:
        assert mul_div_ceil(0, 5, 3) == 0


class TestMulDivDispatch:
    """Тесты для mul_div с явным Rounding"""

    @pytest.mark.parametrize(
        "rounding,expected",
        [(Rounding.FLOOR, 33), (Rounding.CEIL, 34)],
    )
    def test_rounding_direction(self, rounding, expected) -> None:
        assert mul_div(100, 1, 3, rounding) == expected

    def test_rounding_is_str_enum(self) -> None:
        assert Rounding("floor") is Rounding.FLOOR
        assert Rounding.CEIL.value == "ceil"


# =============================================================================
# ИНВАРИАНТЫ
# =============================================================================


class TestInvariants:
    """floor * d <= x * y <= ceil * d, разница floor/ceil ∈ {0, 1}"""

    @pytest.mark.parametrize(
        "x,y,d",
        [
            (1, 1, 1),
            (7, 13, 5),
            (999, 1_000_001, 3),
            (123_456_789, 987_654_321, 1_000_003),
            (I128_MAX, I128_MAX - 1, I128_MAX),
        ],
    )
    def test_bounds(self, x, y, d) -> None:
        floor = mul_div_floor(x, y, d)
        ceil = mul_div_ceil(x, y, d)

        assert floor * d <= x * y
        assert ceil * d >= x * y
        assert ceil - floor in (0, 1)

    def test_no_float_precision_loss(self) -> None:
        """Intermediate x * y за пределами 2**53 считается точно"""
        x = 2**100 + 1
        assert mul_div_floor(x, 3, 3) == x
        assert mul_div_ceil(x, 3, 3) == x


# =============================================================================
# ВАЛИДАЦИЯ ОПЕРАНДОВ
# =============================================================================


class TestOperandValidation:

    def test_zero_denominator_raises(self) -> None:
        with pytest.raises(ZeroDivisionError):
            mul_div_floor(1, 1, 0)
        with pytest.raises(ZeroDivisionError):
            mul_div_ceil(1, 1, 0)

    def test_negative_operand_raises(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            mul_div_floor(-1, 1, 1)
        with pytest.raises(ValueError, match="non-negative"):
            mul_div_ceil(1, 1, -1)
