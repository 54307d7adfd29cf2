"""
Fixed-Point Math — целочисленное умножение-деление с явным округлением

Модуль обеспечивает детерминированную конверсию assets ↔ shares:
- Только int арифметика (float запрещён — потеря точности на больших суммах)
- Явное направление округления (FLOOR / CEIL) в каждой операции
- Защита от деления на ноль

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. mul_div_floor(x, y, d) * d <= x * y
2. mul_div_ceil(x, y, d) * d >= x * y
3. mul_div_ceil - mul_div_floor ∈ {0, 1}
4. Деление на ноль никогда не происходит (ZeroDivisionError до вычисления)
"""

from enum import Enum


# =============================================================================
# ROUNDING
# =============================================================================


class Rounding(str, Enum):
    """
    Направление округления.

    FLOOR — к меньшему (в пользу vault при выдаче shares/assets вызывающему)
    CEIL  — к большему (в пользу vault при списании с вызывающего)
    """

    FLOOR = "floor"
    CEIL = "ceil"


# =============================================================================
# MUL-DIV
# =============================================================================


def mul_div_floor(x: int, y: int, denominator: int) -> int:
    """
    floor(x * y / denominator) для неотрицательных int.

    Args:
        x: Множитель (>= 0)
        y: Множитель (>= 0)
        denominator: Делитель (> 0)

    Returns:
        Округлённый вниз результат

    Raises:
        ZeroDivisionError: Если denominator == 0
        ValueError: Если аргументы отрицательные

    Examples:
        >>> mul_div_floor(100, 3, 7)
        42
        >>> mul_div_floor(10, 10, 100)
        1
    """
    _check_operands(x, y, denominator)
    return (x * y) // denominator


def mul_div_ceil(x: int, y: int, denominator: int) -> int:
    """
    ceil(x * y / denominator) для неотрицательных int.

    Examples:
        >>> mul_div_ceil(100, 3, 7)
        43
        >>> mul_div_ceil(10, 10, 100)
        1
    """
    _check_operands(x, y, denominator)
    # -(-a // b) == ceil(a / b) для целых
    return -(-(x * y) // denominator)


def mul_div(x: int, y: int, denominator: int, rounding: Rounding) -> int:
    """
    x * y / denominator с заданным направлением округления.

    Args:
        x: Множитель
        y: Множитель
        denominator: Делитель
        rounding: Rounding.FLOOR или Rounding.CEIL

    Returns:
        Округлённый результат
    """
    if rounding == Rounding.CEIL:
        return mul_div_ceil(x, y, denominator)
    return mul_div_floor(x, y, denominator)


def _check_operands(x: int, y: int, denominator: int) -> None:
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    if x < 0 or y < 0 or denominator < 0:
        raise ValueError(
            f"mul_div operands must be non-negative, got x={x}, y={y}, d={denominator}"
        )
