"""
Core math modules для Strategy Vault

Целочисленные примитивы с явным направлением округления.
"""

from strategy_vault.core.math.fixed_point import (
    Rounding,
    mul_div,
    mul_div_ceil,
    mul_div_floor,
)

__all__ = [
    "Rounding",
    "mul_div",
    "mul_div_ceil",
    "mul_div_floor",
]
