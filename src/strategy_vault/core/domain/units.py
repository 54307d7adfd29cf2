"""
Units — централизованная валидация сумм, адресов и времени

Все суммы в vault — целые числа в базовых единицах актива (или shares).
Float запрещён: любое смешение единиц или дробные значения должны
отсекаться на границе ядра функциями этого модуля.

Диапазон сумм ограничен signed 128-bit (как у host ledger).
"""

from typing import Final


# =============================================================================
# ГРАНИЦЫ ЦЕЛОЧИСЛЕННОГО ДОМЕНА
# =============================================================================

# Максимум суммы (signed 128-bit)
I128_MAX: Final[int] = 2**127 - 1

# Минимум знаковой суммы (net flow стратегии может быть отрицательным)
I128_MIN: Final[int] = -(2**127)

# Максимум timestamp ledger (unsigned 64-bit, секунды)
U64_MAX: Final[int] = 2**64 - 1


class InvalidAmountError(ValueError):
    """Сумма вне целочисленного домена (отрицательная, не int, переполнение)."""

    code: Final[int] = 4040


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_amount(amount: int, name: str = "amount") -> int:
    """
    Проверка неотрицательной суммы в базовых единицах.

    Ноль допустим: проверку "сумма > 0" делают операции vault
    (ZeroAmountError), чтобы различать ошибку домена и бизнес-ошибку.

    Args:
        amount: Сумма (int)
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        amount без изменений

    Raises:
        InvalidAmountError: Если amount не int, bool, < 0 или > I128_MAX
    """
    # bool является подклассом int, но суммой не считается
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(
            f"{name} must be an integer in base units, got {type(amount).__name__}"
        )

    if amount < 0:
        raise InvalidAmountError(f"{name} cannot be negative: {amount}")

    if amount > I128_MAX:
        raise InvalidAmountError(f"{name} {amount} exceeds I128_MAX")

    return amount


def validate_signed_amount(amount: int, name: str = "amount") -> int:
    """
    Проверка знаковой суммы (net flow стратегии).

    Raises:
        InvalidAmountError: Если amount не int или вне [I128_MIN, I128_MAX]
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(
            f"{name} must be an integer, got {type(amount).__name__}"
        )

    if amount < I128_MIN or amount > I128_MAX:
        raise InvalidAmountError(f"{name} {amount} outside signed 128-bit range")

    return amount


def validate_timestamp(ts: int, name: str = "timestamp") -> int:
    """
    Проверка timestamp ledger (секунды, unsigned 64-bit).

    Raises:
        InvalidAmountError: Если ts не int или вне [0, U64_MAX]
    """
    if isinstance(ts, bool) or not isinstance(ts, int):
        raise InvalidAmountError(f"{name} must be an integer, got {type(ts).__name__}")

    if ts < 0 or ts > U64_MAX:
        raise InvalidAmountError(f"{name} {ts} outside unsigned 64-bit range")

    return ts


def validate_address(address: str, name: str = "address") -> str:
    """
    Проверка адреса аккаунта/стратегии.

    Адрес — непустая строка без пробелов по краям. Формат конкретного
    host (G.../C... и т.п.) ядро не проверяет.

    Raises:
        ValueError: Если адрес пустой или не строка
    """
    if not isinstance(address, str) or not address.strip():
        raise ValueError(f"{name} must be a non-empty string, got {address!r}")

    if address != address.strip():
        raise ValueError(f"{name} must not have surrounding whitespace: {address!r}")

    return address


def saturating_add_u64(a: int, b: int) -> int:
    """
    Сложение с насыщением в unsigned 64-bit.

    Используется для unlock time: last_deposit + lock_duration не должен
    переполняться при lock_duration близком к U64_MAX.
    """
    return min(a + b, U64_MAX)
