"""
Vault Errors — таксономия ошибок ядра

Каждая ошибка прерывает всю операцию целиком (атомарный rollback выполняет
Env.invoke). Локального восстановления или retry внутри ядра нет: ошибка
поднимается к вызывающему без изменений.

Числовые коды стабильны и используются в логах и в событиях аудита.
"""

from typing import ClassVar


class VaultError(Exception):
    """
    Базовая ошибка vault.

    Attributes:
        code: Стабильный числовой код ошибки
        reason: Машиночитаемая причина (snake_case)
    """

    code: ClassVar[int] = 4000
    reason: ClassVar[str] = "vault_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.reason)
        self.message = message or self.reason

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ZeroAmountError(VaultError):
    """Сумма равна нулю там, где требуется положительная сумма."""

    code = 4041
    reason = "zero_amount"


class InsufficientBalanceError(VaultError):
    """У вызывающего недостаточно shares (или развёрнутого principal)."""

    code = 4042
    reason = "insufficient_balance"


class InsufficientLiquidityError(VaultError):
    """Запрошено больше, чем idle assets vault (без учёта средств у стратегий)."""

    code = 4043
    reason = "insufficient_liquidity"


class LockedError(VaultError):
    """Операция заблокирована активным deposit lock."""

    code = 4044
    reason = "shares_locked"


class UnauthorizedStrategyError(VaultError):
    """Вызывающий не является авторизованной стратегией."""

    code = 4045
    reason = "unauthorized_strategy"


class UnauthorizedError(VaultError):
    """Вызывающий не является admin."""

    code = 4046
    reason = "unauthorized"


class AlreadyInitializedError(VaultError):
    """Повторная инициализация vault."""

    code = 4047
    reason = "already_initialized"


class NotInitializedError(VaultError):
    """Операция до инициализации vault."""

    code = 4048
    reason = "not_initialized"


class InsufficientAllowanceError(InsufficientBalanceError):
    """Allowance spender-а на shares owner-а недостаточен."""

    code = 4049
    reason = "insufficient_allowance"


class InsolventPoolError(InsufficientLiquidityError):
    """Есть shares в обращении, но total_assets == 0: выпуск по курсу невозможен."""

    code = 4050
    reason = "insolvent_pool"
