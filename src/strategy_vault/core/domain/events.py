"""
Vault Events — Модели доменных событий

Immutable Pydantic модели, которые ядро передаёт в event sink host-а
(Env.emit). Механика публикации — забота host-а; ядро только формирует
структурированную запись.

Полная совместимость с JSON Schema (core/contracts/schema/vault_event.json).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from .units import I128_MAX, I128_MIN, U64_MAX


# =============================================================================
# ENUMS
# =============================================================================


class EventKind(str, Enum):
    """Тип доменного события."""

    INITIALIZED = "initialized"
    DEPOSIT = "deposit"
    MINT = "mint"
    WITHDRAW = "withdraw"
    REDEEM = "redeem"
    TRANSFER = "transfer"
    TRANSFER_BLOCKED = "transfer_blocked"
    APPROVE = "approve"
    STRATEGY_AUTHORIZED = "strategy_authorized"
    STRATEGY_DEAUTHORIZED = "strategy_deauthorized"
    STRATEGY_WITHDRAW = "strategy_withdraw"
    STRATEGY_DEPOSIT = "strategy_deposit"
    STRATEGY_WRITE_DOWN = "strategy_write_down"


# =============================================================================
# BASE EVENT
# =============================================================================


class VaultEvent(BaseModel):
    """Базовое событие: тип и timestamp ledger."""

    kind: EventKind = Field(..., description="Тип события")
    ts: int = Field(..., ge=0, le=U64_MAX, description="Timestamp ledger (секунды)")

    model_config = {"frozen": True}

    def to_record(self) -> dict[str, Any]:
        """Сериализация в JSON-совместимую запись."""
        return self.model_dump(mode="json")


# =============================================================================
# EVENTS
# =============================================================================


class InitializedEvent(VaultEvent):
    """Vault инициализирован."""

    admin: str = Field(..., min_length=1)
    asset: str = Field(..., min_length=1)
    lock_duration: int = Field(..., ge=0, le=U64_MAX)


class DepositEvent(VaultEvent):
    """deposit / mint: assets внесены, shares выпущены receiver-у."""

    caller: str = Field(..., min_length=1)
    receiver: str = Field(..., min_length=1)
    assets: int = Field(..., ge=0, le=I128_MAX)
    shares: int = Field(..., ge=0, le=I128_MAX)


class WithdrawEvent(VaultEvent):
    """withdraw / redeem: shares owner-а сожжены, assets выплачены receiver-у."""

    caller: str = Field(..., min_length=1)
    receiver: str = Field(..., min_length=1)
    owner: str = Field(..., min_length=1)
    assets: int = Field(..., ge=0, le=I128_MAX)
    shares: int = Field(..., ge=0, le=I128_MAX)


class TransferEvent(VaultEvent):
    """Перевод shares (или заблокированная попытка перевода)."""

    from_account: str = Field(..., min_length=1)
    to_account: str = Field(..., min_length=1)
    shares: int = Field(..., ge=0, le=I128_MAX)
    unlock_time: int | None = Field(
        None, ge=0, le=U64_MAX, description="Для transfer_blocked: когда снимется lock"
    )


class ApprovalEvent(VaultEvent):
    """Allowance на shares выставлен."""

    owner: str = Field(..., min_length=1)
    spender: str = Field(..., min_length=1)
    shares: int = Field(..., ge=0, le=I128_MAX)


class StrategyStatusEvent(VaultEvent):
    """Стратегия авторизована / деавторизована admin-ом."""

    admin: str = Field(..., min_length=1)
    strategy: str = Field(..., min_length=1)


class StrategyFlowEvent(VaultEvent):
    """Движение активов стратегии и новое состояние её учёта."""

    strategy: str = Field(..., min_length=1)
    assets: int = Field(..., ge=0, le=I128_MAX)
    net_flow: int = Field(..., ge=I128_MIN, le=I128_MAX)
    deployed: int = Field(..., ge=0, le=I128_MAX)
    total_assets: int = Field(..., ge=0, le=I128_MAX)
