"""
StrategyEntry — Модель записи стратегии

Жизненный цикл записи:
    UNREGISTERED → AUTHORIZED ⇄ DEAUTHORIZED

UNREGISTERED неявный (записи нет). Созданная запись никогда не удаляется:
net flow хранится бессрочно для исторической P&L атрибуции.
"""

from enum import Enum

from pydantic import BaseModel, Field

from .units import I128_MAX, I128_MIN


# =============================================================================
# ENUMS
# =============================================================================


class StrategyStatus(str, Enum):
    """Состояние записи стратегии."""

    UNREGISTERED = "UNREGISTERED"
    AUTHORIZED = "AUTHORIZED"
    DEAUTHORIZED = "DEAUTHORIZED"


# =============================================================================
# STRATEGY ENTRY MODEL
# =============================================================================


class StrategyEntry(BaseModel):
    """
    Снапшот записи стратегии.

    Immutable модель (frozen=True), собирается из storage по запросу.

    net_flow > 0: стратегия вернула больше, чем забрала (прибыль)
    net_flow < 0: чистая непогашенная экспозиция (или убыток)
    deployed: principal, выведенный стратегией и ещё не возвращённый
    """

    strategy: str = Field(..., min_length=1, description="Адрес стратегии")
    status: StrategyStatus = Field(..., description="Состояние записи")
    net_flow: int = Field(
        0, ge=I128_MIN, le=I128_MAX, description="Σ strategy_deposit − Σ strategy_withdraw"
    )
    deployed: int = Field(
        0, ge=0, le=I128_MAX, description="Непогашенный principal у стратегии"
    )

    model_config = {"frozen": True}

    @property
    def authorized(self) -> bool:
        return self.status == StrategyStatus.AUTHORIZED

    @property
    def registered(self) -> bool:
        return self.status != StrategyStatus.UNREGISTERED
