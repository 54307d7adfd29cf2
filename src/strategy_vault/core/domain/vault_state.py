"""
VaultSnapshot — Модель снапшота состояния vault

Immutable Pydantic модель, представляющая полный снапшот учёта vault
на момент ledger timestamp. Используется для аудита и тестовых инвариантов.
"""

from pydantic import BaseModel, Field, model_validator

from .strategy import StrategyEntry
from .units import I128_MAX, U64_MAX


class VaultSnapshot(BaseModel):
    """
    Снапшот учёта vault.

    Инвариант: total_assets == idle_assets + deployed_assets
    """

    ts: int = Field(..., ge=0, le=U64_MAX, description="Timestamp снапшота (секунды)")

    admin: str = Field(..., min_length=1, description="Адрес admin")
    asset: str = Field(..., min_length=1, description="Базовый актив")
    lock_duration: int = Field(..., ge=0, le=U64_MAX, description="Lock window (секунды)")

    total_supply: int = Field(..., ge=0, le=I128_MAX, description="Всего shares")
    total_assets: int = Field(..., ge=0, le=I128_MAX, description="Все активы vault")
    idle_assets: int = Field(..., ge=0, le=I128_MAX, description="Активы на балансе vault")
    deployed_assets: int = Field(
        ..., ge=0, le=I128_MAX, description="Активы, развёрнутые у стратегий"
    )

    strategies: list[StrategyEntry] = Field(
        default_factory=list, description="Записи стратегий (в порядке регистрации)"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_asset_split(self) -> "VaultSnapshot":
        """Проверка разбиения total_assets на idle + deployed."""
        if self.idle_assets + self.deployed_assets != self.total_assets:
            raise ValueError(
                f"total_assets {self.total_assets} != idle {self.idle_assets} "
                f"+ deployed {self.deployed_assets}"
            )
        return self

    def net_flow_total(self) -> int:
        """Суммарный net flow по всем стратегиям."""
        return sum(entry.net_flow for entry in self.strategies)
