"""
VaultConfig — Конфигурация инициализации vault

Immutable Pydantic модель. Фиксируется один раз при initialize и не меняется
до конца жизни контракта; setter-а для lock_duration нет.
Полная совместимость с JSON Schema (core/contracts/schema/vault_config.json).
"""

from pydantic import BaseModel, Field, field_validator, model_validator

from .units import U64_MAX, validate_address


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_SHARE_NAME = "Strategy Vault Shares"
DEFAULT_SHARE_SYMBOL = "SVS"
DEFAULT_SHARE_DECIMALS = 7


# =============================================================================
# CONFIG MODEL
# =============================================================================


class VaultConfig(BaseModel):
    """
    Конфигурация vault.

    Содержит:
    - Lock window (lock_duration, секунды)
    - Идентичность admin и базового актива
    - Метаданные share токена
    - Список стратегий, авторизованных при инициализации
    """

    lock_duration: int = Field(
        ..., ge=0, le=U64_MAX, description="Длительность lock window (секунды)"
    )
    admin: str = Field(..., min_length=1, description="Адрес admin (авторизация стратегий)")
    asset: str = Field(..., min_length=1, description="Идентичность базового актива")

    # Метаданные share токена
    name: str = Field(DEFAULT_SHARE_NAME, min_length=1, description="Имя share токена")
    symbol: str = Field(
        DEFAULT_SHARE_SYMBOL, min_length=1, max_length=12, description="Символ share токена"
    )
    decimals: int = Field(
        DEFAULT_SHARE_DECIMALS, ge=0, le=18, description="Decimals share токена"
    )

    strategies: list[str] = Field(
        default_factory=list, description="Стратегии, авторизованные при инициализации"
    )

    model_config = {"frozen": True}

    @field_validator("admin", "asset")
    @classmethod
    def validate_identity(cls, v: str) -> str:
        """Адрес без пробелов по краям."""
        return validate_address(v)

    @field_validator("strategies")
    @classmethod
    def validate_strategies_unique(cls, v: list[str]) -> list[str]:
        """Стратегии уникальны и непусты."""
        for strategy in v:
            validate_address(strategy, "strategy")
        if len(set(v)) != len(v):
            raise ValueError(f"strategies must be unique, got {v}")
        return v

    @model_validator(mode="after")
    def validate_admin_not_strategy(self) -> "VaultConfig":
        """Admin не может быть одновременно стратегией."""
        if self.admin in self.strategies:
            raise ValueError(f"admin {self.admin} cannot be an authorized strategy")
        return self
