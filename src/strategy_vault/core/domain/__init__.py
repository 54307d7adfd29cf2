"""
Domain models and value objects.

Contains fundamental domain entities: VaultConfig, StrategyEntry, events,
VaultSnapshot, the error taxonomy and integer unit validation.
"""

from strategy_vault.core.domain.config import (
    DEFAULT_SHARE_DECIMALS,
    DEFAULT_SHARE_NAME,
    DEFAULT_SHARE_SYMBOL,
    VaultConfig,
)
from strategy_vault.core.domain.errors import (
    AlreadyInitializedError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InsufficientLiquidityError,
    InsolventPoolError,
    LockedError,
    NotInitializedError,
    UnauthorizedError,
    UnauthorizedStrategyError,
    VaultError,
    ZeroAmountError,
)
from strategy_vault.core.domain.events import (
    ApprovalEvent,
    DepositEvent,
    EventKind,
    InitializedEvent,
    StrategyFlowEvent,
    StrategyStatusEvent,
    TransferEvent,
    VaultEvent,
    WithdrawEvent,
)
from strategy_vault.core.domain.strategy import StrategyEntry, StrategyStatus
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
from strategy_vault.core.domain.vault_state import VaultSnapshot

__all__ = [
    # Units module
    "I128_MAX",
    "I128_MIN",
    "U64_MAX",
    "InvalidAmountError",
    "saturating_add_u64",
    "validate_address",
    "validate_amount",
    "validate_signed_amount",
    "validate_timestamp",
    # Errors
    "VaultError",
    "ZeroAmountError",
    "LockedError",
    "InsufficientBalanceError",
    "InsufficientAllowanceError",
    "InsufficientLiquidityError",
    "InsolventPoolError",
    "UnauthorizedError",
    "UnauthorizedStrategyError",
    "AlreadyInitializedError",
    "NotInitializedError",
    # Config
    "VaultConfig",
    "DEFAULT_SHARE_NAME",
    "DEFAULT_SHARE_SYMBOL",
    "DEFAULT_SHARE_DECIMALS",
    # Strategy model
    "StrategyEntry",
    "StrategyStatus",
    # Events
    "EventKind",
    "VaultEvent",
    "InitializedEvent",
    "DepositEvent",
    "WithdrawEvent",
    "TransferEvent",
    "ApprovalEvent",
    "StrategyStatusEvent",
    "StrategyFlowEvent",
    # Snapshot
    "VaultSnapshot",
]
