"""Vault — компоненты strategy vault поверх host-а.

- VaultStorage: типизированный accessor storage (семантические ключи)
- LockManager: deposit time-lock
- VaultLedger: конверсия assets ↔ shares, deposit/mint/withdraw/redeem
- TransferGuard: lock-aware перевод shares
- StrategyRegistry: авторизация стратегий, net flow и deployed principal
- StrategyVaultContract: внешняя поверхность (атомарные вызовы + auth)
"""

from .contract import StrategyVaultContract
from .ledger import VaultLedger
from .lock_manager import LockManager, LockStatus
from .storage import KeyKind, StorageKey, VaultStorage
from .strategy_registry import StrategyRegistry, StrategyTransitionResult, check_admin
from .transfer_guard import TransferGuard

__all__ = [
    "StrategyVaultContract",
    "VaultLedger",
    "LockManager",
    "LockStatus",
    "KeyKind",
    "StorageKey",
    "VaultStorage",
    "StrategyRegistry",
    "StrategyTransitionResult",
    "check_admin",
    "TransferGuard",
]
