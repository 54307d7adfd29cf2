"""
VaultStorage — типизированный доступ к persistent storage vault

Только get/set/remove по семантическим ключам. Бизнес-логики нет.
Ключи namespace-ятся адресом контракта vault, поэтому несколько vault
могут жить в одном HostStorage.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from strategy_vault.core.domain.errors import NotInitializedError
from strategy_vault.host.storage import HostStorage


# =============================================================================
# STORAGE KEYS
# =============================================================================


class KeyKind(str, Enum):
    """Семантический тип ключа."""

    INITIALIZED = "Initialized"
    ADMIN = "Admin"
    ASSET = "Asset"
    LOCK_DURATION = "LockDuration"
    TOTAL_ASSETS = "TotalAssets"
    IDLE_ASSETS = "IdleAssets"
    STRATEGIES = "Strategies"
    LAST_DEPOSIT = "LastDeposit"
    STRATEGY_AUTHORIZED = "StrategyAuthorized"
    STRATEGY_NET_FLOW = "StrategyNetFlow"
    STRATEGY_DEPLOYED = "StrategyDeployed"


@dataclass(frozen=True)
class StorageKey:
    """
    Ключ storage: (контракт, тип, субъект).

    subject — адрес аккаунта/стратегии для per-entity ключей, иначе None.
    """

    contract: str
    kind: KeyKind
    subject: Optional[str] = None


# =============================================================================
# ACCESSOR
# =============================================================================


class VaultStorage:
    """
    Типизированный accessor storage одного vault.

    Args:
        storage: Хранилище host-а
        contract: Адрес контракта vault (namespace ключей)
    """

    def __init__(self, storage: HostStorage, contract: str):
        self._storage = storage
        self.contract = contract

    def _key(self, kind: KeyKind, subject: Optional[str] = None) -> StorageKey:
        return StorageKey(self.contract, kind, subject)

    def _require(self, kind: KeyKind):
        value = self._storage.get(self._key(kind))
        if value is None:
            raise NotInitializedError(f"vault {self.contract} has no {kind.value}")
        return value

    # Instance -----------------------------------------------------------------

    def is_initialized(self) -> bool:
        return bool(self._storage.get(self._key(KeyKind.INITIALIZED), False))

    def set_initialized(self) -> None:
        self._storage.set(self._key(KeyKind.INITIALIZED), True)

    def get_admin(self) -> str:
        return self._require(KeyKind.ADMIN)

    def set_admin(self, admin: str) -> None:
        self._storage.set(self._key(KeyKind.ADMIN), admin)

    def get_asset(self) -> str:
        return self._require(KeyKind.ASSET)

    def set_asset(self, asset: str) -> None:
        self._storage.set(self._key(KeyKind.ASSET), asset)

    def get_lock_duration(self) -> int:
        return self._require(KeyKind.LOCK_DURATION)

    def set_lock_duration(self, seconds: int) -> None:
        self._storage.set(self._key(KeyKind.LOCK_DURATION), seconds)

    def get_total_assets(self) -> int:
        return self._storage.get(self._key(KeyKind.TOTAL_ASSETS), 0)

    def set_total_assets(self, amount: int) -> None:
        self._storage.set(self._key(KeyKind.TOTAL_ASSETS), amount)

    def get_idle_assets(self) -> int:
        return self._storage.get(self._key(KeyKind.IDLE_ASSETS), 0)

    def set_idle_assets(self, amount: int) -> None:
        self._storage.set(self._key(KeyKind.IDLE_ASSETS), amount)

    # Accounts -----------------------------------------------------------------

    def get_last_deposit(self, account: str) -> Optional[int]:
        return self._storage.get(self._key(KeyKind.LAST_DEPOSIT, account))

    def set_last_deposit(self, account: str, timestamp: int) -> None:
        self._storage.set(self._key(KeyKind.LAST_DEPOSIT, account), timestamp)

    def remove_last_deposit(self, account: str) -> None:
        self._storage.remove(self._key(KeyKind.LAST_DEPOSIT, account))

    # Strategies ---------------------------------------------------------------

    def get_strategies(self) -> tuple[str, ...]:
        return self._storage.get(self._key(KeyKind.STRATEGIES), ())

    def set_strategies(self, strategies: tuple[str, ...]) -> None:
        self._storage.set(self._key(KeyKind.STRATEGIES), tuple(strategies))

    def get_strategy_authorized(self, strategy: str) -> Optional[bool]:
        """None — стратегия не зарегистрирована."""
        return self._storage.get(self._key(KeyKind.STRATEGY_AUTHORIZED, strategy))

    def set_strategy_authorized(self, strategy: str, authorized: bool) -> None:
        self._storage.set(self._key(KeyKind.STRATEGY_AUTHORIZED, strategy), authorized)

    def get_strategy_net_flow(self, strategy: str) -> int:
        return self._storage.get(self._key(KeyKind.STRATEGY_NET_FLOW, strategy), 0)

    def set_strategy_net_flow(self, strategy: str, net_flow: int) -> None:
        self._storage.set(self._key(KeyKind.STRATEGY_NET_FLOW, strategy), net_flow)

    def get_strategy_deployed(self, strategy: str) -> int:
        return self._storage.get(self._key(KeyKind.STRATEGY_DEPLOYED, strategy), 0)

    def set_strategy_deployed(self, strategy: str, deployed: int) -> None:
        self._storage.set(self._key(KeyKind.STRATEGY_DEPLOYED, strategy), deployed)
