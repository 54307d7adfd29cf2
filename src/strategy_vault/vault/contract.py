"""
StrategyVaultContract — внешняя поверхность vault

Каждая публичная операция:
1. Открывает атомарный вызов (Env.invoke)
2. Проверяет инициализацию и require_auth инициатора (и чужого receiver-а депозита)
3. Делегирует в Ledger / Transfer Guard / Strategy Registry

Любое исключение откатывает storage и события вызова и пробрасывается
без изменений; facade только логирует отказ (WARNING, с кодом ошибки).
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Union

from strategy_vault.core.contracts.validators import load_vault_config
from strategy_vault.core.domain.config import VaultConfig
from strategy_vault.core.domain.errors import AlreadyInitializedError, NotInitializedError
from strategy_vault.core.domain.events import EventKind, InitializedEvent
from strategy_vault.core.domain.strategy import StrategyEntry
from strategy_vault.core.domain.units import validate_address
from strategy_vault.core.domain.vault_state import VaultSnapshot
from strategy_vault.host.env import Env
from strategy_vault.host.token import AssetToken, FungibleToken

from .ledger import VaultLedger
from .lock_manager import LockManager, LockStatus
from .storage import VaultStorage
from .strategy_registry import StrategyRegistry, StrategyTransitionResult
from .transfer_guard import TransferGuard

logger = logging.getLogger(__name__)


def _entry_principals(caller: str, receiver: Optional[str]) -> tuple[str, ...]:
    """Депозит сдвигает lock receiver-а, поэтому чужой receiver тоже подписывает вызов."""
    if not receiver or receiver == caller:
        return (caller,)
    return (caller, receiver)


class StrategyVaultContract:
    """
    Strategy vault: tokenized pool с deposit lock и стратегиями.

    Args:
        env: Среда исполнения host-а
        asset_token: Базовый актив (его address должен совпасть с VaultConfig.asset)
        address: Адрес контракта vault (держатель idle assets)
        share_address: Адрес share токена (default "<address>:shares")

    Example:
        >>> env = Env(timestamp=1_000)
        >>> env.mock_all_auths()
        >>> usdc = AssetToken(env, "usdc")
        >>> vault = StrategyVaultContract(env, usdc)
        >>> vault.initialize({"lock_duration": 3600, "admin": "admin", "asset": "usdc"})
    """

    def __init__(
        self,
        env: Env,
        asset_token: AssetToken,
        address: str = "vault",
        share_address: Optional[str] = None,
    ):
        self.env = env
        self.address = validate_address(address, "vault address")
        self.asset_token = asset_token
        self.shares = FungibleToken(env, share_address or f"{self.address}:shares")

        self.storage = VaultStorage(env.storage, self.address)
        self.locks = LockManager(self.storage)
        self.ledger = VaultLedger(
            env, self.storage, self.shares, self.asset_token, self.locks, self.address
        )
        self.guard = TransferGuard(env, self.shares, self.locks)
        self.registry = StrategyRegistry(env, self.storage, self.ledger)

    # =========================================================================
    # INVOCATION SCOPE
    # =========================================================================

    @contextmanager
    def _invocation(
        self, operation: str, *principals: str, require_initialized: bool = True
    ) -> Iterator[None]:
        with self.env.invoke(operation):
            try:
                if require_initialized and not self.storage.is_initialized():
                    raise NotInitializedError(f"vault {self.address} is not initialized")
                for principal in principals:
                    self.env.require_auth(principal)
                yield
            except Exception as exc:
                logger.warning(
                    "Vault operation %s failed: %s", operation, exc,
                    extra={
                        "event": "vault.operation_failed",
                        "operation": operation,
                        "error": type(exc).__name__,
                        "code": getattr(exc, "code", None),
                    },
                )
                raise

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    def initialize(self, config: Union[VaultConfig, dict[str, Any]]) -> VaultConfig:
        """
        Однократная инициализация vault.

        Args:
            config: VaultConfig или dict (проходит JSON Schema + Pydantic)

        Returns:
            Принятая конфигурация

        Raises:
            AlreadyInitializedError: Повторная инициализация
            ValueError: config.asset не совпадает с asset_token, vault указан стратегией
        """
        if isinstance(config, dict):
            config = load_vault_config(config)

        with self._invocation("initialize", require_initialized=False):
            if self.storage.is_initialized():
                raise AlreadyInitializedError(f"vault {self.address} is already initialized")
            if config.asset != self.asset_token.address:
                raise ValueError(
                    f"config asset {config.asset} does not match asset token "
                    f"{self.asset_token.address}"
                )
            if self.address in config.strategies:
                raise ValueError("vault cannot be its own strategy")

            self.storage.set_admin(config.admin)
            self.storage.set_asset(config.asset)
            self.storage.set_lock_duration(config.lock_duration)
            self.storage.set_total_assets(0)
            self.storage.set_idle_assets(0)
            self.shares.set_metadata(config.name, config.symbol, config.decimals)

            for strategy in config.strategies:
                self.registry.register(strategy)

            self.storage.set_initialized()
            self.env.emit(
                InitializedEvent(
                    kind=EventKind.INITIALIZED,
                    ts=self.env.ledger_timestamp(),
                    admin=config.admin,
                    asset=config.asset,
                    lock_duration=config.lock_duration,
                )
            )

        logger.info(
            "Vault initialized",
            extra={
                "event": "vault.initialized",
                "vault": self.address,
                "admin": config.admin,
                "asset": config.asset,
                "lock_duration": config.lock_duration,
                "strategies": list(config.strategies),
            },
        )
        return config

    # =========================================================================
    # USER OPERATIONS
    # =========================================================================

    def deposit(self, caller: str, assets: int, receiver: Optional[str] = None) -> int:
        """Внесение assets → выпущенные shares (lock receiver-а сдвигается)."""
        with self._invocation("deposit", *_entry_principals(caller, receiver)):
            return self.ledger.deposit(caller, assets, receiver)

    def mint(self, caller: str, shares: int, receiver: Optional[str] = None) -> int:
        """Выпуск shares → списанные assets (lock receiver-а сдвигается)."""
        with self._invocation("mint", *_entry_principals(caller, receiver)):
            return self.ledger.mint(caller, shares, receiver)

    def withdraw(
        self,
        caller: str,
        assets: int,
        receiver: Optional[str] = None,
        owner: Optional[str] = None,
    ) -> int:
        """Вывод assets → сожжённые shares. Требует unlocked owner."""
        with self._invocation("withdraw", caller):
            return self.ledger.withdraw(caller, assets, receiver, owner)

    def redeem(
        self,
        caller: str,
        shares: int,
        receiver: Optional[str] = None,
        owner: Optional[str] = None,
    ) -> int:
        """Погашение shares → выплаченные assets. Требует unlocked owner."""
        with self._invocation("redeem", caller):
            return self.ledger.redeem(caller, shares, receiver, owner)

    def transfer(self, caller: str, to: str, shares: int) -> None:
        with self._invocation("transfer", caller):
            self.guard.transfer(caller, to, shares)

    def transfer_from(self, spender: str, owner: str, to: str, shares: int) -> None:
        with self._invocation("transfer_from", spender):
            self.guard.transfer_from(spender, owner, to, shares)

    def approve(self, owner: str, spender: str, shares: int) -> None:
        with self._invocation("approve", owner):
            self.guard.approve(owner, spender, shares)

    # =========================================================================
    # ADMIN OPERATIONS
    # =========================================================================

    def authorize_strategy(self, admin: str, strategy: str) -> StrategyTransitionResult:
        with self._invocation("authorize_strategy", admin):
            return self.registry.authorize(admin, strategy)

    def deauthorize_strategy(self, admin: str, strategy: str) -> StrategyTransitionResult:
        with self._invocation("deauthorize_strategy", admin):
            return self.registry.deauthorize(admin, strategy)

    def write_down_strategy(self, admin: str, strategy: str, assets: int) -> int:
        """Фиксация убытка стратегии → оставшийся deployed principal."""
        with self._invocation("write_down_strategy", admin):
            return self.registry.write_down(admin, strategy, assets)

    # =========================================================================
    # STRATEGY OPERATIONS
    # =========================================================================

    def strategy_withdraw(self, strategy: str, assets: int) -> int:
        """Стратегия забирает idle assets → новый net flow."""
        with self._invocation("strategy_withdraw", strategy):
            return self.registry.strategy_withdraw(strategy, assets)

    def strategy_deposit(self, strategy: str, assets: int) -> int:
        """Стратегия возвращает assets → новый net flow."""
        with self._invocation("strategy_deposit", strategy):
            return self.registry.strategy_deposit(strategy, assets)

    # =========================================================================
    # VIEWS
    # =========================================================================

    def total_assets(self) -> int:
        return self.ledger.total_assets()

    def idle_assets(self) -> int:
        return self.ledger.idle_assets()

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def balance_of(self, account: str) -> int:
        return self.shares.balance_of(account)

    def allowance(self, owner: str, spender: str) -> int:
        return self.shares.allowance(owner, spender)

    def name(self) -> str:
        return self.shares.name()

    def symbol(self) -> str:
        return self.shares.symbol()

    def decimals(self) -> int:
        return self.shares.decimals()

    def convert_to_shares(self, assets: int) -> int:
        return self.ledger.convert_to_shares(assets)

    def convert_to_assets(self, shares: int) -> int:
        return self.ledger.convert_to_assets(shares)

    def preview_deposit(self, assets: int) -> int:
        return self.ledger.preview_deposit(assets)

    def preview_mint(self, shares: int) -> int:
        return self.ledger.preview_mint(shares)

    def preview_withdraw(self, assets: int) -> int:
        return self.ledger.preview_withdraw(assets)

    def preview_redeem(self, shares: int) -> int:
        return self.ledger.preview_redeem(shares)

    def max_withdraw(self, owner: str) -> int:
        return self.ledger.max_withdraw(owner, self.env.ledger_timestamp())

    def max_redeem(self, owner: str) -> int:
        return self.ledger.max_redeem(owner, self.env.ledger_timestamp())

    def is_locked(self, account: str) -> bool:
        return self.locks.is_locked(account, self.env.ledger_timestamp())

    def unlock_time(self, account: str) -> Optional[int]:
        return self.locks.unlock_time(account)

    def lock_status(self, account: str) -> LockStatus:
        return self.locks.status(account, self.env.ledger_timestamp())

    def lock_duration(self) -> int:
        return self.locks.lock_duration()

    def admin(self) -> str:
        return self.storage.get_admin()

    def asset(self) -> str:
        return self.storage.get_asset()

    def strategy_net_flow(self, strategy: str) -> int:
        """Net flow стратегии (0 для неизвестной)."""
        return self.registry.net_flow(strategy)

    def get_strategy(self, strategy: str) -> StrategyEntry:
        return self.registry.entry(strategy)

    def strategies(self) -> list[StrategyEntry]:
        return self.registry.entries()

    def is_strategy_authorized(self, strategy: str) -> bool:
        return self.registry.is_authorized(strategy)

    def snapshot(self) -> VaultSnapshot:
        """
        Полный снапшот учёта vault.

        Raises:
            NotInitializedError: vault не инициализирован
            pydantic.ValidationError: нарушено total_assets == idle + deployed
        """
        return VaultSnapshot(
            ts=self.env.ledger_timestamp(),
            admin=self.storage.get_admin(),
            asset=self.storage.get_asset(),
            lock_duration=self.storage.get_lock_duration(),
            total_supply=self.total_supply(),
            total_assets=self.total_assets(),
            idle_assets=self.idle_assets(),
            deployed_assets=self.registry.deployed_total(),
            strategies=self.registry.entries(),
        )
