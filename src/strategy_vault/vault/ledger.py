"""Vault Ledger — конверсия assets ↔ shares и операции deposit/mint/withdraw/redeem.

Политика округления (всегда в пользу пула, никогда в пользу вызывающего):
- deposit  : shares = floor(assets * supply / total_assets)
- mint     : assets = ceil(shares * total_assets / supply)
- withdraw : shares = ceil(assets * supply / total_assets)
- redeem   : assets = floor(shares * total_assets / supply)

При total_supply == 0 курс 1:1: первый депозитор засевает пул по номиналу.
Если shares в обращении есть, а total_assets == 0 (полное списание убытка),
выпуск запрещён (InsolventPoolError), а выход ничего не выплачивает.

Ledger — единственный мутатор total supply, total assets и share-балансов.
total_assets = idle_assets + Σ deployed(strategy).
"""

import logging
from typing import Optional

from strategy_vault.core.domain.errors import (
    InsufficientBalanceError,
    InsolventPoolError,
    InsufficientLiquidityError,
    ZeroAmountError,
)
from strategy_vault.core.domain.events import DepositEvent, EventKind, WithdrawEvent
from strategy_vault.core.domain.units import I128_MAX, validate_address, validate_amount
from strategy_vault.core.math.fixed_point import Rounding, mul_div
from strategy_vault.host.env import Env
from strategy_vault.host.token import AssetToken, FungibleToken

from .lock_manager import LockManager
from .storage import VaultStorage

logger = logging.getLogger(__name__)


class VaultLedger:
    """Учёт shares и assets vault.

    Args:
        env: Среда исполнения (ledger clock, events)
        storage: Accessor storage vault
        shares: Share токен (базовый fungible capability)
        asset: Базовый актив
        locks: Lock Manager
        vault_address: Адрес контракта vault (держатель idle assets)
    """

    def __init__(
        self,
        env: Env,
        storage: VaultStorage,
        shares: FungibleToken,
        asset: AssetToken,
        locks: LockManager,
        vault_address: str,
    ):
        self.env = env
        self.storage = storage
        self.shares = shares
        self.asset = asset
        self.locks = locks
        self.vault_address = vault_address

    # =========================================================================
    # VIEWS
    # =========================================================================

    def total_assets(self) -> int:
        return self.storage.get_total_assets()

    def idle_assets(self) -> int:
        return self.storage.get_idle_assets()

    def total_supply(self) -> int:
        return self.shares.total_supply()

    def convert_to_shares(self, assets: int, rounding: Rounding = Rounding.FLOOR) -> int:
        """
        Конверсия assets → shares по текущему курсу.

        Args:
            assets: Сумма актива
            rounding: Направление округления (default FLOOR)

        Returns:
            Количество shares (1:1 для пустого пула, 0 при total_assets == 0)
        """
        validate_amount(assets, "assets")
        supply = self.total_supply()
        total_assets = self.total_assets()

        if supply == 0:
            return assets
        if total_assets == 0:
            return 0

        return mul_div(assets, supply, total_assets, rounding)

    def convert_to_assets(self, shares: int, rounding: Rounding = Rounding.FLOOR) -> int:
        """
        Конверсия shares → assets по текущему курсу.

        Args:
            shares: Количество shares
            rounding: Направление округления (default FLOOR)

        Returns:
            Сумма актива (1:1 при total_supply == 0)
        """
        validate_amount(shares, "shares")
        supply = self.total_supply()

        if supply == 0:
            return shares

        return mul_div(shares, self.total_assets(), supply, rounding)

    def preview_deposit(self, assets: int) -> int:
        return self.convert_to_shares(assets, Rounding.FLOOR)

    def preview_mint(self, shares: int) -> int:
        validate_amount(shares, "shares")
        self._assert_issuable()
        return self.convert_to_assets(shares, Rounding.CEIL)

    def preview_withdraw(self, assets: int) -> int:
        return self.convert_to_shares(assets, Rounding.CEIL)

    def preview_redeem(self, shares: int) -> int:
        return self.convert_to_assets(shares, Rounding.FLOOR)

    def max_withdraw(self, owner: str, now: int) -> int:
        """Максимум assets к withdraw: 0 пока owner locked, иначе ограничено idle."""
        if self.locks.is_locked(owner, now):
            return 0
        value = self.convert_to_assets(self.shares.balance_of(owner), Rounding.FLOOR)
        return min(value, self.idle_assets())

    def max_redeem(self, owner: str, now: int) -> int:
        """Максимум shares к redeem: 0 пока owner locked или total_assets == 0, иначе ограничено idle."""
        if self.locks.is_locked(owner, now):
            return 0
        if self.total_assets() == 0:
            return 0
        balance = self.shares.balance_of(owner)
        if self.convert_to_assets(balance, Rounding.FLOOR) <= self.idle_assets():
            return balance
        return min(balance, self.convert_to_shares(self.idle_assets(), Rounding.FLOOR))

    # =========================================================================
    # ENTRY: DEPOSIT / MINT
    # =========================================================================

    def deposit(self, caller: str, assets: int, receiver: Optional[str] = None) -> int:
        """
        Внесение assets, выпуск shares receiver-у (floor).

        Args:
            caller: Плательщик assets
            assets: Сумма актива (> 0)
            receiver: Получатель shares (default caller)

        Returns:
            Выпущенные shares

        Raises:
            ZeroAmountError: assets == 0 или выпуск округляется до 0 shares
            InsolventPoolError: shares в обращении при total_assets == 0
            InsufficientBalanceError: У caller недостаточно актива
        """
        validate_address(caller, "caller")
        receiver = validate_address(receiver or caller, "receiver")
        validate_amount(assets, "assets")
        if assets == 0:
            raise ZeroAmountError("deposit assets must be positive")

        self._assert_issuable()
        shares = self.preview_deposit(assets)
        if shares == 0:
            raise ZeroAmountError(f"deposit of {assets} assets mints zero shares")

        self._enter(caller, receiver, assets, shares, EventKind.DEPOSIT)
        return shares

    def mint(self, caller: str, shares: int, receiver: Optional[str] = None) -> int:
        """
        Выпуск точного количества shares за assets (ceil).

        Returns:
            Списанные с caller assets

        Raises:
            ZeroAmountError: shares == 0
            InsolventPoolError: shares в обращении при total_assets == 0
            InsufficientBalanceError: У caller недостаточно актива
        """
        validate_address(caller, "caller")
        receiver = validate_address(receiver or caller, "receiver")
        validate_amount(shares, "shares")
        if shares == 0:
            raise ZeroAmountError("mint shares must be positive")

        assets = self.preview_mint(shares)

        self._enter(caller, receiver, assets, shares, EventKind.MINT)
        return assets

    def _assert_issuable(self) -> None:
        supply = self.total_supply()
        if supply > 0 and self.total_assets() == 0:
            raise InsolventPoolError(
                f"{supply} shares outstanding against zero total assets"
            )

    def _enter(
        self, caller: str, receiver: str, assets: int, shares: int, kind: EventKind
    ) -> None:
        now = self.env.ledger_timestamp()

        total_assets = self.total_assets() + assets
        if total_assets > I128_MAX:
            raise OverflowError(f"total assets {total_assets} exceeds I128_MAX")

        self.asset.transfer(caller, self.vault_address, assets)
        self.shares.mint_to(receiver, shares)

        self.storage.set_total_assets(total_assets)
        self.storage.set_idle_assets(self.idle_assets() + assets)

        # Lock ставится тому, кто получил shares
        self.locks.record_deposit(receiver, now)

        self.env.emit(
            DepositEvent(
                kind=kind,
                ts=now,
                caller=caller,
                receiver=receiver,
                assets=assets,
                shares=shares,
            )
        )
        logger.info(
            "Vault %s", kind.value,
            extra={
                "event": f"vault.{kind.value}",
                "caller": caller,
                "receiver": receiver,
                "assets": assets,
                "shares": shares,
                "unlock_time": self.locks.unlock_time(receiver),
            },
        )

    # =========================================================================
    # STRATEGY BOOKING
    # =========================================================================
    # Вызываются только Strategy Registry после проверки авторизации.

    def book_strategy_outflow(self, strategy: str, assets: int) -> None:
        """
        Перемещение idle assets к стратегии. total_assets не меняется:
        средства по-прежнему принадлежат vault.

        Raises:
            InsufficientLiquidityError: assets > idle assets
        """
        idle = self.idle_assets()
        if assets > idle:
            raise InsufficientLiquidityError(
                f"strategy withdraw of {assets} exceeds idle assets {idle}"
            )

        self.asset.transfer(self.vault_address, strategy, assets)
        self.storage.set_idle_assets(idle - assets)

    def book_strategy_inflow(self, strategy: str, assets: int, profit: int) -> None:
        """
        Возврат assets от стратегии; profit (часть сверх погашенного
        principal) увеличивает total_assets и, значит, цену share.
        """
        total_assets = self.total_assets() + profit
        if total_assets > I128_MAX:
            raise OverflowError(f"total assets {total_assets} exceeds I128_MAX")

        self.asset.transfer(strategy, self.vault_address, assets)
        self.storage.set_idle_assets(self.idle_assets() + assets)
        self.storage.set_total_assets(total_assets)

    def book_strategy_loss(self, assets: int) -> None:
        """Списание убытка стратегии: total_assets уменьшается, idle не меняется."""
        self.storage.set_total_assets(self.total_assets() - assets)

    # =========================================================================
    # EXIT: WITHDRAW / REDEEM
    # =========================================================================

    def withdraw(
        self,
        caller: str,
        assets: int,
        receiver: Optional[str] = None,
        owner: Optional[str] = None,
    ) -> int:
        """
        Вывод точной суммы assets, сжигание shares owner-а (ceil).

        Args:
            caller: Инициатор (owner или spender с allowance)
            assets: Сумма к выводу
            receiver: Получатель assets (default caller)
            owner: Владелец shares (default caller)

        Returns:
            Сожжённые shares

        Raises:
            LockedError: owner в lock window
            ZeroAmountError: assets == 0
            InsufficientBalanceError: shares owner-а < требуемых
            InsufficientLiquidityError: assets > idle assets
            InsufficientAllowanceError: caller != owner и allowance недостаточен
        """
        validate_address(caller, "caller")
        receiver = validate_address(receiver or caller, "receiver")
        owner = validate_address(owner or caller, "owner")
        validate_amount(assets, "assets")

        self.locks.assert_unlocked(owner, self.env.ledger_timestamp())
        if assets == 0:
            raise ZeroAmountError("withdraw assets must be positive")

        shares = self.preview_withdraw(assets)

        self._exit(caller, receiver, owner, assets, shares, EventKind.WITHDRAW)
        return shares

    def redeem(
        self,
        caller: str,
        shares: int,
        receiver: Optional[str] = None,
        owner: Optional[str] = None,
    ) -> int:
        """
        Погашение точного количества shares за assets (floor).

        Returns:
            Выплаченные assets

        Raises:
            LockedError: owner в lock window
            ZeroAmountError: shares == 0 или выплата округляется до 0
            InsufficientBalanceError: shares owner-а < shares
            InsufficientLiquidityError: выплата > idle assets
        """
        validate_address(caller, "caller")
        receiver = validate_address(receiver or caller, "receiver")
        owner = validate_address(owner or caller, "owner")
        validate_amount(shares, "shares")

        self.locks.assert_unlocked(owner, self.env.ledger_timestamp())
        if shares == 0:
            raise ZeroAmountError("redeem shares must be positive")

        assets = self.preview_redeem(shares)
        if assets == 0:
            raise ZeroAmountError(f"redeem of {shares} shares yields zero assets")

        self._exit(caller, receiver, owner, assets, shares, EventKind.REDEEM)
        return assets

    def _exit(
        self,
        caller: str,
        receiver: str,
        owner: str,
        assets: int,
        shares: int,
        kind: EventKind,
    ) -> None:
        balance = self.shares.balance_of(owner)
        if balance < shares:
            raise InsufficientBalanceError(
                f"{owner} holds {balance} shares, {kind.value} requires {shares}"
            )

        idle = self.idle_assets()
        if assets > idle:
            raise InsufficientLiquidityError(
                f"{kind.value} of {assets} assets exceeds idle assets {idle}"
            )

        if caller != owner:
            self.shares.spend_allowance(owner, caller, shares)

        self.shares.burn_from(owner, shares)
        self.asset.transfer(self.vault_address, receiver, assets)

        self.storage.set_total_assets(self.total_assets() - assets)
        self.storage.set_idle_assets(idle - assets)

        # Полный выход: last-deposit больше не нужен
        if self.shares.balance_of(owner) == 0:
            self.locks.clear(owner)

        now = self.env.ledger_timestamp()
        self.env.emit(
            WithdrawEvent(
                kind=kind,
                ts=now,
                caller=caller,
                receiver=receiver,
                owner=owner,
                assets=assets,
                shares=shares,
            )
        )
        logger.info(
            "Vault %s", kind.value,
            extra={
                "event": f"vault.{kind.value}",
                "caller": caller,
                "receiver": receiver,
                "owner": owner,
                "assets": assets,
                "shares": shares,
            },
        )
