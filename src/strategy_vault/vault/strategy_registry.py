"""Strategy Registry & P&L Tracker — авторизация стратегий и учёт их потоков.

Жизненный цикл записи:
    UNREGISTERED → AUTHORIZED ⇄ DEAUTHORIZED

Учёт на стратегию:
- net_flow  = Σ strategy_deposit − Σ strategy_withdraw (знаковый, бессрочный)
- deployed  = principal у стратегии, ещё не возвращённый и не списанный

Влияние на total_assets:
- strategy_withdraw: не меняет (перемещение idle → стратегия)
- strategy_deposit : + (assets − погашенный principal), т.е. реализованная прибыль
- write_down       : − списанный principal (реализованный убыток)

Registry — единственный мутатор net flow, deployed и множества авторизованных.
"""

import logging
from dataclasses import dataclass

from strategy_vault.core.domain.errors import (
    InsufficientBalanceError,
    UnauthorizedError,
    UnauthorizedStrategyError,
    ZeroAmountError,
)
from strategy_vault.core.domain.events import (
    EventKind,
    StrategyFlowEvent,
    StrategyStatusEvent,
)
from strategy_vault.core.domain.strategy import StrategyEntry, StrategyStatus
from strategy_vault.core.domain.units import (
    validate_address,
    validate_amount,
    validate_signed_amount,
)
from strategy_vault.host.env import Env

from .ledger import VaultLedger
from .storage import VaultStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrategyTransitionResult:
    """Результат перехода состояния стратегии."""

    strategy: str
    new_status: StrategyStatus
    previous_status: StrategyStatus

    # Диагностика
    transition_occurred: bool
    transition_reason: str


def check_admin(caller: str, admin: str) -> None:
    """
    Проверка, что caller — admin. Admin передаётся явно (из storage),
    а не берётся из неявного контекста.

    Raises:
        UnauthorizedError: caller != admin
    """
    if caller != admin:
        raise UnauthorizedError(f"{caller} is not the vault admin")


class StrategyRegistry:
    """Реестр стратегий и P&L трекер."""

    def __init__(self, env: Env, storage: VaultStorage, ledger: VaultLedger):
        self.env = env
        self.storage = storage
        self.ledger = ledger

    # =========================================================================
    # VIEWS
    # =========================================================================

    def status(self, strategy: str) -> StrategyStatus:
        authorized = self.storage.get_strategy_authorized(strategy)
        if authorized is None:
            return StrategyStatus.UNREGISTERED
        return StrategyStatus.AUTHORIZED if authorized else StrategyStatus.DEAUTHORIZED

    def is_authorized(self, strategy: str) -> bool:
        return self.status(strategy) == StrategyStatus.AUTHORIZED

    def net_flow(self, strategy: str) -> int:
        return self.storage.get_strategy_net_flow(strategy)

    def deployed(self, strategy: str) -> int:
        return self.storage.get_strategy_deployed(strategy)

    def entry(self, strategy: str) -> StrategyEntry:
        return StrategyEntry(
            strategy=strategy,
            status=self.status(strategy),
            net_flow=self.net_flow(strategy),
            deployed=self.deployed(strategy),
        )

    def entries(self) -> list[StrategyEntry]:
        """Все зарегистрированные стратегии в порядке регистрации."""
        return [self.entry(strategy) for strategy in self.storage.get_strategies()]

    def deployed_total(self) -> int:
        return sum(self.deployed(strategy) for strategy in self.storage.get_strategies())

    # =========================================================================
    # ADMIN: AUTHORIZE / DEAUTHORIZE
    # =========================================================================

    def register(self, strategy: str) -> StrategyTransitionResult:
        """Регистрация при инициализации (без admin-проверки и события)."""
        validate_address(strategy, "strategy")
        return self._set_authorized(strategy, True)

    def authorize(self, caller: str, strategy: str) -> StrategyTransitionResult:
        """
        Авторизация стратегии admin-ом. Незарегистрированная стратегия
        регистрируется с net flow 0.

        Raises:
            UnauthorizedError: caller не admin
            ValueError: strategy совпадает с vault или admin
        """
        admin = self.storage.get_admin()
        check_admin(caller, admin)
        validate_address(strategy, "strategy")
        if strategy == self.ledger.vault_address:
            raise ValueError("vault cannot be its own strategy")
        if strategy == admin:
            raise ValueError(f"admin {admin} cannot be an authorized strategy")

        result = self._set_authorized(strategy, True)
        if result.transition_occurred:
            self.env.emit(
                StrategyStatusEvent(
                    kind=EventKind.STRATEGY_AUTHORIZED,
                    ts=self.env.ledger_timestamp(),
                    admin=caller,
                    strategy=strategy,
                )
            )
            logger.info(
                "Strategy authorized",
                extra={
                    "event": "vault.strategy_authorized",
                    "strategy": strategy,
                    "previous_status": result.previous_status.value,
                },
            )
        return result

    def deauthorize(self, caller: str, strategy: str) -> StrategyTransitionResult:
        """
        Деавторизация стратегии admin-ом. Запись и net flow сохраняются.

        Raises:
            UnauthorizedError: caller не admin
            UnauthorizedStrategyError: стратегия не зарегистрирована
        """
        check_admin(caller, self.storage.get_admin())
        if self.status(strategy) == StrategyStatus.UNREGISTERED:
            raise UnauthorizedStrategyError(f"{strategy} is not a registered strategy")

        result = self._set_authorized(strategy, False)
        if result.transition_occurred:
            self.env.emit(
                StrategyStatusEvent(
                    kind=EventKind.STRATEGY_DEAUTHORIZED,
                    ts=self.env.ledger_timestamp(),
                    admin=caller,
                    strategy=strategy,
                )
            )
            logger.info(
                "Strategy deauthorized",
                extra={
                    "event": "vault.strategy_deauthorized",
                    "strategy": strategy,
                    "net_flow": self.net_flow(strategy),
                    "deployed": self.deployed(strategy),
                },
            )
        return result

    def _set_authorized(self, strategy: str, authorized: bool) -> StrategyTransitionResult:
        previous = self.status(strategy)
        target = StrategyStatus.AUTHORIZED if authorized else StrategyStatus.DEAUTHORIZED

        if previous == target:
            return StrategyTransitionResult(
                strategy=strategy,
                new_status=previous,
                previous_status=previous,
                transition_occurred=False,
                transition_reason=f"already_{target.value.lower()}",
            )

        if previous == StrategyStatus.UNREGISTERED:
            self.storage.set_strategies(self.storage.get_strategies() + (strategy,))
            self.storage.set_strategy_net_flow(strategy, 0)
            self.storage.set_strategy_deployed(strategy, 0)

        self.storage.set_strategy_authorized(strategy, authorized)

        return StrategyTransitionResult(
            strategy=strategy,
            new_status=target,
            previous_status=previous,
            transition_occurred=True,
            transition_reason=f"{previous.value.lower()}_to_{target.value.lower()}",
        )

    def _require_authorized(self, strategy: str) -> None:
        if not self.is_authorized(strategy):
            raise UnauthorizedStrategyError(
                f"{strategy} is not an authorized strategy ({self.status(strategy).value})"
            )

    # =========================================================================
    # STRATEGY FLOWS
    # =========================================================================

    def strategy_withdraw(self, strategy: str, assets: int) -> int:
        """
        Стратегия забирает idle assets. total_assets и total_supply не меняются.

        Returns:
            Новый net flow стратегии

        Raises:
            UnauthorizedStrategyError: стратегия не авторизована
            ZeroAmountError: assets == 0
            InsufficientLiquidityError: assets > idle assets
        """
        validate_address(strategy, "strategy")
        validate_amount(assets, "assets")
        self._require_authorized(strategy)
        if assets == 0:
            raise ZeroAmountError("strategy withdraw assets must be positive")

        net_flow = validate_signed_amount(self.net_flow(strategy) - assets, "net_flow")
        deployed = validate_amount(self.deployed(strategy) + assets, "deployed")

        self.ledger.book_strategy_outflow(strategy, assets)
        self.storage.set_strategy_net_flow(strategy, net_flow)
        self.storage.set_strategy_deployed(strategy, deployed)

        self._emit_flow(EventKind.STRATEGY_WITHDRAW, strategy, assets, net_flow, deployed)
        return net_flow

    def strategy_deposit(self, strategy: str, assets: int) -> int:
        """
        Стратегия возвращает assets. Сначала гасится развёрнутый principal,
        остаток — реализованная прибыль, он увеличивает total_assets.

        Returns:
            Новый net flow стратегии

        Raises:
            UnauthorizedStrategyError: стратегия не авторизована
            ZeroAmountError: assets == 0
            InsufficientBalanceError: у стратегии недостаточно актива
        """
        validate_address(strategy, "strategy")
        validate_amount(assets, "assets")
        self._require_authorized(strategy)
        if assets == 0:
            raise ZeroAmountError("strategy deposit assets must be positive")

        net_flow = validate_signed_amount(self.net_flow(strategy) + assets, "net_flow")
        deployed = self.deployed(strategy)
        repaid = min(assets, deployed)
        profit = assets - repaid

        self.ledger.book_strategy_inflow(strategy, assets, profit)
        self.storage.set_strategy_net_flow(strategy, net_flow)
        self.storage.set_strategy_deployed(strategy, deployed - repaid)

        self._emit_flow(
            EventKind.STRATEGY_DEPOSIT, strategy, assets, net_flow, deployed - repaid
        )
        return net_flow

    def write_down(self, caller: str, strategy: str, assets: int) -> int:
        """
        Admin фиксирует убыток стратегии: часть deployed principal
        считается потерянной. net flow не меняется (он учитывает только
        фактические потоки).

        Returns:
            Оставшийся deployed principal стратегии

        Raises:
            UnauthorizedError: caller не admin
            UnauthorizedStrategyError: стратегия не зарегистрирована
            ZeroAmountError: assets == 0
            InsufficientBalanceError: assets > deployed
        """
        check_admin(caller, self.storage.get_admin())
        validate_amount(assets, "assets")
        if self.status(strategy) == StrategyStatus.UNREGISTERED:
            raise UnauthorizedStrategyError(f"{strategy} is not a registered strategy")
        if assets == 0:
            raise ZeroAmountError("write-down assets must be positive")

        deployed = self.deployed(strategy)
        if assets > deployed:
            raise InsufficientBalanceError(
                f"write-down of {assets} exceeds {strategy} deployed principal {deployed}"
            )

        self.ledger.book_strategy_loss(assets)
        self.storage.set_strategy_deployed(strategy, deployed - assets)

        self._emit_flow(
            EventKind.STRATEGY_WRITE_DOWN,
            strategy,
            assets,
            self.net_flow(strategy),
            deployed - assets,
        )
        return deployed - assets

    def _emit_flow(
        self, kind: EventKind, strategy: str, assets: int, net_flow: int, deployed: int
    ) -> None:
        total_assets = self.ledger.total_assets()
        self.env.emit(
            StrategyFlowEvent(
                kind=kind,
                ts=self.env.ledger_timestamp(),
                strategy=strategy,
                assets=assets,
                net_flow=net_flow,
                deployed=deployed,
                total_assets=total_assets,
            )
        )
        log = logger.warning if kind == EventKind.STRATEGY_WRITE_DOWN else logger.info
        log(
            "Strategy %s", kind.value,
            extra={
                "event": f"vault.{kind.value}",
                "strategy": strategy,
                "assets": assets,
                "net_flow": net_flow,
                "deployed": deployed,
                "total_assets": total_assets,
            },
        )
