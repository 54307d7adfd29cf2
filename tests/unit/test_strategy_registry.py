"""
Тесты для Strategy Registry & P&L Tracker

Coverage:
- Переходы UNREGISTERED → AUTHORIZED ⇄ DEAUTHORIZED
- Admin-проверка
- strategy_withdraw / strategy_deposit: net flow, deployed, total assets
- write_down: реализация убытка
- Edge cases
"""

import pytest

from strategy_vault.core.domain import (
    EventKind,
    InsufficientBalanceError,
    InsufficientLiquidityError,
    StrategyStatus,
    UnauthorizedError,
    UnauthorizedStrategyError,
    ZeroAmountError,
)
from strategy_vault.vault import check_admin
from tests.conftest import ADMIN, ALICE, OTHER_STRATEGY, STRATEGY


@pytest.fixture
def registry(vault, funded):
    vault.ledger.deposit(ALICE, 100)
    return vault.registry


class TestStrategyTransitions:
    """Тесты жизненного цикла записи стратегии."""

    def test_init_strategy_authorized(self, registry):
        entry = registry.entry(STRATEGY)
        assert entry.status == StrategyStatus.AUTHORIZED
        assert entry.net_flow == 0

    def test_authorize_registers_unknown(self, env, registry):
        result = registry.authorize(ADMIN, OTHER_STRATEGY)

        assert result.new_status == StrategyStatus.AUTHORIZED
        assert result.previous_status == StrategyStatus.UNREGISTERED
        assert result.transition_occurred
        assert result.transition_reason == "unregistered_to_authorized"
        assert [e.strategy for e in registry.entries()] == [STRATEGY, OTHER_STRATEGY]
        assert env.events_of(EventKind.STRATEGY_AUTHORIZED)[-1].strategy == OTHER_STRATEGY

    def test_authorize_twice_is_noop(self, env, registry):
        result = registry.authorize(ADMIN, STRATEGY)

        assert not result.transition_occurred
        assert result.transition_reason == "already_authorized"
        assert env.events_of(EventKind.STRATEGY_AUTHORIZED) == []

    def test_deauthorize_and_reauthorize(self, registry):
        registry.strategy_withdraw(STRATEGY, 30)

        result = registry.deauthorize(ADMIN, STRATEGY)
        assert result.transition_reason == "authorized_to_deauthorized"
        # Запись и net flow сохраняются
        assert registry.entry(STRATEGY).net_flow == -30

        result = registry.authorize(ADMIN, STRATEGY)
        assert result.previous_status == StrategyStatus.DEAUTHORIZED
        assert registry.is_authorized(STRATEGY)
        assert registry.net_flow(STRATEGY) == -30

    def test_deauthorize_unregistered(self, registry):
        with pytest.raises(UnauthorizedStrategyError):
            registry.deauthorize(ADMIN, "unknown")

    def test_non_admin_rejected(self, registry):
        with pytest.raises(UnauthorizedError):
            registry.authorize(ALICE, OTHER_STRATEGY)
        with pytest.raises(UnauthorizedError):
            registry.deauthorize(ALICE, STRATEGY)

    def test_vault_cannot_be_strategy(self, vault, registry):
        with pytest.raises(ValueError):
            registry.authorize(ADMIN, vault.address)

    def test_admin_cannot_be_strategy(self, registry):
        """Admin не становится стратегией и после инициализации."""
        with pytest.raises(ValueError, match="admin"):
            registry.authorize(ADMIN, ADMIN)
        assert registry.status(ADMIN) == StrategyStatus.UNREGISTERED

    def test_check_admin_uses_passed_identity(self):
        check_admin("root", "root")
        with pytest.raises(UnauthorizedError):
            check_admin("root", "admin")


class TestStrategyWithdraw:

    def test_moves_idle_to_strategy(self, vault, registry):
        before = vault.asset_token.balance_of(STRATEGY)

        net_flow = registry.strategy_withdraw(STRATEGY, 50)

        assert net_flow == -50
        assert registry.deployed(STRATEGY) == 50
        assert vault.idle_assets() == 50
        assert vault.total_assets() == 100
        assert vault.total_supply() == 100
        assert vault.asset_token.balance_of(STRATEGY) - before == 50

    def test_unauthorized_strategy(self, vault, registry):
        with pytest.raises(UnauthorizedStrategyError):
            registry.strategy_withdraw(ALICE, 10)
        assert vault.idle_assets() == 100

    def test_authorization_checked_before_amount(self, registry):
        with pytest.raises(UnauthorizedStrategyError):
            registry.strategy_withdraw(ALICE, 0)

    def test_deauthorized_strategy(self, registry):
        registry.deauthorize(ADMIN, STRATEGY)
        with pytest.raises(UnauthorizedStrategyError):
            registry.strategy_withdraw(STRATEGY, 10)

    def test_zero_amount(self, registry):
        with pytest.raises(ZeroAmountError):
            registry.strategy_withdraw(STRATEGY, 0)

    def test_exceeds_idle(self, registry):
        with pytest.raises(InsufficientLiquidityError):
            registry.strategy_withdraw(STRATEGY, 101)


class TestStrategyDeposit:

    def test_profit_raises_total_assets(self, vault, env, registry):
        registry.strategy_withdraw(STRATEGY, 50)
        net_flow = registry.strategy_deposit(STRATEGY, 70)

        assert net_flow == 20
        assert registry.deployed(STRATEGY) == 0
        assert vault.total_assets() == 120
        assert vault.idle_assets() == 120

        event = env.events_of(EventKind.STRATEGY_DEPOSIT)[-1]
        assert (event.assets, event.net_flow, event.total_assets) == (70, 20, 120)

    def test_partial_return_repays_principal(self, vault, registry):
        registry.strategy_withdraw(STRATEGY, 50)
        registry.strategy_deposit(STRATEGY, 30)

        assert registry.net_flow(STRATEGY) == -20
        assert registry.deployed(STRATEGY) == 20
        assert vault.total_assets() == 100
        assert vault.idle_assets() == 80

    def test_deposit_without_principal_is_profit(self, vault, registry):
        registry.strategy_deposit(STRATEGY, 5)
        assert vault.total_assets() == 105

    def test_strategy_without_assets(self, registry):
        registry.authorize(ADMIN, "empty-strategy")
        with pytest.raises(InsufficientBalanceError):
            registry.strategy_deposit("empty-strategy", 1)

    def test_unauthorized(self, registry):
        with pytest.raises(UnauthorizedStrategyError):
            registry.strategy_deposit(ALICE, 10)

    def test_net_flow_of_unknown_strategy(self, registry):
        assert registry.net_flow("unknown") == 0


class TestWriteDown:

    def test_realizes_loss(self, vault, env, registry):
        registry.strategy_withdraw(STRATEGY, 50)

        remaining = registry.write_down(ADMIN, STRATEGY, 20)

        assert remaining == 30
        assert vault.total_assets() == 80
        assert vault.idle_assets() == 50
        assert registry.net_flow(STRATEGY) == -50
        assert env.events_of(EventKind.STRATEGY_WRITE_DOWN)[-1].deployed == 30

    def test_lowers_share_price(self, vault, registry):
        registry.strategy_withdraw(STRATEGY, 50)
        registry.write_down(ADMIN, STRATEGY, 50)
        assert vault.convert_to_assets(100) == 50

    def test_exceeds_deployed(self, registry):
        registry.strategy_withdraw(STRATEGY, 10)
        with pytest.raises(InsufficientBalanceError):
            registry.write_down(ADMIN, STRATEGY, 11)

    def test_admin_only(self, registry):
        registry.strategy_withdraw(STRATEGY, 10)
        with pytest.raises(UnauthorizedError):
            registry.write_down(ALICE, STRATEGY, 1)

    def test_deauthorized_strategy_can_be_written_down(self, registry):
        registry.strategy_withdraw(STRATEGY, 10)
        registry.deauthorize(ADMIN, STRATEGY)
        assert registry.write_down(ADMIN, STRATEGY, 10) == 0

    def test_unregistered_strategy(self, registry):
        with pytest.raises(UnauthorizedStrategyError):
            registry.write_down(ADMIN, "unknown", 1)

    def test_zero_amount(self, registry):
        with pytest.raises(ZeroAmountError):
            registry.write_down(ADMIN, STRATEGY, 0)


class TestDeployedTotal:

    def test_total_assets_split(self, vault, registry):
        registry.authorize(ADMIN, OTHER_STRATEGY)
        registry.strategy_withdraw(STRATEGY, 30)
        registry.strategy_withdraw(OTHER_STRATEGY, 20)
        registry.strategy_deposit(OTHER_STRATEGY, 25)

        assert registry.deployed_total() == 30
        assert vault.total_assets() == vault.idle_assets() + registry.deployed_total()
