"""Общие fixtures: среда host-а, базовый актив, инициализированный vault."""

import pytest

from strategy_vault.host import AssetToken, Env
from strategy_vault.vault import StrategyVaultContract

# =============================================================================
# CONSTANTS
# =============================================================================

START_TS = 1_700_000_000
LOCK_DURATION = 3_600

ADMIN = "admin"
ALICE = "alice"
BOB = "bob"
CAROL = "carol"
STRATEGY = "strategy-a"
OTHER_STRATEGY = "strategy-b"

USER_FUNDING = 1_000_000


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def env():
    """Среда с авторизацией любого principal."""
    env = Env(timestamp=START_TS)
    env.mock_all_auths()
    return env


@pytest.fixture
def asset(env):
    return AssetToken(env, "usdc")


@pytest.fixture
def vault_config():
    return {
        "lock_duration": LOCK_DURATION,
        "admin": ADMIN,
        "asset": "usdc",
        "strategies": [STRATEGY],
    }


@pytest.fixture
def vault(env, asset, vault_config):
    """Инициализированный vault с одной авторизованной стратегией."""
    contract = StrategyVaultContract(env, asset)
    contract.initialize(vault_config)
    return contract


@pytest.fixture
def funded(asset):
    """Пользователи и стратегии с балансом актива."""
    for account in (ALICE, BOB, CAROL, STRATEGY, OTHER_STRATEGY):
        asset.mint(account, USER_FUNDING)
    return asset
