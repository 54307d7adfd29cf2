"""
Тесты для Transfer Guard

Coverage:
- Перевод shares разблокированным аккаунтом
- LockedError для отправителя в lock window + диагностика transfer_blocked
- Получатель перевода не блокируется
- transfer_from / approve
"""

import pytest

from strategy_vault.core.domain import (
    EventKind,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    LockedError,
    ZeroAmountError,
)
from tests.conftest import ALICE, BOB, CAROL, LOCK_DURATION, START_TS


@pytest.fixture
def guard(vault, funded):
    vault.ledger.deposit(ALICE, 100)
    return vault.guard


class TestTransfer:

    def test_locked_sender_blocked(self, vault, env, guard):
        with pytest.raises(LockedError):
            guard.transfer(ALICE, BOB, 10)

        assert vault.balance_of(ALICE) == 100
        blocked = env.diagnostics[-1]
        assert blocked.kind == EventKind.TRANSFER_BLOCKED
        assert blocked.unlock_time == START_TS + LOCK_DURATION
        assert env.events_of(EventKind.TRANSFER_BLOCKED) == []

    def test_unlocked_transfer(self, vault, env, guard):
        env.advance(LOCK_DURATION)
        guard.transfer(ALICE, BOB, 40)

        assert vault.balance_of(ALICE) == 60
        assert vault.balance_of(BOB) == 40
        event = env.events_of(EventKind.TRANSFER)[-1]
        assert (event.from_account, event.to_account, event.shares) == (ALICE, BOB, 40)

    def test_recipient_never_locked(self, vault, env, guard):
        env.advance(LOCK_DURATION)
        guard.transfer(ALICE, BOB, 40)

        assert not vault.is_locked(BOB)
        assert vault.unlock_time(BOB) is None
        # Получатель может сразу перевести дальше
        guard.transfer(BOB, CAROL, 40)
        assert vault.balance_of(CAROL) == 40

    def test_transfer_does_not_touch_recipient_lock(self, vault, env, guard):
        """Существующий lock получателя не сдвигается переводом"""
        vault.ledger.deposit(BOB, 10)
        env.advance(LOCK_DURATION - 1)
        bob_unlock = vault.unlock_time(BOB)

        env.advance(1)
        guard.transfer(ALICE, BOB, 5)

        assert vault.unlock_time(BOB) == bob_unlock

    def test_zero_transfer(self, env, guard):
        env.advance(LOCK_DURATION)
        with pytest.raises(ZeroAmountError):
            guard.transfer(ALICE, BOB, 0)

    def test_insufficient_balance(self, env, guard):
        env.advance(LOCK_DURATION)
        with pytest.raises(InsufficientBalanceError):
            guard.transfer(ALICE, BOB, 101)


class TestTransferFrom:

    def test_spends_allowance(self, vault, env, guard):
        guard.approve(ALICE, BOB, 50)
        env.advance(LOCK_DURATION)

        guard.transfer_from(BOB, ALICE, CAROL, 30)

        assert vault.balance_of(CAROL) == 30
        assert vault.allowance(ALICE, BOB) == 20

    def test_owner_lock_checked(self, vault, guard):
        guard.approve(ALICE, BOB, 50)
        with pytest.raises(LockedError):
            guard.transfer_from(BOB, ALICE, CAROL, 30)
        assert vault.allowance(ALICE, BOB) == 50

    def test_insufficient_allowance(self, env, guard):
        env.advance(LOCK_DURATION)
        with pytest.raises(InsufficientAllowanceError):
            guard.transfer_from(BOB, ALICE, CAROL, 1)


class TestApprove:

    def test_approve_overwrites(self, vault, env, guard):
        guard.approve(ALICE, BOB, 50)
        guard.approve(ALICE, BOB, 5)

        assert vault.allowance(ALICE, BOB) == 5
        assert env.events_of(EventKind.APPROVE)[-1].shares == 5
