"""
Тесты для Lock Manager

Coverage:
- Окно [T, T + L) locked, t >= T + L unlocked
- Сдвиг окна последним deposit
- Отсутствие истории deposit-ов
- LockStatus детали и насыщение unlock time
"""

import pytest

from strategy_vault.core.domain import U64_MAX, LockedError, NotInitializedError
from strategy_vault.host import HostStorage
from strategy_vault.vault import LockManager, VaultStorage

T = 1_000
L = 3_600


@pytest.fixture
def storage():
    storage = VaultStorage(HostStorage(), "vault")
    storage.set_lock_duration(L)
    return storage


@pytest.fixture
def locks(storage):
    return LockManager(storage)


class TestLockWindow:
    """Lock state как функция (now, last_deposit, lock_duration)"""

    def test_no_history_is_unlocked(self, locks):
        assert not locks.is_locked("alice", T)
        assert locks.unlock_time("alice") is None

    @pytest.mark.parametrize("now", [T, T + 1, T + L - 1])
    def test_locked_inside_window(self, locks, now):
        locks.record_deposit("alice", T)
        assert locks.is_locked("alice", now)

    @pytest.mark.parametrize("now", [T + L, T + L + 1, U64_MAX])
    def test_unlocked_at_and_after_boundary(self, locks, now):
        locks.record_deposit("alice", T)
        assert not locks.is_locked("alice", now)

    def test_later_deposit_resets_window(self, locks):
        locks.record_deposit("alice", T)
        locks.record_deposit("alice", T + 100)

        assert locks.unlock_time("alice") == T + 100 + L
        assert locks.is_locked("alice", T + L)

    def test_zero_lock_duration_never_locks(self, storage, locks):
        storage.set_lock_duration(0)
        locks.record_deposit("alice", T)
        assert not locks.is_locked("alice", T)

    def test_clear_removes_history(self, locks):
        locks.record_deposit("alice", T)
        locks.clear("alice")
        assert locks.unlock_time("alice") is None

    def test_unlock_time_saturates(self, storage, locks):
        storage.set_lock_duration(U64_MAX)
        locks.record_deposit("alice", T)
        assert locks.unlock_time("alice") == U64_MAX


class TestLockStatus:

    def test_status_locked(self, locks):
        locks.record_deposit("alice", T)
        status = locks.status("alice", T + 600)

        assert status.locked
        assert status.last_deposit == T
        assert status.unlock_time == T + L
        assert status.remaining_seconds == L - 600
        assert "locked until" in status.details

    def test_status_unlocked(self, locks):
        locks.record_deposit("alice", T)
        status = locks.status("alice", T + L)

        assert not status.locked
        assert status.remaining_seconds == 0
        assert status.details == f"unlocked since {T + L}"

    def test_status_no_history(self, locks):
        assert locks.status("bob", T).details == "no_deposit_history"


class TestAssertUnlocked:

    def test_raises_when_locked(self, locks):
        locks.record_deposit("alice", T)
        with pytest.raises(LockedError, match="alice"):
            locks.assert_unlocked("alice", T + 1)

    def test_passes_when_unlocked(self, locks):
        locks.record_deposit("alice", T)
        locks.assert_unlocked("alice", T + L)

    def test_lock_duration_required(self):
        locks = LockManager(VaultStorage(HostStorage(), "vault"))
        with pytest.raises(NotInitializedError):
            locks.lock_duration()
