"""Lock Manager — deposit time-lock аккаунтов.

Lock state — чистая функция (now, last_deposit, lock_duration):
    locked = now < last_deposit + lock_duration

Отдельного флага "locked" в storage нет. Учитывается только ПОСЛЕДНИЙ
deposit/mint: любое пополнение (даже частичное) сдвигает окно заново.
Получение shares через transfer lock не выставляет.
"""

from dataclasses import dataclass
from typing import Optional

from strategy_vault.core.domain.errors import LockedError
from strategy_vault.core.domain.units import (
    saturating_add_u64,
    validate_address,
    validate_timestamp,
)

from .storage import VaultStorage


@dataclass(frozen=True)
class LockStatus:
    """Результат проверки lock аккаунта."""

    account: str
    locked: bool

    last_deposit: Optional[int]
    unlock_time: Optional[int]
    remaining_seconds: int

    # Детали
    details: str


class LockManager:
    """Вычисление и проверка deposit lock.

    Единственный мутатор last-deposit timestamps.
    """

    def __init__(self, storage: VaultStorage):
        self.storage = storage

    def lock_duration(self) -> int:
        return self.storage.get_lock_duration()

    def record_deposit(self, account: str, now: int) -> None:
        """Фиксация deposit/mint аккаунта в момент now (сдвигает lock window)."""
        validate_address(account, "account")
        validate_timestamp(now, "now")
        self.storage.set_last_deposit(account, now)

    def clear(self, account: str) -> None:
        """Удаление timestamp при полном выходе аккаунта из vault."""
        self.storage.remove_last_deposit(account)

    def unlock_time(self, account: str) -> Optional[int]:
        """last_deposit + lock_duration; None если deposit-ов не было."""
        last_deposit = self.storage.get_last_deposit(account)
        if last_deposit is None:
            return None
        return saturating_add_u64(last_deposit, self.lock_duration())

    def is_locked(self, account: str, now: int) -> bool:
        unlock_time = self.unlock_time(account)
        # Нет истории deposit-ов (shares получены через transfer) → не locked
        if unlock_time is None:
            return False
        return now < unlock_time

    def status(self, account: str, now: int) -> LockStatus:
        """Полный статус lock аккаунта (для views и диагностики)."""
        last_deposit = self.storage.get_last_deposit(account)
        unlock_time = self.unlock_time(account)

        if unlock_time is None:
            return LockStatus(
                account=account,
                locked=False,
                last_deposit=None,
                unlock_time=None,
                remaining_seconds=0,
                details="no_deposit_history",
            )

        locked = now < unlock_time
        remaining = unlock_time - now if locked else 0

        return LockStatus(
            account=account,
            locked=locked,
            last_deposit=last_deposit,
            unlock_time=unlock_time,
            remaining_seconds=remaining,
            details=(
                f"locked until {unlock_time} ({remaining}s remaining)"
                if locked
                else f"unlocked since {unlock_time}"
            ),
        )

    def assert_unlocked(self, account: str, now: int) -> None:
        """
        Raises:
            LockedError: Если аккаунт сейчас в lock window
        """
        status = self.status(account, now)
        if status.locked:
            raise LockedError(f"{account} shares {status.details}")
