"""Transfer Guard — перевод shares с проверкой deposit lock отправителя.

Оборачивает raw_transfer базового токена:
- transfer: проверяется lock caller-а (lock получателя не важен)
- transfer_from: проверяется lock owner-а, затем списывается allowance spender-а

Получатель перевода не блокируется: lock ставит только deposit/mint.
"""

import logging

from strategy_vault.core.domain.errors import LockedError, ZeroAmountError
from strategy_vault.core.domain.events import ApprovalEvent, EventKind, TransferEvent
from strategy_vault.core.domain.units import validate_address, validate_amount
from strategy_vault.host.env import Env
from strategy_vault.host.token import FungibleToken

from .lock_manager import LockManager

logger = logging.getLogger(__name__)


class TransferGuard:
    """Lock-aware перевод shares."""

    def __init__(self, env: Env, shares: FungibleToken, locks: LockManager):
        self.env = env
        self.shares = shares
        self.locks = locks

    def transfer(self, caller: str, to: str, shares: int) -> None:
        """
        Перевод shares caller → to.

        Raises:
            LockedError: caller в lock window
            ZeroAmountError: shares == 0
            InsufficientBalanceError: баланс caller-а < shares
        """
        self._move(spender=None, owner=caller, to=to, shares=shares)

    def transfer_from(self, spender: str, owner: str, to: str, shares: int) -> None:
        """
        Перевод shares owner → to от имени spender-а.

        Raises:
            LockedError: owner в lock window
            InsufficientAllowanceError: allowance spender-а < shares
        """
        validate_address(spender, "spender")
        self._move(spender=spender, owner=owner, to=to, shares=shares)

    def approve(self, owner: str, spender: str, shares: int) -> None:
        """Выставление allowance (перезапись)."""
        self.shares.approve(owner, spender, shares)
        self.env.emit(
            ApprovalEvent(
                kind=EventKind.APPROVE,
                ts=self.env.ledger_timestamp(),
                owner=owner,
                spender=spender,
                shares=shares,
            )
        )

    def _move(self, spender: str | None, owner: str, to: str, shares: int) -> None:
        validate_address(owner, "owner")
        validate_address(to, "to")
        validate_amount(shares, "shares")

        now = self.env.ledger_timestamp()
        status = self.locks.status(owner, now)
        if status.locked:
            blocked = TransferEvent(
                kind=EventKind.TRANSFER_BLOCKED,
                ts=now,
                from_account=owner,
                to_account=to,
                shares=shares,
                unlock_time=status.unlock_time,
            )
            # Диагностика переживает rollback вызова
            self.env.emit_diagnostic(blocked)
            logger.warning(
                "Share transfer blocked by deposit lock",
                extra={
                    "event": "vault.transfer_blocked",
                    "from": owner,
                    "to": to,
                    "shares": shares,
                    "unlock_time": status.unlock_time,
                },
            )
            raise LockedError(f"{owner} shares {status.details}")

        if shares == 0:
            raise ZeroAmountError("transfer shares must be positive")

        if spender is not None and spender != owner:
            self.shares.spend_allowance(owner, spender, shares)

        self.shares.raw_transfer(owner, to, shares)

        self.env.emit(
            TransferEvent(
                kind=EventKind.TRANSFER,
                ts=now,
                from_account=owner,
                to_account=to,
                shares=shares,
            )
        )
        logger.debug(
            "Share transfer",
            extra={"event": "vault.transfer", "from": owner, "to": to, "shares": shares},
        )
