"""
Env — среда исполнения host-а

Предоставляет ядру:
- Ledger clock (timestamp, секунды)
- require_auth(principal) — проверку криптографической авторизации вызова
- Event sink (emit) с буферизацией до commit
- Diagnostic sink (emit_diagnostic) — записи, переживающие rollback
- Атомарный scope вызова (invoke): all-or-nothing по storage и событиям

Модель исполнения: вызовы сериализованы, без потоков и async. Вложенный
invoke присоединяется к внешнему scope.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from strategy_vault.core.domain.events import EventKind, VaultEvent
from strategy_vault.core.domain.units import U64_MAX, validate_address, validate_timestamp

from .storage import HostStorage

logger = logging.getLogger(__name__)


class AuthorizationError(Exception):
    """Principal не авторизовал текущий вызов."""

    code = 4039

    def __init__(self, principal: str):
        super().__init__(f"[{self.code}] {principal} did not authorize the invocation")
        self.principal = principal


class Env:
    """
    Среда исполнения (ledger + storage + auth + events).

    Args:
        timestamp: Начальный ledger timestamp (секунды)
        storage: Хранилище (по умолчанию новое HostStorage)
    """

    def __init__(self, timestamp: int = 0, storage: HostStorage | None = None):
        self.storage = storage or HostStorage()
        self._timestamp = validate_timestamp(timestamp)

        # Опубликованные (committed) события
        self.events: list[VaultEvent] = []
        # Диагностические записи (не откатываются)
        self.diagnostics: list[VaultEvent] = []

        self._pending: list[VaultEvent] = []
        self._depth = 0

        self._mock_all_auths = False
        self._authorized: list[str] = []

    # =========================================================================
    # LEDGER CLOCK
    # =========================================================================

    def ledger_timestamp(self) -> int:
        """Текущий ledger timestamp (секунды)."""
        return self._timestamp

    def set_timestamp(self, timestamp: int) -> None:
        """
        Установка ledger timestamp.

        Raises:
            ValueError: Если время идёт назад
        """
        validate_timestamp(timestamp)
        if timestamp < self._timestamp:
            raise ValueError(
                f"ledger time cannot go backwards: {timestamp} < {self._timestamp}"
            )
        self._timestamp = timestamp

    def advance(self, seconds: int) -> int:
        """Сдвиг ledger времени вперёд; возвращает новый timestamp."""
        if seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {seconds}")
        self.set_timestamp(min(self._timestamp + seconds, U64_MAX))
        return self._timestamp

    # =========================================================================
    # AUTHORIZATION
    # =========================================================================

    def mock_all_auths(self, enabled: bool = True) -> None:
        """Считать авторизованным любой principal (тестовый режим host-а)."""
        self._mock_all_auths = enabled

    @contextmanager
    def authorize(self, *principals: str) -> Iterator[None]:
        """
        Scope, в котором перечисленные principals авторизовали вызов.

        Example:
            with env.authorize("alice"):
                vault.deposit("alice", 100)
        """
        for principal in principals:
            validate_address(principal, "principal")
        self._authorized.extend(principals)
        try:
            yield
        finally:
            del self._authorized[len(self._authorized) - len(principals):]

    def require_auth(self, principal: str) -> None:
        """
        Проверка авторизации principal.

        Raises:
            AuthorizationError: Если principal не авторизовал вызов
        """
        if self._mock_all_auths or principal in self._authorized:
            return
        raise AuthorizationError(principal)

    # =========================================================================
    # EVENTS
    # =========================================================================

    def emit(self, event: VaultEvent) -> None:
        """
        Публикация события.

        Внутри invoke событие буферизуется и публикуется только при commit.
        """
        if self._depth > 0:
            self._pending.append(event)
        else:
            self.events.append(event)

    def emit_diagnostic(self, event: VaultEvent) -> None:
        """Диагностическая запись: сохраняется даже при rollback вызова."""
        self.diagnostics.append(event)

    def events_of(self, kind: EventKind) -> list[VaultEvent]:
        """Опубликованные события заданного типа."""
        return [e for e in self.events if e.kind == kind]

    # =========================================================================
    # ATOMIC INVOCATION
    # =========================================================================

    @property
    def in_invocation(self) -> bool:
        return self._depth > 0

    @contextmanager
    def invoke(self, operation: str = "invoke") -> Iterator[None]:
        """
        Атомарный scope вызова.

        Внешний scope снимает snapshot storage; при любом исключении
        storage восстанавливается, буфер событий сбрасывается, исключение
        пробрасывается без изменений.
        """
        if self._depth > 0:
            # Вложенный вызов присоединяется к внешнему scope
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshot = self.storage.snapshot()
        self._pending = []
        self._depth = 1
        try:
            yield
        except BaseException:
            self.storage.restore(snapshot)
            dropped = len(self._pending)
            self._pending = []
            logger.debug(
                "Invocation rolled back",
                extra={"event": "host.rollback", "operation": operation, "dropped_events": dropped},
            )
            raise
        else:
            self.events.extend(self._pending)
            self._pending = []
        finally:
            self._depth = 0
