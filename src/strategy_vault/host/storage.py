"""
HostStorage — персистентное key-value хранилище host-а

Ключи — любые hashable значения; значения должны быть immutable
(int, str, bool, tuple, None), чтобы snapshot был дешёвой поверхностной
копией. Хранилище эксклюзивно принадлежит host-у; внешних писателей нет.
"""

from typing import Any, Hashable, Mapping


# Sentinel для отличия "нет ключа" от значения None
_MISSING = object()


class HostStorage:
    """
    In-memory хранилище с поддержкой snapshot/restore.

    snapshot/restore используются Env.invoke для атомарного rollback.
    """

    def __init__(self) -> None:
        self._data: dict[Hashable, Any] = {}

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Значение по ключу или default."""
        return self._data.get(key, default)

    def has(self, key: Hashable) -> bool:
        return key in self._data

    def set(self, key: Hashable, value: Any) -> None:
        """
        Запись значения.

        Raises:
            TypeError: Если value mutable (list, dict, set)
        """
        if isinstance(value, (list, dict, set)):
            raise TypeError(
                f"storage values must be immutable, got {type(value).__name__} for {key!r}"
            )
        self._data[key] = value

    def remove(self, key: Hashable) -> None:
        """Удаление ключа (no-op если ключа нет)."""
        self._data.pop(key, None)

    def snapshot(self) -> Mapping[Hashable, Any]:
        """Снапшот всего состояния (поверхностная копия)."""
        return dict(self._data)

    def restore(self, snapshot: Mapping[Hashable, Any]) -> None:
        """Полное восстановление состояния из снапшота."""
        self._data = dict(snapshot)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key, _MISSING) is not _MISSING
