"""
JSON Schema контракты vault

Две схемы (Draft 2020-12, поставляются в пакете, core/contracts/schema/):
- vault_config.json — конфигурация initialize (внешний вход, dict/JSON)
- vault_event.json  — записи доменных событий (VaultEvent.to_record())

Конфигурация проверяется дважды: структура по JSON Schema, затем доменные
правила в VaultConfig (Pydantic). События проверяются при аудите журнала.
"""

import json
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

import jsonschema
from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from strategy_vault.core.domain.config import VaultConfig
from strategy_vault.core.domain.events import VaultEvent

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Кэширующий загрузчик схем из каталога пакета.

    Args:
        schema_dir: Каталог со схемами (default SCHEMA_DIR)
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or SCHEMA_DIR
        if not self._schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: dict[str, dict[str, Any]] = {}

    def available(self) -> list[str]:
        """Имена схем в каталоге (без .json)."""
        return sorted(path.stem for path in self._schema_dir.glob("*.json"))

    def load_schema(self, schema_name: str) -> dict[str, Any]:
        """
        Схема по имени; при первой загрузке проходит meta-validation.

        Raises:
            FileNotFoundError: Нет файла <schema_name>.json
            ValueError: Файл не является корректной Draft 2020-12 схемой
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"{schema_name}.json is not a Draft 2020-12 schema: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# VALIDATORS
# =============================================================================


class ContractValidator:
    """Проверка записей против одной схемы."""

    schema_name: str = ""

    def __init__(self, loader: SchemaLoader | None = None):
        self.schema = (loader or _SCHEMA_LOADER).load_schema(self.schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, record: Mapping[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: Первое (наиболее релевантное) нарушение
        """
        error = best_match(self.validator.iter_errors(record))
        if error is not None:
            raise error

    def is_valid(self, record: Mapping[str, Any]) -> bool:
        return self.validator.is_valid(record)

    def error_messages(self, record: Mapping[str, Any]) -> list[str]:
        """Все нарушения в виде "path: message", отсортированные по пути."""
        errors = sorted(self.validator.iter_errors(record), key=lambda e: list(e.path))
        return [
            f"{'/'.join(str(p) for p in error.path) or '<root>'}: {error.message}"
            for error in errors
        ]


class VaultConfigValidator(ContractValidator):
    schema_name = "vault_config"


class VaultEventValidator(ContractValidator):
    schema_name = "vault_event"

    def audit(self, events: Iterable[VaultEvent]) -> list[str]:
        """
        Аудит журнала событий.

        Returns:
            Нарушения в виде "#index kind: path: message"; пустой список, если журнал корректен
        """
        violations = []
        for index, event in enumerate(events):
            for message in self.error_messages(event.to_record()):
                violations.append(f"#{index} {event.kind.value}: {message}")
        return violations


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_vault_config(data: Mapping[str, Any]) -> None:
    """
    Raises:
        jsonschema.ValidationError: Конфигурация не соответствует vault_config.json
    """
    VaultConfigValidator().validate(data)


def validate_vault_event(event: Union[VaultEvent, Mapping[str, Any]]) -> None:
    """
    Проверка события (модели или уже сериализованной записи).

    Raises:
        jsonschema.ValidationError: Запись не соответствует vault_event.json
    """
    record = event.to_record() if isinstance(event, VaultEvent) else event
    VaultEventValidator().validate(record)


def load_vault_config(data: Mapping[str, Any]) -> VaultConfig:
    """
    Конфигурация из dict (например, прочитанного из JSON файла).

    Raises:
        jsonschema.ValidationError: Нарушена структура
        pydantic.ValidationError: Нарушены доменные правила VaultConfig
    """
    validate_vault_config(data)
    return VaultConfig.model_validate(dict(data))
