"""JSON Schema контракты vault: конфигурация initialize и записи событий."""

from .validators import (
    SCHEMA_DIR,
    ContractValidator,
    SchemaLoader,
    VaultConfigValidator,
    VaultEventValidator,
    load_vault_config,
    validate_vault_config,
    validate_vault_event,
)

__all__ = [
    "SCHEMA_DIR",
    "SchemaLoader",
    "ContractValidator",
    "VaultConfigValidator",
    "VaultEventValidator",
    "validate_vault_config",
    "validate_vault_event",
    "load_vault_config",
]
