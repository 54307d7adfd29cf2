"""Host — внешние коллабораторы ядра vault.

- Env: ledger clock, require_auth, event sink, атомарный invoke
- HostStorage: персистентное key-value хранилище
- FungibleToken / AssetToken: токен-capabilities
"""

from .env import AuthorizationError, Env
from .storage import HostStorage
from .token import AssetToken, FungibleToken

__all__ = [
    "Env",
    "AuthorizationError",
    "HostStorage",
    "FungibleToken",
    "AssetToken",
]
