"""
Strategy Vault — учётное ядро токенизированного пула активов.

Пакеты:
- core/   : доменные модели, ошибки, fixed-point математика, JSON контракты
- host/   : среда исполнения (storage, ledger clock, auth, события, токены)
- vault/  : ledger, lock manager, transfer guard, strategy registry, контракт
"""

__version__ = "0.1.0"
