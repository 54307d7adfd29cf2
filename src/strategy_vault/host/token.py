"""
Token capabilities host-а

- FungibleToken — базовый fungible токен (shares vault): балансы, total supply,
  allowances, метаданные. Без проверки lock: её добавляет Transfer Guard.
- AssetToken — базовый актив vault (внешний токен-контракт).

Оба токена хранят состояние в HostStorage среды под собственным namespace
(адрес токена), поэтому атомарный rollback Env.invoke покрывает и их.
"""

from strategy_vault.core.domain.errors import (
    InsufficientAllowanceError,
    InsufficientBalanceError,
)
from strategy_vault.core.domain.units import I128_MAX, validate_address, validate_amount

from .env import Env


# =============================================================================
# STORAGE KEYS
# =============================================================================


def _balance_key(token: str, account: str) -> tuple[str, str, str]:
    return (token, "balance", account)


def _supply_key(token: str) -> tuple[str, str]:
    return (token, "total_supply")


def _allowance_key(token: str, owner: str, spender: str) -> tuple[str, str, str, str]:
    return (token, "allowance", owner, spender)


def _metadata_key(token: str) -> tuple[str, str]:
    return (token, "metadata")


# =============================================================================
# FUNGIBLE TOKEN (SHARES)
# =============================================================================


class FungibleToken:
    """
    Базовый fungible токен.

    Инвариант: Σ balance_of(account) == total_supply()

    Args:
        env: Среда исполнения
        address: Адрес (identity) токена
    """

    def __init__(self, env: Env, address: str):
        self.env = env
        self.address = validate_address(address, "token address")

    # Метаданные ---------------------------------------------------------------

    def set_metadata(self, name: str, symbol: str, decimals: int) -> None:
        self.env.storage.set(_metadata_key(self.address), (name, symbol, decimals))

    def name(self) -> str:
        return self._metadata()[0]

    def symbol(self) -> str:
        return self._metadata()[1]

    def decimals(self) -> int:
        return self._metadata()[2]

    def _metadata(self) -> tuple[str, str, int]:
        return self.env.storage.get(_metadata_key(self.address), ("", "", 0))

    # Балансы ------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        return self.env.storage.get(_balance_key(self.address, account), 0)

    def total_supply(self) -> int:
        return self.env.storage.get(_supply_key(self.address), 0)

    def raw_transfer(self, from_account: str, to_account: str, amount: int) -> None:
        """
        Перемещение баланса без проверки lock.

        Raises:
            InsufficientBalanceError: Если баланс from_account < amount
        """
        validate_address(from_account, "from")
        validate_address(to_account, "to")
        validate_amount(amount)

        balance = self.balance_of(from_account)
        if balance < amount:
            raise InsufficientBalanceError(
                f"{from_account} balance {balance} < transfer amount {amount}"
            )
        if from_account == to_account:
            return

        self._set_balance(from_account, balance - amount)
        self._set_balance(to_account, self.balance_of(to_account) + amount)

    def mint_to(self, account: str, amount: int) -> None:
        """Выпуск amount на account (увеличивает total supply)."""
        validate_address(account)
        validate_amount(amount)

        supply = self.total_supply() + amount
        if supply > I128_MAX:
            raise OverflowError(f"total supply {supply} exceeds I128_MAX")

        self.env.storage.set(_supply_key(self.address), supply)
        self._set_balance(account, self.balance_of(account) + amount)

    def burn_from(self, account: str, amount: int) -> None:
        """
        Сжигание amount с account.

        Raises:
            InsufficientBalanceError: Если баланс account < amount
        """
        validate_amount(amount)

        balance = self.balance_of(account)
        if balance < amount:
            raise InsufficientBalanceError(
                f"{account} balance {balance} < burn amount {amount}"
            )

        self._set_balance(account, balance - amount)
        self.env.storage.set(_supply_key(self.address), self.total_supply() - amount)

    def _set_balance(self, account: str, amount: int) -> None:
        key = _balance_key(self.address, account)
        # Нулевые балансы не храним
        if amount == 0:
            self.env.storage.remove(key)
        else:
            self.env.storage.set(key, amount)

    # Allowances ---------------------------------------------------------------

    def approve(self, owner: str, spender: str, amount: int) -> None:
        validate_address(owner, "owner")
        validate_address(spender, "spender")
        validate_amount(amount)

        key = _allowance_key(self.address, owner, spender)
        if amount == 0:
            self.env.storage.remove(key)
        else:
            self.env.storage.set(key, amount)

    def allowance(self, owner: str, spender: str) -> int:
        return self.env.storage.get(_allowance_key(self.address, owner, spender), 0)

    def spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        """
        Списание allowance.

        Raises:
            InsufficientAllowanceError: Если allowance < amount
        """
        validate_amount(amount)

        current = self.allowance(owner, spender)
        if current < amount:
            raise InsufficientAllowanceError(
                f"{spender} allowance {current} on {owner} < {amount}"
            )
        self.approve(owner, spender, current - amount)

    def holders(self) -> dict[str, int]:
        """Все ненулевые балансы (для аудита инвариантов)."""
        snapshot = self.env.storage.snapshot()
        return {
            key[2]: value
            for key, value in snapshot.items()
            if isinstance(key, tuple)
            and len(key) == 3
            and key[0] == self.address
            and key[1] == "balance"
        }


# =============================================================================
# ASSET TOKEN
# =============================================================================


class AssetToken:
    """
    Базовый актив vault (внешний токен-контракт host-а).

    Args:
        env: Среда исполнения
        address: Identity актива (должна совпадать с VaultConfig.asset)
    """

    def __init__(self, env: Env, address: str):
        self.env = env
        self.address = validate_address(address, "asset address")

    def balance_of(self, account: str) -> int:
        return self.env.storage.get(_balance_key(self.address, account), 0)

    def transfer(self, from_account: str, to_account: str, amount: int) -> None:
        """
        Перевод актива.

        Raises:
            InsufficientBalanceError: Если баланс from_account < amount
        """
        validate_amount(amount)

        balance = self.balance_of(from_account)
        if balance < amount:
            raise InsufficientBalanceError(
                f"{from_account} asset balance {balance} < {amount}"
            )
        if from_account == to_account:
            return

        self.env.storage.set(_balance_key(self.address, from_account), balance - amount)
        self.env.storage.set(
            _balance_key(self.address, to_account), self.balance_of(to_account) + amount
        )

    def mint(self, account: str, amount: int) -> None:
        """Выпуск актива (funding-операция host-а, аналог issuer mint)."""
        validate_address(account)
        validate_amount(amount)
        self.env.storage.set(
            _balance_key(self.address, account), self.balance_of(account) + amount
        )
