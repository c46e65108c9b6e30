"""Simulated fungible tokens, wrapped-native token and native balances."""

from __future__ import annotations

from dexrouter.models.types import normalize_address
from dexrouter.safe_int import UINT256_MAX, S
from dexrouter.sim.ledger import Ledger


class Token:
    """Fungible token kept in a Ledger.

    Transfers report failure by returning False, never by raising. An allowance
    of 2**256 - 1 is treated as unlimited and is not decremented.
    """

    def __init__(self, ledger: Ledger, address: str, symbol: str = "") -> None:
        self.ledger = ledger
        self.address = normalize_address(address, validate=True)
        self.symbol = symbol

    def __repr__(self) -> str:
        return f"Token({self.symbol or self.address})"

    def balance_of(self, owner: str) -> int:
        return self.ledger.balance(self.address, normalize_address(owner))

    def total_supply(self) -> int:
        return self.ledger.supply(self.address)

    def allowance(self, owner: str, spender: str) -> int:
        return self.ledger.allowance(
            self.address, normalize_address(owner), normalize_address(spender)
        )

    def mint(self, owner: str, amount: int) -> None:
        owner = normalize_address(owner)
        self.ledger.set_supply(self.address, (S(self.total_supply()) + amount).value)
        self.ledger.set_balance(self.address, owner, (S(self.balance_of(owner)) + amount).value)

    def burn(self, owner: str, amount: int) -> bool:
        owner = normalize_address(owner)
        balance = self.balance_of(owner)
        if amount > balance:
            return False
        self.ledger.set_balance(self.address, owner, balance - amount)
        self.ledger.set_supply(self.address, self.total_supply() - amount)
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        sender, recipient = normalize_address(sender), normalize_address(recipient)
        balance = self.balance_of(sender)
        if amount < 0 or amount > balance:
            return False
        self.ledger.set_balance(self.address, sender, balance - amount)
        self.ledger.set_balance(
            self.address, recipient, (S(self.balance_of(recipient)) + amount).value
        )
        return True

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        allowance = self.allowance(owner, spender)
        if amount > allowance or amount > self.balance_of(owner):
            return False
        if allowance != UINT256_MAX:
            self.ledger.set_allowance(
                self.address,
                normalize_address(owner),
                normalize_address(spender),
                allowance - amount,
            )
        return self.transfer(owner, recipient, amount)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if amount < 0 or amount > UINT256_MAX:
            return False
        self.ledger.set_allowance(
            self.address, normalize_address(owner), normalize_address(spender), amount
        )
        return True


class NativeBalances:
    """Raw native currency held in a Ledger."""

    def __init__(self, ledger: Ledger) -> None:
        self.ledger = ledger

    def balance_of(self, owner: str) -> int:
        return self.ledger.native_balance(normalize_address(owner))

    def credit(self, owner: str, amount: int) -> None:
        owner = normalize_address(owner)
        self.ledger.set_native_balance(owner, (S(self.balance_of(owner)) + amount).value)

    def debit(self, owner: str, amount: int) -> bool:
        owner = normalize_address(owner)
        balance = self.balance_of(owner)
        if amount < 0 or amount > balance:
            return False
        self.ledger.set_native_balance(owner, balance - amount)
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        if not self.debit(sender, amount):
            return False
        self.credit(recipient, amount)
        return True


class WrappedNativeToken(Token):
    """Token backed 1:1 by native currency."""

    def __init__(
        self, ledger: Ledger, address: str, native: NativeBalances, symbol: str = "WNATIVE"
    ) -> None:
        super().__init__(ledger, address, symbol)
        self.native = native

    def wrap(self, owner: str, amount: int) -> bool:
        if not self.native.debit(owner, amount):
            return False
        self.mint(owner, amount)
        return True

    def unwrap(self, owner: str, amount: int) -> bool:
        if not self.burn(owner, amount):
            return False
        self.native.credit(owner, amount)
        return True


__all__ = ["Token", "NativeBalances", "WrappedNativeToken"]
