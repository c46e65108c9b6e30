"""Capability interfaces for the router's external collaborators.

The router depends on these protocols only. Pools, tokens, the registry and the
ledger substrate are supplied by the caller; dexrouter.sim provides in-memory
implementations.

Calls that move funds take the acting address explicitly (`owner`, `caller`,
`spender`), since there is no implicit message sender.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable


@runtime_checkable
class FungibleAsset(Protocol):
    """Fungible token with allowance-based transfers.

    Mutating methods return True on success. False (or an exception) is fatal
    to the enclosing router call.
    """

    address: str

    def balance_of(self, owner: str) -> int: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool: ...

    def approve(self, owner: str, spender: str, amount: int) -> bool: ...


@runtime_checkable
class WrappedNative(FungibleAsset, Protocol):
    """Fungible representation of the native currency, convertible 1:1."""

    def wrap(self, owner: str, amount: int) -> bool:
        """Convert `amount` of owner's native currency into wrapped tokens."""
        ...

    def unwrap(self, owner: str, amount: int) -> bool:
        """Convert `amount` of owner's wrapped tokens back into native currency."""
        ...


@runtime_checkable
class NativeCurrency(Protocol):
    """Raw native currency balances (what a call's attached value is paid in)."""

    def balance_of(self, owner: str) -> int: ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool: ...


@runtime_checkable
class Pool(FungibleAsset, Protocol):
    """Two-asset liquidity pool. The pool is also the fungible LP share token.

    token0/token1 are in canonical slot order. The pricing curve is owned by the
    pool; the router only consumes the quotes it exposes.
    """

    token0: str
    token1: str

    def addable_balance(self, token: str) -> int:
        """Reserve of `token` as seen when adding liquidity."""
        ...

    def removable_balance(self, token: str) -> int:
        """Reserve of `token` as seen when removing liquidity."""
        ...

    def projected_return(self, token_in: str, token_out: str, amount_in: int) -> int:
        """Output a swap of `amount_in` would produce now. View; may be 0."""
        ...

    def required_input(self, token_in: str, token_out: str, amount_out: int) -> int:
        """Input needed now to receive at least `amount_out`. View."""
        ...

    def execute_swap(
        self,
        caller: str,
        token_in: str,
        token_out: str,
        amount_in: int,
        min_out: int,
        recipient: str,
        referral: str,
    ) -> int:
        """Pull `amount_in` from caller, send output to recipient, return output."""
        ...

    def provide_liquidity(
        self,
        provider: str,
        amounts: Sequence[int],
        min_amounts: Sequence[int],
    ) -> int:
        """Pull slot-ordered amounts from provider, mint shares to provider."""
        ...

    def remove_liquidity(
        self,
        provider: str,
        liquidity: int,
        min_amounts: Sequence[int],
    ) -> tuple[int, int]:
        """Burn provider's shares, pay out slot-ordered amounts to provider."""
        ...


@runtime_checkable
class PoolRegistry(Protocol):
    """Lookup and on-demand creation of pools by unordered token pair."""

    def resolve_pool(self, token_x: str, token_y: str) -> Pool | None: ...

    def create_pool(self, token_x: str, token_y: str) -> Pool: ...


@runtime_checkable
class TokenDirectory(Protocol):
    """Resolves token addresses to fungible asset handles."""

    def token(self, address: str) -> FungibleAsset: ...


@runtime_checkable
class Substrate(Protocol):
    """Ledger that makes one router call atomic.

    atomic() returns a context manager; if the body raises, every balance change
    made inside it is undone before the exception propagates.
    """

    def atomic(self) -> AbstractContextManager[object]: ...


__all__ = [
    "FungibleAsset",
    "WrappedNative",
    "NativeCurrency",
    "Pool",
    "PoolRegistry",
    "TokenDirectory",
    "Substrate",
]
