"""Guarded calls into external collaborators.

Any exception raised by a pool, token or registry, or a False success flag, is
reported as ExternalCallFailure with the original error chained. RouterErrors
raised by a collaborator pass through unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from dexrouter.errors import ExternalCallFailure, RouterError
from dexrouter.interfaces import FungibleAsset, NativeCurrency, WrappedNative
from dexrouter.safe_int import is_uint256

R = TypeVar("R")


def guarded(description: str, fn: Callable[..., R], *args: Any) -> R:
    """Invoke a collaborator, translating its failures into ExternalCallFailure."""
    try:
        return fn(*args)
    except RouterError:
        raise
    except Exception as err:
        raise ExternalCallFailure(f"{description} failed: {err}") from err


def checked_amount(description: str, value: object) -> int:
    """Validate an amount returned by a collaborator."""
    if not is_uint256(value):
        raise ExternalCallFailure(f"{description} returned a non-uint256 amount: {value!r}")
    return value  # type: ignore[return-value]


def require_success(description: str, fn: Callable[..., Any], *args: Any) -> None:
    """Invoke a collaborator that signals success with True."""
    ok = guarded(description, fn, *args)
    if ok is not True:
        raise ExternalCallFailure(f"{description} reported failure")


def safe_transfer(token: FungibleAsset, sender: str, recipient: str, amount: int) -> None:
    require_success(f"transfer({token.address})", token.transfer, sender, recipient, amount)


def safe_transfer_from(
    token: FungibleAsset, spender: str, owner: str, recipient: str, amount: int
) -> None:
    require_success(
        f"transfer_from({token.address})", token.transfer_from, spender, owner, recipient, amount
    )


def safe_approve(token: FungibleAsset, owner: str, spender: str, amount: int) -> None:
    require_success(f"approve({token.address})", token.approve, owner, spender, amount)


def safe_native_transfer(native: NativeCurrency, sender: str, recipient: str, amount: int) -> None:
    require_success("native transfer", native.transfer, sender, recipient, amount)


def safe_wrap(wrapped: WrappedNative, owner: str, amount: int) -> None:
    require_success(f"wrap({wrapped.address})", wrapped.wrap, owner, amount)


def safe_unwrap(wrapped: WrappedNative, owner: str, amount: int) -> None:
    require_success(f"unwrap({wrapped.address})", wrapped.unwrap, owner, amount)


__all__ = [
    "checked_amount",
    "guarded",
    "require_success",
    "safe_transfer",
    "safe_transfer_from",
    "safe_approve",
    "safe_native_transfer",
    "safe_wrap",
    "safe_unwrap",
]
