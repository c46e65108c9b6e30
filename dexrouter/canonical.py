"""Canonical slot ordering for token pairs.

A pool stores its two tokens in a fixed order: the token with the smaller
address magnitude occupies slot 0. Every two-element amount or minimum array
passed to a pool uses that order, so provision and removal must map per-token
values through the same comparison. This module is the only place that
comparison lives.
"""

from __future__ import annotations

from typing import TypeVar

from dexrouter.errors import DegenerateOrder
from dexrouter.models.types import address_value, normalize_address

T = TypeVar("T")


def _precedes(token_x: str, token_y: str) -> bool:
    """True if token_x takes slot 0 in the pair {token_x, token_y}.

    Raises:
        DegenerateOrder: If both tokens are the same
    """
    x, y = address_value(token_x), address_value(token_y)
    if x == y:
        raise DegenerateOrder(f"Identical tokens in pair: {normalize_address(token_x)}")
    return x < y


def sort_tokens(token_x: str, token_y: str) -> tuple[str, str]:
    """Return the pair as (token0, token1), both normalized."""
    x, y = normalize_address(token_x), normalize_address(token_y)
    return (x, y) if _precedes(x, y) else (y, x)


def canonicalize(token_x: str, token_y: str, value_x: T, value_y: T) -> tuple[T, T]:
    """Map per-token values to (slot0, slot1).

    Args:
        token_x: Token that value_x belongs to
        token_y: Token that value_y belongs to
        value_x: Value for token_x
        value_y: Value for token_y

    Returns:
        (value_x, value_y) if token_x precedes token_y, else (value_y, value_x)

    Raises:
        DegenerateOrder: If token_x == token_y
    """
    if _precedes(token_x, token_y):
        return value_x, value_y
    return value_y, value_x


def decanonicalize(token_x: str, token_y: str, slot0: T, slot1: T) -> tuple[T, T]:
    """Recover (value_x, value_y) from slot-ordered values.

    Inverse of canonicalize for the same (token_x, token_y).

    Raises:
        DegenerateOrder: If token_x == token_y
    """
    if _precedes(token_x, token_y):
        return slot0, slot1
    return slot1, slot0


__all__ = ["sort_tokens", "canonicalize", "decanonicalize"]
