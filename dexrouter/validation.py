"""Request validation shared by the quoting and entrypoint layers."""

from __future__ import annotations

from collections.abc import Sequence

from dexrouter.constants import MIN_PATH_LENGTH
from dexrouter.errors import DegenerateOrder, InvalidAmount, InvalidPath
from dexrouter.models.types import is_valid_address, normalize_address
from dexrouter.safe_int import is_uint256


def validate_path(path: Sequence[str], max_length: int | None = None) -> list[str]:
    """Check a swap path and return it normalized.

    Only consecutive tokens must differ; a token may reappear later in the path.
    max_length caps the number of tokens; None accepts any length.

    Raises:
        InvalidPath: If the path is too short or too long, holds an invalid
            address, or two consecutive tokens are the same
    """
    if isinstance(path, str):
        raise InvalidPath("Path must be a sequence of addresses, not a string")
    if len(path) < MIN_PATH_LENGTH:
        raise InvalidPath(f"Path needs at least {MIN_PATH_LENGTH} tokens, got {len(path)}")
    if max_length is not None and len(path) > max_length:
        raise InvalidPath(f"Path has {len(path)} tokens, maximum is {max_length}")

    normalized = []
    for i, token in enumerate(path):
        if not is_valid_address(token):
            raise InvalidPath(f"Invalid address in path[{i}]: {token!r}")
        normalized.append(normalize_address(token))

    for i in range(len(normalized) - 1):
        if normalized[i] == normalized[i + 1]:
            raise InvalidPath(f"Hop {i} swaps {normalized[i]} for itself")

    return normalized


def validate_pair(token_a: str, token_b: str) -> tuple[str, str]:
    """Check a liquidity pair and return both tokens normalized.

    Raises:
        InvalidPath: If either address is invalid
        DegenerateOrder: If both tokens are the same
    """
    for name, token in (("token_a", token_a), ("token_b", token_b)):
        if not is_valid_address(token):
            raise InvalidPath(f"Invalid {name} address: {token!r}")
    a, b = normalize_address(token_a), normalize_address(token_b)
    if a == b:
        raise DegenerateOrder(f"Identical tokens in pair: {a}")
    return a, b


def validate_amount(name: str, amount: int, *, allow_zero: bool = False) -> int:
    """Check that an amount is a uint256 and, unless allowed, non-zero.

    Raises:
        InvalidAmount: If the amount is not an int in range
    """
    if not is_uint256(amount):
        raise InvalidAmount(f"{name} must be a uint256 integer, got {amount!r}")
    if amount == 0 and not allow_zero:
        raise InvalidAmount(f"{name} must be positive")
    return amount
