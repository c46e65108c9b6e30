"""Forward and inverse multi-hop quotes.

Both directions only read pool state. A quote is exact for the state at call
time; it makes no promise about a swap executed later.
"""

from __future__ import annotations

from collections.abc import Sequence

from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from dexrouter.errors import PoolNotFound
from dexrouter.external import checked_amount, guarded
from dexrouter.interfaces import Pool, PoolRegistry
from dexrouter.validation import validate_amount, validate_path


def resolve_hop_pool(registry: PoolRegistry, token_in: str, token_out: str) -> Pool:
    """Return the existing pool for a hop.

    Raises:
        PoolNotFound: If the registry has no pool for the pair
    """
    pool = guarded("resolve_pool", registry.resolve_pool, token_in, token_out)
    if pool is None:
        raise PoolNotFound(f"No pool for {token_in} -> {token_out}")
    return pool


class QuoteEngine:
    """Non-mutating mirror of PathRouter used for estimation and validation."""

    def __init__(
        self, registry: PoolRegistry, config: RouterConfig = DEFAULT_ROUTER_CONFIG
    ) -> None:
        self.registry = registry
        self.config = config

    def amounts_out(self, amount_in: int, path: Sequence[str]) -> list[int]:
        """Quote every intermediate amount for selling exactly `amount_in`.

        Returns:
            List of len(path) amounts; [0] is amount_in, [-1] the path output

        Raises:
            ValidationError: If the path or amount is invalid
            PoolNotFound: If a hop has no pool
        """
        tokens = validate_path(path, self.config.max_path_length)
        validate_amount("amount_in", amount_in)

        amounts = [amount_in]
        for i in range(len(tokens) - 1):
            pool = resolve_hop_pool(self.registry, tokens[i], tokens[i + 1])
            returned = guarded(
                "projected_return", pool.projected_return, tokens[i], tokens[i + 1], amounts[i]
            )
            amounts.append(checked_amount("projected_return", returned))
        return amounts

    def amounts_in(self, amount_out: int, path: Sequence[str]) -> list[int]:
        """Quote every intermediate amount for buying exactly `amount_out`.

        Walks the path backwards from the last token.

        Returns:
            List of len(path) amounts; [-1] is amount_out, [0] the required input

        Raises:
            ValidationError: If the path or amount is invalid
            PoolNotFound: If a hop has no pool
        """
        tokens = validate_path(path, self.config.max_path_length)
        validate_amount("amount_out", amount_out)

        amounts = [0] * len(tokens)
        amounts[-1] = amount_out
        for i in range(len(tokens) - 2, -1, -1):
            pool = resolve_hop_pool(self.registry, tokens[i], tokens[i + 1])
            required = guarded(
                "required_input", pool.required_input, tokens[i], tokens[i + 1], amounts[i + 1]
            )
            amounts[i] = checked_amount("required_input", required)
        return amounts


__all__ = ["QuoteEngine", "resolve_hop_pool"]
