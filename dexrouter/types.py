"""Call-scoped request and result types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LiquidityRequest:
    """Desired and minimum amounts for adding liquidity to a pair."""

    token_a: str
    token_b: str
    amount_a_desired: int
    amount_b_desired: int
    amount_a_min: int = 0
    amount_b_min: int = 0


@dataclass(frozen=True)
class LiquidityAmounts:
    """Ratio-respecting amounts to deposit, in request (A, B) order."""

    amount_a: int
    amount_b: int


@dataclass(frozen=True)
class LiquidityProvision:
    """Result of an add-liquidity entrypoint."""

    amount_a: int
    amount_b: int
    liquidity: int


@dataclass(frozen=True)
class LiquidityRemoval:
    """Result of a remove-liquidity entrypoint, in request (A, B) order."""

    amount_a: int
    amount_b: int


@dataclass(frozen=True)
class SwapExecution:
    """Result of a swap entrypoint.

    `amounts` is the quote the swap was validated against (one entry per path
    token). `amount_out` is what the path actually delivered, which can differ
    from `amounts[-1]` if pool state changed between quoting and execution.
    """

    path: tuple[str, ...]
    amounts: tuple[int, ...]
    amount_in: int
    amount_out: int

    @property
    def is_multihop(self) -> bool:
        return len(self.path) > 2


__all__ = [
    "LiquidityRequest",
    "LiquidityAmounts",
    "LiquidityProvision",
    "LiquidityRemoval",
    "SwapExecution",
]
