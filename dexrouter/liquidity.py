"""Ratio-respecting amount selection for adding liquidity.

Given what a provider is willing to deposit on each side and the least they
will accept, pick the largest deposit that matches the pool's current reserve
ratio. An empty pool takes both desired amounts as-is and the deposit sets its
initial price.
"""

from __future__ import annotations

import structlog

from dexrouter.errors import (
    InsufficientAAmount,
    InsufficientBAmount,
    InvariantViolation,
)
from dexrouter.external import checked_amount, guarded
from dexrouter.interfaces import Pool, PoolRegistry
from dexrouter.models.types import short
from dexrouter.safe_int import S, SafeIntError
from dexrouter.types import LiquidityAmounts, LiquidityRequest
from dexrouter.validation import validate_amount, validate_pair

logger = structlog.get_logger()


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of B worth `amount_a` of A at the reserve ratio (truncating).

    Raises:
        InvariantViolation: If reserve_a is zero or the product overflows uint256
    """
    try:
        return (S(amount_a) * S(reserve_b) // S(reserve_a)).value
    except SafeIntError as err:
        raise InvariantViolation(
            f"Ratio quote failed for {amount_a} at reserves ({reserve_a}, {reserve_b}): {err}"
        ) from err


def optimal_amounts(
    request: LiquidityRequest,
    reserve_a: int,
    reserve_b: int,
) -> LiquidityAmounts:
    """Select deposit amounts for the given reserves.

    Args:
        request: Desired and minimum amounts
        reserve_a: Pool reserve of token A (addable view)
        reserve_b: Pool reserve of token B (removable view)

    Returns:
        Amounts with amount_a <= amount_a_desired and amount_b <= amount_b_desired,
        each at or above its minimum

    Raises:
        InsufficientBAmount: If matching all of A needs less B than amount_b_min
        InsufficientAAmount: If matching all of B needs less A than amount_a_min
        InvariantViolation: If the ratio math contradicts itself
    """
    if reserve_a == 0 and reserve_b == 0:
        return LiquidityAmounts(request.amount_a_desired, request.amount_b_desired)

    amount_b_optimal = quote(request.amount_a_desired, reserve_a, reserve_b)
    if amount_b_optimal <= request.amount_b_desired:
        if amount_b_optimal < request.amount_b_min:
            raise InsufficientBAmount(
                f"Optimal B {amount_b_optimal} below minimum {request.amount_b_min}"
            )
        return LiquidityAmounts(request.amount_a_desired, amount_b_optimal)

    amount_a_optimal = quote(request.amount_b_desired, reserve_b, reserve_a)
    # b_desired < a_desired * rB / rA implies b_desired * rA / rB <= a_desired
    if amount_a_optimal > request.amount_a_desired:
        raise InvariantViolation(
            f"Optimal A {amount_a_optimal} exceeds desired {request.amount_a_desired}"
        )
    if amount_a_optimal < request.amount_a_min:
        raise InsufficientAAmount(
            f"Optimal A {amount_a_optimal} below minimum {request.amount_a_min}"
        )
    return LiquidityAmounts(amount_a_optimal, request.amount_b_desired)


class LiquidityQuoter:
    """Resolves a pair's pool and computes ratio-respecting deposit amounts."""

    def __init__(self, registry: PoolRegistry) -> None:
        self.registry = registry

    def pool_for(self, token_a: str, token_b: str) -> Pool:
        """Return the pair's pool, creating it if the registry has none."""
        pool = guarded("resolve_pool", self.registry.resolve_pool, token_a, token_b)
        if pool is None:
            pool = guarded("create_pool", self.registry.create_pool, token_a, token_b)
            logger.info("pool_created", token_a=short(token_a), token_b=short(token_b))
        return pool

    def quote(self, request: LiquidityRequest) -> tuple[Pool, LiquidityAmounts]:
        """Compute deposit amounts against the pair's current reserves.

        Creates the pool if the pair has none.

        Returns:
            Tuple of (pool, amounts). The pool is returned so the caller deposits
            into the same pool the amounts were computed for.
        """
        token_a, token_b = _validate(request)
        pool = self.pool_for(token_a, token_b)
        amounts = self._amounts(pool, request, token_a, token_b)
        return pool, amounts

    def preview(self, request: LiquidityRequest) -> tuple[LiquidityAmounts, bool]:
        """Like quote(), but never creates a pool.

        Returns:
            Tuple of (amounts, pool_exists). A missing pool quotes as empty.
        """
        token_a, token_b = _validate(request)
        pool = guarded("resolve_pool", self.registry.resolve_pool, token_a, token_b)
        if pool is None:
            return optimal_amounts(request, 0, 0), False
        return self._amounts(pool, request, token_a, token_b), True

    def _amounts(
        self, pool: Pool, request: LiquidityRequest, token_a: str, token_b: str
    ) -> LiquidityAmounts:
        reserve_a = checked_amount(
            "addable_balance", guarded("addable_balance", pool.addable_balance, token_a)
        )
        reserve_b = checked_amount(
            "removable_balance", guarded("removable_balance", pool.removable_balance, token_b)
        )

        amounts = optimal_amounts(request, reserve_a, reserve_b)
        logger.debug(
            "liquidity_quoted",
            token_a=short(token_a),
            token_b=short(token_b),
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            amount_a=amounts.amount_a,
            amount_b=amounts.amount_b,
        )
        return amounts


def _validate(request: LiquidityRequest) -> tuple[str, str]:
    token_a, token_b = validate_pair(request.token_a, request.token_b)
    validate_amount("amount_a_desired", request.amount_a_desired)
    validate_amount("amount_b_desired", request.amount_b_desired)
    validate_amount("amount_a_min", request.amount_a_min, allow_zero=True)
    validate_amount("amount_b_min", request.amount_b_min, allow_zero=True)
    return token_a, token_b


__all__ = ["quote", "optimal_amounts", "LiquidityQuoter"]
