"""Sequential hop execution along a swap path."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from dexrouter.errors import InsufficientOutputAmount
from dexrouter.external import checked_amount, guarded, safe_approve
from dexrouter.interfaces import PoolRegistry, TokenDirectory
from dexrouter.models.types import short
from dexrouter.quoting import resolve_hop_pool
from dexrouter.routing.types import HopExecution, PathExecution

logger = structlog.get_logger()


class PathRouter:
    """Executes a multi-hop swap one pool at a time.

    The router's own address holds funds between hops: it must already own
    `amount_in` of path[0] when execute() is called. Intermediate outputs are
    delivered back to that address; the last hop pays the recipient directly.

    Hop k+1 spends exactly what hop k returned, so hops run strictly in order.
    """

    def __init__(
        self,
        address: str,
        registry: PoolRegistry,
        tokens: TokenDirectory,
        config: RouterConfig = DEFAULT_ROUTER_CONFIG,
    ) -> None:
        """Initialize the path router.

        Args:
            address: Custody address that pays each hop
            registry: Pool registry; every hop's pool must already exist
            tokens: Token directory used to approve pools
            config: Router configuration (zero-hop policy)
        """
        self.address = address
        self.registry = registry
        self.tokens = tokens
        self.config = config

    def execute(
        self,
        path: Sequence[str],
        amount_in: int,
        recipient: str,
        referral: str,
    ) -> PathExecution:
        """Swap `amount_in` of path[0] along the path, paying path[-1] to recipient.

        No per-hop minimum is enforced (each swap runs with min_out=0); the
        caller checks the path-boundary slippage bound.

        A hop whose projected return is 0 is skipped: nothing moves and 0 is
        carried to every later hop. With config.abort_on_zero_hop the swap is
        rejected at that hop instead.

        Returns:
            PathExecution with the final output and per-hop records

        Raises:
            PoolNotFound: If a hop has no pool
            ExternalCallFailure: If a pool or token call fails
            InsufficientOutputAmount: On a zero-return hop when abort_on_zero_hop is set
        """
        running = amount_in
        hops: list[HopExecution] = []
        last_hop = len(path) - 2

        for i in range(len(path) - 1):
            token_in, token_out = path[i], path[i + 1]
            pool = resolve_hop_pool(self.registry, token_in, token_out)

            projected = 0
            if running > 0:
                projected = checked_amount(
                    "projected_return",
                    guarded(
                        "projected_return", pool.projected_return, token_in, token_out, running
                    ),
                )

            if projected == 0:
                if self.config.abort_on_zero_hop:
                    raise InsufficientOutputAmount(f"Hop {i} ({token_in} -> {token_out}) returns 0")
                logger.warning(
                    "hop_skipped_zero_return",
                    hop=i,
                    pool=short(pool.address),
                    token_in=short(token_in),
                    token_out=short(token_out),
                    amount_in=running,
                )
                hops.append(
                    HopExecution(pool.address, token_in, token_out, running, 0, skipped=True)
                )
                running = 0
                continue

            hop_recipient = recipient if i == last_hop else self.address
            token = guarded("token lookup", self.tokens.token, token_in)
            safe_approve(token, self.address, pool.address, running)
            received = checked_amount(
                "execute_swap",
                guarded(
                    "execute_swap",
                    pool.execute_swap,
                    self.address,
                    token_in,
                    token_out,
                    running,
                    0,
                    hop_recipient,
                    referral,
                ),
            )

            logger.debug(
                "hop_executed",
                hop=i,
                pool=short(pool.address),
                amount_in=running,
                projected=projected,
                amount_out=received,
            )
            hops.append(HopExecution(pool.address, token_in, token_out, running, received))
            running = received

        return PathExecution(amount_in=amount_in, amount_out=running, hops=tuple(hops))


__all__ = ["PathRouter"]
