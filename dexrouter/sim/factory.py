"""Simulated pool registry and token directory."""

from __future__ import annotations

import structlog

from dexrouter.canonical import canonicalize, sort_tokens
from dexrouter.models.types import normalize_address, short
from dexrouter.sim.ledger import Ledger, make_address
from dexrouter.sim.pool import ConstantProductPool
from dexrouter.sim.tokens import NativeBalances, Token, WrappedNativeToken

logger = structlog.get_logger()

# Liquidity provider used by seed_pool when none is given
SEED_PROVIDER = make_address("seed-provider")


class PoolFactory:
    """Registry of constant-product pools keyed by canonical token pair.

    Also acts as the token directory: every token it created or was given, and
    every pool share token, can be looked up by address.
    """

    def __init__(self, ledger: Ledger | None = None, fee_bps: int = 30) -> None:
        self.ledger = ledger if ledger is not None else Ledger()
        self.fee_bps = fee_bps
        self.native = NativeBalances(self.ledger)
        self.wrapped_native = WrappedNativeToken(
            self.ledger, make_address("token:WNATIVE"), self.native
        )
        self._tokens: dict[str, Token] = {self.wrapped_native.address: self.wrapped_native}
        self._pools: dict[tuple[str, str], ConstantProductPool] = {}

    # --- TokenDirectory ---

    def token(self, address: str) -> Token:
        address = normalize_address(address)
        if address not in self._tokens:
            raise KeyError(f"Unknown token: {address}")
        return self._tokens[address]

    def create_token(self, symbol: str) -> Token:
        """Create and register a token whose address derives from its symbol."""
        token = Token(self.ledger, make_address(f"token:{symbol}"), symbol)
        self._tokens[token.address] = token
        return token

    # --- PoolRegistry ---

    def resolve_pool(self, token_x: str, token_y: str) -> ConstantProductPool | None:
        return self._pools.get(sort_tokens(token_x, token_y))

    def create_pool(self, token_x: str, token_y: str) -> ConstantProductPool:
        key = sort_tokens(token_x, token_y)
        if key in self._pools:
            raise ValueError(f"Pool already exists for {key}")

        pool = ConstantProductPool(
            self.ledger,
            make_address(f"pool:{key[0]}:{key[1]}"),
            self.token(key[0]),
            self.token(key[1]),
            self.fee_bps,
        )
        self._pools[key] = pool
        self._tokens[pool.address] = pool
        logger.debug(
            "pool_registered",
            pool=short(pool.address),
            token0=short(key[0]),
            token1=short(key[1]),
        )
        return pool

    @property
    def pools(self) -> list[ConstantProductPool]:
        return list(self._pools.values())

    def fund(self, token: str, owner: str, amount: int) -> None:
        """Give owner `amount` of token out of thin air (wrapped-native is backed by native)."""
        handle = self.token(token)
        if handle is self.wrapped_native:
            self.native.credit(owner, amount)
            self.wrapped_native.wrap(owner, amount)
        else:
            handle.mint(owner, amount)

    def seed_pool(
        self,
        token_x: str,
        token_y: str,
        amount_x: int,
        amount_y: int,
        provider: str = SEED_PROVIDER,
    ) -> ConstantProductPool:
        """Create (if needed) and fund a pool directly, bypassing any router."""
        pool = self.resolve_pool(token_x, token_y) or self.create_pool(token_x, token_y)
        for token, amount in ((token_x, amount_x), (token_y, amount_y)):
            self.fund(token, provider, amount)
            self.token(token).approve(provider, pool.address, amount)
        amounts = canonicalize(token_x, token_y, amount_x, amount_y)
        pool.provide_liquidity(provider, amounts, (0, 0))
        return pool


__all__ = ["PoolFactory"]
