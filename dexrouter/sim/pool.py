"""Simulated constant-product pool.

Pricing follows x * y = k with a basis-point fee charged on the input:

    amount_out = (in * (10000 - fee) * res_out) / (res_in * 10000 + in * (10000 - fee))
    amount_in  = (res_in * out * 10000) / ((res_out - out) * (10000 - fee)) + 1

Reserves are the pool's own token balances in the ledger. The pool is also the
fungible share token minted to liquidity providers.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from dexrouter.canonical import sort_tokens
from dexrouter.constants import BPS_DENOMINATOR
from dexrouter.models.types import normalize_address, short
from dexrouter.safe_int import UINT256_MAX, S
from dexrouter.sim.ledger import Ledger
from dexrouter.sim.tokens import Token

logger = structlog.get_logger()


class PoolError(Exception):
    """A simulated pool call reverted."""

    pass


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = 30) -> int:
    """Output for selling amount_in; 0 if either side is empty."""
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        return 0

    amount_in_with_fee = S(amount_in) * (BPS_DENOMINATOR - fee_bps)
    numerator = amount_in_with_fee * reserve_out
    denominator = S(reserve_in) * BPS_DENOMINATOR + amount_in_with_fee
    return (numerator // denominator).value


def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int, fee_bps: int = 30) -> int:
    """Input needed to buy amount_out, rounded up.

    Returns 2**256 - 1 when the pool cannot deliver amount_out at all.
    """
    if amount_out <= 0:
        return 0
    if reserve_in <= 0 or reserve_out <= 0 or amount_out >= reserve_out:
        return UINT256_MAX

    numerator = S(reserve_in) * amount_out * BPS_DENOMINATOR
    denominator = (S(reserve_out) - amount_out) * (BPS_DENOMINATOR - fee_bps)
    return (numerator // denominator + 1).value


class ConstantProductPool(Token):
    """Two-token x * y = k pool with canonical (token0 < token1) slot order."""

    def __init__(
        self,
        ledger: Ledger,
        address: str,
        token_x: Token,
        token_y: Token,
        fee_bps: int = 30,
    ) -> None:
        if not 0 <= fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}), got {fee_bps}")
        super().__init__(ledger, address, symbol=f"LP-{token_x.symbol}-{token_y.symbol}")
        first, _ = sort_tokens(token_x.address, token_y.address)
        self._token0, self._token1 = (
            (token_x, token_y) if first == token_x.address else (token_y, token_x)
        )
        self.fee_bps = fee_bps

    @property
    def token0(self) -> str:
        return self._token0.address

    @property
    def token1(self) -> str:
        return self._token1.address

    def reserves(self) -> tuple[int, int]:
        """(reserve0, reserve1) in slot order."""
        return self._token0.balance_of(self.address), self._token1.balance_of(self.address)

    def _side(self, token: str) -> Token:
        token = normalize_address(token)
        if token == self._token0.address:
            return self._token0
        if token == self._token1.address:
            return self._token1
        raise PoolError(f"Token {token} not in pool {self.address}")

    def _direction(self, token_in: str, token_out: str) -> tuple[Token, Token]:
        tin, tout = self._side(token_in), self._side(token_out)
        if tin is tout:
            raise PoolError(f"Cannot swap {tin.address} for itself")
        return tin, tout

    # --- Reserve views ---

    def addable_balance(self, token: str) -> int:
        return self._side(token).balance_of(self.address)

    def removable_balance(self, token: str) -> int:
        return self._side(token).balance_of(self.address)

    # --- Swaps ---

    def projected_return(self, token_in: str, token_out: str, amount_in: int) -> int:
        tin, tout = self._direction(token_in, token_out)
        return get_amount_out(
            amount_in, tin.balance_of(self.address), tout.balance_of(self.address), self.fee_bps
        )

    def required_input(self, token_in: str, token_out: str, amount_out: int) -> int:
        tin, tout = self._direction(token_in, token_out)
        return get_amount_in(
            amount_out, tin.balance_of(self.address), tout.balance_of(self.address), self.fee_bps
        )

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
        tin, tout = self._direction(token_in, token_out)
        amount_out = self.projected_return(token_in, token_out, amount_in)
        if amount_out < min_out:
            raise PoolError(f"Return {amount_out} below min_out {min_out}")
        if not tin.transfer_from(self.address, caller, self.address, amount_in):
            raise PoolError(f"Could not pull {amount_in} {tin.address} from {caller}")
        if not tout.transfer(self.address, recipient, amount_out):
            raise PoolError(f"Could not pay {amount_out} {tout.address} to {recipient}")

        self.ledger.record_referral(self.address, normalize_address(referral), amount_in)
        logger.debug(
            "pool_swap",
            pool=short(self.address),
            amount_in=amount_in,
            amount_out=amount_out,
            referral=short(referral),
        )
        return amount_out

    # --- Liquidity ---

    def provide_liquidity(
        self,
        provider: str,
        amounts: Sequence[int],
        min_amounts: Sequence[int],
    ) -> int:
        amount0, amount1 = amounts
        min0, min1 = min_amounts
        if amount0 < min0 or amount1 < min1:
            raise PoolError(f"Deposit {(amount0, amount1)} below minimum {(min0, min1)}")

        reserve0, reserve1 = self.reserves()
        supply = self.total_supply()
        if supply == 0:
            minted = (S(amount0) * amount1).isqrt().value
        else:
            minted = min(
                (S(amount0) * supply // reserve0).value,
                (S(amount1) * supply // reserve1).value,
            )
        if minted == 0:
            raise PoolError("Deposit mints no shares")

        for side, amount in ((self._token0, amount0), (self._token1, amount1)):
            if not side.transfer_from(self.address, provider, self.address, amount):
                raise PoolError(f"Could not pull {amount} {side.address} from {provider}")
        self.mint(provider, minted)
        return minted

    def remove_liquidity(
        self,
        provider: str,
        liquidity: int,
        min_amounts: Sequence[int],
    ) -> tuple[int, int]:
        supply = self.total_supply()
        if liquidity <= 0 or liquidity > self.balance_of(provider):
            raise PoolError(f"{provider} does not hold {liquidity} shares")

        reserve0, reserve1 = self.reserves()
        amount0 = (S(reserve0) * liquidity // supply).value
        amount1 = (S(reserve1) * liquidity // supply).value
        if amount0 < min_amounts[0] or amount1 < min_amounts[1]:
            raise PoolError(f"Withdrawal {(amount0, amount1)} below minimum {tuple(min_amounts)}")

        self.burn(provider, liquidity)
        self._token0.transfer(self.address, provider, amount0)
        self._token1.transfer(self.address, provider, amount1)
        return amount0, amount1


__all__ = ["PoolError", "ConstantProductPool", "get_amount_out", "get_amount_in"]
