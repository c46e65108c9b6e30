"""Swap and liquidity entrypoints.

Each entrypoint validates against a fresh quote, takes custody of the caller's
funds, then delegates execution to PathRouter (swaps) or the pool itself
(liquidity). The whole call runs inside the substrate's atomic scope: if any
step raises, no balance change survives.

Slippage bounds are checked at the path boundary only: the last amount for
exact-input swaps, the first amount for exact-output swaps. Between quoting and
execution other callers may move the price; the caller's bound is the only
protection against that.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator, Sequence

import structlog

from dexrouter.canonical import canonicalize, decanonicalize, sort_tokens
from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from dexrouter.constants import ZERO_ADDRESS
from dexrouter.errors import (
    ExcessiveInputAmount,
    ExternalCallFailure,
    InsufficientAAmount,
    InsufficientBAmount,
    InsufficientOutputAmount,
    InvalidNativePath,
    InvariantViolation,
    RouterError,
    ValidationError,
    category,
)
from dexrouter.external import (
    checked_amount,
    guarded,
    safe_approve,
    safe_native_transfer,
    safe_transfer,
    safe_transfer_from,
    safe_unwrap,
    safe_wrap,
)
from dexrouter.interfaces import (
    FungibleAsset,
    NativeCurrency,
    Pool,
    PoolRegistry,
    Substrate,
    TokenDirectory,
    WrappedNative,
)
from dexrouter.liquidity import LiquidityQuoter
from dexrouter.liquidity import quote as ratio_quote
from dexrouter.models.types import is_valid_address, normalize_address, short
from dexrouter.quoting import QuoteEngine, resolve_hop_pool
from dexrouter.routing import PathExecution, PathRouter
from dexrouter.types import (
    LiquidityProvision,
    LiquidityRemoval,
    LiquidityRequest,
    SwapExecution,
)
from dexrouter.validation import validate_amount, validate_pair, validate_path

logger = structlog.get_logger()


class Router:
    """Public swap/liquidity operations over a pool registry.

    All collaborators are injected, so tests can substitute in-memory doubles
    (see dexrouter.sim).
    """

    def __init__(
        self,
        address: str,
        registry: PoolRegistry,
        tokens: TokenDirectory,
        wrapped_native: WrappedNative,
        native: NativeCurrency,
        substrate: Substrate | None = None,
        config: RouterConfig = DEFAULT_ROUTER_CONFIG,
    ) -> None:
        """Initialize the router.

        Args:
            address: The router's custody address
            registry: Pool registry (lookup and creation)
            tokens: Resolves token addresses to fungible asset handles
            wrapped_native: Wrapped-native token used by the native variants
            native: Raw native currency balances
            substrate: Ledger providing atomic(); if None, atomicity is assumed
                to be provided by whoever invokes the router
            config: Router configuration
        """
        self.address = normalize_address(address, validate=True)
        self.registry = registry
        self.tokens = tokens
        self.wrapped_native = wrapped_native
        self.native = native
        self.substrate = substrate
        self.config = config

        self.quotes = QuoteEngine(registry, config)
        self.liquidity = LiquidityQuoter(registry)
        self.path_router = PathRouter(self.address, registry, tokens, config)

    @property
    def wnative(self) -> str:
        return normalize_address(self.wrapped_native.address)

    # --- Views ---

    def get_amounts_out(self, amount_in: int, path: Sequence[str]) -> list[int]:
        """Forward multi-hop quote. See QuoteEngine.amounts_out."""
        return self.quotes.amounts_out(amount_in, path)

    def get_amounts_in(self, amount_out: int, path: Sequence[str]) -> list[int]:
        """Inverse multi-hop quote. See QuoteEngine.amounts_in."""
        return self.quotes.amounts_in(amount_out, path)

    @staticmethod
    def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of B equivalent to amount_a of A at the given reserves."""
        validate_amount("amount_a", amount_a)
        return ratio_quote(amount_a, reserve_a, reserve_b)

    # --- Token/token swaps ---

    def swap_exact_tokens_for_tokens(
        self,
        sender: str,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        recipient: str,
        referral: str = ZERO_ADDRESS,
    ) -> SwapExecution:
        """Sell exactly `amount_in` of path[0] for at least `amount_out_min` of path[-1].

        Raises:
            InsufficientOutputAmount: If the quoted or realized output is below
                amount_out_min, or is zero
        """
        with self._operation("swap_exact_tokens_for_tokens", sender=sender) as sender:
            tokens, recipient = self._swap_args(path, recipient)
            validate_amount("amount_out_min", amount_out_min, allow_zero=True)
            amounts = self.quotes.amounts_out(amount_in, tokens)
            self._check_output(amounts[-1], amount_out_min)

            self._pull(tokens[0], sender, amount_in)
            execution = self.path_router.execute(tokens, amount_in, recipient, referral)
            self._check_output(execution.amount_out, amount_out_min)
            return self._swap_result(tokens, amounts, execution)

    def swap_tokens_for_exact_tokens(
        self,
        sender: str,
        amount_out: int,
        amount_in_max: int,
        path: Sequence[str],
        recipient: str,
        referral: str = ZERO_ADDRESS,
    ) -> SwapExecution:
        """Buy `amount_out` of path[-1] spending at most `amount_in_max` of path[0].

        Besides bounding the quoted input, the realized output is checked
        against `amount_out` after execution. That second check is stricter than
        an input-only bound: a price move between quote and execution that
        would short the recipient aborts the call instead of delivering less.
        The native exact-output variants apply the same check.

        Raises:
            ExcessiveInputAmount: If the quoted input exceeds amount_in_max
            InsufficientOutputAmount: If execution delivers less than amount_out
        """
        with self._operation("swap_tokens_for_exact_tokens", sender=sender) as sender:
            tokens, recipient = self._swap_args(path, recipient)
            validate_amount("amount_in_max", amount_in_max, allow_zero=True)
            amounts = self.quotes.amounts_in(amount_out, tokens)
            self._check_input(amounts[0], amount_in_max)

            self._pull(tokens[0], sender, amounts[0])
            execution = self.path_router.execute(tokens, amounts[0], recipient, referral)
            self._check_output(execution.amount_out, amount_out)
            return self._swap_result(tokens, amounts, execution)

    # --- Native currency swaps ---

    def swap_exact_native_for_tokens(
        self,
        sender: str,
        value: int,
        amount_out_min: int,
        path: Sequence[str],
        recipient: str,
        referral: str = ZERO_ADDRESS,
    ) -> SwapExecution:
        """Sell exactly `value` native currency; path[0] must be the wrapped-native token."""
        with self._operation("swap_exact_native_for_tokens", sender=sender) as sender:
            tokens, recipient = self._swap_args(path, recipient)
            self._require_native_start(tokens)
            validate_amount("amount_out_min", amount_out_min, allow_zero=True)
            amounts = self.quotes.amounts_out(value, tokens)
            self._check_output(amounts[-1], amount_out_min)

            self._pull_native(sender, value, value)
            execution = self.path_router.execute(tokens, value, recipient, referral)
            self._check_output(execution.amount_out, amount_out_min)
            return self._swap_result(tokens, amounts, execution)

    def swap_native_for_exact_tokens(
        self,
        sender: str,
        value: int,
        amount_out: int,
        path: Sequence[str],
        recipient: str,
        referral: str = ZERO_ADDRESS,
    ) -> SwapExecution:
        """Buy `amount_out` of path[-1] with at most `value` native currency.

        The unspent part of `value` is returned to the sender.
        """
        with self._operation("swap_native_for_exact_tokens", sender=sender) as sender:
            tokens, recipient = self._swap_args(path, recipient)
            self._require_native_start(tokens)
            validate_amount("value", value)
            amounts = self.quotes.amounts_in(amount_out, tokens)
            self._check_input(amounts[0], value)

            self._pull_native(sender, value, amounts[0])
            execution = self.path_router.execute(tokens, amounts[0], recipient, referral)
            self._check_output(execution.amount_out, amount_out)
            return self._swap_result(tokens, amounts, execution)

    def swap_exact_tokens_for_native(
        self,
        sender: str,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        recipient: str,
        referral: str = ZERO_ADDRESS,
    ) -> SwapExecution:
        """Sell exactly `amount_in` of path[0] for native currency.

        path[-1] must be the wrapped-native token.
        """
        with self._operation("swap_exact_tokens_for_native", sender=sender) as sender:
            tokens, recipient = self._swap_args(path, recipient)
            self._require_native_end(tokens)
            validate_amount("amount_out_min", amount_out_min, allow_zero=True)
            amounts = self.quotes.amounts_out(amount_in, tokens)
            self._check_output(amounts[-1], amount_out_min)

            self._pull(tokens[0], sender, amount_in)
            execution = self.path_router.execute(tokens, amount_in, self.address, referral)
            self._check_output(execution.amount_out, amount_out_min)
            self._pay_native(recipient, execution.amount_out)
            return self._swap_result(tokens, amounts, execution)

    def swap_tokens_for_exact_native(
        self,
        sender: str,
        amount_out: int,
        amount_in_max: int,
        path: Sequence[str],
        recipient: str,
        referral: str = ZERO_ADDRESS,
    ) -> SwapExecution:
        """Buy `amount_out` native currency spending at most `amount_in_max` of path[0]."""
        with self._operation("swap_tokens_for_exact_native", sender=sender) as sender:
            tokens, recipient = self._swap_args(path, recipient)
            self._require_native_end(tokens)
            validate_amount("amount_in_max", amount_in_max, allow_zero=True)
            amounts = self.quotes.amounts_in(amount_out, tokens)
            self._check_input(amounts[0], amount_in_max)

            self._pull(tokens[0], sender, amounts[0])
            execution = self.path_router.execute(tokens, amounts[0], self.address, referral)
            self._check_output(execution.amount_out, amount_out)
            self._pay_native(recipient, execution.amount_out)
            return self._swap_result(tokens, amounts, execution)

    # --- Liquidity ---

    def add_liquidity(
        self,
        sender: str,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: str,
    ) -> LiquidityProvision:
        """Deposit a ratio-respecting amount of both tokens; shares go to recipient.

        The pool is created if the pair has none, and the first deposit sets
        its price.

        Raises:
            InsufficientAAmount, InsufficientBAmount: If the ratio forces a side
                below its minimum
        """
        with self._operation("add_liquidity", sender=sender) as sender:
            recipient = self._recipient(recipient)
            request = LiquidityRequest(
                token_a, token_b, amount_a_desired, amount_b_desired, amount_a_min, amount_b_min
            )
            pool, amounts = self.liquidity.quote(request)
            token_a, token_b = normalize_address(token_a), normalize_address(token_b)

            self._pull(token_a, sender, amounts.amount_a)
            self._pull(token_b, sender, amounts.amount_b)
            liquidity = self._provide(
                pool, request, token_a, token_b, amounts.amount_a, amounts.amount_b, recipient
            )
            return LiquidityProvision(amounts.amount_a, amounts.amount_b, liquidity)

    def add_liquidity_native(
        self,
        sender: str,
        token: str,
        amount_token_desired: int,
        amount_token_min: int,
        amount_native_min: int,
        value: int,
        recipient: str,
    ) -> LiquidityProvision:
        """Deposit `token` paired with native currency.

        `value` is the native amount offered; the part the ratio does not use
        is returned to the sender. In the result, amount_a is the token side and
        amount_b the native side.
        """
        with self._operation("add_liquidity_native", sender=sender) as sender:
            recipient = self._recipient(recipient)
            request = LiquidityRequest(
                token,
                self.wnative,
                amount_token_desired,
                value,
                amount_token_min,
                amount_native_min,
            )
            pool, amounts = self.liquidity.quote(request)
            token = normalize_address(token)

            self._pull(token, sender, amounts.amount_a)
            self._pull_native(sender, value, amounts.amount_b)
            liquidity = self._provide(
                pool, request, token, self.wnative, amounts.amount_a, amounts.amount_b, recipient
            )
            return LiquidityProvision(amounts.amount_a, amounts.amount_b, liquidity)

    def remove_liquidity(
        self,
        sender: str,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        recipient: str,
    ) -> LiquidityRemoval:
        """Burn `liquidity` shares of the pair's pool and pay both sides to recipient."""
        with self._operation("remove_liquidity", sender=sender) as sender:
            recipient = self._recipient(recipient)
            token_a, token_b = validate_pair(token_a, token_b)
            amount_a, amount_b = self._withdraw(
                sender, token_a, token_b, liquidity, amount_a_min, amount_b_min
            )
            self._push(token_a, recipient, amount_a)
            self._push(token_b, recipient, amount_b)
            return LiquidityRemoval(amount_a, amount_b)

    def remove_liquidity_native(
        self,
        sender: str,
        token: str,
        liquidity: int,
        amount_token_min: int,
        amount_native_min: int,
        recipient: str,
    ) -> LiquidityRemoval:
        """Burn shares of the token/wrapped-native pool; the native side is paid unwrapped.

        In the result, amount_a is the token side and amount_b the native side.
        """
        with self._operation("remove_liquidity_native", sender=sender) as sender:
            recipient = self._recipient(recipient)
            token, wnative = validate_pair(token, self.wnative)
            amount_token, amount_native = self._withdraw(
                sender, token, wnative, liquidity, amount_token_min, amount_native_min
            )
            self._push(token, recipient, amount_token)
            self._pay_native(recipient, amount_native)
            return LiquidityRemoval(amount_token, amount_native)

    # --- Internal helpers ---

    @contextlib.contextmanager
    def _operation(self, name: str, sender: str) -> Iterator[str]:
        """Run one entrypoint atomically and log its failure category.

        Yields the normalized sender address.
        """
        scope = self.substrate.atomic() if self.substrate is not None else contextlib.nullcontext()
        try:
            with scope:
                yield self._address("sender", sender)
        except RouterError as err:
            logger.warning(
                "router_call_failed",
                operation=name,
                sender=short(str(sender)),
                error=type(err).__name__,
                category=category(err),
                detail=str(err),
            )
            raise
        logger.debug("router_call_completed", operation=name, sender=short(sender))

    def _swap_args(self, path: Sequence[str], recipient: str) -> tuple[list[str], str]:
        return validate_path(path, self.config.max_path_length), self._recipient(recipient)

    @staticmethod
    def _address(role: str, value: str) -> str:
        if not is_valid_address(value):
            raise ValidationError(f"Invalid {role} address: {value!r}")
        return normalize_address(value)

    @classmethod
    def _recipient(cls, recipient: str) -> str:
        return cls._address("recipient", recipient)

    def _require_native_start(self, tokens: list[str]) -> None:
        if tokens[0] != self.wnative:
            raise InvalidNativePath(f"Path must start at {self.wnative}, starts at {tokens[0]}")

    def _require_native_end(self, tokens: list[str]) -> None:
        if tokens[-1] != self.wnative:
            raise InvalidNativePath(f"Path must end at {self.wnative}, ends at {tokens[-1]}")

    @staticmethod
    def _check_output(amount_out: int, amount_out_min: int) -> None:
        # A zero output never satisfies the bound, even with amount_out_min == 0
        if amount_out == 0 or amount_out < amount_out_min:
            raise InsufficientOutputAmount(f"Output {amount_out} below minimum {amount_out_min}")

    @staticmethod
    def _check_input(amount_in: int, amount_in_max: int) -> None:
        if amount_in > amount_in_max:
            raise ExcessiveInputAmount(
                f"Required input {amount_in} exceeds maximum {amount_in_max}"
            )

    def _token(self, address: str) -> FungibleAsset:
        return guarded("token lookup", self.tokens.token, address)

    def _pull(self, token: str, sender: str, amount: int) -> None:
        """Move `amount` of token from sender into router custody."""
        if amount > 0:
            safe_transfer_from(self._token(token), self.address, sender, self.address, amount)

    def _push(self, token: str, recipient: str, amount: int) -> None:
        if amount > 0:
            safe_transfer(self._token(token), self.address, recipient, amount)

    def _pull_native(self, sender: str, value: int, used: int) -> None:
        """Take `value` native currency from sender, wrap `used`, refund the rest."""
        validate_amount("value", value)
        safe_native_transfer(self.native, sender, self.address, value)
        if used > 0:
            safe_wrap(self.wrapped_native, self.address, used)
        if value > used:
            safe_native_transfer(self.native, self.address, sender, value - used)

    def _pay_native(self, recipient: str, amount: int) -> None:
        """Unwrap `amount` held by the router and send it to recipient."""
        if amount > 0:
            safe_unwrap(self.wrapped_native, self.address, amount)
            safe_native_transfer(self.native, self.address, recipient, amount)

    def _provide(
        self,
        pool: Pool,
        request: LiquidityRequest,
        token_a: str,
        token_b: str,
        amount_a: int,
        amount_b: int,
        recipient: str,
    ) -> int:
        """Deposit router-held amounts into pool in slot order, forward minted shares."""
        self._require_slot_order(pool, token_a, token_b)
        amounts = canonicalize(token_a, token_b, amount_a, amount_b)
        min_amounts = canonicalize(token_a, token_b, request.amount_a_min, request.amount_b_min)

        safe_approve(self._token(token_a), self.address, pool.address, amount_a)
        safe_approve(self._token(token_b), self.address, pool.address, amount_b)
        liquidity = checked_amount(
            "provide_liquidity",
            guarded(
                "provide_liquidity",
                pool.provide_liquidity,
                self.address,
                list(amounts),
                list(min_amounts),
            ),
        )
        safe_transfer(pool, self.address, recipient, liquidity)

        logger.info(
            "liquidity_added",
            pool=short(pool.address),
            amount_a=amount_a,
            amount_b=amount_b,
            liquidity=liquidity,
        )
        return liquidity

    def _withdraw(
        self,
        sender: str,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
    ) -> tuple[int, int]:
        """Burn sender's shares through the router; returns (amount_a, amount_b) held by router."""
        validate_amount("liquidity", liquidity)
        validate_amount("amount_a_min", amount_a_min, allow_zero=True)
        validate_amount("amount_b_min", amount_b_min, allow_zero=True)

        pool = resolve_hop_pool(self.registry, token_a, token_b)
        self._require_slot_order(pool, token_a, token_b)
        min_amounts = canonicalize(token_a, token_b, amount_a_min, amount_b_min)

        safe_transfer_from(pool, self.address, sender, self.address, liquidity)
        slots = guarded(
            "remove_liquidity",
            pool.remove_liquidity,
            self.address,
            liquidity,
            list(min_amounts),
        )
        if not isinstance(slots, (tuple, list)) or len(slots) != 2:
            raise ExternalCallFailure(f"remove_liquidity returned {slots!r}, expected 2 amounts")
        slot0, slot1 = (checked_amount("remove_liquidity", amount) for amount in slots)
        amount_a, amount_b = decanonicalize(token_a, token_b, slot0, slot1)

        if amount_a < amount_a_min:
            raise InsufficientAAmount(f"Withdrawn A {amount_a} below minimum {amount_a_min}")
        if amount_b < amount_b_min:
            raise InsufficientBAmount(f"Withdrawn B {amount_b} below minimum {amount_b_min}")

        logger.info(
            "liquidity_removed",
            pool=short(pool.address),
            liquidity=liquidity,
            amount_a=amount_a,
            amount_b=amount_b,
        )
        return amount_a, amount_b

    @staticmethod
    def _require_slot_order(pool: Pool, token_a: str, token_b: str) -> None:
        expected = sort_tokens(token_a, token_b)
        actual = (normalize_address(pool.token0), normalize_address(pool.token1))
        if actual != expected:
            raise InvariantViolation(
                f"Pool {pool.address} orders its tokens {actual}, expected {expected}"
            )

    def _swap_result(
        self, tokens: list[str], amounts: list[int], execution: PathExecution
    ) -> SwapExecution:
        logger.info(
            "swap_executed",
            path=[short(t) for t in tokens],
            amount_in=execution.amount_in,
            amount_out=execution.amount_out,
            quoted_out=amounts[-1],
            skipped_hops=execution.skipped_hops,
        )
        return SwapExecution(
            path=tuple(tokens),
            amounts=tuple(amounts),
            amount_in=execution.amount_in,
            amount_out=execution.amount_out,
        )


__all__ = ["Router"]
