"""Tests for ratio-respecting liquidity amount selection."""

import pytest

from dexrouter.errors import (
    DegenerateOrder,
    InsufficientAAmount,
    InsufficientBAmount,
    InvalidAmount,
    InvariantViolation,
    SlippageViolation,
)
from dexrouter.liquidity import LiquidityQuoter, optimal_amounts, quote
from dexrouter.types import LiquidityAmounts, LiquidityRequest
from tests.helpers import HIGH, LOW, DictRegistry, FixedRatePool


def request(a_desired, b_desired, a_min=0, b_min=0, token_a=LOW, token_b=HIGH):
    return LiquidityRequest(token_a, token_b, a_desired, b_desired, a_min, b_min)


class TestQuote:
    def test_proportional(self):
        assert quote(50, 100, 200) == 100

    def test_truncates(self):
        assert quote(1, 3, 2) == 0
        assert quote(10, 3, 2) == 6

    def test_zero_reserve_is_invariant_violation(self):
        with pytest.raises(InvariantViolation):
            quote(1, 0, 100)

    def test_overflow_is_invariant_violation(self):
        with pytest.raises(InvariantViolation):
            quote(2**200, 1, 2**100)


class TestOptimalAmounts:
    def test_empty_pool_takes_desired_amounts(self):
        assert optimal_amounts(request(1000, 2000), 0, 0) == LiquidityAmounts(1000, 2000)

    def test_b_optimal_branch(self):
        """All of A is used when the matching B fits the desired B."""
        # b_optimal = 50 * 200 // 100 = 100 <= 150
        assert optimal_amounts(request(50, 150), 100, 200) == LiquidityAmounts(50, 100)

    def test_branch_flips_to_a_optimal(self):
        """b_optimal = 100 > 50, so a_optimal = 50 * 100 // 200 = 25 is used."""
        assert optimal_amounts(request(50, 50), 100, 200) == LiquidityAmounts(25, 50)

    def test_exact_ratio_uses_both_desired(self):
        assert optimal_amounts(request(100, 200), 100, 200) == LiquidityAmounts(100, 200)

    def test_insufficient_b(self):
        with pytest.raises(InsufficientBAmount):
            optimal_amounts(request(50, 150, b_min=101), 100, 200)

    def test_b_min_met_exactly(self):
        assert optimal_amounts(request(50, 150, b_min=100), 100, 200).amount_b == 100

    def test_insufficient_a(self):
        with pytest.raises(InsufficientAAmount):
            optimal_amounts(request(50, 50, a_min=26), 100, 200)

    def test_slippage_errors_share_category(self):
        assert issubclass(InsufficientAAmount, SlippageViolation)
        assert issubclass(InsufficientBAmount, SlippageViolation)

    def test_zero_reserve_a_only_is_invariant_violation(self):
        """A pool with one empty side cannot price a deposit."""
        with pytest.raises(InvariantViolation):
            optimal_amounts(request(10, 10), 0, 500)

    @pytest.mark.parametrize(
        ("a_desired", "b_desired", "reserve_a", "reserve_b"),
        [
            (1, 1, 1, 1),
            (7, 3, 13, 29),
            (10**18, 3 * 10**18, 997, 1000),
            (123_456, 654_321, 10**6, 10**9),
            (5, 10**20, 10**20, 3),
            (10**30, 1, 2, 10**25),
        ],
    )
    def test_never_exceeds_desired(self, a_desired, b_desired, reserve_a, reserve_b):
        result = optimal_amounts(request(a_desired, b_desired), reserve_a, reserve_b)
        assert result.amount_a <= a_desired
        assert result.amount_b <= b_desired


class TestLiquidityQuoter:
    def make_quoter(self, reserve_low=100, reserve_high=200):
        pool = FixedRatePool("0x" + "ab" * 20, LOW, HIGH, 2, 1)
        pool.reserves = {LOW: reserve_low, HIGH: reserve_high}
        return LiquidityQuoter(DictRegistry(pool)), pool

    def test_reads_addable_a_and_removable_b(self):
        quoter, pool = self.make_quoter()
        _, amounts = quoter.quote(request(50, 50))
        assert amounts == LiquidityAmounts(25, 50)

    def test_reversed_request_order(self):
        """Token A is whichever token the caller names first."""
        quoter, _ = self.make_quoter()
        # reserve_a = 200 (HIGH), reserve_b = 100 (LOW)
        _, amounts = quoter.quote(request(50, 50, token_a=HIGH, token_b=LOW))
        assert amounts == LiquidityAmounts(50, 25)

    def test_quote_creates_missing_pool(self, factory, tokens):
        quoter = LiquidityQuoter(factory)
        pool, amounts = quoter.quote(request(1000, 2000, token_a=tokens["A"], token_b=tokens["B"]))
        assert factory.resolve_pool(tokens["A"], tokens["B"]) is pool
        assert amounts == LiquidityAmounts(1000, 2000)

    def test_preview_never_creates_pool(self, factory, tokens):
        quoter = LiquidityQuoter(factory)
        amounts, exists = quoter.preview(
            request(1000, 2000, token_a=tokens["A"], token_b=tokens["B"])
        )
        assert exists is False
        assert amounts == LiquidityAmounts(1000, 2000)
        assert factory.resolve_pool(tokens["A"], tokens["B"]) is None

    def test_identical_tokens_rejected(self):
        quoter, _ = self.make_quoter()
        with pytest.raises(DegenerateOrder):
            quoter.quote(request(1, 1, token_a=LOW, token_b=LOW))

    def test_zero_desired_rejected(self):
        quoter, _ = self.make_quoter()
        with pytest.raises(InvalidAmount):
            quoter.quote(request(0, 1))
