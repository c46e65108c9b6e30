"""Tests for forward and inverse path quoting."""

import pytest

from dexrouter.config import RouterConfig
from dexrouter.errors import (
    ExternalCallFailure,
    InvalidAmount,
    InvalidPath,
    PoolNotFound,
)
from dexrouter.quoting import QuoteEngine, resolve_hop_pool
from tests.helpers import HIGH, LOW, MID, DictRegistry, FixedRatePool

POOL_LM = "0x" + "a1" * 20
POOL_MH = "0x" + "b2" * 20


@pytest.fixture
def registry():
    """LOW -> MID doubles, MID -> HIGH triples."""
    return DictRegistry(
        FixedRatePool(POOL_LM, LOW, MID, 2, 1),
        FixedRatePool(POOL_MH, MID, HIGH, 3, 1),
    )


@pytest.fixture
def engine(registry):
    return QuoteEngine(registry)


class TestAmountsOut:
    def test_single_hop(self, engine):
        assert engine.amounts_out(100, [LOW, MID]) == [100, 200]

    def test_multi_hop(self, engine):
        amounts = engine.amounts_out(100, [LOW, MID, HIGH])
        assert len(amounts) == 3
        assert amounts == [100, 200, 600]

    def test_each_hop_feeds_the_next(self, engine, registry):
        """amounts[i+1] is the pool's projected return of amounts[i]."""
        amounts = engine.amounts_out(100, [LOW, MID, HIGH])
        second = registry.resolve_pool(MID, HIGH)
        assert second.projected_return(MID, HIGH, amounts[1]) == amounts[2]

    def test_reverse_direction(self, engine):
        assert engine.amounts_out(600, [HIGH, MID, LOW]) == [600, 200, 100]

    def test_token_may_reappear(self, engine):
        assert engine.amounts_out(100, [LOW, MID, LOW]) == [100, 200, 100]

    def test_truncation_carries_zero(self, engine):
        """A hop rounding to 0 quotes 0 for every later hop."""
        assert engine.amounts_out(2, [HIGH, MID, LOW]) == [2, 0, 0]

    def test_does_not_mutate_pools(self, engine, registry):
        engine.amounts_out(100, [LOW, MID, HIGH])
        for pool in registry.pools.values():
            assert all(call[0] == "projected_return" for call in pool.calls)

    def test_mixed_case_path_is_normalized(self, engine):
        assert engine.amounts_out(100, [MID, "0x" + HIGH[2:].upper()]) == [100, 300]


class TestAmountsIn:
    def test_single_hop(self, engine):
        assert engine.amounts_in(200, [LOW, MID]) == [100, 200]

    def test_multi_hop(self, engine):
        assert engine.amounts_in(600, [LOW, MID, HIGH]) == [100, 200, 600]

    def test_rounds_up(self, engine):
        """Buying 1 MID with a 2:1 rate still needs a whole unit of LOW."""
        assert engine.amounts_in(1, [LOW, MID]) == [1, 1]

    @pytest.mark.parametrize("amount_out", [1, 2, 7, 599, 601, 10**18 + 1])
    def test_forward_quote_of_inverse_reaches_target(self, engine, amount_out):
        path = [HIGH, MID, LOW]
        amounts = engine.amounts_in(amount_out, path)
        assert amounts[-1] == amount_out
        assert engine.amounts_out(amounts[0], path)[-1] >= amount_out


class TestQuoteValidation:
    @pytest.mark.parametrize(
        "path",
        [
            [],
            [LOW],
            [LOW, LOW],
            [LOW, MID, MID],
            [LOW, "not-an-address"],
            LOW,
        ],
    )
    def test_invalid_path(self, engine, path):
        with pytest.raises(InvalidPath):
            engine.amounts_out(100, path)
        with pytest.raises(InvalidPath):
            engine.amounts_in(100, path)

    def test_path_length_limit(self, registry):
        engine = QuoteEngine(registry, RouterConfig(max_path_length=3))
        with pytest.raises(InvalidPath):
            engine.amounts_out(100, [LOW, MID, LOW, MID])

    def test_long_path_accepted_by_default(self, engine):
        """Without a configured cap any path length of 2 or more is quoted."""
        path = [LOW, MID] * 6
        amounts = engine.amounts_out(100, path)
        assert len(amounts) == 12
        assert amounts[-1] == 200
        assert engine.amounts_in(200, path)[0] == 100

    @pytest.mark.parametrize("amount", [0, -1, 2**256, True, 1.5])
    def test_invalid_amount(self, engine, amount):
        with pytest.raises(InvalidAmount):
            engine.amounts_out(amount, [LOW, MID])
        with pytest.raises(InvalidAmount):
            engine.amounts_in(amount, [LOW, MID])

    def test_missing_pool(self, engine):
        with pytest.raises(PoolNotFound):
            engine.amounts_out(100, [LOW, HIGH])

    def test_missing_pool_is_external_failure(self):
        assert issubclass(PoolNotFound, ExternalCallFailure)


class TestCollaboratorFailures:
    def test_pool_exception_is_wrapped(self, registry, engine, monkeypatch):
        pool = registry.resolve_pool(LOW, MID)

        def explode(*args):
            raise RuntimeError("boom")

        monkeypatch.setattr(pool, "projected_return", explode)
        with pytest.raises(ExternalCallFailure, match="boom"):
            engine.amounts_out(100, [LOW, MID])

    def test_out_of_range_quote_is_rejected(self, registry, engine, monkeypatch):
        pool = registry.resolve_pool(LOW, MID)
        monkeypatch.setattr(pool, "required_input", lambda *args: -5)
        with pytest.raises(ExternalCallFailure):
            engine.amounts_in(100, [LOW, MID])


class TestResolveHopPool:
    def test_found(self, registry):
        assert resolve_hop_pool(registry, MID, LOW).address == POOL_LM

    def test_not_found(self, registry):
        with pytest.raises(PoolNotFound):
            resolve_hop_pool(registry, LOW, HIGH)
