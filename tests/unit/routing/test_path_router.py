"""Tests for sequential hop execution."""

import pytest

from dexrouter.config import RouterConfig
from dexrouter.errors import ExternalCallFailure, InsufficientOutputAmount, PoolNotFound
from dexrouter.quoting import QuoteEngine
from dexrouter.routing import PathRouter
from dexrouter.sim import get_amount_out
from tests.helpers import BOB, REFERRER, ROUTER


@pytest.fixture
def path_router(seeded):
    return PathRouter(ROUTER, seeded, seeded)


def fund_router(factory, token, amount):
    factory.fund(token, ROUTER, amount)


class TestExecute:
    def test_single_hop_pays_recipient(self, seeded, tokens, path_router):
        amount_in = 10 * 10**18
        expected = get_amount_out(amount_in, 1_000 * 10**18, 2_000 * 10**18)
        fund_router(seeded, tokens["A"], amount_in)

        result = path_router.execute([tokens["A"], tokens["B"]], amount_in, BOB, REFERRER)

        assert result.amount_out == expected
        assert seeded.token(tokens["B"]).balance_of(BOB) == expected
        assert seeded.token(tokens["A"]).balance_of(ROUTER) == 0

    def test_multi_hop_chains_outputs(self, seeded, tokens, path_router):
        """Each hop spends exactly what the previous hop returned."""
        amount_in = 10 * 10**18
        fund_router(seeded, tokens["A"], amount_in)

        result = path_router.execute(
            [tokens["A"], tokens["B"], tokens["C"], tokens["D"]], amount_in, BOB, REFERRER
        )

        assert len(result.hops) == 3
        assert result.hops[0].amount_in == amount_in
        for previous, current in zip(result.hops, result.hops[1:]):
            assert current.amount_in == previous.amount_out
        assert result.amount_out == result.hops[-1].amount_out
        assert seeded.token(tokens["D"]).balance_of(BOB) == result.amount_out

    def test_router_keeps_nothing_between_hops(self, seeded, tokens, path_router):
        fund_router(seeded, tokens["A"], 10**18)
        path_router.execute([tokens["A"], tokens["B"], tokens["C"]], 10**18, BOB, REFERRER)
        for symbol in ("A", "B", "C"):
            assert seeded.token(tokens[symbol]).balance_of(ROUTER) == 0

    def test_matches_quote(self, seeded, tokens, path_router):
        path = [tokens["A"], tokens["B"], tokens["C"]]
        quoted = QuoteEngine(seeded).amounts_out(5 * 10**18, path)
        fund_router(seeded, tokens["A"], 5 * 10**18)

        result = path_router.execute(path, 5 * 10**18, BOB, REFERRER)

        assert [hop.amount_out for hop in result.hops] == quoted[1:]

    def test_referral_forwarded_to_every_pool(self, seeded, tokens, path_router):
        fund_router(seeded, tokens["A"], 10**18)
        path_router.execute([tokens["A"], tokens["B"], tokens["C"]], 10**18, BOB, REFERRER)

        first = seeded.resolve_pool(tokens["A"], tokens["B"])
        second = seeded.resolve_pool(tokens["B"], tokens["C"])
        assert seeded.ledger.referral_volume(first.address, REFERRER) == 10**18
        assert seeded.ledger.referral_volume(second.address, REFERRER) > 0

    def test_missing_pool(self, seeded, tokens, path_router):
        fund_router(seeded, tokens["A"], 10**18)
        with pytest.raises(PoolNotFound):
            path_router.execute([tokens["A"], tokens["D"]], 10**18, BOB, REFERRER)

    def test_pool_failure_is_external(self, seeded, tokens, path_router, monkeypatch):
        pool = seeded.resolve_pool(tokens["A"], tokens["B"])

        def fail(*args):
            raise RuntimeError("pool reverted")

        monkeypatch.setattr(pool, "execute_swap", fail)
        fund_router(seeded, tokens["A"], 10**18)
        with pytest.raises(ExternalCallFailure, match="pool reverted"):
            path_router.execute([tokens["A"], tokens["B"]], 10**18, BOB, REFERRER)


class TestZeroReturnHops:
    # 1 wei of B buys nothing from the 1000 A / 2000 B pool
    def test_zero_hop_is_skipped(self, seeded, tokens, path_router):
        fund_router(seeded, tokens["B"], 1)

        result = path_router.execute(
            [tokens["B"], tokens["A"], tokens["WNATIVE"]], 1, BOB, REFERRER
        )

        assert result.amount_out == 0
        assert result.skipped_hops == 2
        assert all(hop.skipped for hop in result.hops)
        assert result.hops[1].amount_in == 0

    def test_skipped_hop_moves_nothing(self, seeded, tokens, path_router):
        pool = seeded.resolve_pool(tokens["A"], tokens["B"])
        before = pool.reserves()
        fund_router(seeded, tokens["B"], 1)

        path_router.execute([tokens["B"], tokens["A"]], 1, BOB, REFERRER)

        assert pool.reserves() == before
        assert seeded.token(tokens["B"]).balance_of(ROUTER) == 1

    def test_abort_on_zero_hop(self, seeded, tokens):
        path_router = PathRouter(ROUTER, seeded, seeded, RouterConfig(abort_on_zero_hop=True))
        fund_router(seeded, tokens["B"], 1)

        with pytest.raises(InsufficientOutputAmount, match="Hop 0"):
            path_router.execute([tokens["B"], tokens["A"]], 1, BOB, REFERRER)
