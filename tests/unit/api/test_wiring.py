"""Tests for simulated router wiring and error status mapping."""

import json

import pytest

from dexrouter.api import endpoints
from dexrouter.api.main import error_status, load_pools_file
from dexrouter.api.wiring import ROUTER_ADDRESS, build_sim_router
from dexrouter.config import RouterConfig
from dexrouter.errors import (
    ExcessiveInputAmount,
    ExternalCallFailure,
    InvalidPath,
    InvariantViolation,
    PoolNotFound,
    RouterError,
)
from dexrouter.sim import make_address

LAYOUT = {
    "feeBps": 5,
    "tokens": ["USDC", "DAI"],
    "pools": [{"tokenA": "USDC", "tokenB": "DAI", "reserveA": "1000", "reserveB": "3000"}],
}


class TestBuildSimRouter:
    def test_seeds_pools(self):
        router = build_sim_router(LAYOUT)
        usdc, dai = make_address("token:USDC"), make_address("token:DAI")

        pool = router.registry.resolve_pool(usdc, dai)

        assert pool is not None
        assert pool.fee_bps == 5
        assert pool.addable_balance(usdc) == 1000
        assert pool.addable_balance(dai) == 3000

    def test_router_address_and_config(self):
        config = RouterConfig(max_path_length=3)
        router = build_sim_router(LAYOUT, config)
        assert router.address == ROUTER_ADDRESS
        assert router.config is config

    def test_unknown_symbol(self):
        layout = {
            "tokens": [],
            "pools": [{"tokenA": "X", "tokenB": "Y", "reserveA": 1, "reserveB": 1}],
        }
        with pytest.raises(KeyError):
            build_sim_router(layout)

    def test_load_pools_file(self, tmp_path):
        path = tmp_path / "pools.json"
        path.write_text(json.dumps(LAYOUT))
        try:
            load_pools_file(str(path), RouterConfig())
            router = endpoints.get_router()
            assert router.registry.resolve_pool(
                make_address("token:USDC"), make_address("token:DAI")
            ) is not None
        finally:
            endpoints.set_router(None)


class TestErrorStatus:
    @pytest.mark.parametrize(
        ("err", "status"),
        [
            (InvalidPath("x"), 422),
            (ExcessiveInputAmount("x"), 422),
            (PoolNotFound("x"), 502),
            (ExternalCallFailure("x"), 502),
            (InvariantViolation("x"), 500),
            (RouterError("x"), 400),
        ],
    )
    def test_mapping(self, err, status):
        assert error_status(err) == status
