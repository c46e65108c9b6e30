"""Build a router over simulated pools from a JSON-style description.

Format:
    {
        "feeBps": 30,
        "tokens": ["USDC", "DAI"],
        "pools": [
            {"tokenA": "WNATIVE", "tokenB": "USDC", "reserveA": "100", "reserveB": "250000"}
        ]
    }

Tokens are referred to by symbol; "WNATIVE" is the wrapped-native token. Token
addresses derive from symbols via make_address("token:<symbol>").
"""

from typing import Any

from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from dexrouter.router import Router
from dexrouter.sim import PoolFactory, make_address

ROUTER_ADDRESS = make_address("router")


def build_sim_router(
    layout: dict[str, Any], config: RouterConfig = DEFAULT_ROUTER_CONFIG
) -> Router:
    """Create a PoolFactory seeded per `layout` and a Router over it."""
    factory = PoolFactory(fee_bps=int(layout.get("feeBps", 30)))
    addresses = {"WNATIVE": factory.wrapped_native.address}
    for symbol in layout.get("tokens", []):
        addresses[symbol] = factory.create_token(symbol).address

    for entry in layout.get("pools", []):
        factory.seed_pool(
            addresses[entry["tokenA"]],
            addresses[entry["tokenB"]],
            int(entry["reserveA"]),
            int(entry["reserveB"]),
        )

    return Router(
        address=ROUTER_ADDRESS,
        registry=factory,
        tokens=factory,
        wrapped_native=factory.wrapped_native,
        native=factory.native,
        substrate=factory.ledger,
        config=config,
    )
