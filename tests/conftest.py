"""Pytest configuration and fixtures."""

import pytest

from dexrouter.config import RouterConfig
from dexrouter.router import Router
from dexrouter.safe_int import UINT256_MAX
from dexrouter.sim import PoolFactory
from tests.helpers import ALICE, ROUTER, STARTING_BALANCE

SYMBOLS = ("A", "B", "C", "D")

# Reserves used by the `seeded` fixture, in (first, second) token order
SEED_RESERVES = {
    ("A", "B"): (1_000 * 10**18, 2_000 * 10**18),
    ("B", "C"): (1_000 * 10**18, 1_000 * 10**18),
    ("C", "D"): (500 * 10**18, 5_000 * 10**18),
    ("WNATIVE", "A"): (100 * 10**18, 1_000 * 10**18),
}


@pytest.fixture
def factory() -> PoolFactory:
    """Empty registry with its own ledger, native balances and wrapped-native token."""
    return PoolFactory()


@pytest.fixture
def tokens(factory: PoolFactory) -> dict[str, str]:
    """Token addresses by symbol, including WNATIVE."""
    addresses = {symbol: factory.create_token(symbol).address for symbol in SYMBOLS}
    addresses["WNATIVE"] = factory.wrapped_native.address
    return addresses


@pytest.fixture
def seeded(factory: PoolFactory, tokens: dict[str, str]) -> PoolFactory:
    """Factory with A/B, B/C, C/D and WNATIVE/A pools funded per SEED_RESERVES."""
    for (x, y), (amount_x, amount_y) in SEED_RESERVES.items():
        factory.seed_pool(tokens[x], tokens[y], amount_x, amount_y)
    return factory


def make_router(factory: PoolFactory, config: RouterConfig | None = None) -> Router:
    """Router over a PoolFactory, using its ledger as the atomic substrate."""
    return Router(
        address=ROUTER,
        registry=factory,
        tokens=factory,
        wrapped_native=factory.wrapped_native,
        native=factory.native,
        substrate=factory.ledger,
        config=config or RouterConfig(),
    )


@pytest.fixture
def router(factory: PoolFactory) -> Router:
    return make_router(factory)


@pytest.fixture
def alice(factory: PoolFactory, tokens: dict[str, str]) -> str:
    """ALICE holds STARTING_BALANCE of every token and of native currency,
    and has approved the router for unlimited amounts."""
    for address in tokens.values():
        factory.fund(address, ALICE, STARTING_BALANCE)
        factory.token(address).approve(ALICE, ROUTER, UINT256_MAX)
    factory.native.credit(ALICE, STARTING_BALANCE)
    return ALICE


def holdings(factory: PoolFactory, owner: str, tokens: dict[str, str]) -> dict[str, int]:
    """owner's balance of every token plus native currency, keyed by symbol."""
    result = {
        symbol: factory.token(address).balance_of(owner) for symbol, address in tokens.items()
    }
    result["native"] = factory.native.balance_of(owner)
    return result
