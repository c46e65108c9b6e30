"""dexrouter - multi-hop swap routing, quoting and liquidity over two-asset pools."""

__version__ = "0.1.0"

from dexrouter.config import DEFAULT_ROUTER_CONFIG, RouterConfig  # noqa: E402
from dexrouter.liquidity import LiquidityQuoter  # noqa: E402
from dexrouter.quoting import QuoteEngine  # noqa: E402
from dexrouter.router import Router  # noqa: E402
from dexrouter.routing import PathRouter  # noqa: E402

__all__ = [
    "DEFAULT_ROUTER_CONFIG",
    "LiquidityQuoter",
    "PathRouter",
    "QuoteEngine",
    "Router",
    "RouterConfig",
    "__version__",
]
