"""In-memory collaborators: ledger, tokens, constant-product pools, registry.

These implement the protocols in dexrouter.interfaces and back the test suite
and the quote service's demo wiring.
"""

from dexrouter.sim.factory import PoolFactory
from dexrouter.sim.ledger import Ledger, make_address
from dexrouter.sim.pool import ConstantProductPool, PoolError, get_amount_in, get_amount_out
from dexrouter.sim.tokens import NativeBalances, Token, WrappedNativeToken

__all__ = [
    "ConstantProductPool",
    "Ledger",
    "NativeBalances",
    "PoolError",
    "PoolFactory",
    "Token",
    "WrappedNativeToken",
    "get_amount_in",
    "get_amount_out",
    "make_address",
]
