"""Test helpers module for shared test utilities.

- constants: Actor addresses and fixed-order token addresses
- doubles: Ledger-free pool and registry doubles
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    HIGH,
    LOW,
    MID,
    REFERRER,
    ROUTER,
    STARTING_BALANCE,
)
from tests.helpers.doubles import DictRegistry, FixedRatePool

__all__ = [
    "ALICE",
    "BOB",
    "HIGH",
    "LOW",
    "MID",
    "REFERRER",
    "ROUTER",
    "STARTING_BALANCE",
    "DictRegistry",
    "FixedRatePool",
]
