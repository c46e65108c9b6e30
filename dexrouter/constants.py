"""Router constants."""

from dexrouter.safe_int import UINT256_MAX

# Minimum number of tokens in a swap path
MIN_PATH_LENGTH = 2

# Referral used when the caller does not supply one
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Fee denominator for basis-point pool fees
BPS_DENOMINATOR = 10_000

__all__ = [
    "UINT256_MAX",
    "MIN_PATH_LENGTH",
    "ZERO_ADDRESS",
    "BPS_DENOMINATOR",
]
