"""Request/response models and shared address/amount types."""

from dexrouter.models.quotes import (
    AmountsInRequest,
    AmountsOutRequest,
    AmountsResponse,
    ErrorResponse,
    LiquidityQuoteRequest,
    LiquidityQuoteResponse,
)
from dexrouter.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    "Address",
    "AmountsInRequest",
    "AmountsOutRequest",
    "AmountsResponse",
    "ErrorResponse",
    "LiquidityQuoteRequest",
    "LiquidityQuoteResponse",
    "Uint256",
    "is_valid_address",
    "normalize_address",
]
