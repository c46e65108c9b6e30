"""Pydantic models for the quote service."""

from pydantic import BaseModel, Field

from dexrouter.models.types import Address, Uint256


class AmountsOutRequest(BaseModel):
    """Forward quote: sell exactly amountIn along path."""

    amount_in: Uint256 = Field(alias="amountIn")
    path: list[Address] = Field(min_length=2)

    model_config = {"populate_by_name": True}


class AmountsInRequest(BaseModel):
    """Inverse quote: buy exactly amountOut along path."""

    amount_out: Uint256 = Field(alias="amountOut")
    path: list[Address] = Field(min_length=2)

    model_config = {"populate_by_name": True}


class AmountsResponse(BaseModel):
    """One amount per path token, as decimal strings."""

    path: list[Address]
    amounts: list[Uint256]


class LiquidityQuoteRequest(BaseModel):
    """Ratio-respecting deposit amounts for a pair."""

    token_a: Address = Field(alias="tokenA")
    token_b: Address = Field(alias="tokenB")
    amount_a_desired: Uint256 = Field(alias="amountADesired")
    amount_b_desired: Uint256 = Field(alias="amountBDesired")
    amount_a_min: Uint256 = Field(default="0", alias="amountAMin")
    amount_b_min: Uint256 = Field(default="0", alias="amountBMin")

    model_config = {"populate_by_name": True}


class LiquidityQuoteResponse(BaseModel):
    """Deposit amounts in request (A, B) order."""

    amount_a: Uint256 = Field(serialization_alias="amountA")
    amount_b: Uint256 = Field(serialization_alias="amountB")
    pool_exists: bool = Field(serialization_alias="poolExists")


class ErrorResponse(BaseModel):
    """Router failure: error class name, taxonomy category and message."""

    error: str
    category: str
    detail: str
