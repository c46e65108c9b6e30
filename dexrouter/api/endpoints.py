"""Quote endpoints. None of them mutate pool state."""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from dexrouter.liquidity import LiquidityQuoter
from dexrouter.models.quotes import (
    AmountsInRequest,
    AmountsOutRequest,
    AmountsResponse,
    LiquidityQuoteRequest,
    LiquidityQuoteResponse,
)
from dexrouter.quoting import QuoteEngine
from dexrouter.router import Router
from dexrouter.types import LiquidityRequest

logger = structlog.get_logger()

router = APIRouter(prefix="/quote")

# Router served by the endpoints; set by dexrouter.api.main at startup
_router: Router | None = None


def set_router(instance: Router | None) -> None:
    """Install the router the endpoints quote against."""
    global _router
    _router = instance


def get_router() -> Router:
    """Dependency provider for the router instance.

    Override this in tests to inject a router:
        app.dependency_overrides[get_router] = lambda: my_router
    """
    if _router is None:
        raise HTTPException(status_code=503, detail="No pool registry configured")
    return _router


def get_quote_engine(router_instance: Router = Depends(get_router)) -> QuoteEngine:
    return router_instance.quotes


def get_liquidity_quoter(router_instance: Router = Depends(get_router)) -> LiquidityQuoter:
    return router_instance.liquidity


@router.post("/amounts-out")
def amounts_out(
    request: AmountsOutRequest,
    quotes: QuoteEngine = Depends(get_quote_engine),
) -> AmountsResponse:
    """Forward quote: every intermediate amount for selling exactly amountIn."""
    amounts = quotes.amounts_out(int(request.amount_in), request.path)
    logger.info("quote_amounts_out", hops=len(request.path) - 1, amount_out=amounts[-1])
    return AmountsResponse(path=request.path, amounts=[str(a) for a in amounts])


@router.post("/amounts-in")
def amounts_in(
    request: AmountsInRequest,
    quotes: QuoteEngine = Depends(get_quote_engine),
) -> AmountsResponse:
    """Inverse quote: every intermediate amount for buying exactly amountOut."""
    amounts = quotes.amounts_in(int(request.amount_out), request.path)
    logger.info("quote_amounts_in", hops=len(request.path) - 1, amount_in=amounts[0])
    return AmountsResponse(path=request.path, amounts=[str(a) for a in amounts])


@router.post("/liquidity", response_model_by_alias=True)
def liquidity(
    request: LiquidityQuoteRequest,
    quoter: LiquidityQuoter = Depends(get_liquidity_quoter),
) -> LiquidityQuoteResponse:
    """Ratio-respecting deposit amounts for a pair, without creating its pool."""
    amounts, pool_exists = quoter.preview(
        LiquidityRequest(
            token_a=request.token_a,
            token_b=request.token_b,
            amount_a_desired=int(request.amount_a_desired),
            amount_b_desired=int(request.amount_b_desired),
            amount_a_min=int(request.amount_a_min),
            amount_b_min=int(request.amount_b_min),
        )
    )
    return LiquidityQuoteResponse(
        amount_a=str(amounts.amount_a),
        amount_b=str(amounts.amount_b),
        pool_exists=pool_exists,
    )
