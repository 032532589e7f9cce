"""Trading API endpoints - buy and sell shares for a shareholder."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from sharesphere.database import get_session
from sharesphere.models import Trade
from sharesphere.schemas.trading import (
    HoldingResponse,
    TradeRequest,
    TradeResponse,
    TradeResultResponse,
    TradesResponse,
)
from sharesphere.services import portfolio as portfolio_service
from sharesphere.services import trading as trading_service
from sharesphere.services.trading import TradeResult

router = APIRouter()


def trade_to_response(trade: Trade) -> TradeResponse:
    """Build the API view of a trade record."""
    return TradeResponse(
        id=trade.id,
        shareholder_id=trade.shareholder_id,
        share_id=trade.share_id,
        company_id=trade.company_id,
        broker_id=trade.broker_id,
        trade_type=trade.trade_type.value,
        quantity=trade.quantity,
        unit_price=trade.unit_price,
        timestamp=trade.timestamp,
    )


def _to_response(result: TradeResult) -> TradeResultResponse:
    """Map an engine result to 200, or raise 400 carrying its message."""
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.message,
        )

    return TradeResultResponse(
        success=True,
        message=result.message,
        trade=trade_to_response(result.trade),
        holding=HoldingResponse.model_validate(result.holding) if result.holding else None,
    )


@router.post(
    "/shareholders/{shareholder_id}/purchase",
    response_model=TradeResultResponse,
    summary="Buy shares",
)
async def purchase_shares(
    shareholder_id: int,
    data: TradeRequest,
    session: AsyncSession = Depends(get_session),
) -> TradeResultResponse:
    """Buy shares at the share's current price.

    - **share_id**: Share to buy
    - **quantity**: Number of shares (must be greater than 0)
    - **broker_id**: Broker executing the trade
    """
    result = await trading_service.buy_shares(
        session, shareholder_id, data.share_id, data.quantity, data.broker_id
    )
    return _to_response(result)


@router.post(
    "/shareholders/{shareholder_id}/sell",
    response_model=TradeResultResponse,
    summary="Sell shares",
)
async def sell_shares(
    shareholder_id: int,
    data: TradeRequest,
    session: AsyncSession = Depends(get_session),
) -> TradeResultResponse:
    """Sell shares from the shareholder's holding at the current price.

    The holding is removed (``holding`` is null) when every share is sold.
    """
    result = await trading_service.sell_shares(
        session, shareholder_id, data.share_id, data.quantity, data.broker_id
    )
    return _to_response(result)


@router.get(
    "/trades",
    response_model=TradesResponse,
    summary="List trades",
)
async def list_trades(
    shareholder_id: int | None = Query(default=None, description="Filter by shareholder"),
    broker_id: int | None = Query(default=None, description="Filter by broker"),
    company_id: int | None = Query(default=None, description="Filter by company"),
    session: AsyncSession = Depends(get_session),
) -> TradesResponse:
    """Get executed trades, newest first."""
    trades = await portfolio_service.list_trades(
        session, shareholder_id=shareholder_id, broker_id=broker_id, company_id=company_id
    )
    return TradesResponse(trades=[trade_to_response(t) for t in trades])
