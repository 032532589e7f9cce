"""Portfolio API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from sharesphere.database import get_session
from sharesphere.schemas.portfolio import OwnedShareResponse, ShareholderPortfolioResponse
from sharesphere.services import portfolio as portfolio_service

router = APIRouter()


@router.get(
    "/shareholders/{shareholder_id}/portfolio",
    response_model=ShareholderPortfolioResponse,
    summary="Get a shareholder's portfolio",
)
async def get_portfolio(
    shareholder_id: int,
    session: AsyncSession = Depends(get_session),
) -> ShareholderPortfolioResponse:
    """Get all positions of a shareholder, valued at current prices.

    **What the numbers mean:**
    - **total_portfolio_value**: Running total kept up to date by every trade
    - **owned_shares**: One entry per share held
    - **total_shares_count**: Shares owned across all positions
    """
    portfolio = await portfolio_service.get_shareholder_portfolio(session, shareholder_id)

    if portfolio is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Shareholder with ID {shareholder_id} was not found.",
        )

    return ShareholderPortfolioResponse(
        shareholder_id=portfolio.shareholder_id,
        shareholder_name=portfolio.shareholder_name,
        email=portfolio.email,
        total_portfolio_value=portfolio.total_portfolio_value,
        owned_shares=[OwnedShareResponse.model_validate(s) for s in portfolio.owned_shares],
        total_shares_count=portfolio.total_shares_count,
    )
