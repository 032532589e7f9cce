"""Pydantic schemas for portfolio endpoints."""

from decimal import Decimal

from pydantic import BaseModel, Field


class OwnedShareResponse(BaseModel):
    """A position in the portfolio, valued at the current share price."""

    share_id: int = Field(..., description="Share identifier")
    company_id: int = Field(..., description="Issuing company")
    company_name: str = Field(..., description="Issuing company name")
    ticker_symbol: str = Field(..., description="Ticker symbol")
    quantity: int = Field(..., description="Number of shares owned")
    current_price_per_share: Decimal = Field(..., description="Current share price")
    total_value: Decimal = Field(..., description="quantity * current price")
    stock_exchange: str = Field(..., description="Listing exchange")

    model_config = {"from_attributes": True}


class ShareholderPortfolioResponse(BaseModel):
    """Response schema for a shareholder's portfolio overview."""

    shareholder_id: int
    shareholder_name: str
    email: str
    total_portfolio_value: Decimal = Field(
        ..., description="Running portfolio value maintained by trades"
    )
    owned_shares: list[OwnedShareResponse] = Field(default_factory=list)
    total_shares_count: int = Field(..., description="Shares owned across positions")

    model_config = {"from_attributes": True}
