"""Pydantic schemas for the buy/sell endpoints."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class TradeType(str, Enum):
    """Buy or sell."""

    BUY = "BUY"
    SELL = "SELL"


class TradeRequest(BaseModel):
    """Request body for a purchase or sale.

    Quantity is deliberately not range-checked here; the trade engine
    rejects non-positive quantities with its own message.
    """

    share_id: int = Field(..., description="Share to trade")
    quantity: int = Field(..., description="Number of shares")
    broker_id: int = Field(..., description="Broker executing the trade")


class TradeResponse(BaseModel):
    """Response schema for a trade record."""

    id: int
    shareholder_id: int
    share_id: int
    company_id: int
    broker_id: int
    trade_type: TradeType
    quantity: int
    unit_price: Decimal
    timestamp: datetime

    model_config = {"from_attributes": True}


class HoldingResponse(BaseModel):
    """Response schema for a single holding."""

    shareholder_id: int
    share_id: int
    quantity: int

    model_config = {"from_attributes": True}


class TradeResultResponse(BaseModel):
    """Response for a successful purchase or sale.

    ``holding`` is null after a sale that emptied the position.
    """

    success: bool
    message: str
    trade: TradeResponse
    holding: HoldingResponse | None = None


class TradesResponse(BaseModel):
    """Response for listing trades."""

    trades: list[TradeResponse] = Field(default_factory=list)
