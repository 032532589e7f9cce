"""Pydantic schemas for request/response validation."""

from sharesphere.schemas.admin import (
    BrokerCreate,
    BrokerResponse,
    CompanyCreate,
    CompanyResponse,
    ShareCreate,
    ShareholderCreate,
    ShareholderResponse,
    ShareResponse,
    StockExchangeCreate,
    StockExchangeResponse,
)
from sharesphere.schemas.portfolio import OwnedShareResponse, ShareholderPortfolioResponse
from sharesphere.schemas.trading import (
    HoldingResponse,
    TradeRequest,
    TradeResponse,
    TradeResultResponse,
    TradesResponse,
)

__all__ = [
    # Admin schemas
    "StockExchangeCreate",
    "StockExchangeResponse",
    "CompanyCreate",
    "CompanyResponse",
    "ShareCreate",
    "ShareResponse",
    "BrokerCreate",
    "BrokerResponse",
    "ShareholderCreate",
    "ShareholderResponse",
    # Portfolio schemas
    "OwnedShareResponse",
    "ShareholderPortfolioResponse",
    # Trading schemas
    "TradeRequest",
    "TradeResponse",
    "HoldingResponse",
    "TradeResultResponse",
    "TradesResponse",
]
