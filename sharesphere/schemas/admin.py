"""Pydantic schemas for admin endpoints."""

from decimal import Decimal

from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class StockExchangeCreate(BaseModel):
    """Request schema for creating a stock exchange."""

    name: str = Field(..., min_length=1, max_length=100, description="Exchange name")
    country: str = Field(..., min_length=1, max_length=100, description="Country")
    currency: str = Field(..., min_length=3, max_length=3, description="ISO currency code")


class StockExchangeResponse(BaseModel):
    """Response schema for stock exchange data."""

    id: int
    name: str
    country: str
    currency: str

    model_config = {"from_attributes": True}


class CompanyCreate(BaseModel):
    """Request schema for creating a company."""

    name: str = Field(..., min_length=1, max_length=255, description="Company name")
    ticker_symbol: str = Field(
        ..., min_length=1, max_length=10, description="Unique ticker symbol"
    )
    exchange_id: int = Field(..., description="Exchange the company is listed on")


class CompanyResponse(BaseModel):
    """Response schema for company data."""

    id: int
    name: str
    ticker_symbol: str
    exchange_id: int

    model_config = {"from_attributes": True}


class ShareCreate(BaseModel):
    """Request schema for issuing a share listing."""

    company_id: int = Field(..., description="Issuing company")
    price: Decimal = Field(..., gt=0, decimal_places=2, description="Price per share")
    available_quantity: int = Field(
        ..., ge=0, description="Shares available for purchase"
    )


class ShareResponse(BaseModel):
    """Response schema for share data."""

    id: int
    company_id: int
    price: Decimal
    available_quantity: int

    model_config = {"from_attributes": True}


class BrokerCreate(BaseModel):
    """Request schema for registering a broker."""

    name: str = Field(..., min_length=2, max_length=100, description="Broker name")
    license_number: str = Field(
        ...,
        max_length=50,
        pattern=r"^[A-Z0-9\-]+$",
        description="Upper-case letters, digits and hyphens",
    )
    email: str = Field(..., max_length=100, pattern=EMAIL_PATTERN)


class BrokerResponse(BaseModel):
    """Response schema for broker data."""

    id: int
    name: str
    license_number: str
    email: str

    model_config = {"from_attributes": True}


class ShareholderCreate(BaseModel):
    """Request schema for registering a shareholder."""

    name: str = Field(..., min_length=1, max_length=100, description="Full name")
    email: str = Field(..., max_length=100, pattern=EMAIL_PATTERN)


class ShareholderResponse(BaseModel):
    """Response schema for shareholder data."""

    id: int
    name: str
    email: str
    portfolio_value: Decimal

    model_config = {"from_attributes": True}
