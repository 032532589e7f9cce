"""Admin API endpoints - reference data setup."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sharesphere.database import get_session
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
from sharesphere.services import admin as admin_service

router = APIRouter()


# ============================================================================
# Stock exchanges
# ============================================================================


@router.post(
    "/exchanges",
    response_model=StockExchangeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a stock exchange",
)
async def create_stock_exchange(
    data: StockExchangeCreate,
    session: AsyncSession = Depends(get_session),
) -> StockExchangeResponse:
    """Register a stock exchange companies can be listed on."""
    try:
        exchange = await admin_service.create_stock_exchange(session, data)
        return StockExchangeResponse.model_validate(exchange)
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Stock exchange '{data.name}' already exists",
        )


@router.get(
    "/exchanges",
    response_model=list[StockExchangeResponse],
    summary="List stock exchanges",
)
async def list_stock_exchanges(
    session: AsyncSession = Depends(get_session),
) -> list[StockExchangeResponse]:
    """Get all stock exchanges."""
    exchanges = await admin_service.list_stock_exchanges(session)
    return [StockExchangeResponse.model_validate(e) for e in exchanges]


# ============================================================================
# Companies and shares
# ============================================================================


@router.post(
    "/companies",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a company",
)
async def create_company(
    data: CompanyCreate,
    session: AsyncSession = Depends(get_session),
) -> CompanyResponse:
    """Register a company.

    - **name**: Company name
    - **ticker_symbol**: Unique symbol (will be uppercased)
    - **exchange_id**: Exchange the company is listed on
    """
    try:
        company = await admin_service.create_company(session, data)
        return CompanyResponse.model_validate(company)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Company with ticker '{data.ticker_symbol.upper()}' already exists",
        )


@router.get(
    "/companies",
    response_model=list[CompanyResponse],
    summary="List companies",
)
async def list_companies(
    session: AsyncSession = Depends(get_session),
) -> list[CompanyResponse]:
    """Get all companies."""
    companies = await admin_service.list_companies(session)
    return [CompanyResponse.model_validate(c) for c in companies]


@router.post(
    "/shares",
    response_model=ShareResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue shares",
)
async def create_share(
    data: ShareCreate,
    session: AsyncSession = Depends(get_session),
) -> ShareResponse:
    """Issue a share listing for a company.

    - **price**: Execution price per share
    - **available_quantity**: Shares available for purchase
    """
    try:
        share = await admin_service.create_share(session, data)
        return ShareResponse.model_validate(share)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get(
    "/shares",
    response_model=list[ShareResponse],
    summary="List shares",
)
async def list_shares(
    session: AsyncSession = Depends(get_session),
) -> list[ShareResponse]:
    """Get all shares with their price and available quantity."""
    shares = await admin_service.list_shares(session)
    return [ShareResponse.model_validate(s) for s in shares]


# ============================================================================
# Brokers and shareholders
# ============================================================================


@router.post(
    "/brokers",
    response_model=BrokerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a broker",
)
async def create_broker(
    data: BrokerCreate,
    session: AsyncSession = Depends(get_session),
) -> BrokerResponse:
    """Register a licensed broker."""
    try:
        broker = await admin_service.create_broker(session, data)
        return BrokerResponse.model_validate(broker)
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Broker with license '{data.license_number}' already exists",
        )


@router.get(
    "/brokers",
    response_model=list[BrokerResponse],
    summary="List brokers",
)
async def list_brokers(
    session: AsyncSession = Depends(get_session),
) -> list[BrokerResponse]:
    """Get all brokers."""
    brokers = await admin_service.list_brokers(session)
    return [BrokerResponse.model_validate(b) for b in brokers]


@router.post(
    "/shareholders",
    response_model=ShareholderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a shareholder",
)
async def create_shareholder(
    data: ShareholderCreate,
    session: AsyncSession = Depends(get_session),
) -> ShareholderResponse:
    """Register a shareholder. The portfolio starts empty."""
    try:
        shareholder = await admin_service.create_shareholder(session, data)
        return ShareholderResponse.model_validate(shareholder)
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Shareholder with email '{data.email}' already exists",
        )


@router.get(
    "/shareholders",
    response_model=list[ShareholderResponse],
    summary="List shareholders",
)
async def list_shareholders(
    session: AsyncSession = Depends(get_session),
) -> list[ShareholderResponse]:
    """Get all shareholders."""
    shareholders = await admin_service.list_shareholders(session)
    return [ShareholderResponse.model_validate(s) for s in shareholders]
