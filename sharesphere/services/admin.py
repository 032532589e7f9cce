"""Admin service - creation and listing of reference data.

Exchanges, companies, shares, brokers and shareholders are created
here (for seeding and administration). Nothing here touches share
inventory after creation, holdings or portfolio values; those belong
to the trade engine.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sharesphere.models import Broker, Company, Share, Shareholder, StockExchange
from sharesphere.schemas.admin import (
    BrokerCreate,
    CompanyCreate,
    ShareCreate,
    ShareholderCreate,
    StockExchangeCreate,
)


async def create_stock_exchange(
    session: AsyncSession, data: StockExchangeCreate
) -> StockExchange:
    """Create a stock exchange.

    Raises:
        IntegrityError: If an exchange with that name already exists
    """
    exchange = StockExchange(
        name=data.name,
        country=data.country,
        currency=data.currency.upper(),
    )
    session.add(exchange)
    await session.commit()
    await session.refresh(exchange)
    return exchange


async def list_stock_exchanges(session: AsyncSession) -> list[StockExchange]:
    """Get all stock exchanges."""
    result = await session.execute(select(StockExchange).order_by(StockExchange.id))
    return list(result.scalars().all())


async def create_company(session: AsyncSession, data: CompanyCreate) -> Company:
    """Create a company listed on an existing exchange.

    Args:
        session: Database session
        data: Company creation data

    Returns:
        The created company

    Raises:
        ValueError: If the exchange does not exist
        IntegrityError: If the ticker symbol already exists
    """
    if await session.get(StockExchange, data.exchange_id) is None:
        raise ValueError(f"Stock exchange with ID {data.exchange_id} was not found.")

    company = Company(
        name=data.name,
        ticker_symbol=data.ticker_symbol.upper(),
        exchange_id=data.exchange_id,
    )
    session.add(company)
    await session.commit()
    await session.refresh(company)
    return company


async def list_companies(session: AsyncSession) -> list[Company]:
    """Get all companies, ordered by ticker."""
    result = await session.execute(select(Company).order_by(Company.ticker_symbol))
    return list(result.scalars().all())


async def create_share(session: AsyncSession, data: ShareCreate) -> Share:
    """Issue a share listing for a company with its price and inventory.

    Raises:
        ValueError: If the company does not exist
    """
    if await session.get(Company, data.company_id) is None:
        raise ValueError(f"Company with ID {data.company_id} was not found.")

    share = Share(
        company_id=data.company_id,
        price=data.price,
        available_quantity=data.available_quantity,
    )
    session.add(share)
    await session.commit()
    await session.refresh(share)
    return share


async def list_shares(session: AsyncSession) -> list[Share]:
    """Get all shares."""
    result = await session.execute(select(Share).order_by(Share.id))
    return list(result.scalars().all())


async def create_broker(session: AsyncSession, data: BrokerCreate) -> Broker:
    """Register a broker.

    Raises:
        IntegrityError: If the license number already exists
    """
    broker = Broker(
        name=data.name,
        license_number=data.license_number,
        email=data.email,
    )
    session.add(broker)
    await session.commit()
    await session.refresh(broker)
    return broker


async def list_brokers(session: AsyncSession) -> list[Broker]:
    """Get all brokers."""
    result = await session.execute(select(Broker).order_by(Broker.name))
    return list(result.scalars().all())


async def create_shareholder(
    session: AsyncSession, data: ShareholderCreate
) -> Shareholder:
    """Register a shareholder with an empty portfolio.

    Portfolio value always starts at zero; only trades change it.

    Raises:
        IntegrityError: If the email already exists
    """
    shareholder = Shareholder(name=data.name, email=data.email)
    session.add(shareholder)
    await session.commit()
    await session.refresh(shareholder)
    return shareholder


async def list_shareholders(session: AsyncSession) -> list[Shareholder]:
    """Get all shareholders."""
    result = await session.execute(select(Shareholder).order_by(Shareholder.id))
    return list(result.scalars().all())
