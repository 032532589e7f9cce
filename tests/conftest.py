"""
Shared pytest fixtures for testing ShareSphere.

Uses an in-memory SQLite database for fast, isolated tests.
"""

from dataclasses import dataclass
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sharesphere.database import Base, get_session
from sharesphere.main import app
from sharesphere.models import (
    Broker,
    Company,
    Holding,
    Share,
    Shareholder,
    StockExchange,
    Trade,
)


# Use in-memory SQLite for tests (fast, isolated)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="session")
def anyio_backend():
    """Use asyncio backend for pytest-asyncio."""
    return "asyncio"


@pytest_asyncio.fixture
async def test_engine():
    """Create a test database engine.

    Creates tables at the start, drops them at the end.
    Each test gets a fresh database.
    """
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine):
    """Provide a database session for a test.

    Rolls back the session after each test for isolation.
    """
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_client(test_engine):
    """Provide a FastAPI test client with test database.

    Overrides the get_session dependency to use our test database.
    """
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_session():
        async with async_session() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


# --- Helper fixtures for creating test data ---


@dataclass
class Market:
    """IDs of the rows created by the ``market`` fixture.

    Tests keep IDs rather than ORM instances because a rolled-back
    trade expires every instance in the session.
    """

    exchange_id: int
    company_id: int
    share_id: int
    shareholder_id: int
    broker_id: int


@dataclass
class MarketState:
    """Snapshot of the rows a trade touches."""

    available_quantity: int
    holding_quantity: int | None
    portfolio_value: Decimal
    trade_count: int


@pytest_asyncio.fixture
async def market(test_session):
    """Create an exchange, a company with one share, a shareholder and a broker.

    The share costs 100.00 with 50 available; the shareholder starts
    with an empty portfolio.
    """
    exchange = StockExchange(
        name="New York Stock Exchange", country="United States", currency="USD"
    )
    test_session.add(exchange)
    await test_session.flush()

    company = Company(name="Test Company", ticker_symbol="TEST", exchange_id=exchange.id)
    test_session.add(company)
    await test_session.flush()

    share = Share(company_id=company.id, price=Decimal("100.00"), available_quantity=50)
    shareholder = Shareholder(name="Max Mustermann", email="max@example.com")
    broker = Broker(name="Test Broker", license_number="LIC123", email="broker@example.com")
    test_session.add_all([share, shareholder, broker])
    await test_session.commit()

    return Market(
        exchange_id=exchange.id,
        company_id=company.id,
        share_id=share.id,
        shareholder_id=shareholder.id,
        broker_id=broker.id,
    )


@pytest.fixture
def read_state(test_session):
    """Return a coroutine that reads the current state of a market from the DB."""

    async def read(market: Market) -> MarketState:
        share = await test_session.get(Share, market.share_id, populate_existing=True)
        shareholder = await test_session.get(
            Shareholder, market.shareholder_id, populate_existing=True
        )
        holding = await test_session.get(
            Holding, (market.shareholder_id, market.share_id), populate_existing=True
        )
        trade_count = await test_session.scalar(select(func.count()).select_from(Trade))
        return MarketState(
            available_quantity=share.available_quantity,
            holding_quantity=holding.quantity if holding else None,
            portfolio_value=shareholder.portfolio_value,
            trade_count=trade_count,
        )

    return read
