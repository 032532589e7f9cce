"""Tests for conflict handling in the trade engine.

A conflict is a stale row version or a racing insert of the same
holding. The engine rolls back and re-runs the trade from fresh reads.
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm.exc import StaleDataError

from sharesphere.database import Base
from sharesphere.models import Broker, Company, Share, Shareholder, StockExchange
from sharesphere.services import holdings, trading
from sharesphere.services.trading import TradeError


class TestInjectedConflicts:
    """Conflicts raised from inside the mutation phase."""

    @pytest.mark.asyncio
    async def test_retry_after_conflict_succeeds(
        self, test_session, market, read_state, monkeypatch
    ):
        """A single conflict is retried and the trade applies exactly once."""
        calls = []
        original = holdings.append_trade

        def flaky_append_trade(session, **kwargs):
            calls.append(kwargs["quantity"])
            if len(calls) == 1:
                raise StaleDataError("simulated concurrent update")
            return original(session, **kwargs)

        monkeypatch.setattr(holdings, "append_trade", flaky_append_trade)

        result = await trading.buy_shares(
            test_session, market.shareholder_id, market.share_id, 20, market.broker_id
        )

        assert result.success
        assert len(calls) == 2

        state = await read_state(market)
        assert state.available_quantity == 30
        assert state.holding_quantity == 20
        assert state.portfolio_value == Decimal("2000.00")
        assert state.trade_count == 1

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(
        self, test_session, market, read_state, monkeypatch
    ):
        """Persistent conflicts end in a failure with no partial effects."""
        calls = []

        def always_stale(session, **kwargs):
            calls.append(1)
            raise StaleDataError("simulated concurrent update")

        monkeypatch.setattr(holdings, "append_trade", always_stale)
        monkeypatch.setattr(trading, "MAX_TRADE_ATTEMPTS", 4)
        before = await read_state(market)

        result = await trading.buy_shares(
            test_session, market.shareholder_id, market.share_id, 20, market.broker_id
        )

        assert not result.success
        assert result.error == TradeError.TRANSACTION_FAILURE
        assert result.message.startswith("An error occurred:")
        assert len(calls) == 4
        assert await read_state(market) == before


# ============================================================================
# Two sessions on one database file
# ============================================================================


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    """An engine on a database file, so two engines can share it."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'race.db'}"
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSession(engine, expire_on_commit=False) as session:
        exchange = StockExchange(name="NASDAQ", country="United States", currency="USD")
        session.add(exchange)
        await session.flush()
        company = Company(name="Race Corp", ticker_symbol="RACE", exchange_id=exchange.id)
        session.add(company)
        await session.flush()
        session.add_all([
            Share(company_id=company.id, price=Decimal("10.00"), available_quantity=25),
            Shareholder(name="First Buyer", email="first@example.com"),
            Broker(name="Race Broker", license_number="RACE-1", email="race@example.com"),
        ])
        await session.commit()

    yield engine
    await engine.dispose()


class TestConcurrentWriter:
    """Another connection commits between the engine's read and write."""

    @pytest.mark.asyncio
    async def test_oversell_prevented(self, file_engine, monkeypatch):
        """A stale availability check cannot push inventory below zero."""
        other_engine = create_async_engine(file_engine.url)
        original = holdings.get_holding
        raced = []

        async def racing_get_holding(session, shareholder_id, share_id, **kwargs):
            # A competing buyer takes 20 of the 25 shares after our checks ran
            if not raced:
                raced.append(True)
                async with other_engine.begin() as conn:
                    await conn.execute(
                        update(Share)
                        .where(Share.id == share_id)
                        .values(
                            available_quantity=Share.available_quantity - 20,
                            version=Share.version + 1,
                        )
                    )
            return await original(session, shareholder_id, share_id, **kwargs)

        monkeypatch.setattr(holdings, "get_holding", racing_get_holding)

        sessions = async_sessionmaker(bind=file_engine, expire_on_commit=False)
        async with sessions() as session:
            result = await trading.buy_shares(session, 1, 1, 15, 1)

        assert not result.success
        assert result.error == TradeError.INSUFFICIENT_MARKET_INVENTORY
        assert result.message == "Not enough shares available. Available: 5, Requested: 15."

        async with sessions() as session:
            share = await session.get(Share, 1)
            assert share.available_quantity == 5

        await other_engine.dispose()
