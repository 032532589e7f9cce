"""Tests for the holdings store."""

from decimal import Decimal

import pytest
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from sharesphere.models import Holding, Share, TradeType
from sharesphere.services import holdings


class TestLookups:
    """Tests for the get_* functions."""

    @pytest.mark.asyncio
    async def test_get_share_loads_company(self, test_session, market):
        share = await holdings.get_share(test_session, market.share_id, for_update=True)

        assert share.price == Decimal("100.00")
        assert share.company.ticker_symbol == "TEST"

    @pytest.mark.asyncio
    async def test_missing_rows_return_none(self, test_session, market):
        assert await holdings.get_share(test_session, 404) is None
        assert await holdings.get_shareholder(test_session, 404) is None
        assert await holdings.get_broker(test_session, 404) is None
        assert (
            await holdings.get_holding(test_session, market.shareholder_id, market.share_id)
            is None
        )

    @pytest.mark.asyncio
    async def test_get_shareholder_with_holdings(self, test_session, market):
        test_session.add(
            Holding(shareholder_id=market.shareholder_id, share_id=market.share_id, quantity=3)
        )
        await test_session.commit()

        shareholder = await holdings.get_shareholder(
            test_session, market.shareholder_id, with_holdings=True
        )

        assert [h.quantity for h in shareholder.holdings] == [3]
        assert shareholder.holdings[0].share.company.exchange.currency == "USD"


class TestHoldingMutations:
    """Tests for add_to_holding and remove_from_holding."""

    @pytest.mark.asyncio
    async def test_add_creates_holding(self, test_session, market):
        holding = holdings.add_to_holding(
            test_session, None, market.shareholder_id, market.share_id, 7
        )
        await test_session.commit()

        stored = await holdings.get_holding(test_session, market.shareholder_id, market.share_id)
        assert stored is holding
        assert stored.quantity == 7

    @pytest.mark.asyncio
    async def test_add_increments_existing(self, test_session, market):
        existing = holdings.add_to_holding(
            test_session, None, market.shareholder_id, market.share_id, 7
        )
        await test_session.commit()

        holding = holdings.add_to_holding(
            test_session, existing, market.shareholder_id, market.share_id, 3
        )
        await test_session.commit()

        assert holding is existing
        assert holding.quantity == 10

    @pytest.mark.asyncio
    async def test_remove_partial(self, test_session, market):
        holding = holdings.add_to_holding(
            test_session, None, market.shareholder_id, market.share_id, 10
        )
        await test_session.commit()

        remaining = await holdings.remove_from_holding(test_session, holding, 4)
        await test_session.commit()

        assert remaining.quantity == 6

    @pytest.mark.asyncio
    async def test_remove_all_deletes_row(self, test_session, market):
        holding = holdings.add_to_holding(
            test_session, None, market.shareholder_id, market.share_id, 10
        )
        await test_session.commit()

        remaining = await holdings.remove_from_holding(test_session, holding, 10)
        await test_session.commit()

        assert remaining is None
        assert (
            await holdings.get_holding(test_session, market.shareholder_id, market.share_id)
            is None
        )

    @pytest.mark.asyncio
    async def test_duplicate_holding_rejected(self, test_session, market):
        """The composite key allows one holding per shareholder and share."""
        test_session.add(
            Holding(shareholder_id=market.shareholder_id, share_id=market.share_id, quantity=1)
        )
        await test_session.commit()
        test_session.expunge_all()

        test_session.add(
            Holding(shareholder_id=market.shareholder_id, share_id=market.share_id, quantity=2)
        )
        with pytest.raises(IntegrityError):
            await test_session.commit()

    @pytest.mark.asyncio
    async def test_zero_quantity_rejected(self, test_session, market):
        test_session.add(
            Holding(shareholder_id=market.shareholder_id, share_id=market.share_id, quantity=0)
        )
        with pytest.raises(IntegrityError):
            await test_session.commit()


class TestAppendTrade:
    """Tests for append_trade."""

    @pytest.mark.asyncio
    async def test_trade_priced_from_share(self, test_session, market):
        share = await holdings.get_share(test_session, market.share_id)

        trade = holdings.append_trade(
            test_session,
            shareholder_id=market.shareholder_id,
            share=share,
            broker_id=market.broker_id,
            quantity=4,
            trade_type=TradeType.BUY,
        )
        await test_session.commit()

        assert trade.id is not None
        assert trade.unit_price == Decimal("100.00")
        assert trade.company_id == market.company_id
        assert trade.total_value == Decimal("400.00")


class TestVersioning:
    """Optimistic concurrency on versioned rows."""

    @pytest.mark.asyncio
    async def test_version_bumps_on_update(self, test_session, market):
        share = await holdings.get_share(test_session, market.share_id)
        assert share.version == 1

        share.available_quantity -= 1
        await test_session.commit()

        assert share.version == 2

    @pytest.mark.asyncio
    async def test_stale_update_detected(self, test_session, market):
        """Writing over a row changed since it was read fails at flush."""
        share = await holdings.get_share(test_session, market.share_id)

        # Someone else updates the row behind the session's back
        await test_session.execute(
            update(Share)
            .where(Share.id == market.share_id)
            .values(available_quantity=0, version=Share.version + 1)
            .execution_options(synchronize_session=False)
        )

        share.available_quantity -= 10
        with pytest.raises(StaleDataError):
            await test_session.flush()
