"""Property-based tests for the trade engine.

Random sequences of buys and sells over two shareholders and two
shares must keep inventory, holdings, portfolio values and the trade
log consistent with each other.
"""

import asyncio
from dataclasses import dataclass
from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from sharesphere.database import Base
from sharesphere.models import (
    Broker,
    Company,
    Holding,
    Share,
    Shareholder,
    StockExchange,
    Trade,
)
from sharesphere.services import portfolio, trading


INITIAL_SUPPLY = {0: 30, 1: 12}
PRICES = {0: Decimal("12.50"), 1: Decimal("99.99")}


@dataclass(frozen=True)
class Action:
    side: str
    shareholder: int
    share: int
    quantity: int


actions = st.builds(
    Action,
    side=st.sampled_from(["buy", "sell"]),
    shareholder=st.integers(min_value=0, max_value=1),
    share=st.integers(min_value=0, max_value=1),
    quantity=st.integers(min_value=-2, max_value=40),
)


async def _setup(session: AsyncSession) -> tuple[list[int], list[int], int]:
    exchange = StockExchange(name="Frankfurter Wertpapierbörse", country="Germany", currency="EUR")
    session.add(exchange)
    await session.flush()

    share_ids = []
    for index, supply in INITIAL_SUPPLY.items():
        company = Company(
            name=f"Company {index}", ticker_symbol=f"CO{index}", exchange_id=exchange.id
        )
        session.add(company)
        await session.flush()
        share = Share(company_id=company.id, price=PRICES[index], available_quantity=supply)
        session.add(share)
        await session.flush()
        share_ids.append(share.id)

    shareholders = [
        Shareholder(name=f"Holder {i}", email=f"holder{i}@example.com") for i in range(2)
    ]
    broker = Broker(name="Broker", license_number="PROP-1", email="broker@example.com")
    session.add_all([*shareholders, broker])
    await session.commit()
    return [s.id for s in shareholders], share_ids, broker.id


async def _snapshot(session: AsyncSession) -> dict:
    shares = (
        await session.execute(select(Share).execution_options(populate_existing=True))
    ).scalars().all()
    holders = (
        await session.execute(select(Shareholder).execution_options(populate_existing=True))
    ).scalars().all()
    positions = (
        await session.execute(select(Holding).execution_options(populate_existing=True))
    ).scalars().all()
    trade_count = await session.scalar(select(func.count()).select_from(Trade))
    return {
        "available": {s.id: s.available_quantity for s in shares},
        "values": {h.id: h.portfolio_value for h in holders},
        "holdings": {(h.shareholder_id, h.share_id): h.quantity for h in positions},
        "trades": trade_count,
    }


async def _run(sequence: list[Action]) -> None:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    sessions = async_sessionmaker(bind=engine, expire_on_commit=False)
    try:
        async with sessions() as session:
            shareholder_ids, share_ids, broker_id = await _setup(session)
            supply = {share_ids[i]: q for i, q in INITIAL_SUPPLY.items()}
            successes = 0

            for action in sequence:
                before = await _snapshot(session)
                execute = trading.buy_shares if action.side == "buy" else trading.sell_shares
                result = await execute(
                    session,
                    shareholder_ids[action.shareholder],
                    share_ids[action.share],
                    action.quantity,
                    broker_id,
                )
                after = await _snapshot(session)

                if result.success:
                    successes += 1
                else:
                    assert after == before

                assert after["trades"] == successes
                assert all(q >= 0 for q in after["available"].values())
                assert all(q > 0 for q in after["holdings"].values())

                for share_id, initial in supply.items():
                    held = sum(
                        q for (_, s), q in after["holdings"].items() if s == share_id
                    )
                    assert after["available"][share_id] + held == initial

                for shareholder_id in shareholder_ids:
                    expected = await portfolio.compute_portfolio_value(session, shareholder_id)
                    assert after["values"][shareholder_id] == expected
    finally:
        await engine.dispose()


class TestTradeInvariants:

    @given(sequence=st.lists(actions, max_size=25))
    @settings(max_examples=30, deadline=None)
    def test_random_trades_preserve_invariants(self, sequence):
        asyncio.run(_run(sequence))
