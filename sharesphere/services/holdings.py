"""Holdings store - row access used by the trade engine.

All reads that feed a trade decision can take row locks
(``for_update=True``), which become ``SELECT ... FOR UPDATE`` on
PostgreSQL. SQLite ignores the clause and serializes writers instead.
Share, Shareholder and Holding rows are also versioned, so an update
based on a stale read fails at flush with ``StaleDataError``.

None of these functions commit; the caller owns the transaction.
"""

from datetime import datetime, UTC

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from sharesphere.models import Broker, Company, Holding, Share, Shareholder, Trade, TradeType


async def get_shareholder(
    session: AsyncSession,
    shareholder_id: int,
    *,
    with_holdings: bool = False,
    for_update: bool = False,
) -> Shareholder | None:
    """Get a shareholder by ID.

    Args:
        session: Database session
        shareholder_id: Shareholder ID
        with_holdings: Also load holdings with their share, company and exchange
        for_update: Lock the shareholder row until the transaction ends

    Returns:
        Shareholder or None if not found
    """
    query = select(Shareholder).where(Shareholder.id == shareholder_id)

    if with_holdings:
        query = query.options(
            selectinload(Shareholder.holdings)
            .selectinload(Holding.share)
            .selectinload(Share.company)
            .selectinload(Company.exchange)
        )
    if for_update:
        query = query.with_for_update()

    result = await session.execute(query.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def get_share(
    session: AsyncSession, share_id: int, *, for_update: bool = False
) -> Share | None:
    """Get a share by ID, with its company loaded.

    Args:
        session: Database session
        share_id: Share ID
        for_update: Lock the share row until the transaction ends

    Returns:
        Share or None if not found
    """
    query = (
        select(Share)
        .where(Share.id == share_id)
        .options(selectinload(Share.company))
    )
    if for_update:
        query = query.with_for_update()

    result = await session.execute(query.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def get_broker(session: AsyncSession, broker_id: int) -> Broker | None:
    """Get a broker by ID."""
    result = await session.execute(select(Broker).where(Broker.id == broker_id))
    return result.scalar_one_or_none()


async def get_holding(
    session: AsyncSession,
    shareholder_id: int,
    share_id: int,
    *,
    for_update: bool = False,
) -> Holding | None:
    """Get a shareholder's holding in one share.

    Args:
        session: Database session
        shareholder_id: Shareholder ID
        share_id: Share ID
        for_update: Lock the holding row until the transaction ends

    Returns:
        Holding or None if the shareholder owns none of the share
    """
    query = select(Holding).where(
        and_(Holding.shareholder_id == shareholder_id, Holding.share_id == share_id)
    )
    if for_update:
        query = query.with_for_update()

    result = await session.execute(query.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def list_holdings(session: AsyncSession, shareholder_id: int) -> list[Holding]:
    """Get all holdings of a shareholder with share, company and exchange loaded."""
    result = await session.execute(
        select(Holding)
        .where(Holding.shareholder_id == shareholder_id)
        .options(
            selectinload(Holding.share)
            .selectinload(Share.company)
            .selectinload(Company.exchange)
        )
        .order_by(Holding.share_id)
    )
    return list(result.scalars().all())


def add_to_holding(
    session: AsyncSession,
    holding: Holding | None,
    shareholder_id: int,
    share_id: int,
    quantity: int,
) -> Holding:
    """Increase a position, creating the holding on first purchase.

    Args:
        session: Database session
        holding: Existing holding, or None if the shareholder owns none yet
        shareholder_id: Shareholder ID
        share_id: Share ID
        quantity: Number of shares bought (positive)

    Returns:
        The created or updated holding
    """
    if holding is not None:
        holding.quantity += quantity
        return holding

    holding = Holding(
        shareholder_id=shareholder_id,
        share_id=share_id,
        quantity=quantity,
    )
    session.add(holding)
    return holding


async def remove_from_holding(
    session: AsyncSession, holding: Holding, quantity: int
) -> Holding | None:
    """Decrease a position, deleting the holding when it reaches zero.

    The caller must already have checked ``quantity <= holding.quantity``.

    Returns:
        The updated holding, or None if it was deleted
    """
    if holding.quantity == quantity:
        await session.delete(holding)
        return None

    holding.quantity -= quantity
    return holding


def append_trade(
    session: AsyncSession,
    *,
    shareholder_id: int,
    share: Share,
    broker_id: int,
    quantity: int,
    trade_type: TradeType,
) -> Trade:
    """Append a trade record priced at the share's current price."""
    trade = Trade(
        shareholder_id=shareholder_id,
        share_id=share.id,
        company_id=share.company_id,
        broker_id=broker_id,
        quantity=quantity,
        unit_price=share.price,
        trade_type=trade_type,
        timestamp=datetime.now(UTC),
    )
    session.add(trade)
    return trade
