"""Portfolio service - portfolio overview, valuation and trade history."""

from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sharesphere.models import Trade
from sharesphere.services import holdings


@dataclass
class OwnedShare:
    """A single position in a shareholder's portfolio, valued at the current price."""

    share_id: int
    company_id: int
    company_name: str
    ticker_symbol: str
    quantity: int
    current_price_per_share: Decimal
    stock_exchange: str

    @property
    def total_value(self) -> Decimal:
        """Current value of the position (quantity * price)."""
        return self.current_price_per_share * self.quantity


@dataclass
class ShareholderPortfolio:
    """Overview of a shareholder's holdings."""

    shareholder_id: int
    shareholder_name: str
    email: str
    total_portfolio_value: Decimal  # stored running total
    owned_shares: list[OwnedShare] = field(default_factory=list)

    @property
    def total_shares_count(self) -> int:
        """Number of shares owned across all positions."""
        return sum(s.quantity for s in self.owned_shares)

    @property
    def market_value(self) -> Decimal:
        """Sum of position values recomputed at current prices."""
        return sum((s.total_value for s in self.owned_shares), Decimal("0.00"))


async def get_shareholder_portfolio(
    session: AsyncSession, shareholder_id: int
) -> ShareholderPortfolio | None:
    """Get the portfolio overview for a shareholder.

    Args:
        session: Database session
        shareholder_id: Shareholder ID

    Returns:
        Portfolio overview or None if the shareholder does not exist
    """
    shareholder = await holdings.get_shareholder(session, shareholder_id)
    if shareholder is None:
        return None

    owned = []
    for holding in await holdings.list_holdings(session, shareholder_id):
        company = holding.share.company
        owned.append(
            OwnedShare(
                share_id=holding.share_id,
                company_id=company.id,
                company_name=company.name,
                ticker_symbol=company.ticker_symbol,
                quantity=holding.quantity,
                current_price_per_share=holding.share.price,
                stock_exchange=company.exchange.name if company.exchange else "",
            )
        )

    return ShareholderPortfolio(
        shareholder_id=shareholder.id,
        shareholder_name=shareholder.name,
        email=shareholder.email,
        total_portfolio_value=shareholder.portfolio_value,
        owned_shares=owned,
    )


async def compute_portfolio_value(session: AsyncSession, shareholder_id: int) -> Decimal:
    """Recompute a shareholder's portfolio value from current holdings.

    This is the value the stored ``portfolio_value`` must equal as long
    as share prices have not changed since the holdings were traded.
    """
    total = Decimal("0.00")
    for holding in await holdings.list_holdings(session, shareholder_id):
        total += holding.share.price * holding.quantity
    return total


async def list_trades(
    session: AsyncSession,
    shareholder_id: int | None = None,
    broker_id: int | None = None,
    company_id: int | None = None,
) -> list[Trade]:
    """Get trade history, newest first.

    Args:
        session: Database session
        shareholder_id: Filter by shareholder (optional)
        broker_id: Filter by broker (optional)
        company_id: Filter by company (optional)

    Returns:
        List of trades
    """
    query = select(Trade)

    if shareholder_id is not None:
        query = query.where(Trade.shareholder_id == shareholder_id)
    if broker_id is not None:
        query = query.where(Trade.broker_id == broker_id)
    if company_id is not None:
        query = query.where(Trade.company_id == company_id)

    query = query.order_by(Trade.timestamp.desc(), Trade.id.desc())
    result = await session.execute(query)
    return list(result.scalars().all())
