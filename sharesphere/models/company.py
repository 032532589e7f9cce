"""
Company model - an issuer whose shares can be traded.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sharesphere.database import Base


class Company(Base):
    """A listed company."""

    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Unique ticker symbol, stored upper-case (e.g. "ACME")
    ticker_symbol: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)

    exchange_id: Mapped[int] = mapped_column(
        ForeignKey("stock_exchanges.id"), nullable=False
    )

    # Relationships
    exchange: Mapped["StockExchange"] = relationship(back_populates="companies")
    shares: Mapped[list["Share"]] = relationship(back_populates="company")
    trades: Mapped[list["Trade"]] = relationship(back_populates="company")

    def __repr__(self) -> str:
        return f"Company(id={self.id}, ticker={self.ticker_symbol!r}, name={self.name!r})"


# Import at end to avoid circular imports
from sharesphere.models.share import Share
from sharesphere.models.stock_exchange import StockExchange
from sharesphere.models.trade import Trade
