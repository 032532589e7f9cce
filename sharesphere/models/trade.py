"""
Trade model - historical record of executed buys and sells.

Trades are append-only (never modified or deleted). The unit price is
copied from the share at execution time, not referenced, so later
price changes do not rewrite history.
"""

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sharesphere.database import Base


class TradeType(enum.Enum):
    """Direction of a trade from the shareholder's point of view."""

    BUY = "BUY"
    SELL = "SELL"


class Trade(Base):
    """A completed buy or sell by a shareholder through a broker."""

    __tablename__ = "trades"

    id: Mapped[int] = mapped_column(primary_key=True)

    shareholder_id: Mapped[int] = mapped_column(
        ForeignKey("shareholders.id"), nullable=False, index=True
    )
    share_id: Mapped[int] = mapped_column(ForeignKey("shares.id"), nullable=False)

    # Issuer of the traded share, denormalized for history queries by company
    company_id: Mapped[int] = mapped_column(
        ForeignKey("companies.id"), nullable=False, index=True
    )

    broker_id: Mapped[int] = mapped_column(
        ForeignKey("brokers.id"), nullable=False, index=True
    )

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    # Share price at the instant of execution
    unit_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    trade_type: Mapped[TradeType] = mapped_column(Enum(TradeType), nullable=False)

    # When the trade executed (UTC)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Relationships
    shareholder: Mapped["Shareholder"] = relationship(back_populates="trades")
    share: Mapped["Share"] = relationship()
    company: Mapped["Company"] = relationship(back_populates="trades")
    broker: Mapped["Broker"] = relationship(back_populates="trades")

    # Database constraints
    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_trade_quantity_positive"),
        CheckConstraint("unit_price > 0", name="check_trade_unit_price_positive"),
    )

    @property
    def total_value(self) -> Decimal:
        """Cash value of the trade (quantity * unit_price)."""
        return self.unit_price * self.quantity

    def __repr__(self) -> str:
        return (
            f"Trade(id={self.id}, {self.trade_type.value} {self.quantity} "
            f"share={self.share_id} @ {self.unit_price}, shareholder={self.shareholder_id})"
        )


# Import at end to avoid circular imports
from sharesphere.models.broker import Broker
from sharesphere.models.company import Company
from sharesphere.models.share import Share
from sharesphere.models.shareholder import Shareholder
