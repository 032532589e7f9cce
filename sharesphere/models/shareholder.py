"""
Shareholder model - an investor who owns holdings.

portfolio_value is a denormalized running total of quantity * price
over the shareholder's holdings. The trade engine adjusts it on every
buy and sell instead of recomputing it.
"""

from decimal import Decimal

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sharesphere.database import Base


class Shareholder(Base):
    """An investor on the platform."""

    __tablename__ = "shareholders"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    # Numeric(18,2) - same precision as share prices
    portfolio_value: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, default=Decimal("0.00")
    )

    # Optimistic concurrency token, bumped on every UPDATE
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    holdings: Mapped[list["Holding"]] = relationship(back_populates="shareholder")
    trades: Mapped[list["Trade"]] = relationship(back_populates="shareholder")

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"Shareholder(id={self.id}, name={self.name!r}, "
            f"portfolio_value={self.portfolio_value})"
        )


# Import at end to avoid circular imports
from sharesphere.models.holding import Holding
from sharesphere.models.trade import Trade
