"""
Broker model - a licensed intermediary named on every trade.

The trade engine only checks that the broker exists.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sharesphere.database import Base


class Broker(Base):
    """A licensed broker who can execute trades."""

    __tablename__ = "brokers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Upper-case letters, digits and hyphens (e.g. "LIC-0042")
    license_number: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    email: Mapped[str] = mapped_column(String(100), nullable=False)

    trades: Mapped[list["Trade"]] = relationship(back_populates="broker")

    def __repr__(self) -> str:
        return f"Broker(id={self.id}, name={self.name!r})"


# Import at end to avoid circular imports
from sharesphere.models.trade import Trade
