"""
StockExchange model - the venue a company is listed on.

Reference data only; the trade engine never touches it.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sharesphere.database import Base


class StockExchange(Base):
    """A stock exchange (e.g. NYSE, Euronext)."""

    __tablename__ = "stock_exchanges"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    # ISO currency code the exchange quotes in
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    companies: Mapped[list["Company"]] = relationship(back_populates="exchange")

    def __repr__(self) -> str:
        return f"StockExchange(id={self.id}, name={self.name!r})"


# Import at end to avoid circular imports
from sharesphere.models.company import Company
