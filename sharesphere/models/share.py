"""
Share model - a tradeable share class of a company.

Holds the static execution price and the market inventory
(available_quantity) that buys draw from and sells return to.
Only the trade engine changes available_quantity.
"""

from decimal import Decimal

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sharesphere.database import Base


class Share(Base):
    """A share listing with price and purchasable inventory."""

    __tablename__ = "shares"

    id: Mapped[int] = mapped_column(primary_key=True)

    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id"), nullable=False)

    # Current execution price per share
    price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    # Shares still purchasable from the issuer pool
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Optimistic concurrency token, bumped on every UPDATE
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    company: Mapped["Company"] = relationship(back_populates="shares")
    holdings: Mapped[list["Holding"]] = relationship(back_populates="share")

    __mapper_args__ = {"version_id_col": version}

    # Database constraints
    __table_args__ = (
        CheckConstraint("price > 0", name="check_share_price_positive"),
        CheckConstraint(
            "available_quantity >= 0", name="check_available_quantity_non_negative"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"Share(id={self.id}, company_id={self.company_id}, price={self.price}, "
            f"available={self.available_quantity})"
        )


# Import at end to avoid circular imports
from sharesphere.models.company import Company
from sharesphere.models.holding import Holding
