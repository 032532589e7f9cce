"""
Holding model - a shareholder's position in one share.

Uses a composite primary key (shareholder_id, share_id), so a
shareholder has at most one row per share. Rows exist only while
quantity > 0: a sell that empties the position deletes the row.
"""

from sqlalchemy import CheckConstraint, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sharesphere.database import Base


class Holding(Base):
    """Share ownership record - links a shareholder to a share."""

    __tablename__ = "holdings"

    # Composite primary key: shareholder + share
    shareholder_id: Mapped[int] = mapped_column(
        ForeignKey("shareholders.id"), primary_key=True
    )
    share_id: Mapped[int] = mapped_column(ForeignKey("shares.id"), primary_key=True)

    # Number of shares owned (must be positive)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    # Optimistic concurrency token, bumped on every UPDATE/DELETE
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    shareholder: Mapped["Shareholder"] = relationship(back_populates="holdings")
    share: Mapped["Share"] = relationship(back_populates="holdings")

    __mapper_args__ = {"version_id_col": version}

    # Database constraints
    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_holding_quantity_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"Holding(shareholder={self.shareholder_id}, share={self.share_id}, "
            f"quantity={self.quantity})"
        )


# Import at end to avoid circular imports
from sharesphere.models.share import Share
from sharesphere.models.shareholder import Shareholder
