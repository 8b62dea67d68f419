"""Stock Lot model - shares bought together at one cost."""

from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from temple_stuart.core.database import Base


def utcnow() -> datetime:
    """Return current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


class LotStatus(str, Enum):
    """Lot status enum."""
    OPEN = "OPEN"
    PARTIAL = "PARTIAL"
    CLOSED = "CLOSED"


# Statuses a corporate action is allowed to rewrite
ADJUSTABLE_STATUSES = (LotStatus.OPEN.value, LotStatus.PARTIAL.value)


class StockLot(Base):
    """A batch of shares of one symbol acquired at one per-share cost.

    Corporate actions rewrite ``original_quantity``, ``remaining_quantity``
    and ``cost_per_share`` together; ``total_cost_basis`` never moves.
    ``version`` is bumped on every UPDATE so a concurrent writer holding a
    stale copy fails instead of overwriting.
    """

    __tablename__ = "stock_lots"
    __table_args__ = (
        Index("ix_stock_lots_user_symbol_acquired", "user_id", "symbol", "acquired_date"),
        {"extend_existing": True},
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Originating transaction (trade import id, or CORP-ACTION-xxxxxxxx)
    investment_txn_id: Mapped[str] = mapped_column(String(64), nullable=False)

    symbol: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    acquired_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Quantities
    original_quantity: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    remaining_quantity: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)

    # Cost tracking
    cost_per_share: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    total_cost_basis: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    fees: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0.00"), nullable=False)

    # Status: OPEN, PARTIAL, CLOSED (transitions owned by trade processing)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=LotStatus.OPEN.value, index=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    adjustments: Mapped[list["LotAdjustment"]] = relationship(
        "LotAdjustment",
        back_populates="lot",
        order_by="LotAdjustment.created_at",
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<StockLot(id={self.id}, "
            f"symbol={self.symbol}, "
            f"qty={self.remaining_quantity}/{self.original_quantity}, "
            f"cps={self.cost_per_share}, "
            f"status={self.status})>"
        )

    @property
    def is_adjustable(self) -> bool:
        """Check if a corporate action may rewrite this lot."""
        return self.status in ADJUSTABLE_STATUSES


# Import LotAdjustment at the end to avoid circular import
from temple_stuart.models.corporate_action import LotAdjustment  # noqa: E402, F401
