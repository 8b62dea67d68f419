"""Corporate Action and Lot Adjustment models."""

from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from temple_stuart.core.database import Base
from temple_stuart.services.split_ratio import CorporateActionType, SplitRatio, compute_split_ratio


def utcnow() -> datetime:
    """Return current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


class CorporateAction(Base):
    """Split, reverse split or stock dividend recorded against a symbol.

    Rows are written once and never updated. The ratio is stored as
    entered; direction comes from ``action_type``:

    For a 1:50 reverse split (50 shares become 1):
        - ratio_from = 1, ratio_to = 50
        - Adjusted quantity = original_quantity / 50
        - Adjusted cost per share = cost_per_share * 50

    For a 2:1 forward split (1 share becomes 2):
        - ratio_from = 1, ratio_to = 2
        - Adjusted quantity = original_quantity * 2
        - Adjusted cost per share = cost_per_share / 2
    """

    __tablename__ = "corporate_actions"
    __table_args__ = (
        CheckConstraint("ratio_from > 0 AND ratio_to > 0", name="ck_corporate_actions_positive_ratio"),
        {"extend_existing": True},
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    symbol: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    # SPLIT, REVERSE_SPLIT, STOCK_DIVIDEND
    action_type: Mapped[str] = mapped_column(String(20), nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    ratio_from: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    ratio_to: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)

    # Share counts reported by the broker or filing, if known
    pre_split_shares: Mapped[Decimal | None] = mapped_column(Numeric(20, 8))
    post_split_shares: Mapped[Decimal | None] = mapped_column(Numeric(20, 8))

    notes: Mapped[str | None] = mapped_column(Text)
    # SEC filing, broker statement, etc.
    source: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    lot_adjustments: Mapped[list["LotAdjustment"]] = relationship(
        "LotAdjustment",
        back_populates="corporate_action",
        order_by="LotAdjustment.created_at",
    )

    @property
    def split_ratio(self) -> SplitRatio:
        """Multipliers for this action."""
        return compute_split_ratio(self.action_type, self.ratio_from, self.ratio_to)

    @property
    def share_multiplier(self) -> Decimal:
        """Factor applied to lot quantities."""
        return self.split_ratio.share_multiplier

    @property
    def cost_multiplier(self) -> Decimal:
        """Factor applied to lot cost per share."""
        return self.split_ratio.cost_multiplier

    @property
    def is_reverse_split(self) -> bool:
        """Check if this action shrinks the share count."""
        return self.action_type == CorporateActionType.REVERSE_SPLIT.value

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<CorporateAction({self.symbol} {self.action_type} "
            f"{self.ratio_from}:{self.ratio_to} on {self.effective_date})>"
        )


class LotAdjustment(Base):
    """Audit record of one corporate action rewriting one lot."""

    __tablename__ = "lot_adjustments"
    __table_args__ = (
        UniqueConstraint("lot_id", "corporate_action_id", name="uq_lot_adjustments_lot_action"),
        {"extend_existing": True},
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    lot_id: Mapped[str] = mapped_column(ForeignKey("stock_lots.id", ondelete="CASCADE"), nullable=False, index=True)
    corporate_action_id: Mapped[str] = mapped_column(
        ForeignKey("corporate_actions.id", ondelete="CASCADE"), nullable=False, index=True
    )

    quantity_before: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    quantity_after: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    remaining_quantity_before: Mapped[Decimal | None] = mapped_column(Numeric(20, 8))
    remaining_quantity_after: Mapped[Decimal | None] = mapped_column(Numeric(20, 8))
    cost_per_share_before: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)
    cost_per_share_after: Mapped[Decimal] = mapped_column(Numeric(20, 8), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    lot: Mapped["StockLot"] = relationship("StockLot", back_populates="adjustments")
    corporate_action: Mapped["CorporateAction"] = relationship("CorporateAction", back_populates="lot_adjustments")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<LotAdjustment(lot={self.lot_id}, "
            f"qty={self.quantity_before}->{self.quantity_after}, "
            f"cps={self.cost_per_share_before}->{self.cost_per_share_after})>"
        )


# Import StockLot at the end to avoid circular import
from temple_stuart.models.stock_lot import StockLot  # noqa: E402, F401
