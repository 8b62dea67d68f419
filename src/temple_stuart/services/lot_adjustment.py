"""Lot rewrites for a corporate action, plus their audit records.

The value calculations are pure; ``LotAdjustmentRecorder`` applies them to
ORM objects inside the caller's session and writes one ``LotAdjustment``
per lot.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from temple_stuart.core.exceptions import InvalidCorporateActionError
from temple_stuart.models.corporate_action import CorporateAction, LotAdjustment
from temple_stuart.models.stock_lot import StockLot
from temple_stuart.services.split_ratio import SplitRatio, quantize_quantity


@dataclass(frozen=True)
class LotValues:
    """Quantity and per-share cost of a lot."""

    original_quantity: Decimal
    remaining_quantity: Decimal
    cost_per_share: Decimal

    @classmethod
    def from_lot(cls, lot: StockLot) -> "LotValues":
        """Snapshot the current values of a lot."""
        return cls(
            original_quantity=Decimal(lot.original_quantity),
            remaining_quantity=Decimal(lot.remaining_quantity),
            cost_per_share=Decimal(lot.cost_per_share),
        )


@dataclass(frozen=True)
class AdjustmentSnapshot:
    """Before/after values of one lot touched by a corporate action."""

    lot_id: str
    before: LotValues
    after: LotValues


def adjust_lot_values(before: LotValues, ratio: SplitRatio) -> LotValues:
    """Apply a split ratio to a lot's quantities and per-share cost.

    Total cost basis is not part of the result: it stays on the lot as is.

    Raises:
        InvalidCorporateActionError: If an adjusted value does not fit the lot columns
    """
    return LotValues(
        original_quantity=quantize_quantity(before.original_quantity * ratio.share_multiplier),
        remaining_quantity=quantize_quantity(before.remaining_quantity * ratio.share_multiplier),
        cost_per_share=quantize_quantity(before.cost_per_share * ratio.cost_multiplier),
    )


def pre_split_lot_values(
    post_split_shares: Decimal,
    cost_basis: Decimal,
    ratio: SplitRatio,
    pre_split_shares: Decimal | None = None,
) -> tuple[LotValues, LotValues]:
    """Compute the implied pre-action state and the new lot for untracked shares.

    Args:
        post_split_shares: Shares held after the action (the new lot's size)
        cost_basis: Total cost basis of those shares
        ratio: Split ratio of the action
        pre_split_shares: Shares held before the action, if reported

    Returns:
        Tuple of (implied pre-action values, new lot values)

    Raises:
        InvalidCorporateActionError: If a share count is not positive
    """
    if post_split_shares <= 0:
        raise InvalidCorporateActionError("post_split_shares must be positive to create a pre-split lot")
    if pre_split_shares is not None and pre_split_shares <= 0:
        raise InvalidCorporateActionError("pre_split_shares must be positive")
    if cost_basis < 0:
        raise InvalidCorporateActionError("lot_cost_basis must not be negative")

    pre_quantity = (
        Decimal(pre_split_shares)
        if pre_split_shares is not None
        else quantize_quantity(post_split_shares / ratio.share_multiplier)
    )

    before = LotValues(
        original_quantity=pre_quantity,
        remaining_quantity=pre_quantity,
        cost_per_share=quantize_quantity(cost_basis / pre_quantity),
    )
    after = LotValues(
        original_quantity=post_split_shares,
        remaining_quantity=post_split_shares,
        cost_per_share=quantize_quantity(cost_basis / post_split_shares),
    )
    return before, after


class LotAdjustmentRecorder:
    """Writes lot rewrites and their audit rows into a session."""

    def __init__(self, session: AsyncSession):
        """Initialize the recorder.

        Args:
            session: Database session owning the surrounding transaction
        """
        self.session = session

    async def apply(
        self,
        lot: StockLot,
        action: CorporateAction,
        ratio: SplitRatio,
    ) -> AdjustmentSnapshot:
        """Rewrite an existing lot and record the adjustment.

        Args:
            lot: Lot to adjust
            action: Corporate action being applied
            ratio: Multipliers of that action

        Returns:
            Before/after snapshot of the lot
        """
        before = LotValues.from_lot(lot)
        after = adjust_lot_values(before, ratio)

        lot.original_quantity = after.original_quantity
        lot.remaining_quantity = after.remaining_quantity
        lot.cost_per_share = after.cost_per_share
        # total_cost_basis stays the same

        await self.record(lot, action, before, after)
        return AdjustmentSnapshot(lot_id=lot.id, before=before, after=after)

    async def record(
        self,
        lot: StockLot,
        action: CorporateAction,
        before: LotValues,
        after: LotValues,
    ) -> LotAdjustment:
        """Add the audit row for one lot and flush it.

        Args:
            lot: Lot that was rewritten or created
            action: Corporate action responsible
            before: Values before the action
            after: Values after the action

        Returns:
            The pending LotAdjustment
        """
        adjustment = LotAdjustment(
            lot=lot,
            corporate_action=action,
            quantity_before=before.original_quantity,
            quantity_after=after.original_quantity,
            remaining_quantity_before=before.remaining_quantity,
            remaining_quantity_after=after.remaining_quantity,
            cost_per_share_before=before.cost_per_share,
            cost_per_share_after=after.cost_per_share,
        )
        self.session.add(adjustment)
        await self.session.flush()
        return adjustment
