"""Service for recording corporate actions and adjusting stock lots.

Recording an action is one unit of work:
1. Insert the CorporateAction row
2. Optionally create a lot for untracked pre-action shares
3. Rewrite every OPEN/PARTIAL lot of the symbol acquired before the
   effective date, with one LotAdjustment per lot

Everything commits together or rolls back together.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from temple_stuart.core.exceptions import (
    ConcurrentLotUpdateError,
    CorporateActionError,
    CorporateActionPersistenceError,
    InvalidCorporateActionError,
)
from temple_stuart.models.corporate_action import CorporateAction
from temple_stuart.models.stock_lot import ADJUSTABLE_STATUSES, LotStatus, StockLot
from temple_stuart.schemas.corporate_action import CorporateActionCreate
from temple_stuart.services.lot_adjustment import (
    AdjustmentSnapshot,
    LotAdjustmentRecorder,
    pre_split_lot_values,
)
from temple_stuart.services.split_ratio import SplitRatio, compute_split_ratio, quantize_money

logger = logging.getLogger(__name__)


@dataclass
class CorporateActionOutcome:
    """Result of recording one corporate action."""

    action: CorporateAction
    new_lot: StockLot | None = None
    adjustments: list[AdjustmentSnapshot] = field(default_factory=list)

    @property
    def adjusted_lots(self) -> int:
        """Number of existing lots rewritten."""
        return len(self.adjustments)


class CorporateActionService:
    """Service for applying corporate actions to a user's stock lots."""

    def __init__(self, session: AsyncSession):
        """Initialize the service.

        Args:
            session: Database session
        """
        self.session = session
        self.recorder = LotAdjustmentRecorder(session)

    async def record_action(self, user_id: str, command: CorporateActionCreate) -> CorporateActionOutcome:
        """Record a corporate action and adjust affected lots atomically.

        Args:
            user_id: Acting user
            command: Validated corporate action request

        Returns:
            The created action, the new pre-split lot (if any) and the
            before/after values of every existing lot adjusted

        Raises:
            InvalidCorporateActionError: If the action cannot be applied
            ConcurrentLotUpdateError: If a lot changed during the transaction
            CorporateActionPersistenceError: If the datastore rejected a write
        """
        symbol = command.symbol.strip().upper()
        ratio = compute_split_ratio(command.action_type, command.ratio_from, command.ratio_to)

        try:
            await self._ensure_not_duplicate(user_id, symbol, ratio, command.effective_date)
            outcome = await self._apply(user_id, symbol, ratio, command)
            await self.session.commit()
        except StaleDataError as e:
            await self.session.rollback()
            logger.warning(f"Concurrent lot update while applying {symbol} {ratio.action_type.value}: {e}")
            raise ConcurrentLotUpdateError(
                f"Lots for {symbol} were modified concurrently; resubmit the corporate action"
            ) from e
        except CorporateActionError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to record corporate action for {symbol}: {e}")
            raise CorporateActionPersistenceError(f"Failed to record corporate action: {e}") from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            f"Recorded {ratio.action_type.value} {ratio.ratio_from}:{ratio.ratio_to} for {symbol} "
            f"effective {command.effective_date}: {outcome.adjusted_lots} lots adjusted, "
            f"pre-split lot {'created' if outcome.new_lot else 'not created'}"
        )
        return outcome

    async def _apply(
        self,
        user_id: str,
        symbol: str,
        ratio: SplitRatio,
        command: CorporateActionCreate,
    ) -> CorporateActionOutcome:
        """Run every write of the unit of work without committing."""
        action = CorporateAction(
            id=str(uuid4()),
            user_id=user_id,
            symbol=symbol,
            action_type=ratio.action_type.value,
            effective_date=command.effective_date,
            ratio_from=ratio.ratio_from,
            ratio_to=ratio.ratio_to,
            pre_split_shares=command.pre_split_shares,
            post_split_shares=command.post_split_shares,
            notes=command.notes,
            source=command.source,
        )
        self.session.add(action)
        await self.session.flush()

        # Select before creating the pre-split lot so it is never adjusted twice
        existing_lots = await self.get_adjustable_lots(user_id, symbol, command.effective_date)

        outcome = CorporateActionOutcome(action=action)

        if command.add_pre_split_lot:
            if command.post_split_shares is None:
                logger.warning(
                    f"add_pre_split_lot requested for {symbol} without post_split_shares; skipping lot creation"
                )
            else:
                outcome.new_lot = await self._create_pre_split_lot(user_id, action, ratio, command)

        for lot in existing_lots:
            snapshot = await self.recorder.apply(lot, action, ratio)
            outcome.adjustments.append(snapshot)

        return outcome

    async def _create_pre_split_lot(
        self,
        user_id: str,
        action: CorporateAction,
        ratio: SplitRatio,
        command: CorporateActionCreate,
    ) -> StockLot:
        """Create a lot for shares held before the action with no lot record.

        Args:
            user_id: Acting user
            action: The corporate action being recorded
            ratio: Multipliers of that action
            command: Request carrying share counts and cost basis

        Returns:
            The new OPEN lot sized at the post-action share count
        """
        cost_basis = Decimal(command.lot_cost_basis or 0)
        before, after = pre_split_lot_values(
            post_split_shares=Decimal(command.post_split_shares),
            cost_basis=cost_basis,
            ratio=ratio,
            pre_split_shares=command.pre_split_shares,
        )

        lot = StockLot(
            user_id=user_id,
            investment_txn_id=f"CORP-ACTION-{action.id[:8]}",
            symbol=action.symbol,
            acquired_date=command.lot_acquired_date or action.effective_date,
            original_quantity=after.original_quantity,
            remaining_quantity=after.remaining_quantity,
            cost_per_share=after.cost_per_share,
            total_cost_basis=quantize_money(cost_basis),
            fees=Decimal("0.00"),
            status=LotStatus.OPEN.value,
        )
        self.session.add(lot)
        await self.session.flush()

        await self.recorder.record(lot, action, before, after)
        return lot

    async def _ensure_not_duplicate(
        self,
        user_id: str,
        symbol: str,
        ratio: SplitRatio,
        effective_date: date,
    ) -> None:
        """Reject an action that was already recorded; applying it twice double-adjusts lots."""
        stmt = select(CorporateAction.id).where(
            CorporateAction.user_id == user_id,
            CorporateAction.symbol == symbol,
            CorporateAction.action_type == ratio.action_type.value,
            CorporateAction.effective_date == effective_date,
        )
        result = await self.session.execute(stmt)
        if result.first() is not None:
            raise InvalidCorporateActionError(
                f"{ratio.action_type.value} already recorded for {symbol} on {effective_date}"
            )

    async def get_adjustable_lots(
        self,
        user_id: str,
        symbol: str,
        effective_date: date,
    ) -> list[StockLot]:
        """Get lots a corporate action effective on a date applies to.

        Args:
            user_id: Lot owner
            symbol: Stock symbol
            effective_date: Effective date of the action

        Returns:
            OPEN/PARTIAL lots acquired strictly before the date, oldest first
        """
        stmt = (
            select(StockLot)
            .where(
                StockLot.user_id == user_id,
                StockLot.symbol == symbol.upper(),
                StockLot.acquired_date < effective_date,
                StockLot.status.in_(ADJUSTABLE_STATUSES),
            )
            .order_by(StockLot.acquired_date, StockLot.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_actions(self, user_id: str, symbol: str | None = None) -> list[CorporateAction]:
        """List a user's corporate actions with their adjustments.

        Args:
            user_id: Action owner
            symbol: Optional symbol to filter by

        Returns:
            Corporate actions, newest effective date first
        """
        stmt = (
            select(CorporateAction)
            .where(CorporateAction.user_id == user_id)
            .options(selectinload(CorporateAction.lot_adjustments))
            .order_by(CorporateAction.effective_date.desc(), CorporateAction.created_at.desc())
        )
        if symbol:
            stmt = stmt.where(CorporateAction.symbol == symbol.strip().upper())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_action(self, user_id: str, action_id: str) -> CorporateAction | None:
        """Get one of a user's corporate actions by ID.

        Args:
            user_id: Action owner
            action_id: Corporate action ID

        Returns:
            The action with its adjustments, or None if absent or owned by someone else
        """
        stmt = (
            select(CorporateAction)
            .where(CorporateAction.id == action_id, CorporateAction.user_id == user_id)
            .options(selectinload(CorporateAction.lot_adjustments))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
