"""Corporate actions API routes."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from temple_stuart.api.deps import get_current_user
from temple_stuart.core.database import get_db
from temple_stuart.core.exceptions import (
    ConcurrentLotUpdateError,
    CorporateActionPersistenceError,
    InvalidCorporateActionError,
)
from temple_stuart.models.user import User
from temple_stuart.schemas.corporate_action import (
    CorporateActionCreate,
    CorporateActionDetail,
    CorporateActionList,
    CorporateActionResponse,
    CorporateActionResult,
    LotAdjustmentSummary,
    LotSnapshot,
)
from temple_stuart.schemas.stock_lot import StockLotResponse
from temple_stuart.services.corporate_action_service import CorporateActionService
from temple_stuart.services.lot_adjustment import LotValues

router = APIRouter(prefix="/corporate-actions", tags=["corporate-actions"])


def _snapshot(values: LotValues) -> LotSnapshot:
    return LotSnapshot(
        shares=values.original_quantity,
        remaining_shares=values.remaining_quantity,
        cost_per_share=values.cost_per_share,
    )


@router.get("", response_model=CorporateActionList)
async def list_corporate_actions(
    symbol: str | None = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    """List the caller's corporate actions, optionally filtered by symbol.

    Args:
        symbol: Optional symbol to filter by
        user: Calling user
        session: Database session

    Returns:
        Corporate actions with their lot adjustments, newest effective date first
    """
    service = CorporateActionService(session)
    actions = await service.list_actions(user.id, symbol)

    return CorporateActionList(
        actions=[CorporateActionDetail.model_validate(a) for a in actions],
        total=len(actions),
    )


@router.post("", response_model=CorporateActionResult, status_code=201)
async def record_corporate_action(
    action_data: CorporateActionCreate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    """Record a split, reverse split or stock dividend and adjust affected lots.

    Every OPEN or PARTIAL lot of the symbol acquired before the effective
    date has its quantities and cost per share rewritten; total cost basis
    is preserved. With ``add_pre_split_lot`` a lot is created for shares
    held before the action that have no lot record.

    Args:
        action_data: Corporate action details
        user: Calling user
        session: Database session

    Returns:
        The recorded action, the new lot (if any) and per-lot adjustments

    Raises:
        HTTPException: 400 on invalid input, 409 on concurrent lot updates,
            500 if the transaction failed
    """
    service = CorporateActionService(session)

    try:
        outcome = await service.record_action(user.id, action_data)
    except InvalidCorporateActionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConcurrentLotUpdateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CorporateActionPersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return CorporateActionResult(
        action=CorporateActionResponse.model_validate(outcome.action),
        new_lot=StockLotResponse.model_validate(outcome.new_lot) if outcome.new_lot else None,
        adjusted_lots=outcome.adjusted_lots,
        adjustments=[
            LotAdjustmentSummary(
                lot_id=a.lot_id,
                before=_snapshot(a.before),
                after=_snapshot(a.after),
            )
            for a in outcome.adjustments
        ],
    )


@router.get("/{action_id}", response_model=CorporateActionDetail)
async def get_corporate_action(
    action_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    """Get one of the caller's corporate actions by ID.

    Args:
        action_id: Corporate action ID
        user: Calling user
        session: Database session

    Returns:
        Corporate action with its lot adjustments
    """
    service = CorporateActionService(session)
    action = await service.get_action(user.id, action_id)

    if not action:
        raise HTTPException(status_code=404, detail="Corporate action not found")

    return CorporateActionDetail.model_validate(action)
