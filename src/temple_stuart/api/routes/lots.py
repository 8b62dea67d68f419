"""Stock lots API routes."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from temple_stuart.api.deps import get_current_user
from temple_stuart.core.database import get_db
from temple_stuart.models.stock_lot import LotStatus
from temple_stuart.models.user import User
from temple_stuart.schemas.stock_lot import StockLotDetail, StockLotList, StockLotResponse
from temple_stuart.services.stock_lot_service import StockLotService

router = APIRouter(prefix="/lots", tags=["lots"])


@router.get("", response_model=StockLotList)
async def list_lots(
    symbol: str | None = None,
    status: LotStatus | None = Query(None, description="Filter by lot status"),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    """List the caller's stock lots.

    Args:
        symbol: Optional symbol to filter by
        status: Optional status to filter by
        user: Calling user
        session: Database session

    Returns:
        List of stock lots
    """
    service = StockLotService(session)
    lots = await service.list_lots(user.id, symbol=symbol, status=status.value if status else None)

    return StockLotList(
        lots=[StockLotResponse.model_validate(lot) for lot in lots],
        total=len(lots),
    )


@router.get("/{lot_id}", response_model=StockLotDetail)
async def get_lot(
    lot_id: str,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
):
    """Get a stock lot with its corporate action adjustments.

    Args:
        lot_id: Stock lot ID
        user: Calling user
        session: Database session

    Returns:
        Stock lot record
    """
    service = StockLotService(session)
    lot = await service.get_lot(user.id, lot_id)

    if not lot:
        raise HTTPException(status_code=404, detail="Stock lot not found")

    return StockLotDetail.model_validate(lot)
