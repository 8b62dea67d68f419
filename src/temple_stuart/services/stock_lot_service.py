"""Stock Lot Service - read access to a user's lots."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from temple_stuart.models.stock_lot import StockLot


class StockLotService:
    """Service for querying stock lots.

    Lots are created by trade import or by corporate actions; this service
    only reads them.
    """

    def __init__(self, session: AsyncSession):
        """Initialize stock lot service.

        Args:
            session: Database session
        """
        self.session = session

    async def list_lots(
        self,
        user_id: str,
        symbol: str | None = None,
        status: str | None = None,
    ) -> list[StockLot]:
        """List a user's lots.

        Args:
            user_id: Lot owner
            symbol: Optional filter by symbol
            status: Optional filter by status (OPEN, PARTIAL, CLOSED)

        Returns:
            Lots ordered by symbol then acquisition date
        """
        stmt = select(StockLot).where(StockLot.user_id == user_id)
        if symbol:
            stmt = stmt.where(StockLot.symbol == symbol.strip().upper())
        if status:
            stmt = stmt.where(StockLot.status == status.upper())

        stmt = stmt.order_by(StockLot.symbol, StockLot.acquired_date, StockLot.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_lot(self, user_id: str, lot_id: str) -> StockLot | None:
        """Get one lot with its adjustment history.

        Args:
            user_id: Lot owner
            lot_id: Lot ID

        Returns:
            StockLot or None
        """
        stmt = (
            select(StockLot)
            .where(StockLot.id == lot_id, StockLot.user_id == user_id)
            .options(selectinload(StockLot.adjustments))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
