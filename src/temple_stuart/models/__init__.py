"""SQLAlchemy database models."""

from temple_stuart.models.corporate_action import CorporateAction, LotAdjustment
from temple_stuart.models.stock_lot import ADJUSTABLE_STATUSES, LotStatus, StockLot
from temple_stuart.models.user import User
from temple_stuart.services.split_ratio import CorporateActionType

__all__ = [
    "ADJUSTABLE_STATUSES",
    "CorporateAction",
    "CorporateActionType",
    "LotAdjustment",
    "LotStatus",
    "StockLot",
    "User",
]
