"""Pydantic schemas for API validation."""

from temple_stuart.schemas.corporate_action import (
    CorporateActionCreate,
    CorporateActionDetail,
    CorporateActionList,
    CorporateActionResponse,
    CorporateActionResult,
    LotAdjustmentSummary,
    LotSnapshot,
)
from temple_stuart.schemas.stock_lot import (
    LotAdjustmentResponse,
    StockLotDetail,
    StockLotList,
    StockLotResponse,
)

__all__ = [
    "CorporateActionCreate",
    "CorporateActionDetail",
    "CorporateActionList",
    "CorporateActionResponse",
    "CorporateActionResult",
    "LotAdjustmentSummary",
    "LotSnapshot",
    "LotAdjustmentResponse",
    "StockLotDetail",
    "StockLotList",
    "StockLotResponse",
]
