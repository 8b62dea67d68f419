"""Pydantic schemas for StockLot and LotAdjustment models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class LotAdjustmentResponse(BaseModel):
    """Schema for one lot adjustment audit record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    lot_id: str
    corporate_action_id: str
    quantity_before: Decimal
    quantity_after: Decimal
    remaining_quantity_before: Decimal | None = None
    remaining_quantity_after: Decimal | None = None
    cost_per_share_before: Decimal
    cost_per_share_after: Decimal
    created_at: datetime


class StockLotResponse(BaseModel):
    """Schema for stock lot response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    investment_txn_id: str
    symbol: str
    acquired_date: date
    original_quantity: Decimal
    remaining_quantity: Decimal
    cost_per_share: Decimal
    total_cost_basis: Decimal
    fees: Decimal
    status: str
    version: int = Field(..., description="Optimistic concurrency counter")
    created_at: datetime
    updated_at: datetime


class StockLotDetail(StockLotResponse):
    """Stock lot with its corporate action history."""

    adjustments: list[LotAdjustmentResponse] = Field(default_factory=list)


class StockLotList(BaseModel):
    """Schema for list of stock lots."""

    lots: list[StockLotResponse]
    total: int
