"""Pydantic schemas for CorporateAction model."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from temple_stuart.schemas.stock_lot import LotAdjustmentResponse, StockLotResponse
from temple_stuart.services.split_ratio import CorporateActionType


class CorporateActionBase(BaseModel):
    """Base corporate action schema."""

    symbol: str = Field(..., description="Stock symbol", min_length=1, max_length=20)
    action_type: CorporateActionType = Field(..., description="SPLIT, REVERSE_SPLIT or STOCK_DIVIDEND")
    effective_date: date = Field(..., description="Date the action took effect")
    ratio_from: Decimal = Field(
        ..., gt=0, max_digits=20, decimal_places=8, description="First ratio term (1 for a 1:50 reverse split)"
    )
    ratio_to: Decimal = Field(
        ..., gt=0, max_digits=20, decimal_places=8, description="Second ratio term (50 for a 1:50 reverse split)"
    )
    pre_split_shares: Decimal | None = Field(
        None, gt=0, max_digits=20, decimal_places=8, description="Shares held before the action"
    )
    post_split_shares: Decimal | None = Field(
        None, gt=0, max_digits=20, decimal_places=8, description="Shares held after the action"
    )
    notes: str | None = Field(None, description="Free-form notes")
    source: str | None = Field(None, description="SEC filing, broker statement, etc.", max_length=255)

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        """Strip and uppercase the symbol."""
        symbol = v.strip().upper()
        if not symbol:
            raise ValueError("symbol must not be blank")
        return symbol


class CorporateActionCreate(CorporateActionBase):
    """Schema for recording a corporate action.

    ``add_pre_split_lot`` creates a lot for shares held before the action
    that have no lot record; it needs ``post_split_shares``.
    """

    add_pre_split_lot: bool = Field(False, description="Create a lot for untracked pre-action shares")
    lot_cost_basis: Decimal = Field(
        Decimal("0"), ge=0, max_digits=14, decimal_places=2, description="Total cost basis of that lot (0 if unknown)"
    )
    lot_acquired_date: date | None = Field(None, description="Acquisition date of that lot (defaults to effective_date)")


class CorporateActionResponse(CorporateActionBase):
    """Schema for corporate action response."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Database ID")
    user_id: str
    action_type: str
    created_at: datetime = Field(..., description="Record creation timestamp")
    share_multiplier: Decimal = Field(..., description="Quantity adjustment factor")
    cost_multiplier: Decimal = Field(..., description="Cost per share adjustment factor")


class CorporateActionDetail(CorporateActionResponse):
    """Corporate action with the adjustments it produced."""

    lot_adjustments: list[LotAdjustmentResponse] = Field(default_factory=list)


class CorporateActionList(BaseModel):
    """Schema for list of corporate actions."""

    actions: list[CorporateActionDetail]
    total: int


class LotSnapshot(BaseModel):
    """Quantity and cost of a lot at one point in time."""

    shares: Decimal
    remaining_shares: Decimal
    cost_per_share: Decimal


class LotAdjustmentSummary(BaseModel):
    """Before/after view of one adjusted lot."""

    lot_id: str
    before: LotSnapshot
    after: LotSnapshot


class CorporateActionResult(BaseModel):
    """Schema for the outcome of recording a corporate action."""

    success: bool = True
    action: CorporateActionResponse
    new_lot: StockLotResponse | None = None
    adjusted_lots: int = Field(..., description="Number of existing lots adjusted")
    adjustments: list[LotAdjustmentSummary]
