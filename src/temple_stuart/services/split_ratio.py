"""Share and cost multipliers for corporate actions.

A ratio is entered the way it is announced ("1-for-50", "2-for-1",
"100-for-105") and carries no direction on its own; the declared action
type decides whether the share count grows or shrinks:

    SPLIT 1:2            -> shares x 2,    cost/share x 1/2
    REVERSE_SPLIT 1:50   -> shares x 1/50, cost/share x 50
    STOCK_DIVIDEND 100:105 -> shares x 1.05, cost/share x 100/105
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from enum import Enum

from temple_stuart.core.exceptions import InvalidCorporateActionError

# Storage precision for quantities and per-share costs
QUANTITY_QUANTUM = Decimal("0.00000001")
MONEY_QUANTUM = Decimal("0.01")
# Quantities, per-share costs and totals are stored with 12 integer digits
MAX_STORED_VALUE = Decimal("1e12")


class CorporateActionType(str, Enum):
    """Corporate action kinds the engine can apply."""
    SPLIT = "SPLIT"
    REVERSE_SPLIT = "REVERSE_SPLIT"
    STOCK_DIVIDEND = "STOCK_DIVIDEND"


@dataclass(frozen=True)
class SplitRatio:
    """Multipliers derived from one declared ratio."""

    action_type: CorporateActionType
    ratio_from: Decimal
    ratio_to: Decimal
    share_multiplier: Decimal
    cost_multiplier: Decimal

    @property
    def is_reverse_split(self) -> bool:
        """Check if the share count shrinks."""
        return self.share_multiplier < 1


def _quantize(value: Decimal, quantum: Decimal) -> Decimal:
    try:
        result = value.quantize(quantum, rounding=ROUND_HALF_EVEN)
    except InvalidOperation:
        raise InvalidCorporateActionError(f"Value {value} is out of range for a stock lot") from None
    if abs(result) >= MAX_STORED_VALUE:
        raise InvalidCorporateActionError(f"Value {value} is out of range for a stock lot")
    return result


def quantize_quantity(value: Decimal) -> Decimal:
    """Round a share quantity or per-share cost to storage precision.

    Raises:
        InvalidCorporateActionError: If the value does not fit the lot columns
    """
    return _quantize(value, QUANTITY_QUANTUM)


def quantize_money(value: Decimal) -> Decimal:
    """Round a monetary total to cents."""
    return _quantize(value, MONEY_QUANTUM)


def compute_split_ratio(
    action_type: CorporateActionType | str,
    ratio_from: Decimal | int | float | str,
    ratio_to: Decimal | int | float | str,
) -> SplitRatio:
    """Derive share and cost multipliers for a corporate action.

    Args:
        action_type: Declared kind of the action
        ratio_from: First term of the announced ratio
        ratio_to: Second term of the announced ratio

    Returns:
        SplitRatio with exact reciprocal multipliers

    Raises:
        InvalidCorporateActionError: If a term is not positive, the terms are
            equal, or the action type is unknown
    """
    try:
        kind = CorporateActionType(action_type)
    except ValueError:
        raise InvalidCorporateActionError(f"Unknown action type: {action_type}") from None

    try:
        numerator = Decimal(str(ratio_from))
        denominator = Decimal(str(ratio_to))
    except InvalidOperation:
        raise InvalidCorporateActionError(f"Ratio {ratio_from}:{ratio_to} is not a number") from None

    if not numerator.is_finite() or not denominator.is_finite():
        raise InvalidCorporateActionError("ratio_from and ratio_to must be finite numbers")
    if numerator <= 0 or denominator <= 0:
        raise InvalidCorporateActionError(
            f"ratio_from and ratio_to must be positive (got {numerator}:{denominator})"
        )
    if numerator == denominator:
        raise InvalidCorporateActionError(
            f"A {kind.value} ratio of {numerator}:{denominator} does not change the share count"
        )

    larger = max(numerator, denominator)
    smaller = min(numerator, denominator)

    if kind == CorporateActionType.REVERSE_SPLIT:
        share_multiplier = smaller / larger
        cost_multiplier = larger / smaller
    else:
        share_multiplier = larger / smaller
        cost_multiplier = smaller / larger

    return SplitRatio(
        action_type=kind,
        ratio_from=numerator,
        ratio_to=denominator,
        share_multiplier=share_multiplier,
        cost_multiplier=cost_multiplier,
    )
