"""Ownership share domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class OwnershipShare:
    """
    Fraction of an asset held by one stakeholder.

    percentage is in (0, 100]; the shares of one asset sum to at most 100.
    """

    asset_id: str
    stakeholder_id: str
    percentage: Decimal
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if not isinstance(self.percentage, Decimal):
            self.percentage = Decimal(str(self.percentage))
