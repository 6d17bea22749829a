"""Cached reference price model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from patrimony.domain.models.asset import PriceLookupKey


@dataclass
class CacheEntry:
    """
    Last known reference price for a lookup key.

    At most one entry exists per key; refreshes update it in place.
    """

    key: PriceLookupKey
    price: Decimal
    reference_period: str = "N/A"
    brand_name: Optional[str] = None
    model_name: Optional[str] = None
    fuel_name: Optional[str] = None
    model_year: Optional[int] = None
    source_code: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)
