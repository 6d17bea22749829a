"""View models for reference price lookups."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from patrimony.domain.models import PriceLookupKey, ResolutionSource


@dataclass
class CatalogItem:
    """Entry of a price source listing (brands, models or years)."""

    code: str
    name: str


@dataclass
class PriceQuote:
    """Raw "value for year" answer from the price source."""

    price_text: str
    reference_period: Optional[str] = None
    brand_name: Optional[str] = None
    model_name: Optional[str] = None
    model_year: Optional[int] = None
    fuel_name: Optional[str] = None
    fuel_code: Optional[str] = None
    source_code: Optional[str] = None


@dataclass
class PriceResolution:
    """
    Outcome of resolving a lookup key through the fallback chain.

    source tells a trustworthy valuation (cached/live) from a degraded one
    (stale) or a missing one (none). A none result carries a zero price
    that must never be read as a real valuation.
    """

    key: PriceLookupKey
    price: Decimal
    source: ResolutionSource
    reference_period: str = "N/A"
    brand_name: Optional[str] = None
    model_name: Optional[str] = None
    fuel_name: Optional[str] = None
    model_year: Optional[int] = None

    @property
    def is_priced(self) -> bool:
        return self.source != ResolutionSource.NONE

    @property
    def is_degraded(self) -> bool:
        return self.source in (ResolutionSource.STALE, ResolutionSource.NONE)


@dataclass
class LookupValidation:
    """Result of checking lookup codes against the price source listings."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class RefreshSummary:
    """Counters of a batch cache refresh."""

    updated_count: int = 0
    failed_count: int = 0
    failed_asset_ids: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.updated_count + self.failed_count
