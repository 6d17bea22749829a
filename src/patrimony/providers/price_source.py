"""Reference price source protocol."""

from typing import Protocol

from patrimony.domain.models import AssetCategory, PriceLookupKey
from patrimony.domain.views import CatalogItem, PriceQuote


class PriceSource(Protocol):
    """
    Protocol for external reference price sources.

    Implementations raise ExternalUnavailableError on transport failures
    (including timeouts) and MalformedPriceDataError on unusable payloads.
    Only get_value is on the valuation path; the listings back lookup-code
    validation.
    """

    def get_value(self, key: PriceLookupKey) -> PriceQuote:
        """Fetch the reference price for a normalized lookup key."""
        ...

    def get_brands(self, category: AssetCategory) -> list[CatalogItem]:
        """List asset classes (brands) of a category."""
        ...

    def get_models(self, category: AssetCategory, asset_class_code: int) -> list[CatalogItem]:
        """List models of a brand."""
        ...

    def get_years(
        self,
        category: AssetCategory,
        asset_class_code: int,
        model_code: int,
    ) -> list[CatalogItem]:
        """List year-series identifiers of a model."""
        ...
