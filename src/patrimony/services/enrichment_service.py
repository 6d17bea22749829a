"""Display-field enrichment and lookup-code validation against the price source."""

import logging
from typing import Callable, Optional

from patrimony.core.exceptions import PriceSourceError
from patrimony.core.timezone import now_local
from patrimony.domain.models import Asset, PriceLookupKey, ResolutionSource
from patrimony.domain.views import LookupValidation, PriceResolution
from patrimony.providers.price_source import PriceSource
from patrimony.repositories.protocols import AssetRepository
from patrimony.services.price_resolver import PriceResolver

logger = logging.getLogger(__name__)


def display_year_from(year_series_id: str) -> Optional[int]:
    """Leading year of a year-series identifier ("2017-5" -> 2017)."""
    head = year_series_id.split("-", 1)[0].strip()
    return int(head) if head.isdigit() else None


class EnrichmentService:
    """
    Fill the denormalized display fields of assets.

    Enrichment is opportunistic: when no exact price record is available
    the asset is returned unchanged.
    """

    def __init__(
        self,
        asset_repo: AssetRepository,
        resolver: PriceResolver,
        price_source: PriceSource,
        clock: Callable = now_local,
    ):
        self._asset_repo = asset_repo
        self._resolver = resolver
        self._source = price_source
        self._clock = clock

    def enrich(self, asset: Asset) -> Asset:
        resolution = self._resolver.resolve(asset.lookup_key)
        if resolution.source not in (ResolutionSource.CACHED, ResolutionSource.LIVE):
            logger.warning(
                "Could not enrich asset %s: no exact price record (%s)",
                asset.asset_id,
                resolution.source.value,
            )
            return asset
        return self.apply_resolution(asset, resolution)

    def apply_resolution(self, asset: Asset, resolution: PriceResolution) -> Asset:
        """Copy display fields from an exact resolution and persist the asset."""
        asset.brand_name = resolution.brand_name or asset.brand_name
        asset.model_name = resolution.model_name or asset.model_name
        asset.display_fuel = resolution.fuel_name or asset.display_fuel
        asset.display_year = display_year_from(asset.lookup_key.year_series_id) or resolution.model_year
        asset.updated_at = self._clock()
        return self._asset_repo.update(asset)

    def validate_lookup_key(self, key: PriceLookupKey) -> LookupValidation:
        """Check brand, model and year codes against the price source listings."""
        errors: list[str] = []
        try:
            brands = self._source.get_brands(key.asset_category)
            if str(key.asset_class_code) not in {b.code for b in brands}:
                errors.append(f"Brand code {key.asset_class_code} not found")
                return LookupValidation(is_valid=False, errors=errors)

            models = self._source.get_models(key.asset_category, key.asset_class_code)
            if str(key.model_code) not in {m.code for m in models}:
                errors.append(f"Model code {key.model_code} not found for this brand")
                return LookupValidation(is_valid=False, errors=errors)

            years = self._source.get_years(key.asset_category, key.asset_class_code, key.model_code)
            if key.year_series_id not in {y.code for y in years}:
                errors.append(f"Year code {key.year_series_id} not found for this model")
        except PriceSourceError as exc:
            logger.warning("Lookup code validation failed for %s: %s", key, exc.message)
            return LookupValidation(
                is_valid=False,
                errors=["Could not validate lookup codes; try again later"],
            )

        return LookupValidation(is_valid=not errors, errors=errors)
