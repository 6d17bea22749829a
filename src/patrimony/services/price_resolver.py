"""Price resolver with an ordered cache/live/stale/none fallback chain."""

import logging
from decimal import Decimal
from typing import Callable, Optional

from patrimony.core.exceptions import ExternalUnavailableError, MalformedPriceDataError
from patrimony.core.formatters import format_brl, fuel_display_name, parse_price
from patrimony.core.timezone import now_local
from patrimony.domain.models import CacheEntry, PriceLookupKey, ResolutionSource
from patrimony.domain.views import PriceResolution
from patrimony.providers.price_source import PriceSource
from patrimony.repositories.protocols import PriceCacheRepository

logger = logging.getLogger(__name__)

ResolutionTier = Callable[[PriceLookupKey], Optional[PriceResolution]]


class PriceResolver:
    """
    Resolve reference prices for lookup keys.

    Tiers run in a fixed order and each one is tried only if the previous
    one produced nothing:

    1. exact cache hit (source=cached)
    2. live fetch from the price source, stored in the cache (source=live)
    3. most recent cached price of the same vehicle family (source=stale)
    4. zero price (source=none)

    Price source failures never escape; they only show up in the tag.
    """

    def __init__(
        self,
        cache_repo: PriceCacheRepository,
        price_source: PriceSource,
        default_fuel_code: str = "G",
        clock: Callable = now_local,
    ):
        self._cache = cache_repo
        self._source = price_source
        self._default_fuel_code = default_fuel_code
        self._clock = clock

    def normalize(self, key: PriceLookupKey) -> PriceLookupKey:
        """Apply the default fuel code to a key."""
        return key.normalized(self._default_fuel_code)

    def resolve(self, key: PriceLookupKey, force_refresh: bool = False) -> PriceResolution:
        """
        Resolve a price through the fallback chain.

        With force_refresh the exact cache hit is skipped, so a live fetch is
        always attempted; on failure the stale tier still sees the key's own
        previous entry.
        """
        key = self.normalize(key)
        for tier in self.tiers(force_refresh):
            resolution = tier(key)
            if resolution is not None:
                return resolution

        logger.warning("No price available for %s (cache, source and fallback exhausted)", key)
        return PriceResolution(key=key, price=Decimal("0"), source=ResolutionSource.NONE)

    def tiers(self, force_refresh: bool = False) -> list[ResolutionTier]:
        """Ordered resolution tiers for a normal or forced resolution."""
        if force_refresh:
            return [self.from_live, self.from_stale_including_exact]
        return [self.from_cache, self.from_live, self.from_stale]

    def from_cache(self, key: PriceLookupKey) -> Optional[PriceResolution]:
        """Tier 1: exact cache hit."""
        entry = self._cache.get(key)
        if entry is None:
            return None
        logger.debug("Cache hit for %s: %s", key, format_brl(entry.price))
        return self._from_entry(entry, key, ResolutionSource.CACHED)

    def from_live(self, key: PriceLookupKey) -> Optional[PriceResolution]:
        """Tier 2: fetch from the price source and store the result."""
        try:
            quote = self._source.get_value(key)
            price = parse_price(quote.price_text)
        except MalformedPriceDataError as exc:
            logger.warning("Malformed price data for %s: %s", key, exc.message)
            return None
        except ExternalUnavailableError as exc:
            logger.warning("Price source unavailable for %s: %s", key, exc.message)
            return None

        if price <= 0:
            logger.warning("Malformed price data for %s: non-positive price %r", key, quote.price_text)
            return None

        fuel_name = quote.fuel_name or fuel_display_name(key.fuel_code)
        entry = self._cache.upsert(
            key,
            price,
            metadata={
                "reference_period": quote.reference_period,
                "brand_name": quote.brand_name,
                "model_name": quote.model_name,
                "fuel_name": fuel_name,
                "model_year": quote.model_year,
                "source_code": quote.source_code,
            },
            now=self._clock(),
        )
        logger.info("Fetched live price for %s: %s", key, format_brl(price))
        return self._from_entry(entry, key, ResolutionSource.LIVE)

    def from_stale(self, key: PriceLookupKey) -> Optional[PriceResolution]:
        """Tier 3: most recent cached price of the same vehicle family."""
        entry = self._cache.find_most_recent_for_asset_class(
            key.asset_class_code,
            key.model_code,
            key.asset_category,
        )
        if entry is None:
            return None
        logger.info(
            "Using last known price for %s from %s: %s",
            key,
            entry.key,
            format_brl(entry.price),
        )
        return self._from_entry(entry, key, ResolutionSource.STALE)

    def from_stale_including_exact(self, key: PriceLookupKey) -> Optional[PriceResolution]:
        """Tier 3 for forced resolutions: the key's own entry first, then its family."""
        entry = self._cache.get(key)
        if entry is not None:
            logger.info("Refresh failed for %s; keeping cached %s", key, format_brl(entry.price))
            return self._from_entry(entry, key, ResolutionSource.STALE)
        return self.from_stale(key)

    @staticmethod
    def _from_entry(entry: CacheEntry, key: PriceLookupKey, source: ResolutionSource) -> PriceResolution:
        return PriceResolution(
            key=key,
            price=entry.price,
            source=source,
            reference_period=entry.reference_period,
            brand_name=entry.brand_name,
            model_name=entry.model_name,
            fuel_name=entry.fuel_name,
            model_year=entry.model_year,
        )
