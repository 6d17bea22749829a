"""Price cache repository protocol."""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from patrimony.domain.models import AssetCategory, CacheEntry, PriceLookupKey


class PriceCacheRepository(Protocol):
    """
    Interface for the persistent reference price cache.

    Keys must be normalized (fuel code set). At most one entry exists per
    key; upsert is atomic and idempotent.
    """

    def get(self, key: PriceLookupKey) -> Optional[CacheEntry]:
        """Return the entry for an exact key, if any."""
        ...

    def upsert(
        self,
        key: PriceLookupKey,
        price: Decimal,
        metadata: Optional[dict] = None,
        now: Optional[datetime] = None,
    ) -> CacheEntry:
        """Insert or overwrite the entry for a key."""
        ...

    def find_most_recent_for_asset_class(
        self,
        asset_class_code: int,
        model_code: int,
        asset_category: AssetCategory,
    ) -> Optional[CacheEntry]:
        """Most recently updated entry of a vehicle family, ignoring year and fuel."""
        ...

    def delete(self, key: PriceLookupKey) -> bool:
        """Delete the entry for a key; return True if one existed."""
        ...

    def list_all(self) -> list[CacheEntry]:
        """List every cached entry."""
        ...
