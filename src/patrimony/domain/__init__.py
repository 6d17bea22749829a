"""Domain layer - pure business models with no external dependencies."""

from patrimony.domain.models import (
    AssetCategory,
    StakeholderRole,
    ResolutionSource,
    Asset,
    PriceLookupKey,
    Stakeholder,
    OwnershipShare,
    CacheEntry,
)

__all__ = [
    "AssetCategory",
    "StakeholderRole",
    "ResolutionSource",
    "Asset",
    "PriceLookupKey",
    "Stakeholder",
    "OwnershipShare",
    "CacheEntry",
]
