"""Domain models package."""

from patrimony.domain.models.enums import AssetCategory, StakeholderRole, ResolutionSource
from patrimony.domain.models.asset import Asset, PriceLookupKey
from patrimony.domain.models.stakeholder import Stakeholder
from patrimony.domain.models.ownership import OwnershipShare
from patrimony.domain.models.cache import CacheEntry

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
