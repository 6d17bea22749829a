"""Repository protocol definitions (interfaces)."""

from patrimony.repositories.protocols.price_cache_repo import PriceCacheRepository
from patrimony.repositories.protocols.asset_repo import AssetRepository
from patrimony.repositories.protocols.stakeholder_repo import StakeholderRepository
from patrimony.repositories.protocols.ownership_repo import OwnershipRepository

__all__ = [
    "PriceCacheRepository",
    "AssetRepository",
    "StakeholderRepository",
    "OwnershipRepository",
]
