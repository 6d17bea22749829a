"""Repository layer - data access abstractions and implementations."""

from patrimony.repositories.protocols import (
    PriceCacheRepository,
    AssetRepository,
    StakeholderRepository,
    OwnershipRepository,
)

__all__ = [
    "PriceCacheRepository",
    "AssetRepository",
    "StakeholderRepository",
    "OwnershipRepository",
]
