"""View models for service outputs."""

from patrimony.domain.views.pricing import (
    CatalogItem,
    PriceQuote,
    PriceResolution,
    LookupValidation,
    RefreshSummary,
)
from patrimony.domain.views.patrimony import (
    AssetShareView,
    StakeholderPatrimony,
    GroupPatrimony,
    CollectiveMemberShare,
    CollectivePatrimony,
    PatrimonyReport,
)

__all__ = [
    "CatalogItem",
    "PriceQuote",
    "PriceResolution",
    "LookupValidation",
    "RefreshSummary",
    "AssetShareView",
    "StakeholderPatrimony",
    "GroupPatrimony",
    "CollectiveMemberShare",
    "CollectivePatrimony",
    "PatrimonyReport",
]
