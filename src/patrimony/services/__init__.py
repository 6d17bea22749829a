"""Service layer - business logic orchestration."""

from patrimony.services.price_resolver import PriceResolver
from patrimony.services.ownership_ledger import OwnershipLedger
from patrimony.services.enrichment_service import EnrichmentService
from patrimony.services.asset_registry import AssetRegistry
from patrimony.services.patrimony_aggregator import PatrimonyAggregator
from patrimony.services.refresh_scheduler import RefreshScheduler

__all__ = [
    "PriceResolver",
    "OwnershipLedger",
    "EnrichmentService",
    "AssetRegistry",
    "PatrimonyAggregator",
    "RefreshScheduler",
]
