"""Asset registration and collective flag management."""

import logging
import uuid
from typing import Callable, Optional

from patrimony.core.exceptions import ConflictError, NotFoundError
from patrimony.core.timezone import now_local
from patrimony.domain.models import Asset, PriceLookupKey
from patrimony.repositories.protocols import AssetRepository
from patrimony.services.enrichment_service import EnrichmentService
from patrimony.services.ownership_ledger import OwnershipLedger

logger = logging.getLogger(__name__)


class AssetRegistry:
    """Service for registering assets and keeping collective shares in step."""

    def __init__(
        self,
        asset_repo: AssetRepository,
        ledger: OwnershipLedger,
        enrichment: Optional[EnrichmentService] = None,
        clock: Callable = now_local,
    ):
        self._asset_repo = asset_repo
        self._ledger = ledger
        self._enrichment = enrichment
        self._clock = clock

    def register_asset(
        self,
        lookup_key: PriceLookupKey,
        label: str = "",
        is_collective: bool = False,
        asset_id: Optional[str] = None,
        enrich: bool = True,
    ) -> Asset:
        """
        Register an asset.

        Display fields are filled from the price source when possible;
        collective assets are split equally among the group right away.
        """
        now = self._clock()
        asset = self._asset_repo.create(
            Asset(
                asset_id=asset_id or str(uuid.uuid4()),
                lookup_key=lookup_key,
                label=label,
                is_collective=is_collective,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("Registered asset %s (%s)", asset.asset_id, lookup_key)

        if enrich and self._enrichment is not None:
            asset = self._enrichment.enrich(asset)
        if asset.is_collective:
            self._ledger.distribute_equally_among_group(asset.asset_id)
        return asset

    def get_asset(self, asset_id: str) -> Asset:
        asset = self._asset_repo.get_by_id(asset_id)
        if not asset:
            raise NotFoundError("Asset", asset_id)
        return asset

    def list_assets(self) -> list[Asset]:
        return self._asset_repo.list_all()

    def set_collective(self, asset_id: str, is_collective: bool) -> Asset:
        """Flag or unflag an asset as collectively owned."""
        asset = self.get_asset(asset_id)
        if asset.is_collective == is_collective:
            return asset

        asset.is_collective = is_collective
        asset.updated_at = self._clock()
        asset = self._asset_repo.update(asset)

        if is_collective:
            try:
                self._ledger.distribute_equally_among_group(asset_id)
            except ConflictError:
                asset.is_collective = False
                self._asset_repo.update(asset)
                raise
        else:
            self._ledger.clear_group_shares(asset_id)
        return asset

    def delete_asset(self, asset_id: str) -> None:
        """Delete an asset that no longer has ownership shares."""
        self.get_asset(asset_id)
        shares = self._ledger.get_asset_shares(asset_id)
        if shares:
            raise ConflictError(
                f"Asset {asset_id} still has {len(shares)} ownership share(s)"
            )
        self._asset_repo.delete(asset_id)
