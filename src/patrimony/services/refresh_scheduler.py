"""Sequential, throttled refresh of every asset's cached price."""

import logging
import time
from typing import Callable, Optional

from patrimony.core.exceptions import ValidationError
from patrimony.domain.models import ResolutionSource
from patrimony.domain.views import RefreshSummary
from patrimony.repositories.protocols import AssetRepository
from patrimony.services.enrichment_service import EnrichmentService
from patrimony.services.price_resolver import PriceResolver

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Walk all assets and force a live price fetch for each.

    Calls to the price source are strictly sequential with a fixed sleep
    between assets. Each asset is committed on its own, so stopping the
    process between assets loses nothing.
    """

    def __init__(
        self,
        asset_repo: AssetRepository,
        resolver: PriceResolver,
        delay_seconds: float,
        enrichment: Optional[EnrichmentService] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if delay_seconds <= 0:
            raise ValidationError("Refresh delay must be a positive number of seconds")
        self._asset_repo = asset_repo
        self._resolver = resolver
        self._delay = delay_seconds
        self._enrichment = enrichment
        self._sleep = sleep

    def refresh_all(self) -> RefreshSummary:
        """
        Refresh every asset's price.

        An asset counts as updated when it ends with a non-zero live or
        stale price; anything else is a failure and the batch continues.
        """
        assets = self._asset_repo.list_all()
        summary = RefreshSummary()
        logger.info("Starting price refresh of %d assets", len(assets))

        for index, asset in enumerate(assets):
            if index:
                self._sleep(self._delay)

            logger.info("Refreshing %s (%d/%d)", asset.asset_id, index + 1, len(assets))
            try:
                resolution = self._resolver.resolve(asset.lookup_key, force_refresh=True)
                if resolution.source == ResolutionSource.LIVE and self._enrichment is not None:
                    self._enrichment.apply_resolution(asset, resolution)
            except Exception:
                logger.exception("Unexpected error refreshing asset %s", asset.asset_id)
                summary.failed_count += 1
                summary.failed_asset_ids.append(asset.asset_id)
                continue

            refreshed = resolution.source in (ResolutionSource.LIVE, ResolutionSource.STALE)
            if refreshed and resolution.price > 0:
                summary.updated_count += 1
            else:
                summary.failed_count += 1
                summary.failed_asset_ids.append(asset.asset_id)

        logger.info(
            "Price refresh finished: %d updated, %d failed",
            summary.updated_count,
            summary.failed_count,
        )
        return summary
