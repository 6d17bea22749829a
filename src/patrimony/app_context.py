"""Application context wiring repositories, providers and services.

Every collaborator is constructed explicitly here and passed down, so
tests and tools can build their own context with fakes.
"""

from typing import Optional

from sqlalchemy.orm import Session

from patrimony.config.settings import Settings, get_settings
from patrimony.providers import FipeHttpPriceSource, PriceSource, StubPriceSource
from patrimony.repositories.sqlalchemy import (
    SqlAlchemyAssetRepository,
    SqlAlchemyOwnershipRepository,
    SqlAlchemyPriceCacheRepository,
    SqlAlchemyStakeholderRepository,
    get_session,
)
from patrimony.services import (
    AssetRegistry,
    EnrichmentService,
    OwnershipLedger,
    PatrimonyAggregator,
    PriceResolver,
    RefreshScheduler,
)


def build_price_source(settings: Settings) -> PriceSource:
    """Create the configured price source."""
    if settings.use_stub_price_source:
        return StubPriceSource()
    return FipeHttpPriceSource(
        base_url=settings.price_source_base_url,
        timeout_seconds=settings.price_fetch_timeout_seconds,
        token=settings.price_source_token,
        reference_period=settings.price_reference_period,
    )


class AppContext:
    """In-process access to the valuation engine services."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[Session] = None,
        price_source: Optional[PriceSource] = None,
    ):
        self._settings = settings or get_settings()
        self._session = session
        self._price_source = price_source

        # Service instances (lazy initialized)
        self._resolver: Optional[PriceResolver] = None
        self._ledger: Optional[OwnershipLedger] = None
        self._enrichment: Optional[EnrichmentService] = None
        self._registry: Optional[AssetRegistry] = None
        self._aggregator: Optional[PatrimonyAggregator] = None
        self._scheduler: Optional[RefreshScheduler] = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def session(self) -> Session:
        """Get or create the database session."""
        if self._session is None:
            self._session = get_session()
        return self._session

    @property
    def price_source(self) -> PriceSource:
        if self._price_source is None:
            self._price_source = build_price_source(self._settings)
        return self._price_source

    # Repository accessors
    def _asset_repo(self) -> SqlAlchemyAssetRepository:
        return SqlAlchemyAssetRepository(self.session)

    def _stakeholder_repo(self) -> SqlAlchemyStakeholderRepository:
        return SqlAlchemyStakeholderRepository(self.session)

    def _ownership_repo(self) -> SqlAlchemyOwnershipRepository:
        return SqlAlchemyOwnershipRepository(self.session)

    def _price_cache_repo(self) -> SqlAlchemyPriceCacheRepository:
        return SqlAlchemyPriceCacheRepository(self.session)

    # Service accessors
    @property
    def resolver(self) -> PriceResolver:
        if self._resolver is None:
            self._resolver = PriceResolver(
                cache_repo=self._price_cache_repo(),
                price_source=self.price_source,
                default_fuel_code=self._settings.default_fuel_code,
            )
        return self._resolver

    @property
    def ledger(self) -> OwnershipLedger:
        if self._ledger is None:
            self._ledger = OwnershipLedger(
                asset_repo=self._asset_repo(),
                stakeholder_repo=self._stakeholder_repo(),
                ownership_repo=self._ownership_repo(),
                group_role=self._settings.collective_group_role,
            )
        return self._ledger

    @property
    def enrichment(self) -> EnrichmentService:
        if self._enrichment is None:
            self._enrichment = EnrichmentService(
                asset_repo=self._asset_repo(),
                resolver=self.resolver,
                price_source=self.price_source,
            )
        return self._enrichment

    @property
    def registry(self) -> AssetRegistry:
        if self._registry is None:
            self._registry = AssetRegistry(
                asset_repo=self._asset_repo(),
                ledger=self.ledger,
                enrichment=self.enrichment,
            )
        return self._registry

    @property
    def aggregator(self) -> PatrimonyAggregator:
        if self._aggregator is None:
            self._aggregator = PatrimonyAggregator(ledger=self.ledger, resolver=self.resolver)
        return self._aggregator

    @property
    def scheduler(self) -> RefreshScheduler:
        if self._scheduler is None:
            self._scheduler = RefreshScheduler(
                asset_repo=self._asset_repo(),
                resolver=self.resolver,
                delay_seconds=self._settings.refresh_delay_seconds,
                enrichment=self.enrichment,
            )
        return self._scheduler

    def close(self) -> None:
        """Clean up resources."""
        if self._session:
            self._session.close()
            self._session = None
