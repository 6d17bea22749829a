"""
Pytest configuration and fixtures for fleet patrimony tests.

This module provides:
- In-memory SQLite database fixtures
- Deterministic, failing and malformed price sources
- A controllable clock in the local timezone
- Service and repository fixtures
- Factory helpers for stakeholders and assets
"""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session

from patrimony.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from patrimony.repositories.sqlalchemy import orm_models  # noqa: F401
from patrimony.repositories.sqlalchemy import (
    SqlAlchemyAssetRepository,
    SqlAlchemyOwnershipRepository,
    SqlAlchemyPriceCacheRepository,
    SqlAlchemyStakeholderRepository,
)
from patrimony.services import (
    AssetRegistry,
    EnrichmentService,
    OwnershipLedger,
    PatrimonyAggregator,
    PriceResolver,
    RefreshScheduler,
)
from patrimony.domain.models import (
    Asset,
    AssetCategory,
    PriceLookupKey,
    Stakeholder,
    StakeholderRole,
)
from patrimony.domain.views import CatalogItem, PriceQuote
from patrimony.core.exceptions import ExternalUnavailableError, MalformedPriceDataError
from patrimony.core.formatters import format_brl
from patrimony.core.timezone import LOCAL_TZ
from patrimony.config.settings import reset_settings


# =============================================================================
# TIME HELPERS
# =============================================================================


def local_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in the application timezone."""
    return LOCAL_TZ.localize(datetime(year, month, day, hour, minute, second))


class TickingClock:
    """Clock returning a strictly increasing time on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self._current = start
        self._step = step

    def __call__(self) -> datetime:
        now = self._current
        self._current = now + self._step
        return now


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return local_datetime(2024, 6, 15, 14, 30, 0)


@pytest.fixture
def clock(fixed_now) -> TickingClock:
    """Deterministic clock starting at fixed_now."""
    return TickingClock(fixed_now)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def asset_repo(test_session) -> SqlAlchemyAssetRepository:
    """Provide test AssetRepository."""
    return SqlAlchemyAssetRepository(test_session)


@pytest.fixture
def stakeholder_repo(test_session) -> SqlAlchemyStakeholderRepository:
    """Provide test StakeholderRepository."""
    return SqlAlchemyStakeholderRepository(test_session)


@pytest.fixture
def ownership_repo(test_session) -> SqlAlchemyOwnershipRepository:
    """Provide test OwnershipRepository."""
    return SqlAlchemyOwnershipRepository(test_session)


@pytest.fixture
def cache_repo(test_session) -> SqlAlchemyPriceCacheRepository:
    """Provide test PriceCacheRepository."""
    return SqlAlchemyPriceCacheRepository(test_session)


# =============================================================================
# PRICE SOURCE FIXTURES
# =============================================================================


def make_key(
    asset_class_code: int = 21,
    model_code: int = 4828,
    year_series_id: str = "2017-1",
    asset_category: AssetCategory = AssetCategory.CARS,
    fuel_code: Optional[str] = "G",
) -> PriceLookupKey:
    """Helper to build a lookup key with sensible defaults."""
    return PriceLookupKey(
        asset_class_code=asset_class_code,
        model_code=model_code,
        year_series_id=year_series_id,
        asset_category=asset_category,
        fuel_code=fuel_code,
    )


class DeterministicPriceSource:
    """
    Deterministic price source for testing.

    Answers only for keys it was given a price for; every other key is
    reported as unavailable. Calls are recorded.
    """

    def __init__(self, prices: Optional[dict[PriceLookupKey, Decimal]] = None):
        self.prices = dict(prices or {})
        self.calls: list[PriceLookupKey] = []

    def set_price(self, key: PriceLookupKey, price: Decimal) -> None:
        self.prices[key] = Decimal(price)

    def get_value(self, key: PriceLookupKey) -> PriceQuote:
        self.calls.append(key)
        if key not in self.prices:
            raise ExternalUnavailableError(f"No price for {key}")
        return PriceQuote(
            price_text=format_brl(self.prices[key]),
            reference_period="junho de 2024",
            brand_name="Fiat",
            model_name="Uno Mille 1.0",
            model_year=int(key.year_series_id.split("-")[0]),
            fuel_name="Gasolina",
            fuel_code=key.fuel_code,
            source_code="001267-0",
        )

    def get_brands(self, category: AssetCategory) -> list[CatalogItem]:
        return [CatalogItem(code="21", name="Fiat"), CatalogItem(code="59", name="VW")]

    def get_models(self, category: AssetCategory, asset_class_code: int) -> list[CatalogItem]:
        return [CatalogItem(code="4828", name="Uno Mille 1.0")]

    def get_years(
        self,
        category: AssetCategory,
        asset_class_code: int,
        model_code: int,
    ) -> list[CatalogItem]:
        return [CatalogItem(code="2017-1", name="2017 Gasolina")]


class FailingPriceSource:
    """Price source that is always unavailable."""

    def __init__(self):
        self.calls = 0

    def get_value(self, key: PriceLookupKey) -> PriceQuote:
        self.calls += 1
        raise ExternalUnavailableError("Network unavailable")

    def get_brands(self, category: AssetCategory) -> list[CatalogItem]:
        raise ExternalUnavailableError("Network unavailable")

    def get_models(self, category: AssetCategory, asset_class_code: int) -> list[CatalogItem]:
        raise ExternalUnavailableError("Network unavailable")

    def get_years(
        self,
        category: AssetCategory,
        asset_class_code: int,
        model_code: int,
    ) -> list[CatalogItem]:
        raise ExternalUnavailableError("Network unavailable")


class MalformedPriceSource(FailingPriceSource):
    """Price source answering with unusable price text."""

    def __init__(self, price_text: str = "abc"):
        super().__init__()
        self._price_text = price_text

    def get_value(self, key: PriceLookupKey) -> PriceQuote:
        self.calls += 1
        if self._price_text is None:
            raise MalformedPriceDataError("Missing price")
        return PriceQuote(price_text=self._price_text)


@pytest.fixture
def price_source() -> DeterministicPriceSource:
    """Provide a deterministic price source with no prices configured."""
    return DeterministicPriceSource()


@pytest.fixture
def failing_source() -> FailingPriceSource:
    """Provide a price source that always fails."""
    return FailingPriceSource()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def resolver(cache_repo, price_source, clock) -> PriceResolver:
    """Provide test PriceResolver backed by the deterministic source."""
    return PriceResolver(
        cache_repo=cache_repo,
        price_source=price_source,
        default_fuel_code="G",
        clock=clock,
    )


@pytest.fixture
def ledger(asset_repo, stakeholder_repo, ownership_repo, clock) -> OwnershipLedger:
    """Provide test OwnershipLedger."""
    return OwnershipLedger(
        asset_repo=asset_repo,
        stakeholder_repo=stakeholder_repo,
        ownership_repo=ownership_repo,
        group_role=StakeholderRole.PARTNER,
        clock=clock,
    )


@pytest.fixture
def enrichment(asset_repo, resolver, price_source, clock) -> EnrichmentService:
    """Provide test EnrichmentService."""
    return EnrichmentService(
        asset_repo=asset_repo,
        resolver=resolver,
        price_source=price_source,
        clock=clock,
    )


@pytest.fixture
def registry(asset_repo, ledger, clock) -> AssetRegistry:
    """Provide test AssetRegistry without enrichment."""
    return AssetRegistry(asset_repo=asset_repo, ledger=ledger, clock=clock)


@pytest.fixture
def aggregator(ledger, resolver, clock) -> PatrimonyAggregator:
    """Provide test PatrimonyAggregator."""
    return PatrimonyAggregator(ledger=ledger, resolver=resolver, clock=clock)


@pytest.fixture
def sleeps() -> list[float]:
    """Collects the delays requested by the refresh scheduler."""
    return []


@pytest.fixture
def scheduler(asset_repo, resolver, enrichment, sleeps) -> RefreshScheduler:
    """Provide test RefreshScheduler that records sleeps instead of sleeping."""
    return RefreshScheduler(
        asset_repo=asset_repo,
        resolver=resolver,
        delay_seconds=1.5,
        enrichment=enrichment,
        sleep=sleeps.append,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def stakeholder_factory(ledger) -> Callable[..., Stakeholder]:
    """Factory for creating test stakeholders through the ledger."""

    def _create_stakeholder(
        name: Optional[str] = None,
        role: StakeholderRole = StakeholderRole.INVESTOR,
        is_active: bool = True,
        stakeholder_id: Optional[str] = None,
    ) -> Stakeholder:
        if name is None:
            name = f"Stakeholder {uuid.uuid4().hex[:8]}"
        return ledger.add_stakeholder(
            name=name,
            role=role,
            is_active=is_active,
            stakeholder_id=stakeholder_id,
        )

    return _create_stakeholder


@pytest.fixture
def asset_factory(registry) -> Callable[..., Asset]:
    """Factory for creating test assets through the registry."""

    def _create_asset(
        key: Optional[PriceLookupKey] = None,
        label: str = "",
        is_collective: bool = False,
        asset_id: Optional[str] = None,
    ) -> Asset:
        return registry.register_asset(
            lookup_key=key or make_key(),
            label=label,
            is_collective=is_collective,
            asset_id=asset_id,
        )

    return _create_asset


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
