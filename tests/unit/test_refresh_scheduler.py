"""
Unit tests for RefreshScheduler.

Tests cover:
- Forced live fetch for every asset
- Stale fallback counted as updated
- Failures counted without aborting the batch
- Throttling between assets
"""

import pytest
from decimal import Decimal

from patrimony.core.exceptions import ValidationError
from patrimony.services import RefreshScheduler

from tests.conftest import make_key


class TestRefreshAll:
    """Tests for refresh_all."""

    def test_refreshes_every_asset_with_delay_between(
        self, scheduler: RefreshScheduler, asset_factory, price_source, cache_repo, sleeps
    ):
        """
        GIVEN three assets with live prices available
        WHEN I refresh all
        THEN all are updated, the cache holds the new prices and sleep ran twice
        """
        keys = [make_key(model_code=code) for code in (1, 2, 3)]
        for key in keys:
            cache_repo.upsert(key, Decimal("1000.00"))
            price_source.set_price(key, Decimal("2000.00"))
            asset_factory(key=key)

        summary = scheduler.refresh_all()

        assert summary.updated_count == 3
        assert summary.failed_count == 0
        assert summary.total == 3
        assert sleeps == [1.5, 1.5]
        assert all(cache_repo.get(key).price == Decimal("2000.00") for key in keys)

    def test_stale_price_counts_as_updated(self, scheduler: RefreshScheduler, asset_factory, cache_repo):
        """
        GIVEN an asset with a cached price and an unavailable source
        WHEN I refresh all
        THEN the asset counts as updated and keeps its price
        """
        key = make_key()
        cache_repo.upsert(key, Decimal("40000.00"))
        asset_factory(key=key)

        summary = scheduler.refresh_all()

        assert summary.updated_count == 1
        assert summary.failed_count == 0
        assert cache_repo.get(key).price == Decimal("40000.00")

    def test_unpriced_asset_counts_as_failed(
        self, scheduler: RefreshScheduler, asset_factory, price_source
    ):
        """
        GIVEN one asset without any price and one with a live price
        WHEN I refresh all
        THEN one update and one failure are reported
        """
        priced_key = make_key(model_code=2)
        price_source.set_price(priced_key, Decimal("5000"))
        missing = asset_factory(key=make_key(model_code=1))
        asset_factory(key=priced_key)

        summary = scheduler.refresh_all()

        assert summary.updated_count == 1
        assert summary.failed_count == 1
        assert summary.failed_asset_ids == [missing.asset_id]

    def test_unexpected_error_does_not_abort_batch(
        self, asset_repo, resolver, asset_factory, price_source, sleeps, monkeypatch
    ):
        """
        GIVEN a resolver that crashes on the first asset
        WHEN I refresh all
        THEN the first asset fails and the second is still refreshed
        """
        first = asset_factory(key=make_key(model_code=1))
        second_key = make_key(model_code=2)
        price_source.set_price(second_key, Decimal("7000"))
        asset_factory(key=second_key)

        original = resolver.resolve

        def flaky_resolve(key, force_refresh=False):
            if key.model_code == 1:
                raise RuntimeError("boom")
            return original(key, force_refresh=force_refresh)

        monkeypatch.setattr(resolver, "resolve", flaky_resolve)
        scheduler = RefreshScheduler(asset_repo, resolver, delay_seconds=0.5, sleep=sleeps.append)

        summary = scheduler.refresh_all()

        assert summary.failed_asset_ids == [first.asset_id]
        assert summary.updated_count == 1
        assert sleeps == [0.5]

    def test_live_refresh_enriches_asset(self, scheduler: RefreshScheduler, asset_factory, asset_repo, price_source):
        key = make_key(year_series_id="2017-5")
        price_source.set_price(key, Decimal("43807"))
        asset = asset_factory(key=key)

        scheduler.refresh_all()

        refreshed = asset_repo.get_by_id(asset.asset_id)
        assert refreshed.brand_name == "Fiat"
        assert refreshed.model_name == "Uno Mille 1.0"
        assert refreshed.display_year == 2017
        assert refreshed.display_fuel == "Gasolina"

    def test_no_assets(self, scheduler: RefreshScheduler, sleeps):
        summary = scheduler.refresh_all()

        assert summary.total == 0
        assert sleeps == []

    @pytest.mark.parametrize("delay", [0, -1])
    def test_non_positive_delay_is_rejected(self, asset_repo, resolver, delay):
        with pytest.raises(ValidationError):
            RefreshScheduler(asset_repo, resolver, delay_seconds=delay)
