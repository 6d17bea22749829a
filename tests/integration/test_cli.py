"""
Integration tests for the command-line entrypoint and AppContext.

Runs against a temporary SQLite file with the offline stub price source.
"""

import pytest
from decimal import Decimal

from patrimony.__main__ import main
from patrimony.app_context import AppContext, build_price_source
from patrimony.config.settings import Settings, reset_settings, set_settings
from patrimony.domain.models import ResolutionSource, StakeholderRole
from patrimony.providers import FipeHttpPriceSource, StubPriceSource
from patrimony.repositories.sqlalchemy import init_db_with_url, reset_database

from tests.conftest import make_key


@pytest.fixture
def cli_settings(tmp_path):
    settings = Settings(
        _env_file=None,
        data_dir=tmp_path,
        use_stub_price_source=True,
        refresh_delay_seconds=0.01,
    )
    set_settings(settings)
    reset_database()
    yield settings
    reset_database()
    reset_settings()


class TestCli:
    """Tests for the fleet-patrimony commands."""

    def test_init_refresh_and_report(self, cli_settings, capsys):
        """
        GIVEN an initialized database with a partner and a collective asset
        WHEN I run refresh and then report
        THEN the refresh updates the asset and the report shows its value
        """
        assert main(["init-db"]) == 0
        assert (cli_settings.data_dir / "patrimony.db").exists()

        context = AppContext(settings=cli_settings)
        try:
            context.ledger.add_stakeholder("Ana", role=StakeholderRole.PARTNER)
            asset = context.registry.register_asset(make_key(), label="Uno", is_collective=True)
            assert asset.brand_name == "Brand 21"
        finally:
            context.close()

        assert main(["refresh"]) == 0
        output = capsys.readouterr().out
        assert "Updated: 1" in output

        assert main(["report"]) == 0
        output = capsys.readouterr().out
        assert "Grand total: R$" in output
        assert "Ana (PARTNER)" in output

    def test_unknown_command(self, cli_settings):
        with pytest.raises(SystemExit):
            main(["explode"])


class TestAppContext:
    """Tests for AppContext wiring."""

    def test_price_source_selection(self, tmp_path):
        stub = build_price_source(Settings(_env_file=None, use_stub_price_source=True))
        http = build_price_source(Settings(_env_file=None, price_source_token="t"))

        assert isinstance(stub, StubPriceSource)
        assert isinstance(http, FipeHttpPriceSource)

    def test_services_share_collaborators(self, cli_settings, test_session):
        context = AppContext(settings=cli_settings, session=test_session)

        assert context.aggregator is context.aggregator
        assert context.registry is context.registry
        assert context.scheduler is context.scheduler
        assert isinstance(context.price_source, StubPriceSource)

        resolution = context.resolver.resolve(make_key())
        assert resolution.source == ResolutionSource.LIVE
        assert resolution.price > Decimal("0")

    def test_context_on_reconfigured_database(self, cli_settings, tmp_path):
        """
        GIVEN the database module pointed at another SQLite file
        WHEN a context without an explicit session writes a stakeholder
        THEN the stakeholder lands in that file
        """
        other = tmp_path / "other.db"
        init_db_with_url(f"sqlite:///{other}")

        context = AppContext(settings=cli_settings)
        try:
            created = context.ledger.add_stakeholder("Bruno")
            assert context.ledger.get_stakeholder(created.stakeholder_id).name == "Bruno"
        finally:
            context.close()

        assert other.exists()
        assert not (tmp_path / "patrimony.db").exists()
