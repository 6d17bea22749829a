"""Stub price source for offline/testing use."""

from decimal import Decimal
from typing import Optional

from patrimony.core.formatters import format_brl, fuel_display_name
from patrimony.domain.models import AssetCategory, PriceLookupKey
from patrimony.domain.views import CatalogItem, PriceQuote


class StubPriceSource:
    """
    Offline price source with deterministic fake data.

    Prices derive from the lookup key so the same key always yields the
    same value; explicit overrides win.
    """

    def __init__(
        self,
        prices: Optional[dict[PriceLookupKey, Decimal]] = None,
        reference_period: str = "stub",
    ):
        self._prices = dict(prices or {})
        self._reference_period = reference_period

    def get_value(self, key: PriceLookupKey) -> PriceQuote:
        price = self._prices.get(key)
        if price is None:
            seed = key.asset_class_code * 7919 + key.model_code * 104729 + _year_of(key)
            price = Decimal(20000 + seed % 180000)
        fuel = key.fuel_code or "G"
        return PriceQuote(
            price_text=format_brl(price),
            reference_period=self._reference_period,
            brand_name=f"Brand {key.asset_class_code}",
            model_name=f"Model {key.model_code}",
            model_year=_year_of(key) or None,
            fuel_name=fuel_display_name(fuel),
            fuel_code=fuel,
            source_code=f"{key.asset_class_code:03d}{key.model_code:03d}-0",
        )

    def get_brands(self, category: AssetCategory) -> list[CatalogItem]:
        return [CatalogItem(code=str(code), name=f"Brand {code}") for code in range(1, 100)]

    def get_models(self, category: AssetCategory, asset_class_code: int) -> list[CatalogItem]:
        return [CatalogItem(code=str(code), name=f"Model {code}") for code in range(1, 10000)]

    def get_years(
        self,
        category: AssetCategory,
        asset_class_code: int,
        model_code: int,
    ) -> list[CatalogItem]:
        return [
            CatalogItem(code=f"{year}-{fuel}", name=str(year))
            for year in range(2000, 2027)
            for fuel in (1, 2, 3, 5)
        ]


def _year_of(key: PriceLookupKey) -> int:
    head = key.year_series_id.split("-", 1)[0]
    return int(head) if head.isdigit() else 0
