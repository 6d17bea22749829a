"""HTTP client for the FIPE reference price API (v2)."""

import logging
from typing import Any, Optional

import requests

from patrimony.core.exceptions import ExternalUnavailableError, MalformedPriceDataError
from patrimony.domain.models import AssetCategory, PriceLookupKey
from patrimony.domain.views import CatalogItem, PriceQuote

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Subscription-Token"


class FipeHttpPriceSource:
    """
    Price source backed by the FIPE HTTP API.

    Every request carries a bounded timeout; transport errors, timeouts and
    non-200 answers raise ExternalUnavailableError, unusable bodies raise
    MalformedPriceDataError.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        token: Optional[str] = None,
        reference_period: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._reference_period = reference_period
        self._session = session or requests.Session()
        if token:
            self._session.headers[TOKEN_HEADER] = token

    def get_value(self, key: PriceLookupKey) -> PriceQuote:
        """Fetch the "value for year" record of a lookup key."""
        url = (
            f"{self._base_url}/{key.asset_category.value}/brands/{key.asset_class_code}"
            f"/models/{key.model_code}/years/{key.year_series_id}"
        )
        payload = self._get_json(url)
        if not isinstance(payload, dict):
            raise MalformedPriceDataError(f"Expected an object from {url}")

        price_text = payload.get("price")
        if not price_text or not isinstance(price_text, str):
            raise MalformedPriceDataError(f"Missing price in answer from {url}")

        return PriceQuote(
            price_text=price_text,
            reference_period=payload.get("referenceMonth"),
            brand_name=payload.get("brand"),
            model_name=payload.get("model"),
            model_year=_int_or_none(payload.get("modelYear")),
            fuel_name=payload.get("fuel"),
            fuel_code=payload.get("fuelAcronym"),
            source_code=payload.get("codeFipe"),
        )

    def get_brands(self, category: AssetCategory) -> list[CatalogItem]:
        return self._get_catalog(f"{self._base_url}/{category.value}/brands")

    def get_models(self, category: AssetCategory, asset_class_code: int) -> list[CatalogItem]:
        return self._get_catalog(
            f"{self._base_url}/{category.value}/brands/{asset_class_code}/models"
        )

    def get_years(
        self,
        category: AssetCategory,
        asset_class_code: int,
        model_code: int,
    ) -> list[CatalogItem]:
        return self._get_catalog(
            f"{self._base_url}/{category.value}/brands/{asset_class_code}"
            f"/models/{model_code}/years"
        )

    def _get_catalog(self, url: str) -> list[CatalogItem]:
        payload = self._get_json(url)
        if not isinstance(payload, list):
            raise MalformedPriceDataError(f"Expected a list from {url}")
        items = []
        for row in payload:
            if not isinstance(row, dict) or "code" not in row:
                raise MalformedPriceDataError(f"Unexpected listing row from {url}: {row!r}")
            items.append(CatalogItem(code=str(row["code"]), name=str(row.get("name", ""))))
        return items

    def _get_json(self, url: str) -> Any:
        params = {"reference": self._reference_period} if self._reference_period else None
        logger.debug("GET %s", url)
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.Timeout as exc:
            raise ExternalUnavailableError(
                f"Price source timed out after {self._timeout}s: {url}"
            ) from exc
        except requests.RequestException as exc:
            raise ExternalUnavailableError(f"Price source request failed: {exc}") from exc

        if response.status_code != 200:
            raise ExternalUnavailableError(
                f"Price source answered HTTP {response.status_code} for {url}"
            )

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedPriceDataError(f"Invalid JSON from {url}") from exc


def _int_or_none(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
