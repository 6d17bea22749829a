"""Asset and price lookup key domain models."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from patrimony.domain.models.enums import AssetCategory


@dataclass(frozen=True)
class PriceLookupKey:
    """
    Composite identifier of an asset's reference price.

    Two assets with the same key always resolve to the same cached price.
    fuel_code is optional on input; call normalized() before any cache
    or price source operation.
    """

    asset_class_code: int
    model_code: int
    year_series_id: str
    asset_category: AssetCategory
    fuel_code: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.asset_category, str):
            object.__setattr__(self, "asset_category", AssetCategory(self.asset_category))

    @property
    def is_normalized(self) -> bool:
        return self.fuel_code is not None

    def normalized(self, default_fuel_code: str) -> "PriceLookupKey":
        """Return a key whose fuel code is set and upper-cased."""
        fuel = (self.fuel_code or "").strip().upper() or default_fuel_code.upper()
        if fuel == self.fuel_code:
            return self
        return replace(self, fuel_code=fuel)

    def __str__(self) -> str:
        return (
            f"{self.asset_category.value}/{self.asset_class_code}/{self.model_code}"
            f"/{self.year_series_id}/{self.fuel_code or '-'}"
        )


@dataclass
class Asset:
    """
    A priced vehicle.

    Display fields (brand/model names, display year and fuel) are filled
    opportunistically from the price source.
    """

    asset_id: str
    lookup_key: PriceLookupKey
    label: str = ""
    is_collective: bool = False
    brand_name: Optional[str] = None
    model_name: Optional[str] = None
    display_year: Optional[int] = None
    display_fuel: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.brand_name, self.model_name) if p]
        if self.display_year:
            parts.append(str(self.display_year))
        return " ".join(parts) or self.label or self.asset_id
