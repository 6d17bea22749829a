"""Enumerations for domain models."""

from enum import Enum


class AssetCategory(str, Enum):
    """Vehicle categories, named after the price source path segments."""

    CARS = "cars"
    MOTORCYCLES = "motorcycles"
    TRUCKS = "trucks"


class StakeholderRole(str, Enum):
    """Stakeholder roles."""

    ADMINISTRATOR = "ADMINISTRATOR"
    PARTNER = "PARTNER"  # equal-distribution group for collective assets
    INVESTOR = "INVESTOR"  # independent holder


class ResolutionSource(str, Enum):
    """Which fallback tier produced a price."""

    CACHED = "cached"
    LIVE = "live"
    STALE = "stale"
    NONE = "none"
