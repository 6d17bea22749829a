"""Core utilities and shared functionality."""

from patrimony.core.timezone import now_local, LOCAL_TZ
from patrimony.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    ConflictError,
    PriceSourceError,
    ExternalUnavailableError,
    MalformedPriceDataError,
)
from patrimony.core.formatters import parse_price, format_brl, fuel_display_name

__all__ = [
    "now_local",
    "LOCAL_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "PriceSourceError",
    "ExternalUnavailableError",
    "MalformedPriceDataError",
    "parse_price",
    "format_brl",
    "fuel_display_name",
]
