"""Reference price source providers."""

from patrimony.providers.price_source import PriceSource
from patrimony.providers.fipe_provider import FipeHttpPriceSource
from patrimony.providers.stub_provider import StubPriceSource

__all__ = [
    "PriceSource",
    "FipeHttpPriceSource",
    "StubPriceSource",
]
