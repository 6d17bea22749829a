"""Valuation engine for fractionally owned vehicles."""

__version__ = "0.1.0"
