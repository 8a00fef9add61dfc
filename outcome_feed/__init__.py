"""Publish BitMEX composite index prices as outcome records on a Redis list."""

__version__ = "0.3.0"
