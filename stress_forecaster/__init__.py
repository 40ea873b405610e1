"""Daily stress log reconciliation, restore bookkeeping and forecast expansion."""

__version__ = "0.1.0"
