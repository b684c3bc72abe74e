"""estate-ledger: property-management accounting core."""

__version__ = "0.1.0"
