"""Temple Stuart - corporate action cost basis ledger."""

__version__ = "0.1.0"
