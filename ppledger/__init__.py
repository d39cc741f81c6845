"""Logging, TCP transport, epoch bookkeeping and Ouroboros-style consensus for a proof-of-stake ledger."""

__version__ = "1.0.0"