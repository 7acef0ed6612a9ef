# Trading module
"""Trading data models and the client-side holdings ledger."""

from .models import Holding, Quote, Transaction, TransactionType, to_cents
from .portfolio import HoldingsLedger, PortfolioSerializer

__all__ = [
    "Holding",
    "Quote",
    "Transaction",
    "TransactionType",
    "to_cents",
    "HoldingsLedger",
    "PortfolioSerializer",
]
