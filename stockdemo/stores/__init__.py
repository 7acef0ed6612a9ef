# Stores module
"""Quote table and transaction log collaborators used by the handlers."""

from stockdemo.stores.errors import StoreError
from stockdemo.stores.quotes import (
    IQuoteStore,
    InMemoryQuoteStore,
    StorageQuoteStore,
    attribute_value,
    seed_quotes,
    tag_attributes,
)
from stockdemo.stores.transactions import (
    ITransactionLog,
    InMemoryTransactionLog,
    SqliteTransactionLog,
    StorageTransactionLog,
)

__all__ = [
    "StoreError",
    "IQuoteStore",
    "InMemoryQuoteStore",
    "StorageQuoteStore",
    "attribute_value",
    "seed_quotes",
    "tag_attributes",
    "ITransactionLog",
    "InMemoryTransactionLog",
    "SqliteTransactionLog",
    "StorageTransactionLog",
]
