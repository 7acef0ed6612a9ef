"""Quote store: key-value table of quotes keyed by ticker symbol.

Records are kept in the type-tagged attribute shape used by managed
key-value tables::

    {"symbol": {"S": "AAPL"}, "name": {"S": "Apple Inc."},
     "price": {"N": "175.50"}, "change": {"N": "-1.2"},
     "volume": {"N": "2000000"}}

Plain values are accepted too; readers unwrap either form.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from stockdemo.storage import IStorageService
from stockdemo.stores.errors import StoreError

logger = logging.getLogger(__name__)

NUMERIC_ATTRIBUTES = ("price", "change", "volume")


def tag_attributes(quote: Dict[str, Any]) -> Dict[str, Dict[str, str]]:
    """Convert a plain quote dict into type-tagged attributes."""
    item: Dict[str, Dict[str, str]] = {}
    for name, value in quote.items():
        if value is None:
            continue
        if name in NUMERIC_ATTRIBUTES:
            item[name] = {"N": str(value)}
        else:
            item[name] = {"S": str(value)}
    return item


def attribute_value(item: Dict[str, Any], name: str) -> Any:
    """Read one attribute from a stored record, unwrapping type tags.

    Raises:
        KeyError: If the attribute is missing
    """
    value = item[name]
    if isinstance(value, dict):
        for tag in ("S", "N"):
            if tag in value:
                return value[tag]
        raise KeyError(f"Attribute '{name}' has no supported type tag: {value!r}")
    return value


class IQuoteStore(ABC):
    """Interface for the quote table."""

    @abstractmethod
    def get_item(self, symbol: str) -> Optional[Dict[str, Any]]:
        """Fetch the raw stored record for ``symbol``.

        Returns:
            The stored record, or None if the symbol is not in the table

        Raises:
            StoreError: If the table cannot be read
        """
        ...

    @abstractmethod
    def put_item(self, item: Dict[str, Any]) -> None:
        """Insert or replace a record keyed by its ``symbol`` attribute."""
        ...


class InMemoryQuoteStore(IQuoteStore):
    """Quote table held in a dictionary."""

    def __init__(self, items: Optional[Iterable[Dict[str, Any]]] = None) -> None:
        self._items: Dict[str, Dict[str, Any]] = {}
        for item in items or []:
            self.put_item(item)

    def get_item(self, symbol: str) -> Optional[Dict[str, Any]]:
        item = self._items.get(symbol)
        return dict(item) if item is not None else None

    def put_item(self, item: Dict[str, Any]) -> None:
        self._items[str(attribute_value(item, "symbol"))] = dict(item)


class StorageQuoteStore(IQuoteStore):
    """Quote table kept as a single document in a storage service.

    The document maps symbols to stored records.
    """

    def __init__(self, storage: IStorageService, table: str = "StockTable") -> None:
        self._storage = storage
        self._table = table

    def _load_table(self) -> Dict[str, Any]:
        table = self._storage.load(self._table)
        if table is None:
            if self._storage.exists(self._table):
                raise StoreError(f"Table '{self._table}' is unreadable")
            return {}
        if not isinstance(table, dict):
            raise StoreError(f"Table '{self._table}' is not a mapping")
        return table

    def get_item(self, symbol: str) -> Optional[Dict[str, Any]]:
        return self._load_table().get(symbol)

    def put_item(self, item: Dict[str, Any]) -> None:
        table = self._load_table()
        table[str(attribute_value(item, "symbol"))] = item
        try:
            self._storage.save(self._table, table)
        except (TypeError, ValueError, OSError) as e:
            raise StoreError(f"Cannot write table '{self._table}': {e}") from e


def seed_quotes(store: IQuoteStore, quotes: Iterable[Dict[str, Any]]) -> int:
    """Load plain quote dicts into ``store``.

    Returns:
        Number of records written
    """
    count = 0
    for quote in quotes:
        store.put_item(tag_attributes(quote))
        count += 1
    logger.info(f"Seeded {count} quotes")
    return count
