"""Transaction log: append-only record of buy and sell actions.

The handlers only ever append. ``records()`` exists so tests and tools
can inspect what was written.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from stockdemo.storage import IStorageService
from stockdemo.stores.errors import StoreError
from stockdemo.trading.models import Transaction

logger = logging.getLogger(__name__)


class ITransactionLog(ABC):
    """Interface for append-only transaction logs."""

    @abstractmethod
    def append(self, transaction: Transaction) -> bool:
        """Append one transaction.

        A transaction whose idempotency key was already appended is not
        written again.

        Args:
            transaction: Transaction to record

        Returns:
            True if a record was written, False if it was a duplicate
        """
        ...

    @abstractmethod
    def records(self) -> List[dict]:
        """Return every record written so far, oldest first."""
        ...


class InMemoryTransactionLog(ITransactionLog):
    """Transaction log held in a list."""

    def __init__(self) -> None:
        self._records: List[dict] = []
        self._keys: set[str] = set()

    def append(self, transaction: Transaction) -> bool:
        key = transaction.idempotency_key
        if key is not None:
            if key in self._keys:
                logger.info(f"Dropping duplicate transaction for key {key}")
                return False
            self._keys.add(key)
        self._records.append(transaction.to_record())
        return True

    def records(self) -> List[dict]:
        return [dict(r) for r in self._records]


class StorageTransactionLog(ITransactionLog):
    """Key-value style log kept as one document in a storage service."""

    def __init__(self, storage: IStorageService, table: str = "TransactionsTable") -> None:
        self._storage = storage
        self._table = table

    def _load(self) -> dict:
        doc = self._storage.load(self._table)
        if doc is None:
            # An unreadable table must never be rewritten as an empty one
            if self._storage.exists(self._table):
                raise StoreError(f"Table '{self._table}' is unreadable")
            return {"items": [], "keys": []}
        if not isinstance(doc, dict) or not isinstance(doc.get("items"), list):
            raise StoreError(f"Table '{self._table}' is malformed")
        doc.setdefault("keys", [])
        return doc

    def append(self, transaction: Transaction) -> bool:
        doc = self._load()
        key = transaction.idempotency_key
        if key is not None:
            if key in doc["keys"]:
                logger.info(f"Dropping duplicate transaction for key {key}")
                return False
            doc["keys"].append(key)
        doc["items"].append(transaction.to_record())
        try:
            self._storage.save(self._table, doc)
        except (TypeError, ValueError, OSError) as e:
            raise StoreError(f"Cannot write table '{self._table}': {e}") from e
        return True

    def records(self) -> List[dict]:
        return list(self._load()["items"])


class SqliteTransactionLog(ITransactionLog):
    """Relational transaction log backed by SQLite.

    Each call opens and closes its own connection. The ``price`` and
    ``total`` columns stay NULL for orders that carry no price.
    """

    COLUMNS = (
        "id",
        "symbol",
        "quantity",
        "transaction_type",
        "price",
        "total",
        "transaction_time",
        "message",
        "idempotency_key",
    )

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)
        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        try:
            return sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open transaction database {self.db_path}: {e}") from e

    def _init_database(self) -> None:
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS transactions (
                    id TEXT PRIMARY KEY,
                    symbol TEXT NOT NULL,
                    quantity INTEGER NOT NULL,
                    transaction_type TEXT NOT NULL,
                    price TEXT,
                    total TEXT,
                    transaction_time TEXT NOT NULL,
                    message TEXT,
                    idempotency_key TEXT UNIQUE
                )
            ''')
            conn.commit()
        finally:
            conn.close()

    def append(self, transaction: Transaction) -> bool:
        record = transaction.to_record()
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT OR IGNORE INTO transactions
                    (id, symbol, quantity, transaction_type, price, total,
                     transaction_time, message, idempotency_key)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ''', (
                record["id"],
                record["symbol"],
                record["quantity"],
                record["type"],
                record["price"],
                record["total"],
                record["timestamp"],
                record["message"],
                transaction.idempotency_key,
            ))
            conn.commit()
            written = cursor.rowcount == 1
        except sqlite3.Error as e:
            raise StoreError(f"Failed to insert transaction {record['id']}: {e}") from e
        finally:
            conn.close()
        if not written:
            logger.info(f"Dropping duplicate transaction for key {transaction.idempotency_key}")
        return written

    def records(self) -> List[dict]:
        conn = self._connect()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {', '.join(self.COLUMNS)} FROM transactions ORDER BY rowid"
            )
            rows = cursor.fetchall()
        finally:
            conn.close()
        return [dict(zip(self.COLUMNS, row)) for row in rows]

    def count(self, symbol: Optional[str] = None) -> int:
        conn = self._connect()
        try:
            cursor = conn.cursor()
            if symbol is None:
                cursor.execute("SELECT COUNT(*) FROM transactions")
            else:
                cursor.execute("SELECT COUNT(*) FROM transactions WHERE symbol = ?", (symbol,))
            return int(cursor.fetchone()[0])
        finally:
            conn.close()
