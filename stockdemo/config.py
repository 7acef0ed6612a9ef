"""
Configuration for the stock trading demo.

Values come from ``STOCKDEMO_*`` environment variables; anything unset
or unparseable falls back to the defaults below.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "check": "/check",
    "buy": "/buy",
    "sell": "/sell",
}

LOCAL_BASE_URL = "http://stockdemo.local"

DEFAULT_STATE_DIR = Path.home() / ".stockdemo"
DEFAULT_PORTFOLIO_KEY = "stockPortfolio"
DEFAULT_QUOTE_TABLE = "StockTable"
DEFAULT_TRANSACTIONS_TABLE = "TransactionsTable"
DEFAULT_LEDGER_DB = "transactions.db"
DEFAULT_NOTICE_SECONDS = 5.0
DEFAULT_TIMEOUT_SECONDS = 10.0

# Quotes loaded into the local quote table on first run
SAMPLE_QUOTES = [
    {"symbol": "GOOGL", "name": "Alphabet Inc.", "price": "150.25", "change": "2.5", "volume": "1000000"},
    {"symbol": "AAPL", "name": "Apple Inc.", "price": "175.50", "change": "-1.2", "volume": "2000000"},
    {"symbol": "MSFT", "name": "Microsoft Corporation", "price": "380.75", "change": "0.8", "volume": "1500000"},
]

TRUE_VALUES = {"1", "true", "yes", "on"}


def _float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {name}={raw!r}, using {default}")
        return default
    return value


def _symbols(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(s.strip().upper() for s in raw.split(",") if s.strip())


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        api_base_url: Base URL of the deployed API; empty runs the handlers
            in-process against local stores
        state_dir: Directory for the holdings slot and local tables
        portfolio_key: Storage slot holding the serialized holdings list
        quote_table: Name of the local quote table document
        transactions_table: Name of the local sell log document
        ledger_db: SQLite file for the local buy log
        watchlist: Symbols to look up on load; empty issues one bare request
        notice_seconds: How long a notice stays up
        timeout_seconds: HTTP timeout for API calls
        idempotency_keys: Attach a fresh key to every order request
        log_level: Root logging level name
    """
    api_base_url: str = ""
    state_dir: Path = DEFAULT_STATE_DIR
    portfolio_key: str = DEFAULT_PORTFOLIO_KEY
    quote_table: str = DEFAULT_QUOTE_TABLE
    transactions_table: str = DEFAULT_TRANSACTIONS_TABLE
    ledger_db: Optional[Path] = None
    watchlist: Tuple[str, ...] = field(default_factory=tuple)
    notice_seconds: float = DEFAULT_NOTICE_SECONDS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    idempotency_keys: bool = False
    log_level: str = "INFO"

    @property
    def local_mode(self) -> bool:
        return not self.api_base_url

    @property
    def base_url(self) -> str:
        return self.api_base_url.rstrip("/") if self.api_base_url else LOCAL_BASE_URL

    @property
    def ledger_path(self) -> Path:
        return self.ledger_db or (self.state_dir / DEFAULT_LEDGER_DB)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        state_dir = Path(env.get("STOCKDEMO_STATE_DIR") or DEFAULT_STATE_DIR).expanduser()
        ledger_db = env.get("STOCKDEMO_LEDGER_DB")
        return cls(
            api_base_url=(env.get("STOCKDEMO_API_BASE") or "").strip(),
            state_dir=state_dir,
            portfolio_key=env.get("STOCKDEMO_PORTFOLIO_KEY") or DEFAULT_PORTFOLIO_KEY,
            quote_table=env.get("STOCKDEMO_QUOTE_TABLE") or DEFAULT_QUOTE_TABLE,
            transactions_table=env.get("STOCKDEMO_TRANSACTIONS_TABLE") or DEFAULT_TRANSACTIONS_TABLE,
            ledger_db=Path(ledger_db).expanduser() if ledger_db else None,
            watchlist=_symbols(env.get("STOCKDEMO_WATCHLIST")),
            notice_seconds=_float(env, "STOCKDEMO_NOTICE_SECONDS", DEFAULT_NOTICE_SECONDS),
            timeout_seconds=_float(env, "STOCKDEMO_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            idempotency_keys=(env.get("STOCKDEMO_IDEMPOTENCY_KEYS") or "").strip().lower() in TRUE_VALUES,
            log_level=(env.get("STOCKDEMO_LOG_LEVEL") or "INFO").upper(),
        )
