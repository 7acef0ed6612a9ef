"""Normalization of quote responses for display.

The quote endpoint's framing is not uniform: responses may arrive wrapped
in a proxy envelope (``{"body": "<json>"}``), as a lookup result
(``{"success": true, "data": {...}}``), as a bare list or object, or as
something else entirely. Records themselves may spell fields differently
(``symbol``/``Symbol``/``ticker``). Everything here survives those shapes
instead of trying to fix them.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

# Ordered alternate spellings per logical attribute, first match wins
FIELD_CANDIDATES: Dict[str, Sequence[str]] = {
    "symbol": ("symbol", "Symbol", "ticker"),
    "name": ("name", "Name", "companyName"),
    "price": ("price", "Price", "currentPrice", "last"),
    "change": ("change", "Change", "changePercent", "pctChange"),
    "volume": ("volume", "Volume", "totalVolume"),
}

SAMPLE_STOCKS: List[Dict[str, Any]] = [
    {"symbol": "GOOGL", "price": 150.25, "change": 2.5, "volume": 1000000},
    {"symbol": "AAPL", "price": 175.50, "change": -1.2, "volume": 2000000},
    {"symbol": "MSFT", "price": 380.75, "change": 0.8, "volume": 1500000},
]


def sample_stocks() -> List[Dict[str, Any]]:
    """Fresh copy of the built-in sample list."""
    return [dict(s) for s in SAMPLE_STOCKS]


def _unwrap_envelope(raw: Any) -> Any:
    if isinstance(raw, dict) and raw.get("body"):
        body = raw["body"]
        if isinstance(body, (str, bytes, bytearray)):
            try:
                return json.loads(body)
            except ValueError:
                return body
        return body
    return raw


def _unwrap_lookup_result(payload: Any) -> Any:
    if isinstance(payload, dict) and "success" in payload and isinstance(payload.get("data"), (dict, list)):
        return payload["data"]
    return payload


def extract_quotes(raw: Any) -> Optional[List[Dict[str, Any]]]:
    """Unwrap an envelope and a lookup result into a list of records.

    Returns:
        The records, a single object as a one-element list, or None if the
        payload is neither an object nor a list
    """
    payload = _unwrap_lookup_result(_unwrap_envelope(raw))
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        return [payload]
    return None


def unwrap_quotes(raw: Any) -> List[Dict[str, Any]]:
    """Like extract_quotes, substituting the sample list for unexpected shapes."""
    records = extract_quotes(raw)
    if records is not None:
        return records
    logger.info(f"Unexpected quote payload {type(raw).__name__}, using sample data")
    return sample_stocks()


def resolve_field(record: Any, candidates: Sequence[str]) -> Any:
    """Return the first present, non-null candidate field of ``record``.

    Returns:
        The field value, or NOT_AVAILABLE if no candidate is set
    """
    if not isinstance(record, dict):
        return NOT_AVAILABLE
    for name in candidates:
        value = record.get(name)
        if value is not None and value != "":
            return value
    return NOT_AVAILABLE


def format_price(value: Any) -> str:
    if value is NOT_AVAILABLE:
        return NOT_AVAILABLE
    try:
        number = float(value)
    except (TypeError, ValueError):
        return NOT_AVAILABLE
    if not math.isfinite(number):
        return NOT_AVAILABLE
    return f"{number:.2f}"


# Change is a percentage, shown with the same precision as prices
format_change = format_price


def format_volume(value: Any) -> str:
    if value is NOT_AVAILABLE:
        return NOT_AVAILABLE
    try:
        return f"{int(float(value)):,}"
    except (TypeError, ValueError, OverflowError):
        return NOT_AVAILABLE


@dataclass(frozen=True)
class QuoteRow:
    """Display-ready quote, every field already formatted."""
    symbol: str
    name: str
    price: str
    change: str
    volume: str

    @classmethod
    def from_record(cls, record: Any) -> "QuoteRow":
        name = resolve_field(record, FIELD_CANDIDATES["name"])
        return cls(
            symbol=str(resolve_field(record, FIELD_CANDIDATES["symbol"])),
            name="" if name is NOT_AVAILABLE else str(name),
            price=format_price(resolve_field(record, FIELD_CANDIDATES["price"])),
            change=format_change(resolve_field(record, FIELD_CANDIDATES["change"])),
            volume=format_volume(resolve_field(record, FIELD_CANDIDATES["volume"])),
        )
