"""Quote lookup handler."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, Dict

from stockdemo.handlers.responses import (
    HandlerResult,
    HandlerStatus,
    cors_headers,
    is_preflight,
    parse_body,
    preflight,
    query_parameter,
)
from stockdemo.stores import IQuoteStore, attribute_value
from stockdemo.trading.models import Quote

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET,POST,OPTIONS"


def parse_quote(item: Dict[str, Any]) -> Quote:
    """Build a Quote from a stored record.

    Raises:
        KeyError: If a required attribute is missing
        ValueError: If a numeric attribute cannot be parsed
    """
    return Quote(
        symbol=str(attribute_value(item, "symbol")),
        name=str(attribute_value(item, "name")),
        price=float(attribute_value(item, "price")),
        change=float(attribute_value(item, "change")),
        volume=int(Decimal(str(attribute_value(item, "volume")))),
    )


class QuoteLookupHandler:
    """Looks up a single quote by symbol.

    Returns 200 with the quote, 404 when the symbol is not in the table,
    and 500 for any store or record fault.
    """

    def __init__(self, store: IQuoteStore) -> None:
        self._store = store

    def __call__(self, event: Dict[str, Any]) -> Dict[str, Any]:
        return self.handle(event)

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        return self.lookup(event).to_response()

    def lookup(self, event: Dict[str, Any]) -> HandlerResult:
        try:
            logger.info(f"Event: {json.dumps(event, default=str)}")

            if is_preflight(event):
                return preflight(ALLOWED_METHODS)

            body = parse_body(event)
            symbol = body.get("symbol") or query_parameter(event, "symbol") or "UNKNOWN"

            item = self._store.get_item(symbol)
            if not item:
                return HandlerResult(
                    HandlerStatus.NOT_FOUND,
                    {"success": False, "message": f"Stock {symbol} not found in database."},
                    cors_headers(),
                )

            quote = parse_quote(item)
            return HandlerResult(
                HandlerStatus.OK,
                {"success": True, "data": quote.to_dict()},
                cors_headers(),
            )
        except Exception as e:
            logger.exception(f"Quote lookup failed: {e}")
            return HandlerResult(
                HandlerStatus.INTERNAL_ERROR,
                {"success": False, "message": "Internal Server Error", "error": str(e)},
                cors_headers(),
            )
