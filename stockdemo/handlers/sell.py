"""Sell order handler.

Missing quantity and price are filled with random placeholders: this is
a simulation, no price discovery happens here. Sells are recorded
without checking what the caller actually holds.
"""

from __future__ import annotations

import logging
import random
from decimal import Decimal
from typing import Any, Dict, Optional

from stockdemo.handlers.responses import (
    HandlerResult,
    HandlerStatus,
    cors_headers,
    is_preflight,
    parse_body,
    preflight,
)
from stockdemo.stores import ITransactionLog
from stockdemo.trading.models import Transaction, TransactionType, to_cents

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET,POST,PUT,DELETE,OPTIONS"

MIN_PLACEHOLDER_QUANTITY = 1
MAX_PLACEHOLDER_QUANTITY = 10
MIN_PLACEHOLDER_PRICE = 150.0
PLACEHOLDER_PRICE_SPAN = 50.0


class SellOrderHandler:
    """Records a sell order and returns the full transaction record."""

    def __init__(self, log: ITransactionLog, rng: Optional[random.Random] = None) -> None:
        self._log = log
        self._rng = rng or random.Random()

    def __call__(self, event: Dict[str, Any]) -> Dict[str, Any]:
        return self.handle(event)

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        return self.place(event).to_response()

    def placeholder_quantity(self) -> int:
        return self._rng.randint(MIN_PLACEHOLDER_QUANTITY, MAX_PLACEHOLDER_QUANTITY)

    def placeholder_price(self) -> float:
        # random() is in [0, 1), so the price stays below the upper bound
        return MIN_PLACEHOLDER_PRICE + self._rng.random() * PLACEHOLDER_PRICE_SPAN

    def place(self, event: Dict[str, Any]) -> HandlerResult:
        headers = cors_headers(ALLOWED_METHODS)
        try:
            if is_preflight(event):
                return preflight(ALLOWED_METHODS)

            body = parse_body(event)
            symbol = str(body.get("symbol") or "UNKNOWN")
            quantity = int(body.get("quantity") or self.placeholder_quantity())
            price = to_cents(Decimal(str(body.get("stock_price") or self.placeholder_price())))

            transaction = Transaction(
                symbol=symbol,
                type=TransactionType.SELL,
                quantity=quantity,
                price=price,
                success=True,
                message=f"Successfully sold {quantity} shares of {symbol} at ${price} each",
                idempotency_key=body.get("idempotency_key") or None,
            )
            self._log.append(transaction)
            logger.info(f"Recorded SELL {transaction.id} {quantity} {symbol} @ {price}")

            return HandlerResult(HandlerStatus.OK, transaction.to_record(), headers)
        except Exception as e:
            logger.exception(f"Error placing sell order: {e}")
            return HandlerResult(
                HandlerStatus.INTERNAL_ERROR,
                {"error": "Internal server error", "message": str(e), "success": False},
                headers,
            )
