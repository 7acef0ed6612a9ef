"""Buy order handler."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from stockdemo.handlers.responses import (
    HandlerResult,
    HandlerStatus,
    cors_headers,
    parse_body,
)
from stockdemo.stores import ITransactionLog
from stockdemo.trading.models import Transaction, TransactionType

logger = logging.getLogger(__name__)


def parse_positive_int(value: Any) -> Optional[int]:
    """Coerce a request value to a positive integer, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number > 0 else None


class BuyOrderHandler:
    """Records a buy order in the transaction log.

    The price is not computed here; the log leaves it empty.
    """

    def __init__(self, log: ITransactionLog) -> None:
        self._log = log

    def __call__(self, event: Dict[str, Any]) -> Dict[str, Any]:
        return self.handle(event)

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        return self.place(event).to_response()

    def place(self, event: Dict[str, Any]) -> HandlerResult:
        headers = cors_headers(content_type=False)
        try:
            body = parse_body(event)
            symbol = body.get("symbol")
            quantity = parse_positive_int(body.get("quantity"))

            if not symbol or quantity is None:
                return HandlerResult(
                    HandlerStatus.BAD_REQUEST,
                    {"message": "Missing symbol or quantity"},
                    headers,
                )

            symbol = str(symbol)
            message = f"Buy order placed for {quantity} shares of {symbol}"
            transaction = Transaction(
                symbol=symbol,
                type=TransactionType.BUY,
                quantity=quantity,
                message=message,
                idempotency_key=body.get("idempotency_key") or None,
            )
            self._log.append(transaction)
            logger.info(f"Recorded BUY {json.dumps(transaction.to_record())}")

            return HandlerResult(HandlerStatus.OK, {"message": message}, headers)
        except Exception as e:
            logger.exception(f"Error placing buy order: {e}")
            return HandlerResult(
                HandlerStatus.INTERNAL_ERROR,
                {"message": "Internal server error", "error": str(e)},
                headers,
            )
