"""Order commands triggered from the page.

Each command takes the session explicitly, reads the corresponding form,
validates it locally and only then calls the API.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Tuple

import httpx

from stockdemo.client.api import ApiError
from stockdemo.client.session import OrderForm, StockSession
from stockdemo.trading.models import TransactionType

logger = logging.getLogger(__name__)

INVALID_ORDER_MESSAGE = "Please enter valid stock symbol and quantity"


def read_order_form(form: OrderForm) -> Optional[Tuple[str, int]]:
    """Validate a form, returning the upper-cased symbol and quantity."""
    symbol = form.symbol.strip().upper()
    try:
        quantity = int(form.quantity.strip())
    except ValueError:
        return None
    if not symbol or quantity <= 0:
        return None
    return symbol, quantity


def _idempotency_key(session: StockSession) -> Optional[str]:
    return uuid.uuid4().hex if session.idempotency_keys else None


def submit_buy(session: StockSession) -> bool:
    """Place a buy order from the buy form.

    Returns:
        True if the order was confirmed and applied to the holdings
    """
    order = read_order_form(session.buy_form)
    if order is None:
        session.notices.show_error(INVALID_ORDER_MESSAGE)
        return False
    symbol, quantity = order

    logger.info(f"Placing buy order: {quantity} {symbol}")
    try:
        result = session.api.buy(symbol, quantity, _idempotency_key(session))
    except (ApiError, httpx.HTTPError, ValueError) as e:
        logger.error(f"Buy order error: {e}")
        session.notices.show_error(f"Failed to place buy order: {e}")
        return False
    logger.info(f"Buy order result: {result}")

    session.notices.show_success(f"Successfully bought {quantity} shares of {symbol}")
    session.update_portfolio(symbol, quantity, TransactionType.BUY)
    session.buy_form.clear()
    session.changed()
    return True


def submit_sell(session: StockSession) -> bool:
    """Place a sell order from the sell form.

    Rejected locally when the holdings do not cover the quantity.

    Returns:
        True if the order was confirmed and applied to the holdings
    """
    order = read_order_form(session.sell_form)
    if order is None:
        session.notices.show_error(INVALID_ORDER_MESSAGE)
        return False
    symbol, quantity = order

    if not session.ledger.can_sell(symbol, quantity):
        session.notices.show_error(f"You don't have enough shares of {symbol} to sell")
        return False

    logger.info(f"Placing sell order: {quantity} {symbol}")
    try:
        result = session.api.sell(symbol, quantity, _idempotency_key(session))
    except (ApiError, httpx.HTTPError, ValueError) as e:
        logger.error(f"Sell order error: {e}")
        session.notices.show_error(f"Failed to place sell order: {e}")
        return False
    logger.info(f"Sell order result: {result}")

    session.notices.show_success(f"Successfully sold {quantity} shares of {symbol}")
    session.update_portfolio(symbol, quantity, TransactionType.SELL)
    session.sell_form.clear()
    session.changed()
    return True


def fill_buy_form(session: StockSession, symbol: str) -> None:
    session.buy_form.symbol = symbol
    session.changed()


def fill_sell_form(session: StockSession, symbol: str) -> None:
    session.sell_form.symbol = symbol
    session.changed()
