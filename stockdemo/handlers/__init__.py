# Handlers module
"""Request handlers for quote lookup and buy/sell orders."""

from stockdemo.handlers.responses import (
    HandlerResult,
    HandlerStatus,
    cors_headers,
    parse_body,
    preflight,
)
from stockdemo.handlers.quote_lookup import QuoteLookupHandler, parse_quote
from stockdemo.handlers.buy import BuyOrderHandler
from stockdemo.handlers.sell import SellOrderHandler
from stockdemo.handlers.gateway import ApiGateway

__all__ = [
    "HandlerResult",
    "HandlerStatus",
    "cors_headers",
    "parse_body",
    "preflight",
    "QuoteLookupHandler",
    "parse_quote",
    "BuyOrderHandler",
    "SellOrderHandler",
    "ApiGateway",
]
