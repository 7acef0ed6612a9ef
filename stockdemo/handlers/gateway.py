"""In-process gateway routing HTTP requests to the handlers.

Turns an ``httpx.Request`` into a proxy-style event, calls the handler
registered for the path and turns the handler result back into an
``httpx.Response``. Lets the client talk to the handlers without a
network hop.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Optional

import httpx

from stockdemo.config import ENDPOINTS
from stockdemo.handlers.buy import BuyOrderHandler
from stockdemo.handlers.quote_lookup import QuoteLookupHandler
from stockdemo.handlers.responses import cors_headers
from stockdemo.handlers.sell import SellOrderHandler
from stockdemo.stores import IQuoteStore, ITransactionLog

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], Dict[str, Any]]


def request_to_event(request: httpx.Request) -> Dict[str, Any]:
    """Build a handler event from an HTTP request."""
    content = request.content
    params = dict(request.url.params)
    return {
        "httpMethod": request.method,
        "path": request.url.path,
        "headers": dict(request.headers),
        "queryStringParameters": params or None,
        "body": content.decode("utf-8") if content else None,
    }


def response_from_result(result: Dict[str, Any]) -> httpx.Response:
    """Build an HTTP response from a handler result dictionary."""
    return httpx.Response(
        status_code=int(result["statusCode"]),
        headers=result.get("headers") or {},
        content=(result.get("body") or "").encode("utf-8"),
    )


def _error_response(status_code: int, message: str) -> httpx.Response:
    return httpx.Response(
        status_code,
        headers=cors_headers(),
        content=json.dumps({"message": message}).encode("utf-8"),
    )


class ApiGateway:
    """Routes request paths to handler callables."""

    def __init__(self, routes: Optional[Dict[str, Handler]] = None) -> None:
        self._routes: Dict[str, Handler] = dict(routes or {})

    @classmethod
    def for_stores(cls, quotes: IQuoteStore, buy_log: ITransactionLog, sell_log: ITransactionLog) -> "ApiGateway":
        """Wire the three handlers to their stores under the standard paths."""
        return cls({
            ENDPOINTS["check"]: QuoteLookupHandler(quotes),
            ENDPOINTS["buy"]: BuyOrderHandler(buy_log),
            ENDPOINTS["sell"]: SellOrderHandler(sell_log),
        })

    def add_route(self, path: str, handler: Handler) -> None:
        self._routes[path] = handler

    def _match(self, path: str) -> Optional[Handler]:
        # Deployed stages prefix the path (e.g. /prod/check)
        for route, handler in self._routes.items():
            if path == route or path.endswith(route):
                return handler
        return None

    def dispatch(self, request: httpx.Request) -> httpx.Response:
        handler = self._match(request.url.path)
        if handler is None:
            logger.warning(f"No route for {request.method} {request.url.path}")
            return _error_response(404, "Not Found")
        try:
            event = request_to_event(request)
        except UnicodeDecodeError as e:
            logger.warning(f"Undecodable body for {request.method} {request.url.path}: {e}")
            return _error_response(400, "Request body must be UTF-8 encoded")
        return response_from_result(handler(event))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.dispatch)
