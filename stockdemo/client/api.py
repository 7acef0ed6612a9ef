from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from stockdemo.config import ENDPOINTS


class ApiError(Exception):
    """Non-success HTTP status from the API."""

    def __init__(self, status_code: int, text: str) -> None:
        super().__init__(f"HTTP {status_code}: {text}")
        self.status_code = status_code
        self.text = text


class StockApiClient:
    def __init__(
        self,
        base_url: str,
        timeout_s: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout_s,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self._lock = threading.Lock()

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        with self._lock:
            r = self._client.request(method, path, **kwargs)
        if r.is_error:
            raise ApiError(r.status_code, r.text)
        return r

    def check(self, symbol: Optional[str] = None) -> Any:
        params = {"symbol": symbol} if symbol else None
        return self._send("GET", ENDPOINTS["check"], params=params).json()

    def _order(self, side: str, symbol: str, quantity: int, idempotency_key: Optional[str]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "symbol": symbol,
            "quantity": quantity,
            "action": side,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if idempotency_key:
            payload["idempotency_key"] = idempotency_key
        return self._send("POST", ENDPOINTS[side], json=payload).json()

    def buy(self, symbol: str, quantity: int, idempotency_key: Optional[str] = None) -> Dict[str, Any]:
        return self._order("buy", symbol, quantity, idempotency_key)

    def sell(self, symbol: str, quantity: int, idempotency_key: Optional[str] = None) -> Dict[str, Any]:
        return self._order("sell", symbol, quantity, idempotency_key)

    def close(self) -> None:
        self._client.close()
