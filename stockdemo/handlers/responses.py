"""Request parsing and response shaping shared by the handlers.

Handlers receive proxy-style events::

    {"httpMethod": "POST", "path": "/buy", "body": "{...}",
     "queryStringParameters": {...}, "headers": {...}}

and return ``{"statusCode", "headers", "body"}`` dictionaries with a JSON
body. Every response allows any origin.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

ALLOWED_HEADERS = "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token"
PREFLIGHT_MESSAGE = "CORS preflight successful"


class HandlerStatus(Enum):
    """Outcome of a handler invocation."""
    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404
    INTERNAL_ERROR = 500


@dataclass
class HandlerResult:
    """Structured result of a handler invocation.

    Attributes:
        status: Outcome category
        payload: JSON-serializable response body
        headers: Response headers
    """
    status: HandlerStatus
    payload: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return self.status.value

    def to_response(self) -> Dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": json.dumps(self.payload),
        }


def cors_headers(methods: Optional[str] = None, content_type: bool = True) -> Dict[str, str]:
    """Build the cross-origin header set.

    Args:
        methods: Value for ``Access-Control-Allow-Methods``; when given,
            ``Access-Control-Allow-Headers`` is included as well
        content_type: Include ``Content-Type: application/json``
    """
    headers: Dict[str, str] = {}
    if content_type:
        headers["Content-Type"] = "application/json"
    headers["Access-Control-Allow-Origin"] = "*"
    if methods:
        headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
        headers["Access-Control-Allow-Methods"] = methods
    return headers


def is_preflight(event: Dict[str, Any]) -> bool:
    return str(event.get("httpMethod") or "").upper() == "OPTIONS"


def preflight(methods: str) -> HandlerResult:
    """Empty acknowledgment for a cross-origin preflight request."""
    return HandlerResult(
        HandlerStatus.OK,
        {"message": PREFLIGHT_MESSAGE},
        cors_headers(methods),
    )


def parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Extract the request body as a dictionary.

    Accepts a JSON string, an already-decoded dictionary, or no body at
    all (treated as empty).

    Raises:
        ValueError: If the body is not valid JSON or not a JSON object
    """
    body = event.get("body")
    if body is None or body == "":
        return {}
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    if isinstance(body, str):
        body = json.loads(body)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValueError(f"Request body must be a JSON object, got {type(body).__name__}")
    return body


def query_parameter(event: Dict[str, Any], name: str) -> Optional[str]:
    params = event.get("queryStringParameters") or {}
    value = params.get(name)
    return value or None
