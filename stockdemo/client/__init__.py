# Client module
"""Client-side state: API calls, quote normalization, holdings and notices."""

from stockdemo.client.api import ApiError, StockApiClient
from stockdemo.client.commands import fill_buy_form, fill_sell_form, submit_buy, submit_sell
from stockdemo.client.notices import Notice, NoticeBoard, NoticeKind
from stockdemo.client.quotes import (
    FIELD_CANDIDATES,
    NOT_AVAILABLE,
    SAMPLE_STOCKS,
    QuoteRow,
    resolve_field,
    extract_quotes,
    unwrap_quotes,
)
from stockdemo.client.session import OrderForm, StockSession

__all__ = [
    "ApiError",
    "StockApiClient",
    "fill_buy_form",
    "fill_sell_form",
    "submit_buy",
    "submit_sell",
    "Notice",
    "NoticeBoard",
    "NoticeKind",
    "FIELD_CANDIDATES",
    "NOT_AVAILABLE",
    "SAMPLE_STOCKS",
    "QuoteRow",
    "resolve_field",
    "extract_quotes",
    "unwrap_quotes",
    "OrderForm",
    "StockSession",
]
