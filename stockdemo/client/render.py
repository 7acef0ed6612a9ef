"""HTML rendering for the stock list and the portfolio."""

from __future__ import annotations

from html import escape
from typing import Any, Iterable, List, Optional, Tuple

from stockdemo.client.quotes import NOT_AVAILABLE, QuoteRow
from stockdemo.trading.models import Holding

BUY_SCHEME = "buy"
SELL_SCHEME = "sell"

STYLESHEET = """
.stock-item { padding: 12px; margin: 8px 0; border: 1px solid #ddd; background-color: #f9f9f9; }
.stock-item h3 { margin: 0 0 6px 0; color: #333; }
.stock-name { color: #666; }
.btn-buy { color: #28a745; font-weight: bold; }
.btn-sell { color: #dc3545; font-weight: bold; }
.portfolio-symbol { font-weight: bold; color: #333; }
.portfolio-quantity { color: #666; }
"""


def _money(value: str) -> str:
    return value if value == NOT_AVAILABLE else f"${value}"


def _percent(value: str) -> str:
    return value if value == NOT_AVAILABLE else f"{value}%"


def render_stock_item(record: Any) -> str:
    row = QuoteRow.from_record(record)
    symbol = escape(row.symbol)
    name = f'<p class="stock-name">{escape(row.name)}</p>' if row.name else ""
    return (
        '<div class="stock-item">'
        f"<h3>{symbol}</h3>"
        f"{name}"
        f"<p><b>Current Price:</b> {escape(_money(row.price))}</p>"
        f"<p><b>Change:</b> {escape(_percent(row.change))}</p>"
        f"<p><b>Volume:</b> {escape(row.volume)}</p>"
        '<p class="stock-actions">'
        f'<a class="btn-buy" href="{BUY_SCHEME}:{symbol}">Quick Buy</a> '
        f'<a class="btn-sell" href="{SELL_SCHEME}:{symbol}">Quick Sell</a>'
        "</p>"
        "</div>"
    )


def render_stock_list(stocks: Iterable[Any]) -> str:
    items: List[str] = [render_stock_item(stock) for stock in stocks]
    if not items:
        return "<p>No stock data available</p>"
    return "".join(items)


def render_portfolio(holdings: Iterable[Holding]) -> str:
    parts = ["<h3>Your Portfolio</h3>"]
    rows = [
        '<div class="portfolio-item">'
        f'<span class="portfolio-symbol">{escape(h.symbol)}</span> '
        f'<span class="portfolio-quantity">{h.quantity} shares</span>'
        "</div>"
        for h in holdings
    ]
    if not rows:
        parts.append("<p>No stocks in portfolio</p>")
    parts.extend(rows)
    return "".join(parts)


def parse_action_link(href: str) -> Optional[Tuple[str, str]]:
    """Split a quick-action link (``buy:AAPL``) into side and symbol."""
    side, sep, symbol = href.partition(":")
    if not sep or side not in (BUY_SCHEME, SELL_SCHEME) or not symbol:
        return None
    return side, symbol
