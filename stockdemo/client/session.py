"""Client session: the page's state, constructed once at startup.

Combines two independently fetched sources, remote quotes and the
locally persisted holdings, with no transaction between them. Holdings
are updated only after the API confirms an order; a failed write of the
holdings slot is logged and not compensated.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx

from stockdemo.client.api import ApiError, StockApiClient
from stockdemo.client.notices import NoticeBoard
from stockdemo.client.quotes import extract_quotes, sample_stocks, unwrap_quotes
from stockdemo.client.render import render_portfolio, render_stock_list
from stockdemo.config import DEFAULT_PORTFOLIO_KEY
from stockdemo.storage import IStorageService
from stockdemo.trading.models import Holding, TransactionType
from stockdemo.trading.portfolio import HoldingsLedger, PortfolioSerializer

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load stock data. Using sample data."


@dataclass
class OrderForm:
    """Raw contents of a buy or sell form."""
    symbol: str = ""
    quantity: str = ""

    def clear(self) -> None:
        self.symbol = ""
        self.quantity = ""


class StockSession:
    """Stateful page session.

    Attributes:
        api: Client for the quote and order endpoints
        storage: Persisted-state collaborator holding the holdings slot
        notices: Single-instance notice board
        ledger: Current holdings
        stocks: Last normalized quote list
        buy_form, sell_form: Current form contents
        stocks_html, portfolio_html: Last rendered fragments
    """

    def __init__(
        self,
        api: StockApiClient,
        storage: IStorageService,
        notices: Optional[NoticeBoard] = None,
        portfolio_key: str = DEFAULT_PORTFOLIO_KEY,
        watchlist: Sequence[str] = (),
        idempotency_keys: bool = False,
    ) -> None:
        self.api = api
        self.storage = storage
        self.notices = notices or NoticeBoard()
        self.portfolio_key = portfolio_key
        self.watchlist = tuple(watchlist)
        self.idempotency_keys = idempotency_keys

        self.ledger = HoldingsLedger()
        self.stocks: List[Dict[str, Any]] = []
        self.buy_form = OrderForm()
        self.sell_form = OrderForm()
        self.stocks_html = render_stock_list([])
        self.portfolio_html = render_portfolio([])
        self._listeners: List[Callable[["StockSession"], None]] = []

    def subscribe(self, listener: Callable[["StockSession"], None]) -> None:
        """Register a callback run whenever rendered state or forms change."""
        self._listeners.append(listener)

    def changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def start(self) -> None:
        self.load_portfolio()
        self.load_quotes()

    # Quotes

    def fetch_quotes(self) -> List[Dict[str, Any]]:
        """Fetch and normalize quotes.

        With a watchlist, symbols the API reports as not found are skipped.
        The sample list stands in only when nothing was loaded.

        Raises:
            ApiError: On a non-success HTTP status other than a per-symbol 404
            httpx.HTTPError: On transport faults
            ValueError: On an undecodable response
        """
        if not self.watchlist:
            raw = self.api.check()
            logger.debug(f"Raw API response: {json.dumps(raw, default=str)}")
            return unwrap_quotes(raw)

        stocks: List[Dict[str, Any]] = []
        for symbol in self.watchlist:
            try:
                raw = self.api.check(symbol)
            except ApiError as e:
                if e.status_code != 404:
                    raise
                logger.warning(f"Skipping {symbol}, not found: {e}")
                continue
            logger.debug(f"Raw API response for {symbol}: {json.dumps(raw, default=str)}")
            records = extract_quotes(raw)
            if records is None:
                logger.warning(f"Skipping {symbol}, unexpected payload {type(raw).__name__}")
                continue
            stocks.extend(records)
        if not stocks:
            logger.info("No watchlist quotes loaded, using sample data")
            return sample_stocks()
        return stocks

    def load_quotes(self) -> List[Dict[str, Any]]:
        try:
            stocks = self.fetch_quotes()
        except (ApiError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Error loading stock data: {e}")
            self.notices.show_error(LOAD_FAILED_MESSAGE)
            stocks = sample_stocks()
        self.display_stocks(stocks)
        return stocks

    def display_stocks(self, stocks: List[Dict[str, Any]]) -> None:
        self.stocks = list(stocks)
        self.stocks_html = render_stock_list(self.stocks)
        self.changed()

    # Holdings

    def load_portfolio(self) -> None:
        try:
            saved = self.storage.load(self.portfolio_key)
            self.ledger = PortfolioSerializer.deserialize(saved) if saved else HoldingsLedger()
        except (OSError, ValueError) as e:
            logger.error(f"Error loading portfolio: {e}")
            self.ledger = HoldingsLedger()
        self.display_portfolio()

    def save_portfolio(self) -> None:
        try:
            self.storage.save(self.portfolio_key, PortfolioSerializer.serialize(self.ledger))
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving portfolio: {e}")

    def display_portfolio(self) -> None:
        self.portfolio_html = render_portfolio(self.ledger.get_holdings())
        self.changed()

    def holding(self, symbol: str) -> Optional[Holding]:
        return self.ledger.get_holding(symbol)

    def update_portfolio(self, symbol: str, quantity: int, side: TransactionType) -> None:
        """Apply a confirmed order to the holdings, persist and re-render."""
        if side is TransactionType.BUY:
            self.ledger.apply_buy(symbol, quantity)
        else:
            self.ledger.apply_sell(symbol, quantity)
        self.save_portfolio()
        self.display_portfolio()

    def close(self) -> None:
        self.notices.dismiss()
        self.api.close()
