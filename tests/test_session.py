"""End-to-end tests for the client session against the in-process handlers."""

from __future__ import annotations

import json

import httpx
import pytest

from stockdemo.client.api import StockApiClient
from stockdemo.client.commands import (
    INVALID_ORDER_MESSAGE,
    fill_buy_form,
    fill_sell_form,
    submit_buy,
    submit_sell,
)
from stockdemo.client.notices import NoticeKind
from stockdemo.client.quotes import SAMPLE_STOCKS
from stockdemo.client.session import LOAD_FAILED_MESSAGE, StockSession
from stockdemo.config import LOCAL_BASE_URL
from stockdemo.storage import MemoryStorage


def _session_for(handler, storage, notices, **kwargs):
    api = StockApiClient(LOCAL_BASE_URL, transport=httpx.MockTransport(handler))
    return StockSession(api=api, storage=storage, notices=notices, **kwargs)


def _buy(session, symbol, quantity):
    session.buy_form.symbol = symbol
    session.buy_form.quantity = str(quantity)
    return submit_buy(session)


def _sell(session, symbol, quantity):
    session.sell_form.symbol = symbol
    session.sell_form.quantity = str(quantity)
    return submit_sell(session)


# Loading quotes

def test_enveloped_quote_list_is_rendered(storage, notices):
    quotes = [{"symbol": "NVDA", "price": 900.1, "change": 1.5, "volume": 42}]
    session = _session_for(
        lambda request: httpx.Response(200, json={"statusCode": 200, "body": json.dumps(quotes)}),
        storage,
        notices,
    )

    assert session.load_quotes() == quotes
    assert "NVDA" in session.stocks_html
    assert "$900.10" in session.stocks_html
    assert notices.current is None


def test_unexpected_shape_falls_back_to_sample_without_notice(storage, notices):
    session = _session_for(lambda request: httpx.Response(200, json=17), storage, notices)

    assert session.load_quotes() == SAMPLE_STOCKS
    assert session.stocks_html.count('class="stock-item"') == 3
    assert notices.current is None


def test_http_error_falls_back_to_sample_with_error_notice(storage, notices):
    session = _session_for(lambda request: httpx.Response(502, text="bad gateway"), storage, notices)

    assert session.load_quotes() == SAMPLE_STOCKS
    assert notices.current.kind is NoticeKind.ERROR
    assert notices.current.message == LOAD_FAILED_MESSAGE


def test_network_fault_falls_back_to_sample(storage, notices):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    session = _session_for(handler, storage, notices)
    assert session.load_quotes() == SAMPLE_STOCKS
    assert notices.current.message == LOAD_FAILED_MESSAGE


def test_undecodable_body_falls_back_to_sample(storage, notices):
    session = _session_for(lambda request: httpx.Response(200, content=b"<html>"), storage, notices)
    assert session.load_quotes() == SAMPLE_STOCKS
    assert notices.current.message == LOAD_FAILED_MESSAGE


def test_watchlist_fetches_each_symbol(api, storage, notices, transport):
    session = StockSession(api=api, storage=storage, notices=notices, watchlist=("AAPL", "MSFT"))

    stocks = session.load_quotes()
    assert [s["symbol"] for s in stocks] == ["AAPL", "MSFT"]
    assert [r.url.params["symbol"] for r in transport.requests] == ["AAPL", "MSFT"]


def test_watchlist_skips_symbols_that_are_not_found(api, storage, notices):
    session = StockSession(api=api, storage=storage, notices=notices, watchlist=("AAPL", "ZZZ", "MSFT"))

    stocks = session.load_quotes()
    assert [s["symbol"] for s in stocks] == ["AAPL", "MSFT"]
    assert notices.current is None


def test_watchlist_with_nothing_found_shows_sample_once(api, storage, notices):
    session = StockSession(api=api, storage=storage, notices=notices, watchlist=("ZZZ", "YYY"))
    assert session.load_quotes() == SAMPLE_STOCKS


def test_watchlist_unexpected_shapes_do_not_repeat_sample(storage, notices):
    def handler(request):
        if request.url.params["symbol"] == "AAPL":
            return httpx.Response(200, json={"success": True, "data": {"symbol": "AAPL", "price": 1}})
        return httpx.Response(200, json=17)

    session = _session_for(handler, storage, notices, watchlist=("AAPL", "MSFT", "GOOGL"))
    assert session.load_quotes() == [{"symbol": "AAPL", "price": 1}]

    only_bad = _session_for(lambda request: httpx.Response(200, json=17), storage, notices, watchlist=("A", "B"))
    assert only_bad.load_quotes() == SAMPLE_STOCKS


def test_watchlist_server_error_still_falls_back_with_notice(storage, notices):
    def handler(request):
        if request.url.params["symbol"] == "AAPL":
            return httpx.Response(200, json={"success": True, "data": {"symbol": "AAPL"}})
        return httpx.Response(500, text="boom")

    session = _session_for(handler, storage, notices, watchlist=("AAPL", "MSFT"))
    assert session.load_quotes() == SAMPLE_STOCKS
    assert notices.current.message == LOAD_FAILED_MESSAGE


# Holdings

def test_buy_then_sell_removes_holding_and_persisted_entry(session, storage, buy_log, sell_log):
    assert _buy(session, "aapl", 5) is True
    assert storage.load("stockPortfolio") == [{"symbol": "AAPL", "quantity": 5}]

    assert _sell(session, "AAPL", 5) is True
    assert session.holding("AAPL") is None
    assert storage.load("stockPortfolio") == []
    assert "No stocks in portfolio" in session.portfolio_html
    assert len(buy_log.records()) == 1
    assert len(sell_log.records()) == 1


def test_successful_buy_notifies_and_clears_form(session, notices):
    _buy(session, "msft", 3)

    assert notices.current.kind is NoticeKind.SUCCESS
    assert notices.current.message == "Successfully bought 3 shares of MSFT"
    assert session.buy_form.symbol == ""
    assert session.buy_form.quantity == ""
    assert "3 shares" in session.portfolio_html


def test_sell_without_holding_is_rejected_locally(session, notices, transport, sell_log):
    assert _sell(session, "AAPL", 1) is False

    assert notices.current.kind is NoticeKind.ERROR
    assert notices.current.message == "You don't have enough shares of AAPL to sell"
    assert transport.requests == []
    assert sell_log.records() == []


def test_sell_more_than_held_is_rejected_locally(session, transport):
    _buy(session, "AAPL", 2)
    requests_before = len(transport.requests)

    assert _sell(session, "AAPL", 3) is False
    assert len(transport.requests) == requests_before
    assert session.holding("AAPL").quantity == 2


@pytest.mark.parametrize("symbol, quantity", [
    ("", "5"),
    ("   ", "5"),
    ("AAPL", ""),
    ("AAPL", "0"),
    ("AAPL", "-3"),
    ("AAPL", "2.5"),
    ("AAPL", "abc"),
])
def test_invalid_form_makes_no_request(session, notices, transport, symbol, quantity):
    session.buy_form.symbol = symbol
    session.buy_form.quantity = quantity

    assert submit_buy(session) is False
    assert notices.current.message == INVALID_ORDER_MESSAGE
    assert transport.requests == []


def test_server_error_surfaces_body_and_leaves_holdings(storage, notices):
    session = _session_for(
        lambda request: httpx.Response(500, text='{"message": "Internal server error"}'),
        storage,
        notices,
    )

    assert _buy(session, "AAPL", 1) is False
    assert notices.current.kind is NoticeKind.ERROR
    assert notices.current.message == (
        'Failed to place buy order: HTTP 500: {"message": "Internal server error"}'
    )
    assert session.holding("AAPL") is None
    assert storage.load("stockPortfolio") is None
    assert session.buy_form.symbol == "AAPL"


def test_idempotency_keys_are_sent_when_enabled(api, storage, notices, transport):
    session = StockSession(api=api, storage=storage, notices=notices, idempotency_keys=True)
    _buy(session, "AAPL", 1)

    body = json.loads(transport.requests[-1].read())
    assert len(body["idempotency_key"]) == 32


def test_no_idempotency_key_by_default(session, transport):
    _buy(session, "AAPL", 1)
    assert "idempotency_key" not in json.loads(transport.requests[-1].read())


# Persistence

def test_start_restores_persisted_holdings(api, notices):
    storage = MemoryStorage({"stockPortfolio": [{"symbol": "GOOGL", "quantity": 4}]})
    session = StockSession(api=api, storage=storage, notices=notices, watchlist=("GOOGL",))
    session.start()

    assert session.holding("GOOGL").quantity == 4
    assert "GOOGL" in session.portfolio_html
    assert "Alphabet Inc." in session.stocks_html


def test_corrupt_persisted_holdings_start_empty(api, notices):
    storage = MemoryStorage({"stockPortfolio": {"not": "a list"}})
    session = StockSession(api=api, storage=storage, notices=notices)
    session.load_portfolio()
    assert session.ledger.get_holdings() == []


def test_failed_holdings_write_keeps_in_memory_update(api, notices):
    class _ReadOnlyStorage(MemoryStorage):
        def save(self, key, data):
            raise OSError("disk full")

    session = StockSession(api=api, storage=_ReadOnlyStorage(), notices=notices)
    assert _buy(session, "AAPL", 2) is True
    assert session.holding("AAPL").quantity == 2


def test_custom_portfolio_key(api, notices):
    storage = MemoryStorage()
    session = StockSession(api=api, storage=storage, notices=notices, portfolio_key="other")
    _buy(session, "AAPL", 1)
    assert storage.load("other") == [{"symbol": "AAPL", "quantity": 1}]
    assert storage.load("stockPortfolio") is None


# Forms and listeners

def test_quick_links_fill_forms_and_notify(session):
    seen = []
    session.subscribe(lambda s: seen.append((s.buy_form.symbol, s.sell_form.symbol)))

    fill_buy_form(session, "AAPL")
    fill_sell_form(session, "MSFT")
    assert seen == [("AAPL", ""), ("AAPL", "MSFT")]
