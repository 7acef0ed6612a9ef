from __future__ import annotations

import os
import random

import httpx
import pytest
from PySide6.QtWidgets import QApplication

from stockdemo.client.api import StockApiClient
from stockdemo.client.notices import NoticeBoard
from stockdemo.client.session import StockSession
from stockdemo.config import LOCAL_BASE_URL, SAMPLE_QUOTES
from stockdemo.handlers.gateway import ApiGateway
from stockdemo.handlers.sell import SellOrderHandler
from stockdemo.storage import MemoryStorage
from stockdemo.stores import InMemoryQuoteStore, InMemoryTransactionLog, seed_quotes


@pytest.fixture(scope="session", autouse=True)
def _qt_app():
    # Use offscreen to avoid GUI requirement in CI
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    app = QApplication.instance() or QApplication([])
    yield app


class ManualScheduler:
    """Scheduler that only fires when the test says so."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay_s, callback):
        entry = {"delay": delay_s, "callback": callback, "cancelled": False}
        self.pending.append(entry)

        def cancel():
            entry["cancelled"] = True

        return cancel

    def fire_all(self):
        entries, self.pending = self.pending, []
        for entry in entries:
            if not entry["cancelled"]:
                entry["callback"]()

    @property
    def active(self):
        return [e for e in self.pending if not e["cancelled"]]


class RecordingTransport(httpx.BaseTransport):
    """Wraps a transport and records every request that goes through it."""

    def __init__(self, inner: httpx.BaseTransport):
        self._inner = inner
        self.requests = []

    def handle_request(self, request):
        self.requests.append(request)
        return self._inner.handle_request(request)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def notices(scheduler):
    return NoticeBoard(duration_s=5.0, scheduler=scheduler)


@pytest.fixture
def quote_store():
    store = InMemoryQuoteStore()
    seed_quotes(store, SAMPLE_QUOTES)
    return store


@pytest.fixture
def buy_log():
    return InMemoryTransactionLog()


@pytest.fixture
def sell_log():
    return InMemoryTransactionLog()


@pytest.fixture
def gateway(quote_store, buy_log, sell_log):
    gw = ApiGateway.for_stores(quote_store, buy_log, sell_log)
    gw.add_route("/sell", SellOrderHandler(sell_log, rng=random.Random(7)))
    return gw


@pytest.fixture
def transport(gateway):
    return RecordingTransport(gateway.transport())


@pytest.fixture
def api(transport):
    client = StockApiClient(LOCAL_BASE_URL, timeout_s=1, transport=transport)
    yield client
    client.close()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def session(api, storage, notices):
    return StockSession(api=api, storage=storage, notices=notices)
