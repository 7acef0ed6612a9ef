from __future__ import annotations

import logging
import sys
from typing import Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication, QMainWindow

from stockdemo.client.api import StockApiClient
from stockdemo.client.notices import NoticeBoard
from stockdemo.client.session import StockSession
from stockdemo.config import SAMPLE_QUOTES, Settings
from stockdemo.handlers.gateway import ApiGateway
from stockdemo.storage import JsonFileStorage
from stockdemo.stores import SqliteTransactionLog, StorageQuoteStore, StorageTransactionLog, seed_quotes
from stockdemo.ui.stock_page import StockPage

logger = logging.getLogger(__name__)


def build_local_gateway(settings: Settings, storage: JsonFileStorage) -> ApiGateway:
    """Handlers running in-process against tables under the state dir."""
    quotes = StorageQuoteStore(storage, settings.quote_table)
    if not storage.exists(settings.quote_table):
        seed_quotes(quotes, SAMPLE_QUOTES)
    return ApiGateway.for_stores(
        quotes=quotes,
        buy_log=SqliteTransactionLog(settings.ledger_path),
        sell_log=StorageTransactionLog(storage, settings.transactions_table),
    )


def build_session(settings: Settings, notices: Optional[NoticeBoard] = None) -> StockSession:
    storage = JsonFileStorage(settings.state_dir)
    transport = None
    watchlist = settings.watchlist
    if settings.local_mode:
        logger.info(f"No API base configured, running handlers locally in {settings.state_dir}")
        transport = build_local_gateway(settings, storage).transport()
        watchlist = watchlist or tuple(q["symbol"] for q in SAMPLE_QUOTES)
    api = StockApiClient(settings.base_url, timeout_s=settings.timeout_seconds, transport=transport)
    return StockSession(
        api=api,
        storage=storage,
        notices=notices or NoticeBoard(settings.notice_seconds),
        portfolio_key=settings.portfolio_key,
        watchlist=watchlist,
        idempotency_keys=settings.idempotency_keys,
    )


class MainWindow(QMainWindow):
    def __init__(self, session: StockSession) -> None:
        super().__init__()
        self.setWindowTitle("Stock Trading Demo")
        self.resize(1000, 700)
        self._session = session
        self.page = StockPage(session, self)
        self.setCentralWidget(self.page)

    def closeEvent(self, event):  # type: ignore[override]
        self._session.close()
        return super().closeEvent(event)


def main() -> int:
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    session = build_session(settings)
    w = MainWindow(session)
    w.show()
    QTimer.singleShot(0, session.start)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
