"""Stock page widget.

Shows the stock list and the portfolio as HTML, plus buy and sell forms.
All state lives in the StockSession; the page copies form inputs into
the session before running a command and re-renders whenever the
session reports a change.
"""

from __future__ import annotations

from PySide6.QtCore import QUrl
from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QGroupBox,
    QTextBrowser,
)

from stockdemo.client.commands import fill_buy_form, fill_sell_form, submit_buy, submit_sell
from stockdemo.client.render import BUY_SCHEME, STYLESHEET, parse_action_link
from stockdemo.client.session import OrderForm, StockSession
from stockdemo.ui.toast_notification import ToastPresenter, qt_scheduler


class OrderFormBox(QGroupBox):
    """Symbol and quantity inputs with a submit button."""

    BUTTON_STYLES = {
        "buy": (
            "QPushButton { background-color: #28A745; color: white; font-weight: bold; padding: 8px; }"
            "QPushButton:hover { background-color: #218838; }"
        ),
        "sell": (
            "QPushButton { background-color: #DC3545; color: white; font-weight: bold; padding: 8px; }"
            "QPushButton:hover { background-color: #C82333; }"
        ),
    }

    def __init__(self, side: str, parent: QWidget | None = None) -> None:
        super().__init__(f"{side.capitalize()} Stock", parent)
        layout = QVBoxLayout(self)

        symbol_layout = QHBoxLayout()
        symbol_layout.addWidget(QLabel("Symbol:"))
        self.symbol_input = QLineEdit()
        self.symbol_input.setPlaceholderText("e.g., AAPL")
        symbol_layout.addWidget(self.symbol_input)
        layout.addLayout(symbol_layout)

        qty_layout = QHBoxLayout()
        qty_layout.addWidget(QLabel("Quantity:"))
        self.quantity_input = QLineEdit()
        self.quantity_input.setPlaceholderText("0")
        qty_layout.addWidget(self.quantity_input)
        layout.addLayout(qty_layout)

        self.submit_button = QPushButton(side.upper())
        self.submit_button.setStyleSheet(self.BUTTON_STYLES[side])
        layout.addWidget(self.submit_button)

    def read_into(self, form: OrderForm) -> None:
        form.symbol = self.symbol_input.text()
        form.quantity = self.quantity_input.text()

    def show_form(self, form: OrderForm) -> None:
        if self.symbol_input.text() != form.symbol:
            self.symbol_input.setText(form.symbol)
        if self.quantity_input.text() != form.quantity:
            self.quantity_input.setText(form.quantity)


class StockPage(QWidget):
    """Main page: stock list, portfolio, order forms and toasts."""

    def __init__(self, session: StockSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._session = session
        session.notices.set_scheduler(qt_scheduler(self))

        self._setup_ui()
        self._toasts = ToastPresenter(self, session.notices)
        session.subscribe(self._on_session_changed)
        self._on_session_changed(session)

    def _setup_ui(self) -> None:
        layout = QHBoxLayout(self)
        layout.setContentsMargins(10, 10, 10, 10)
        layout.setSpacing(10)

        stocks_group = QGroupBox("Stocks")
        stocks_layout = QVBoxLayout(stocks_group)
        self._stock_list = QTextBrowser()
        self._stock_list.setOpenLinks(False)
        self._stock_list.document().setDefaultStyleSheet(STYLESHEET)
        self._stock_list.anchorClicked.connect(self._on_action_link)
        stocks_layout.addWidget(self._stock_list)
        self._refresh_button = QPushButton("Refresh")
        self._refresh_button.clicked.connect(self._on_refresh_clicked)
        stocks_layout.addWidget(self._refresh_button)
        layout.addWidget(stocks_group, 2)

        side_layout = QVBoxLayout()
        self._buy_box = OrderFormBox("buy")
        self._buy_box.submit_button.clicked.connect(self._on_buy_clicked)
        side_layout.addWidget(self._buy_box)

        self._sell_box = OrderFormBox("sell")
        self._sell_box.submit_button.clicked.connect(self._on_sell_clicked)
        side_layout.addWidget(self._sell_box)

        self._portfolio = QTextBrowser()
        self._portfolio.document().setDefaultStyleSheet(STYLESHEET)
        side_layout.addWidget(self._portfolio, 1)
        layout.addLayout(side_layout, 1)

    def _on_session_changed(self, session: StockSession) -> None:
        self._stock_list.setHtml(session.stocks_html)
        self._portfolio.setHtml(session.portfolio_html)
        self._buy_box.show_form(session.buy_form)
        self._sell_box.show_form(session.sell_form)

    def _on_refresh_clicked(self) -> None:
        self._session.load_quotes()

    def _on_buy_clicked(self) -> None:
        self._buy_box.read_into(self._session.buy_form)
        submit_buy(self._session)

    def _on_sell_clicked(self) -> None:
        self._sell_box.read_into(self._session.sell_form)
        submit_sell(self._session)

    def _on_action_link(self, url: QUrl) -> None:
        action = parse_action_link(url.toString())
        if action is None:
            return
        side, symbol = action
        # Keep whatever quantity is typed; only the symbol is filled
        self._buy_box.read_into(self._session.buy_form)
        self._sell_box.read_into(self._session.sell_form)
        if side == BUY_SCHEME:
            fill_buy_form(self._session, symbol)
        else:
            fill_sell_form(self._session, symbol)

    @property
    def session(self) -> StockSession:
        return self._session

    @property
    def buy_box(self) -> OrderFormBox:
        return self._buy_box

    @property
    def sell_box(self) -> OrderFormBox:
        return self._sell_box

    @property
    def toasts(self) -> ToastPresenter:
        return self._toasts
