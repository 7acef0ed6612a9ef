# UI components module
"""Desktop page for the stock demo."""

# Imported lazily so the handlers and client can be used without Qt:
#   from stockdemo.ui.stock_page import StockPage
#   from stockdemo.ui.toast_notification import ToastNotification, ToastPresenter

__all__ = [
    "StockPage",
    "OrderFormBox",
    "ToastNotification",
    "ToastPresenter",
    "qt_scheduler",
]


def __getattr__(name: str):
    """Lazy import to keep Qt out of non-UI imports."""
    if name in ("StockPage", "OrderFormBox"):
        from stockdemo.ui.stock_page import StockPage, OrderFormBox
        return {"StockPage": StockPage, "OrderFormBox": OrderFormBox}[name]
    elif name in ("ToastNotification", "ToastPresenter", "qt_scheduler"):
        from stockdemo.ui.toast_notification import ToastNotification, ToastPresenter, qt_scheduler
        return {
            "ToastNotification": ToastNotification,
            "ToastPresenter": ToastPresenter,
            "qt_scheduler": qt_scheduler,
        }[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
