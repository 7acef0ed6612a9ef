"""Toast notification widget mirroring the session's notice board.

Provides visual feedback for order results and load failures. Timing is
owned by the NoticeBoard; the widgets only show and fade.
"""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import (
    Qt,
    Signal,
    QTimer,
    QObject,
    QPropertyAnimation,
    QEasingCurve,
)
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QGraphicsOpacityEffect,
    QWidget,
)

from stockdemo.client.notices import Notice, NoticeBoard


def qt_scheduler(parent: QObject):
    """Build a NoticeBoard scheduler backed by single-shot QTimers."""

    def schedule(delay_s: float, callback: Callable[[], None]) -> Callable[[], None]:
        timer = QTimer(parent)
        timer.setSingleShot(True)
        finished = False

        def release() -> None:
            nonlocal finished
            if not finished:
                finished = True
                timer.stop()
                timer.deleteLater()

        def fire() -> None:
            release()
            callback()

        timer.timeout.connect(fire)
        timer.start(int(delay_s * 1000))
        return release

    return schedule


class ToastNotification(QFrame):
    """Single toast notification widget.

    Success (green) or error (red) frame with an icon and message,
    fade-in/fade-out animations and click-to-dismiss.
    """

    dismissed = Signal()
    clicked = Signal()

    COLORS = {
        "success": {"bg": "#d4edda", "border": "#c3e6cb", "text": "#155724", "icon": "✓"},
        "error": {"bg": "#f8d7da", "border": "#f5c6cb", "text": "#721c24", "icon": "✕"},
    }

    def __init__(
        self,
        message: str,
        toast_type: str = "success",
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)

        self._message = message
        self._toast_type = toast_type if toast_type in self.COLORS else "error"
        self._fade_animation: Optional[QPropertyAnimation] = None
        self._opacity_effect: Optional[QGraphicsOpacityEffect] = None

        self._setup_ui()
        self._apply_style()

    def _setup_ui(self) -> None:
        self.setFixedWidth(400)
        self.setMinimumHeight(44)
        self.setCursor(Qt.PointingHandCursor)

        self._opacity_effect = QGraphicsOpacityEffect(self)
        self._opacity_effect.setOpacity(0.0)
        self.setGraphicsEffect(self._opacity_effect)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.setSpacing(10)

        colors = self.COLORS[self._toast_type]
        self._icon_label = QLabel(colors["icon"])
        self._icon_label.setStyleSheet(f"color: {colors['text']}; font-size: 16px;")
        self._icon_label.setFixedWidth(20)
        layout.addWidget(self._icon_label)

        self._message_label = QLabel(self._message)
        self._message_label.setWordWrap(True)
        self._message_label.setStyleSheet(f"color: {colors['text']}; font-weight: bold;")
        layout.addWidget(self._message_label, 1)

    def _apply_style(self) -> None:
        colors = self.COLORS[self._toast_type]
        self.setStyleSheet(f"""
            ToastNotification {{
                background-color: {colors['bg']};
                border: 1px solid {colors['border']};
                border-radius: 6px;
            }}
        """)

    def show_toast(self) -> None:
        self.show()
        self.raise_()
        self._fade(0.0, 1.0, QEasingCurve.OutQuad)

    def dismiss(self) -> None:
        """Fade out, then hide and emit ``dismissed``."""
        start = self._opacity_effect.opacity() if self._opacity_effect else 1.0
        animation = self._fade(start, 0.0, QEasingCurve.InQuad)
        animation.finished.connect(self._on_fade_out_finished)

    def _fade(self, start: float, end: float, curve, duration_ms: int = 200) -> QPropertyAnimation:
        if self._fade_animation:
            self._fade_animation.stop()
        if self._opacity_effect is None:
            self._opacity_effect = QGraphicsOpacityEffect(self)
            self.setGraphicsEffect(self._opacity_effect)

        self._fade_animation = QPropertyAnimation(self._opacity_effect, b"opacity")
        self._fade_animation.setDuration(duration_ms)
        self._fade_animation.setStartValue(start)
        self._fade_animation.setEndValue(end)
        self._fade_animation.setEasingCurve(curve)
        self._fade_animation.start()
        return self._fade_animation

    def _on_fade_out_finished(self) -> None:
        self.hide()
        # Remove graphics effect to prevent QPainter errors
        self.setGraphicsEffect(None)
        self._opacity_effect = None
        self.dismissed.emit()

    def mousePressEvent(self, event) -> None:
        self.clicked.emit()
        event.accept()

    @property
    def toast_type(self) -> str:
        return self._toast_type

    @property
    def message(self) -> str:
        return self._message


class ToastPresenter:
    """Keeps at most one toast on screen, mirroring a NoticeBoard.

    Clicking the toast dismisses the notice early.
    """

    MARGIN_RIGHT = 20
    MARGIN_TOP = 20

    def __init__(self, parent_widget: QWidget, board: NoticeBoard) -> None:
        self._parent = parent_widget
        self._board = board
        self._toast: Optional[ToastNotification] = None
        board.subscribe(self._on_notice_changed)

    @property
    def toast(self) -> Optional[ToastNotification]:
        return self._toast

    def _on_notice_changed(self, notice: Optional[Notice]) -> None:
        self._remove_current()
        if notice is not None:
            self._show(notice)

    def _show(self, notice: Notice) -> None:
        toast = ToastNotification(notice.message, notice.kind.value, parent=self._parent)
        toast.clicked.connect(self._board.dismiss)
        toast.dismissed.connect(toast.deleteLater)
        self._toast = toast
        self._position(toast)
        toast.show_toast()

    def _remove_current(self) -> None:
        if self._toast is not None:
            self._toast.dismiss()
            self._toast = None

    def _position(self, toast: ToastNotification) -> None:
        x = self._parent.rect().width() - toast.width() - self.MARGIN_RIGHT
        toast.move(max(x, 0), self.MARGIN_TOP)
