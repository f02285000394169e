"""Statistics error notice - a non-blocking warning that clears itself."""

from datetime import datetime
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot


class StatisticsErrorNotice(QObject):
    """Holds the current statistics warning and clears it after a fixed delay.

    Showing a new warning restarts the delay.
    """

    AUTO_CLEAR_MS = 5000

    changed = Signal(object)  # message or None

    def __init__(self, auto_clear_ms: int = AUTO_CLEAR_MS, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.message: Optional[str] = None
        self.timestamp: Optional[datetime] = None

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(auto_clear_ms)
        self._timer.timeout.connect(self.clear)

    @property
    def is_visible(self) -> bool:
        return self.message is not None

    @property
    def timer(self) -> QTimer:
        return self._timer

    def show(self, message: str) -> None:
        self.message = message
        self.timestamp = datetime.now()
        self._timer.start()
        self.changed.emit(message)

    @Slot()
    def clear(self) -> None:
        self._timer.stop()
        if self.message is None:
            return
        self.message = None
        self.timestamp = None
        self.changed.emit(None)
