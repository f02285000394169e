"""Async workers for non-blocking backend calls using Qt threading."""

import logging
from typing import Any, Callable, Optional, Set

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

logger = logging.getLogger(__name__)


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal()
    error = Signal(str)
    result = Signal(object)


class ServiceCallWorker(QRunnable):
    """
    Worker that runs one data-service call in a background thread.

    Uses Qt's thread pool for efficient thread management.
    Emits signals when the call completes or fails.
    """

    def __init__(self, call: Callable[[], Any], description: str = "service call"):
        super().__init__()
        self.call = call
        self.description = description
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the call in the background thread."""
        try:
            result = self.call()
            self.signals.result.emit(result)
        except Exception as e:
            # Any backend failure is reported, never raised into the pool.
            logger.warning("%s failed: %s", self.description, e)
            self.signals.error.emit(str(e) or e.__class__.__name__)
        finally:
            self.signals.finished.emit()


class _CallRelay(QObject):
    """Helper living in the caller's thread that hands worker results to plain callbacks."""

    def __init__(
        self,
        signals: WorkerSignals,
        on_success: Optional[Callable[[Any], None]],
        on_error: Optional[Callable[[str], None]],
        owner: "BackgroundCalls",
    ):
        super().__init__()
        self._signals = signals
        self._on_success = on_success
        self._on_error = on_error
        self._owner = owner

    @Slot(object)
    def on_result(self, result):
        if self._on_success is not None:
            self._on_success(result)

    @Slot(str)
    def on_error(self, message: str):
        if self._on_error is not None:
            self._on_error(message)

    @Slot()
    def on_finished(self):
        self._owner._release(self)


class BackgroundCalls:
    """
    Submits callables to a thread pool and delivers their outcome back on the
    submitting thread.

    Relays are kept referenced until their worker finishes so they don't get
    garbage collected while the call runs.
    """

    def __init__(self, thread_pool: Optional[QThreadPool] = None):
        self.thread_pool = thread_pool if thread_pool is not None else QThreadPool.globalInstance()
        self._pending: Set[_CallRelay] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def submit(
        self,
        call: Callable[[], Any],
        on_success: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
        description: str = "service call",
    ) -> None:
        worker = ServiceCallWorker(call, description)
        relay = _CallRelay(worker.signals, on_success, on_error, self)
        self._pending.add(relay)

        worker.signals.result.connect(relay.on_result)
        worker.signals.error.connect(relay.on_error)
        worker.signals.finished.connect(relay.on_finished)

        self.thread_pool.start(worker)

    def _release(self, relay: _CallRelay) -> None:
        self._pending.discard(relay)
