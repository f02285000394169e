"""Shared fixtures: a Qt core application and deterministic timing doubles."""

import pytest
from PySide6.QtCore import QCoreApplication


def ensure_qt_app():
    if QCoreApplication.instance() is None:
        QCoreApplication([])


@pytest.fixture(autouse=True)
def qt_app():
    ensure_qt_app()
    return QCoreApplication.instance()


class ImmediateThreadPool:
    """Runs workers inline so background calls complete before start() returns."""

    def __init__(self):
        self.started = []

    def start(self, runnable):
        self.started.append(runnable)
        runnable.run()


class ManualThreadPool:
    """Holds workers until the test runs them, to observe in-flight states."""

    def __init__(self):
        self.queued = []

    def start(self, runnable):
        self.queued.append(runnable)

    def run_next(self):
        self.queued.pop(0).run()

    def run_all(self):
        while self.queued:
            self.run_next()


class FakeClock:
    """Monotonic clock the test advances by hand, in milliseconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


class DeferredCalls:
    """Collects zero-delay callbacks; flush() plays them like the event loop would."""

    def __init__(self):
        self.pending = []

    def __call__(self, callback):
        self.pending.append(callback)

    def flush(self):
        pending, self.pending = self.pending, []
        for callback in pending:
            callback()


@pytest.fixture
def thread_pool():
    return ImmediateThreadPool()


@pytest.fixture
def manual_pool():
    return ManualThreadPool()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def deferred():
    return DeferredCalls()
