"""Tests for StatisticsErrorNotice."""

from unittest.mock import MagicMock

from PySide6.QtTest import QTest

from italian_practice.coordinators import StatisticsErrorNotice


def test_starts_hidden():
    notice = StatisticsErrorNotice()
    assert not notice.is_visible
    assert notice.message is None


def test_show_sets_message_and_timestamp():
    notice = StatisticsErrorNotice()
    changed = MagicMock()
    notice.changed.connect(changed)

    notice.show("Failed to save statistics.")

    assert notice.is_visible
    assert notice.timestamp is not None
    changed.assert_called_once_with("Failed to save statistics.")


def test_clears_after_delay():
    notice = StatisticsErrorNotice(auto_clear_ms=20)
    notice.show("Failed to save statistics.")

    QTest.qWait(200)

    assert not notice.is_visible
    assert notice.timestamp is None


def test_new_message_restarts_the_delay():
    notice = StatisticsErrorNotice(auto_clear_ms=400)
    notice.show("first")
    QTest.qWait(250)
    notice.show("second")
    QTest.qWait(250)

    assert notice.message == "second"

    QTest.qWait(500)
    assert not notice.is_visible


def test_clear_when_hidden_emits_nothing():
    notice = StatisticsErrorNotice()
    changed = MagicMock()
    notice.changed.connect(changed)

    notice.clear()

    changed.assert_not_called()
