"""Reset Dialog Coordinator - Confirmation workflow for resetting an item's statistics."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)

RESET_FAILED_MESSAGE = "Failed to reset statistics. Please try again."

ResetCall = Callable[[str, Callable[[], None], Callable[[str], None]], None]


@dataclass(frozen=True)
class ResetDialogState:
    open: bool = False
    item_id: Optional[str] = None
    item_label: Optional[str] = None
    error: Optional[str] = None


class ResetDialogCoordinator(QObject):
    """
    Drives the "reset statistics" confirmation dialog.

    States: closed -> open(item) -> closed on success or cancel, or
    open-with-error when the backend rejects the reset. A failed reset is
    never retried automatically.
    """

    state_changed = Signal(object)  # ResetDialogState
    reset_succeeded = Signal(str)
    reset_failed = Signal(str, str)

    def __init__(
        self,
        label_lookup: Callable[[str], Optional[str]],
        reset_statistics: ResetCall,
    ):
        """
        Args:
            label_lookup: Returns the display label of an item id, None if unknown.
            reset_statistics: Starts the backend reset of an item and reports
                through the success / error callbacks.
        """
        super().__init__()

        if label_lookup is None:
            raise ValueError("label_lookup must not be None")
        if reset_statistics is None:
            raise ValueError("reset_statistics must not be None")

        self._label_lookup = label_lookup
        self._reset_statistics = reset_statistics
        self.state = ResetDialogState()
        self.is_resetting = False

    def open(self, item_id: str) -> None:
        """Open the dialog for an item; unknown items leave it closed."""
        label = self._label_lookup(item_id)
        if label is None:
            return
        self._set_state(ResetDialogState(open=True, item_id=item_id, item_label=label))

    def cancel(self) -> None:
        self._set_state(ResetDialogState())

    def confirm(self) -> None:
        """Ask the backend to reset the target item's statistics."""
        item_id = self.state.item_id
        if not self.state.open or item_id is None:
            return
        if self.is_resetting:
            return

        self.is_resetting = True
        self._reset_statistics(
            item_id,
            lambda: self._handle_reset_success(item_id),
            lambda message: self._handle_reset_error(item_id, message),
        )

    def _handle_reset_success(self, item_id: str) -> None:
        self.is_resetting = False
        if self.state.item_id == item_id:
            self._set_state(ResetDialogState())
        self.reset_succeeded.emit(item_id)

    def _handle_reset_error(self, item_id: str, message: str) -> None:
        self.is_resetting = False
        logger.error("Failed to reset statistics for %s: %s", item_id, message)
        if self.state.open and self.state.item_id == item_id:
            self._set_state(
                ResetDialogState(
                    open=True,
                    item_id=item_id,
                    item_label=self.state.item_label,
                    error=RESET_FAILED_MESSAGE,
                )
            )
        self.reset_failed.emit(item_id, message)

    def _set_state(self, state: ResetDialogState) -> None:
        self.state = state
        self.state_changed.emit(state)
