"""Coordinators - Orchestration layer connecting practice state with the backend."""

from .practice_session import COMMIT_KEYS, STATISTICS_SAVE_ERROR, FocusTarget, PracticeSessionCoordinator
from .reset_dialog import RESET_FAILED_MESSAGE, ResetDialogCoordinator, ResetDialogState
from .statistics_notice import StatisticsErrorNotice

__all__ = [
    "PracticeSessionCoordinator",
    "FocusTarget",
    "COMMIT_KEYS",
    "STATISTICS_SAVE_ERROR",
    "ResetDialogCoordinator",
    "ResetDialogState",
    "RESET_FAILED_MESSAGE",
    "StatisticsErrorNotice",
]
