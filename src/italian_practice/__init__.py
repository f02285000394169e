"""
Italian Practice - A vocabulary practice engine for Italian learners.

This package provides the session logic behind practice lists for:
- Nouns (singular and plural)
- Adjectives (four inflected forms)
- Verbs (translation and conjugation tables)
- Per-item statistics with mastery tracking
"""

__version__ = "0.1.0"

# Make key components available at package level
from italian_practice.core import PracticeItem, Statistics, Verdict, get_practice_kind
from italian_practice.coordinators import PracticeSessionCoordinator

__all__ = [
    "PracticeItem",
    "Statistics",
    "Verdict",
    "get_practice_kind",
    "PracticeSessionCoordinator",
]
