"""Domain layer - Pure entities describing practice items and their statistics."""

from .practice_item import (
    AnswerField,
    ConjugationKey,
    PracticeItem,
    Statistics,
    StatisticsKey,
    Verdict,
    statistics_item_id,
)
from .vocabulary_entities import AdjectiveEntry, NounEntry, VerbEntry
from .practice_kinds import (
    ADJECTIVES,
    CONJUGATIONS,
    NOUNS,
    PRACTICE_KINDS,
    VERBS,
    Grading,
    PracticeKind,
    build_adjective_item,
    build_conjugation_item,
    build_noun_item,
    build_verb_item,
    get_practice_kind,
)

__all__ = [
    "AnswerField",
    "ConjugationKey",
    "PracticeItem",
    "Statistics",
    "StatisticsKey",
    "Verdict",
    "statistics_item_id",
    "NounEntry",
    "AdjectiveEntry",
    "VerbEntry",
    "Grading",
    "PracticeKind",
    "NOUNS",
    "ADJECTIVES",
    "VERBS",
    "CONJUGATIONS",
    "PRACTICE_KINDS",
    "build_noun_item",
    "build_adjective_item",
    "build_verb_item",
    "build_conjugation_item",
    "get_practice_kind",
]
