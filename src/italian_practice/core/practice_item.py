"""Practice entities - vocabulary items, answer fields, verdicts and counters."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Tuple, Union


class Verdict(Enum):
    """Outcome of validating a single answer field."""

    UNVALIDATED = "unvalidated"
    CORRECT = "correct"
    INCORRECT = "incorrect"

    @property
    def is_graded(self) -> bool:
        return self is not Verdict.UNVALIDATED


@dataclass(frozen=True)
class AnswerField:
    """One gradable sub-answer of an item (e.g. a noun's plural form)."""

    key: str
    expected: str


@dataclass(frozen=True)
class PracticeItem:
    """A vocabulary entry eligible for practice.

    Attributes:
        id: Stable identifier shared with the data service.
        prompt: Native-language translation shown to the user.
        fields: Ordered answer fields the user has to fill in.
        label: Text used to name the item in the reset dialog.
        regular: Verb metadata used by the verb-type filter.
        reflexive: Verb metadata used by the verb-type filter.
    """

    id: str
    prompt: str
    fields: Tuple[AnswerField, ...]
    label: str = ""
    regular: bool = True
    reflexive: bool = False

    @property
    def field_keys(self) -> Tuple[str, ...]:
        return tuple(f.key for f in self.fields)

    @property
    def display_label(self) -> str:
        return self.label or self.prompt

    def field(self, key: str) -> Optional[AnswerField]:
        """Return the answer field with the given key, if any."""
        for answer_field in self.fields:
            if answer_field.key == key:
                return answer_field
        return None

    def next_field_key(self, key: str) -> Optional[str]:
        """Return the key following `key`, or None on the last field."""
        keys = self.field_keys
        if key not in keys:
            return None
        index = keys.index(key)
        if index + 1 < len(keys):
            return keys[index + 1]
        return None


@dataclass(frozen=True)
class Statistics:
    """Correct/wrong attempt counters for one statistics key."""

    correct: int = 0
    wrong: int = 0

    @property
    def net_score(self) -> int:
        return self.correct - self.wrong

    @property
    def performance(self) -> int:
        """Higher means worse: wrong attempts minus correct ones."""
        return self.wrong - self.correct

    def bumped(self, correct: bool) -> "Statistics":
        if correct:
            return Statistics(self.correct + 1, self.wrong)
        return Statistics(self.correct, self.wrong + 1)


class ConjugationKey(NamedTuple):
    """Statistics key for one conjugated form of a verb."""

    verb_id: str
    mood: str
    tense: str
    person: str

    def __str__(self) -> str:
        return f"{self.verb_id}:{self.mood}:{self.tense}:{self.person}"

    @classmethod
    def parse(cls, raw: str) -> "ConjugationKey":
        parts = raw.split(":")
        if len(parts) != 4:
            raise ValueError(f"Malformed conjugation key: {raw!r}")
        return cls(*parts)


StatisticsKey = Union[str, ConjugationKey]


def statistics_item_id(key: StatisticsKey) -> str:
    """Return the top-level item id a statistics key belongs to."""
    if isinstance(key, ConjugationKey):
        return key.verb_id
    return key


def conjugation_field_key(mood: str, tense: str, person: str) -> str:
    return f"{mood}:{tense}:{person}"


def split_conjugation_field_key(field_key: str) -> Tuple[str, str, str]:
    mood, tense, person = field_key.split(":", 2)
    return mood, tense, person
