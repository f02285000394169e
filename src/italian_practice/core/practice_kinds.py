"""Practice kinds - the parameters that distinguish noun, adjective, verb and conjugation practice."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from .practice_item import (
    AnswerField,
    ConjugationKey,
    PracticeItem,
    StatisticsKey,
    conjugation_field_key,
    split_conjugation_field_key,
)

# A conjugation table maps mood -> tense -> either a single form or person -> form.
ConjugationTable = Mapping[str, Mapping[str, Union[str, Mapping[str, str]]]]

SIMPLE_FORM_PERSON = "form"
DEFAULT_ENABLED_TENSES = ("Indicativo.Presente",)

NOUN_FIELDS = ("singular", "plural")
ADJECTIVE_FIELDS = (
    "masculineSingular",
    "masculinePlural",
    "feminineSingular",
    "femininePlural",
)
VERB_FIELDS = ("italian",)


class Grading(Enum):
    """How answers of an item are graded and counted in statistics."""

    # The whole item is graded at once; one statistics write per item.
    ITEM = "item"
    # Every field is graded on its own; one statistics write per field.
    FIELD = "field"


@dataclass(frozen=True)
class PracticeKind:
    """Parameters for one practice flavour.

    Attributes:
        name: Identifier also used as the persistence namespace.
        grading: Item-level (AND rule) or field-level grading.
        debounce_ms: Window during which a repeated validation is dropped.
        statistics_key: Builds the statistics key for (item, field).
    """

    name: str
    grading: Grading
    debounce_ms: int
    statistics_key: Callable[[PracticeItem, str], StatisticsKey]

    @property
    def locks_graded_fields(self) -> bool:
        """Field-graded kinds never re-validate a field that holds a verdict."""
        return self.grading is Grading.FIELD

    def debounce_key(self, item_id: str, field: str) -> str:
        if self.grading is Grading.ITEM:
            return item_id
        return f"{item_id}:{field}"


def _item_statistics_key(item: PracticeItem, field: str) -> StatisticsKey:
    return item.id


def _conjugation_statistics_key(item: PracticeItem, field: str) -> StatisticsKey:
    mood, tense, person = split_conjugation_field_key(field)
    return ConjugationKey(item.id, mood, tense, person)


NOUNS = PracticeKind("nouns", Grading.ITEM, 100, _item_statistics_key)
ADJECTIVES = PracticeKind("adjectives", Grading.ITEM, 100, _item_statistics_key)
VERBS = PracticeKind("verbs", Grading.ITEM, 100, _item_statistics_key)
CONJUGATIONS = PracticeKind("conjugations", Grading.FIELD, 500, _conjugation_statistics_key)

PRACTICE_KINDS: Dict[str, PracticeKind] = {
    kind.name: kind for kind in (NOUNS, ADJECTIVES, VERBS, CONJUGATIONS)
}


def get_practice_kind(name: str) -> PracticeKind:
    try:
        return PRACTICE_KINDS[name]
    except KeyError:
        raise ValueError(f"Unknown practice kind: {name}") from None


def build_noun_item(
    item_id: str, italian: str, italian_plural: str, translation: str
) -> PracticeItem:
    return PracticeItem(
        id=item_id,
        prompt=translation,
        label=translation,
        fields=(
            AnswerField("singular", italian),
            AnswerField("plural", italian_plural),
        ),
    )


def build_adjective_item(
    item_id: str,
    translation: str,
    masculine_singular: str,
    masculine_plural: str,
    feminine_singular: str,
    feminine_plural: str,
) -> PracticeItem:
    return PracticeItem(
        id=item_id,
        prompt=translation,
        label=translation,
        fields=(
            AnswerField("masculineSingular", masculine_singular or ""),
            AnswerField("masculinePlural", masculine_plural or ""),
            AnswerField("feminineSingular", feminine_singular or ""),
            AnswerField("femininePlural", feminine_plural or ""),
        ),
    )


def build_verb_item(
    item_id: str,
    italian: str,
    translation: str,
    regular: bool = True,
    reflexive: bool = False,
) -> PracticeItem:
    return PracticeItem(
        id=item_id,
        prompt=translation,
        label=translation,
        fields=(AnswerField("italian", italian),),
        regular=regular,
        reflexive=reflexive,
    )


def conjugation_fields(
    conjugation: ConjugationTable, enabled_tenses: Iterable[str]
) -> List[AnswerField]:
    """Expand a conjugation table into answer fields for the enabled tenses.

    Tenses are given as "Mood.Tense"; unknown or malformed entries are skipped.
    """
    fields: List[AnswerField] = []
    for tense_key in enabled_tenses:
        mood, _, tense = tense_key.partition(".")
        if not mood or not tense:
            continue
        tense_data = (conjugation.get(mood) or {}).get(tense)
        if not tense_data:
            continue
        if isinstance(tense_data, str):
            fields.append(
                AnswerField(conjugation_field_key(mood, tense, SIMPLE_FORM_PERSON), tense_data)
            )
            continue
        for person, form in tense_data.items():
            fields.append(AnswerField(conjugation_field_key(mood, tense, person), form))
    return fields


def build_conjugation_item(
    item_id: str,
    italian: str,
    translation: str,
    conjugation: ConjugationTable,
    enabled_tenses: Optional[Iterable[str]] = None,
    regular: bool = True,
    reflexive: bool = False,
) -> PracticeItem:
    tenses = list(enabled_tenses) if enabled_tenses is not None else list(DEFAULT_ENABLED_TENSES)
    return PracticeItem(
        id=item_id,
        prompt=translation,
        label=italian,
        fields=tuple(conjugation_fields(conjugation, tenses)),
        regular=regular,
        reflexive=reflexive,
    )
