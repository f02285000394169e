"""Vocabulary entities as stored by the persistence layer."""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class NounEntry:
    id: str
    italian: str
    italian_plural: str
    translation: str
    translation_plural: str = ""


@dataclass
class AdjectiveEntry:
    id: str
    italian: str
    translation: str
    masculine_singular: str
    masculine_plural: str
    feminine_singular: str
    feminine_plural: str


@dataclass
class VerbEntry:
    id: str
    italian: str
    translation: str
    regular: bool = True
    reflexive: bool = False
    # mood -> tense -> form or {person: form}; empty when no conjugation was imported.
    conjugation: Dict[str, Any] = field(default_factory=dict)
