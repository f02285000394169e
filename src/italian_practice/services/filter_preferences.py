"""Filter preferences - practice list filters remembered between sessions."""

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from italian_practice.core import PracticeItem
from italian_practice.services.ordering import (
    DEFAULT_DISPLAY_CAP,
    DisplayCap,
    SortMode,
    parse_display_cap,
)

logger = logging.getLogger(__name__)


class VerbTypeFilter(Enum):
    """Restricts verb practice to one family of verbs."""

    ALL = "all"
    REGULAR = "regular"
    IRREGULAR = "irregular"
    REFLEXIVE = "reflexive"

    def matches(self, item: PracticeItem) -> bool:
        if self is VerbTypeFilter.REFLEXIVE:
            return item.reflexive
        if self is VerbTypeFilter.REGULAR:
            return item.regular and not item.reflexive
        if self is VerbTypeFilter.IRREGULAR:
            return not item.regular and not item.reflexive
        return True

    @classmethod
    def parse(cls, value: Union[str, "VerbTypeFilter"]) -> "VerbTypeFilter":
        if isinstance(value, VerbTypeFilter):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown verb type filter: {value!r}") from None


@dataclass(frozen=True)
class FilterPreferences:
    exclude_mastered: bool = True
    sort_mode: SortMode = SortMode.NONE
    display_cap: DisplayCap = DEFAULT_DISPLAY_CAP
    verb_type_filter: VerbTypeFilter = VerbTypeFilter.ALL

    def to_dict(self) -> dict:
        return {
            "exclude_mastered": self.exclude_mastered,
            "sort_mode": self.sort_mode.value,
            "display_cap": self.display_cap,
            "verb_type_filter": self.verb_type_filter.value,
        }

    @classmethod
    def from_dict(cls, data: dict, defaults: Optional["FilterPreferences"] = None) -> "FilterPreferences":
        """Create from dictionary; missing keys fall back to `defaults`."""
        base = defaults or cls()
        return replace(
            base,
            exclude_mastered=bool(data.get("exclude_mastered", base.exclude_mastered)),
            sort_mode=SortMode.parse(data.get("sort_mode", base.sort_mode)),
            display_cap=parse_display_cap(data.get("display_cap", base.display_cap)),
            verb_type_filter=VerbTypeFilter.parse(data.get("verb_type_filter", base.verb_type_filter)),
        )


class FilterPreferencesStore:
    """
    JSON file holding filter preferences per practice kind.

    Format:
    {
        "version": 1,
        "kinds": {
            "nouns": {
                "exclude_mastered": true,
                "sort_mode": "none",
                "display_cap": 10,
                "verb_type_filter": "all"
            }
        }
    }
    """

    STORE_VERSION = 1

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self, kind_name: str, defaults: Optional[FilterPreferences] = None) -> FilterPreferences:
        """Return the stored preferences of a kind, or `defaults` when absent or unreadable."""
        defaults = defaults or FilterPreferences()
        data = self._read()
        entry = data.get("kinds", {}).get(kind_name)
        if not isinstance(entry, dict):
            return defaults
        try:
            return FilterPreferences.from_dict(entry, defaults)
        except ValueError as e:
            logger.warning("Ignoring invalid %s preferences in %s: %s", kind_name, self.path, e)
            return defaults

    def save(self, kind_name: str, preferences: FilterPreferences) -> None:
        data = self._read()
        data["version"] = self.STORE_VERSION
        data.setdefault("kinds", {})[kind_name] = preferences.to_dict()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error("Error writing preferences file %s: %s", self.path, e)

    def _read(self) -> dict:
        if not self.path.exists():
            return {"version": self.STORE_VERSION, "kinds": {}}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Error reading preferences file %s: %s", self.path, e)
            return {"version": self.STORE_VERSION, "kinds": {}}
        if not isinstance(data, dict) or not isinstance(data.get("kinds", {}), dict):
            return {"version": self.STORE_VERSION, "kinds": {}}
        return data
