"""SQLite-backed vocabulary and practice statistics persistence."""

import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Dict, List

from italian_practice.core import (
    AdjectiveEntry,
    ConjugationKey,
    NounEntry,
    Statistics,
    VerbEntry,
)

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns SQLite connection, schema, and vocabulary/statistics persistence helpers.

    The connection is shared with background workers, so every statement runs
    under a lock.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)
        self.connection = sqlite3.connect(self.db_path, check_same_thread=False)
        self.connection.row_factory = sqlite3.Row
        self.connection.execute("PRAGMA foreign_keys = ON;")
        self._lock = threading.RLock()

    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        with self._lock:
            cur = self.connection.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS nouns (
                    id TEXT PRIMARY KEY,
                    italian TEXT NOT NULL,
                    italian_plural TEXT NOT NULL,
                    translation TEXT NOT NULL,
                    translation_plural TEXT NOT NULL DEFAULT ''
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS adjectives (
                    id TEXT PRIMARY KEY,
                    italian TEXT NOT NULL,
                    translation TEXT NOT NULL,
                    masculine_singular TEXT NOT NULL DEFAULT '',
                    masculine_plural TEXT NOT NULL DEFAULT '',
                    feminine_singular TEXT NOT NULL DEFAULT '',
                    feminine_plural TEXT NOT NULL DEFAULT ''
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS verbs (
                    id TEXT PRIMARY KEY,
                    italian TEXT NOT NULL,
                    translation TEXT NOT NULL,
                    regular INTEGER NOT NULL DEFAULT 1,
                    reflexive INTEGER NOT NULL DEFAULT 0,
                    conjugation TEXT NOT NULL DEFAULT '{}'
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS item_statistics (
                    kind TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    correct_attempts INTEGER NOT NULL DEFAULT 0,
                    wrong_attempts INTEGER NOT NULL DEFAULT 0,
                    last_practiced TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY(kind, item_id)
                );
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS conjugation_statistics (
                    verb_id TEXT NOT NULL,
                    mood TEXT NOT NULL,
                    tense TEXT NOT NULL,
                    person TEXT NOT NULL,
                    correct_attempts INTEGER NOT NULL DEFAULT 0,
                    wrong_attempts INTEGER NOT NULL DEFAULT 0,
                    last_practiced TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY(verb_id, mood, tense, person)
                );
                """
            )
            cur.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_conjugation_statistics_verb
                ON conjugation_statistics(verb_id);
                """
            )
            self.connection.commit()

    # ----- vocabulary -----

    def upsert_noun(self, noun: NounEntry) -> None:
        with self._lock:
            self.connection.execute(
                """
                INSERT INTO nouns (id, italian, italian_plural, translation, translation_plural)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    italian = excluded.italian,
                    italian_plural = excluded.italian_plural,
                    translation = excluded.translation,
                    translation_plural = excluded.translation_plural
                """,
                (noun.id, noun.italian, noun.italian_plural, noun.translation, noun.translation_plural),
            )
            self.connection.commit()

    def upsert_adjective(self, adjective: AdjectiveEntry) -> None:
        with self._lock:
            self.connection.execute(
                """
                INSERT INTO adjectives (
                    id, italian, translation,
                    masculine_singular, masculine_plural, feminine_singular, feminine_plural
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    italian = excluded.italian,
                    translation = excluded.translation,
                    masculine_singular = excluded.masculine_singular,
                    masculine_plural = excluded.masculine_plural,
                    feminine_singular = excluded.feminine_singular,
                    feminine_plural = excluded.feminine_plural
                """,
                (
                    adjective.id,
                    adjective.italian,
                    adjective.translation,
                    adjective.masculine_singular,
                    adjective.masculine_plural,
                    adjective.feminine_singular,
                    adjective.feminine_plural,
                ),
            )
            self.connection.commit()

    def upsert_verb(self, verb: VerbEntry) -> None:
        conjugation_json = json.dumps(verb.conjugation or {}, ensure_ascii=False)
        with self._lock:
            self.connection.execute(
                """
                INSERT INTO verbs (id, italian, translation, regular, reflexive, conjugation)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    italian = excluded.italian,
                    translation = excluded.translation,
                    regular = excluded.regular,
                    reflexive = excluded.reflexive,
                    conjugation = excluded.conjugation
                """,
                (
                    verb.id,
                    verb.italian,
                    verb.translation,
                    int(verb.regular),
                    int(verb.reflexive),
                    conjugation_json,
                ),
            )
            self.connection.commit()

    def list_nouns(self) -> List[NounEntry]:
        rows = self._fetchall("SELECT * FROM nouns ORDER BY rowid ASC")
        return [
            NounEntry(
                id=row["id"],
                italian=row["italian"],
                italian_plural=row["italian_plural"],
                translation=row["translation"],
                translation_plural=row["translation_plural"],
            )
            for row in rows
        ]

    def list_adjectives(self) -> List[AdjectiveEntry]:
        rows = self._fetchall("SELECT * FROM adjectives ORDER BY rowid ASC")
        return [
            AdjectiveEntry(
                id=row["id"],
                italian=row["italian"],
                translation=row["translation"],
                masculine_singular=row["masculine_singular"],
                masculine_plural=row["masculine_plural"],
                feminine_singular=row["feminine_singular"],
                feminine_plural=row["feminine_plural"],
            )
            for row in rows
        ]

    def list_verbs(self) -> List[VerbEntry]:
        rows = self._fetchall("SELECT * FROM verbs ORDER BY rowid ASC")
        return [self._row_to_verb(row) for row in rows]

    # ----- statistics -----

    def increment_item_statistic(self, kind: str, item_id: str, correct: bool) -> Statistics:
        with self._lock:
            self.connection.execute(
                """
                INSERT INTO item_statistics (kind, item_id, correct_attempts, wrong_attempts)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(kind, item_id) DO UPDATE SET
                    correct_attempts = correct_attempts + excluded.correct_attempts,
                    wrong_attempts = wrong_attempts + excluded.wrong_attempts,
                    last_practiced = CURRENT_TIMESTAMP
                """,
                (kind, item_id, int(correct), int(not correct)),
            )
            self.connection.commit()
            row = self.connection.execute(
                """
                SELECT correct_attempts, wrong_attempts FROM item_statistics
                WHERE kind = ? AND item_id = ?
                """,
                (kind, item_id),
            ).fetchone()
        return Statistics(row["correct_attempts"], row["wrong_attempts"])

    def list_item_statistics(self, kind: str) -> Dict[str, Statistics]:
        rows = self._fetchall(
            """
            SELECT item_id, correct_attempts, wrong_attempts
            FROM item_statistics WHERE kind = ?
            """,
            (kind,),
        )
        return {
            row["item_id"]: Statistics(row["correct_attempts"], row["wrong_attempts"])
            for row in rows
        }

    def reset_item_statistics(self, kind: str, item_id: str) -> None:
        with self._lock:
            self.connection.execute(
                "DELETE FROM item_statistics WHERE kind = ? AND item_id = ?",
                (kind, item_id),
            )
            self.connection.commit()

    def increment_conjugation_statistic(self, key: ConjugationKey, correct: bool) -> Statistics:
        with self._lock:
            self.connection.execute(
                """
                INSERT INTO conjugation_statistics (
                    verb_id, mood, tense, person, correct_attempts, wrong_attempts
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(verb_id, mood, tense, person) DO UPDATE SET
                    correct_attempts = correct_attempts + excluded.correct_attempts,
                    wrong_attempts = wrong_attempts + excluded.wrong_attempts,
                    last_practiced = CURRENT_TIMESTAMP
                """,
                (key.verb_id, key.mood, key.tense, key.person, int(correct), int(not correct)),
            )
            self.connection.commit()
            row = self.connection.execute(
                """
                SELECT correct_attempts, wrong_attempts FROM conjugation_statistics
                WHERE verb_id = ? AND mood = ? AND tense = ? AND person = ?
                """,
                tuple(key),
            ).fetchone()
        return Statistics(row["correct_attempts"], row["wrong_attempts"])

    def list_conjugation_statistics(self) -> Dict[ConjugationKey, Statistics]:
        rows = self._fetchall(
            """
            SELECT verb_id, mood, tense, person, correct_attempts, wrong_attempts
            FROM conjugation_statistics
            """
        )
        return {
            ConjugationKey(row["verb_id"], row["mood"], row["tense"], row["person"]): Statistics(
                row["correct_attempts"], row["wrong_attempts"]
            )
            for row in rows
        }

    def reset_conjugation_statistics(self, verb_id: str) -> None:
        with self._lock:
            self.connection.execute(
                "DELETE FROM conjugation_statistics WHERE verb_id = ?",
                (verb_id,),
            )
            self.connection.commit()

    def close(self) -> None:
        with self._lock:
            self.connection.close()

    def _fetchall(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        with self._lock:
            return self.connection.execute(sql, params).fetchall()

    @staticmethod
    def _row_to_verb(row: sqlite3.Row) -> VerbEntry:
        raw = row["conjugation"] or "{}"
        try:
            conjugation = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring malformed conjugation for verb %s: %s", row["id"], e)
            conjugation = {}
        return VerbEntry(
            id=row["id"],
            italian=row["italian"],
            translation=row["translation"],
            regular=bool(row["regular"]),
            reflexive=bool(row["reflexive"]),
            conjugation=conjugation,
        )
