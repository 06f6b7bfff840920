"""SQLite storage for stashed items and their embeddings."""

from __future__ import annotations

import json
import os
import sqlite3
import struct
from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, TypeVar

from vectorpad.stash.model import (
    ZERO_TIME,
    Item,
    ItemType,
    Source,
    Uniqueness,
    _format_time,
    _parse_time,
)
from vectorpad.stash.similarity import SimilarResult, classify_similarity, cosine_similarity

SCHEMA_VERSION = 1
_DIRECTORY_PERMISSIONS = 0o700
_BUSY_TIMEOUT_SECONDS = 5.0

_COLUMNS = (
    "id, title, type, project, raw_text, tags, refs, claim_id, "
    "embedding, source, uniqueness, created_at"
)

_MIGRATE_V1 = (
    """CREATE TABLE IF NOT EXISTS stash (
        id          TEXT PRIMARY KEY,
        title       TEXT NOT NULL DEFAULT '',
        type        TEXT NOT NULL DEFAULT '',
        project     TEXT NOT NULL DEFAULT '',
        raw_text    TEXT NOT NULL,
        tags        TEXT NOT NULL DEFAULT '[]',
        refs        TEXT NOT NULL DEFAULT '[]',
        claim_id    TEXT NOT NULL DEFAULT '',
        embedding   BLOB,
        source      TEXT NOT NULL DEFAULT 'cli',
        uniqueness  TEXT NOT NULL DEFAULT 'high',
        created_at  TEXT NOT NULL,
        updated_at  TEXT NOT NULL
    )""",
    """CREATE TABLE IF NOT EXISTS similarity_cache (
        id_a        TEXT NOT NULL,
        id_b        TEXT NOT NULL,
        score       REAL NOT NULL,
        computed_at TEXT NOT NULL,
        PRIMARY KEY (id_a, id_b)
    )""",
    "CREATE INDEX IF NOT EXISTS idx_stash_claim_id ON stash(claim_id)",
    "CREATE INDEX IF NOT EXISTS idx_stash_project ON stash(project)",
    "CREATE INDEX IF NOT EXISTS idx_stash_type ON stash(type)",
    "DELETE FROM schema_version",
    "INSERT INTO schema_version (version) VALUES (1)",
)

_E = TypeVar("_E", bound=Enum)


class ItemNotFoundError(LookupError):
    """Raised when no stash item has the requested id."""


def encode_embedding(vector: Sequence[float]) -> Optional[bytes]:
    """Pack a vector as little-endian float32 values; None when empty."""
    if not vector:
        return None
    return struct.pack(f"<{len(vector)}f", *vector)


def decode_embedding(blob: Optional[bytes]) -> list[float]:
    """Unpack little-endian float32 values; empty for missing or malformed data."""
    if not blob or len(blob) % 4 != 0:
        return []
    return list(struct.unpack(f"<{len(blob) // 4}f", blob))


def _now_text() -> str:
    return _format_time(datetime.now(timezone.utc).replace(microsecond=0))


def _enum_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _enum_value(enum_cls: type[_E], text: str) -> Optional[_E]:
    if not text:
        return None
    try:
        return enum_cls(text)
    except ValueError:
        return None


def _json_list(text: str) -> list[str]:
    try:
        value = json.loads(text)
    except (TypeError, ValueError):
        return []
    return [str(entry) for entry in value] if isinstance(value, list) else []


def _parse_created(text: str) -> datetime:
    try:
        return _parse_time(text)
    except (TypeError, ValueError):
        return ZERO_TIME


def _row_to_item(row: tuple) -> Item:
    (
        item_id,
        title,
        item_type,
        project,
        text,
        tags_json,
        refs_json,
        claim_id,
        blob,
        source,
        uniqueness,
        created_at,
    ) = row
    return Item(
        id=item_id,
        text=text,
        created=_parse_created(created_at),
        uniqueness=_enum_value(Uniqueness, uniqueness),
        source=_enum_value(Source, source),
        title=title,
        type=_enum_value(ItemType, item_type),
        project=project,
        tags=_json_list(tags_json),
        refs=_json_list(refs_json),
        claim_id=claim_id,
        embedding=decode_embedding(blob),
    )


class StashDB:
    """A SQLite connection holding the stash tables."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = os.fspath(path)
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, mode=_DIRECTORY_PERMISSIONS, exist_ok=True)
        self._conn = sqlite3.connect(
            self.path,
            timeout=_BUSY_TIMEOUT_SECONDS,
            isolation_level=None,
            check_same_thread=False,
        )
        try:
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._migrate()
        except sqlite3.Error:
            self._conn.close()
            raise

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "StashDB":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _migrate(self) -> None:
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)"
        )
        row = self._conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
        version = row[0] if row else 0
        if version < 1:
            for statement in _MIGRATE_V1:
                self._conn.execute(statement)

    def _items(self, where: str = "", args: Sequence[Any] = ()) -> list[Item]:
        query = f"SELECT {_COLUMNS} FROM stash {where} ORDER BY created_at ASC"
        return [_row_to_item(row) for row in self._conn.execute(query, tuple(args))]

    def insert(self, item: Item) -> None:
        """Add an item; raises sqlite3.IntegrityError if the id exists."""
        self._conn.execute(
            f"INSERT INTO stash ({_COLUMNS}, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                item.id,
                item.title,
                _enum_text(item.type),
                item.project,
                item.text,
                json.dumps(list(item.tags)),
                json.dumps(list(item.refs)),
                item.claim_id,
                encode_embedding(item.embedding),
                _enum_text(item.source),
                _enum_text(item.uniqueness),
                _format_time(item.created.replace(microsecond=0)),
                _now_text(),
            ),
        )

    def get(self, item_id: str) -> Item:
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM stash WHERE id = ?", (item_id,)
        ).fetchone()
        if row is None:
            raise ItemNotFoundError(item_id)
        return _row_to_item(row)

    def all(self) -> list[Item]:
        """All items ordered by creation time."""
        return self._items()

    def filter(self, project: str = "", item_type: Any = "", tag: str = "") -> list[Item]:
        """Items matching every non-empty criterion."""
        clauses = ["WHERE 1=1"]
        args: list[Any] = []
        if project:
            clauses.append("AND project = ?")
            args.append(project)
        type_text = _enum_text(item_type)
        if type_text:
            clauses.append("AND type = ?")
            args.append(type_text)
        if tag:
            clauses.append("AND tags LIKE ?")
            args.append(f"%{tag}%")
        return self._items(" ".join(clauses), args)

    def by_claim_id(self, claim_id: str) -> list[Item]:
        return self._items("WHERE claim_id = ?", (claim_id,))

    def delete(self, item_id: str) -> None:
        self._conn.execute("DELETE FROM stash WHERE id = ?", (item_id,))

    def update_embedding(self, item_id: str, embedding: Sequence[float]) -> None:
        self._conn.execute(
            "UPDATE stash SET embedding = ? WHERE id = ?",
            (encode_embedding(embedding), item_id),
        )

    def find_similar(
        self, query_embedding: Sequence[float], threshold: float, limit: int = 0
    ) -> list[SimilarResult]:
        """Items whose cosine similarity to the query reaches ``threshold``, best first."""
        if not query_embedding:
            return []
        results = []
        for item in self.all():
            if not item.embedding:
                continue
            score = cosine_similarity(query_embedding, item.embedding)
            if score >= threshold:
                results.append(
                    SimilarResult(item=item, score=score, level=classify_similarity(score))
                )
        results.sort(key=lambda result: result.score, reverse=True)
        if limit > 0:
            results = results[:limit]
        return results

    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM stash").fetchone()[0]

    def count_with_embeddings(self) -> int:
        return self._conn.execute(
            "SELECT COUNT(*) FROM stash WHERE embedding IS NOT NULL AND length(embedding) > 0"
        ).fetchone()[0]

    def items_without_embeddings(self) -> list[Item]:
        return self._items("WHERE embedding IS NULL OR length(embedding) = 0")

    def cache_similarity(self, id_a: str, id_b: str, score: float) -> None:
        """Store a pre-computed similarity score for a pair of items."""
        self._conn.execute(
            "INSERT OR REPLACE INTO similarity_cache (id_a, id_b, score, computed_at) "
            "VALUES (?, ?, ?, ?)",
            (id_a, id_b, score, _now_text()),
        )