"""RowStore protocol and SQLite implementation for the shared dealer database."""

from __future__ import annotations

import json
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from typing import (
    Any,
    Protocol,
    runtime_checkable,
)

from camper_mcp.errors import PersistenceError

# Columns per table, excluding the ``id`` and ``created_at`` bookkeeping fields.
TABLE_COLUMNS: dict[str, tuple[str, ...]] = {
    "motorhomes": (
        "title", "description", "price", "year", "brand", "model",
        "mileage", "fuel_type", "length_m", "sleeps", "images",
        "features", "status",
    ),
    "quote_requests": (
        "listing_id", "listing_title", "name", "email", "phone", "message",
    ),
    "contact_messages": (
        "name", "email", "phone", "subject", "message",
    ),
    "purchase_requests": (
        "name", "email", "phone", "brand", "model", "year", "motor",
        "transmission", "mileage", "first_registration", "horsepower",
        "fuel_type", "length_m", "sleeps", "options", "damage",
        "immediately_available", "description", "message",
    ),
    "montage_appointments": (
        "name", "email", "phone", "service_type", "motorhome_info",
        "preferred_date", "preferred_time", "message",
    ),
    "seo_settings": (
        "page_slug", "page_title", "meta_description", "og_title",
        "og_description", "og_image",
    ),
}

# Sequence-valued columns, stored as JSON text.  NULL stays ``None``.
_JSON_COLUMNS = frozenset({"images", "features"})

_SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS motorhomes (
        id          TEXT PRIMARY KEY,
        title       TEXT NOT NULL,
        description TEXT,
        price       REAL CHECK (price IS NULL OR price >= 0),
        year        INTEGER,
        brand       TEXT,
        model       TEXT,
        mileage     INTEGER CHECK (mileage IS NULL OR mileage >= 0),
        fuel_type   TEXT,
        length_m    REAL CHECK (length_m IS NULL OR length_m > 0),
        sleeps      INTEGER CHECK (sleeps IS NULL OR sleeps > 0),
        images      TEXT,
        features    TEXT,
        status      TEXT NOT NULL DEFAULT 'available'
                    CHECK (status IN ('available', 'reserved', 'sold')),
        created_at  TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS idx_motorhomes_created_at
        ON motorhomes(created_at);
    CREATE INDEX IF NOT EXISTS idx_motorhomes_status
        ON motorhomes(status);

    CREATE TABLE IF NOT EXISTS quote_requests (
        id            TEXT PRIMARY KEY,
        listing_id    TEXT REFERENCES motorhomes(id) ON DELETE SET NULL,
        listing_title TEXT,
        name          TEXT NOT NULL,
        email         TEXT NOT NULL,
        phone         TEXT NOT NULL,
        message       TEXT NOT NULL,
        created_at    TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS idx_quote_requests_listing_id
        ON quote_requests(listing_id);

    CREATE TABLE IF NOT EXISTS contact_messages (
        id         TEXT PRIMARY KEY,
        name       TEXT NOT NULL,
        email      TEXT NOT NULL,
        phone      TEXT,
        subject    TEXT,
        message    TEXT NOT NULL,
        created_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS purchase_requests (
        id                    TEXT PRIMARY KEY,
        name                  TEXT NOT NULL,
        email                 TEXT NOT NULL,
        phone                 TEXT,
        brand                 TEXT NOT NULL,
        model                 TEXT NOT NULL,
        year                  INTEGER,
        motor                 TEXT,
        transmission          TEXT,
        mileage               INTEGER,
        first_registration    TEXT,
        horsepower            INTEGER,
        fuel_type             TEXT,
        length_m              REAL,
        sleeps                INTEGER,
        options               TEXT,
        damage                TEXT,
        immediately_available TEXT,
        description           TEXT,
        message               TEXT,
        created_at            TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS montage_appointments (
        id             TEXT PRIMARY KEY,
        name           TEXT NOT NULL,
        email          TEXT NOT NULL,
        phone          TEXT NOT NULL,
        service_type   TEXT NOT NULL,
        motorhome_info TEXT,
        preferred_date TEXT,
        preferred_time TEXT,
        message        TEXT,
        created_at     TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS seo_settings (
        id               TEXT PRIMARY KEY,
        page_slug        TEXT NOT NULL UNIQUE,
        page_title       TEXT,
        meta_description TEXT,
        og_title         TEXT,
        og_description   TEXT,
        og_image         TEXT,
        created_at       TEXT NOT NULL
    );
"""


# ── Protocol ────────────────────────────────────────────────────────


@runtime_checkable
class RowStore(Protocol):
    """Row-oriented persistence addressable by table name and primary key."""

    def insert(
        self, table: str, row: dict[str, Any], *, record_id: str | None = None
    ) -> dict[str, Any]: ...
    def get(self, table: str, record_id: str) -> dict[str, Any] | None: ...
    def select(
        self,
        table: str,
        *,
        where: dict[str, Any] | None = None,
        descending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]: ...
    def update(
        self, table: str, record_id: str, fields: dict[str, Any]
    ) -> dict[str, Any] | None: ...
    def delete(self, table: str, record_id: str) -> bool: ...
    def count(self, table: str) -> int: ...


class SqliteRowStore:
    """SQLite-backed row store with WAL mode and enforced foreign keys."""

    def __init__(self, db_path: str = ":memory:") -> None:
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        with self._lock:
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=NORMAL")
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.executescript(_SCHEMA_SQL)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # ── Helpers ────────────────────────────────────────────────────

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _columns(table: str) -> tuple[str, ...]:
        try:
            return TABLE_COLUMNS[table]
        except KeyError:
            raise ValueError(f"Unknown table '{table}'.") from None

    @classmethod
    def _check_fields(cls, table: str, fields: dict[str, Any]) -> None:
        unknown = set(fields) - set(cls._columns(table))
        if unknown:
            raise ValueError(f"Unknown column(s) for {table}: {', '.join(sorted(unknown))}")

    @staticmethod
    def _encode(column: str, value: Any) -> Any:
        if column in _JSON_COLUMNS and value is not None:
            return json.dumps(list(value))
        return value

    @staticmethod
    def _row_to_dict(row: sqlite3.Row) -> dict[str, Any]:
        d = dict(row)
        for column in _JSON_COLUMNS & d.keys():
            raw = d[column]
            if raw is None:
                continue
            try:
                parsed = json.loads(raw)
            except (TypeError, json.JSONDecodeError):
                parsed = None
            d[column] = parsed if isinstance(parsed, list) else None
        return d

    # ── CRUD ───────────────────────────────────────────────────────

    def insert(
        self, table: str, row: dict[str, Any], *, record_id: str | None = None
    ) -> dict[str, Any]:
        """Insert a row, assigning ``created_at`` and, unless given, ``id``.  Returns the stored row."""
        self._check_fields(table, row)
        record_id = record_id or uuid.uuid4().hex
        columns = ["id", *row.keys(), "created_at"]
        values = [record_id, *(self._encode(c, v) for c, v in row.items()), self._now()]
        sql = (
            f"INSERT INTO {table} ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})"
        )
        try:
            with self._lock:
                self._conn.execute(sql, values)
                self._conn.commit()
        except (sqlite3.Error, OverflowError) as exc:
            raise PersistenceError(f"Insert into {table} failed: {exc}") from exc
        stored = self.get(table, record_id)
        if stored is None:
            raise PersistenceError(f"Row {record_id} vanished from {table} after insert.")
        return stored

    def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        self._columns(table)
        try:
            with self._lock:
                row = self._conn.execute(
                    f"SELECT * FROM {table} WHERE id = ?",
                    (record_id,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Read from {table} failed: {exc}") from exc
        return self._row_to_dict(row) if row else None

    def select(
        self,
        table: str,
        *,
        where: dict[str, Any] | None = None,
        descending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return rows matching all equality filters, ordered by creation time."""
        where = where or {}
        self._check_fields(table, where)
        clauses = [f"{column} = ?" for column in where]
        direction = "DESC" if descending else "ASC"
        sql = f"SELECT * FROM {table}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += f" ORDER BY created_at {direction}, rowid {direction}"
        params: list[Any] = list(where.values())
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        try:
            with self._lock:
                rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Read from {table} failed: {exc}") from exc
        return [self._row_to_dict(r) for r in rows]

    def update(
        self, table: str, record_id: str, fields: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Overwrite the given columns.  Returns the new row, or None if id is unknown."""
        self._check_fields(table, fields)
        if fields:
            assignments = ", ".join(f"{column} = ?" for column in fields)
            values = [self._encode(c, v) for c, v in fields.items()]
            try:
                with self._lock:
                    cursor = self._conn.execute(
                        f"UPDATE {table} SET {assignments} WHERE id = ?",
                        (*values, record_id),
                    )
                    self._conn.commit()
            except (sqlite3.Error, OverflowError) as exc:
                raise PersistenceError(f"Update of {table} failed: {exc}") from exc
            if cursor.rowcount == 0:
                return None
        return self.get(table, record_id)

    def delete(self, table: str, record_id: str) -> bool:
        self._columns(table)
        try:
            with self._lock:
                cursor = self._conn.execute(
                    f"DELETE FROM {table} WHERE id = ?",
                    (record_id,),
                )
                self._conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Delete from {table} failed: {exc}") from exc
        return cursor.rowcount > 0

    def count(self, table: str) -> int:
        self._columns(table)
        try:
            with self._lock:
                row = self._conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Count of {table} failed: {exc}") from exc
        return int(row[0])

    def insert_if_absent(self, table: str, key_column: str, row: dict[str, Any]) -> bool:
        """Insert ``row`` unless a row with the same ``key_column`` value exists."""
        self._check_fields(table, row)
        with self._lock:
            existing = self._conn.execute(
                f"SELECT 1 FROM {table} WHERE {key_column} = ? LIMIT 1",
                (row[key_column],),
            ).fetchone()
        if existing is not None:
            return False
        self.insert(table, row)
        return True
