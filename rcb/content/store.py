"""Generated content records keyed by (product id, file type).

Backs the ``/json-files`` endpoints. Each record keeps the product name and,
for generated content, the validation result it passed with.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from typing import Any, Protocol

from pydantic import Field

from rcb.config import Settings
from rcb.schemas.base import CamelModel, utcnow
from rcb.schemas.content import ValidationResult

logger = logging.getLogger(__name__)


class ContentRecord(CamelModel):
    product_id: int
    product_name: str
    type: str
    content: dict[str, Any]
    validation: ValidationResult | None = None
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def filename(self) -> str:
        return f"{self.product_id}-{self.type}.json"

    @property
    def size(self) -> int:
        """UTF-8 size of the pretty-printed JSON document."""
        return len(json.dumps(self.content, indent=2, ensure_ascii=False).encode("utf-8"))

    @property
    def last_modified(self) -> str:
        stamp = self.content.get("generatedAt") or (self.content.get("metadata") or {}).get("generatedAt")
        return stamp or self.updated_at.isoformat()


class ContentStore(Protocol):
    def save(self, record: ContentRecord) -> None: ...
    def get(self, product_id: int, file_type: str) -> ContentRecord | None: ...
    def list(self) -> list[ContentRecord]: ...
    def delete(self, product_id: int, file_type: str) -> bool: ...


class InMemoryContentStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[tuple[int, str], ContentRecord] = {}

    def save(self, record: ContentRecord) -> None:
        with self._lock:
            self._records[(record.product_id, record.type)] = record.model_copy(deep=True)

    def get(self, product_id: int, file_type: str) -> ContentRecord | None:
        with self._lock:
            r = self._records.get((product_id, file_type))
            return r.model_copy(deep=True) if r else None

    def list(self) -> list[ContentRecord]:
        with self._lock:
            records = [r.model_copy(deep=True) for r in self._records.values()]
        return sorted(records, key=lambda r: (r.product_id, r.type))

    def delete(self, product_id: int, file_type: str) -> bool:
        with self._lock:
            return self._records.pop((product_id, file_type), None) is not None


class PostgresContentStore:
    """Generated content and validation results in Postgres."""

    def __init__(self, database_url: str):
        self._url = database_url
        self._conn = self._connect()

    def _connect(self):
        try:
            import psycopg
        except ImportError:
            raise ImportError(
                "psycopg required for Postgres content store. pip install 'psycopg[binary]'"
            )
        conn = psycopg.connect(self._url, autocommit=True)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS rcb_generated_content (
                product_id INT NOT NULL,
                type TEXT NOT NULL,
                product_name TEXT NOT NULL,
                content JSONB NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                PRIMARY KEY (product_id, type)
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS rcb_content_validations (
                product_id INT NOT NULL,
                type TEXT NOT NULL,
                is_valid BOOLEAN NOT NULL,
                score INT NOT NULL,
                result JSONB NOT NULL,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                PRIMARY KEY (product_id, type),
                FOREIGN KEY (product_id, type)
                    REFERENCES rcb_generated_content (product_id, type) ON DELETE CASCADE
            )
        """)
        return conn

    def save(self, record: ContentRecord) -> None:
        with self._conn.transaction():
            self._conn.execute(
                """
                INSERT INTO rcb_generated_content (product_id, type, product_name, content, updated_at)
                VALUES (%s, %s, %s, %s::jsonb, %s)
                ON CONFLICT (product_id, type) DO UPDATE SET
                    product_name = EXCLUDED.product_name,
                    content = EXCLUDED.content,
                    updated_at = EXCLUDED.updated_at
                """,
                (record.product_id, record.type, record.product_name,
                 json.dumps(record.content), record.updated_at),
            )
            self._conn.execute(
                "DELETE FROM rcb_content_validations WHERE product_id = %s AND type = %s",
                (record.product_id, record.type),
            )
            if record.validation is not None:
                self._conn.execute(
                    """
                    INSERT INTO rcb_content_validations (product_id, type, is_valid, score, result)
                    VALUES (%s, %s, %s, %s, %s::jsonb)
                    """,
                    (record.product_id, record.type, record.validation.is_valid,
                     record.validation.score, json.dumps(record.validation.to_wire())),
                )

    def get(self, product_id: int, file_type: str) -> ContentRecord | None:
        row = self._conn.execute(
            _SELECT + " WHERE c.product_id = %s AND c.type = %s",
            (product_id, file_type),
        ).fetchone()
        return _row_to_record(row) if row else None

    def list(self) -> list[ContentRecord]:
        rows = self._conn.execute(_SELECT + " ORDER BY c.product_id, c.type").fetchall()
        return [_row_to_record(r) for r in rows]

    def delete(self, product_id: int, file_type: str) -> bool:
        cur = self._conn.execute(
            "DELETE FROM rcb_generated_content WHERE product_id = %s AND type = %s",
            (product_id, file_type),
        )
        return cur.rowcount > 0


_SELECT = """
    SELECT c.product_id, c.type, c.product_name, c.content, c.updated_at, v.result
    FROM rcb_generated_content c
    LEFT JOIN rcb_content_validations v
        ON v.product_id = c.product_id AND v.type = c.type
"""


def _row_to_record(row) -> ContentRecord:
    def _json(v):
        return v if isinstance(v, (dict, list)) or v is None else json.loads(v)

    validation = _json(row[5])
    return ContentRecord(
        product_id=row[0],
        type=row[1],
        product_name=row[2],
        content=_json(row[3]),
        updated_at=row[4],
        validation=ValidationResult.model_validate(validation) if validation else None,
    )


def build_content_store(settings: Settings) -> ContentStore:
    """Postgres content store if configured, else in-memory."""
    if settings.rcb_database_url:
        try:
            store = PostgresContentStore(settings.rcb_database_url)
            logger.info("Using Postgres content store")
            return store
        except Exception as e:
            logger.warning("Postgres content store failed (%s), falling back to in-memory store", e)
    return InMemoryContentStore()
