"""Key-value persistence for the partner book, map camera and recent searches.

Each key holds one JSON document. The file backend writes one ``<key>.json``
under ``DATA_DIR``; the Postgres backend keeps the same documents in a single
``partnerhub_kv`` table.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from psycopg2.extras import Json
from pydantic import ValidationError

from partnerhub import settings
from partnerhub.database import get_conn
from schemas.company import Company

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class JsonFileStore:
    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory or settings.DATA_DIR)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.warning("store key=%s is not valid JSON, ignoring: %s", key, exc)
            return None

    def set(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Write-then-rename so a crash never leaves half a document behind
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(value, fh, ensure_ascii=False)
            os.replace(tmp, self._path(key))
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class PostgresStore:
    _DDL = """
        CREATE TABLE IF NOT EXISTS partnerhub_kv (
            key TEXT PRIMARY KEY,
            value JSONB NOT NULL,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """

    def __init__(self, ensure_schema: bool = True):
        if ensure_schema:
            with get_conn() as conn, conn.cursor() as cur:
                cur.execute(self._DDL)

    def get(self, key: str) -> Optional[Any]:
        with get_conn() as conn, conn.cursor() as cur:
            cur.execute("SELECT value FROM partnerhub_kv WHERE key = %s", (key,))
            row = cur.fetchone()
        return row[0] if row else None

    def set(self, key: str, value: Any) -> None:
        with get_conn() as conn, conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO partnerhub_kv (key, value, updated_at)
                VALUES (%s, %s, NOW())
                ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value, updated_at = NOW()
                """,
                (key, Json(value)),
            )

    def delete(self, key: str) -> None:
        with get_conn() as conn, conn.cursor() as cur:
            cur.execute("DELETE FROM partnerhub_kv WHERE key = %s", (key,))


def build_store(backend: Optional[str] = None) -> KeyValueStore:
    backend = (backend or settings.STORE_BACKEND).lower()
    if backend == "postgres":
        return PostgresStore()
    if backend != "file":
        logger.warning("unknown store backend %r, using file store", backend)
    return JsonFileStore()


class CompanyRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self) -> Optional[List[Company]]:
        """Stored collection, or None when nothing was ever saved.

        Entries that no longer validate are skipped with a warning so one
        bad record does not hide the rest of the book.
        """
        raw = self.store.get(settings.COMPANIES_KEY)
        if raw is None:
            return None
        if not isinstance(raw, list):
            logger.warning("stored company collection is not a list; treating as empty")
            return []
        out: List[Company] = []
        for item in raw:
            try:
                out.append(Company.model_validate(item))
            except ValidationError as exc:
                logger.warning("skipping invalid stored company id=%s: %s", (item or {}).get("id") if isinstance(item, dict) else None, exc)
        return out

    def save_all(self, companies: List[Company]) -> None:
        self.store.set(settings.COMPANIES_KEY, [c.model_dump(mode="json") for c in companies])


class MapViewStore:
    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def default() -> Dict[str, float]:
        lat, lng = settings.DEFAULT_MAP_CENTER
        return {"lat": lat, "lng": lng, "zoom": settings.DEFAULT_MAP_ZOOM}

    def get(self) -> Dict[str, float]:
        raw = self.store.get(settings.MAP_VIEW_KEY)
        if not isinstance(raw, dict) or not {"lat", "lng", "zoom"} <= set(raw):
            return self.default()
        return {"lat": float(raw["lat"]), "lng": float(raw["lng"]), "zoom": raw["zoom"]}

    def save(self, lat: float, lng: float, zoom: float) -> Dict[str, float]:
        view = {"lat": lat, "lng": lng, "zoom": zoom}
        self.store.set(settings.MAP_VIEW_KEY, view)
        return view

    def reset(self) -> Dict[str, float]:
        self.store.delete(settings.MAP_VIEW_KEY)
        return self.default()


class RecentSearches:
    """Most-recent-first list of distinct query texts, capped at RECENT_QUERIES_LIMIT."""

    def __init__(self, store: KeyValueStore, limit: int = settings.RECENT_QUERIES_LIMIT):
        self.store = store
        self.limit = limit

    def list(self) -> List[str]:
        raw = self.store.get(settings.RECENT_QUERIES_KEY)
        if not isinstance(raw, list):
            return []
        return [str(q) for q in raw][: self.limit]

    def record(self, query: str) -> List[str]:
        query = (query or "").strip()
        if not query:
            return self.list()
        updated = [query] + [q for q in self.list() if q != query]
        updated = updated[: self.limit]
        self.store.set(settings.RECENT_QUERIES_KEY, updated)
        return updated
