from __future__ import annotations
import json
import logging
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel

from app.schemas import DailyRead, Treatment, WeeklyRead
from settings import get_settings

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", DailyRead, WeeklyRead, Treatment)


def _record_date(record: BaseModel):
    return getattr(record, "read_date", None) or getattr(record, "treatment_date")


class RecordsTable(Generic[RecordT]):
    """In-memory stand-in for one backend table, keyed by record ``id``."""

    def __init__(
        self,
        name: str,
        model: Type[RecordT],
        persistence_path: Optional[Path] = None,
    ) -> None:
        self.name = name
        self.model = model
        self._items: Dict[str, RecordT] = {}
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def put_item(self, item: RecordT) -> None:
        with self._lock:
            self._items[item.id] = item.model_copy(deep=True)
            self._persist()

    def get_item(self, key: str) -> Optional[RecordT]:
        with self._lock:
            item = self._items.get(key)
            if item is None:
                return None
            return item.model_copy(deep=True)

    def scan(self) -> list[RecordT]:
        """Return deep copies of all stored records."""

        with self._lock:
            return [item.model_copy(deep=True) for item in self._items.values()]

    def query_pool(self, pool_id: str) -> list[RecordT]:
        """Return the records of one pool, newest first."""

        with self._lock:
            matches = [
                item.model_copy(deep=True)
                for item in self._items.values()
                if item.pool_id == pool_id
            ]
        return sort_newest_first(matches)

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = {
            record_id: item.model_dump(mode="json") for record_id, item in self._items.items()
        }
        self.persistence_path.write_text(json.dumps(payload, indent=2, sort_keys=True))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            logger.warning(
                "Ignoring unreadable table file %s",
                self.persistence_path,
                extra={"reason": "invalid json"},
            )
            return

        for record_id, payload in data.items():
            self._items[record_id] = self.model.model_validate(payload)


def sort_newest_first(records: list[RecordT]) -> list[RecordT]:
    return sorted(
        records,
        key=lambda record: (_record_date(record), record.created_at),
        reverse=True,
    )


def _table_path(configured: Optional[str], override: Optional[str]) -> Optional[Path]:
    table_path = configured if override is None else override
    return Path(table_path) if table_path else None


@lru_cache
def build_default_daily_reads_table(path: Optional[str] = None) -> RecordsTable[DailyRead]:
    settings = get_settings()
    return RecordsTable(
        name="daily_reads",
        model=DailyRead,
        persistence_path=_table_path(settings.daily_reads_path, path),
    )


@lru_cache
def build_default_weekly_reads_table(path: Optional[str] = None) -> RecordsTable[WeeklyRead]:
    settings = get_settings()
    return RecordsTable(
        name="weekly_reads",
        model=WeeklyRead,
        persistence_path=_table_path(settings.weekly_reads_path, path),
    )


@lru_cache
def build_default_treatments_table(path: Optional[str] = None) -> RecordsTable[Treatment]:
    settings = get_settings()
    return RecordsTable(
        name="treatments",
        model=Treatment,
        persistence_path=_table_path(settings.treatments_path, path),
    )
