from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_DAILY_READS_PATH_ENV = "POOL_DAILY_READS_PATH"
_WEEKLY_READS_PATH_ENV = "POOL_WEEKLY_READS_PATH"
_TREATMENTS_PATH_ENV = "POOL_TREATMENTS_PATH"
_POOL_VOLUME_ENV = "POOL_VOLUME_GALLONS"
_REPORT_LIMIT_ENV = "REPORT_LIMIT"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    daily_reads_path: Optional[str]
    weekly_reads_path: Optional[str]
    treatments_path: Optional[str]
    pool_volume_gallons: float
    report_limit: int
    log_level: str


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        daily_reads_path=_read_optional_env(_DAILY_READS_PATH_ENV, "./tmp/daily_reads.json"),
        weekly_reads_path=_read_optional_env(_WEEKLY_READS_PATH_ENV, "./tmp/weekly_reads.json"),
        treatments_path=_read_optional_env(_TREATMENTS_PATH_ENV, "./tmp/treatments.json"),
        pool_volume_gallons=_read_positive_float(_POOL_VOLUME_ENV, 1500.0),
        report_limit=_read_positive_int(_REPORT_LIMIT_ENV, 100),
        log_level=_read_log_level("INFO"),
    )
