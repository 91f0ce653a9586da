from __future__ import annotations

from typing import Iterable

from datastore.records_table import (
    build_default_daily_reads_table,
    build_default_treatments_table,
    build_default_weekly_reads_table,
)
from services.readings import build_default_readings_service
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


_CACHES = (
    get_settings,
    build_default_daily_reads_table,
    build_default_weekly_reads_table,
    build_default_treatments_table,
    build_default_readings_service,
)


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("POOL_DAILY_READS_PATH", str(tmp_path / "daily.json"))
    monkeypatch.setenv("POOL_WEEKLY_READS_PATH", str(tmp_path / "weekly.json"))
    monkeypatch.setenv("POOL_TREATMENTS_PATH", "  ")
    monkeypatch.setenv("POOL_VOLUME_GALLONS", "3000")
    monkeypatch.setenv("REPORT_LIMIT", "25")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    _clear_caches(_CACHES)

    try:
        settings = get_settings()
        service = build_default_readings_service()

        assert settings.log_level == "DEBUG"
        assert service.daily_reads.persistence_path == tmp_path / "daily.json"
        assert service.weekly_reads.persistence_path == tmp_path / "weekly.json"
        assert service.treatments.persistence_path is None
        assert service.advisor.pool_gallons == 3000.0
        assert service.advisor.alkalinity_dosage(40) == 6.0
        assert service.report_limit == 25
    finally:
        _clear_caches(_CACHES)


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("POOL_VOLUME_GALLONS", "-10")
    monkeypatch.setenv("REPORT_LIMIT", "many")
    get_settings.cache_clear()

    try:
        settings = get_settings()

        assert settings.pool_volume_gallons == 1500.0
        assert settings.report_limit == 100
    finally:
        get_settings.cache_clear()
