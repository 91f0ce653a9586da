import logging
from datetime import date

import pytest

from app.schemas import (
    DailyRead,
    DailyReadCreate,
    Treatment,
    TreatmentCreate,
    WeeklyRead,
    WeeklyReadCreate,
)
from datastore.records_table import RecordsTable
from models.records import WaterBalance, WaterReading
from services.readings import ReadingsService
from services.treatments import TreatmentAdvisor


@pytest.fixture()
def service(tmp_path) -> ReadingsService:
    return ReadingsService(
        daily_reads=RecordsTable("daily_reads", DailyRead, tmp_path / "daily.json"),
        weekly_reads=RecordsTable("weekly_reads", WeeklyRead, tmp_path / "weekly.json"),
        treatments=RecordsTable("treatments", Treatment, tmp_path / "treatments.json"),
        advisor=TreatmentAdvisor(),
        report_limit=2,
    )


def test_weekly_read_uses_latest_daily_ph_and_temperature(service: ReadingsService) -> None:
    service.record_daily_read(
        "pool-a", DailyReadCreate(read_date=date(2024, 6, 1), ph=7.0, temperature=70, chlorine=3)
    )
    service.record_daily_read(
        "pool-a", DailyReadCreate(read_date=date(2024, 6, 2), ph=7.5, temperature=80, chlorine=3)
    )

    weekly = service.record_weekly_read(
        "pool-a",
        WeeklyReadCreate(read_date=date(2024, 6, 2), tds=900, alkalinity=90, calcium_hardness=200),
    )

    assert weekly.saturation_index == 0.0
    assert service.latest_weekly_read("pool-a") == weekly


def test_weekly_read_prefers_supplied_ph_and_temperature(service: ReadingsService) -> None:
    service.record_daily_read("pool-a", DailyReadCreate(ph=7.0, temperature=70))

    weekly = service.record_weekly_read(
        "pool-a",
        WeeklyReadCreate(alkalinity=90, calcium_hardness=200, ph=8.2, temperature=80),
    )

    assert weekly.saturation_index == pytest.approx(0.7)


def test_weekly_read_without_daily_read_is_indeterminate(service: ReadingsService, caplog) -> None:
    with caplog.at_level(logging.INFO):
        weekly = service.record_weekly_read(
            "pool-b", WeeklyReadCreate(tds=800, alkalinity=90, calcium_hardness=250)
        )

    assert weekly.saturation_index is None
    assert weekly.read_date == date.today()
    records = [record for record in caplog.records if record.name == "services.readings"]
    assert any("indeterminate" in record.getMessage() for record in records)
    assert any(getattr(record, "pool_id", None) == "pool-b" for record in records)


def test_empty_reads_are_rejected(service: ReadingsService, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        with pytest.raises(ValueError, match="no readings"):
            service.record_daily_read("pool-a", DailyReadCreate(read_date=date(2024, 6, 1)))
        with pytest.raises(ValueError, match="no readings"):
            service.record_weekly_read("pool-a", WeeklyReadCreate(ph=7.4, temperature=80))

    assert any(getattr(record, "reason", None) == "no readings" for record in caplog.records)


def test_latest_weekly_read_missing_pool(service: ReadingsService) -> None:
    with pytest.raises(KeyError):
        service.latest_weekly_read("unknown")
    with pytest.raises(KeyError):
        service.recommend_treatment("unknown")


def test_recommend_treatment_from_last_known_read(service: ReadingsService) -> None:
    service.record_daily_read("pool-a", DailyReadCreate(ph=7.4, temperature=82))
    service.record_weekly_read(
        "pool-a",
        WeeklyReadCreate(read_date=date(2024, 6, 1), alkalinity=100, calcium_hardness=300),
    )
    latest = service.record_weekly_read(
        "pool-a",
        WeeklyReadCreate(read_date=date(2024, 6, 8), alkalinity=40, calcium_hardness=100),
    )

    plan = service.recommend_treatment("pool-a")

    assert plan.based_on_read_id == latest.id
    assert plan.bicarb_cups == 3.0
    assert plan.calcium_cups == 8.0
    # 7.4 + 0.7 + 1.6 + 1.7 - 12.1
    assert plan.saturation_index == pytest.approx(-0.7)
    assert plan.balance is WaterBalance.corrosive


def test_log_treatment(service: ReadingsService) -> None:
    treatment = service.log_treatment(
        "pool-a", TreatmentCreate(treatment_date=date(2024, 6, 9), bicarb_cups_added=3.0)
    )

    assert treatment.calcium_cups_added is None
    assert service.treatments.query_pool("pool-a") == [treatment]

    with pytest.raises(ValueError):
        service.log_treatment("pool-a", TreatmentCreate())


def test_weekly_report_is_newest_first_and_limited(service: ReadingsService) -> None:
    for day, pool_id in ((1, "pool-a"), (8, "pool-b"), (15, "pool-a")):
        service.record_weekly_read(
            pool_id,
            WeeklyReadCreate(
                read_date=date(2024, 6, day),
                alkalinity=90,
                calcium_hardness=200,
                ph=7.5,
                temperature=80,
            ),
        )

    report = service.weekly_report()

    assert [entry.read_date.day for entry in report.reads] == [15, 8]
    assert all(entry.balance is WaterBalance.balanced for entry in report.reads)
    assert len(service.weekly_report(limit=10).reads) == 3


def test_daily_report(service: ReadingsService) -> None:
    service.record_daily_read("pool-a", DailyReadCreate(read_date=date(2024, 6, 1), chlorine=2))
    service.record_daily_read("pool-b", DailyReadCreate(read_date=date(2024, 6, 3), chlorine=4))

    report = service.daily_report()

    assert [read.pool_id for read in report.reads] == ["pool-b", "pool-a"]


def test_evaluate_is_stateless(service: ReadingsService) -> None:
    reading = WaterReading(ph=7.5, temperature_f=80, calcium_hardness=100, alkalinity=40)

    first = service.evaluate(reading)
    second = service.evaluate(reading)

    assert first == second
    assert first.dosage.bicarb_cups == 3.0
    assert first.dosage.calcium_cups == 8.0
    # 7.5 + 0.7 + 1.6 + 1.7 - 12.1
    assert first.saturation.saturation_index == pytest.approx(-0.6)
    assert service.weekly_reads.scan() == []
