"""Orchestration between stored pool reads and the chemistry calculators."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Optional

from app.schemas import (
    DailyRead,
    DailyReadCreate,
    DailyReport,
    Treatment,
    TreatmentCreate,
    TreatmentPlan,
    WeeklyRead,
    WeeklyReadCreate,
    WeeklyReport,
    WeeklyReportEntry,
)
from datastore.records_table import (
    RecordsTable,
    build_default_daily_reads_table,
    build_default_treatments_table,
    build_default_weekly_reads_table,
    sort_newest_first,
)
from models.records import SaturationResult, TreatmentDosage, WaterReading
from services.lsi import classify_saturation_index, compute_saturation_index, evaluate_reading
from services.treatments import TreatmentAdvisor
from settings import get_settings

logger = logging.getLogger(__name__)

_DAILY_VALUE_FIELDS = ("chlorine", "ph", "temperature", "flow", "influent", "effluent")
_WEEKLY_VALUE_FIELDS = ("tds", "alkalinity", "calcium_hardness")


@dataclass(frozen=True)
class Evaluation:
    saturation: SaturationResult
    dosage: TreatmentDosage


class ReadingsService:
    """Records pool reads and derives saturation and dosage from them."""

    def __init__(
        self,
        daily_reads: RecordsTable[DailyRead],
        weekly_reads: RecordsTable[WeeklyRead],
        treatments: RecordsTable[Treatment],
        advisor: TreatmentAdvisor,
        report_limit: int = 100,
    ) -> None:
        self.daily_reads = daily_reads
        self.weekly_reads = weekly_reads
        self.treatments = treatments
        self.advisor = advisor
        self.report_limit = report_limit

    def evaluate(self, reading: WaterReading) -> Evaluation:
        """Stateless saturation and dosage for an ad-hoc reading."""
        return Evaluation(
            saturation=evaluate_reading(reading),
            dosage=self.advisor.recommend(reading),
        )

    def record_daily_read(self, pool_id: str, payload: DailyReadCreate) -> DailyRead:
        if all(getattr(payload, name) is None for name in _DAILY_VALUE_FIELDS):
            logger.warning(
                "Rejected empty daily read",
                extra={"pool_id": pool_id, "reason": "no readings"},
            )
            raise ValueError("Daily read contains no readings.")

        record = DailyRead(
            pool_id=pool_id,
            read_date=payload.read_date or date.today(),
            chlorine=payload.chlorine,
            ph=payload.ph,
            temperature=payload.temperature,
            flow=payload.flow,
            influent=payload.influent,
            effluent=payload.effluent,
        )
        self.daily_reads.put_item(record)
        logger.info(
            "Recorded daily read",
            extra={"pool_id": pool_id, "read_id": record.id, "read_date": record.read_date},
        )
        return record

    def record_weekly_read(self, pool_id: str, payload: WeeklyReadCreate) -> WeeklyRead:
        if all(getattr(payload, name) is None for name in _WEEKLY_VALUE_FIELDS):
            logger.warning(
                "Rejected empty weekly read",
                extra={"pool_id": pool_id, "reason": "no readings"},
            )
            raise ValueError("Weekly read contains no readings.")

        ph = payload.ph
        temperature = payload.temperature
        if ph is None or temperature is None:
            latest_daily = self._latest_daily_read(pool_id)
            if latest_daily is not None:
                ph = ph if ph is not None else latest_daily.ph
                temperature = temperature if temperature is not None else latest_daily.temperature

        saturation_index = compute_saturation_index(
            ph, temperature, payload.calcium_hardness, payload.alkalinity
        )
        record = WeeklyRead(
            pool_id=pool_id,
            read_date=payload.read_date or date.today(),
            tds=payload.tds,
            alkalinity=payload.alkalinity,
            calcium_hardness=payload.calcium_hardness,
            saturation_index=saturation_index,
        )
        self.weekly_reads.put_item(record)

        if saturation_index is None:
            logger.info(
                "Recorded weekly read with indeterminate saturation index",
                extra={
                    "pool_id": pool_id,
                    "read_id": record.id,
                    "reason": "incomplete readings",
                },
            )
        else:
            logger.info(
                "Recorded weekly read",
                extra={
                    "pool_id": pool_id,
                    "read_id": record.id,
                    "saturation_index": saturation_index,
                    "balance": classify_saturation_index(saturation_index).value,
                },
            )
        return record

    def latest_weekly_read(self, pool_id: str) -> WeeklyRead:
        """Return the last known weekly read of a pool."""
        reads = self.weekly_reads.query_pool(pool_id)
        if not reads:
            raise KeyError(f"No weekly reads recorded for pool {pool_id!r}.")
        return reads[0]

    def recommend_treatment(self, pool_id: str) -> TreatmentPlan:
        latest = self.latest_weekly_read(pool_id)
        reading = WaterReading(
            calcium_hardness=latest.calcium_hardness,
            alkalinity=latest.alkalinity,
            tds=latest.tds,
        )
        dosage = self.advisor.recommend(reading)
        return TreatmentPlan(
            pool_id=pool_id,
            based_on_read_id=latest.id,
            read_date=latest.read_date,
            alkalinity=latest.alkalinity,
            calcium_hardness=latest.calcium_hardness,
            saturation_index=latest.saturation_index,
            balance=classify_saturation_index(latest.saturation_index),
            bicarb_cups=dosage.bicarb_cups,
            calcium_cups=dosage.calcium_cups,
        )

    def log_treatment(self, pool_id: str, payload: TreatmentCreate) -> Treatment:
        if payload.bicarb_cups_added is None and payload.calcium_cups_added is None:
            logger.warning(
                "Rejected empty treatment",
                extra={"pool_id": pool_id, "reason": "no amounts"},
            )
            raise ValueError("Treatment must include at least one amount.")

        record = Treatment(
            pool_id=pool_id,
            treatment_date=payload.treatment_date or date.today(),
            bicarb_cups_added=payload.bicarb_cups_added,
            calcium_cups_added=payload.calcium_cups_added,
        )
        self.treatments.put_item(record)
        logger.info(
            "Logged treatment",
            extra={
                "pool_id": pool_id,
                "treatment_id": record.id,
                "bicarb_cups": record.bicarb_cups_added,
                "calcium_cups": record.calcium_cups_added,
            },
        )
        return record

    def weekly_report(self, limit: Optional[int] = None) -> WeeklyReport:
        reads = sort_newest_first(self.weekly_reads.scan())[: self._limit(limit)]
        entries = [
            WeeklyReportEntry(
                **read.model_dump(),
                balance=classify_saturation_index(read.saturation_index),
            )
            for read in reads
        ]
        return WeeklyReport(reads=entries)

    def daily_report(self, limit: Optional[int] = None) -> DailyReport:
        reads = sort_newest_first(self.daily_reads.scan())[: self._limit(limit)]
        return DailyReport(reads=reads)

    def _latest_daily_read(self, pool_id: str) -> Optional[DailyRead]:
        reads = self.daily_reads.query_pool(pool_id)
        return reads[0] if reads else None

    def _limit(self, limit: Optional[int]) -> int:
        if limit is None or limit <= 0:
            return self.report_limit
        return limit


@lru_cache
def build_default_readings_service() -> ReadingsService:
    """Factory that wires the service with the default tables and settings."""
    settings = get_settings()
    return ReadingsService(
        daily_reads=build_default_daily_reads_table(),
        weekly_reads=build_default_weekly_reads_table(),
        treatments=build_default_treatments_table(),
        advisor=TreatmentAdvisor(pool_gallons=settings.pool_volume_gallons),
        report_limit=settings.report_limit,
    )
