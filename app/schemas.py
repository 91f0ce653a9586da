"""Pydantic schemas for the HTTP API layer and the stored records."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from models.records import WaterBalance, WaterReading


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReadingRequest(BaseModel):
    """Raw chemistry measurements; omitted fields are treated as not measured."""

    ph: Optional[float] = Field(default=None, description="pH reading.")
    temperature_f: Optional[float] = Field(
        default=None, description="Water temperature in degrees Fahrenheit."
    )
    calcium_hardness: Optional[float] = Field(default=None, description="Calcium hardness in ppm.")
    alkalinity: Optional[float] = Field(default=None, description="Total alkalinity in ppm.")
    tds: Optional[float] = Field(default=None, description="Total dissolved solids in ppm.")

    def to_reading(self) -> WaterReading:
        return WaterReading(
            ph=self.ph,
            temperature_f=self.temperature_f,
            calcium_hardness=self.calcium_hardness,
            alkalinity=self.alkalinity,
            tds=self.tds,
        )


class SaturationResponse(BaseModel):
    saturation_index: Optional[float] = Field(
        default=None, description="Langelier Saturation Index, null when indeterminate."
    )
    balance: Optional[WaterBalance] = None


class DosageResponse(BaseModel):
    bicarb_cups: float = Field(..., ge=0, description="Cups of sodium bicarbonate to add.")
    calcium_cups: float = Field(..., ge=0, description="Cups of calcium chloride to add.")
    pool_gallons: float = Field(..., gt=0)


class EvaluationResponse(BaseModel):
    saturation: SaturationResponse
    dosage: DosageResponse


class DailyReadCreate(BaseModel):
    """Daily chemical and equipment readings for one pool."""

    read_date: Optional[date] = None
    chlorine: Optional[float] = Field(default=None, ge=0)
    ph: Optional[float] = Field(default=None, ge=0)
    temperature: Optional[float] = Field(default=None, description="Degrees Fahrenheit.")
    flow: Optional[float] = Field(default=None, ge=0)
    influent: Optional[float] = None
    effluent: Optional[float] = None


class DailyRead(DailyReadCreate):
    id: str = Field(default_factory=_new_id)
    pool_id: str
    read_date: date
    created_at: datetime = Field(default_factory=_utcnow)


class WeeklyReadCreate(BaseModel):
    """Weekly water-chemistry readings for one pool.

    ``ph`` and ``temperature`` may be supplied to override the values taken
    from the pool's latest daily read when computing the saturation index.
    """

    read_date: Optional[date] = None
    tds: Optional[float] = Field(default=None, ge=0)
    alkalinity: Optional[float] = Field(default=None, ge=0)
    calcium_hardness: Optional[float] = Field(default=None, ge=0)
    ph: Optional[float] = Field(default=None, ge=0)
    temperature: Optional[float] = None


class WeeklyRead(BaseModel):
    id: str = Field(default_factory=_new_id)
    pool_id: str
    read_date: date
    tds: Optional[float] = None
    alkalinity: Optional[float] = None
    calcium_hardness: Optional[float] = None
    saturation_index: Optional[float] = None
    created_at: datetime = Field(default_factory=_utcnow)


class TreatmentCreate(BaseModel):
    treatment_date: Optional[date] = None
    bicarb_cups_added: Optional[float] = Field(default=None, ge=0)
    calcium_cups_added: Optional[float] = Field(default=None, ge=0)


class Treatment(TreatmentCreate):
    id: str = Field(default_factory=_new_id)
    pool_id: str
    treatment_date: date
    created_at: datetime = Field(default_factory=_utcnow)


class TreatmentPlan(BaseModel):
    """Dosage recommended from the last known weekly read of a pool."""

    pool_id: str
    based_on_read_id: str
    read_date: date
    alkalinity: Optional[float] = None
    calcium_hardness: Optional[float] = None
    saturation_index: Optional[float] = None
    balance: Optional[WaterBalance] = None
    bicarb_cups: float = Field(..., ge=0)
    calcium_cups: float = Field(..., ge=0)


class WeeklyReportEntry(WeeklyRead):
    balance: Optional[WaterBalance] = None


class WeeklyReport(BaseModel):
    reads: List[WeeklyReportEntry] = Field(default_factory=list)


class DailyReport(BaseModel):
    reads: List[DailyRead] = Field(default_factory=list)
