"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import (
    DailyRead,
    DailyReadCreate,
    DailyReport,
    DosageResponse,
    EvaluationResponse,
    ReadingRequest,
    SaturationResponse,
    Treatment,
    TreatmentCreate,
    TreatmentPlan,
    WeeklyRead,
    WeeklyReadCreate,
    WeeklyReport,
)
from services.readings import Evaluation, ReadingsService, build_default_readings_service

router = APIRouter()


def get_readings_service() -> ReadingsService:
    return build_default_readings_service()


def _saturation_response(evaluation: Evaluation) -> SaturationResponse:
    return SaturationResponse(
        saturation_index=evaluation.saturation.saturation_index,
        balance=evaluation.saturation.balance,
    )


def _dosage_response(evaluation: Evaluation, service: ReadingsService) -> DosageResponse:
    return DosageResponse(
        bicarb_cups=evaluation.dosage.bicarb_cups,
        calcium_cups=evaluation.dosage.calcium_cups,
        pool_gallons=service.advisor.pool_gallons,
    )


@router.post(
    "/saturation-index",
    response_model=SaturationResponse,
    summary="Compute the Langelier Saturation Index for a reading.",
)
async def saturation_index(
    reading: ReadingRequest,
    service: ReadingsService = Depends(get_readings_service),
) -> SaturationResponse:
    return _saturation_response(service.evaluate(reading.to_reading()))


@router.post(
    "/treatments/recommendation",
    response_model=DosageResponse,
    summary="Recommend bicarbonate and calcium chloride dosage for a reading.",
)
async def treatment_recommendation(
    reading: ReadingRequest,
    service: ReadingsService = Depends(get_readings_service),
) -> DosageResponse:
    return _dosage_response(service.evaluate(reading.to_reading()), service)


@router.post(
    "/evaluate",
    response_model=EvaluationResponse,
    summary="Saturation index and dosage for a reading in one call.",
)
async def evaluate(
    reading: ReadingRequest,
    service: ReadingsService = Depends(get_readings_service),
) -> EvaluationResponse:
    evaluation = service.evaluate(reading.to_reading())
    return EvaluationResponse(
        saturation=_saturation_response(evaluation),
        dosage=_dosage_response(evaluation, service),
    )


@router.post(
    "/pools/{pool_id}/daily-reads",
    status_code=status.HTTP_201_CREATED,
    response_model=DailyRead,
    summary="Record daily chemical and equipment readings.",
)
async def create_daily_read(
    pool_id: str,
    payload: DailyReadCreate,
    service: ReadingsService = Depends(get_readings_service),
) -> DailyRead:
    try:
        return service.record_daily_read(pool_id, payload)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


@router.post(
    "/pools/{pool_id}/weekly-reads",
    status_code=status.HTTP_201_CREATED,
    response_model=WeeklyRead,
    summary="Record weekly water-chemistry readings and their saturation index.",
)
async def create_weekly_read(
    pool_id: str,
    payload: WeeklyReadCreate,
    service: ReadingsService = Depends(get_readings_service),
) -> WeeklyRead:
    try:
        return service.record_weekly_read(pool_id, payload)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


@router.get(
    "/pools/{pool_id}/weekly-reads/latest",
    response_model=WeeklyRead,
    summary="Fetch the last known weekly read of a pool.",
)
async def latest_weekly_read(
    pool_id: str,
    service: ReadingsService = Depends(get_readings_service),
) -> WeeklyRead:
    try:
        return service.latest_weekly_read(pool_id)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=exc.args[0],
        ) from exc


@router.get(
    "/pools/{pool_id}/treatment-plan",
    response_model=TreatmentPlan,
    summary="Recommend a treatment from the last known weekly read.",
)
async def treatment_plan(
    pool_id: str,
    service: ReadingsService = Depends(get_readings_service),
) -> TreatmentPlan:
    try:
        return service.recommend_treatment(pool_id)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=exc.args[0],
        ) from exc


@router.post(
    "/pools/{pool_id}/treatments",
    status_code=status.HTTP_201_CREATED,
    response_model=Treatment,
    summary="Log chemicals actually added to a pool.",
)
async def create_treatment(
    pool_id: str,
    payload: TreatmentCreate,
    service: ReadingsService = Depends(get_readings_service),
) -> Treatment:
    try:
        return service.log_treatment(pool_id, payload)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


@router.get(
    "/reports/weekly-reads",
    response_model=WeeklyReport,
    summary="Most recent weekly reads across pools with their water balance.",
)
async def weekly_report(
    limit: Optional[int] = Query(default=None, ge=1),
    service: ReadingsService = Depends(get_readings_service),
) -> WeeklyReport:
    return service.weekly_report(limit)


@router.get(
    "/reports/daily-reads",
    response_model=DailyReport,
    summary="Most recent daily reads across pools.",
)
async def daily_report(
    limit: Optional[int] = Query(default=None, ge=1),
    service: ReadingsService = Depends(get_readings_service),
) -> DailyReport:
    return service.daily_report(limit)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
