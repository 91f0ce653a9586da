from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from datastore.records_table import (
    build_default_daily_reads_table,
    build_default_treatments_table,
    build_default_weekly_reads_table,
)
from logging_config import configure_logging
from services.readings import build_default_readings_service


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    build_default_readings_service()
    try:
        yield
    finally:
        build_default_readings_service.cache_clear()
        build_default_daily_reads_table.cache_clear()
        build_default_weekly_reads_table.cache_clear()
        build_default_treatments_table.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Pool Balance",
        description="Pool water-chemistry records with saturation index and treatment dosage.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app

app = create_app()
