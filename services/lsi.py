"""Langelier Saturation Index calculation.

The index uses the classic field approximation::

    LSI = pH + TF + CF + AF - TDSF

``TF``, ``CF`` and ``AF`` are looked up from breakpoint tables keyed on
temperature (degrees Fahrenheit), calcium hardness (ppm) and alkalinity
(ppm). ``TDSF`` is the constant 12.1 used for water under 1000 ppm TDS.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from models.records import SaturationResult, WaterBalance, WaterReading

FactorTable = Sequence[Tuple[float, float]]

# (inclusive upper bound, factor); larger inputs use the catch-all factor.
TEMPERATURE_FACTORS: FactorTable = (
    (32, 0.0),
    (38, 0.1),
    (46, 0.2),
    (53, 0.3),
    (60, 0.4),
    (66, 0.5),
    (76, 0.6),
    (84, 0.7),
    (94, 0.8),
    (105, 0.9),
)
TEMPERATURE_CATCH_ALL = 1.0

CALCIUM_FACTORS: FactorTable = (
    (25, 1.0),
    (50, 1.3),
    (100, 1.6),
    (200, 1.9),
    (400, 2.2),
    (800, 2.5),
)
CALCIUM_CATCH_ALL = 2.6

ALKALINITY_FACTORS: FactorTable = (
    (25, 1.4),
    (50, 1.7),
    (100, 2.0),
    (200, 2.3),
    (400, 2.6),
    (800, 2.9),
)
ALKALINITY_CATCH_ALL = 3.0

TDS_CONSTANT = 12.1

CORROSIVE_BELOW = -0.5
SCALE_FORMING_ABOVE = 0.5


def _lookup(table: FactorTable, catch_all: float, value: float) -> float:
    for upper_bound, factor in table:
        if value <= upper_bound:
            return factor
    return catch_all


def temperature_factor(temperature_f: float) -> float:
    return _lookup(TEMPERATURE_FACTORS, TEMPERATURE_CATCH_ALL, temperature_f)


def calcium_factor(calcium_hardness: float) -> float:
    return _lookup(CALCIUM_FACTORS, CALCIUM_CATCH_ALL, calcium_hardness)


def alkalinity_factor(alkalinity: float) -> float:
    return _lookup(ALKALINITY_FACTORS, ALKALINITY_CATCH_ALL, alkalinity)


def _is_usable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value >= 0


def compute_saturation_index(
    ph: Optional[float],
    temperature_f: Optional[float],
    calcium_hardness: Optional[float],
    alkalinity: Optional[float],
) -> Optional[float]:
    """Return the LSI rounded to two decimals, or ``None`` when indeterminate.

    An input that is missing, negative or not finite makes the index
    indeterminate. ``None`` is a regular outcome (a half-filled form, a pool
    without a weekly read) and is distinct from a balanced ``0.0``.
    """
    values = (ph, temperature_f, calcium_hardness, alkalinity)
    if not all(_is_usable(value) for value in values):
        return None

    lsi = (
        ph
        + temperature_factor(temperature_f)
        + calcium_factor(calcium_hardness)
        + alkalinity_factor(alkalinity)
        - TDS_CONSTANT
    )
    # Adding 0.0 turns a rounded -0.0 into 0.0.
    return round(lsi, 2) + 0.0


def classify_saturation_index(saturation_index: Optional[float]) -> Optional[WaterBalance]:
    if saturation_index is None:
        return None
    if saturation_index < CORROSIVE_BELOW:
        return WaterBalance.corrosive
    if saturation_index > SCALE_FORMING_ABOVE:
        return WaterBalance.scale_forming
    return WaterBalance.balanced


def evaluate_reading(reading: WaterReading) -> SaturationResult:
    """Compute and classify the index for a full reading."""
    saturation_index = compute_saturation_index(
        reading.ph,
        reading.temperature_f,
        reading.calcium_hardness,
        reading.alkalinity,
    )
    return SaturationResult(
        saturation_index=saturation_index,
        balance=classify_saturation_index(saturation_index),
    )
