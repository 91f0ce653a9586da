"""Chemical dosage recommendations for alkalinity and calcium hardness."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from models.records import TreatmentDosage, WaterReading

REFERENCE_GALLONS = 1500.0


@dataclass(frozen=True)
class DosageRule:
    """Dosing parameters for one chemical, calibrated at ``reference_gallons``."""

    ideal_ppm: float
    threshold_ppm: float
    cups_per_10ppm: float
    reference_gallons: float = REFERENCE_GALLONS

    def cups_for(self, current_ppm: Optional[float], pool_gallons: float) -> float:
        if current_ppm is None or not math.isfinite(current_ppm):
            return 0.0
        if current_ppm < 0 or current_ppm >= self.threshold_ppm:
            return 0.0
        needed = self.ideal_ppm - current_ppm
        cups = (needed / 10) * self.cups_per_10ppm * (pool_gallons / self.reference_gallons)
        return round(cups, 2)


# Sodium bicarbonate: ~0.5 cups raises 1,500 gallons by 10 ppm.
ALKALINITY_RULE = DosageRule(ideal_ppm=100, threshold_ppm=80, cups_per_10ppm=0.5)
# Calcium chloride: ~0.4 cups raises 1,500 gallons by 10 ppm.
CALCIUM_RULE = DosageRule(ideal_ppm=300, threshold_ppm=200, cups_per_10ppm=0.4)


class TreatmentAdvisor:
    """Pure dosage calculator for a pool of a given volume."""

    def __init__(
        self,
        pool_gallons: float = REFERENCE_GALLONS,
        alkalinity_rule: DosageRule = ALKALINITY_RULE,
        calcium_rule: DosageRule = CALCIUM_RULE,
    ) -> None:
        if pool_gallons <= 0:
            raise ValueError("Pool volume must be greater than zero.")
        self.pool_gallons = pool_gallons
        self.alkalinity_rule = alkalinity_rule
        self.calcium_rule = calcium_rule

    def alkalinity_dosage(self, alkalinity: Optional[float]) -> float:
        return self.alkalinity_rule.cups_for(alkalinity, self.pool_gallons)

    def calcium_dosage(self, calcium_hardness: Optional[float]) -> float:
        return self.calcium_rule.cups_for(calcium_hardness, self.pool_gallons)

    def recommend(self, reading: WaterReading) -> TreatmentDosage:
        return TreatmentDosage(
            bicarb_cups=self.alkalinity_dosage(reading.alkalinity),
            calcium_cups=self.calcium_dosage(reading.calcium_hardness),
        )


_DEFAULT_ADVISOR = TreatmentAdvisor()


def compute_alkalinity_dosage(alkalinity: Optional[float]) -> float:
    """Cups of sodium bicarbonate for the reference pool, ``0.0`` when no action is needed."""
    return _DEFAULT_ADVISOR.alkalinity_dosage(alkalinity)


def compute_calcium_dosage(calcium_hardness: Optional[float]) -> float:
    """Cups of calcium chloride for the reference pool, ``0.0`` when no action is needed."""
    return _DEFAULT_ADVISOR.calcium_dosage(calcium_hardness)
