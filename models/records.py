"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class WaterBalance(str, Enum):
    """Qualitative band of a saturation index."""

    corrosive = "corrosive"
    balanced = "balanced"
    scale_forming = "scale_forming"


@dataclass(frozen=True, slots=True)
class WaterReading:
    """Chemistry measurements for a single pool.

    Every field is optional. ``None`` means the value was not measured and
    is never treated as zero.
    """

    ph: Optional[float] = None
    temperature_f: Optional[float] = None
    calcium_hardness: Optional[float] = None
    alkalinity: Optional[float] = None
    tds: Optional[float] = None


@dataclass(frozen=True, slots=True)
class SaturationResult:
    """Saturation index with its balance band, both ``None`` when indeterminate."""

    saturation_index: Optional[float]
    balance: Optional[WaterBalance]

    @property
    def is_indeterminate(self) -> bool:
        return self.saturation_index is None


@dataclass(frozen=True, slots=True)
class TreatmentDosage:
    """Recommended cups of sodium bicarbonate and calcium chloride."""

    bicarb_cups: float = 0.0
    calcium_cups: float = 0.0

    @property
    def needs_treatment(self) -> bool:
        return self.bicarb_cups > 0 or self.calcium_cups > 0
