"""Unit tests for the dosage recommendations."""

from __future__ import annotations

import pytest

from models.records import TreatmentDosage, WaterReading
from services.treatments import (
    ALKALINITY_RULE,
    CALCIUM_RULE,
    DosageRule,
    TreatmentAdvisor,
    compute_alkalinity_dosage,
    compute_calcium_dosage,
)


def test_alkalinity_dosage_formula() -> None:
    assert compute_alkalinity_dosage(0) == 5.0
    assert compute_alkalinity_dosage(40) == 3.0
    assert compute_alkalinity_dosage(79) == pytest.approx(1.05)


def test_calcium_dosage_formula() -> None:
    assert compute_calcium_dosage(0) == 12.0
    assert compute_calcium_dosage(100) == 8.0
    assert compute_calcium_dosage(199) == pytest.approx(4.04)


@pytest.mark.parametrize("value", [80, 80.5, 120, None, -5, float("nan")])
def test_alkalinity_no_action(value) -> None:
    assert compute_alkalinity_dosage(value) == 0.0


@pytest.mark.parametrize("value", [200, 250, 800, None, -1, float("nan")])
def test_calcium_no_action(value) -> None:
    assert compute_calcium_dosage(value) == 0.0


def test_results_are_rounded_to_two_decimals() -> None:
    assert compute_alkalinity_dosage(33.333) == round(((100 - 33.333) / 10) * 0.5, 2)
    assert compute_calcium_dosage(123.456) == round(((300 - 123.456) / 10) * 0.4, 2)


def test_recommend_computes_each_chemical_independently() -> None:
    advisor = TreatmentAdvisor()

    only_alkalinity = advisor.recommend(WaterReading(alkalinity=40, calcium_hardness=250))
    only_calcium = advisor.recommend(WaterReading(alkalinity=90, calcium_hardness=100))
    both = advisor.recommend(WaterReading(alkalinity=40, calcium_hardness=100))

    assert only_alkalinity == TreatmentDosage(bicarb_cups=3.0, calcium_cups=0.0)
    assert only_calcium == TreatmentDosage(bicarb_cups=0.0, calcium_cups=8.0)
    assert both == TreatmentDosage(bicarb_cups=3.0, calcium_cups=8.0)
    assert both.needs_treatment
    assert not advisor.recommend(WaterReading()).needs_treatment


def test_balanced_reading_needs_no_treatment() -> None:
    dosage = TreatmentAdvisor().recommend(
        WaterReading(ph=7.5, temperature_f=80, calcium_hardness=250, alkalinity=90)
    )

    assert dosage == TreatmentDosage(bicarb_cups=0.0, calcium_cups=0.0)


def test_dosage_scales_with_pool_volume() -> None:
    advisor = TreatmentAdvisor(pool_gallons=3000)

    assert advisor.alkalinity_dosage(40) == 6.0
    assert advisor.calcium_dosage(100) == 16.0


def test_custom_rule() -> None:
    rule = DosageRule(ideal_ppm=120, threshold_ppm=100, cups_per_10ppm=1.0, reference_gallons=500)
    advisor = TreatmentAdvisor(pool_gallons=250, alkalinity_rule=rule)

    assert advisor.alkalinity_dosage(60) == 3.0
    assert advisor.calcium_rule is CALCIUM_RULE
    assert ALKALINITY_RULE.reference_gallons == 1500


def test_pool_volume_must_be_positive() -> None:
    with pytest.raises(ValueError):
        TreatmentAdvisor(pool_gallons=0)
