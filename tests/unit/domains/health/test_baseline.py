"""Unit tests for the preliminary baseline analysis."""

from __future__ import annotations

import pytest

from futurehealth.domains.health.domain_logic.baseline import (
    bmi_category,
    compute_baseline,
    compute_bmr,
    compute_tdee,
    whr_status,
)
from futurehealth.domains.health.domain_logic.profile import Gender


class TestBmiCategory:
    @pytest.mark.parametrize(
        "bmi, category",
        [
            (18.4, "Underweight"),
            (18.5, "Normal Weight"),
            (24.9, "Normal Weight"),
            (25.0, "Overweight"),
            (29.9, "Overweight"),
            (30.0, "Obese"),
        ],
    )
    def test_who_bands(self, bmi, category):
        assert bmi_category(bmi) == category


class TestEnergy:
    def test_female_bmr_and_tdee(self, healthy_profile):
        # 10*60 + 6.25*165 - 5*40 - 161 = 1270.25
        assert compute_bmr(healthy_profile) == 1270
        # 1270.25 * 1.55 = 1968.8875
        assert compute_tdee(healthy_profile) == 1969

    def test_male_sedentary(self, profile_factory):
        profile = profile_factory(
            gender="male", age=30, heightCm=180, weightKg=80, activityLevel="sedentary"
        )
        # 800 + 1125 - 150 + 5
        assert compute_bmr(profile) == 1780
        assert compute_tdee(profile) == 2136

    def test_other_gender_uses_female_constant(self, profile_factory):
        assert compute_bmr(profile_factory(gender="other")) == 1270


class TestWaistToHip:
    @pytest.mark.parametrize(
        "gender, whr, status",
        [
            (Gender.MALE, 0.85, "Low Risk"),
            (Gender.MALE, 0.86, "Moderate Risk"),
            (Gender.MALE, 0.90, "Moderate Risk"),
            (Gender.MALE, 0.91, "High Risk"),
            (Gender.FEMALE, 0.80, "Low Risk"),
            (Gender.FEMALE, 0.81, "Moderate Risk"),
            (Gender.FEMALE, 0.86, "High Risk"),
            (Gender.OTHER, 0.86, "High Risk"),
        ],
    )
    def test_who_cutoffs(self, gender, whr, status):
        assert whr_status(whr, gender) == status

    def test_status_uses_unrounded_ratio(self, profile_factory):
        # 85.4 / 100 = 0.854 displays as 0.85 but is above the female cut-off
        baseline = compute_baseline(profile_factory(waistCm=85.4, hipCm=100))
        assert baseline.whr == 0.85
        assert baseline.whr_status == "High Risk"


class TestComputeBaseline:
    def test_to_dict(self, healthy_profile):
        assert compute_baseline(healthy_profile).to_dict() == {
            "bmi": 22.0,
            "bmiCategory": "Normal Weight",
            "bmrKcal": 1270,
            "tdeeKcal": 1969,
            "whr": 0.79,
            "whrStatus": "Low Risk",
        }
