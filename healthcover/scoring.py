"""Deterministic scoring helpers for health, lifestyle and age risk.

All arithmetic is integer-only. Weighted sums divide each term by 100
before adding, so results match term-by-term truncation.
"""

from __future__ import annotations

from healthcover.config import GENETIC_SCORE_PLACEHOLDER
from healthcover.models import HealthProfile, LifestyleMetrics, RiskCategory

_AGE_BANDS: tuple[tuple[int, int], ...] = (
	(25, 80),
	(35, 90),
	(45, 100),
	(55, 110),
	(65, 130),
)
_AGE_FACTOR_CEILING = 150

# (health, lifestyle, genetic) weights in percent
_CATEGORY_WEIGHTS = (50, 30, 20)


def age_risk_factor(age: int) -> int:
	"""Return the age risk factor, where 100 is baseline risk."""

	for upper_bound, factor in _AGE_BANDS:
		if age <= upper_bound:
			return factor
	return _AGE_FACTOR_CEILING


def _bmi_score(bmi: int) -> int:
	return 100 if 185 <= bmi <= 250 else 70


def _blood_pressure_score(systolic: int) -> int:
	if systolic <= 120:
		return 100
	if systolic <= 140:
		return 80
	return 60


def _cholesterol_score(cholesterol: int) -> int:
	return 100 if cholesterol <= 200 else 70


def _smoking_score(is_smoker: bool) -> int:
	return 50 if is_smoker else 100


def _exercise_score(sessions_per_week: int) -> int:
	return 110 if sessions_per_week >= 4 else 90


def health_score(profile: HealthProfile) -> int:
	"""Average of the five clinical sub-scores, truncated."""

	total = (
		_bmi_score(profile.bmi)
		+ _blood_pressure_score(profile.blood_pressure_systolic)
		+ _cholesterol_score(profile.cholesterol_level)
		+ _smoking_score(profile.is_smoker)
		+ _exercise_score(profile.exercise_frequency)
	)
	return total // 5


def lifestyle_score(metrics: LifestyleMetrics) -> int:
	"""Average of steps, sleep, stress, diet and mental-health sub-scores, truncated."""

	steps = 100 if metrics.daily_steps >= 8000 else 80
	sleep = 100 if 7 <= metrics.sleep_hours <= 9 else 70
	stress = 100 if metrics.stress_level <= 3 else 60
	total = steps + sleep + stress + metrics.diet_quality_score + metrics.mental_health_score
	return total // 5


def risk_category_composite(
	health: int,
	lifestyle: int,
	genetic: int = GENETIC_SCORE_PLACEHOLDER,
) -> int:
	health_weight, lifestyle_weight, genetic_weight = _CATEGORY_WEIGHTS
	return (
		health * health_weight // 100
		+ lifestyle * lifestyle_weight // 100
		+ genetic * genetic_weight // 100
	)


def risk_category(
	health: int,
	lifestyle: int,
	genetic: int = GENETIC_SCORE_PLACEHOLDER,
) -> RiskCategory:
	"""Map health, lifestyle and genetic scores to one of four risk bands.

	``genetic`` defaults to the fixed placeholder until a genetic intake
	operation exists.
	"""

	return category_for_composite(risk_category_composite(health, lifestyle, genetic))


def category_for_composite(composite: int) -> RiskCategory:
	if composite >= 90:
		return "LOW_RISK"
	if composite >= 70:
		return "MODERATE_RISK"
	if composite >= 50:
		return "HIGH_RISK"
	return "VERY_HIGH_RISK"
