"""Health-profile and lifestyle-metrics intake for policyholders.

Each identity owns at most one record of each kind. Submitting again
replaces the stored record wholesale; derived scores are left at zero
and only computed during premium assessment.
"""

from __future__ import annotations

from healthcover.config import PREVENTIVE_CARE_DEFAULT, SOCIAL_ACTIVITY_DEFAULT
from healthcover.errors import InvalidData
from healthcover.models import GeneticRiskFactors, HealthProfile, LifestyleMetrics
from healthcover.state import ContractState


def _require_range(name: str, value: int, low: int, high: int) -> None:
	if not low <= value <= high:
		raise InvalidData(f"{name} must be between {low} and {high}, got {value}")


def _require_non_negative(name: str, value: int) -> None:
	if value < 0:
		raise InvalidData(f"{name} must not be negative, got {value}")


def create_health_profile(
	state: ContractState,
	caller: str,
	block: int,
	*,
	age: int,
	bmi: int,
	systolic: int,
	diastolic: int,
	cholesterol: int,
	is_smoker: bool,
	exercise_frequency: int,
) -> HealthProfile:
	"""Validate and store the caller's health profile."""

	_require_range("age", age, 18, 100)
	_require_range("bmi", bmi, 100, 500)
	_require_range("systolic", systolic, 70, 250)
	_require_non_negative("diastolic", diastolic)
	_require_non_negative("cholesterol", cholesterol)
	_require_non_negative("exercise_frequency", exercise_frequency)

	profile = HealthProfile(
		age=age,
		bmi=bmi,
		blood_pressure_systolic=systolic,
		blood_pressure_diastolic=diastolic,
		cholesterol_level=cholesterol,
		is_smoker=is_smoker,
		exercise_frequency=exercise_frequency,
		alcohol_consumption=0,
		health_score=0,
		last_checkup=block,
		consent_given=True,
	)
	state.health_profiles[caller] = profile
	return profile


def update_lifestyle_metrics(
	state: ContractState,
	caller: str,
	block: int,
	*,
	steps: int,
	sleep_hours: int,
	stress: int,
	diet_score: int,
	mental_score: int,
) -> LifestyleMetrics:
	"""Validate and store the caller's lifestyle metrics."""

	_require_range("stress", stress, 1, 10)
	_require_range("diet_score", diet_score, 1, 100)
	_require_non_negative("steps", steps)
	_require_non_negative("sleep_hours", sleep_hours)
	_require_non_negative("mental_score", mental_score)

	metrics = LifestyleMetrics(
		daily_steps=steps,
		sleep_hours=sleep_hours,
		stress_level=stress,
		diet_quality_score=diet_score,
		mental_health_score=mental_score,
		social_activity_level=SOCIAL_ACTIVITY_DEFAULT,
		preventive_care_adherence=PREVENTIVE_CARE_DEFAULT,
		lifestyle_score=0,
		last_updated=block,
	)
	state.lifestyle_metrics[caller] = metrics
	return metrics


def get_health_profile(state: ContractState, identity: str) -> HealthProfile | None:
	return state.health_profiles.get(identity)


def get_lifestyle_metrics(state: ContractState, identity: str) -> LifestyleMetrics | None:
	return state.lifestyle_metrics.get(identity)


def get_genetic_risk_factors(state: ContractState, identity: str) -> GeneticRiskFactors | None:
	# Nothing populates this map yet; a genetic intake operation would write here.
	return state.genetic_risk_factors.get(identity)
