"""Shared data models for the HealthCover contract and its HTTP layer."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


RiskCategory = Literal["LOW_RISK", "MODERATE_RISK", "HIGH_RISK", "VERY_HIGH_RISK"]
PENDING_ASSESSMENT = "PENDING_ASSESSMENT"
STATUS_ACTIVE = "ACTIVE"


class HealthProfile(BaseModel):
	"""Clinical snapshot submitted by a policyholder.

	BMI is stored multiplied by ten (``225`` means 22.5).
	"""

	age: int
	bmi: int
	blood_pressure_systolic: int
	blood_pressure_diastolic: int
	cholesterol_level: int
	is_smoker: bool
	exercise_frequency: int
	alcohol_consumption: int = 0
	health_score: int = 0
	last_checkup: int
	consent_given: bool = True


class LifestyleMetrics(BaseModel):
	"""Daily-habit metrics submitted by a policyholder."""

	daily_steps: int
	sleep_hours: int
	stress_level: int
	diet_quality_score: int
	mental_health_score: int
	social_activity_level: int
	preventive_care_adherence: int
	lifestyle_score: int = 0
	last_updated: int


class GeneticRiskFactors(BaseModel):
	"""Reserved genetic risk record; no operation writes or reads it yet."""

	diabetes_risk: int = 0
	heart_disease_risk: int = 0
	cancer_risk: int = 0
	autoimmune_risk: int = 0
	overall_genetic_score: int = 0
	genetic_risk_category: str = ""


class InsurancePolicy(BaseModel):
	policy_id: int
	policyholder: str
	current_premium: int
	base_premium: int
	risk_category: str = PENDING_ASSESSMENT
	status: str = STATUS_ACTIVE
	created_at: int
	last_premium_adjustment: int
	total_premiums_paid: int = 0
	claim_history_score: int


class PremiumAdjustment(BaseModel):
	"""Immutable audit record for one premium change."""

	policy_id: int
	timestamp: int
	old_premium: int
	new_premium: int
	adjustment_reason: str
	health_score_change: int
	lifestyle_score_change: int


class PredictiveTrend(BaseModel):
	projected_health_score_6m: int = 0
	projected_lifestyle_score_6m: int = 0
	chronic_disease_probability: int = 0
	preventive_care_effectiveness: int = 0
	intervention_success_rate: int = 0
	risk_trend: str = "STABLE"


class AssessmentFlags(BaseModel):
	predictive: bool = False
	wellness: bool = False
	continuous_monitoring: bool = False
	generate_recommendations: bool = False


class AssessmentReport(BaseModel):
	"""Outcome of a premium assessment, returned and emitted as an event."""

	policy_id: int
	assessment_timestamp: int
	current_risk_category: str
	health_score: int
	lifestyle_score: int
	age_risk_factor: int
	composite_risk_score: int
	current_premium: int
	optimized_premium: int
	premium_adjustment: int
	premium_multiplier: int
	predictive_trend: PredictiveTrend
	wellness_incentives_active: bool
	continuous_monitoring_enabled: bool
	intervention_recommendations: list[str] = Field(default_factory=list)
	next_assessment_due: int
	confidence_score: int


class ContractEvent(BaseModel):
	name: str
	block: int
	payload: dict[str, Any]


class HealthProfileRequest(BaseModel):
	"""Request payload for health-profile intake."""

	age: int
	bmi: int
	systolic: int
	diastolic: int
	cholesterol: int
	is_smoker: bool
	exercise_frequency: int


class LifestyleRequest(BaseModel):
	steps: int
	sleep_hours: int
	stress: int
	diet_score: int
	mental_score: int


class FaucetRequest(BaseModel):
	amount: int
