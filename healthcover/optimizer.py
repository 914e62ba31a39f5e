"""Premium optimization: turns stored health data into a new premium.

The premium composite weights health, lifestyle and age risk 40/30/20,
while the stored risk category comes from the separate health, lifestyle
and genetic composite in :mod:`healthcover.scoring`. Both are computed on
every assessment.
"""

from __future__ import annotations

import logging
from typing import Any

from healthcover.audit import record_premium_adjustment
from healthcover.config import (
	GENETIC_SCORE_PLACEHOLDER,
	MAX_PREMIUM_MULTIPLIER,
	MIN_PREMIUM_MULTIPLIER,
	PREMIUM_ADJUSTMENT_PERIOD,
	WELLNESS_MULTIPLIER,
)
from healthcover.errors import InvalidData
from healthcover.models import AssessmentFlags, AssessmentReport, PredictiveTrend
from healthcover.policies import require_owned_policy
from healthcover.scoring import age_risk_factor, health_score, lifestyle_score, risk_category
from healthcover.state import ContractState

LOGGER = logging.getLogger(__name__)

ADJUSTMENT_REASON = "HEALTH_OPTIMIZATION"

INTERVENTION_RECOMMENDATIONS: tuple[str, ...] = (
	"Increase daily activity to at least 8,000 steps",
	"Keep a consistent sleep schedule of 7 to 9 hours",
	"Book an annual preventive health screening",
	"Practice a daily stress-reduction routine",
)

_CONFIDENCE_PREDICTIVE = 92
_CONFIDENCE_STANDARD = 78


def premium_composite(health: int, lifestyle: int, age_factor: int) -> int:
	return health * 40 // 100 + lifestyle * 30 // 100 + age_factor * 20 // 100


def premium_multiplier(composite: int, *, wellness: bool) -> int:
	"""Pick the premium multiplier (percent of base) for a composite score."""

	if composite >= 90:
		multiplier = WELLNESS_MULTIPLIER if wellness else MIN_PREMIUM_MULTIPLIER
	elif composite >= 70:
		multiplier = 100
	elif composite >= 50:
		multiplier = 130
	else:
		multiplier = 180
	return max(MIN_PREMIUM_MULTIPLIER, min(multiplier, MAX_PREMIUM_MULTIPLIER))


def predictive_trend(health: int, lifestyle: int, *, enabled: bool) -> PredictiveTrend:
	"""Illustrative six-month projection; never feeds back into pricing."""

	if not enabled:
		return PredictiveTrend()
	return PredictiveTrend(
		projected_health_score_6m=health + 5,
		projected_lifestyle_score_6m=lifestyle + 8,
		chronic_disease_probability=15,
		preventive_care_effectiveness=85,
		intervention_success_rate=78,
		risk_trend="IMPROVING",
	)


def assess_and_optimize(
	state: ContractState,
	caller: str,
	policy_id: int,
	flags: AssessmentFlags,
	block: int,
) -> AssessmentReport:
	"""Score the policyholder, reprice the policy and append an audit record."""

	policy = require_owned_policy(state, policy_id, caller)
	profile = state.health_profiles.get(caller)
	if profile is None:
		raise InvalidData(f"{caller} has no health profile")
	metrics = state.lifestyle_metrics.get(caller)
	if metrics is None:
		raise InvalidData(f"{caller} has no lifestyle metrics")

	health = health_score(profile)
	lifestyle = lifestyle_score(metrics)
	age_factor = age_risk_factor(profile.age)
	composite = premium_composite(health, lifestyle, age_factor)

	multiplier = premium_multiplier(composite, wellness=flags.wellness)
	optimized = policy.base_premium * multiplier // 100
	old_premium = policy.current_premium
	category = risk_category(health, lifestyle, GENETIC_SCORE_PLACEHOLDER)

	report = AssessmentReport(
		policy_id=policy_id,
		assessment_timestamp=block,
		current_risk_category=category,
		health_score=health,
		lifestyle_score=lifestyle,
		age_risk_factor=age_factor,
		composite_risk_score=composite,
		current_premium=old_premium,
		optimized_premium=optimized,
		premium_adjustment=optimized - old_premium,
		premium_multiplier=multiplier,
		predictive_trend=predictive_trend(health, lifestyle, enabled=flags.predictive),
		wellness_incentives_active=flags.wellness,
		continuous_monitoring_enabled=flags.continuous_monitoring,
		intervention_recommendations=list(INTERVENTION_RECOMMENDATIONS) if flags.generate_recommendations else [],
		next_assessment_due=block + PREMIUM_ADJUSTMENT_PERIOD,
		confidence_score=_CONFIDENCE_PREDICTIVE if flags.predictive else _CONFIDENCE_STANDARD,
	)

	policy.current_premium = optimized
	policy.risk_category = category
	policy.last_premium_adjustment = block
	state.latest_reports[policy_id] = report.model_copy(deep=True)

	record_premium_adjustment(
		state,
		policy_id=policy_id,
		timestamp=block,
		old_premium=old_premium,
		new_premium=optimized,
		reason=ADJUSTMENT_REASON,
		health_score=health,
		lifestyle_score=lifestyle,
	)
	LOGGER.info(
		"policy %s repriced %s -> %s (composite=%s multiplier=%s category=%s)",
		policy_id,
		old_premium,
		optimized,
		composite,
		multiplier,
		category,
	)
	return report


def optimization_event_payload(report: AssessmentReport) -> dict[str, Any]:
	"""Report plus savings potential and the next scheduled assessment."""

	payload = report.model_dump()
	payload["savings_potential"] = max(0, report.current_premium - report.optimized_premium)
	payload["next_assessment"] = report.assessment_timestamp + PREMIUM_ADJUSTMENT_PERIOD
	return payload
