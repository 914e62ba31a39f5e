"""Public entry point for every contract operation.

Each mutating call mines a block, runs inside a single state transaction
and records its events in the same transaction as its other writes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, TypeVar

from healthcover import audit, policies, profiles
from healthcover.chain import BlockClock, balance_of, mint
from healthcover.config import BASE_PREMIUM, CONTRACT_PRINCIPAL, DATA_ROOT, EVENT_LOG_LIMIT, PERSIST_STATE
from healthcover.errors import ContractError, InvalidData
from healthcover.events import EventLog
from healthcover.models import (
	AssessmentFlags,
	AssessmentReport,
	ContractEvent,
	GeneticRiskFactors,
	HealthProfile,
	InsurancePolicy,
	LifestyleMetrics,
	PremiumAdjustment,
	RiskCategory,
)
from healthcover.optimizer import assess_and_optimize, optimization_event_payload
from healthcover.scoring import health_score, lifestyle_score, risk_category
from healthcover.state import ContractState, StateStore

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def default_state_path() -> Path | None:
	if not PERSIST_STATE:
		return None
	return Path(DATA_ROOT) / "ledger" / "state.json"


class HealthInsuranceContract:
	def __init__(
		self,
		*,
		clock: BlockClock | None = None,
		state_path: Path | None = None,
		base_premium: int = BASE_PREMIUM,
		custodian: str = CONTRACT_PRINCIPAL,
		event_limit: int = EVENT_LOG_LIMIT,
	) -> None:
		self.store = StateStore(state_path)
		self.clock = clock or BlockClock()
		self.clock.fast_forward(self.store.state.last_block)
		self.events = EventLog(self.store, limit=event_limit)
		self.base_premium = base_premium
		self.custodian = custodian

	def _execute(
		self,
		operation: str,
		caller: str,
		body: Callable[[ContractState, int, list[ContractEvent]], T],
	) -> T:
		block = self.clock.mine()
		staged: list[ContractEvent] = []
		try:
			with self.store.transaction() as state:
				result = body(state, block, staged)
				state.last_block = block
				self.events.record(state, staged)
		except ContractError as exc:
			LOGGER.warning("%s by %s rejected at block %s: %s (%s)", operation, caller, block, exc.kind, exc.message)
			raise
		self.events.announce(staged)
		return result

	# -- intake ---------------------------------------------------------

	def create_health_profile(
		self,
		caller: str,
		*,
		age: int,
		bmi: int,
		systolic: int,
		diastolic: int,
		cholesterol: int,
		is_smoker: bool,
		exercise_frequency: int,
	) -> HealthProfile:
		def body(state: ContractState, block: int, staged: list[ContractEvent]) -> HealthProfile:
			profile = profiles.create_health_profile(
				state,
				caller,
				block,
				age=age,
				bmi=bmi,
				systolic=systolic,
				diastolic=diastolic,
				cholesterol=cholesterol,
				is_smoker=is_smoker,
				exercise_frequency=exercise_frequency,
			)
			staged.append(ContractEvent(name="health-profile-created", block=block, payload={"user": caller}))
			return profile.model_copy()

		return self._execute("create-health-profile", caller, body)

	def update_lifestyle_metrics(
		self,
		caller: str,
		*,
		steps: int,
		sleep_hours: int,
		stress: int,
		diet_score: int,
		mental_score: int,
	) -> LifestyleMetrics:
		def body(state: ContractState, block: int, staged: list[ContractEvent]) -> LifestyleMetrics:
			metrics = profiles.update_lifestyle_metrics(
				state,
				caller,
				block,
				steps=steps,
				sleep_hours=sleep_hours,
				stress=stress,
				diet_score=diet_score,
				mental_score=mental_score,
			)
			staged.append(ContractEvent(name="lifestyle-updated", block=block, payload={"user": caller}))
			return metrics.model_copy()

		return self._execute("update-lifestyle-metrics", caller, body)

	# -- policy lifecycle -----------------------------------------------

	def create_policy(self, caller: str) -> int:
		def body(state: ContractState, block: int, staged: list[ContractEvent]) -> int:
			policy = policies.create_policy(state, caller, block, base_premium=self.base_premium)
			staged.append(
				ContractEvent(
					name="policy-created",
					block=block,
					payload={"policy_id": policy.policy_id, "policyholder": caller, "premium": policy.current_premium},
				)
			)
			return policy.policy_id

		return self._execute("create-policy", caller, body)

	def pay_premium(self, caller: str, policy_id: int) -> InsurancePolicy:
		def body(state: ContractState, block: int, staged: list[ContractEvent]) -> InsurancePolicy:
			policy = policies.pay_premium(state, caller, policy_id, custodian=self.custodian)
			staged.append(
				ContractEvent(
					name="premium-paid",
					block=block,
					payload={
						"policy_id": policy_id,
						"amount": policy.current_premium,
						"total_paid": policy.total_premiums_paid,
					},
				)
			)
			return policy.model_copy()

		return self._execute("pay-premium", caller, body)

	def assess_and_optimize(
		self,
		caller: str,
		policy_id: int,
		*,
		predictive: bool = False,
		wellness: bool = False,
		continuous_monitoring: bool = False,
		generate_recommendations: bool = False,
	) -> AssessmentReport:
		flags = AssessmentFlags(
			predictive=predictive,
			wellness=wellness,
			continuous_monitoring=continuous_monitoring,
			generate_recommendations=generate_recommendations,
		)

		def body(state: ContractState, block: int, staged: list[ContractEvent]) -> AssessmentReport:
			report = assess_and_optimize(state, caller, policy_id, flags, block)
			staged.append(
				ContractEvent(name="premium-optimized", block=block, payload=optimization_event_payload(report))
			)
			return report

		return self._execute("assess-and-optimize", caller, body)

	# -- platform helpers -----------------------------------------------

	def fund(self, principal: str, amount: int) -> int:
		"""Credit ``principal`` with test tokens and return the new balance."""

		return self._execute("fund", principal, lambda state, block, staged: mint(state.balances, principal, amount))

	def balance(self, principal: str) -> int:
		with self.store.read() as state:
			return balance_of(state.balances, principal)

	# -- read-only queries ----------------------------------------------

	def get_health_profile(self, identity: str) -> HealthProfile | None:
		with self.store.read() as state:
			return _copy(profiles.get_health_profile(state, identity))

	def get_lifestyle_metrics(self, identity: str) -> LifestyleMetrics | None:
		with self.store.read() as state:
			return _copy(profiles.get_lifestyle_metrics(state, identity))

	def get_genetic_risk_factors(self, identity: str) -> GeneticRiskFactors | None:
		with self.store.read() as state:
			return _copy(profiles.get_genetic_risk_factors(state, identity))

	def get_policy(self, policy_id: int) -> InsurancePolicy | None:
		with self.store.read() as state:
			return _copy(policies.get_policy(state, policy_id))

	def get_premium_adjustment(self, policy_id: int, timestamp: int) -> PremiumAdjustment | None:
		with self.store.read() as state:
			return _copy(audit.get_premium_adjustment(state, policy_id, timestamp))

	def get_policy_adjustments(
		self,
		policy_id: int,
		*,
		since: int | None = None,
		until: int | None = None,
	) -> list[PremiumAdjustment]:
		with self.store.read() as state:
			records = audit.list_policy_adjustments(state, policy_id, since=since, until=until)
			return [record.model_copy() for record in records]

	def get_latest_report(self, policy_id: int) -> AssessmentReport | None:
		with self.store.read() as state:
			return _copy(state.latest_reports.get(policy_id))

	def get_contract_stats(self) -> dict[str, int]:
		with self.store.read() as state:
			return policies.get_contract_stats(state)

	def preview_risk_category(self, identity: str) -> RiskCategory:
		"""Category the identity's stored data maps to right now; writes nothing."""

		with self.store.read() as state:
			profile = state.health_profiles.get(identity)
			metrics = state.lifestyle_metrics.get(identity)
			if profile is None or metrics is None:
				raise InvalidData(f"{identity} needs both a health profile and lifestyle metrics")
			return risk_category(health_score(profile), lifestyle_score(metrics))


def _copy(record):
	return record.model_copy(deep=True) if record is not None else None
