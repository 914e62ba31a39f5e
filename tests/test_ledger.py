from __future__ import annotations

import pytest

from healthcover.chain import FrozenClock
from healthcover.contract import HealthInsuranceContract
from healthcover.errors import LedgerConflict, Unauthorized


def _enrol(contract: HealthInsuranceContract, principal: str) -> int:
	contract.create_health_profile(
		principal, age=50, bmi=230, systolic=130, diastolic=85, cholesterol=210, is_smoker=False, exercise_frequency=4
	)
	contract.update_lifestyle_metrics(principal, steps=8500, sleep_hours=7, stress=3, diet_score=70, mental_score=75)
	return contract.create_policy(principal)


def test_adjustments_are_listed_per_policy_in_order() -> None:
	contract = HealthInsuranceContract()
	alice_policy = _enrol(contract, "alice")
	bob_policy = _enrol(contract, "bob")

	reports = [contract.assess_and_optimize("alice", alice_policy) for _ in range(3)]
	contract.assess_and_optimize("bob", bob_policy)

	records = contract.get_policy_adjustments(alice_policy)
	assert [record.timestamp for record in records] == [report.assessment_timestamp for report in reports]
	assert all(record.policy_id == alice_policy for record in records)

	middle = reports[1].assessment_timestamp
	bounded = contract.get_policy_adjustments(alice_policy, since=middle, until=middle)
	assert [record.timestamp for record in bounded] == [middle]
	assert len(contract.get_policy_adjustments(bob_policy)) == 1


def test_same_block_assessment_conflicts_and_rolls_back() -> None:
	contract = HealthInsuranceContract(clock=FrozenClock(height=10))
	policy_id = _enrol(contract, "alice")
	contract.assess_and_optimize("alice", policy_id, wellness=True)
	after_first = contract.get_policy(policy_id)
	events_before = len(contract.events.all())

	with pytest.raises(LedgerConflict):
		contract.assess_and_optimize("alice", policy_id)

	assert contract.get_policy(policy_id) == after_first
	assert len(contract.get_policy_adjustments(policy_id)) == 1
	assert len(contract.events.all()) == events_before


def test_state_survives_restart(tmp_path) -> None:
	path = tmp_path / "ledger" / "state.json"
	contract = HealthInsuranceContract(state_path=path)
	policy_id = _enrol(contract, "alice")
	report = contract.assess_and_optimize("alice", policy_id)
	assert path.exists()

	reopened = HealthInsuranceContract(state_path=path)
	policy = reopened.get_policy(policy_id)
	assert policy is not None
	assert policy.current_premium == report.optimized_premium
	assert reopened.get_premium_adjustment(policy_id, report.assessment_timestamp) is not None
	assert reopened.clock.now() == report.assessment_timestamp

	next_report = reopened.assess_and_optimize("alice", policy_id)
	assert next_report.assessment_timestamp > report.assessment_timestamp
	assert len(reopened.get_policy_adjustments(policy_id)) == 2


def test_preview_risk_category_writes_nothing() -> None:
	contract = HealthInsuranceContract()
	policy_id = _enrol(contract, "alice")
	before = contract.get_policy(policy_id)

	assert contract.preview_risk_category("alice") in {"LOW_RISK", "MODERATE_RISK"}
	assert contract.get_policy(policy_id) == before


def test_events_and_latest_report_survive_restart(tmp_path) -> None:
	path = tmp_path / "ledger" / "state.json"
	contract = HealthInsuranceContract(state_path=path)
	policy_id = _enrol(contract, "alice")
	report = contract.assess_and_optimize("alice", policy_id, generate_recommendations=True)
	names = [event.name for event in contract.events.all()]

	reopened = HealthInsuranceContract(state_path=path)
	assert [event.name for event in reopened.events.all()] == names
	event = reopened.events.latest("premium-optimized", policy_id=policy_id)
	assert event is not None
	assert event.payload["optimized_premium"] == report.optimized_premium
	assert reopened.get_latest_report(policy_id) == report


def test_event_log_keeps_newest_entries() -> None:
	contract = HealthInsuranceContract(event_limit=3)
	policy_id = _enrol(contract, "alice")
	contract.assess_and_optimize("alice", policy_id)

	names = [event.name for event in contract.events.all()]
	assert names == ["lifestyle-updated", "policy-created", "premium-optimized"]
	assert contract.get_latest_report(policy_id) is not None


def test_rejected_operation_records_no_event() -> None:
	contract = HealthInsuranceContract()
	policy_id = _enrol(contract, "alice")
	before = contract.events.all()

	with pytest.raises(Unauthorized):
		contract.assess_and_optimize("mallory", policy_id)

	assert contract.events.all() == before
	assert contract.get_latest_report(policy_id) is None
