"""Policy issuance and premium payment."""

from __future__ import annotations

from healthcover.chain import transfer
from healthcover.config import BASE_PREMIUM, CLAIM_HISTORY_DEFAULT, CONTRACT_PRINCIPAL
from healthcover.errors import InvalidData, PolicyNotFound, Unauthorized
from healthcover.models import PENDING_ASSESSMENT, STATUS_ACTIVE, InsurancePolicy
from healthcover.state import ContractState


def create_policy(
	state: ContractState,
	caller: str,
	block: int,
	*,
	base_premium: int = BASE_PREMIUM,
) -> InsurancePolicy:
	"""Issue an ACTIVE policy at the base premium for a caller with a health profile."""

	if caller not in state.health_profiles:
		raise InvalidData("a health profile is required before creating a policy")

	policy_id = state.next_policy_id
	policy = InsurancePolicy(
		policy_id=policy_id,
		policyholder=caller,
		current_premium=base_premium,
		base_premium=base_premium,
		risk_category=PENDING_ASSESSMENT,
		status=STATUS_ACTIVE,
		created_at=block,
		last_premium_adjustment=block,
		total_premiums_paid=0,
		claim_history_score=CLAIM_HISTORY_DEFAULT,
	)
	state.policies[policy_id] = policy
	state.next_policy_id = policy_id + 1
	return policy


def require_owned_policy(state: ContractState, policy_id: int, caller: str) -> InsurancePolicy:
	"""Return an ACTIVE policy owned by ``caller``.

	Checks run in order: existence, ownership, status.
	"""

	policy = state.policies.get(policy_id)
	if policy is None:
		raise PolicyNotFound(f"policy {policy_id} does not exist")
	if policy.policyholder != caller:
		raise Unauthorized(f"{caller} does not hold policy {policy_id}")
	if policy.status != STATUS_ACTIVE:
		raise PolicyNotFound(f"policy {policy_id} is {policy.status}")
	return policy


def pay_premium(
	state: ContractState,
	caller: str,
	policy_id: int,
	*,
	custodian: str = CONTRACT_PRINCIPAL,
) -> InsurancePolicy:
	"""Collect exactly the current premium from the policyholder."""

	policy = require_owned_policy(state, policy_id, caller)
	amount = policy.current_premium
	transfer(state.balances, amount, caller, custodian)

	policy.total_premiums_paid += amount
	state.total_premiums_collected += amount
	return policy


def get_policy(state: ContractState, policy_id: int) -> InsurancePolicy | None:
	return state.policies.get(policy_id)


def get_contract_stats(state: ContractState) -> dict[str, int]:
	return {
		"total_policies": state.next_policy_id - 1,
		"total_premiums_collected": state.total_premiums_collected,
		"platform_revenue": state.platform_revenue,
		"next_policy_id": state.next_policy_id,
	}
