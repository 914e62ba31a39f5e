"""Append-only ledger of premium adjustments.

Records are keyed by (policy id, block height) and never rewritten. A
per-policy index of timestamps backs range queries by policy.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from healthcover.config import SCORE_BASELINE
from healthcover.errors import LedgerConflict
from healthcover.models import PremiumAdjustment
from healthcover.state import ContractState, adjustment_key


def record_premium_adjustment(
	state: ContractState,
	*,
	policy_id: int,
	timestamp: int,
	old_premium: int,
	new_premium: int,
	reason: str,
	health_score: int,
	lifestyle_score: int,
) -> PremiumAdjustment:
	"""Insert a new audit record; score deltas are relative to the fixed baseline."""

	key = adjustment_key(policy_id, timestamp)
	if key in state.premium_adjustments:
		raise LedgerConflict(f"adjustment for policy {policy_id} at block {timestamp} already recorded")

	record = PremiumAdjustment(
		policy_id=policy_id,
		timestamp=timestamp,
		old_premium=old_premium,
		new_premium=new_premium,
		adjustment_reason=reason,
		health_score_change=health_score - SCORE_BASELINE,
		lifestyle_score_change=lifestyle_score - SCORE_BASELINE,
	)
	state.premium_adjustments[key] = record
	state.adjustment_index.setdefault(policy_id, []).append(timestamp)
	return record


def get_premium_adjustment(state: ContractState, policy_id: int, timestamp: int) -> PremiumAdjustment | None:
	return state.premium_adjustments.get(adjustment_key(policy_id, timestamp))


def list_policy_adjustments(
	state: ContractState,
	policy_id: int,
	*,
	since: int | None = None,
	until: int | None = None,
) -> list[PremiumAdjustment]:
	"""Return the policy's adjustments in block order, optionally bounded (inclusive)."""

	timestamps = sorted(state.adjustment_index.get(policy_id, []))
	records = []
	for timestamp in timestamps:
		if since is not None and timestamp < since:
			continue
		if until is not None and timestamp > until:
			continue
		records.append(state.premium_adjustments[adjustment_key(policy_id, timestamp)])
	return records


def audit_hash(payload: dict[str, Any]) -> str:
	material = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
	return hashlib.sha256(material.encode("utf-8")).hexdigest()
