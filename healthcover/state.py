"""Contract state container with serialized, all-or-nothing transactions."""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from pydantic import BaseModel, Field

from healthcover.models import (
	AssessmentReport,
	ContractEvent,
	GeneticRiskFactors,
	HealthProfile,
	InsurancePolicy,
	LifestyleMetrics,
	PremiumAdjustment,
)

LOGGER = logging.getLogger(__name__)


def adjustment_key(policy_id: int, timestamp: int) -> str:
	return f"{policy_id}:{timestamp}"


class ContractState(BaseModel):
	"""Every keyed map and counter owned by the contract."""

	health_profiles: dict[str, HealthProfile] = Field(default_factory=dict)
	lifestyle_metrics: dict[str, LifestyleMetrics] = Field(default_factory=dict)
	genetic_risk_factors: dict[str, GeneticRiskFactors] = Field(default_factory=dict)
	policies: dict[int, InsurancePolicy] = Field(default_factory=dict)
	premium_adjustments: dict[str, PremiumAdjustment] = Field(default_factory=dict)
	adjustment_index: dict[int, list[int]] = Field(default_factory=dict)
	next_policy_id: int = 1
	total_premiums_collected: int = 0
	platform_revenue: int = 0
	balances: dict[str, int] = Field(default_factory=dict)
	last_block: int = 0
	events: list[ContractEvent] = Field(default_factory=list)
	latest_reports: dict[int, AssessmentReport] = Field(default_factory=dict)


def _write_json(target: Path, payload: Any) -> None:
	target.parent.mkdir(parents=True, exist_ok=True)
	tmp = target.with_suffix(".tmp")
	tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
	tmp.replace(target)


def _load_state(path: Path) -> ContractState:
	if not path.exists():
		return ContractState()
	try:
		return ContractState.model_validate_json(path.read_text(encoding="utf-8"))
	except ValueError:
		LOGGER.error("state file %s is unreadable; refusing to start from it", path)
		raise


class StateStore:
	"""Owns the live :class:`ContractState` and applies one operation at a time.

	``transaction()`` snapshots the state before yielding it. If the body
	raises, the snapshot is reinstated, so rejected operations leave no
	trace. With ``path`` set, committed state is written to disk before the
	lock is released; a failed write rolls the transaction back as well.

	The snapshot is a deep copy of the whole state, so its cost grows with
	the audit ledger. The event list is capped, the ledger is not.
	"""

	def __init__(self, path: Path | None = None) -> None:
		self._lock = threading.RLock()
		self._path = path
		self.state = _load_state(path) if path is not None else ContractState()

	@property
	def path(self) -> Path | None:
		return self._path

	def _persist(self) -> None:
		if self._path is None:
			return
		try:
			_write_json(self._path, self.state.model_dump(mode="json"))
		except OSError:
			LOGGER.error("unable to persist contract state to %s", self._path)
			raise

	@contextmanager
	def transaction(self) -> Iterator[ContractState]:
		with self._lock:
			snapshot = self.state.model_copy(deep=True)
			try:
				yield self.state
				self._persist()
			except BaseException:
				self.state = snapshot
				raise

	@contextmanager
	def read(self) -> Iterator[ContractState]:
		with self._lock:
			yield self.state
