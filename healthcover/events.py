"""Observability events emitted by contract operations."""

from __future__ import annotations

import logging
from typing import Any

from healthcover.config import EVENT_LOG_LIMIT, LOG_LEVEL
from healthcover.models import ContractEvent
from healthcover.state import ContractState, StateStore

LOGGER = logging.getLogger(__name__)
_configured = False


def configure_logging(level: str | None = None) -> None:
	"""Attach a stream handler to the ``healthcover`` logger tree once."""

	global _configured
	root = logging.getLogger("healthcover")
	root.setLevel((level or LOG_LEVEL).upper())
	if _configured:
		return
	handler = logging.StreamHandler()
	handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
	root.addHandler(handler)
	_configured = True


class EventLog:
	"""Events kept in contract state, newest last.

	Operations append their events inside the same transaction as their
	other writes, so events are persisted and rolled back together with the
	state. Only the newest ``limit`` events are retained.
	"""

	def __init__(self, store: StateStore, limit: int = EVENT_LOG_LIMIT) -> None:
		self._store = store
		self._limit = limit

	def record(self, state: ContractState, events: list[ContractEvent]) -> None:
		state.events.extend(events)
		overflow = len(state.events) - self._limit
		if overflow > 0:
			del state.events[:overflow]

	def announce(self, events: list[ContractEvent]) -> None:
		for event in events:
			LOGGER.info("event %s at block %s", event.name, event.block)

	def all(self, name: str | None = None) -> list[ContractEvent]:
		with self._store.read() as state:
			return [event.model_copy() for event in state.events if name is None or event.name == name]

	def latest(self, name: str, **match: Any) -> ContractEvent | None:
		for event in reversed(self.all(name)):
			if all(event.payload.get(key) == value for key, value in match.items()):
				return event
		return None
