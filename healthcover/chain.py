"""Host platform primitives: block-height clock and fungible token balances."""

from __future__ import annotations

import logging
import threading

from healthcover.errors import TransferFailed

LOGGER = logging.getLogger(__name__)


class BlockClock:
	"""Monotonic block-height source.

	Contract operations call :meth:`mine` once per transaction, so each
	operation observes its own height.
	"""

	def __init__(self, height: int = 0) -> None:
		self._height = height
		self._lock = threading.Lock()

	def now(self) -> int:
		return self._height

	def mine(self) -> int:
		with self._lock:
			self._height += 1
			return self._height

	def fast_forward(self, height: int) -> None:
		"""Advance to ``height`` if it lies ahead of the current block."""

		with self._lock:
			if height > self._height:
				self._height = height


class FrozenClock(BlockClock):
	"""Clock that never advances; useful when several calls must share a block."""

	def mine(self) -> int:
		return self.now()


def balance_of(balances: dict[str, int], principal: str) -> int:
	return balances.get(principal, 0)


def mint(balances: dict[str, int], principal: str, amount: int) -> int:
	if amount <= 0:
		raise TransferFailed(TransferFailed.NON_POSITIVE_AMOUNT, "mint amount must be positive")
	balances[principal] = balance_of(balances, principal) + amount
	return balances[principal]


def transfer(balances: dict[str, int], amount: int, sender: str, recipient: str) -> None:
	"""Move ``amount`` units from ``sender`` to ``recipient`` or raise TransferFailed."""

	if amount <= 0:
		raise TransferFailed(TransferFailed.NON_POSITIVE_AMOUNT, "transfer amount must be positive")
	if sender == recipient:
		raise TransferFailed(TransferFailed.SAME_PRINCIPAL, "sender and recipient are the same principal")
	available = balance_of(balances, sender)
	if available < amount:
		raise TransferFailed(
			TransferFailed.INSUFFICIENT_BALANCE,
			f"{sender} holds {available}, needs {amount}",
		)
	balances[sender] = available - amount
	balances[recipient] = balance_of(balances, recipient) + amount
	LOGGER.debug("transfer %s -> %s amount=%s", sender, recipient, amount)
