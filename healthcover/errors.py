"""Error kinds raised by contract operations."""

from __future__ import annotations


class ContractError(Exception):
	"""Base class for every rejected contract operation.

	``code`` is the stable numeric error code and ``kind`` the symbolic name
	exposed to callers.
	"""

	code: int = 0
	kind: str = "ContractError"

	def __init__(self, message: str | None = None) -> None:
		self.message = message or self.kind
		super().__init__(self.message)

	def to_dict(self) -> dict[str, object]:
		return {"error": self.kind, "code": self.code, "message": self.message}


class Unauthorized(ContractError):
	code = 100
	kind = "Unauthorized"


class InvalidData(ContractError):
	code = 101
	kind = "InvalidData"


class PolicyNotFound(ContractError):
	code = 102
	kind = "PolicyNotFound"


# Reserved for future checks; nothing raises these yet.
class InsufficientPremium(ContractError):
	code = 103
	kind = "InsufficientPremium"


class HealthDataAccessDenied(ContractError):
	code = 104
	kind = "HealthDataAccessDenied"


class InvalidRiskCategory(ContractError):
	code = 105
	kind = "InvalidRiskCategory"


class PremiumCalculationError(ContractError):
	code = 106
	kind = "PremiumCalculationError"


class TransferFailed(ContractError):
	"""Value transfer rejected by the token ledger."""

	kind = "TransferFailed"

	INSUFFICIENT_BALANCE = 1
	SAME_PRINCIPAL = 2
	NON_POSITIVE_AMOUNT = 3

	def __init__(self, transfer_code: int, message: str | None = None) -> None:
		self.code = transfer_code
		super().__init__(message or f"transfer failed with code {transfer_code}")


class LedgerConflict(ContractError):
	"""Attempt to overwrite a write-once audit record."""

	kind = "LedgerConflict"
	code = 900
