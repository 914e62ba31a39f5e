"""Configuration constants for the HealthCover premium contract."""

from __future__ import annotations

import os
from typing import Final


def _get_bool(env_var: str, default: bool) -> bool:
	value = os.getenv(env_var)
	if value is None:
		return default
	return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int(env_var: str, default: int) -> int:
	value = os.getenv(env_var)
	if value is None or not value.strip():
		return default
	try:
		return int(value.strip())
	except ValueError as exc:
		raise ValueError(f"{env_var} must be an integer, got {value!r}") from exc


# Premium economics (micro-units, block heights)
BASE_PREMIUM: Final[int] = _get_int("HC_BASE_PREMIUM", 1_000_000)
PREMIUM_ADJUSTMENT_PERIOD: Final[int] = _get_int("HC_ADJUSTMENT_PERIOD", 4320)
MIN_PREMIUM_MULTIPLIER: Final[int] = _get_int("HC_MIN_MULTIPLIER", 50)
MAX_PREMIUM_MULTIPLIER: Final[int] = _get_int("HC_MAX_MULTIPLIER", 300)
WELLNESS_MULTIPLIER: Final[int] = 95

# Fixed reference values used by the scoring pipeline
GENETIC_SCORE_PLACEHOLDER: Final[int] = 75
SCORE_BASELINE: Final[int] = 75
CLAIM_HISTORY_DEFAULT: Final[int] = 100
SOCIAL_ACTIVITY_DEFAULT: Final[int] = 50
PREVENTIVE_CARE_DEFAULT: Final[int] = 75

CONTRACT_PRINCIPAL: Final[str] = os.getenv("HC_CONTRACT_PRINCIPAL", "healthcover.contract")

PERSIST_STATE: Final[bool] = _get_bool("HC_PERSIST_STATE", False)
DATA_ROOT: Final[str] = os.getenv("HC_DATA_ROOT", "data")
LOG_LEVEL: Final[str] = os.getenv("HC_LOG_LEVEL", "INFO")
EVENT_LOG_LIMIT: Final[int] = _get_int("HC_EVENT_LOG_LIMIT", 1000)
