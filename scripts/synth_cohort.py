#!/usr/bin/env python3
"""Run a synthetic cohort of policyholders through the HealthCover contract."""

from __future__ import annotations

import argparse
import json
import random
from collections import Counter, defaultdict
from pathlib import Path
from typing import Any

from healthcover.contract import HealthInsuranceContract


def _random_member(rng: random.Random) -> dict[str, Any]:
    return {
        "health": {
            "age": rng.randint(18, 100),
            "bmi": rng.randint(160, 340),
            "systolic": rng.randint(95, 180),
            "diastolic": rng.randint(60, 110),
            "cholesterol": rng.randint(140, 280),
            "is_smoker": rng.random() < 0.2,
            "exercise_frequency": rng.randint(0, 7),
        },
        "lifestyle": {
            "steps": rng.randint(1500, 15000),
            "sleep_hours": rng.randint(4, 10),
            "stress": rng.randint(1, 10),
            "diet_score": rng.randint(30, 100),
            "mental_score": rng.randint(30, 100),
        },
        "wellness": rng.random() < 0.5,
    }


def run_cohort(size: int, seed: int) -> dict[str, Any]:
    rng = random.Random(seed)
    contract = HealthInsuranceContract()
    multipliers: dict[str, Counter[int]] = defaultdict(Counter)
    premiums: list[int] = []

    for index in range(size):
        principal = f"member-{index:04d}"
        member = _random_member(rng)
        contract.create_health_profile(principal, **member["health"])
        contract.update_lifestyle_metrics(principal, **member["lifestyle"])
        policy_id = contract.create_policy(principal)
        report = contract.assess_and_optimize(principal, policy_id, wellness=member["wellness"])
        multipliers[report.current_risk_category][report.premium_multiplier] += 1
        premiums.append(report.optimized_premium)

    return {
        "seed": seed,
        "members": size,
        "mean_premium": sum(premiums) // len(premiums) if premiums else 0,
        "multipliers_by_category": {
            category: dict(sorted(counts.items())) for category, counts in sorted(multipliers.items())
        },
        "stats": contract.get_contract_stats(),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate premium assessments for a random cohort")
    parser.add_argument("--size", type=int, default=200, help="Number of synthetic policyholders")
    parser.add_argument("--seed", type=int, default=42, help="Seed for deterministic output")
    parser.add_argument("--output", type=Path, default=None, help="Optional JSON file for the summary")
    args = parser.parse_args()

    summary = run_cohort(args.size, args.seed)
    rendered = json.dumps(summary, indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(rendered, encoding="utf-8")
    print(rendered)


if __name__ == "__main__":
    main()
