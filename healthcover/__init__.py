"""HealthCover: dynamic health-insurance premiums driven by health and lifestyle data."""
