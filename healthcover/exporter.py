"""Render assessment reports as DOCX documents."""
from __future__ import annotations

import io
from typing import Any

from docx import Document

from healthcover.models import AssessmentReport


def _add_table(document: Any, title: str, rows: list[tuple[str, Any]]) -> None:
    document.add_heading(title, level=2)
    table = document.add_table(rows=1, cols=2)
    header = table.rows[0].cells
    header[0].text = "Field"
    header[1].text = "Value"
    for label, value in rows:
        cells = table.add_row().cells
        cells[0].text = label
        cells[1].text = str(value)


def build_assessment_docx(report: AssessmentReport) -> bytes:
    """Return DOCX bytes summarising one premium assessment."""

    document = Document()
    document.add_heading(f"Premium assessment for policy {report.policy_id}", level=1)
    document.add_paragraph(
        f"Assessed at block {report.assessment_timestamp}. "
        f"Risk category: {report.current_risk_category}. "
        f"Next assessment due at block {report.next_assessment_due}."
    )

    _add_table(
        document,
        "Scores",
        [
            ("Health score", report.health_score),
            ("Lifestyle score", report.lifestyle_score),
            ("Age risk factor", report.age_risk_factor),
            ("Composite risk score", report.composite_risk_score),
            ("Confidence", report.confidence_score),
        ],
    )

    _add_table(
        document,
        "Premium",
        [
            ("Previous premium", report.current_premium),
            ("Optimized premium", report.optimized_premium),
            ("Adjustment", f"{report.premium_adjustment:+d}"),
            ("Multiplier (%)", report.premium_multiplier),
            ("Wellness incentives", "yes" if report.wellness_incentives_active else "no"),
            ("Continuous monitoring", "yes" if report.continuous_monitoring_enabled else "no"),
        ],
    )

    trend = report.predictive_trend
    _add_table(
        document,
        "Six-month outlook",
        [
            ("Projected health score", trend.projected_health_score_6m),
            ("Projected lifestyle score", trend.projected_lifestyle_score_6m),
            ("Chronic disease probability (%)", trend.chronic_disease_probability),
            ("Preventive care effectiveness (%)", trend.preventive_care_effectiveness),
            ("Intervention success rate (%)", trend.intervention_success_rate),
            ("Trend", trend.risk_trend),
        ],
    )

    if report.intervention_recommendations:
        document.add_heading("Recommendations", level=2)
        for item in report.intervention_recommendations:
            document.add_paragraph(item, style="List Bullet")

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
