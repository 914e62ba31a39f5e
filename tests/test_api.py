from __future__ import annotations

from io import BytesIO
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from healthcover.config import BASE_PREMIUM
from healthcover.contract import HealthInsuranceContract
from healthcover.main import app, get_contract

ALICE = {"X-Principal": "alice"}
BOB = {"X-Principal": "bob"}

HEALTH = {
	"age": 70,
	"bmi": 220,
	"systolic": 118,
	"diastolic": 78,
	"cholesterol": 180,
	"is_smoker": False,
	"exercise_frequency": 5,
}
LIFESTYLE = {"steps": 9000, "sleep_hours": 8, "stress": 2, "diet_score": 90, "mental_score": 85}


@pytest.fixture()
def client() -> Iterator[TestClient]:
	contract = HealthInsuranceContract()
	app.dependency_overrides[get_contract] = lambda: contract
	yield TestClient(app)
	app.dependency_overrides.clear()


def _enrol(client: TestClient) -> int:
	assert client.post("/profile/health", json=HEALTH, headers=ALICE).status_code == 200
	assert client.post("/profile/lifestyle", json=LIFESTYLE, headers=ALICE).status_code == 200
	response = client.post("/policy", headers=ALICE)
	assert response.status_code == 200, response.text
	return response.json()["policy_id"]


def test_health_endpoint(client: TestClient) -> None:
	response = client.get("/health")
	assert response.status_code == 200
	assert response.json()["ok"] is True


def test_principal_header_required(client: TestClient) -> None:
	response = client.post("/policy")
	assert response.status_code == 401


def test_invalid_profile_maps_to_400(client: TestClient) -> None:
	response = client.post("/profile/health", json={**HEALTH, "age": 12}, headers=ALICE)
	assert response.status_code == 400
	assert response.json()["detail"]["error"] == "InvalidData"
	assert response.json()["detail"]["code"] == 101


def test_policy_without_profile(client: TestClient) -> None:
	response = client.post("/policy", headers=ALICE)
	assert response.status_code == 400
	assert client.get("/stats").json()["next_policy_id"] == 1


def test_assess_flow(client: TestClient) -> None:
	policy_id = _enrol(client)

	response = client.post(
		f"/policy/{policy_id}/assess",
		json={"predictive": True, "generate_recommendations": True},
		headers=ALICE,
	)
	assert response.status_code == 200, response.text
	body = response.json()
	assert "audit_hash" in body
	report = body["report"]
	assert report["premium_multiplier"] == 50
	assert report["optimized_premium"] == BASE_PREMIUM // 2
	assert report["confidence_score"] == 92
	assert len(report["intervention_recommendations"]) == 4

	policy = client.get(f"/policy/{policy_id}").json()["policy"]
	assert policy["current_premium"] == BASE_PREMIUM // 2
	assert policy["risk_category"] == "LOW_RISK"

	adjustments = client.get(f"/policy/{policy_id}/adjustments").json()["adjustments"]
	assert len(adjustments) == 1
	assert adjustments[0]["old_premium"] == BASE_PREMIUM

	events = client.get("/events", params={"name": "premium-optimized"}).json()["events"]
	assert events[-1]["payload"]["savings_potential"] == BASE_PREMIUM - BASE_PREMIUM // 2


def test_assess_by_stranger_is_forbidden(client: TestClient) -> None:
	policy_id = _enrol(client)
	response = client.post(f"/policy/{policy_id}/assess", json={}, headers=BOB)
	assert response.status_code == 403
	assert response.json()["detail"]["error"] == "Unauthorized"


def test_unknown_policy_is_404(client: TestClient) -> None:
	assert client.get("/policy/99").status_code == 404
	assert client.post("/policy/99/assess", json={}, headers=ALICE).status_code == 404


def test_payment_flow(client: TestClient) -> None:
	policy_id = _enrol(client)

	response = client.post(f"/policy/{policy_id}/pay", headers=ALICE)
	assert response.status_code == 402
	assert response.json()["detail"]["error"] == "TransferFailed"

	assert client.post("/faucet", json={"amount": BASE_PREMIUM}, headers=ALICE).json()["balance"] == BASE_PREMIUM
	response = client.post(f"/policy/{policy_id}/pay", headers=ALICE)
	assert response.status_code == 200, response.text
	assert response.json()["policy"]["total_premiums_paid"] == BASE_PREMIUM
	assert client.get("/stats").json()["total_premiums_collected"] == BASE_PREMIUM


def test_profile_lookup(client: TestClient) -> None:
	_enrol(client)
	body = client.get("/profile/alice").json()
	assert body["profile"]["age"] == HEALTH["age"]
	assert body["lifestyle"]["social_activity_level"] == 50
	assert client.get("/profile/nobody").status_code == 404


def test_assessment_report_docx(client: TestClient) -> None:
	docx_module = pytest.importorskip("docx")
	document_cls = docx_module.Document

	policy_id = _enrol(client)
	assert client.get(f"/policy/{policy_id}/report.docx").status_code == 404

	client.post(f"/policy/{policy_id}/assess", json={"generate_recommendations": True}, headers=ALICE)
	response = client.get(f"/policy/{policy_id}/report.docx")
	assert response.status_code == 200
	assert (
		response.headers.get("content-type")
		== "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
	)

	doc = document_cls(BytesIO(response.content))
	texts = [p.text for p in doc.paragraphs if p.text.strip()]
	assert any(f"policy {policy_id}" in text for text in texts)
	assert any("8,000 steps" in text for text in texts)
	assert len(doc.tables) == 3


@pytest.mark.parametrize("field", ["is_smoker", "exercise_frequency"])
def test_profile_fields_are_required(client: TestClient, field: str) -> None:
	payload = {key: value for key, value in HEALTH.items() if key != field}
	response = client.post("/profile/health", json=payload, headers=ALICE)
	assert response.status_code == 422
	assert client.get("/profile/alice").status_code == 404


def test_negative_lifestyle_value_maps_to_400(client: TestClient) -> None:
	response = client.post("/profile/lifestyle", json={**LIFESTYLE, "mental_score": -1001}, headers=ALICE)
	assert response.status_code == 400
	assert response.json()["detail"]["error"] == "InvalidData"


def test_report_docx_after_restart(tmp_path) -> None:
	pytest.importorskip("docx")
	path = tmp_path / "state.json"
	first = HealthInsuranceContract(state_path=path)
	app.dependency_overrides[get_contract] = lambda: first
	try:
		client = TestClient(app)
		policy_id = _enrol(client)
		assert client.post(f"/policy/{policy_id}/assess", json={}, headers=ALICE).status_code == 200

		reopened = HealthInsuranceContract(state_path=path)
		app.dependency_overrides[get_contract] = lambda: reopened
		response = client.get(f"/policy/{policy_id}/report.docx")
		assert response.status_code == 200
		assert len(response.content) > 1024
		events = client.get("/events", params={"name": "premium-optimized"}).json()["events"]
		assert len(events) == 1
	finally:
		app.dependency_overrides.clear()
