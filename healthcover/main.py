"""FastAPI application exposing the HealthCover contract."""

from __future__ import annotations

from io import BytesIO
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.responses import RedirectResponse, StreamingResponse

from healthcover.audit import audit_hash
from healthcover.contract import HealthInsuranceContract, default_state_path
from healthcover.errors import ContractError, InvalidData, PolicyNotFound, TransferFailed, Unauthorized
from healthcover.events import configure_logging
from healthcover.exporter import build_assessment_docx
from healthcover.models import AssessmentFlags, FaucetRequest, HealthProfileRequest, LifestyleRequest

configure_logging()

_STATUS_BY_ERROR: dict[type[ContractError], int] = {
	Unauthorized: 403,
	InvalidData: 400,
	PolicyNotFound: 404,
	TransferFailed: 402,
}

_contract = HealthInsuranceContract(state_path=default_state_path())


def get_contract() -> HealthInsuranceContract:
	return _contract


def require_principal(x_principal: str | None = Header(None)) -> str:
	principal = (x_principal or "").strip()
	if not principal:
		raise HTTPException(status_code=401, detail="X-Principal header is required")
	return principal


def _http_error(exc: ContractError) -> HTTPException:
	status = _STATUS_BY_ERROR.get(type(exc), 409)
	return HTTPException(status_code=status, detail=exc.to_dict())


def _with_audit_hash(payload: dict[str, Any]) -> dict[str, Any]:
	response = dict(payload)
	response["audit_hash"] = audit_hash(payload)
	return response


app = FastAPI(title="HealthCover", version="0.1.0")


@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
	"""Redirect callers to the interactive documentation."""
	return RedirectResponse(url="/docs")


@app.get("/health")
async def health_check() -> dict[str, object]:
	"""Return readiness metadata for external monitors."""
	return {"ok": True, "service": "HealthCover", "version": "0.1.0"}


@app.post("/profile/health")
async def profile_health(
	request: HealthProfileRequest,
	principal: str = Depends(require_principal),
	contract: HealthInsuranceContract = Depends(get_contract),
) -> dict[str, object]:
	"""Store (or replace) the caller's health profile."""

	try:
		profile = contract.create_health_profile(
			principal,
			age=request.age,
			bmi=request.bmi,
			systolic=request.systolic,
			diastolic=request.diastolic,
			cholesterol=request.cholesterol,
			is_smoker=request.is_smoker,
			exercise_frequency=request.exercise_frequency,
		)
	except ContractError as exc:
		raise _http_error(exc) from exc
	return _with_audit_hash({"status": "ok", "profile": profile.model_dump()})


@app.post("/profile/lifestyle")
async def profile_lifestyle(
	request: LifestyleRequest,
	principal: str = Depends(require_principal),
	contract: HealthInsuranceContract = Depends(get_contract),
) -> dict[str, object]:
	"""Store (or replace) the caller's lifestyle metrics."""

	try:
		metrics = contract.update_lifestyle_metrics(
			principal,
			steps=request.steps,
			sleep_hours=request.sleep_hours,
			stress=request.stress,
			diet_score=request.diet_score,
			mental_score=request.mental_score,
		)
	except ContractError as exc:
		raise _http_error(exc) from exc
	return _with_audit_hash({"status": "ok", "lifestyle": metrics.model_dump()})


@app.get("/profile/{identity}")
async def profile_get(
	identity: str,
	contract: HealthInsuranceContract = Depends(get_contract),
) -> dict[str, object]:
	profile = contract.get_health_profile(identity)
	metrics = contract.get_lifestyle_metrics(identity)
	if profile is None and metrics is None:
		raise HTTPException(status_code=404, detail="profile not found")
	return {
		"identity": identity,
		"profile": profile.model_dump() if profile else None,
		"lifestyle": metrics.model_dump() if metrics else None,
	}


@app.post("/policy")
async def policy_create(
	principal: str = Depends(require_principal),
	contract: HealthInsuranceContract = Depends(get_contract),
) -> dict[str, object]:
	try:
		policy_id = contract.create_policy(principal)
	except ContractError as exc:
		raise _http_error(exc) from exc
	return _with_audit_hash({"status": "ok", "policy_id": policy_id})


@app.get("/policy/{policy_id}")
async def policy_get(
	policy_id: int,
	contract: HealthInsuranceContract = Depends(get_contract),
) -> dict[str, object]:
	policy = contract.get_policy(policy_id)
	if policy is None:
		raise HTTPException(status_code=404, detail=PolicyNotFound(f"policy {policy_id} does not exist").to_dict())
	return {"policy": policy.model_dump()}


@app.post("/policy/{policy_id}/pay")
async def policy_pay(
	policy_id: int,
	principal: str = Depends(require_principal),
	contract: HealthInsuranceContract = Depends(get_contract),
) -> dict[str, object]:
	"""Pay exactly the policy's current premium from the caller's balance."""

	try:
		policy = contract.pay_premium(principal, policy_id)
	except ContractError as exc:
		raise _http_error(exc) from exc
	return _with_audit_hash({"status": "ok", "policy": policy.model_dump()})


@app.post("/policy/{policy_id}/assess")
async def policy_assess(
	policy_id: int,
	flags: AssessmentFlags,
	principal: str = Depends(require_principal),
	contract: HealthInsuranceContract = Depends(get_contract),
) -> dict[str, object]:
	"""Run a premium assessment and reprice the policy."""

	try:
		report = contract.assess_and_optimize(
			principal,
			policy_id,
			predictive=flags.predictive,
			wellness=flags.wellness,
			continuous_monitoring=flags.continuous_monitoring,
			generate_recommendations=flags.generate_recommendations,
		)
	except ContractError as exc:
		raise _http_error(exc) from exc
	return _with_audit_hash({"status": "ok", "report": report.model_dump()})


@app.get("/policy/{policy_id}/adjustments")
async def policy_adjustments(
	policy_id: int,
	since: int | None = Query(None),
	until: int | None = Query(None),
	contract: HealthInsuranceContract = Depends(get_contract),
) -> dict[str, object]:
	records = contract.get_policy_adjustments(policy_id, since=since, until=until)
	return {"policy_id": policy_id, "adjustments": [record.model_dump() for record in records]}


@app.get("/policy/{policy_id}/report.docx")
async def policy_report_docx(
	policy_id: int,
	contract: HealthInsuranceContract = Depends(get_contract),
) -> StreamingResponse:
	"""Export the most recent assessment of the policy as a DOCX file."""

	report = contract.get_latest_report(policy_id)
	if report is None:
		raise HTTPException(status_code=404, detail=f"no assessment recorded for policy {policy_id}")

	docx_bytes = build_assessment_docx(report)
	headers = {"Content-Disposition": f'attachment; filename="assessment_{policy_id}.docx"'}
	return StreamingResponse(
		BytesIO(docx_bytes),
		media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
		headers=headers,
	)


@app.get("/stats")
async def stats(contract: HealthInsuranceContract = Depends(get_contract)) -> dict[str, int]:
	return contract.get_contract_stats()


@app.get("/events")
async def events(
	name: str | None = Query(None),
	contract: HealthInsuranceContract = Depends(get_contract),
) -> dict[str, object]:
	return {"events": [event.model_dump() for event in contract.events.all(name)]}


@app.post("/faucet")
async def faucet(
	request: FaucetRequest,
	principal: str = Depends(require_principal),
	contract: HealthInsuranceContract = Depends(get_contract),
) -> dict[str, object]:
	"""Credit the caller with test tokens."""

	try:
		balance = contract.fund(principal, request.amount)
	except ContractError as exc:
		raise _http_error(exc) from exc
	return {"principal": principal, "balance": balance}
