"""Cross-jurisdiction endpoints: routing, access grants, export checks and reports."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, HTTPException

from evidence_governance.api.deps import ExportServiceDep, GrantServiceDep, ReportServiceDep, RouterDep
from evidence_governance.api.schemas import (
    AccessGrantResponse,
    ExportComplianceRequest,
    ExportComplianceResponse,
    GrantAccessRequest,
    ResidencyCheckRequest,
    ResidencyCheckResponse,
    RevokeAccessRequest,
    RouteCaseRequest,
    RoutingDecisionResponse,
)
from evidence_governance.exceptions import ComplianceOperationError, EvidenceNotFoundError
from evidence_governance.models import ComplianceReport

router = APIRouter(prefix="/api/v1", tags=["routing"])


# ─── Routing ─────────────────────────────────────────────


@router.post("/routing/route-case")
async def route_case(body: RouteCaseRequest, service: RouterDep) -> RoutingDecisionResponse:
    decision = await service.route_case(body.case, body.user)
    return RoutingDecisionResponse.model_validate(decision)


@router.post("/routing/residency-check")
async def check_residency(body: ResidencyCheckRequest, service: RouterDep) -> ResidencyCheckResponse:
    result = service.check_data_residency_compliance(body.case, body.source_jurisdiction, body.target_jurisdiction)
    return ResidencyCheckResponse.model_validate(result)


# ─── Access grants ───────────────────────────────────────


@router.post("/grants", status_code=201, responses={400: {"description": "Invalid grant conditions"}})
async def grant_access(body: GrantAccessRequest, service: GrantServiceDep) -> AccessGrantResponse:
    try:
        grant = await service.grant_cross_jurisdiction_access(
            case_id=body.case_id,
            target_jurisdiction=body.target_jurisdiction,
            granted_by=body.granted_by,
            conditions=body.conditions,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return AccessGrantResponse.model_validate(grant, from_attributes=True)


@router.get("/grants/{grant_id}", responses={404: {"description": "Access grant not found"}})
async def get_grant(grant_id: uuid.UUID, service: GrantServiceDep) -> AccessGrantResponse:
    grant = await service.get_grant(grant_id)
    if grant is None:
        raise HTTPException(status_code=404, detail="Access grant not found")
    return AccessGrantResponse.model_validate(grant, from_attributes=True)


@router.post(
    "/grants/{grant_id}/revoke",
    responses={404: {"description": "Access grant not found"}, 400: {"description": "Grant already revoked"}},
)
async def revoke_grant(
    grant_id: uuid.UUID,
    body: RevokeAccessRequest,
    service: GrantServiceDep,
) -> AccessGrantResponse:
    if await service.get_grant(grant_id) is None:
        raise HTTPException(status_code=404, detail="Access grant not found")
    try:
        grant = await service.revoke_cross_jurisdiction_access(grant_id, body.revoked_by, body.reason)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return AccessGrantResponse.model_validate(grant, from_attributes=True)


@router.get("/cases/{case_id}/grants")
async def list_case_grants(
    case_id: str,
    service: GrantServiceDep,
    active_only: bool = False,
) -> list[AccessGrantResponse]:
    grants = await service.list_grants_for_case(case_id, active_only=active_only)
    return [AccessGrantResponse.model_validate(g, from_attributes=True) for g in grants]


# ─── Evidence export ─────────────────────────────────────


@router.post(
    "/evidence/{evidence_id}/export-compliance",
    responses={404: {"description": "Evidence not found"}, 502: {"description": "Evidence lookup failed"}},
)
async def check_export_compliance(
    evidence_id: str,
    body: ExportComplianceRequest,
    service: ExportServiceDep,
) -> ExportComplianceResponse:
    try:
        result = await service.check_evidence_export_compliance(evidence_id, body.target_jurisdiction, body.export_type)
    except EvidenceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ComplianceOperationError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return ExportComplianceResponse.model_validate(result)


# ─── Reports ─────────────────────────────────────────────


@router.get("/reports/{jurisdiction}")
async def get_compliance_report(
    jurisdiction: str,
    service: ReportServiceDep,
    time_range: str | None = None,
) -> ComplianceReport:
    return await service.get_jurisdiction_compliance_report(jurisdiction, time_range)
