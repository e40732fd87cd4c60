"""Jurisdiction reference data: /api/v1/jurisdictions."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from evidence_governance.api.deps import AccessContextDep
from evidence_governance.api.schemas import JurisdictionResponse, ResidencyRuleResponse
from evidence_governance.jurisdiction import ComplianceFrameworkInfo

router = APIRouter(prefix="/api/v1/jurisdictions", tags=["jurisdictions"])


@router.get("")
async def list_jurisdictions(context: AccessContextDep) -> list[JurisdictionResponse]:
    registry = context.jurisdictions
    return [JurisdictionResponse.model_validate(registry.get(code)) for code in registry.codes]


@router.get("/{code}", responses={404: {"description": "Unknown jurisdiction"}})
async def get_jurisdiction(code: str, context: AccessContextDep) -> JurisdictionResponse:
    jurisdiction = context.jurisdictions.get(code)
    if jurisdiction is None:
        raise HTTPException(status_code=404, detail=f"Unknown jurisdiction {code}")
    return JurisdictionResponse.model_validate(jurisdiction)


@router.get("/{code}/residency-rule", responses={404: {"description": "No residency rule"}})
async def get_residency_rule(code: str, context: AccessContextDep) -> ResidencyRuleResponse:
    rule = context.jurisdictions.get_residency_rule(code)
    if rule is None:
        raise HTTPException(status_code=404, detail=f"No residency rule for {code}")
    return ResidencyRuleResponse.model_validate(rule)


@router.get("/{code}/frameworks")
async def get_frameworks(code: str, context: AccessContextDep) -> list[ComplianceFrameworkInfo]:
    return context.jurisdictions.get_frameworks(code)
