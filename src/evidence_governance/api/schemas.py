"""API request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from evidence_governance.enums import ExportType, ResidencyCompliance, ResidencyTier, RoutingOutcome
from evidence_governance.models import CaseData, RequestContext, ResourceAttributes, UserAttributes


class CamelModel(BaseModel):
    """Serialized with camelCase keys; accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ─── Policy schemas ──────────────────────────────────────


class EvaluatePolicyRequest(BaseModel):
    user: UserAttributes
    resource: ResourceAttributes
    action: str = Field(min_length=1, max_length=100)
    context: RequestContext | None = None


class PolicyDecisionResponse(BaseModel):
    allowed: bool
    reason: str | None = None
    policy: str | None = None


class PolicyConditionsResponse(BaseModel):
    roles: list[str] | None = None
    resource_types: list[str] | None = None
    actions: list[str] | None = None


class PolicyResponse(BaseModel):
    id: str
    name: str
    rules: list[str]
    conditions: PolicyConditionsResponse


# ─── Routing schemas ─────────────────────────────────────


class RouteCaseRequest(BaseModel):
    case: CaseData
    user: UserAttributes


class RoutingDecisionResponse(CamelModel):
    case_id: str
    requesting_user: str
    source_jurisdiction: str | None
    target_jurisdiction: str
    routing_decision: RoutingOutcome
    data_residency_compliance: ResidencyCompliance
    required_approvals: list[str]
    restrictions: list[str]
    reason: str
    timestamp: datetime


class ResidencyCheckRequest(BaseModel):
    case: CaseData
    source_jurisdiction: str = Field(min_length=1)
    target_jurisdiction: str = Field(min_length=1)


class ResidencyCheckResponse(CamelModel):
    compliant: bool
    issues: list[str]
    recommendations: list[str]


# ─── Grant schemas ───────────────────────────────────────


class GrantAccessRequest(BaseModel):
    case_id: str = Field(min_length=1, max_length=100)
    target_jurisdiction: str = Field(min_length=1, max_length=20)
    granted_by: str = Field(min_length=1, max_length=200)
    conditions: dict[str, Any] = Field(default_factory=dict)


class RevokeAccessRequest(BaseModel):
    revoked_by: str = Field(min_length=1, max_length=200)
    reason: str = Field(min_length=1)


class AccessGrantResponse(BaseModel):
    id: uuid.UUID
    case_id: str
    target_jurisdiction: str
    granted_by: str
    granted_at: datetime
    conditions: dict[str, Any]
    expires_at: datetime
    is_active: bool
    revoked_by: str | None = None
    revoked_at: datetime | None = None
    revocation_reason: str | None = None


# ─── Export schemas ──────────────────────────────────────


class ExportComplianceRequest(BaseModel):
    target_jurisdiction: str = Field(min_length=1, max_length=20)
    export_type: ExportType


class ExportComplianceResponse(CamelModel):
    allowed: bool
    restrictions: list[str]
    requirements: list[str]
    reason: str


# ─── Jurisdiction schemas ────────────────────────────────


class JurisdictionResponse(CamelModel):
    code: str
    name: str
    regions: list[str]
    data_residency: ResidencyTier
    legal_framework: str
    storage_regions: list[str]
    timezone: str
    language: str
    currency: str


class ResidencyRuleResponse(CamelModel):
    jurisdiction: str
    rule: str
    description: str
    allowed_regions: list[str]
    cross_border_transfer: bool
    transfer_conditions: list[str]
    exceptions: list[str]
    compliance_requirement: str
