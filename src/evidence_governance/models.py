"""Pydantic V2 domain models for the evidence governance decision engine."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from evidence_governance.enums import (
    Effect,
    RecommendationPriority,
    ResidencyCompliance,
    RoutingOutcome,
    SecurityEventType,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ─── Request inputs ──────────────────────────────────────


class UserAttributes(BaseModel):
    """The requesting user as supplied by the API layer."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: str | None = None
    department: str | None = None
    jurisdiction: str | None = None
    clearance_level: int | None = None


class ResourceAttributes(BaseModel):
    """The case or evidence record being accessed."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str | None = None
    sensitivity: str | None = None
    jurisdiction: str | None = None
    case_type: str | None = None


class RequestContext(BaseModel):
    """Network and device context of an inbound request."""

    model_config = ConfigDict(frozen=True)

    ip_address: str | None = None
    user_agent: str | None = None
    location: str | None = None
    country: str | None = None
    region: str | None = None
    is_vpn: bool = False
    device_fingerprint: str | None = None


class CaseData(BaseModel):
    """Case fields the router needs to route and score a request."""

    id: str
    jurisdiction: str
    type: str | None = None
    priority: str | None = None
    classification: str | None = None


# ─── Policy evaluation ───────────────────────────────────


class EnvironmentAttributes(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=_utcnow)
    ip_address: str | None = None
    user_agent: str | None = None
    location: str | None = None


class AttributeBundle(BaseModel):
    """Attributes gathered for a single decision; built fresh per evaluation."""

    model_config = ConfigDict(frozen=True)

    user: UserAttributes
    resource: ResourceAttributes
    environment: EnvironmentAttributes
    providers: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def provided(self, name: str) -> dict[str, Any] | None:
        """Return the sub-map of a provider, or None if it failed or is not registered."""
        return self.providers.get(name)


class RuleDecision(BaseModel):
    """Result of a rule (or whole policy) evaluation."""

    decision: Effect
    reason: str | None = None

    @classmethod
    def allow(cls) -> RuleDecision:
        return cls(decision=Effect.ALLOW)

    @classmethod
    def deny(cls, reason: str) -> RuleDecision:
        return cls(decision=Effect.DENY, reason=reason)

    @property
    def denied(self) -> bool:
        return self.decision == Effect.DENY


class PolicyDecision(BaseModel):
    """Overall decision returned by the policy engine."""

    allowed: bool
    reason: str | None = None
    policy: str | None = None
    attributes: AttributeBundle | None = None


# ─── Cross-jurisdiction routing ──────────────────────────


class ResidencyComplianceResult(BaseModel):
    compliant: bool
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class SensitivityEvaluation(BaseModel):
    requires_approval: bool = False
    approvals: list[str] = Field(default_factory=list)
    restrictions: list[str] = Field(default_factory=list)


class CrossJurisdictionEvaluation(BaseModel):
    """Outcome of evaluating access across a jurisdiction boundary."""

    decision: RoutingOutcome = RoutingOutcome.DENIED
    compliance: ResidencyCompliance = ResidencyCompliance.NON_COMPLIANT
    required_approvals: list[str] = Field(default_factory=list)
    restrictions: list[str] = Field(default_factory=list)
    reason: str = ""


class RoutingDecision(BaseModel):
    """Routing decision for a case request; persisted write-once to the routing log."""

    model_config = ConfigDict(from_attributes=True)

    case_id: str
    requesting_user: str
    source_jurisdiction: str | None
    target_jurisdiction: str
    routing_decision: RoutingOutcome
    data_residency_compliance: ResidencyCompliance
    required_approvals: list[str] = Field(default_factory=list)
    restrictions: list[str] = Field(default_factory=list)
    reason: str = ""
    timestamp: datetime = Field(default_factory=_utcnow)


class AccessGrant(BaseModel):
    """Time-bounded authorization for cross-jurisdiction access to a case."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    case_id: str = Field(min_length=1)
    target_jurisdiction: str = Field(min_length=1)
    granted_by: str = Field(min_length=1)
    granted_at: datetime = Field(default_factory=_utcnow)
    conditions: dict[str, Any] = Field(default_factory=dict)
    expires_at: datetime
    is_active: bool = True
    revoked_by: str | None = None
    revoked_at: datetime | None = None
    revocation_reason: str | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or _utcnow()) >= self.expires_at


class SecurityEvent(BaseModel):
    """Audit record for grant lifecycle events."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: SecurityEventType
    resource_type: str
    resource_id: str
    user_id: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=_utcnow)


# ─── Evidence export ─────────────────────────────────────


class CaseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    jurisdiction: str
    type: str | None = None
    classification: str | None = None


class EvidenceRecord(BaseModel):
    """Evidence item joined with the jurisdiction data of its parent case."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    classification: str | None = None
    case: CaseSummary


class ExportCompliance(BaseModel):
    allowed: bool = False
    restrictions: list[str] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    reason: str = ""


# ─── Compliance reporting ────────────────────────────────


class RoutingStatistics(BaseModel):
    total_cases: int = 0
    cross_jurisdiction_requests: int = 0
    approved_requests: int = 0
    denied_requests: int = 0
    pending_requests: int = 0


class GrantStatistics(BaseModel):
    active: int = 0
    expired: int = 0
    revoked: int = 0


class ComplianceViolation(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    jurisdiction: str
    case_id: str | None = None
    description: str
    severity: str = "high"
    detected_at: datetime = Field(default_factory=_utcnow)


class ComplianceRecommendation(BaseModel):
    priority: RecommendationPriority
    category: str
    recommendation: str
    impact: str


class ComplianceSummary(BaseModel):
    total_cases: int
    cross_jurisdiction_requests: int
    approved_requests: int
    denied_requests: int
    active_access_grants: int
    expired_access_grants: int
    compliance_violations: int
    compliance_score: float = Field(ge=0.0, le=100.0)


class ComplianceReportDetails(BaseModel):
    routing: RoutingStatistics
    access_grants: GrantStatistics
    violations: list[ComplianceViolation] = Field(default_factory=list)


class ComplianceReport(BaseModel):
    jurisdiction: str
    time_range: str
    generated_at: datetime = Field(default_factory=_utcnow)
    summary: ComplianceSummary
    details: ComplianceReportDetails
    recommendations: list[ComplianceRecommendation] = Field(default_factory=list)
