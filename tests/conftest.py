"""Shared test fixtures with in-memory mock repositories."""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from evidence_governance.context import AccessControlContext, build_access_context
from evidence_governance.domain.audit_service import AuditService
from evidence_governance.domain.export_service import ExportComplianceService
from evidence_governance.domain.grant_service import AccessGrantService
from evidence_governance.domain.report_service import ComplianceReportService
from evidence_governance.domain.routing_service import CrossJurisdictionRouter
from evidence_governance.enums import RoutingOutcome
from evidence_governance.jurisdiction import ConfiguredTransferConditionChecker, JurisdictionRegistry
from evidence_governance.models import (
    AccessGrant,
    AttributeBundle,
    CaseData,
    ComplianceViolation,
    EnvironmentAttributes,
    EvidenceRecord,
    GrantStatistics,
    ResourceAttributes,
    RoutingDecision,
    RoutingStatistics,
    SecurityEvent,
    UserAttributes,
)
from evidence_governance.settings import PolicySettings, RoutingSettings

# ─── In-memory mock repositories ─────────────────────────


class MockPermissionRepository:
    def __init__(self) -> None:
        self._permissions: set[tuple[str, str]] = set()
        self.fail = False

    def grant(self, user_id: str, jurisdiction: str) -> None:
        self._permissions.add((user_id, jurisdiction))

    async def has_active_permission(self, user_id: str, jurisdiction: str) -> bool:
        await asyncio.sleep(0)
        if self.fail:
            raise ConnectionError("permission store unavailable")
        return (user_id, jurisdiction) in self._permissions


class MockRoutingLogRepository:
    def __init__(self) -> None:
        self.decisions: list[RoutingDecision] = []
        self.case_counts: dict[str, int] = {}
        self.fail = False

    async def create(self, decision: RoutingDecision) -> None:
        await asyncio.sleep(0)
        if self.fail:
            raise ConnectionError("routing log unavailable")
        self.decisions.append(decision)

    async def get_statistics(self, jurisdiction: str, since: datetime) -> RoutingStatistics:
        await asyncio.sleep(0)
        relevant = [
            d
            for d in self.decisions
            if jurisdiction in (d.source_jurisdiction, d.target_jurisdiction) and d.timestamp >= since
        ]
        return RoutingStatistics(
            total_cases=self.case_counts.get(jurisdiction, 0),
            cross_jurisdiction_requests=len(relevant),
            approved_requests=sum(d.routing_decision == RoutingOutcome.APPROVED for d in relevant),
            denied_requests=sum(d.routing_decision == RoutingOutcome.DENIED for d in relevant),
            pending_requests=sum(d.routing_decision == RoutingOutcome.CONDITIONAL for d in relevant),
        )


class MockSecurityEventRepository:
    def __init__(self) -> None:
        self.events: list[SecurityEvent] = []
        self.fail = False

    async def create(self, event: SecurityEvent) -> None:
        await asyncio.sleep(0)
        if self.fail:
            raise ConnectionError("event store unavailable")
        self.events.append(event)


class MockAccessGrantRepository:
    def __init__(self) -> None:
        self._store: dict[uuid.UUID, AccessGrant] = {}

    async def create(self, grant: AccessGrant) -> AccessGrant:
        await asyncio.sleep(0)
        self._store[grant.id] = grant
        return grant

    async def get_by_id(self, grant_id: uuid.UUID) -> AccessGrant | None:
        await asyncio.sleep(0)
        return self._store.get(grant_id)

    async def update(
        self,
        grant_id: uuid.UUID,
        patch: dict[str, Any],
        *,
        expect_active: bool = False,
    ) -> AccessGrant | None:
        await asyncio.sleep(0)
        grant = self._store.get(grant_id)
        if grant is None or (expect_active and not grant.is_active):
            return None
        updated = grant.model_copy(update=patch)
        self._store[grant_id] = updated
        return updated

    async def list_by_case(self, case_id: str) -> list[AccessGrant]:
        await asyncio.sleep(0)
        return [g for g in self._store.values() if g.case_id == case_id]

    async def get_statistics(self, jurisdiction: str, since: datetime) -> GrantStatistics:
        await asyncio.sleep(0)
        now = datetime.now(UTC)
        grants = [g for g in self._store.values() if g.target_jurisdiction == jurisdiction and g.granted_at >= since]
        return GrantStatistics(
            active=sum(g.is_active and not g.is_expired(now) for g in grants),
            expired=sum(g.is_active and g.is_expired(now) for g in grants),
            revoked=sum(not g.is_active for g in grants),
        )


class MockEvidenceRepository:
    def __init__(self) -> None:
        self._store: dict[str, EvidenceRecord] = {}
        self.fail = False

    def add(self, record: EvidenceRecord) -> None:
        self._store[record.id] = record

    async def fetch_evidence_with_case(self, evidence_id: str) -> EvidenceRecord | None:
        await asyncio.sleep(0)
        if self.fail:
            raise ConnectionError("evidence store unavailable")
        return self._store.get(evidence_id)


class MockViolationRepository:
    def __init__(self) -> None:
        self.violations: list[ComplianceViolation] = []

    async def list_since(self, jurisdiction: str, since: datetime) -> list[ComplianceViolation]:
        await asyncio.sleep(0)
        return [v for v in self.violations if v.jurisdiction == jurisdiction and v.detected_at >= since]


# ─── Helpers ──────────────────────────────────────────────


def _fixed_clock(hour: int, *, day: int = 7) -> Callable[[], datetime]:
    """A clock frozen at ``hour`` UTC on a Wednesday (October 2026) by default."""
    moment = datetime(2026, 10, day, hour, 30, tzinfo=UTC)
    return lambda: moment


def _make_bundle(
    *,
    user_jurisdiction: str | None = "IN",
    resource_jurisdiction: str | None = "IN",
    ip_address: str | None = None,
    providers: dict[str, dict[str, Any]] | None = None,
) -> AttributeBundle:
    return AttributeBundle(
        user=UserAttributes(id="u-1", role="investigator", jurisdiction=user_jurisdiction),
        resource=ResourceAttributes(id="case-1", type="case", jurisdiction=resource_jurisdiction),
        environment=EnvironmentAttributes(ip_address=ip_address),
        providers=providers or {},
    )


# ─── Fixtures ─────────────────────────────────────────────


@pytest.fixture
def fixed_clock() -> Callable[..., Callable[[], datetime]]:
    return _fixed_clock


@pytest.fixture
def bundle_factory() -> Callable[..., AttributeBundle]:
    return _make_bundle


@pytest.fixture
def jurisdictions() -> JurisdictionRegistry:
    return JurisdictionRegistry()


@pytest.fixture
def permission_repo() -> MockPermissionRepository:
    return MockPermissionRepository()


@pytest.fixture
def routing_log_repo() -> MockRoutingLogRepository:
    return MockRoutingLogRepository()


@pytest.fixture
def event_repo() -> MockSecurityEventRepository:
    return MockSecurityEventRepository()


@pytest.fixture
def grant_repo() -> MockAccessGrantRepository:
    return MockAccessGrantRepository()


@pytest.fixture
def evidence_repo() -> MockEvidenceRepository:
    return MockEvidenceRepository()


@pytest.fixture
def violation_repo() -> MockViolationRepository:
    return MockViolationRepository()


@pytest.fixture
def condition_checker() -> ConfiguredTransferConditionChecker:
    return ConfiguredTransferConditionChecker()


@pytest.fixture
def audit_service(
    routing_log_repo: MockRoutingLogRepository,
    event_repo: MockSecurityEventRepository,
) -> AuditService:
    return AuditService(routing_log=routing_log_repo, events=event_repo)


@pytest.fixture
def router(
    jurisdictions: JurisdictionRegistry,
    permission_repo: MockPermissionRepository,
    condition_checker: ConfiguredTransferConditionChecker,
    audit_service: AuditService,
) -> CrossJurisdictionRouter:
    return CrossJurisdictionRouter(
        jurisdictions=jurisdictions,
        permissions=permission_repo,
        condition_checker=condition_checker,
        audit=audit_service,
        restricted_pairs=RoutingSettings().restricted_jurisdiction_pairs,
    )


@pytest.fixture
def grant_service(grant_repo: MockAccessGrantRepository, audit_service: AuditService) -> AccessGrantService:
    return AccessGrantService(repo=grant_repo, audit=audit_service, ttl_days=30)


@pytest.fixture
def export_service(
    jurisdictions: JurisdictionRegistry,
    evidence_repo: MockEvidenceRepository,
) -> ExportComplianceService:
    return ExportComplianceService(jurisdictions=jurisdictions, evidence=evidence_repo)


@pytest.fixture
def report_service(
    routing_log_repo: MockRoutingLogRepository,
    grant_repo: MockAccessGrantRepository,
    violation_repo: MockViolationRepository,
) -> ComplianceReportService:
    return ComplianceReportService(routing_log=routing_log_repo, grants=grant_repo, violations=violation_repo)


@pytest.fixture
def access_context(jurisdictions: JurisdictionRegistry) -> AccessControlContext:
    return build_access_context(
        policy_settings=PolicySettings(),
        routing_settings=RoutingSettings(),
        jurisdictions=jurisdictions,
    )


@pytest.fixture
def sample_case() -> CaseData:
    return CaseData(id="case-42", jurisdiction="US", type="civil", priority="normal", classification="internal")


@pytest.fixture
def app(
    access_context: AccessControlContext,
    router: CrossJurisdictionRouter,
    grant_service: AccessGrantService,
    export_service: ExportComplianceService,
    report_service: ComplianceReportService,
    audit_service: AuditService,
) -> FastAPI:
    """Create a test FastAPI app with mocked dependencies."""
    from evidence_governance.api.deps import (
        get_access_context,
        get_audit_service,
        get_export_service,
        get_grant_service,
        get_report_service,
        get_router,
    )
    from evidence_governance.main import app as main_app

    main_app.state.session_factory = MagicMock()

    main_app.dependency_overrides[get_access_context] = lambda: access_context
    main_app.dependency_overrides[get_audit_service] = lambda: audit_service
    main_app.dependency_overrides[get_router] = lambda: router
    main_app.dependency_overrides[get_grant_service] = lambda: grant_service
    main_app.dependency_overrides[get_export_service] = lambda: export_service
    main_app.dependency_overrides[get_report_service] = lambda: report_service

    return main_app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create a test client for the FastAPI app."""
    from httpx import ASGITransport, AsyncClient

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
