"""FastAPI dependency injection."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from evidence_governance.context import AccessControlContext
from evidence_governance.domain.audit_service import AuditService
from evidence_governance.domain.export_service import ExportComplianceService
from evidence_governance.domain.grant_service import AccessGrantService
from evidence_governance.domain.report_service import ComplianceReportService
from evidence_governance.domain.routing_service import CrossJurisdictionRouter
from evidence_governance.policy import PolicyEngine
from evidence_governance.repository.postgres import (
    PgAccessGrantRepository,
    PgComplianceViolationRepository,
    PgEvidenceRepository,
    PgJurisdictionPermissionRepository,
    PgRoutingLogRepository,
    PgSecurityEventRepository,
)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession]:
    session_factory = request.app.state.session_factory
    async with session_factory() as session, session.begin():
        yield session


def get_access_context(request: Request) -> AccessControlContext:
    return request.app.state.access_context


SessionDep = Annotated[AsyncSession, Depends(get_session)]
AccessContextDep = Annotated[AccessControlContext, Depends(get_access_context)]


def get_policy_engine(context: AccessContextDep) -> PolicyEngine:
    return context.policy_engine


def get_audit_service(session: SessionDep) -> AuditService:
    return AuditService(routing_log=PgRoutingLogRepository(session), events=PgSecurityEventRepository(session))


def get_router(
    session: SessionDep,
    context: AccessContextDep,
    audit: Annotated[AuditService, Depends(get_audit_service)],
) -> CrossJurisdictionRouter:
    return CrossJurisdictionRouter(
        jurisdictions=context.jurisdictions,
        permissions=PgJurisdictionPermissionRepository(session),
        condition_checker=context.condition_checker,
        audit=audit,
        restricted_pairs=context.routing_settings.restricted_jurisdiction_pairs,
    )


def get_grant_service(
    session: SessionDep,
    context: AccessContextDep,
    audit: Annotated[AuditService, Depends(get_audit_service)],
) -> AccessGrantService:
    return AccessGrantService(
        repo=PgAccessGrantRepository(session),
        audit=audit,
        ttl_days=context.routing_settings.grant_ttl_days,
    )


def get_export_service(session: SessionDep, context: AccessContextDep) -> ExportComplianceService:
    return ExportComplianceService(jurisdictions=context.jurisdictions, evidence=PgEvidenceRepository(session))


def get_report_service(session: SessionDep, context: AccessContextDep) -> ComplianceReportService:
    return ComplianceReportService(
        routing_log=PgRoutingLogRepository(session),
        grants=PgAccessGrantRepository(session),
        violations=PgComplianceViolationRepository(session),
        default_time_range=context.routing_settings.default_report_range,
    )


PolicyEngineDep = Annotated[PolicyEngine, Depends(get_policy_engine)]
RouterDep = Annotated[CrossJurisdictionRouter, Depends(get_router)]
GrantServiceDep = Annotated[AccessGrantService, Depends(get_grant_service)]
ExportServiceDep = Annotated[ExportComplianceService, Depends(get_export_service)]
ReportServiceDep = Annotated[ComplianceReportService, Depends(get_report_service)]
