"""PostgreSQL repository implementations using SQLAlchemy 2.0 async."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, exists, func, or_, select, update
from sqlalchemy.orm import selectinload

from evidence_governance.db.tables import (
    AccessGrantRow,
    CaseRow,
    ComplianceViolationRow,
    EvidenceRow,
    JurisdictionPermissionRow,
    RoutingLogRow,
    SecurityEventRow,
)
from evidence_governance.enums import RoutingOutcome
from evidence_governance.models import (
    AccessGrant,
    ComplianceViolation,
    EvidenceRecord,
    GrantStatistics,
    RoutingStatistics,
)

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from evidence_governance.models import RoutingDecision, SecurityEvent


class PgJurisdictionPermissionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def has_active_permission(self, user_id: str, jurisdiction: str) -> bool:
        stmt = select(
            exists().where(
                JurisdictionPermissionRow.user_id == user_id,
                JurisdictionPermissionRow.jurisdiction == jurisdiction,
                JurisdictionPermissionRow.is_active.is_(True),
            )
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())


class PgRoutingLogRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, decision: RoutingDecision) -> None:
        row = RoutingLogRow(
            case_id=decision.case_id,
            requesting_user=decision.requesting_user,
            source_jurisdiction=decision.source_jurisdiction,
            target_jurisdiction=decision.target_jurisdiction,
            routing_decision=decision.routing_decision,
            compliance_status=decision.data_residency_compliance,
            required_approvals=list(decision.required_approvals),
            restrictions=list(decision.restrictions),
            reason=decision.reason,
            created_at=decision.timestamp,
        )
        # Savepoint: a failed audit write leaves the request transaction usable
        async with self._session.begin_nested():
            self._session.add(row)

    async def get_statistics(self, jurisdiction: str, since: datetime) -> RoutingStatistics:
        case_count = await self._session.scalar(
            select(func.count())
            .select_from(CaseRow)
            .where(CaseRow.jurisdiction == jurisdiction, CaseRow.created_at >= since)
        )

        decision = RoutingLogRow.routing_decision
        stmt = select(
            func.count(),
            func.count().filter(decision == RoutingOutcome.APPROVED),
            func.count().filter(decision == RoutingOutcome.DENIED),
            func.count().filter(decision == RoutingOutcome.CONDITIONAL),
        ).where(
            or_(
                RoutingLogRow.source_jurisdiction == jurisdiction,
                RoutingLogRow.target_jurisdiction == jurisdiction,
            ),
            RoutingLogRow.created_at >= since,
        )
        total, approved, denied, pending = (await self._session.execute(stmt)).one()

        return RoutingStatistics(
            total_cases=case_count or 0,
            cross_jurisdiction_requests=total,
            approved_requests=approved,
            denied_requests=denied,
            pending_requests=pending,
        )


class PgSecurityEventRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, event: SecurityEvent) -> None:
        row = SecurityEventRow(
            id=event.id,
            event_type=event.event_type,
            resource_type=event.resource_type,
            resource_id=event.resource_id,
            user_id=event.user_id,
            metadata_json=event.model_dump(mode="json")["metadata"],
            occurred_at=event.occurred_at,
        )
        async with self._session.begin_nested():
            self._session.add(row)


class PgAccessGrantRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, grant: AccessGrant) -> AccessGrant:
        row = AccessGrantRow(
            id=grant.id,
            case_id=grant.case_id,
            target_jurisdiction=grant.target_jurisdiction,
            granted_by=grant.granted_by,
            granted_at=grant.granted_at,
            conditions=grant.model_dump(mode="json")["conditions"],
            expires_at=grant.expires_at,
            is_active=grant.is_active,
        )
        self._session.add(row)
        await self._session.flush()
        return AccessGrant.model_validate(row)

    async def get_by_id(self, grant_id: uuid.UUID) -> AccessGrant | None:
        row = await self._session.get(AccessGrantRow, grant_id)
        if row is None:
            return None
        return AccessGrant.model_validate(row)

    async def update(
        self,
        grant_id: uuid.UUID,
        patch: dict[str, Any],
        *,
        expect_active: bool = False,
    ) -> AccessGrant | None:
        stmt = update(AccessGrantRow).where(AccessGrantRow.id == grant_id)
        if expect_active:
            # Concurrent writers re-check this predicate after the row lock is released
            stmt = stmt.where(AccessGrantRow.is_active.is_(True))
        stmt = stmt.values(**patch).returning(AccessGrantRow).execution_options(populate_existing=True)

        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return AccessGrant.model_validate(row)

    async def list_by_case(self, case_id: str) -> list[AccessGrant]:
        stmt = select(AccessGrantRow).where(AccessGrantRow.case_id == case_id).order_by(AccessGrantRow.granted_at)
        result = await self._session.execute(stmt)
        return [AccessGrant.model_validate(r) for r in result.scalars()]

    async def get_statistics(self, jurisdiction: str, since: datetime) -> GrantStatistics:
        now = datetime.now(UTC)
        active = AccessGrantRow.is_active.is_(True)
        stmt = select(
            func.count().filter(and_(active, AccessGrantRow.expires_at > now)),
            func.count().filter(and_(active, AccessGrantRow.expires_at <= now)),
            func.count().filter(AccessGrantRow.is_active.is_(False)),
        ).where(
            AccessGrantRow.target_jurisdiction == jurisdiction,
            AccessGrantRow.granted_at >= since,
        )
        live, expired, revoked = (await self._session.execute(stmt)).one()
        return GrantStatistics(active=live, expired=expired, revoked=revoked)


class PgEvidenceRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def fetch_evidence_with_case(self, evidence_id: str) -> EvidenceRecord | None:
        stmt = select(EvidenceRow).options(selectinload(EvidenceRow.case)).where(EvidenceRow.id == evidence_id)
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None
        return EvidenceRecord.model_validate(row)


class PgComplianceViolationRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_since(self, jurisdiction: str, since: datetime) -> list[ComplianceViolation]:
        stmt = (
            select(ComplianceViolationRow)
            .where(
                ComplianceViolationRow.jurisdiction == jurisdiction,
                ComplianceViolationRow.detected_at >= since,
            )
            .order_by(ComplianceViolationRow.detected_at.desc())
        )
        result = await self._session.execute(stmt)
        return [ComplianceViolation.model_validate(r) for r in result.scalars()]
