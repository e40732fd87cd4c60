"""Repository interfaces the decision services depend on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    import uuid
    from datetime import datetime

    from evidence_governance.models import (
        AccessGrant,
        ComplianceViolation,
        EvidenceRecord,
        GrantStatistics,
        RoutingDecision,
        RoutingStatistics,
        SecurityEvent,
    )


class JurisdictionPermissionRepository(Protocol):
    async def has_active_permission(self, user_id: str, jurisdiction: str) -> bool:
        """Whether the user holds an active cross-jurisdiction permission for ``jurisdiction``."""
        ...


class RoutingLogRepository(Protocol):
    async def create(self, decision: RoutingDecision) -> None:
        """Append a routing decision to the write-once routing log."""
        ...

    async def get_statistics(self, jurisdiction: str, since: datetime) -> RoutingStatistics: ...


class SecurityEventRepository(Protocol):
    async def create(self, event: SecurityEvent) -> None: ...


class AccessGrantRepository(Protocol):
    async def create(self, grant: AccessGrant) -> AccessGrant: ...

    async def get_by_id(self, grant_id: uuid.UUID) -> AccessGrant | None: ...

    async def update(
        self,
        grant_id: uuid.UUID,
        patch: dict[str, Any],
        *,
        expect_active: bool = False,
    ) -> AccessGrant | None:
        """Apply ``patch`` in one statement and return the updated grant.

        Returns ``None`` when no row matched: the grant is unknown, or
        ``expect_active`` is set and the grant was already inactive.
        """
        ...

    async def list_by_case(self, case_id: str) -> list[AccessGrant]: ...

    async def get_statistics(self, jurisdiction: str, since: datetime) -> GrantStatistics: ...


class EvidenceRepository(Protocol):
    async def fetch_evidence_with_case(self, evidence_id: str) -> EvidenceRecord | None: ...


class ComplianceViolationRepository(Protocol):
    async def list_since(self, jurisdiction: str, since: datetime) -> list[ComplianceViolation]: ...
