"""Best-effort audit trail for routing decisions and grant lifecycle events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from evidence_governance.enums import SecurityEventType
from evidence_governance.models import SecurityEvent

if TYPE_CHECKING:
    from evidence_governance.models import AccessGrant, RoutingDecision
    from evidence_governance.repository.protocols import RoutingLogRepository, SecurityEventRepository

logger = logging.getLogger(__name__)


class AuditService:
    """Writes audit records without ever failing the caller.

    Decisions are already made when they are audited, so a persistence failure
    here is logged and swallowed.
    """

    def __init__(self, routing_log: RoutingLogRepository, events: SecurityEventRepository) -> None:
        self._routing_log = routing_log
        self._events = events

    async def log_routing_decision(self, decision: RoutingDecision) -> None:
        try:
            await self._routing_log.create(decision)
        except Exception:
            logger.exception("Failed to log routing decision for case %s", decision.case_id)

    async def log_access_grant(self, grant: AccessGrant) -> None:
        await self._record(
            event_type=SecurityEventType.CROSS_JURISDICTION_ACCESS_GRANTED,
            resource_type="case",
            resource_id=grant.case_id,
            user_id=grant.granted_by,
            metadata={
                "target_jurisdiction": grant.target_jurisdiction,
                "conditions": grant.conditions,
                "expires_at": grant.expires_at.isoformat(),
            },
        )

    async def log_access_revocation(self, grant_id: str, revoked_by: str, reason: str) -> None:
        await self._record(
            event_type=SecurityEventType.CROSS_JURISDICTION_ACCESS_REVOKED,
            resource_type="access_grant",
            resource_id=grant_id,
            user_id=revoked_by,
            metadata={"reason": reason},
        )

    async def _record(
        self,
        *,
        event_type: SecurityEventType,
        resource_type: str,
        resource_id: str,
        user_id: str,
        metadata: dict[str, Any],
    ) -> None:
        event = SecurityEvent(
            event_type=event_type,
            resource_type=resource_type,
            resource_id=resource_id,
            user_id=user_id,
            metadata=metadata,
        )
        try:
            await self._events.create(event)
        except Exception:
            logger.exception("Failed to log security event %s for %s %s", event_type, resource_type, resource_id)
