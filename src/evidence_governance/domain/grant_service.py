"""Time-bounded cross-jurisdiction access grants."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter

from evidence_governance.models import AccessGrant

if TYPE_CHECKING:
    import uuid

    from evidence_governance.domain.audit_service import AuditService
    from evidence_governance.repository.protocols import AccessGrantRepository

logger = logging.getLogger(__name__)

_EXPIRY_KEYS = ("expiryDate", "expiry_date")
_datetime_adapter = TypeAdapter(datetime)


def _explicit_expiry(conditions: dict[str, Any]) -> datetime | None:
    for key in _EXPIRY_KEYS:
        value = conditions.get(key)
        if value is not None:
            expiry = _datetime_adapter.validate_python(value)
            return expiry if expiry.tzinfo else expiry.replace(tzinfo=UTC)
    return None


class AccessGrantService:
    """Creates and revokes grants. Grants are never deleted or re-activated."""

    def __init__(self, repo: AccessGrantRepository, audit: AuditService, *, ttl_days: int = 30) -> None:
        self._repo = repo
        self._audit = audit
        self._ttl = timedelta(days=ttl_days)

    async def grant_cross_jurisdiction_access(
        self,
        case_id: str,
        target_jurisdiction: str,
        granted_by: str,
        conditions: dict[str, Any] | None = None,
    ) -> AccessGrant:
        conditions = dict(conditions or {})
        granted_at = datetime.now(UTC)
        grant = AccessGrant(
            case_id=case_id,
            target_jurisdiction=target_jurisdiction,
            granted_by=granted_by,
            granted_at=granted_at,
            conditions=conditions,
            expires_at=_explicit_expiry(conditions) or granted_at + self._ttl,
        )
        saved = await self._repo.create(grant)
        logger.info(
            "Granted %s access to case %s until %s (by %s)",
            target_jurisdiction,
            case_id,
            saved.expires_at.isoformat(),
            granted_by,
        )

        await self._audit.log_access_grant(saved)
        return saved

    async def revoke_cross_jurisdiction_access(
        self,
        grant_id: uuid.UUID,
        revoked_by: str,
        reason: str,
    ) -> AccessGrant:
        grant = await self._repo.get_by_id(grant_id)
        if grant is None:
            raise ValueError(f"Access grant {grant_id} not found")
        if not grant.is_active:
            raise ValueError(f"Access grant {grant_id} is already revoked")

        updated = await self._repo.update(
            grant_id,
            {
                "is_active": False,
                "revoked_by": revoked_by,
                "revoked_at": datetime.now(UTC),
                "revocation_reason": reason,
            },
            expect_active=True,
        )
        if updated is None:
            # Lost a race with another revocation
            raise ValueError(f"Access grant {grant_id} is already revoked")
        logger.info("Revoked access grant %s (by %s): %s", grant_id, revoked_by, reason)

        await self._audit.log_access_revocation(str(grant_id), revoked_by, reason)
        return updated

    async def get_grant(self, grant_id: uuid.UUID) -> AccessGrant | None:
        return await self._repo.get_by_id(grant_id)

    async def list_grants_for_case(self, case_id: str, *, active_only: bool = False) -> list[AccessGrant]:
        grants = await self._repo.list_by_case(case_id)
        if active_only:
            now = datetime.now(UTC)
            grants = [g for g in grants if g.is_active and not g.is_expired(now)]
        return grants
