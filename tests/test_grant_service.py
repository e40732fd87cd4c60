"""Tests for the access grant lifecycle."""

from __future__ import annotations

import asyncio
import uuid
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from evidence_governance.domain.audit_service import AuditService
from evidence_governance.domain.grant_service import AccessGrantService
from evidence_governance.enums import SecurityEventType
from evidence_governance.models import AccessGrant

if TYPE_CHECKING:
    from conftest import MockAccessGrantRepository, MockSecurityEventRepository


class TestGrantLifecycle:
    async def test_grant_defaults(
        self,
        grant_service: AccessGrantService,
        event_repo: MockSecurityEventRepository,
    ) -> None:
        before = datetime.now(UTC)
        grant = await grant_service.grant_cross_jurisdiction_access("case-1", "EU", "admin-1")

        assert grant.is_active
        assert grant.conditions == {}
        assert grant.revoked_at is None
        expected = before + timedelta(days=30)
        assert abs(grant.expires_at - expected) < timedelta(seconds=5)

        [event] = event_repo.events
        assert event.event_type == SecurityEventType.CROSS_JURISDICTION_ACCESS_GRANTED
        assert event.resource_type == "case"
        assert event.resource_id == "case-1"
        assert event.user_id == "admin-1"
        assert event.metadata["target_jurisdiction"] == "EU"
        assert event.metadata["expires_at"] == grant.expires_at.isoformat()

    async def test_explicit_expiry(self, grant_service: AccessGrantService) -> None:
        grant = await grant_service.grant_cross_jurisdiction_access(
            "case-1", "EU", "admin-1", {"expiryDate": "2027-01-15T00:00:00Z", "purpose": "mutual legal assistance"}
        )
        assert grant.expires_at == datetime(2027, 1, 15, tzinfo=UTC)
        assert grant.conditions["purpose"] == "mutual legal assistance"

    async def test_naive_expiry_is_utc(self, grant_service: AccessGrantService) -> None:
        grant = await grant_service.grant_cross_jurisdiction_access(
            "case-1", "EU", "admin-1", {"expiry_date": "2027-03-01T12:00:00"}
        )
        assert grant.expires_at == datetime(2027, 3, 1, 12, tzinfo=UTC)

    async def test_invalid_expiry_rejected(self, grant_service: AccessGrantService) -> None:
        with pytest.raises(ValueError):
            await grant_service.grant_cross_jurisdiction_access("case-1", "EU", "admin-1", {"expiryDate": "soon"})

    async def test_ttl_is_configurable(
        self,
        grant_repo: MockAccessGrantRepository,
        audit_service: AuditService,
    ) -> None:
        short = AccessGrantService(repo=grant_repo, audit=audit_service, ttl_days=1)
        grant = await short.grant_cross_jurisdiction_access("case-1", "EU", "admin-1")
        assert grant.expires_at - grant.granted_at == timedelta(days=1)

    async def test_revoke(
        self,
        grant_service: AccessGrantService,
        event_repo: MockSecurityEventRepository,
    ) -> None:
        grant = await grant_service.grant_cross_jurisdiction_access("case-1", "EU", "admin-1")

        revoked = await grant_service.revoke_cross_jurisdiction_access(grant.id, "admin-2", "Investigation closed")

        assert not revoked.is_active
        assert revoked.revoked_by == "admin-2"
        assert revoked.revocation_reason == "Investigation closed"
        assert revoked.revoked_at is not None
        assert revoked.id == grant.id

        event = event_repo.events[-1]
        assert event.event_type == SecurityEventType.CROSS_JURISDICTION_ACCESS_REVOKED
        assert event.resource_type == "access_grant"
        assert event.resource_id == str(grant.id)
        assert event.metadata == {"reason": "Investigation closed"}

    async def test_revoked_grant_stays_revoked(self, grant_service: AccessGrantService) -> None:
        grant = await grant_service.grant_cross_jurisdiction_access("case-1", "EU", "admin-1")
        await grant_service.revoke_cross_jurisdiction_access(grant.id, "admin-2", "closed")

        with pytest.raises(ValueError, match="already revoked"):
            await grant_service.revoke_cross_jurisdiction_access(grant.id, "admin-3", "again")

        stored = await grant_service.get_grant(grant.id)
        assert stored is not None
        assert not stored.is_active
        assert stored.revoked_by == "admin-2"

    async def test_concurrent_revokes_record_one_revocation(
        self,
        grant_service: AccessGrantService,
        event_repo: MockSecurityEventRepository,
    ) -> None:
        grant = await grant_service.grant_cross_jurisdiction_access("case-1", "EU", "admin-1")

        results = await asyncio.gather(
            grant_service.revoke_cross_jurisdiction_access(grant.id, "admin-A", "first"),
            grant_service.revoke_cross_jurisdiction_access(grant.id, "admin-B", "second"),
            return_exceptions=True,
        )

        [winner] = [r for r in results if isinstance(r, AccessGrant)]
        [loser] = [r for r in results if isinstance(r, Exception)]
        assert isinstance(loser, ValueError)
        assert "already revoked" in str(loser)

        stored = await grant_service.get_grant(grant.id)
        assert stored is not None
        assert (stored.revoked_by, stored.revocation_reason) == (winner.revoked_by, winner.revocation_reason)

        revoked_type = SecurityEventType.CROSS_JURISDICTION_ACCESS_REVOKED
        revocations = [e for e in event_repo.events if e.event_type == revoked_type]
        assert [e.user_id for e in revocations] == [winner.revoked_by]

    async def test_revoke_unknown_grant(self, grant_service: AccessGrantService) -> None:
        with pytest.raises(ValueError, match="not found"):
            await grant_service.revoke_cross_jurisdiction_access(uuid.uuid4(), "admin-1", "n/a")

    async def test_audit_failure_does_not_block_grant(
        self,
        grant_service: AccessGrantService,
        event_repo: MockSecurityEventRepository,
    ) -> None:
        event_repo.fail = True
        grant = await grant_service.grant_cross_jurisdiction_access("case-1", "EU", "admin-1")
        assert grant.is_active
        assert await grant_service.get_grant(grant.id) == grant


class TestGrantListing:
    async def test_list_for_case(self, grant_service: AccessGrantService) -> None:
        live = await grant_service.grant_cross_jurisdiction_access("case-1", "EU", "admin-1")
        revoked = await grant_service.grant_cross_jurisdiction_access("case-1", "US", "admin-1")
        await grant_service.revoke_cross_jurisdiction_access(revoked.id, "admin-1", "done")
        await grant_service.grant_cross_jurisdiction_access(
            "case-1", "UK", "admin-1", {"expiryDate": "2020-01-01T00:00:00Z"}
        )
        await grant_service.grant_cross_jurisdiction_access("case-2", "EU", "admin-1")

        assert len(await grant_service.list_grants_for_case("case-1")) == 3
        assert [g.id for g in await grant_service.list_grants_for_case("case-1", active_only=True)] == [live.id]
