"""Tests for cross-jurisdiction case routing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from evidence_governance.domain.audit_service import AuditService
from evidence_governance.domain.routing_service import CrossJurisdictionRouter
from evidence_governance.enums import Approval, ResidencyCompliance, Restriction, RoutingOutcome
from evidence_governance.jurisdiction import (
    ConfiguredTransferConditionChecker,
    DataResidencyRule,
    JurisdictionRegistry,
)
from evidence_governance.jurisdiction.defaults import COMPLIANCE_FRAMEWORKS, JURISDICTIONS, RESIDENCY_RULES
from evidence_governance.models import CaseData, UserAttributes
from evidence_governance.settings import RoutingSettings

if TYPE_CHECKING:
    from conftest import MockPermissionRepository, MockRoutingLogRepository

US_CONDITIONS = ("Adequate security measures", "Legal framework compliance")


def _user(jurisdiction: str | None, user_id: str = "u-1") -> UserAttributes:
    return UserAttributes(id=user_id, role="investigator", jurisdiction=jurisdiction)


class TestSameJurisdiction:
    async def test_direct_access_without_checks(
        self,
        router: CrossJurisdictionRouter,
        sample_case: CaseData,
        permission_repo: MockPermissionRepository,
        routing_log_repo: MockRoutingLogRepository,
    ) -> None:
        permission_repo.fail = True

        decision = await router.route_case(sample_case, _user("US"))

        assert decision.routing_decision == RoutingOutcome.DIRECT_ACCESS
        assert decision.data_residency_compliance == ResidencyCompliance.COMPLIANT
        assert decision.required_approvals == []
        assert decision.restrictions == []
        assert routing_log_repo.decisions == []


class TestCrossJurisdiction:
    async def test_target_forbidding_transfer_is_denied(
        self,
        router: CrossJurisdictionRouter,
        permission_repo: MockPermissionRepository,
        routing_log_repo: MockRoutingLogRepository,
    ) -> None:
        permission_repo.grant("u-1", "IN")
        case = CaseData(id="case-in", jurisdiction="IN", type="criminal", priority="critical")

        decision = await router.route_case(case, _user("US"))

        assert decision.routing_decision == RoutingOutcome.DENIED
        assert decision.data_residency_compliance == ResidencyCompliance.NON_COMPLIANT
        assert decision.required_approvals == [Approval.COURT_ORDER, Approval.DATA_PROTECTION_AUTHORITY]
        assert decision.restrictions == []
        assert decision.reason == "IN does not allow cross-border data access"
        assert routing_log_repo.decisions == [decision]

    async def test_missing_permission_requires_admin_approval(
        self,
        router: CrossJurisdictionRouter,
        sample_case: CaseData,
    ) -> None:
        decision = await router.route_case(sample_case, _user("EU"))
        assert decision.routing_decision == RoutingOutcome.DENIED
        assert decision.required_approvals == [Approval.ADMIN_APPROVAL]
        assert decision.reason == "User lacks cross-jurisdiction permissions"

    async def test_permission_lookup_failure_counts_as_no_permission(
        self,
        router: CrossJurisdictionRouter,
        sample_case: CaseData,
        permission_repo: MockPermissionRepository,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        permission_repo.grant("u-1", "US")
        permission_repo.fail = True

        with caplog.at_level(logging.ERROR):
            decision = await router.route_case(sample_case, _user("EU"))

        assert decision.routing_decision == RoutingOutcome.DENIED
        assert decision.required_approvals == [Approval.ADMIN_APPROVAL]
        assert "Failed to check cross-jurisdiction permission" in caplog.text

    async def test_unknown_jurisdiction(self, router: CrossJurisdictionRouter, sample_case: CaseData) -> None:
        decision = await router.route_case(sample_case, _user("XX"))
        assert decision.routing_decision == RoutingOutcome.DENIED
        assert decision.reason == "Unknown jurisdiction rules"

    async def test_unmet_conditions_are_conditional(
        self,
        router: CrossJurisdictionRouter,
        sample_case: CaseData,
        permission_repo: MockPermissionRepository,
    ) -> None:
        permission_repo.grant("u-1", "US")

        decision = await router.route_case(sample_case, _user("EU"))

        assert decision.routing_decision == RoutingOutcome.CONDITIONAL
        assert decision.data_residency_compliance == ResidencyCompliance.REQUIRES_REVIEW
        assert decision.required_approvals == [Approval.INTERNATIONAL_LEGAL_COUNSEL, Approval.COMPLIANCE_OFFICER]
        assert decision.restrictions == [Restriction.AUDIT_ALL_ACCESS]
        assert decision.reason == "Cross-jurisdiction access requires additional compliance measures"

    async def test_audit_failure_does_not_change_decision(
        self,
        router: CrossJurisdictionRouter,
        sample_case: CaseData,
        routing_log_repo: MockRoutingLogRepository,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        routing_log_repo.fail = True

        with caplog.at_level(logging.ERROR):
            decision = await router.route_case(sample_case, _user("EU"))

        assert decision.routing_decision == RoutingOutcome.DENIED
        assert "Failed to log routing decision for case case-42" in caplog.text


class TestApprovedScenario:
    @pytest.fixture
    def overlapping_router(
        self,
        permission_repo: MockPermissionRepository,
        audit_service: AuditService,
    ) -> CrossJurisdictionRouter:
        rules = [r for r in RESIDENCY_RULES if r.jurisdiction != "IN"]
        rules.append(
            DataResidencyRule(
                jurisdiction="IN",
                rule="Mirrored storage",
                allowed_regions=("ap-south-1", "us-east-1"),
                cross_border_transfer=False,
            )
        )
        return CrossJurisdictionRouter(
            jurisdictions=JurisdictionRegistry(JURISDICTIONS, rules, COMPLIANCE_FRAMEWORKS),
            permissions=permission_repo,
            condition_checker=ConfiguredTransferConditionChecker(US_CONDITIONS),
            audit=audit_service,
            restricted_pairs=RoutingSettings().restricted_jurisdiction_pairs,
        )

    async def test_critical_criminal_case_from_india_to_us(
        self,
        overlapping_router: CrossJurisdictionRouter,
        permission_repo: MockPermissionRepository,
        routing_log_repo: MockRoutingLogRepository,
    ) -> None:
        permission_repo.grant("u-1", "US")
        case = CaseData(id="case-us", jurisdiction="US", type="criminal", priority="critical")

        decision = await overlapping_router.route_case(case, _user("IN"))

        assert decision.routing_decision == RoutingOutcome.APPROVED
        assert decision.data_residency_compliance == ResidencyCompliance.COMPLIANT
        assert decision.required_approvals == [
            Approval.SENIOR_LEGAL_OFFICER,
            Approval.LAW_ENFORCEMENT_LIAISON,
            Approval.INTERNATIONAL_LEGAL_COUNSEL,
        ]
        assert decision.restrictions == [Restriction.VIEW_ONLY_ACCESS, Restriction.AUDIT_ALL_ACCESS]
        assert decision.reason == "Cross-jurisdiction access approved with conditions"
        assert routing_log_repo.decisions[0].case_id == "case-us"

    def test_residency_check_wrapper(self, overlapping_router: CrossJurisdictionRouter) -> None:
        case = CaseData(id="case-us", jurisdiction="US")
        assert overlapping_router.check_data_residency_compliance(case, "IN", "US").compliant
        unknown = overlapping_router.check_data_residency_compliance(case, "IN", "XX")
        assert not unknown.compliant
        assert unknown.issues == ["Unknown jurisdiction rules"]
