"""Cross-jurisdiction case routing (data residency aware).

States: same jurisdiction → DIRECT_ACCESS; otherwise
DENIED | APPROVED | CONDITIONAL depending on residency rules, explicit
permissions, case sensitivity and residency compliance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from opentelemetry import metrics

from evidence_governance.enums import Approval, ResidencyCompliance, RoutingOutcome
from evidence_governance.jurisdiction.residency import check_data_residency_compliance, evaluate_case_sensitivity
from evidence_governance.models import (
    CaseData,
    CrossJurisdictionEvaluation,
    ResidencyComplianceResult,
    RoutingDecision,
    UserAttributes,
)

if TYPE_CHECKING:
    from evidence_governance.domain.audit_service import AuditService
    from evidence_governance.jurisdiction.registry import JurisdictionRegistry
    from evidence_governance.jurisdiction.residency import TransferConditionChecker
    from evidence_governance.repository.protocols import JurisdictionPermissionRepository

logger = logging.getLogger(__name__)
_meter = metrics.get_meter("evidence.routing")
_routing_counter = _meter.create_counter(
    name="evidence.routing.decisions",
    description="Cross-jurisdiction routing decisions by outcome",
    unit="decisions",
)


def _extend_unique(target: list[str], items: Iterable[str]) -> None:
    for item in items:
        if item not in target:
            target.append(item)


class CrossJurisdictionRouter:
    """Decides whether and how a user may reach a case in another jurisdiction."""

    def __init__(
        self,
        jurisdictions: JurisdictionRegistry,
        permissions: JurisdictionPermissionRepository,
        condition_checker: TransferConditionChecker,
        audit: AuditService,
        *,
        restricted_pairs: Iterable[tuple[str, str]] = (),
    ) -> None:
        self._jurisdictions = jurisdictions
        self._permissions = permissions
        self._condition_checker = condition_checker
        self._audit = audit
        self._restricted_pairs = [tuple(pair) for pair in restricted_pairs]

    async def route_case(self, case: CaseData, requesting_user: UserAttributes) -> RoutingDecision:
        """Route a case request, logging every cross-jurisdiction decision."""
        if requesting_user.jurisdiction == case.jurisdiction:
            _routing_counter.add(1, attributes={"decision": RoutingOutcome.DIRECT_ACCESS})
            return RoutingDecision(
                case_id=case.id,
                requesting_user=requesting_user.id,
                source_jurisdiction=requesting_user.jurisdiction,
                target_jurisdiction=case.jurisdiction,
                routing_decision=RoutingOutcome.DIRECT_ACCESS,
                data_residency_compliance=ResidencyCompliance.COMPLIANT,
            )

        evaluation = await self.evaluate_cross_jurisdiction_access(
            requesting_user.jurisdiction,
            case.jurisdiction,
            case,
            requesting_user,
        )
        decision = RoutingDecision(
            case_id=case.id,
            requesting_user=requesting_user.id,
            source_jurisdiction=requesting_user.jurisdiction,
            target_jurisdiction=case.jurisdiction,
            routing_decision=evaluation.decision,
            data_residency_compliance=evaluation.compliance,
            required_approvals=evaluation.required_approvals,
            restrictions=evaluation.restrictions,
            reason=evaluation.reason,
        )
        _routing_counter.add(1, attributes={"decision": decision.routing_decision})
        logger.info(
            "Routed case %s for user %s (%s -> %s): %s",
            case.id,
            requesting_user.id,
            decision.source_jurisdiction,
            decision.target_jurisdiction,
            decision.routing_decision,
        )

        await self._audit.log_routing_decision(decision)
        return decision

    async def evaluate_cross_jurisdiction_access(
        self,
        source_jurisdiction: str | None,
        target_jurisdiction: str,
        case: CaseData,
        user: UserAttributes,
    ) -> CrossJurisdictionEvaluation:
        evaluation = CrossJurisdictionEvaluation()

        source_rule = self._jurisdictions.get_residency_rule(source_jurisdiction)
        target_rule = self._jurisdictions.get_residency_rule(target_jurisdiction)
        if source_rule is None or target_rule is None:
            evaluation.reason = "Unknown jurisdiction rules"
            return evaluation

        if not target_rule.cross_border_transfer:
            evaluation.reason = f"{target_jurisdiction} does not allow cross-border data access"
            evaluation.required_approvals = [Approval.COURT_ORDER, Approval.DATA_PROTECTION_AUTHORITY]
            return evaluation

        if not await self.check_user_cross_jurisdiction_permission(user, target_jurisdiction):
            evaluation.reason = "User lacks cross-jurisdiction permissions"
            evaluation.required_approvals = [Approval.ADMIN_APPROVAL]
            return evaluation

        sensitivity = evaluate_case_sensitivity(case, source_jurisdiction, target_jurisdiction, self._restricted_pairs)
        if sensitivity.requires_approval:
            _extend_unique(evaluation.required_approvals, sensitivity.approvals)
            _extend_unique(evaluation.restrictions, sensitivity.restrictions)

        residency = check_data_residency_compliance(case, source_rule, target_rule, self._condition_checker)
        if residency.compliant:
            evaluation.decision = RoutingOutcome.APPROVED
            evaluation.compliance = ResidencyCompliance.COMPLIANT
            evaluation.reason = "Cross-jurisdiction access approved with conditions"
        else:
            evaluation.decision = RoutingOutcome.CONDITIONAL
            evaluation.compliance = ResidencyCompliance.REQUIRES_REVIEW
            evaluation.reason = "Cross-jurisdiction access requires additional compliance measures"
            _extend_unique(evaluation.required_approvals, [Approval.COMPLIANCE_OFFICER])

        return evaluation

    async def check_user_cross_jurisdiction_permission(self, user: UserAttributes, target_jurisdiction: str) -> bool:
        """A failed lookup counts as no permission."""
        try:
            return await self._permissions.has_active_permission(user.id, target_jurisdiction)
        except Exception:
            logger.exception("Failed to check cross-jurisdiction permission for user %s", user.id)
            return False

    def check_data_residency_compliance(
        self,
        case: CaseData,
        source_jurisdiction: str,
        target_jurisdiction: str,
    ) -> ResidencyComplianceResult:
        source_rule = self._jurisdictions.get_residency_rule(source_jurisdiction)
        target_rule = self._jurisdictions.get_residency_rule(target_jurisdiction)
        if source_rule is None or target_rule is None:
            return ResidencyComplianceResult(compliant=False, issues=["Unknown jurisdiction rules"])
        return check_data_residency_compliance(case, source_rule, target_rule, self._condition_checker)
