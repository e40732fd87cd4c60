"""Pure residency and sensitivity checks used by the cross-jurisdiction router."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from evidence_governance.enums import Approval, Restriction
from evidence_governance.models import CaseData, ResidencyComplianceResult, SensitivityEvaluation

if TYPE_CHECKING:
    from evidence_governance.jurisdiction.registry import DataResidencyRule


@runtime_checkable
class TransferConditionChecker(Protocol):
    """Decides whether a named transfer condition is in place for a case."""

    def is_satisfied(self, condition: str, case: CaseData) -> bool: ...


class ConfiguredTransferConditionChecker:
    """Treats a fixed set of attested condition names as satisfied.

    Unknown condition names are never satisfied.
    """

    def __init__(self, satisfied: Iterable[str] = ()) -> None:
        self._satisfied = frozenset(satisfied)

    def is_satisfied(self, condition: str, case: CaseData) -> bool:
        return condition in self._satisfied


def _same_pair(a: tuple[str, str], source: str | None, target: str | None) -> bool:
    first, second = a
    return (source == first and target == second) or (source == second and target == first)


def evaluate_case_sensitivity(
    case: CaseData,
    source_jurisdiction: str | None,
    target_jurisdiction: str | None,
    restricted_pairs: Iterable[tuple[str, str]],
) -> SensitivityEvaluation:
    """Collect approvals and restrictions driven by case content and the jurisdiction pair."""
    evaluation = SensitivityEvaluation()

    if case.priority == "critical" or case.classification == "confidential":
        evaluation.requires_approval = True
        evaluation.approvals.append(Approval.SENIOR_LEGAL_OFFICER)
        evaluation.restrictions.append(Restriction.VIEW_ONLY_ACCESS)

    if case.type == "criminal":
        evaluation.requires_approval = True
        evaluation.approvals.append(Approval.LAW_ENFORCEMENT_LIAISON)

    for pair in restricted_pairs:
        if _same_pair(pair, source_jurisdiction, target_jurisdiction):
            evaluation.requires_approval = True
            evaluation.approvals.append(Approval.INTERNATIONAL_LEGAL_COUNSEL)
            evaluation.restrictions.append(Restriction.AUDIT_ALL_ACCESS)
            break

    return evaluation


def check_data_residency_compliance(
    case: CaseData,
    source_rule: DataResidencyRule,
    target_rule: DataResidencyRule,
    checker: TransferConditionChecker,
) -> ResidencyComplianceResult:
    """Check storage-region compatibility and the target's transfer conditions."""
    result = ResidencyComplianceResult(compliant=False)

    compatible = any(
        region in target_rule.allowed_regions or target_rule.allows_any_region for region in source_rule.allowed_regions
    )
    if not compatible:
        result.issues.append("No compatible storage regions")
        result.recommendations.append("Data migration to compliant region required")

    if target_rule.cross_border_transfer:
        for condition in target_rule.transfer_conditions:
            if not checker.is_satisfied(condition, case):
                result.issues.append(f"Transfer condition not met: {condition}")
                result.recommendations.append(f"Implement {condition} before transfer")

    result.compliant = not result.issues
    return result
