"""Evidence export compliance checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from evidence_governance.enums import Approval, ExportType, Restriction
from evidence_governance.exceptions import ComplianceOperationError, EvidenceNotFoundError
from evidence_governance.models import ExportCompliance

if TYPE_CHECKING:
    from evidence_governance.jurisdiction.registry import JurisdictionRegistry
    from evidence_governance.repository.protocols import EvidenceRepository

logger = logging.getLogger(__name__)

_OPERATION = "check_evidence_export_compliance"
_SENSITIVE_CLASSIFICATIONS = frozenset({"restricted", "confidential"})
# Jurisdictions whose full exports are reduced to metadata
_LOCALIZED_JURISDICTIONS = frozenset({"IN"})


class ExportComplianceService:
    def __init__(self, jurisdictions: JurisdictionRegistry, evidence: EvidenceRepository) -> None:
        self._jurisdictions = jurisdictions
        self._evidence = evidence

    async def check_evidence_export_compliance(
        self,
        evidence_id: str,
        target_jurisdiction: str,
        export_type: ExportType | str,
    ) -> ExportCompliance:
        """Decide whether an evidence item may be exported to ``target_jurisdiction``.

        Raises:
            ComplianceOperationError: the evidence lookup failed or found nothing.
        """
        try:
            evidence = await self._evidence.fetch_evidence_with_case(evidence_id)
        except Exception as e:
            logger.exception("Evidence lookup failed for %s", evidence_id)
            raise ComplianceOperationError(_OPERATION, f"evidence lookup failed: {e}") from e
        if evidence is None:
            raise EvidenceNotFoundError(_OPERATION, f"Evidence {evidence_id} not found")

        compliance = ExportCompliance()
        source_jurisdiction = evidence.case.jurisdiction
        source_rule = self._jurisdictions.get_residency_rule(source_jurisdiction)
        target_rule = self._jurisdictions.get_residency_rule(target_jurisdiction)

        if source_rule is None or target_rule is None:
            compliance.reason = "Unknown jurisdiction rules"
            return compliance

        if not source_rule.cross_border_transfer:
            compliance.reason = "Source jurisdiction prohibits cross-border data transfer"
            compliance.requirements.append(Approval.COURT_ORDER)
            return compliance

        if evidence.classification in _SENSITIVE_CLASSIFICATIONS:
            compliance.restrictions.append(Restriction.REDACTION_REQUIRED)
            compliance.requirements.append(Approval.SENIOR_APPROVAL)

        if export_type == ExportType.FULL_EXPORT and source_jurisdiction in _LOCALIZED_JURISDICTIONS:
            compliance.restrictions.append(Restriction.METADATA_ONLY)
            compliance.requirements.append(Approval.DATA_LOCALIZATION_COMPLIANCE)

        compliance.allowed = True
        compliance.reason = "Export allowed with conditions"
        return compliance
