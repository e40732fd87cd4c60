"""Tests for evidence export compliance checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from evidence_governance.domain.export_service import ExportComplianceService
from evidence_governance.enums import Approval, ExportType, Restriction
from evidence_governance.exceptions import ComplianceOperationError, EvidenceNotFoundError
from evidence_governance.jurisdiction import DataResidencyRule, JurisdictionRegistry
from evidence_governance.jurisdiction.defaults import COMPLIANCE_FRAMEWORKS, JURISDICTIONS, RESIDENCY_RULES
from evidence_governance.models import CaseSummary, EvidenceRecord

if TYPE_CHECKING:
    from conftest import MockEvidenceRepository


def _evidence(evidence_id: str, jurisdiction: str, classification: str | None = "internal") -> EvidenceRecord:
    return EvidenceRecord(
        id=evidence_id,
        classification=classification,
        case=CaseSummary(id=f"case-{evidence_id}", jurisdiction=jurisdiction, type="civil"),
    )


class TestExportCompliance:
    async def test_source_forbidding_transfer(
        self,
        export_service: ExportComplianceService,
        evidence_repo: MockEvidenceRepository,
    ) -> None:
        evidence_repo.add(_evidence("ev-in", "IN"))

        result = await export_service.check_evidence_export_compliance("ev-in", "US", ExportType.METADATA_EXPORT)

        assert not result.allowed
        assert result.requirements == [Approval.COURT_ORDER]
        assert result.restrictions == []

    async def test_plain_export_allowed(
        self,
        export_service: ExportComplianceService,
        evidence_repo: MockEvidenceRepository,
    ) -> None:
        evidence_repo.add(_evidence("ev-us", "US"))

        result = await export_service.check_evidence_export_compliance("ev-us", "EU", ExportType.FULL_EXPORT)

        assert result.allowed
        assert result.restrictions == []
        assert result.requirements == []
        assert result.reason == "Export allowed with conditions"

    @pytest.mark.parametrize("classification", ["restricted", "confidential"])
    async def test_sensitive_evidence_needs_redaction(
        self,
        export_service: ExportComplianceService,
        evidence_repo: MockEvidenceRepository,
        classification: str,
    ) -> None:
        evidence_repo.add(_evidence("ev-eu", "EU", classification))

        result = await export_service.check_evidence_export_compliance("ev-eu", "UK", ExportType.LEGAL_BUNDLE)

        assert result.allowed
        assert result.restrictions == [Restriction.REDACTION_REQUIRED]
        assert result.requirements == [Approval.SENIOR_APPROVAL]

    async def test_unknown_target_denied(
        self,
        export_service: ExportComplianceService,
        evidence_repo: MockEvidenceRepository,
    ) -> None:
        evidence_repo.add(_evidence("ev-us", "US"))
        result = await export_service.check_evidence_export_compliance("ev-us", "XX", ExportType.FULL_EXPORT)
        assert not result.allowed
        assert result.reason == "Unknown jurisdiction rules"

    async def test_missing_evidence(self, export_service: ExportComplianceService) -> None:
        with pytest.raises(EvidenceNotFoundError) as exc_info:
            await export_service.check_evidence_export_compliance("nope", "US", ExportType.FULL_EXPORT)
        assert exc_info.value.operation == "check_evidence_export_compliance"

    async def test_lookup_failure_propagates(
        self,
        export_service: ExportComplianceService,
        evidence_repo: MockEvidenceRepository,
    ) -> None:
        evidence_repo.fail = True
        with pytest.raises(ComplianceOperationError, match="check_evidence_export_compliance") as exc_info:
            await export_service.check_evidence_export_compliance("ev-1", "US", ExportType.FULL_EXPORT)
        assert not isinstance(exc_info.value, EvidenceNotFoundError)
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestDataLocalization:
    async def test_full_export_from_india_reduced_to_metadata(self, evidence_repo: MockEvidenceRepository) -> None:
        rules = [r for r in RESIDENCY_RULES if r.jurisdiction != "IN"]
        rules.append(
            DataResidencyRule(
                jurisdiction="IN",
                rule="Transfer under treaty",
                allowed_regions=("ap-south-1",),
                cross_border_transfer=True,
                transfer_conditions=("Mutual legal assistance treaty",),
            )
        )
        service = ExportComplianceService(
            jurisdictions=JurisdictionRegistry(JURISDICTIONS, rules, COMPLIANCE_FRAMEWORKS),
            evidence=evidence_repo,
        )
        evidence_repo.add(_evidence("ev-in", "IN", "confidential"))

        full = await service.check_evidence_export_compliance("ev-in", "US", ExportType.FULL_EXPORT)
        metadata = await service.check_evidence_export_compliance("ev-in", "US", ExportType.METADATA_EXPORT)

        assert full.allowed
        assert full.restrictions == [Restriction.REDACTION_REQUIRED, Restriction.METADATA_ONLY]
        assert full.requirements == [Approval.SENIOR_APPROVAL, Approval.DATA_LOCALIZATION_COMPLIANCE]
        assert metadata.restrictions == [Restriction.REDACTION_REQUIRED]
