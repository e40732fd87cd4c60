"""Jurisdiction reference data and residency checks."""

from evidence_governance.jurisdiction.registry import (
    ComplianceFrameworkInfo,
    DataResidencyRule,
    Jurisdiction,
    JurisdictionRegistry,
)
from evidence_governance.jurisdiction.residency import (
    ConfiguredTransferConditionChecker,
    TransferConditionChecker,
    check_data_residency_compliance,
    evaluate_case_sensitivity,
)

__all__ = [
    "ComplianceFrameworkInfo",
    "ConfiguredTransferConditionChecker",
    "DataResidencyRule",
    "Jurisdiction",
    "JurisdictionRegistry",
    "TransferConditionChecker",
    "check_data_residency_compliance",
    "evaluate_case_sensitivity",
]
