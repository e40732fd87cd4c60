"""Evidence governance exceptions."""

from __future__ import annotations


class EvidenceGovernanceError(Exception):
    """Base exception for all evidence governance errors."""


class ComplianceOperationError(EvidenceGovernanceError):
    """A decision-critical lookup failed, so no sound decision could be made."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation


class EvidenceNotFoundError(ComplianceOperationError):
    """The evidence record (or its parent case) does not exist."""


class JurisdictionConfigurationError(EvidenceGovernanceError):
    """Reference data violates a residency invariant."""
