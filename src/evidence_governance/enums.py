"""Domain enums for the evidence governance decision engine."""

from enum import StrEnum


class Effect(StrEnum):
    """Outcome of a single rule or policy evaluation."""

    ALLOW = "ALLOW"
    DENY = "DENY"


class ResidencyTier(StrEnum):
    """How strictly a jurisdiction keeps data inside its borders."""

    STRICT = "STRICT"
    MODERATE = "MODERATE"
    FLEXIBLE = "FLEXIBLE"


class RoutingOutcome(StrEnum):
    """Terminal states of a cross-jurisdiction routing request."""

    DIRECT_ACCESS = "DIRECT_ACCESS"
    APPROVED = "APPROVED"
    CONDITIONAL = "CONDITIONAL"
    DENIED = "DENIED"


class ResidencyCompliance(StrEnum):
    """Data residency compliance status attached to a routing decision."""

    COMPLIANT = "COMPLIANT"
    NON_COMPLIANT = "NON_COMPLIANT"
    REQUIRES_REVIEW = "REQUIRES_REVIEW"


class Approval(StrEnum):
    """Approval roles a cross-jurisdiction request or export may require."""

    COURT_ORDER = "COURT_ORDER"
    DATA_PROTECTION_AUTHORITY = "DATA_PROTECTION_AUTHORITY"
    ADMIN_APPROVAL = "ADMIN_APPROVAL"
    SENIOR_LEGAL_OFFICER = "SENIOR_LEGAL_OFFICER"
    LAW_ENFORCEMENT_LIAISON = "LAW_ENFORCEMENT_LIAISON"
    INTERNATIONAL_LEGAL_COUNSEL = "INTERNATIONAL_LEGAL_COUNSEL"
    COMPLIANCE_OFFICER = "COMPLIANCE_OFFICER"
    SENIOR_APPROVAL = "SENIOR_APPROVAL"
    DATA_LOCALIZATION_COMPLIANCE = "DATA_LOCALIZATION_COMPLIANCE"


class Restriction(StrEnum):
    """Restrictions placed on granted access or exports."""

    VIEW_ONLY_ACCESS = "VIEW_ONLY_ACCESS"
    AUDIT_ALL_ACCESS = "AUDIT_ALL_ACCESS"
    REDACTION_REQUIRED = "REDACTION_REQUIRED"
    METADATA_ONLY = "METADATA_ONLY"


class ExportType(StrEnum):
    """Evidence export flavours."""

    FULL_EXPORT = "FULL_EXPORT"
    METADATA_EXPORT = "METADATA_EXPORT"
    LEGAL_BUNDLE = "LEGAL_BUNDLE"


class SecurityEventType(StrEnum):
    """Auditable security events emitted by the router."""

    CROSS_JURISDICTION_ACCESS_GRANTED = "CROSS_JURISDICTION_ACCESS_GRANTED"
    CROSS_JURISDICTION_ACCESS_REVOKED = "CROSS_JURISDICTION_ACCESS_REVOKED"


class RecommendationPriority(StrEnum):
    """Priority of a compliance report recommendation."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
