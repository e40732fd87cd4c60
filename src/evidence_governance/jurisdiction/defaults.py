"""Built-in jurisdiction, residency and framework tables."""

from __future__ import annotations

from evidence_governance.enums import ResidencyTier
from evidence_governance.jurisdiction.registry import (
    ComplianceFrameworkInfo,
    DataResidencyRule,
    Jurisdiction,
)

JURISDICTIONS: list[Jurisdiction] = [
    Jurisdiction(
        code="IN",
        name="India",
        regions=("North", "South", "East", "West", "Central", "Northeast"),
        data_residency=ResidencyTier.STRICT,
        legal_framework="Indian Evidence Act 1872, IT Act 2000, DPDP Act 2023",
        storage_regions=("ap-south-1", "ap-south-2"),
        timezone="Asia/Kolkata",
        language="en-IN",
        currency="INR",
    ),
    Jurisdiction(
        code="US",
        name="United States",
        regions=("Federal", "State", "Local"),
        data_residency=ResidencyTier.MODERATE,
        legal_framework="Federal Rules of Evidence, State Evidence Codes",
        storage_regions=("us-east-1", "us-west-2"),
        timezone="America/New_York",
        language="en-US",
        currency="USD",
    ),
    Jurisdiction(
        code="EU",
        name="European Union",
        regions=("GDPR Zone",),
        data_residency=ResidencyTier.STRICT,
        legal_framework="GDPR, eIDAS Regulation, Digital Services Act",
        storage_regions=("eu-west-1", "eu-central-1"),
        timezone="Europe/Brussels",
        language="en-EU",
        currency="EUR",
    ),
    Jurisdiction(
        code="UK",
        name="United Kingdom",
        regions=("England", "Scotland", "Wales", "Northern Ireland"),
        data_residency=ResidencyTier.STRICT,
        legal_framework="UK GDPR, Data Protection Act 2018, Police and Criminal Evidence Act 1984",
        storage_regions=("eu-west-2",),
        timezone="Europe/London",
        language="en-GB",
        currency="GBP",
    ),
    Jurisdiction(
        code="CA",
        name="Canada",
        regions=("Federal", "Provincial"),
        data_residency=ResidencyTier.MODERATE,
        legal_framework="Canada Evidence Act, Personal Information Protection and Electronic Documents Act",
        storage_regions=("ca-central-1",),
        timezone="America/Toronto",
        language="en-CA",
        currency="CAD",
    ),
    Jurisdiction(
        code="AU",
        name="Australia",
        regions=("Federal", "State", "Territory"),
        data_residency=ResidencyTier.MODERATE,
        legal_framework="Evidence Act 1995, Privacy Act 1988, Notifiable Data Breaches scheme",
        storage_regions=("ap-southeast-2",),
        timezone="Australia/Sydney",
        language="en-AU",
        currency="AUD",
    ),
    Jurisdiction(
        code="GLOBAL",
        name="Global/International",
        regions=("International",),
        data_residency=ResidencyTier.FLEXIBLE,
        legal_framework="International Standards, ISO 27001, NIST Framework",
        storage_regions=("us-east-1", "eu-west-1", "ap-south-1"),
        timezone="UTC",
        language="en",
        currency="USD",
    ),
]

RESIDENCY_RULES: list[DataResidencyRule] = [
    DataResidencyRule(
        jurisdiction="IN",
        rule="STRICT_RESIDENCY",
        description="All data must remain within Indian borders",
        allowed_regions=("ap-south-1", "ap-south-2"),
        cross_border_transfer=False,
        exceptions=("Legal proceedings with court order",),
        compliance_requirement="DPDP Act 2023 compliance mandatory",
    ),
    DataResidencyRule(
        jurisdiction="EU",
        rule="GDPR_COMPLIANCE",
        description="GDPR-compliant data handling required",
        allowed_regions=("eu-west-1", "eu-central-1", "eu-west-2"),
        cross_border_transfer=True,
        transfer_conditions=("Adequacy decision", "Standard contractual clauses", "Binding corporate rules"),
        compliance_requirement="GDPR Article 44-49 compliance",
    ),
    DataResidencyRule(
        jurisdiction="US",
        rule="FLEXIBLE_RESIDENCY",
        description="Flexible data residency with security requirements",
        allowed_regions=("us-east-1", "us-west-2", "ca-central-1"),
        cross_border_transfer=True,
        transfer_conditions=("Adequate security measures", "Legal framework compliance"),
        compliance_requirement="SOC 2 Type II compliance",
    ),
    DataResidencyRule(
        jurisdiction="UK",
        rule="UK_GDPR_COMPLIANCE",
        description="UK GDPR and data protection compliance",
        allowed_regions=("eu-west-2", "eu-west-1"),
        cross_border_transfer=True,
        transfer_conditions=("UK adequacy regulations", "International data transfer agreement"),
        compliance_requirement="UK GDPR compliance",
    ),
    DataResidencyRule(
        jurisdiction="GLOBAL",
        rule="BEST_PRACTICE",
        description="International best practices for data handling",
        allowed_regions=("*",),
        cross_border_transfer=True,
        transfer_conditions=("Encryption in transit and at rest", "Access controls"),
        compliance_requirement="ISO 27001 compliance",
    ),
]

COMPLIANCE_FRAMEWORKS: dict[str, list[ComplianceFrameworkInfo]] = {
    "IN": [
        ComplianceFrameworkInfo(
            name="Digital Personal Data Protection Act 2023",
            requirements=("Data localization", "Consent management", "Data breach notification"),
            penalties="Up to ₹250 crores",
        ),
        ComplianceFrameworkInfo(
            name="Information Technology Act 2000",
            requirements=("Digital signature compliance", "Cyber security measures"),
            penalties="Imprisonment and fines",
        ),
    ],
    "EU": [
        ComplianceFrameworkInfo(
            name="General Data Protection Regulation (GDPR)",
            requirements=("Lawful basis", "Data minimization", "Right to erasure", "Data portability"),
            penalties="Up to €20 million or 4% of annual turnover",
        ),
        ComplianceFrameworkInfo(
            name="eIDAS Regulation",
            requirements=("Electronic identification", "Trust services", "Electronic signatures"),
            penalties="Administrative sanctions",
        ),
    ],
}
