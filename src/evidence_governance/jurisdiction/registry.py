"""Jurisdiction reference data and data residency rules.

Loaded once when the registry is constructed and never mutated afterwards;
concurrent decisions only ever read from it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from evidence_governance.enums import ResidencyTier
from evidence_governance.exceptions import JurisdictionConfigurationError

logger = logging.getLogger(__name__)

ANY_REGION = "*"


class Jurisdiction(BaseModel):
    """A legal jurisdiction cases and users belong to."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=1)
    name: str
    regions: tuple[str, ...] = ()
    data_residency: ResidencyTier
    legal_framework: str = ""
    storage_regions: tuple[str, ...] = ()
    timezone: str = "UTC"
    language: str = "en"
    currency: str = "USD"


class DataResidencyRule(BaseModel):
    """Where a jurisdiction's data may live and under which conditions it may leave."""

    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    rule: str
    description: str = ""
    allowed_regions: tuple[str, ...] = ()
    cross_border_transfer: bool = False
    transfer_conditions: tuple[str, ...] = ()
    exceptions: tuple[str, ...] = ()
    compliance_requirement: str = ""

    @model_validator(mode="after")
    def _conditions_required_for_transfer(self) -> DataResidencyRule:
        if self.cross_border_transfer and not self.transfer_conditions:
            msg = f"{self.jurisdiction}: cross-border transfer requires at least one transfer condition"
            raise ValueError(msg)
        return self

    @property
    def allows_any_region(self) -> bool:
        return ANY_REGION in self.allowed_regions


class ComplianceFrameworkInfo(BaseModel):
    """Descriptive metadata about a legal framework in force in a jurisdiction."""

    model_config = ConfigDict(frozen=True)

    name: str
    requirements: tuple[str, ...] = ()
    penalties: str = ""


class JurisdictionRegistry:
    """Read-only lookup of jurisdictions, residency rules and frameworks."""

    def __init__(
        self,
        jurisdictions: Iterable[Jurisdiction] | None = None,
        residency_rules: Iterable[DataResidencyRule] | None = None,
        frameworks: dict[str, list[ComplianceFrameworkInfo]] | None = None,
    ) -> None:
        if jurisdictions is None or residency_rules is None or frameworks is None:
            from evidence_governance.jurisdiction import defaults

            jurisdictions = defaults.JURISDICTIONS if jurisdictions is None else jurisdictions
            residency_rules = defaults.RESIDENCY_RULES if residency_rules is None else residency_rules
            frameworks = defaults.COMPLIANCE_FRAMEWORKS if frameworks is None else frameworks

        self._jurisdictions: dict[str, Jurisdiction] = {j.code: j for j in jurisdictions}
        self._rules: dict[str, DataResidencyRule] = {r.jurisdiction: r for r in residency_rules}
        self._frameworks: dict[str, tuple[ComplianceFrameworkInfo, ...]] = {
            code: tuple(items) for code, items in frameworks.items()
        }
        self._validate()

    def _validate(self) -> None:
        """Every STRICT jurisdiction either forbids transfer or gates it on conditions."""
        for code, jurisdiction in self._jurisdictions.items():
            if jurisdiction.data_residency != ResidencyTier.STRICT:
                continue
            rule = self._rules.get(code)
            if rule is None:
                logger.debug("STRICT jurisdiction %s has no residency rule; access will be denied", code)
                continue
            if rule.cross_border_transfer and not rule.transfer_conditions:
                msg = f"STRICT jurisdiction {code} allows cross-border transfer without auditable conditions"
                raise JurisdictionConfigurationError(msg)

    def get(self, code: str | None) -> Jurisdiction | None:
        if code is None:
            return None
        return self._jurisdictions.get(code)

    def get_residency_rule(self, code: str | None) -> DataResidencyRule | None:
        if code is None:
            return None
        return self._rules.get(code)

    def get_frameworks(self, code: str) -> list[ComplianceFrameworkInfo]:
        return list(self._frameworks.get(code, ()))

    @property
    def codes(self) -> list[str]:
        return list(self._jurisdictions)
