"""Process-wide decision context owned by the hosting application."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from evidence_governance.jurisdiction import ConfiguredTransferConditionChecker, JurisdictionRegistry
from evidence_governance.policy import (
    AttributeProviderRegistry,
    Policy,
    PolicyEngine,
    TimeBasedRule,
    register_default_providers,
)
from evidence_governance.settings import PolicySettings, RoutingSettings

if TYPE_CHECKING:
    from collections.abc import Iterable

    from evidence_governance.jurisdiction import TransferConditionChecker
    from evidence_governance.policy.attributes import TrustedDeviceLookup


@dataclass
class AccessControlContext:
    """Reference tables, provider registry and policy engine shared across requests."""

    jurisdictions: JurisdictionRegistry
    policy_engine: PolicyEngine
    condition_checker: TransferConditionChecker
    routing_settings: RoutingSettings = field(default_factory=RoutingSettings)

    @property
    def providers(self) -> AttributeProviderRegistry:
        return self.policy_engine.providers


WORKING_HOURS_POLICY_ID = "working-hours"


def working_hours_policy(settings: PolicySettings) -> Policy:
    return Policy(
        WORKING_HOURS_POLICY_ID,
        "Working hours",
        [TimeBasedRule(settings.working_hours_start, settings.working_hours_end)],
    )


def build_access_context(
    *,
    policy_settings: PolicySettings | None = None,
    routing_settings: RoutingSettings | None = None,
    jurisdictions: JurisdictionRegistry | None = None,
    condition_checker: TransferConditionChecker | None = None,
    trusted_devices: TrustedDeviceLookup | None = None,
    policies: Iterable[Policy] = (),
) -> AccessControlContext:
    """Create a context with the default providers.

    The policy set holds the working-hours policy when
    ``POLICY_ENFORCE_WORKING_HOURS`` is set, followed by ``policies`` in order.
    With neither, every evaluation is allowed.
    """
    policy_settings = policy_settings or PolicySettings()
    routing_settings = routing_settings or RoutingSettings()
    jurisdictions = jurisdictions or JurisdictionRegistry()

    providers = register_default_providers(
        AttributeProviderRegistry(),
        jurisdictions=jurisdictions,
        settings=policy_settings,
        trusted_devices=trusted_devices,
    )
    engine = PolicyEngine(providers, routed_resource_types=policy_settings.routed_resource_types)
    if policy_settings.enforce_working_hours:
        engine.add_policy(working_hours_policy(policy_settings))
    for policy in policies:
        engine.add_policy(policy)

    return AccessControlContext(
        jurisdictions=jurisdictions,
        policy_engine=engine,
        condition_checker=condition_checker
        or ConfiguredTransferConditionChecker(routing_settings.satisfied_transfer_conditions),
        routing_settings=routing_settings,
    )
