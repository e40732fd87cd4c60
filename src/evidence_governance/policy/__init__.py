"""Hybrid RBAC/ABAC policy evaluation."""

from evidence_governance.policy.attributes import (
    AttributeProvider,
    AttributeProviderRegistry,
    DeviceAttributeProvider,
    JurisdictionAttributeProvider,
    TimeAttributeProvider,
    detect_device_type,
    location_attributes,
    register_default_providers,
)
from evidence_governance.policy.engine import POLICY_EVALUATION_FAILED, PolicyEngine
from evidence_governance.policy.policy import Policy, PolicyConditions
from evidence_governance.policy.rules import IPWhitelistRule, JurisdictionRule, Rule, TimeBasedRule

__all__ = [
    "POLICY_EVALUATION_FAILED",
    "AttributeProvider",
    "AttributeProviderRegistry",
    "DeviceAttributeProvider",
    "IPWhitelistRule",
    "JurisdictionAttributeProvider",
    "JurisdictionRule",
    "Policy",
    "PolicyConditions",
    "PolicyEngine",
    "Rule",
    "TimeAttributeProvider",
    "TimeBasedRule",
    "detect_device_type",
    "location_attributes",
    "register_default_providers",
]
