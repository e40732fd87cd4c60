"""Hybrid RBAC/ABAC policy engine.

Policies are selected by role, resource type and action (RBAC) and then decided
on the gathered request attributes (ABAC). The first DENY from any applicable
policy wins; the engine always returns a decision and never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from opentelemetry import metrics, trace

from evidence_governance.models import PolicyDecision, RequestContext, RuleDecision
from evidence_governance.policy.rules import JurisdictionRule

if TYPE_CHECKING:
    from evidence_governance.models import AttributeBundle, ResourceAttributes, UserAttributes
    from evidence_governance.policy.attributes import AttributeProviderRegistry
    from evidence_governance.policy.policy import Policy

logger = logging.getLogger(__name__)
_tracer = trace.get_tracer("evidence.policy")
_meter = metrics.get_meter("evidence.policy")
_decision_counter = _meter.create_counter(
    name="evidence.policy.decisions",
    description="Policy decisions by outcome",
    unit="decisions",
)

POLICY_EVALUATION_FAILED = "Policy evaluation failed"


class PolicyEngine:
    """Evaluates registered policies against gathered request attributes."""

    def __init__(
        self,
        providers: AttributeProviderRegistry,
        *,
        routed_resource_types: Iterable[str] = ("case", "evidence"),
    ) -> None:
        self._providers = providers
        self._policies: dict[str, Policy] = {}
        self._routed_resource_types = frozenset(routed_resource_types)

    @property
    def providers(self) -> AttributeProviderRegistry:
        return self._providers

    # ─── Policy management ───────────────────────────────

    def add_policy(self, policy: Policy) -> None:
        """Register a policy; a policy with the same id is replaced."""
        if any(isinstance(rule, JurisdictionRule) for rule in policy.rules) and self._covers_routed_resources(policy):
            logger.warning(
                "Policy %s applies JurisdictionRule to router-mediated resource types %s; "
                "legitimate cross-jurisdiction access to them will be denied",
                policy.id,
                sorted(self._routed_resource_types),
            )
        self._policies[policy.id] = policy

    def remove_policy(self, policy_id: str) -> None:
        self._policies.pop(policy_id, None)

    def get_policies(self) -> list[Policy]:
        return list(self._policies.values())

    def _covers_routed_resources(self, policy: Policy) -> bool:
        resource_types = policy.conditions.resource_types
        if not resource_types:
            return bool(self._routed_resource_types)
        return bool(self._routed_resource_types.intersection(resource_types))

    def find_applicable_policies(self, role: str | None, resource_type: str | None, action: str) -> list[Policy]:
        return [p for p in self._policies.values() if p.applies(role, resource_type, action)]

    # ─── Evaluation ──────────────────────────────────────

    async def evaluate_policy(
        self,
        user: UserAttributes,
        resource: ResourceAttributes,
        action: str,
        context: RequestContext | None = None,
    ) -> PolicyDecision:
        """Decide whether ``user`` may perform ``action`` on ``resource``."""
        with _tracer.start_as_current_span("evaluate_policy") as span:
            span.set_attribute("policy.action", action)
            span.set_attribute("policy.resource_type", resource.type or "")

            attributes = await self._providers.gather_all(user, resource, context or RequestContext())
            decision = await self._decide(user, resource, action, attributes)

            span.set_attribute("policy.allowed", decision.allowed)
            _decision_counter.add(1, attributes={"allowed": decision.allowed, "action": action})
            if not decision.allowed:
                logger.info(
                    "Denied %s on %s %s for user %s by policy %s: %s",
                    action,
                    resource.type,
                    resource.id,
                    user.id,
                    decision.policy,
                    decision.reason,
                )
            return decision

    async def _decide(
        self,
        user: UserAttributes,
        resource: ResourceAttributes,
        action: str,
        attributes: AttributeBundle,
    ) -> PolicyDecision:
        for policy in self.find_applicable_policies(user.role, resource.type, action):
            result = await self._evaluate_policy_rules(policy, attributes)
            if result.denied:
                return PolicyDecision(allowed=False, reason=result.reason, policy=policy.id)
        return PolicyDecision(allowed=True, attributes=attributes)

    async def _evaluate_policy_rules(self, policy: Policy, attributes: AttributeBundle) -> RuleDecision:
        try:
            return await policy.evaluate(attributes)
        except Exception:
            logger.exception("Policy %s evaluation error", policy.id)
            return RuleDecision.deny(POLICY_EVALUATION_FAILED)
