"""Policies: an applicability filter plus an ordered list of rules."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from evidence_governance.models import RuleDecision

if TYPE_CHECKING:
    from collections.abc import Sequence

    from evidence_governance.models import AttributeBundle
    from evidence_governance.policy.rules import Rule

logger = logging.getLogger(__name__)


class PolicyConditions(BaseModel):
    """Role / resource type / action allowlists. An empty or absent list matches everything."""

    model_config = ConfigDict(frozen=True)

    roles: tuple[str, ...] | None = None
    resource_types: tuple[str, ...] | None = None
    actions: tuple[str, ...] | None = None

    def matches(self, role: str | None, resource_type: str | None, action: str) -> bool:
        if self.roles and role not in self.roles:
            return False
        if self.resource_types and resource_type not in self.resource_types:
            return False
        return not (self.actions and action not in self.actions)


class Policy:
    """A named, ordered set of rules evaluated with first-DENY short-circuit."""

    def __init__(
        self,
        id: str,
        name: str,
        rules: Sequence[Rule],
        conditions: PolicyConditions | None = None,
    ) -> None:
        self.id = id
        self.name = name
        self.rules = list(rules)
        self.conditions = conditions or PolicyConditions()

    def __repr__(self) -> str:
        return f"Policy(id={self.id!r}, name={self.name!r}, rules={len(self.rules)})"

    def applies(self, role: str | None, resource_type: str | None, action: str) -> bool:
        return self.conditions.matches(role, resource_type, action)

    async def evaluate(self, attributes: AttributeBundle) -> RuleDecision:
        for rule in self.rules:
            result = await self._evaluate_rule(rule, attributes)
            if result.denied:
                return result
        return RuleDecision.allow()

    async def _evaluate_rule(self, rule: Rule, attributes: AttributeBundle) -> RuleDecision:
        try:
            return await rule.evaluate(attributes)
        except Exception as e:
            logger.warning("Rule %s in policy %s failed", type(rule).__name__, self.id, exc_info=True)
            return RuleDecision.deny(f"Rule evaluation failed: {e}")
