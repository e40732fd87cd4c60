"""Policy rules.

A rule is any object with ``async evaluate(attributes) -> RuleDecision``. Rules
read the attribute bundle and nothing else.

Example:
    class ClearanceRule:
        def __init__(self, minimum: int) -> None:
            self.minimum = minimum

        async def evaluate(self, attributes: AttributeBundle) -> RuleDecision:
            level = attributes.user.clearance_level
            if level is None or level < self.minimum:
                return RuleDecision.deny(f"Clearance level {self.minimum} required")
            return RuleDecision.allow()
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from evidence_governance.models import AttributeBundle, RuleDecision


@runtime_checkable
class Rule(Protocol):
    async def evaluate(self, attributes: AttributeBundle) -> RuleDecision: ...


class TimeBasedRule:
    """Allows access only within an inclusive hour window."""

    def __init__(self, low_hour: int = 8, high_hour: int = 18) -> None:
        if not 0 <= low_hour <= high_hour <= 23:
            raise ValueError(f"Invalid hour window {low_hour}-{high_hour}")
        self.low_hour = low_hour
        self.high_hour = high_hour

    @property
    def window(self) -> str:
        return f"{self.low_hour}-{self.high_hour}"

    async def evaluate(self, attributes: AttributeBundle) -> RuleDecision:
        time_attributes = attributes.provided("time") or {}
        current_hour = time_attributes.get("current_hour")
        if current_hour is None:
            return RuleDecision.deny(f"Current hour unavailable for working hours ({self.window}) check")
        if current_hour < self.low_hour or current_hour > self.high_hour:
            return RuleDecision.deny(f"Access denied outside working hours ({self.window})")
        return RuleDecision.allow()


class JurisdictionRule:
    """Denies any access where user and resource jurisdictions differ.

    Only attach this to policies whose resource types are not mediated by the
    cross-jurisdiction router.
    """

    async def evaluate(self, attributes: AttributeBundle) -> RuleDecision:
        if attributes.user.jurisdiction != attributes.resource.jurisdiction:
            return RuleDecision.deny("Cross-jurisdiction access not permitted")
        return RuleDecision.allow()


class IPWhitelistRule:
    def __init__(self, allowed_ips: Iterable[str] = ()) -> None:
        self.allowed_ips = frozenset(allowed_ips)

    async def evaluate(self, attributes: AttributeBundle) -> RuleDecision:
        if attributes.environment.ip_address not in self.allowed_ips:
            return RuleDecision.deny("IP address not in whitelist")
        return RuleDecision.allow()
