"""Jurisdiction compliance reporting."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from evidence_governance.enums import RecommendationPriority
from evidence_governance.models import (
    ComplianceRecommendation,
    ComplianceReport,
    ComplianceReportDetails,
    ComplianceSummary,
    ComplianceViolation,
    RoutingStatistics,
)

if TYPE_CHECKING:
    from evidence_governance.repository.protocols import (
        AccessGrantRepository,
        ComplianceViolationRepository,
        RoutingLogRepository,
    )

_TIME_RANGE = re.compile(r"^(\d+)([dhm])$")
_UNITS = {"d": timedelta(days=1), "h": timedelta(hours=1), "m": timedelta(minutes=1)}
DEFAULT_TIME_RANGE = timedelta(days=30)
EARLIEST = datetime.min.replace(tzinfo=UTC)

BASE_SCORE = 100.0
VIOLATION_PENALTY = 10.0
DENIAL_RATE_WEIGHT = 20.0
# Denials above this share of approvals trigger an access-policy review
DENIAL_REVIEW_RATIO = 0.2


def parse_time_range(time_range: str) -> timedelta:
    """Parse ``<n>d``, ``<n>h`` or ``<n>m``; anything else means 30 days."""
    match = _TIME_RANGE.match(time_range)
    if match is None:
        return DEFAULT_TIME_RANGE
    amount, unit = match.groups()
    try:
        return int(amount) * _UNITS[unit]
    except (OverflowError, ValueError):
        # ValueError: digit strings beyond the int conversion limit
        return timedelta.max


def window_start(now: datetime, time_range: str) -> datetime:
    """Start of the reporting window, clamped to the earliest representable moment."""
    try:
        return now - parse_time_range(time_range)
    except OverflowError:
        return EARLIEST


def calculate_compliance_score(routing: RoutingStatistics, violation_count: int) -> float:
    """100 minus 10 per violation minus 20 × denial rate, never below 0."""
    denial_penalty = 0.0
    if routing.cross_jurisdiction_requests > 0:
        denial_penalty = routing.denied_requests / routing.cross_jurisdiction_requests * DENIAL_RATE_WEIGHT
    return max(0.0, BASE_SCORE - violation_count * VIOLATION_PENALTY - denial_penalty)


def generate_compliance_recommendations(
    routing: RoutingStatistics,
    violations: list[ComplianceViolation],
) -> list[ComplianceRecommendation]:
    recommendations: list[ComplianceRecommendation] = []

    if violations:
        recommendations.append(
            ComplianceRecommendation(
                priority=RecommendationPriority.HIGH,
                category="Compliance Violations",
                recommendation="Address compliance violations immediately",
                impact="Legal and regulatory risk",
            )
        )

    if routing.denied_requests > routing.approved_requests * DENIAL_REVIEW_RATIO:
        recommendations.append(
            ComplianceRecommendation(
                priority=RecommendationPriority.MEDIUM,
                category="Access Management",
                recommendation="Review cross-jurisdiction access policies",
                impact="Operational efficiency",
            )
        )

    return recommendations


class ComplianceReportService:
    def __init__(
        self,
        routing_log: RoutingLogRepository,
        grants: AccessGrantRepository,
        violations: ComplianceViolationRepository,
        *,
        default_time_range: str = "30d",
    ) -> None:
        self._routing_log = routing_log
        self._grants = grants
        self._violations = violations
        self._default_time_range = default_time_range

    async def get_jurisdiction_compliance_report(
        self,
        jurisdiction: str,
        time_range: str | None = None,
    ) -> ComplianceReport:
        time_range = time_range or self._default_time_range
        now = datetime.now(UTC)
        since = window_start(now, time_range)

        # Repositories share one session, which does not allow concurrent queries
        routing = await self._routing_log.get_statistics(jurisdiction, since)
        grants = await self._grants.get_statistics(jurisdiction, since)
        violations = await self._violations.list_since(jurisdiction, since)

        return ComplianceReport(
            jurisdiction=jurisdiction,
            time_range=time_range,
            generated_at=now,
            summary=ComplianceSummary(
                total_cases=routing.total_cases,
                cross_jurisdiction_requests=routing.cross_jurisdiction_requests,
                approved_requests=routing.approved_requests,
                denied_requests=routing.denied_requests,
                active_access_grants=grants.active,
                expired_access_grants=grants.expired,
                compliance_violations=len(violations),
                compliance_score=calculate_compliance_score(routing, len(violations)),
            ),
            details=ComplianceReportDetails(routing=routing, access_grants=grants, violations=violations),
            recommendations=generate_compliance_recommendations(routing, violations),
        )
