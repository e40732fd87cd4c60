"""Attribute providers feeding the policy engine.

Each provider is a callable ``(user, resource, context) -> dict`` (plain or
async). Providers are gathered fail-open: a failing provider only removes its own
sub-map from the bundle, and rules that depend on it decide how to treat the gap.
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol
from zoneinfo import ZoneInfo

from evidence_governance.models import (
    AttributeBundle,
    EnvironmentAttributes,
    RequestContext,
    ResourceAttributes,
    UserAttributes,
)

if TYPE_CHECKING:
    from evidence_governance.jurisdiction.registry import JurisdictionRegistry
    from evidence_governance.settings import PolicySettings

logger = logging.getLogger(__name__)

AttributeProvider = Callable[
    [UserAttributes, ResourceAttributes, RequestContext],
    dict[str, Any] | Awaitable[dict[str, Any]],
]

_MOBILE_PATTERN = re.compile(r"Mobile|Android|iPhone|iPad")
_TABLET_PATTERN = re.compile(r"Tablet")


class AttributeProviderRegistry:
    """Named attribute providers, invoked in registration order."""

    def __init__(self) -> None:
        self._providers: dict[str, AttributeProvider] = {}

    def register(self, name: str, provider: AttributeProvider) -> None:
        """Register a provider; an existing provider with the same name is replaced."""
        if name in self._providers:
            logger.info("Replacing attribute provider '%s'", name)
        self._providers[name] = provider

    def unregister(self, name: str) -> None:
        self._providers.pop(name, None)

    @property
    def names(self) -> list[str]:
        return list(self._providers)

    async def gather_all(
        self,
        user: UserAttributes,
        resource: ResourceAttributes,
        context: RequestContext,
    ) -> AttributeBundle:
        """Build the attribute bundle for one decision."""
        provided: dict[str, dict[str, Any]] = {}
        for name, provider in list(self._providers.items()):
            try:
                result = provider(user, resource, context)
                if inspect.isawaitable(result):
                    result = await result
                provided[name] = dict(result)
            except Exception:
                logger.warning("Failed to gather %s attributes", name, exc_info=True)

        return AttributeBundle(
            user=user,
            resource=resource,
            environment=EnvironmentAttributes(
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                location=context.location,
            ),
            providers=provided,
        )


# ─── Default providers ───────────────────────────────────


class TimeAttributeProvider:
    """Current hour, working-hours flag and weekend flag in a fixed timezone."""

    def __init__(
        self,
        timezone: str = "UTC",
        working_hours: tuple[int, int] = (8, 18),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._timezone = timezone
        self._tz = ZoneInfo(timezone)
        self._working_hours = working_hours
        self._clock = clock or (lambda: datetime.now(UTC))

    def __call__(
        self,
        user: UserAttributes,
        resource: ResourceAttributes,
        context: RequestContext,
    ) -> dict[str, Any]:
        now = self._clock().astimezone(self._tz)
        start, end = self._working_hours
        return {
            "current_hour": now.hour,
            "is_working_hours": start <= now.hour <= end,
            "is_weekend": now.weekday() >= 5,
            "timezone": self._timezone,
        }


def location_attributes(
    user: UserAttributes,
    resource: ResourceAttributes,
    context: RequestContext,
) -> dict[str, Any]:
    return {
        "ip_address": context.ip_address,
        "country": context.country,
        "region": context.region,
        "is_vpn": context.is_vpn,
    }


def detect_device_type(user_agent: str | None) -> str:
    """Classify a user agent as mobile, tablet or desktop."""
    if user_agent and _MOBILE_PATTERN.search(user_agent):
        return "mobile"
    if user_agent and _TABLET_PATTERN.search(user_agent):
        return "tablet"
    return "desktop"


class TrustedDeviceLookup(Protocol):
    async def is_trusted(self, user_id: str, device_fingerprint: str) -> bool: ...


class DeviceAttributeProvider:
    """User agent, device type and trust status of the requesting device.

    Devices are untrusted unless a lookup is configured and confirms the fingerprint.
    """

    def __init__(self, trusted_devices: TrustedDeviceLookup | None = None) -> None:
        self._trusted_devices = trusted_devices

    async def __call__(
        self,
        user: UserAttributes,
        resource: ResourceAttributes,
        context: RequestContext,
    ) -> dict[str, Any]:
        trusted = False
        if self._trusted_devices is not None and context.device_fingerprint:
            trusted = await self._trusted_devices.is_trusted(user.id, context.device_fingerprint)
        return {
            "user_agent": context.user_agent,
            "device_type": detect_device_type(context.user_agent),
            "is_trusted_device": trusted,
        }


class JurisdictionAttributeProvider:
    """Jurisdictions of user and resource, and the residency tiers behind them."""

    def __init__(self, registry: JurisdictionRegistry) -> None:
        self._registry = registry

    def __call__(
        self,
        user: UserAttributes,
        resource: ResourceAttributes,
        context: RequestContext,
    ) -> dict[str, Any]:
        user_jurisdiction = self._registry.get(user.jurisdiction)
        resource_jurisdiction = self._registry.get(resource.jurisdiction)
        return {
            "user_jurisdiction": user.jurisdiction,
            "resource_jurisdiction": resource.jurisdiction,
            "cross_jurisdiction": user.jurisdiction != resource.jurisdiction,
            "user_residency": user_jurisdiction.data_residency if user_jurisdiction else None,
            "resource_residency": resource_jurisdiction.data_residency if resource_jurisdiction else None,
        }


def register_default_providers(
    registry: AttributeProviderRegistry,
    *,
    jurisdictions: JurisdictionRegistry,
    settings: PolicySettings,
    trusted_devices: TrustedDeviceLookup | None = None,
) -> AttributeProviderRegistry:
    """Register the time, location, device and jurisdiction providers."""
    registry.register(
        "time",
        TimeAttributeProvider(
            timezone=settings.timezone,
            working_hours=(settings.working_hours_start, settings.working_hours_end),
        ),
    )
    registry.register("location", location_attributes)
    registry.register("device", DeviceAttributeProvider(trusted_devices))
    registry.register("jurisdiction", JurisdictionAttributeProvider(jurisdictions))
    return registry
