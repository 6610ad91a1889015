"""CapabilityGate — per-domain permission check.

macOS offers no API to ask whether automation access was granted, so
the gate issues a cheap probe (counting items) and treats any failure
as a denial. The result is never cached: the user may grant access in
the middle of a session.
"""

from __future__ import annotations

import logging

from applemcp.domain.errors import AccessDeniedError
from applemcp.domain.types import APP_NAMES, PRIVACY_SETTINGS, Domain
from applemcp.infrastructure.bridge import AutomationBridge, BridgeError
from applemcp.services.telemetry import trace_span

logger = logging.getLogger(__name__)


def remediation_message(domain: Domain) -> str:
    """User-facing instruction naming the privacy setting for *domain*."""
    return (
        f"Cannot access {APP_NAMES[domain]} app. "
        f"Please grant access in {PRIVACY_SETTINGS[domain]}."
    )


class CapabilityGate:
    """Grants or denies a whole domain; never partial."""

    def __init__(self, bridge: AutomationBridge) -> None:
        self._bridge = bridge

    def check_access(self, domain: Domain) -> None:
        """Raise AccessDeniedError unless the probe for *domain* succeeds."""
        with trace_span(f"probe:{domain.value}"):
            try:
                self._bridge.probe(domain)
            except BridgeError as exc:
                logger.info("Access probe for %s failed: %s", domain.value, exc)
                raise AccessDeniedError(
                    remediation_message(domain),
                    detail={"domain": domain.value, "setting": PRIVACY_SETTINGS[domain]},
                ) from exc

    def is_granted(self, domain: Domain) -> bool:
        try:
            self.check_access(domain)
        except AccessDeniedError:
            return False
        return True
