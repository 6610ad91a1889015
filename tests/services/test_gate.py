"""Tests for CapabilityGate."""

from __future__ import annotations

import pytest

from applemcp.domain.errors import AccessDeniedError
from applemcp.domain.types import Domain
from applemcp.services.gate import CapabilityGate, remediation_message


class TestCapabilityGate:
    def test_granted(self, bridge) -> None:
        gate = CapabilityGate(bridge)
        gate.check_access(Domain.REMINDERS)
        assert bridge.calls == [("probe", Domain.REMINDERS)]

    def test_denied_names_privacy_setting(self, bridge) -> None:
        bridge.denied.add(Domain.CALENDAR)
        with pytest.raises(AccessDeniedError) as exc_info:
            CapabilityGate(bridge).check_access(Domain.CALENDAR)
        err = exc_info.value
        assert err.message == (
            "Cannot access Calendar app. Please grant access in "
            "System Settings > Privacy & Security > Calendars."
        )
        assert err.detail["domain"] == "calendar"

    def test_not_cached(self, bridge) -> None:
        gate = CapabilityGate(bridge)
        bridge.denied.add(Domain.NOTES)
        assert gate.is_granted(Domain.NOTES) is False
        bridge.denied.clear()
        assert gate.is_granted(Domain.NOTES) is True
        assert len(bridge.calls_to("probe")) == 2

    @pytest.mark.parametrize("domain", list(Domain))
    def test_every_domain_has_remediation(self, domain: Domain) -> None:
        assert "System Settings" in remediation_message(domain)
