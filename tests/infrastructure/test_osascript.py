"""Tests for OsascriptBridge with subprocess mocked out."""

from __future__ import annotations

import json
import subprocess
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from applemcp.domain.matching import SearchPredicate
from applemcp.domain.types import Domain
from applemcp.infrastructure.bridge import BridgeError, StoreHandle
from applemcp.infrastructure.osascript import OsascriptBridge


def _completed(
    stdout: str = "", returncode: int = 0, stderr: str = ""
) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(
        args=[], returncode=returncode, stdout=stdout, stderr=stderr
    )


def _request(run_mock) -> dict:
    argv = run_mock.call_args.args[0]
    return json.loads(argv[-1])


@pytest.fixture
def osa(tmp_path: Path) -> OsascriptBridge:
    return OsascriptBridge(
        osascript_path="/usr/bin/osascript", timeout=5, chat_db=tmp_path / "x.db"
    )


REMINDERS = StoreHandle(domain=Domain.REMINDERS, key="L1", name="Inbox", is_default=True)


class TestProcessPlumbing:
    def test_runs_jxa_program(self, osa: OsascriptBridge) -> None:
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed("3")
            osa.probe(Domain.CONTACTS)
        argv = run.call_args.args[0]
        assert argv[:3] == ["/usr/bin/osascript", "-l", "JavaScript"]
        assert _request(run) == {"domain": "contacts", "action": "probe"}
        assert run.call_args.kwargs["timeout"] == 5

    def test_nonzero_exit_raises(self, osa: OsascriptBridge) -> None:
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed(returncode=1, stderr="Not authorized (-1743)")
            with pytest.raises(BridgeError, match="Not authorized"):
                osa.probe(Domain.REMINDERS)

    def test_timeout_raises(self, osa: OsascriptBridge) -> None:
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.side_effect = subprocess.TimeoutExpired(cmd="osascript", timeout=5)
            with pytest.raises(BridgeError, match="timed out"):
                osa.probe(Domain.NOTES)

    def test_missing_binary_raises(self, osa: OsascriptBridge) -> None:
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.side_effect = FileNotFoundError("osascript")
            with pytest.raises(BridgeError, match="Cannot run osascript"):
                osa.probe(Domain.NOTES)

    def test_unparsable_output_raises(self, osa: OsascriptBridge) -> None:
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed("not json")
            with pytest.raises(BridgeError, match="Unparsable"):
                osa.list_backing_stores(Domain.REMINDERS)


class TestCollectionCalls:
    def test_list_backing_stores(self, osa: OsascriptBridge) -> None:
        stores = [{"key": "L1", "name": "Inbox", "is_default": True}]
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed(json.dumps(stores))
            handles = osa.list_backing_stores(Domain.REMINDERS)
        assert handles == [REMINDERS]

    def test_search_maps_native_fields(self, osa: OsascriptBridge) -> None:
        predicate = SearchPredicate(text="milk", fields=("title", "notes"))
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed("[]")
            osa.search_by_predicate(REMINDERS, predicate)
        request = _request(run)
        assert request["fields"] == ["name", "body"]
        assert request["key"] == "L1"
        assert request["start"] is None

    def test_search_sends_iso_bounds(self, osa: OsascriptBridge) -> None:
        calendar = StoreHandle(domain=Domain.CALENDAR, key="Home", name="Home")
        predicate = SearchPredicate(start=datetime(2026, 3, 2, tzinfo=UTC))
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed("[]")
            osa.search_by_predicate(calendar, predicate)
        assert _request(run)["start"] == "2026-03-02T00:00:00+00:00"

    def test_insert_serializes_datetimes(self, osa: OsascriptBridge) -> None:
        record = {"title": "x", "due_date": datetime(2026, 3, 2, tzinfo=UTC)}
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed(json.dumps({"id": "r9", "title": "x"}))
            created = osa.insert(REMINDERS, record)
        assert created["id"] == "r9"
        assert _request(run)["record"]["due_date"] == "2026-03-02T00:00:00+00:00"

    def test_insert_rejects_non_object(self, osa: OsascriptBridge) -> None:
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed("[]")
            with pytest.raises(BridgeError):
                osa.insert(REMINDERS, {"title": "x"})

    def test_set_field(self, osa: OsascriptBridge) -> None:
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed("true")
            assert osa.set_field(REMINDERS, "r1", "is_completed", True) is True
        request = _request(run)
        assert request["field"] == "completed"
        assert request["value"] is True

    def test_set_field_missing(self, osa: OsascriptBridge) -> None:
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed("false")
            assert osa.set_field(REMINDERS, "r1", "is_completed", True) is False


class TestMessages:
    def test_send_uses_applescript_argv(self, osa: OsascriptBridge) -> None:
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            run.return_value = _completed()
            osa.send_message("+15550001111", 'say "hi"')
        argv = run.call_args.args[0]
        assert argv[1] == "-e"
        assert argv[-2:] == ["+15550001111", 'say "hi"']

    def test_messages_access_checks_database(self, osa: OsascriptBridge) -> None:
        with patch("applemcp.infrastructure.osascript.subprocess.run") as run:
            with pytest.raises(BridgeError, match="not found"):
                osa.probe(Domain.MESSAGES)
        run.assert_not_called()
