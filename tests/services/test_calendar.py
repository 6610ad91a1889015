"""Tests for CalendarService through the dispatcher."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from applemcp.domain.errors import ArgumentValidationError, CreateFailedError


def _find(dispatcher, **args):
    return dispatcher.invoke("calendar", {"operation": "find", **args})


class TestList:
    def test_lists_all_calendars(self, dispatcher, calendar_bridge) -> None:
        result = dispatcher.invoke("calendar", {"operation": "list"})
        assert [e["id"] for e in result.data["items"]] == ["h1", "h2", "w1"]


class TestFind:
    def test_text_only_strict(self, dispatcher, calendar_bridge) -> None:
        result = _find(dispatcher, searchText="Team")
        assert [e["id"] for e in result.data["items"]] == ["h2", "w1"]
        assert result.data["fallback"] is False

    def test_text_only_fallback(self, dispatcher, calendar_bridge) -> None:
        result = _find(dispatcher, searchText="main st")
        assert [e["id"] for e in result.data["items"]] == ["h1"]
        assert result.data["fallback"] is True

    def test_date_range_narrows_then_filters(self, dispatcher, calendar_bridge) -> None:
        result = _find(
            dispatcher,
            searchText="Team",
            startDate="2026-03-02T00:00:00+00:00",
            endDate="2026-03-02T23:59:59+00:00",
        )
        assert [e["id"] for e in result.data["items"]] == ["w1"]

    def test_every_result_satisfies_both_criteria(self, dispatcher, calendar_bridge) -> None:
        start = datetime.fromisoformat("2026-03-01T00:00:00+00:00")
        end = datetime.fromisoformat("2026-03-04T00:00:00+00:00")
        result = _find(
            dispatcher, searchText="e", startDate=start.isoformat(), endDate=end.isoformat()
        )
        for event in result.data["items"]:
            assert datetime.fromisoformat(event["end_date"]) >= start
            assert datetime.fromisoformat(event["start_date"]) <= end
            assert any("e" in (event[f] or "") for f in ("title", "description", "location"))

    def test_no_fallback_with_range(self, dispatcher, calendar_bridge) -> None:
        result = _find(dispatcher, searchText="DENTIST", startDate="2026-03-01T00:00:00+00:00")
        assert result.data["items"] == []
        assert result.data["fallback"] is False
        assert not calendar_bridge.calls_to("read_all")

    def test_event_spanning_range_start_is_found(self, dispatcher, calendar_bridge) -> None:
        result = _find(dispatcher, searchText="Dentist", startDate="2026-03-02T10:30:00+00:00")
        assert [e["id"] for e in result.data["items"]] == ["h1"]

    def test_inverted_range_rejected(self, dispatcher, calendar_bridge) -> None:
        with pytest.raises(ArgumentValidationError):
            _find(
                dispatcher,
                searchText="x",
                startDate="2026-03-05T00:00:00+00:00",
                endDate="2026-03-01T00:00:00+00:00",
            )
        assert calendar_bridge.calls == []


class TestCreate:
    def test_end_is_start_plus_duration(self, dispatcher, calendar_bridge) -> None:
        result = dispatcher.invoke(
            "calendar",
            {
                "operation": "create",
                "title": "Review",
                "startDate": "2026-03-06T14:00:00+00:00",
                "duration": 45,
                "location": "Room 2",
            },
        )
        item = result.data["item"]
        assert item["calendar_name"] == "Home"
        end = datetime.fromisoformat(item["end_date"])
        assert end - datetime.fromisoformat(item["start_date"]) == timedelta(minutes=45)
        assert item["location"] == "Room 2"
        assert item["description"] == ""

    def test_zero_duration(self, dispatcher, calendar_bridge) -> None:
        result = dispatcher.invoke(
            "calendar",
            {
                "operation": "create",
                "title": "Reminder",
                "startDate": "2026-03-06T14:00:00+00:00",
                "duration": 0,
            },
        )
        item = result.data["item"]
        assert item["start_date"] == item["end_date"]

    @pytest.mark.parametrize("duration", [1e12, 366 * 24 * 60 + 1])
    def test_duration_too_long(self, dispatcher, calendar_bridge, duration: float) -> None:
        with pytest.raises(ArgumentValidationError) as exc_info:
            dispatcher.invoke(
                "calendar",
                {
                    "operation": "create",
                    "title": "Forever",
                    "startDate": "2026-03-06T14:00:00+00:00",
                    "duration": duration,
                },
            )
        assert exc_info.value.field == "duration"
        assert not calendar_bridge.calls_to("insert")

    def test_end_past_last_representable_date(self, dispatcher, calendar_bridge) -> None:
        with pytest.raises(ArgumentValidationError) as exc_info:
            dispatcher.invoke(
                "calendar",
                {
                    "operation": "create",
                    "title": "Late",
                    "startDate": "9999-12-31T12:00:00+00:00",
                    "duration": 24 * 60,
                },
            )
        assert exc_info.value.field == "duration"
        assert not calendar_bridge.calls_to("insert")

    def test_missing_duration(self, dispatcher, calendar_bridge) -> None:
        with pytest.raises(ArgumentValidationError) as exc_info:
            dispatcher.invoke(
                "calendar",
                {"operation": "create", "title": "x", "startDate": "2026-03-06T14:00:00"},
            )
        assert exc_info.value.field == "duration"

    def test_failed_insert(self, dispatcher, calendar_bridge) -> None:
        calendar_bridge.break_store("Home")
        with pytest.raises(CreateFailedError):
            dispatcher.invoke(
                "calendar",
                {
                    "operation": "create",
                    "title": "x",
                    "startDate": "2026-03-06T14:00:00+00:00",
                    "duration": 10,
                },
            )
