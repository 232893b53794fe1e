"""Tests for the typed operations on top of the request primitive."""

from datetime import date

import pytest

from troi_client import CalculationPosition, CalendarEvent, CalendarEventType, TimeEntry, TroiClientError
from troi_client.client import DEFAULT_TIMEOUT_SECONDS

from conftest import BASE_URL, make_response, query_of, request_call


class TestCalculationPositions:

    def test_maps_display_path_to_name(self, ready_client, session):
        session.request.return_value = make_response([
            {"Id": 10, "DisplayPath": "Project A > Development", "Extra": 1},
            {"Id": 11, "DisplayPath": "Project B > Meetings"},
        ])

        positions = ready_client.list_calculation_positions()

        assert positions == [
            CalculationPosition(id=10, name="Project A > Development"),
            CalculationPosition(id=11, name="Project B > Meetings"),
        ]
        assert positions[0].to_dict() == {"id": 10, "name": "Project A > Development"}
        _, url, _ = request_call(session)
        assert url.startswith(f"{BASE_URL}/calculationPositions?")
        assert query_of(url) == {"clientId": "3", "favoritesOnly": "true", "timeRecording": "true"}

    def test_all_positions(self, ready_client, session):
        ready_client.list_calculation_positions(favourites_only=False)
        _, url, _ = request_call(session)
        assert query_of(url)["favoritesOnly"] == "false"

    def test_last_recorded_returns_list_or_none(self, ready_client, session):
        session.request.return_value = make_response([{"Id": 10}])
        assert ready_client.list_last_recorded_calculation_positions() == [{"Id": 10}]
        _, url, _ = request_call(session)
        assert url.startswith(f"{BASE_URL}/billings/calculationPositionsLastRecorded?")
        assert query_of(url) == {"clientId": "3", "employeeId": "42"}

        session.request.return_value = make_response({"Message": "nope"})
        assert ready_client.list_last_recorded_calculation_positions(employee_id=7) is None
        _, url, _ = request_call(session)
        assert query_of(url)["employeeId"] == "7"


class TestTimeEntries:

    def test_list_sorted_by_date(self, ready_client, session):
        session.request.return_value = make_response([
            {"id": 1, "Date": "2024-03-02", "Quantity": 1.5, "Remark": "c"},
            {"id": 2, "Date": "2024-01-15", "Quantity": 2, "Remark": "a"},
            {"id": 3, "Date": "2024-02-20", "Quantity": 0.25, "Remark": "b"},
        ])

        time_entries = ready_client.list_time_entries(10, "2024-01-01", date(2024, 3, 31))

        assert [entry.date for entry in time_entries] == ["2024-01-15", "2024-02-20", "2024-03-02"]
        assert [entry.id for entry in time_entries] == [2, 3, 1]
        assert time_entries[0] == TimeEntry(id=2, date="2024-01-15", hours=2, description="a")
        _, url, _ = request_call(session)
        assert url.startswith(f"{BASE_URL}/billings/hours?")
        assert query_of(url) == {
            "clientId": "3",
            "employeeId": "42",
            "calculationPositionId": "10",
            "startDate": "2024-01-01",
            "endDate": "2024-03-31",
        }

    def test_list_for_other_employee(self, ready_client, session):
        ready_client.list_time_entries(10, "2024-01-01", "2024-01-31", employee_id=77)
        _, url, _ = request_call(session)
        assert query_of(url)["employeeId"] == "77"

    def test_create_posts_nested_payload(self, ready_client, session):
        session.request.return_value = make_response({"Id": 500, "Quantity": 2.5})

        result = ready_client.create_time_entry(10, "2024-03-01", 2.5, "Code review")

        assert result == {"Id": 500, "Quantity": 2.5}
        method, url, kwargs = request_call(session)
        assert method == "POST"
        assert url == f"{BASE_URL}/billings/hours"
        assert kwargs["json"] == {
            "Client": {"Path": "/clients/3"},
            "CalculationPosition": {"Path": "/calculationPositions/10"},
            "Employee": {"Path": "/employees/42"},
            "Date": "2024-03-01",
            "Quantity": 2.5,
            "Remark": "Code review",
        }
        assert "Authorization" in kwargs["headers"]

    def test_create_does_not_validate_hours(self, ready_client, session):
        ready_client.create_time_entry(10, date(2024, 3, 1), -1, "correction")
        _, _, kwargs = request_call(session)
        assert kwargs["json"]["Quantity"] == -1
        assert kwargs["json"]["Date"] == "2024-03-01"

    def test_update_replaces_entry(self, ready_client, session):
        ready_client.update_time_entry(10, "2024-03-01", 3, "Pairing", 900)

        method, url, kwargs = request_call(session)
        assert method == "PUT"
        assert url == f"{BASE_URL}/billings/hours/900"
        assert kwargs["json"]["CalculationPosition"] == {"Path": "/calculationPositions/10"}
        assert kwargs["json"]["Remark"] == "Pairing"

    def test_delete_uses_authenticated_request(self, ready_client, session):
        session.request.return_value = make_response({"deleted": True})

        assert ready_client.delete_time_entry(900) == {"deleted": True}

        method, url, kwargs = request_call(session)
        assert method == "DELETE"
        assert url == f"{BASE_URL}/billings/hours/900"
        assert kwargs["headers"] == ready_client.auth.get_headers()


class TestServerSideProxy:

    def test_delete_via_proxy_sends_plain_credentials(self, client, session):
        proxy_response = make_response(None, status_code=200)
        session.request.return_value = proxy_response

        result = client.delete_time_entry_via_server_side_proxy(900)

        assert result is proxy_response
        method, url, kwargs = request_call(session)
        assert method == "DELETE"
        assert url == "http://localhost:3000/time_entries/900"
        assert not url.startswith(BASE_URL)
        assert kwargs["headers"] == {"X-Troi-Username": "jdoe", "X-Troi-Password": "secret"}
        assert "Authorization" not in kwargs["headers"]
        assert kwargs["timeout"] == DEFAULT_TIMEOUT_SECONDS

    def test_delete_via_proxy_needs_proxy_url(self, session):
        from troi_client import TroiClient, TroiConfig

        client = TroiClient(TroiConfig(base_url=BASE_URL, client_name="c", username="u", password="p"))
        with pytest.raises(TroiClientError, match="proxy"):
            client.delete_time_entry_via_server_side_proxy(1)
        session.request.assert_not_called()


class TestCalendarEvents:

    def test_sorted_by_start_date(self, client, session):
        session.request.return_value = make_response([
            {"id": "b", "Start": "2024-12-24 00:00:00", "End": "2024-12-24 23:59:59", "Subject": "Christmas Eve", "Type": "H"},
            {"id": "a", "Start": "2024-10-03 00:00:00", "End": "2024-10-03 23:59:59", "Subject": "Unity Day", "Type": "H"},
        ])

        events = client.list_calendar_events("2024-01-01", "2024-12-31", CalendarEventType.H)

        assert [event.id for event in events] == ["a", "b"]
        assert events[0] == CalendarEvent(
            id="a",
            start_date="2024-10-03 00:00:00",
            end_date="2024-10-03 23:59:59",
            subject="Unity Day",
            type="H",
        )
        assert events[0].to_dict()["startDate"] == "2024-10-03 00:00:00"
        _, url, _ = request_call(session)
        assert url.startswith(f"{BASE_URL}/calendarEvents?")
        assert query_of(url) == {"start": "2024-01-01", "end": "2024-12-31", "type": "H"}

    def test_type_defaults_to_empty(self, client, session):
        client.list_calendar_events("2024-01-01", "2024-01-31")
        _, url, _ = request_call(session)
        assert query_of(url)["type"] == ""

    @pytest.mark.parametrize("body", [None, {"Message": "no events"}])
    def test_absent_response_is_empty_list(self, client, session, body):
        session.request.return_value = make_response(body)
        assert client.list_calendar_events("2024-01-01", "2024-01-31") == []
