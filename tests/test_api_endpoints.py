"""Integration tests for API endpoints.

These tests verify API endpoints work correctly end-to-end.
"""

import pytest
from fastapi.testclient import TestClient


MONDAY = "2025-07-07"
TUESDAY = "2025-07-08"


def _create_task(test_client: TestClient, **fields) -> dict:
    response = test_client.post("/tasks", json={"title": "Task", **fields})
    assert response.status_code == 201
    return response.json()["task"]


def _auto_schedule(test_client: TestClient, **overrides):
    body = {
        "start_date": MONDAY,
        "end_date": MONDAY,
        "time_window": {"start": "9:00 AM", "end": "5:00 PM"},
        "allowed_weekdays": [1],
        **overrides,
    }
    return test_client.post("/schedule/auto", json=body)


class TestMiscEndpoints:
    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_time_slots(self, test_client):
        response = test_client.get("/time-slots")

        data = response.json()
        assert len(data) == 48
        assert data[18] == {"sort_order": 540, "display": "9:00 AM", "value": "09:00", "hour24": 9}

    def test_presets(self, test_client):
        response = test_client.get("/schedule/presets", params={"today": "2025-07-02"})

        data = response.json()
        assert data["this_week"]["label"] == "This Week"
        assert data["this_week"]["request"]["end_date"] == "2025-07-09"
        assert data["this_month"]["request"]["allowed_weekdays"] == [0, 1, 2, 3, 4, 5, 6]


class TestTaskEndpoints:
    """Test task CRUD API endpoints."""

    def test_create_task(self, test_client):
        response = test_client.post(
            "/tasks",
            json={"title": "Design Review", "duration_min": 60, "priority": "high", "can_overlap": False},
        )

        assert response.status_code == 201
        task = response.json()["task"]
        assert task["title"] == "Design Review"
        assert task["duration_min"] == 60
        assert task["priority"] == "high"
        assert task["scheduled"] is False

    @pytest.mark.parametrize("body", [{"title": ""}, {"title": "x", "duration_min": 0}, {"title": "x", "priority": "critical"}])
    def test_create_task_rejects_invalid(self, test_client, body):
        response = test_client.post("/tasks", json=body)

        assert response.status_code == 422

    def test_list_and_filter_tasks(self, test_client):
        _create_task(test_client, title="A")
        _create_task(test_client, title="B")

        response = test_client.get("/tasks")
        assert response.json()["count"] == 2

        response = test_client.get("/tasks", params={"scheduled": "true"})
        assert response.json()["count"] == 0

    def test_get_task_not_found(self, test_client):
        assert test_client.get("/tasks/missing").status_code == 404

    def test_update_task(self, test_client):
        task = _create_task(test_client)

        response = test_client.put(f"/tasks/{task['id']}", json={"priority": "urgent", "notes": "asap"})

        assert response.status_code == 200
        updated = response.json()["task"]
        assert updated["priority"] == "urgent"
        assert updated["notes"] == "asap"
        assert updated["title"] == "Task"

    def test_update_task_rejects_empty_title(self, test_client):
        task = _create_task(test_client)

        assert test_client.put(f"/tasks/{task['id']}", json={"title": "  "}).status_code == 422

    def test_delete_task(self, test_client):
        task = _create_task(test_client)

        assert test_client.delete(f"/tasks/{task['id']}").status_code == 200
        assert test_client.get(f"/tasks/{task['id']}").status_code == 404
        assert test_client.delete(f"/tasks/{task['id']}").status_code == 404


class TestPlacementEndpoints:
    def test_place_task(self, test_client):
        task = _create_task(test_client, duration_min=45)

        response = test_client.post(f"/tasks/{task['id']}/place", json={"event_date": MONDAY, "start_time": "2:00 PM"})

        assert response.status_code == 201
        event = response.json()["event"]
        assert event["start_display"] == "2:00 PM"
        assert event["end_display"] == "3:00 PM"
        assert event["task_id"] == task["id"]
        assert test_client.get(f"/tasks/{task['id']}").json()["task"]["scheduled"] is True

    def test_place_scheduled_task_conflicts(self, test_client):
        task = _create_task(test_client)
        test_client.post(f"/tasks/{task['id']}/place", json={"event_date": MONDAY, "start_time": "9:00 AM"})

        response = test_client.post(f"/tasks/{task['id']}/place", json={"event_date": MONDAY, "start_time": "11:00 AM"})

        assert response.status_code == 409

    def test_place_on_occupied_slot_conflicts(self, test_client):
        test_client.post("/events", json={"title": "Standup", "event_date": MONDAY, "start_time": "9:00 AM", "end_time": "9:30 AM"})
        task = _create_task(test_client, duration_min=60)

        response = test_client.post(f"/tasks/{task['id']}/place", json={"event_date": MONDAY, "start_time": "8:30 AM"})

        assert response.status_code == 409
        assert "Standup" in response.json()["detail"]

    def test_place_past_midnight_rejected(self, test_client):
        task = _create_task(test_client, duration_min=60)

        response = test_client.post(f"/tasks/{task['id']}/place", json={"event_date": MONDAY, "start_time": "11:30 PM"})

        assert response.status_code == 422


class TestEventEndpoints:
    def test_create_event_defaults_to_one_hour(self, test_client):
        response = test_client.post("/events", json={"event_date": MONDAY, "start_time": "10:00 AM"})

        assert response.status_code == 201
        event = response.json()["event"]
        assert event["title"] == "New Event"
        assert (event["start_minute"], event["end_minute"]) == (600, 660)
        assert event["is_task"] is False

    def test_create_event_rejects_inverted_times(self, test_client):
        response = test_client.post(
            "/events", json={"event_date": MONDAY, "start_time": "11:00 AM", "end_time": "10:00 AM"}
        )

        assert response.status_code == 422

    def test_list_events_in_range(self, test_client):
        test_client.post("/events", json={"event_date": MONDAY, "start_time": "10:00 AM"})
        test_client.post("/events", json={"event_date": TUESDAY, "start_time": "10:00 AM"})

        assert test_client.get("/events").json()["count"] == 2
        assert test_client.get("/events", params={"start_date": TUESDAY}).json()["count"] == 1

    def test_move_event_keeps_length(self, test_client):
        created = test_client.post(
            "/events", json={"event_date": MONDAY, "start_time": "9:00 AM", "end_time": "10:30 AM"}
        ).json()["event"]

        response = test_client.put(
            f"/events/{created['id']}", json={"event_date": TUESDAY, "start_time": "1:00 PM", "title": "Moved"}
        )

        assert response.status_code == 200
        event = response.json()["event"]
        assert event["event_date"] == TUESDAY
        assert (event["start_display"], event["end_display"]) == ("1:00 PM", "2:30 PM")
        assert event["title"] == "Moved"

    def test_update_missing_event(self, test_client):
        assert test_client.put("/events/missing", json={"title": "x"}).status_code == 404

    def test_delete_task_event_returns_task_to_backlog(self, test_client):
        task = _create_task(test_client)
        event = test_client.post(
            f"/tasks/{task['id']}/place", json={"event_date": MONDAY, "start_time": "9:00 AM"}
        ).json()["event"]

        response = test_client.delete(f"/events/{event['id']}")

        assert response.status_code == 200
        assert response.json()["unscheduled_task_id"] == task["id"]
        assert test_client.get(f"/tasks/{task['id']}").json()["task"]["scheduled"] is False

    def test_delete_missing_event(self, test_client):
        assert test_client.delete("/events/missing").status_code == 404

    def test_calendar_week_view(self, test_client):
        test_client.post("/events", json={"event_date": MONDAY, "start_time": "10:00 AM"})

        response = test_client.get("/calendar", params={"view": "week", "date": MONDAY})

        data = response.json()
        assert data["dates"][0] == "2025-07-06"
        assert len(data["dates"]) == 7
        assert len(data["events_by_date"][MONDAY]) == 1
        assert data["events_by_date"]["2025-07-06"] == []


class TestAutoScheduleEndpoint:
    def test_schedules_by_priority_and_commits(self, test_client):
        low = _create_task(test_client, title="Low", priority="low", duration_min=60)
        high = _create_task(test_client, title="High", priority="high", duration_min=60)

        response = _auto_schedule(test_client)

        assert response.status_code == 200
        data = response.json()
        assert data["scheduled_count"] == 2
        assert data["attempted_count"] == 2
        assert data["message"] == "Successfully scheduled 2 task(s)!"
        by_task = {e["task_id"]: e for e in data["placed_events"]}
        assert by_task[high["id"]]["start_display"] == "9:00 AM"
        assert by_task[low["id"]]["start_display"] == "10:00 AM"

        stored = test_client.get("/events", params={"start_date": MONDAY, "end_date": MONDAY}).json()
        assert stored["count"] == 2
        assert test_client.get("/tasks", params={"scheduled": "false"}).json()["count"] == 0

    def test_respects_existing_events(self, test_client):
        test_client.post("/events", json={"title": "Busy", "event_date": MONDAY, "start_time": "9:00 AM", "end_time": "10:00 AM"})
        task = _create_task(test_client, duration_min=30)

        data = _auto_schedule(test_client, time_window={"start": "9:00 AM", "end": "11:00 AM"}).json()

        assert data["placed_events"][0]["task_id"] == task["id"]
        assert data["placed_events"][0]["start_display"] == "10:00 AM"

    def test_second_run_is_idempotent(self, test_client):
        _create_task(test_client)
        _auto_schedule(test_client)

        data = _auto_schedule(test_client).json()

        assert data["scheduled_count"] == 0
        assert data["attempted_count"] == 0
        assert data["message"] == "No available slots found for tasks in the specified range."

    def test_reports_too_long_tasks(self, test_client):
        task = _create_task(test_client, duration_min=600)

        data = _auto_schedule(test_client).json()

        assert data["unscheduled_task_ids"] == [task["id"]]
        assert data["too_long_task_ids"] == [task["id"]]

    @pytest.mark.parametrize(
        "overrides",
        [
            {"allowed_weekdays": []},
            {"start_date": TUESDAY, "end_date": MONDAY},
            {"time_window": {"start": "5:00 PM", "end": "9:00 AM"}},
        ],
    )
    def test_invalid_request_rejected_without_work(self, test_client, overrides):
        _create_task(test_client)

        response = _auto_schedule(test_client, **overrides)

        assert response.status_code == 422
        assert test_client.get("/events").json()["count"] == 0
