import pytest
from fastapi.testclient import TestClient

from tests.constants import TEST_ACTIVITY_COLOR, TEST_ACTIVITY_NAME, TEST_UNKNOWN_ID


def _create(client: TestClient, headers: dict, activity_id: str, **overrides):
    payload = {
        "activity_id": activity_id,
        "date": "2024-07-01",
        "start_time": "09:00",
        "end_time": "10:00",
    }
    payload.update(overrides)
    return client.post("/schedules/", json=payload, headers=headers)


@pytest.mark.anyio
class TestSchedulesAPICreate:

    async def test_create_one_time_entry(self, client: TestClient, owner_headers: dict, api_activity: dict):
        response = _create(client, owner_headers, api_activity["id"])

        assert response.status_code == 201, response.json()
        data = response.json()
        assert data["activity_name"] == TEST_ACTIVITY_NAME
        assert data["activity_color"] == TEST_ACTIVITY_COLOR
        assert data["recurrence_type"] == "none"
        # 09:00 in New York during daylight saving time.
        assert data["start_utc"].startswith("2024-07-01T13:00:00")

    async def test_create_weekly_entry(self, client: TestClient, owner_headers: dict, api_activity: dict):
        response = _create(
            client, owner_headers, api_activity["id"],
            recurrence_type="weekly",
            recurrence_days=[3, 1],
            recurrence_start_date="2024-07-01",
        )
        assert response.status_code == 201, response.json()
        assert response.json()["recurrence_days"] == [1, 3]

        listed = client.get("/schedules/", headers=owner_headers).json()
        assert [e["id"] for e in listed] == [response.json()["id"]]

    @pytest.mark.parametrize("overrides, constraint", [
        ({"start_time": "10:00", "end_time": "09:00"}, "end_time_after_start"),
        ({"start_time": "10:00", "end_time": "10:00"}, "end_time_after_start"),
        ({"recurrence_type": "daily"}, "recurrence_start_required"),
        (
            {"recurrence_type": "daily", "recurrence_start_date": "2024-07-31", "recurrence_end_date": "2024-07-01"},
            "recurrence_window_order",
        ),
        ({"recurrence_type": "weekly", "recurrence_start_date": "2024-07-01"}, "weekly_days_required"),
        ({"date": "2024-03-10", "start_time": "02:00", "end_time": "03:00"}, "wall_clock_exists"),
    ])
    async def test_creation_constraints(
        self,
        client: TestClient,
        owner_headers: dict,
        api_activity: dict,
        overrides: dict,
        constraint: str
    ):
        """Rejected entries report the failed constraint and are never stored."""
        response = _create(client, owner_headers, api_activity["id"], **overrides)

        assert response.status_code == 422, response.json()
        assert response.json()["constraint"] == constraint
        assert client.get("/schedules/", headers=owner_headers).json() == []

    async def test_weekday_out_of_range(self, client: TestClient, owner_headers: dict, api_activity: dict):
        response = _create(
            client, owner_headers, api_activity["id"],
            recurrence_type="weekly",
            recurrence_days=[7],
            recurrence_start_date="2024-07-01",
        )
        assert response.status_code == 422

    async def test_unknown_activity(self, client: TestClient, owner_headers: dict):
        response = _create(client, owner_headers, str(TEST_UNKNOWN_ID))
        assert response.status_code == 404

    async def test_requires_auth(self, client: TestClient, api_activity: dict):
        response = _create(client, {}, api_activity["id"])
        assert response.status_code == 401


@pytest.mark.anyio
class TestSchedulesAPIViews:

    async def test_day_view(self, client: TestClient, owner_headers: dict, api_activity: dict):
        _create(client, owner_headers, api_activity["id"], start_time="09:00", end_time="10:00")
        _create(client, owner_headers, api_activity["id"], start_time="08:00", end_time="08:45")

        response = client.get("/schedules/day", params={"date": "2024-07-01"}, headers=owner_headers)

        assert response.status_code == 200, response.json()
        data = response.json()
        assert data["date_label"] == "Monday, July 1, 2024"
        assert data["timezone"] == "America/New_York"
        assert [o["time_range"] for o in data["occurrences"]] == ["08:00 AM - 08:45 AM", "09:00 AM - 10:00 AM"]
        assert data["skipped_records"] == 0

    async def test_day_view_in_requested_zone(self, client: TestClient, owner_headers: dict, api_activity: dict):
        _create(client, owner_headers, api_activity["id"])

        response = client.get("/schedules/day", params={"date": "2024-07-01", "tz": "UTC"}, headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["occurrences"][0]["time_range"] == "01:00 PM - 02:00 PM"

    async def test_day_view_for_recurring_entry(self, client: TestClient, owner_headers: dict, api_activity: dict):
        _create(
            client, owner_headers, api_activity["id"],
            recurrence_type="weekly",
            recurrence_days=[1, 3],
            recurrence_start_date="2024-07-01",
        )
        wednesday = client.get("/schedules/day", params={"date": "2024-07-03"}, headers=owner_headers).json()
        thursday = client.get("/schedules/day", params={"date": "2024-07-04"}, headers=owner_headers).json()

        assert len(wednesday["occurrences"]) == 1
        assert wednesday["occurrences"][0]["recurrence_label"] == "Weekly on Mon, Wed from 2024-07-01"
        assert thursday["occurrences"] == []

    async def test_day_view_rejects_bad_date(self, client: TestClient, owner_headers: dict):
        response = client.get("/schedules/day", params={"date": "July 1st"}, headers=owner_headers)
        assert response.status_code == 422

    async def test_month_view(self, client: TestClient, owner_headers: dict, api_activity: dict):
        _create(
            client, owner_headers, api_activity["id"],
            date="2024-03-01",
            recurrence_type="daily",
            recurrence_start_date="2024-03-01",
            recurrence_end_date="2024-03-31",
        )

        march = client.get("/schedules/month", params={"month": "2024-03"}, headers=owner_headers)
        assert march.status_code == 200, march.json()
        indicators = march.json()["indicators"]
        assert len(indicators) == 31
        assert indicators["2024-03-15"] == TEST_ACTIVITY_COLOR

        april = client.get("/schedules/month", params={"month": "2024-04"}, headers=owner_headers)
        assert april.json()["indicators"] == {}

    @pytest.mark.parametrize("month", ["2024-13", "March", "2024", "0000-03"])
    async def test_month_view_rejects_bad_month(self, client: TestClient, owner_headers: dict, month: str):
        response = client.get("/schedules/month", params={"month": month}, headers=owner_headers)
        assert response.status_code == 422

    async def test_share_link(self, client: TestClient, owner_headers: dict):
        owner_id = client.get("/users/me", headers=owner_headers).json()["id"]

        response = client.get("/schedules/share-link", params={"date": "2024-03-10"}, headers=owner_headers)
        assert response.status_code == 200, response.json()
        assert response.json()["url"] == f"http://localhost:3000/share?userId={owner_id}&date=2024-03-10"


@pytest.mark.anyio
class TestSchedulesAPIDelete:

    async def test_delete_entry(self, client: TestClient, owner_headers: dict, api_activity: dict):
        entry_id = _create(client, owner_headers, api_activity["id"]).json()["id"]

        response = client.delete(f"/schedules/{entry_id}", headers=owner_headers)
        assert response.status_code == 204

        day = client.get("/schedules/day", params={"date": "2024-07-01"}, headers=owner_headers).json()
        assert day["occurrences"] == []

        again = client.delete(f"/schedules/{entry_id}", headers=owner_headers)
        assert again.status_code == 404

    async def test_delete_someone_elses_entry(
        self,
        client: TestClient,
        owner_headers: dict,
        api_activity: dict,
        other_owner_headers: dict
    ):
        entry_id = _create(client, owner_headers, api_activity["id"]).json()["id"]

        response = client.delete(f"/schedules/{entry_id}", headers=other_owner_headers)
        assert response.status_code == 404
        assert len(client.get("/schedules/", headers=owner_headers).json()) == 1

    async def test_entry_survives_activity_deletion(self, client: TestClient, owner_headers: dict, api_activity: dict):
        _create(client, owner_headers, api_activity["id"])
        client.delete(f"/activities/{api_activity['id']}", headers=owner_headers)

        day = client.get("/schedules/day", params={"date": "2024-07-01"}, headers=owner_headers).json()
        assert day["occurrences"][0]["activity_name"] == TEST_ACTIVITY_NAME
