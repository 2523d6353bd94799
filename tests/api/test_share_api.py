import pytest
from fastapi.testclient import TestClient

from tests.constants import TEST_ACTIVITY_NAME, TEST_UNKNOWN_ID


@pytest.fixture(scope="function")
def shared_owner_id(client: TestClient, owner_headers: dict, api_activity: dict) -> str:
    """The owner with a single 09:00-10:00 (New York) entry on 2024-07-01."""
    response = client.post(
        "/schedules/",
        json={
            "activity_id": api_activity["id"],
            "date": "2024-07-01",
            "start_time": "09:00",
            "end_time": "10:00",
        },
        headers=owner_headers,
    )
    assert response.status_code == 201, response.json()
    return client.get("/users/me", headers=owner_headers).json()["id"]


@pytest.mark.anyio
class TestShareAPI:
    """The shared view needs no authentication."""

    async def test_shared_day_in_owner_zone(self, client: TestClient, shared_owner_id: str):
        response = client.get(f"/share/{shared_owner_id}", params={"date": "2024-07-01"})

        assert response.status_code == 200, response.json()
        data = response.json()
        assert data["owner_display_name"] == "Owner"
        assert data["viewer_timezone"] == "America/New_York"
        assert data["date_label"] == "Monday, July 1, 2024"
        assert [o["activity_name"] for o in data["occurrences"]] == [TEST_ACTIVITY_NAME]
        assert data["occurrences"][0]["time_range"] == "09:00 AM - 10:00 AM"

    async def test_shared_day_in_viewer_zone(self, client: TestClient, shared_owner_id: str):
        response = client.get(f"/share/{shared_owner_id}", params={"date": "2024-07-01", "tz": "Asia/Tokyo"})

        assert response.status_code == 200, response.json()
        assert response.json()["viewer_timezone"] == "Asia/Tokyo"
        assert response.json()["occurrences"][0]["time_range"] == "10:00 PM - 11:00 PM"

    async def test_shared_day_with_nothing_planned(self, client: TestClient, shared_owner_id: str):
        response = client.get(f"/share/{shared_owner_id}", params={"date": "2024-07-02"})
        assert response.status_code == 200
        assert response.json()["occurrences"] == []

    async def test_unknown_owner(self, client: TestClient):
        response = client.get(f"/share/{TEST_UNKNOWN_ID}", params={"date": "2024-07-01"})
        assert response.status_code == 404

    async def test_missing_date(self, client: TestClient, shared_owner_id: str):
        response = client.get(f"/share/{shared_owner_id}")
        assert response.status_code == 422
