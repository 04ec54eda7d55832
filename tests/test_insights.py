"""Tests for the insights endpoint."""

from app.core.analytics import ALL_SAFE_MESSAGE, PREDICTIONS
from tests.conftest import add_member


def post_location(client, headers, member_id, battery_level):
    response = client.post(
        "/api/location/update",
        json={
            "member_id": member_id,
            "latitude": 7.52,
            "longitude": 4.52,
            "battery_level": battery_level,
        },
        headers=headers,
    )
    assert response.status_code == 200


class TestInsights:
    """Insights computed from stored readings."""

    def test_empty_family(self, client, auth_headers):
        insights = client.get("/api/insights", headers=auth_headers).json()["insights"]
        assert insights["family_activity"] == []
        assert insights["safety_score"] == 0
        assert insights["recommendations"] == [ALL_SAFE_MESSAGE]
        assert insights["predictions"] == PREDICTIONS

    def test_activity_and_score(self, client, auth_headers, member_id):
        post_location(client, auth_headers, member_id, 30)
        post_location(client, auth_headers, member_id, 20)
        add_member(client, auth_headers, name="Ben")

        insights = client.get("/api/insights", headers=auth_headers).json()["insights"]
        activity = {a["name"]: a for a in insights["family_activity"]}

        assert activity["Alice"]["location_updates"] == 2
        assert activity["Alice"]["avg_battery"] == 25
        assert activity["Alice"]["last_seen"] is not None
        assert activity["Ben"]["location_updates"] == 0
        assert activity["Ben"]["avg_battery"] is None

        # Alice: battery 25 -> -10, seen just now; Ben has no data
        assert insights["safety_score"] == 90
        assert insights["recommendations"] == ["Remind Alice to charge their phone"]

    def test_healthy_member(self, client, auth_headers, member_id):
        post_location(client, auth_headers, member_id, 95)
        insights = client.get("/api/insights", headers=auth_headers).json()["insights"]
        assert insights["safety_score"] == 100
        assert insights["recommendations"] == [ALL_SAFE_MESSAGE]

    def test_deactivated_members_excluded(self, client, auth_headers, member_id):
        post_location(client, auth_headers, member_id, 10)
        client.delete(f"/api/family/{member_id}", headers=auth_headers)
        insights = client.get("/api/insights", headers=auth_headers).json()["insights"]
        assert insights["family_activity"] == []
        assert insights["safety_score"] == 0
