"""测试 /swims 路由"""

from conftest import make_record


def _seed(api_client, records_by_year, splits=None):
    client = api_client.service.client
    client.records_by_year = records_by_year
    client.splits = splits or {}
    return client


def test_list_activities(api_client):
    _seed(api_client, {2025: [make_record(1, "2025-06-16 07:30:00"), make_record(2, "2025-06-17 07:30:00")]})

    response = api_client.get("/swims/activities")
    assert response.status_code == 200
    data = response.json()
    assert [item["id"] for item in data] == ["2", "1"]
    assert data[0]["start_time"] == "2025-06-17 07:30:00"
    assert data[0]["type"] == "pool"


def test_week_activities_defaults_to_current_week(api_client):
    _seed(api_client, {2025: [make_record(1, "2025-06-16 07:30:00"), make_record(2, "2025-06-09 07:30:00")]})

    response = api_client.get("/swims/activities/week")
    assert response.status_code == 200
    assert [item["id"] for item in response.json()] == ["1"]


def test_weekly_summary_normalizes_to_monday(api_client):
    _seed(api_client, {2025: [make_record(1, "2025-06-16 07:30:00", distance=1500.0)]})

    response = api_client.get("/swims/summary/week", params={"day": "2025-06-19"})
    assert response.status_code == 200
    data = response.json()
    assert data["week_start"] == "2025-06-16"
    assert data["week_end"] == "2025-06-22"
    assert data["daily_distances"] == [1500, 0, 0, 0, 0, 0, 0]


def test_monthly_and_yearly_summary(api_client):
    _seed(api_client, {2024: [make_record(1, "2024-02-29 07:30:00", distance=800.0)]})

    month = api_client.get("/swims/summary/month", params={"year": 2024, "month": 2}).json()
    assert len(month["daily_distances"]) == 29
    assert month["daily_distances"][28] == 800

    year = api_client.get("/swims/summary/year", params={"year": 2024}).json()
    assert year["monthly_distances"][1] == 800
    assert year["swim_count"] == 1


def test_month_out_of_range_rejected(api_client):
    response = api_client.get("/swims/summary/month", params={"year": 2024, "month": 13})
    assert response.status_code == 422


def test_activity_detail(api_client):
    _seed(
        api_client,
        {2025: [make_record(77, "2025-06-16 07:30:00")]},
        splits={77: {"lapDTOs": [{"lapIndex": 1, "duration": 50.0, "averageSpeed": 1.25, "averageHR": 120.0}]}},
    )
    api_client.get("/swims/activities")

    response = api_client.get("/swims/activities/77")
    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["id"] == "77"
    assert data["laps"][0]["pace_seconds_per_100m"] == 80
    assert data["metrics"]["heart_rate"] == [{"x": 50.0, "y": 120.0}]


def test_activity_detail_not_found(api_client):
    response = api_client.get("/swims/activities/12345")
    assert response.status_code == 404


def test_sync_endpoints(api_client):
    _seed(api_client, {
        2025: [make_record(1, "2025-06-16 07:30:00")],
        2024: [make_record(2, "2024-08-01 07:30:00")],
    })

    refreshed = api_client.post("/swims/sync/refresh").json()
    assert refreshed["loaded_years"] == [2025]
    assert refreshed["activity_count"] == 1
    assert refreshed["has_session"] is True

    more = api_client.post("/swims/sync/load-more").json()
    assert more["loaded_years"] == [2025, 2024]
    assert more["activity_count"] == 2

    status = api_client.get("/swims/sync/status").json()
    assert status == more


def test_unexpected_error_maps_to_500(api_client):
    def boom():
        raise RuntimeError("disk on fire")

    api_client.service.get_all_activities = boom
    response = api_client.get("/swims/activities")
    assert response.status_code == 500
    assert "disk on fire" in response.json()["detail"]
