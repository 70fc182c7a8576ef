from datetime import date

import pytest

from tests.factories import AccountFactory, ProjectFactory, TrafficRecordFactory


@pytest.fixture
def traffic(session):
    project = ProjectFactory()
    dy = AccountFactory(platform="douyin", account_name="dy", project=project)
    ks = AccountFactory(platform="kuaishou", account_name="ks")
    TrafficRecordFactory(account=dy, publish_date=date(2024, 3, 1), views=100, likes=10)
    TrafficRecordFactory(account=dy, publish_date=date(2024, 3, 15), views=300, likes=30,
                         completion_rate=40.0)
    TrafficRecordFactory(account=ks, publish_date=date(2024, 4, 2), views=50, likes=5,
                         completion_rate=20.0)
    TrafficRecordFactory(account=ks, publish_date=None, views=7, likes=1)
    return {"project": project, "dy": dy, "ks": ks}


def test_list_newest_first_and_paginated(client, traffic):
    body = client.get("/api/v1/traffic?pageSize=2").get_json()
    assert body["pagination"] == {"page": 1, "pageSize": 2, "total": 4, "totalPages": 2}
    dates = [i["publishDate"] for i in body["items"]]
    assert "2024-04-02" in dates


def test_list_filters(client, traffic):
    by_platform = client.get("/api/v1/traffic?platform=kuaishou").get_json()
    assert by_platform["pagination"]["total"] == 2

    by_project = client.get(f"/api/v1/traffic?projectId={traffic['project'].id}").get_json()
    assert by_project["pagination"]["total"] == 2

    by_range = client.get("/api/v1/traffic?startDate=2024-03-10&endDate=2024-03-31").get_json()
    assert [i["views"] for i in by_range["items"]] == [300]

    by_account = client.get(f"/api/v1/traffic?accountId={traffic['ks'].id}").get_json()
    assert by_account["pagination"]["total"] == 2


def test_page_size_clamped(client, traffic):
    body = client.get("/api/v1/traffic?page=0&pageSize=1000").get_json()
    assert body["pagination"]["page"] == 1
    assert body["pagination"]["pageSize"] == 100


def test_bad_date(client):
    resp = client.get("/api/v1/traffic?startDate=yesterday")
    assert resp.status_code == 400
    assert "startDate" in resp.get_json()["error"]


def test_dashboard(client, traffic):
    body = client.get("/api/v1/traffic/dashboard").get_json()
    assert body["totalViews"] == 457
    assert body["totalLikes"] == 46
    assert body["contentCount"] == 4
    assert body["avgCompletionRate"] == 30.0


def test_dashboard_empty(client):
    body = client.get("/api/v1/traffic/dashboard").get_json()
    assert body["totalViews"] == 0
    assert body["avgCompletionRate"] == 0
    assert body["contentCount"] == 0


def test_trend_by_day_skips_undated(client, traffic):
    body = client.get("/api/v1/traffic/trend").get_json()
    assert [p["date"] for p in body] == ["2024-03-01", "2024-03-15", "2024-04-02"]


def test_trend_by_month(client, traffic):
    body = client.get("/api/v1/traffic/trend?groupBy=month").get_json()
    assert body == [
        {"date": "2024-03", "views": 400, "likes": 40, "comments": 4, "shares": 2},
        {"date": "2024-04", "views": 50, "likes": 5, "comments": 2, "shares": 1},
    ]


def test_trend_by_week(client, traffic):
    body = client.get("/api/v1/traffic/trend?groupBy=week").get_json()
    # 2024-03-01 is a Friday
    assert body[0]["date"] == "2024-02-26"


def test_trend_rejects_unknown_grouping(client):
    assert client.get("/api/v1/traffic/trend?groupBy=year").status_code == 400
