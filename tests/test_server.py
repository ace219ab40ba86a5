import pytest
from fastapi.testclient import TestClient

from dispatchcore import DispatchSettings, Subject, TopicRouter
from dispatchcore.server import create_app


@pytest.fixture
def populated():
    router = TopicRouter("api")
    router.subscribe("alert", lambda *args: None)
    router.subscribe("alert", lambda *args: None)
    router.subscribe("quotes", lambda *args: None)
    router.publish("alert", "x")
    stocks = Subject("stocks")
    stocks.attach(type("Widget", (), {"update": lambda self, *args: None})())
    stocks.notify({"aapl": 167.0})
    return router, {"stocks": stocks}


@pytest.fixture
def client(populated):
    router, subjects = populated
    return TestClient(create_app(router, subjects))


def test_health(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["topics"] == 2
    assert body["subscribers"] == 3
    assert body["uptime_sec"] >= 0


def test_topics_and_single_topic(client):
    resp = client.get("/api/v1/topics")
    assert resp.json() == {"topics": [
        {"name": "alert", "subscribers": 2},
        {"name": "quotes", "subscribers": 1},
    ]}
    assert client.get("/api/v1/topics/quotes").json() == {"name": "quotes", "subscribers": 1}
    missing = client.get("/api/v1/topics/nope")
    assert missing.status_code == 404
    assert missing.json() == {"error": "topic not found", "topic": "nope"}


def test_stats_subjects_metrics(client):
    assert client.get("/api/v1/stats").json() == {"topics": {
        "alert": {"messages": 1, "subscribers": 2},
        "quotes": {"messages": 0, "subscribers": 1},
    }}
    assert client.get("/api/v1/subjects").json() == {"subjects": [
        {"name": "stocks", "observers": 1, "notifications": 1},
    ]}
    metrics = client.get("/api/v1/metrics").json()
    assert metrics["counters"]["publish_total"] == 1
    assert metrics["gauges"]["subscribers.alert"] == 2


def test_api_key_required_when_configured(populated):
    router, subjects = populated
    app = create_app(router, subjects, DispatchSettings(admin_api_key="s3cret"))
    with TestClient(app) as client:
        denied = client.get("/api/v1/health")
        assert denied.status_code == 401
        assert denied.json()["error"] == "UNAUTHORIZED"
        allowed = client.get("/api/v1/health", headers={"X-API-Key": "s3cret"})
        assert allowed.status_code == 200
