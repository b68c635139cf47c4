from datetime import datetime


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["service"] == "AI to NFT Workshop Backend"
    assert datetime.fromisoformat(body["timestamp"])


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-Id": "abc-123"})

    assert resp.headers["X-Request-Id"] == "abc-123"


def test_request_id_is_generated_when_absent(client):
    resp = client.get("/health")

    assert len(resp.headers["X-Request-Id"]) == 32


def test_cors_preflight(client):
    resp = client.options(
        "/chat",
        headers={"Origin": "http://localhost:8501", "Access-Control-Request-Method": "POST"},
    )

    assert resp.status_code == 200
    assert "access-control-allow-origin" in resp.headers
