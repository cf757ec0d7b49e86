def test_health_endpoints(client):
    live = client.get("/api/health")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code in {200, 503}
    payload = ready.json()
    assert "database" in payload
    assert payload["status"] in {"ok", "degraded"}


def test_request_size_limit():
    from fastapi import FastAPI
    from fastapi.testclient import TestClient

    from classboard.core.middleware import RequestSizeLimitMiddleware

    tiny = FastAPI()
    tiny.add_middleware(RequestSizeLimitMiddleware, max_bytes=10)

    @tiny.post("/echo")
    def echo(payload: dict) -> dict:
        return payload

    with TestClient(tiny) as test_client:
        assert test_client.post("/echo", json={"a": 1}).status_code == 200
        rejected = test_client.post("/echo", json={"payload": "x" * 50})
        assert rejected.status_code == 413
