from fastapi.testclient import TestClient

from priority_gate_service.main import app


def test_health_ok() -> None:
    client = TestClient(app)
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_health_limiter_reports_saturation(monkeypatch) -> None:
    monkeypatch.setenv("GATE_THROUGHPUT", "0")
    from priority_gate_service.core.config import get_settings
    get_settings.cache_clear()

    client = TestClient(app)
    resp = client.get("/health/limiter")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "saturated": True}
