import pytest
from priority_gate_service.core.config import get_settings
from priority_gate_service.services import gateway


@pytest.fixture(autouse=True)
def _settings_env(monkeypatch) -> None:
    """
    Ensure required environment variables are set for tests.

    UPSTREAM_USER_AGENT is required by UpstreamClient runtime checks.
    We set it explicitly here to avoid dependence on system env.
    """
    monkeypatch.setenv(
        "UPSTREAM_USER_AGENT",
        "priority-gate-service-tests/0.1 (pytest)",
    )
    monkeypatch.setenv("UPSTREAM_BASE_URL", "http://upstream.test")
    monkeypatch.setenv("GATE_THROUGHPUT", "10")
    monkeypatch.delenv("GATE_TIMEOUT_S", raising=False)
    monkeypatch.delenv("GATE_WINDOW_S", raising=False)

    # Clear cached Settings and the shared limiter so env changes take effect
    get_settings.cache_clear()
    gateway.reset_limiter()
