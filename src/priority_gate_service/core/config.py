import os
from dataclasses import dataclass
from functools import lru_cache


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None and value.strip() else default


def _parse(name: str, value: str, kind: type):
    try:
        return kind(value)
    except ValueError as exc:
        raise RuntimeError(f"{name} is not a valid {kind.__name__}: {value!r}") from exc


def _get_env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return _parse(name, value, float) if value is not None and value.strip() else default


def _get_env_optional_float(name: str) -> float | None:
    value = os.getenv(name)
    return _parse(name, value, float) if value is not None and value.strip() else None


def _get_env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return _parse(name, value, int) if value is not None and value.strip() else default


@dataclass(frozen=True)
class Settings:
    gate_throughput: int
    gate_timeout_s: float | None
    gate_window_s: float
    gate_baseline_priority: int
    gate_http_waiters: int
    upstream_base_url: str
    upstream_user_agent: str
    connect_timeout_s: float
    read_timeout_s: float


@lru_cache
def get_settings() -> Settings:
    return Settings(
        gate_throughput=_get_env_int("GATE_THROUGHPUT", 10),
        gate_timeout_s=_get_env_optional_float("GATE_TIMEOUT_S"),
        gate_window_s=_get_env_float("GATE_WINDOW_S", 1.0),
        gate_baseline_priority=_get_env_int("GATE_BASELINE_PRIORITY", 1),
        gate_http_waiters=_get_env_int("GATE_HTTP_WAITERS", 100),
        upstream_base_url=_get_env("UPSTREAM_BASE_URL", "http://localhost:8080"),
        upstream_user_agent=_get_env("UPSTREAM_USER_AGENT", ""),
        connect_timeout_s=_get_env_float("HTTP_CONNECT_TIMEOUT_S", 5.0),
        read_timeout_s=_get_env_float("HTTP_READ_TIMEOUT_S", 10.0),
    )
