import pytest

from naturacode import Interpreter

_CONFIG_ENV = (
    "NATURA_WHILE_LIMIT",
    "NATURA_DEFAULT_MODEL",
    "NATURA_LLM_LATENCY_MS",
    "NATURA_ECHO",
    "NATURA_LOG_LEVEL",
    "NATURA_LOG_REDACT_PROMPTS",
    "NATURA_LOG_REDACT_METADATA",
)


@pytest.fixture(autouse=True)
def _pinned_config(monkeypatch):
    """Ensure tests always run against the default configuration."""
    for name in _CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def natura():
    return Interpreter()
