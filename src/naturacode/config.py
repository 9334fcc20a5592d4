"""
Centralized configuration loader for the interpreter, CLI and server.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_WHILE_LIMIT = 1000
DEFAULT_MODEL = "mock-model"


@dataclass
class NaturaConfig:
    while_limit: int = DEFAULT_WHILE_LIMIT
    default_model: str = DEFAULT_MODEL
    llm_latency_ms: float = 0.0
    echo: bool = False
    log_level: str = "WARNING"


def _env_int(environ, name: str, default: int) -> int:
    try:
        value = int(environ.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _env_float(environ, name: str, default: float) -> float:
    try:
        value = float(environ.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value >= 0 else default


def _env_bool(environ, name: str, default: bool = False) -> bool:
    val = environ.get(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def load_config(env: Optional[dict] = None) -> NaturaConfig:
    environ = env if env is not None else os.environ
    return NaturaConfig(
        while_limit=_env_int(environ, "NATURA_WHILE_LIMIT", DEFAULT_WHILE_LIMIT),
        default_model=environ.get("NATURA_DEFAULT_MODEL") or DEFAULT_MODEL,
        llm_latency_ms=_env_float(environ, "NATURA_LLM_LATENCY_MS", 0.0),
        echo=_env_bool(environ, "NATURA_ECHO", False),
        log_level=(environ.get("NATURA_LOG_LEVEL") or "WARNING").upper(),
    )
