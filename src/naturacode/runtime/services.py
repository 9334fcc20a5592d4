"""
External service port used by the executor.

The executor never talks to a network; it calls through these small
interfaces. The defaults are deterministic mocks so programs behave the same
on every run.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from ..ai.providers import MockModelProvider, ModelProvider
from ..config import NaturaConfig, load_config


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class SearchApi(ABC):
    @abstractmethod
    def search(self, endpoint: str, query: str, key: str) -> Dict[str, Any]:
        """Return the response payload for a search against ``endpoint``."""


class MockSearchApi(SearchApi):
    def search(self, endpoint: str, query: str, key: str) -> Dict[str, Any]:
        return {
            "query": query,
            "results": [
                {"id": 1, "title": f'Result for "{query}"', "description": "This is a sample result"},
                {"id": 2, "title": f'Another result about "{query}"', "description": "More relevant information"},
            ],
        }


class McpConnector(ABC):
    @abstractmethod
    def connect(self, url: str, protocol: str) -> Dict[str, Any]:
        """Open a connection and return its record."""

    @abstractmethod
    def disconnect(self, url: str) -> None:
        """Close the connection to ``url``."""


class MockMcpConnector(McpConnector):
    def __init__(self, clock: Callable[[], str] = utc_timestamp) -> None:
        self.clock = clock

    def connect(self, url: str, protocol: str) -> Dict[str, Any]:
        return {"url": url, "protocol": protocol, "connected": True, "connected_at": self.clock()}

    def disconnect(self, url: str) -> None:
        return None


@dataclass
class ExternalServices:
    search: SearchApi = field(default_factory=MockSearchApi)
    mcp: McpConnector = field(default_factory=MockMcpConnector)
    model: ModelProvider = field(default_factory=MockModelProvider)
    clock: Callable[[], str] = utc_timestamp


def default_services(config: Optional[NaturaConfig] = None) -> ExternalServices:
    cfg = config or load_config()
    return ExternalServices(
        model=MockModelProvider(default_model=cfg.default_model, latency_ms=cfg.llm_latency_ms),
    )
