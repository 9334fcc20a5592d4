"""
Mutable program state shared by the executor and the run driver.
"""

from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

Value = Union[int, float, str]


@dataclass
class Task:
    name: str
    status: str


@dataclass
class LoopState:
    """At most one open loop: its kind, buffered body lines and guard parameters."""

    active: bool = False
    replaying: bool = False
    kind: Optional[str] = None
    body: List[str] = field(default_factory=list)
    count: int = 0
    variable: Optional[str] = None
    comparator: Optional[str] = None
    threshold: Optional[float] = None


@dataclass
class ProgramState:
    variables: Dict[str, Value] = field(default_factory=dict)
    tasks: List[Task] = field(default_factory=list)
    loop: LoopState = field(default_factory=LoopState)
    api_endpoint: Optional[str] = None
    api_response: Optional[Dict[str, Any]] = None
    mcp_servers: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    pending_llm_request: Optional[Dict[str, Any]] = None
    llm_response: Optional[Dict[str, Any]] = None
    output: List[str] = field(default_factory=list)

    def has_variable(self, name: str) -> bool:
        return name in self.variables

    def find_task(self, name: str) -> Optional[Task]:
        for task in self.tasks:
            if task.name == name:
                return task
        return None

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProgramState":
        """Build a state from a (possibly partial) snapshot dict."""
        loop_data = data.get("loop") or {}
        return cls(
            variables=dict(data.get("variables") or {}),
            tasks=[Task(name=t["name"], status=t["status"]) for t in data.get("tasks") or []],
            loop=LoopState(**{k: copy.deepcopy(v) for k, v in loop_data.items() if k in LoopState.__dataclass_fields__}),
            api_endpoint=data.get("api_endpoint"),
            api_response=copy.deepcopy(data.get("api_response")),
            mcp_servers=copy.deepcopy(data.get("mcp_servers") or {}),
            pending_llm_request=copy.deepcopy(data.get("pending_llm_request")),
            llm_response=copy.deepcopy(data.get("llm_response")),
            output=list(data.get("output") or []),
        )


def format_value(value: Value) -> str:
    """Render a value the way NaturaCode prints it: integral floats drop their ``.0``."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def parse_number(text: str) -> Union[int, float]:
    if "." in text:
        return float(text)
    return int(text)
