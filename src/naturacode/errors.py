"""
Custom error types for the NaturaCode interpreter.

Every runtime failure aborts the current ``run`` call. Each error class carries
a stable ``code`` so callers (the HTTP server, tests) can tell failures apart
without parsing the human-readable message.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class NaturaCodeError(Exception):
    """Base error with the source line that was executing."""

    message: str
    line: Optional[str] = None
    code: str = "NC-0000"
    diagnostics: list[dict[str, Any]] | None = None
    reported: bool = field(default=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.diagnostics is None:
            self.diagnostics = [
                {"code": self.code, "message": self.message, "severity": "error", "line": self.line}
            ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message

    def with_line(self, line: str) -> "NaturaCodeError":
        """Attach the executing source line, keeping the diagnostics in step."""
        self.line = line
        for diagnostic in self.diagnostics or []:
            if diagnostic.get("line") is None:
                diagnostic["line"] = line
        return self

    def describe(self) -> str:
        if self.line is None:
            return self.message
        return f'{self.message} (line "{self.line}")'


@dataclass
class UndefinedVariable(NaturaCodeError):
    """A variable was referenced before it was created."""

    code: str = "NC-RUN-101"


@dataclass
class DivisionByZero(NaturaCodeError):
    """The divisor literal of a divide command is zero."""

    code: str = "NC-RUN-102"


@dataclass
class TaskNotFound(NaturaCodeError):
    """No task matches the name given to a completion command."""

    code: str = "NC-RUN-103"


@dataclass
class LoopOverrun(NaturaCodeError):
    """A while loop guard stayed true past the iteration cap."""

    code: str = "NC-RUN-104"


@dataclass
class NoActiveLoop(NaturaCodeError):
    """An end/done terminator appeared with no open loop."""

    code: str = "NC-RUN-105"


@dataclass
class NoMockConnection(NaturaCodeError):
    """An API, MCP or model step ran before its prerequisite step."""

    code: str = "NC-RUN-106"


@dataclass
class UnrecognizedCommand(NaturaCodeError):
    """The line matched no sentence template."""

    code: str = "NC-RUN-107"


@dataclass
class LoopAlreadyOpen(NaturaCodeError):
    """A loop header appeared while another loop was still collecting its body."""

    code: str = "NC-RUN-108"


@dataclass
class InvalidOperand(NaturaCodeError):
    """Arithmetic was applied to a variable that holds text."""

    code: str = "NC-RUN-109"
