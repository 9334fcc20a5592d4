"""
Line classifier for NaturaCode.

Each source line is matched against an ordered catalog of sentence templates.
The first template that matches wins, so more specific shapes must appear
before more general ones that could also match (``show tasks`` before
``show <name>``, numeric conditionals before variable conditionals).
Classification never fails: a line matching nothing becomes an ``unknown``
command and only fails once it is executed.
"""

from __future__ import annotations

import re
from typing import List, Pattern, Tuple

from .ast_nodes import Command, CommandKind

IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
NUMBER = r"-?\d+(?:\.\d+)?"
COMPARATOR = r"above|below|equal to|greater than|less than"
QUOTED = r'"([^"]*)"'


def _template(pattern: str) -> Pattern[str]:
    return re.compile(r"^" + pattern + r"$", re.IGNORECASE | re.ASCII)


TEMPLATES: List[Tuple[CommandKind, Pattern[str]]] = [
    (CommandKind.CREATE_NUMBER, _template(rf"create (?:a )?number called ({IDENT}) with value ({NUMBER})")),
    (CommandKind.CREATE_STRING, _template(rf"create (?:a )?(?:string|text) called ({IDENT}) with value {QUOTED}")),
    (CommandKind.ADD, _template(rf"add ({NUMBER}) to ({IDENT})")),
    (CommandKind.SUBTRACT, _template(rf"subtract ({NUMBER}) from ({IDENT})")),
    (CommandKind.MULTIPLY, _template(rf"multiply ({IDENT}) by ({NUMBER})")),
    (CommandKind.DIVIDE, _template(rf"divide ({IDENT}) by ({NUMBER})")),
    (CommandKind.CREATE_TASK, _template(rf"create (?:a )?task called {QUOTED} with status {QUOTED}")),
    (CommandKind.MARK_TASK_COMPLETE, _template(rf"mark task {QUOTED} as (?:complete|done|finished)")),
    (CommandKind.SHOW_TASKS, _template(r"show (?:all )?tasks")),
    (CommandKind.SHOW_TASKS_WHERE, _template(rf"show tasks where status is {QUOTED}")),
    (
        CommandKind.IF_THEN,
        _template(rf"if ({IDENT}) is ({COMPARATOR}) ({NUMBER}), (.+?)(?:\s+otherwise\s+(.+))?"),
    ),
    (
        CommandKind.IF_THEN_VAR,
        _template(rf"if ({IDENT}) is ({COMPARATOR}) ({IDENT}), (.+?)(?:\s+otherwise\s+(.+))?"),
    ),
    (CommandKind.REPEAT, _template(r"repeat (\d+) times?")),
    (CommandKind.WHILE, _template(rf"while ({IDENT}) is ({COMPARATOR}) ({NUMBER})")),
    (CommandKind.END_LOOP, _template(r"(?:end|done)")),
    (CommandKind.CONNECT_API, _template(rf"connect to (?:the )?API at {QUOTED}")),
    (CommandKind.SEND_SEARCH, _template(rf"send (?:a )?search for {QUOTED} using (?:the )?key {QUOTED}")),
    (CommandKind.GET_RESPONSE, _template(r"get (?:the )?response")),
    (CommandKind.CONNECT_MCP, _template(rf"connect to MCP server at {QUOTED} with protocol {QUOTED}")),
    (CommandKind.DISCONNECT_MCP, _template(rf"disconnect from MCP server {QUOTED}")),
    (
        CommandKind.SEND_MESSAGE,
        _template(rf"send message to model {QUOTED} with (?:system prompt ({IDENT}) and )?user message ({IDENT})"),
    ),
    (
        CommandKind.SEND_MESSAGE_DIRECT,
        _template(rf"send message to model {QUOTED} with (?:system prompt ({IDENT}) and )?user message {QUOTED}"),
    ),
    (CommandKind.WAIT_FOR_RESPONSE, _template(r"wait for model response")),
    (CommandKind.GET_RESPONSE_AS, _template(rf"get (?:the )?response as {QUOTED}")),
    (CommandKind.MEASURE_LENGTH, _template(rf"measure length of ({IDENT}) and store in ({IDENT})")),
    (CommandKind.SHOW_VARIABLE, _template(rf"show ({IDENT})")),
    (CommandKind.SHOW_STRING, _template(rf"show {QUOTED}")),
    (CommandKind.SHOW_RESPONSE, _template(r"show (?:the )?response")),
    (CommandKind.COMMENT, _template(r"note:\s*(.*)")),
]

_TERMINATOR = _template(r"(?:end|done)")


def classify_line(line: str) -> Command:
    """Map one source line to a command; unmatched lines become ``unknown``."""
    text = line.strip()
    for kind, pattern in TEMPLATES:
        match = pattern.match(text)
        if match:
            return Command(kind=kind, line=text, captures=match.groups())
    return Command(kind=CommandKind.UNKNOWN, line=text)


def is_loop_terminator(line: str) -> bool:
    return bool(_TERMINATOR.match(line.strip()))


def split_program(source: str) -> List[str]:
    """Split program text into trimmed, non-empty lines."""
    return [stripped for stripped in (raw.strip() for raw in source.splitlines()) if stripped]
