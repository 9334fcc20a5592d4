"""
Command node definitions for the NaturaCode language.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class CommandKind(str, Enum):
    CREATE_NUMBER = "create_number"
    CREATE_STRING = "create_string"
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    CREATE_TASK = "create_task"
    MARK_TASK_COMPLETE = "mark_task_complete"
    SHOW_TASKS = "show_tasks"
    SHOW_TASKS_WHERE = "show_tasks_where"
    IF_THEN = "if_then"
    IF_THEN_VAR = "if_then_var"
    REPEAT = "repeat"
    WHILE = "while"
    END_LOOP = "end_loop"
    CONNECT_API = "connect_api"
    SEND_SEARCH = "send_search"
    GET_RESPONSE = "get_response"
    CONNECT_MCP = "connect_mcp"
    DISCONNECT_MCP = "disconnect_mcp"
    SEND_MESSAGE = "send_message"
    SEND_MESSAGE_DIRECT = "send_message_direct"
    WAIT_FOR_RESPONSE = "wait_for_response"
    GET_RESPONSE_AS = "get_response_as"
    MEASURE_LENGTH = "measure_length"
    SHOW_VARIABLE = "show_variable"
    SHOW_STRING = "show_string"
    SHOW_RESPONSE = "show_response"
    COMMENT = "comment"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Command:
    """One classified source line: its kind, the raw line and the captured fields."""

    kind: CommandKind
    line: str
    captures: Tuple[Optional[str], ...] = field(default_factory=tuple)
