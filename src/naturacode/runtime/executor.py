"""
Command executor for NaturaCode.

The executor applies one classified command to an explicit ``ProgramState``.
Conditionals hand their action clause back to the classifier and execute the
result; loop terminators replay the buffered body lines, classifying each line
again on every pass.
"""

from __future__ import annotations

import copy
import difflib
import json
import logging
from typing import Callable, Dict, Optional

from ..ast_nodes import Command, CommandKind
from ..config import DEFAULT_WHILE_LIMIT
from ..errors import (
    DivisionByZero,
    InvalidOperand,
    LoopAlreadyOpen,
    LoopOverrun,
    NaturaCodeError,
    NoActiveLoop,
    NoMockConnection,
    TaskNotFound,
    UndefinedVariable,
    UnrecognizedCommand,
)
from ..parser import classify_line
from .services import ExternalServices
from .state import LoopState, ProgramState, Task, Value, format_value, parse_number

log = logging.getLogger(__name__)

PREVIEW_LIMIT = 100


def compare(left: Value, comparator: str, right: Value) -> bool:
    """Evaluate ``left <comparator> right``; a number never compares true against text."""
    if isinstance(left, str) != isinstance(right, str):
        return False
    op = comparator.lower()
    if op in {"above", "greater than"}:
        return left > right
    if op in {"below", "less than"}:
        return left < right
    return left == right


def _preview(text: str) -> str:
    if len(text) > PREVIEW_LIMIT:
        return text[:PREVIEW_LIMIT] + "..."
    return text


class Executor:
    def __init__(
        self,
        services: Optional[ExternalServices] = None,
        *,
        while_limit: int = DEFAULT_WHILE_LIMIT,
        echo: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.services = services or ExternalServices()
        self.while_limit = while_limit
        self.echo = echo

    def execute(self, command: Command, state: ProgramState) -> None:
        """Apply ``command`` to ``state``; failures add one ``Error:`` line and propagate."""
        log.debug("execute %s: %s", command.kind.value, command.line)
        try:
            _HANDLERS[command.kind](self, command, state)
        except NaturaCodeError as exc:
            if exc.line is None:
                exc.with_line(command.line)
            if not exc.reported:
                exc.reported = True
                self.emit(state, f"Error: {exc}")
                log.warning("%s failed: %s", exc.code, exc.describe())
            raise

    def execute_line(self, line: str, state: ProgramState) -> None:
        self.execute(classify_line(line), state)

    def emit(self, state: ProgramState, message: str) -> None:
        state.output.append(message)
        if self.echo is not None:
            self.echo(message)

    # Lookups

    def _require(self, state: ProgramState, name: str) -> Value:
        if not state.has_variable(name):
            message = f"Variable {name} doesn't exist yet. Create it first!"
            close = difflib.get_close_matches(name, list(state.variables), n=1, cutoff=0.75)
            if close:
                message = f"{message} Did you mean {close[0]}?"
            raise UndefinedVariable(message)
        return state.variables[name]

    def _require_number(self, state: ProgramState, name: str) -> Value:
        value = self._require(state, name)
        if isinstance(value, str):
            raise InvalidOperand(f"Variable {name} holds text, not a number.")
        return value

    # Variables

    def _create_number(self, command: Command, state: ProgramState) -> None:
        name, literal = command.captures
        state.variables[name] = parse_number(literal)
        self.emit(state, f"Created number {name} with value {literal}")

    def _create_string(self, command: Command, state: ProgramState) -> None:
        name, text = command.captures
        state.variables[name] = text
        self.emit(state, f'Created string {name} with value "{text}"')

    # Arithmetic

    def _add(self, command: Command, state: ProgramState) -> None:
        amount, name = parse_number(command.captures[0]), command.captures[1]
        state.variables[name] = self._require_number(state, name) + amount
        self.emit(state, f"Added {format_value(amount)} to {name}. New value: {format_value(state.variables[name])}")

    def _subtract(self, command: Command, state: ProgramState) -> None:
        amount, name = parse_number(command.captures[0]), command.captures[1]
        state.variables[name] = self._require_number(state, name) - amount
        self.emit(
            state, f"Subtracted {format_value(amount)} from {name}. New value: {format_value(state.variables[name])}"
        )

    def _multiply(self, command: Command, state: ProgramState) -> None:
        name, factor = command.captures[0], parse_number(command.captures[1])
        state.variables[name] = self._require_number(state, name) * factor
        self.emit(state, f"Multiplied {name} by {format_value(factor)}. New value: {format_value(state.variables[name])}")

    def _divide(self, command: Command, state: ProgramState) -> None:
        name, divisor = command.captures[0], parse_number(command.captures[1])
        if divisor == 0:
            raise DivisionByZero("Cannot divide by zero! That would break the universe.")
        state.variables[name] = self._require_number(state, name) / divisor
        self.emit(state, f"Divided {name} by {format_value(divisor)}. New value: {format_value(state.variables[name])}")

    # Tasks

    def _create_task(self, command: Command, state: ProgramState) -> None:
        name, status = command.captures
        state.tasks.append(Task(name=name, status=status))
        self.emit(state, f'Created task: "{name}" with status "{status}"')

    def _mark_task_complete(self, command: Command, state: ProgramState) -> None:
        name = command.captures[0]
        task = state.find_task(name)
        if task is None:
            raise TaskNotFound(f'Task "{name}" not found. Check the name and try again.')
        task.status = "complete"
        self.emit(state, f'Marked task "{name}" as complete')

    def _show_tasks(self, command: Command, state: ProgramState) -> None:
        if not state.tasks:
            self.emit(state, "No tasks yet. Create some tasks to get started!")
            return
        self.emit(state, "All tasks:")
        for task in state.tasks:
            self.emit(state, f"  • {task.name} ({task.status})")

    def _show_tasks_where(self, command: Command, state: ProgramState) -> None:
        status = command.captures[0]
        matching = [task for task in state.tasks if task.status == status]
        if not matching:
            self.emit(state, f'No tasks with status "{status}"')
            return
        self.emit(state, f'Tasks with status "{status}":')
        for task in matching:
            self.emit(state, f"  • {task.name}")

    # Conditionals

    def _if_then(self, command: Command, state: ProgramState) -> None:
        name, comparator, literal, then_clause, else_clause = command.captures
        value = self._require(state, name)
        self._branch(compare(value, comparator, parse_number(literal)), then_clause, else_clause, state)

    def _if_then_var(self, command: Command, state: ProgramState) -> None:
        name, comparator, other, then_clause, else_clause = command.captures
        value = self._require(state, name)
        other_value = self._require(state, other)
        self._branch(compare(value, comparator, other_value), then_clause, else_clause, state)

    def _branch(self, condition: bool, then_clause: str, else_clause: Optional[str], state: ProgramState) -> None:
        if condition:
            self.execute_line(then_clause, state)
        elif else_clause:
            self.execute_line(else_clause, state)

    # Loops

    def _open_loop(self, state: ProgramState, loop: LoopState) -> None:
        if state.loop.active:
            raise LoopAlreadyOpen("A loop is already open. Finish it with 'end' before starting another one.")
        state.loop = loop

    def _repeat(self, command: Command, state: ProgramState) -> None:
        count = int(command.captures[0])
        self._open_loop(state, LoopState(active=True, kind="repeat", count=count))
        self.emit(state, f"Starting to repeat {count} times...")

    def _while(self, command: Command, state: ProgramState) -> None:
        name, comparator, literal = command.captures
        threshold = parse_number(literal)
        self._open_loop(
            state,
            LoopState(active=True, kind="while", variable=name, comparator=comparator, threshold=threshold),
        )
        self.emit(state, f"Starting while loop: while {name} is {comparator} {format_value(threshold)}...")

    def _end_loop(self, command: Command, state: ProgramState) -> None:
        loop = state.loop
        if not loop.active:
            raise NoActiveLoop("Not in a loop! Use 'repeat' or 'while' first.")
        if loop.replaying:
            raise LoopAlreadyOpen("Cannot close a loop from inside its own body.")
        loop.replaying = True
        body = list(loop.body)
        try:
            if loop.kind == "repeat":
                self._replay_repeat(loop, body, state)
            else:
                self._replay_while(loop, body, state)
        except NaturaCodeError:
            # The loop stays open after a failed replay; a later terminator replays it again.
            loop.replaying = False
            raise
        state.loop = LoopState()
        self.emit(state, "Loop finished!")

    def _replay_repeat(self, loop: LoopState, body: list, state: ProgramState) -> None:
        for iteration in range(1, loop.count + 1):
            self.emit(state, f"  Iteration {iteration}:")
            for line in body:
                self.execute_line(line, state)

    def _replay_while(self, loop: LoopState, body: list, state: ProgramState) -> None:
        iterations = 0
        while True:
            if not state.has_variable(loop.variable):
                raise UndefinedVariable(f"Variable {loop.variable} doesn't exist in while loop!")
            value = state.variables[loop.variable]
            if not compare(value, loop.comparator, loop.threshold):
                return
            if iterations >= self.while_limit:
                raise LoopOverrun("While loop ran too many times! Check your condition.")
            iterations += 1
            self.emit(state, f"  Iteration {iterations}: {loop.variable} = {format_value(value)}")
            for line in body:
                self.execute_line(line, state)

    # Search API

    def _connect_api(self, command: Command, state: ProgramState) -> None:
        state.api_endpoint = command.captures[0]
        self.emit(state, f"Connected to API at {state.api_endpoint}")

    def _send_search(self, command: Command, state: ProgramState) -> None:
        query, key = command.captures
        if not state.api_endpoint:
            raise NoMockConnection("Connect to an API first before sending searches!")
        state.api_response = self.services.search.search(state.api_endpoint, query, key)
        self.emit(state, f'Sent search for "{query}" using key "{key}"')

    def _get_response(self, command: Command, state: ProgramState) -> None:
        if state.api_response is None:
            raise NoMockConnection("No API response available. Send a search first!")
        self.emit(state, "Got the API response successfully")

    def _show_response(self, command: Command, state: ProgramState) -> None:
        if state.api_response is None:
            raise NoMockConnection("No API response to show. Send a search first!")
        self.emit(state, "API Response:")
        self.emit(state, json.dumps(state.api_response, indent=2, ensure_ascii=False))

    # MCP

    def _connect_mcp(self, command: Command, state: ProgramState) -> None:
        url, protocol = command.captures
        state.mcp_servers[url] = self.services.mcp.connect(url, protocol)
        self.emit(state, f"Connected to MCP server at {url} using {protocol} protocol")

    def _disconnect_mcp(self, command: Command, state: ProgramState) -> None:
        url = command.captures[0]
        if url not in state.mcp_servers:
            raise NoMockConnection(f"No active connection to MCP server at {url}")
        self.services.mcp.disconnect(url)
        del state.mcp_servers[url]
        self.emit(state, f"Disconnected from MCP server at {url}")

    # Model calls

    def _send_message(self, command: Command, state: ProgramState) -> None:
        model, system_var, user_var = command.captures
        user_message = format_value(self._require(state, user_var))
        system_prompt = format_value(self._require(state, system_var)) if system_var else None
        self._queue_request(state, model, system_prompt, user_message)

    def _send_message_direct(self, command: Command, state: ProgramState) -> None:
        model, system_var, user_message = command.captures
        system_prompt = format_value(self._require(state, system_var)) if system_var else None
        self._queue_request(state, model, system_prompt, user_message)

    def _queue_request(
        self, state: ProgramState, model: str, system_prompt: Optional[str], user_message: str
    ) -> None:
        state.pending_llm_request = {
            "model": model,
            "system_prompt": system_prompt,
            "user_message": user_message,
            "timestamp": self.services.clock(),
        }
        self.emit(state, f"Sending message to {model}...")
        if system_prompt:
            self.emit(state, f"System: {_preview(system_prompt)}")
        self.emit(state, f"User: {_preview(user_message)}")

    def _wait_for_response(self, command: Command, state: ProgramState) -> None:
        request = state.pending_llm_request
        if request is None:
            raise NoMockConnection("No pending LLM request. Send a message first!")
        messages = []
        if request["system_prompt"]:
            messages.append({"role": "system", "content": request["system_prompt"]})
        messages.append({"role": "user", "content": request["user_message"]})
        result = self.services.model.invoke(messages, model=request["model"])
        state.llm_response = {
            "model": request["model"],
            "response": result["result"],
            "timestamp": self.services.clock(),
            "request": copy.deepcopy(request),
        }
        self.emit(state, "✅ Received response from LLM")

    def _get_response_as(self, command: Command, state: ProgramState) -> None:
        if state.llm_response is None:
            raise NoMockConnection("No LLM response available. Send a message and wait for response first!")
        name = command.captures[0]
        state.variables[name] = state.llm_response["response"]
        self.emit(state, f'Stored LLM response in variable "{name}"')

    # Utilities and output

    def _measure_length(self, command: Command, state: ProgramState) -> None:
        source, target = command.captures
        value = self._require(state, source)
        length = len(value) if isinstance(value, str) else len(format_value(value))
        state.variables[target] = length
        self.emit(state, f"Measured length of {source}: {length} characters")

    def _show_variable(self, command: Command, state: ProgramState) -> None:
        name = command.captures[0]
        self.emit(state, f"{name}: {format_value(self._require(state, name))}")

    def _show_string(self, command: Command, state: ProgramState) -> None:
        self.emit(state, command.captures[0])

    def _comment(self, command: Command, state: ProgramState) -> None:
        return None

    def _unknown(self, command: Command, state: ProgramState) -> None:
        raise UnrecognizedCommand(f'I don\'t understand "{command.line}". Could you rephrase that?')


_HANDLERS: Dict[CommandKind, Callable[[Executor, Command, ProgramState], None]] = {
    CommandKind.CREATE_NUMBER: Executor._create_number,
    CommandKind.CREATE_STRING: Executor._create_string,
    CommandKind.ADD: Executor._add,
    CommandKind.SUBTRACT: Executor._subtract,
    CommandKind.MULTIPLY: Executor._multiply,
    CommandKind.DIVIDE: Executor._divide,
    CommandKind.CREATE_TASK: Executor._create_task,
    CommandKind.MARK_TASK_COMPLETE: Executor._mark_task_complete,
    CommandKind.SHOW_TASKS: Executor._show_tasks,
    CommandKind.SHOW_TASKS_WHERE: Executor._show_tasks_where,
    CommandKind.IF_THEN: Executor._if_then,
    CommandKind.IF_THEN_VAR: Executor._if_then_var,
    CommandKind.REPEAT: Executor._repeat,
    CommandKind.WHILE: Executor._while,
    CommandKind.END_LOOP: Executor._end_loop,
    CommandKind.CONNECT_API: Executor._connect_api,
    CommandKind.SEND_SEARCH: Executor._send_search,
    CommandKind.GET_RESPONSE: Executor._get_response,
    CommandKind.CONNECT_MCP: Executor._connect_mcp,
    CommandKind.DISCONNECT_MCP: Executor._disconnect_mcp,
    CommandKind.SEND_MESSAGE: Executor._send_message,
    CommandKind.SEND_MESSAGE_DIRECT: Executor._send_message_direct,
    CommandKind.WAIT_FOR_RESPONSE: Executor._wait_for_response,
    CommandKind.GET_RESPONSE_AS: Executor._get_response_as,
    CommandKind.MEASURE_LENGTH: Executor._measure_length,
    CommandKind.SHOW_VARIABLE: Executor._show_variable,
    CommandKind.SHOW_STRING: Executor._show_string,
    CommandKind.SHOW_RESPONSE: Executor._show_response,
    CommandKind.COMMENT: Executor._comment,
    CommandKind.UNKNOWN: Executor._unknown,
}

_unhandled = set(CommandKind) - set(_HANDLERS)
if _unhandled:  # pragma: no cover - guards new command kinds
    raise RuntimeError(f"Executor has no handler for: {sorted(kind.value for kind in _unhandled)}")
