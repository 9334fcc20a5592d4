"""
Speech projection: render program state as creation sentences and turn such
sentences back into candidate program lines.

The reverse direction is heuristic. It splits on sentence boundaries and
lower-cases everything outside double quotes, so identifiers lose their casing
and quoted text containing ". " is split apart.
"""

from __future__ import annotations

import re
from typing import List

from .runtime.state import ProgramState, format_value

_SENTENCE_BOUNDARY = re.compile(r"\.\s+")
_QUOTED = re.compile(r'("[^"]*")')


def state_to_speech(state: ProgramState) -> str:
    sentences: List[str] = []
    for name, value in state.variables.items():
        if isinstance(value, str):
            sentences.append(f'Create a string called {name} with value "{value}".')
        else:
            sentences.append(f"Create a number called {name} with value {format_value(value)}.")
    for task in state.tasks:
        sentences.append(f'Create a task called "{task.name}" with status "{task.status}".')
    if state.api_endpoint:
        sentences.append(f'Connect to the API at "{state.api_endpoint}".')
    return " ".join(sentences)


def _lower_outside_quotes(sentence: str) -> str:
    parts = _QUOTED.split(sentence)
    return "".join(part if part.startswith('"') and part.endswith('"') and len(part) > 1 else part.lower() for part in parts)


def speech_to_program(speech: str) -> str:
    lines: List[str] = []
    for sentence in _SENTENCE_BOUNDARY.split(speech):
        trimmed = sentence.strip()
        if trimmed.endswith("."):
            trimmed = trimmed[:-1].strip()
        if trimmed:
            lines.append(_lower_outside_quotes(trimmed))
    return "\n".join(lines)
