"""
Interpreter facade: the run driver plus snapshot, reset and speech helpers.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..config import NaturaConfig, load_config
from ..parser import classify_line, is_loop_terminator, split_program
from ..speech import speech_to_program, state_to_speech
from .executor import Executor
from .services import ExternalServices, default_services
from .state import ProgramState

log = logging.getLogger(__name__)


class Interpreter:
    """
    One interpreter session. Instances share no state; a single instance must
    not run two programs at the same time.
    """

    def __init__(
        self,
        services: Optional[ExternalServices] = None,
        config: Optional[NaturaConfig] = None,
        echo: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.config = config or load_config()
        if echo is None and self.config.echo:
            echo = print
        self.executor = Executor(
            services or default_services(self.config),
            while_limit=self.config.while_limit,
            echo=echo,
        )
        self.state = ProgramState()

    @classmethod
    def from_snapshot(cls, snapshot: Dict[str, Any], **kwargs: Any) -> "Interpreter":
        interpreter = cls(**kwargs)
        interpreter.state = ProgramState.from_dict(snapshot)
        return interpreter

    def run(self, source: str) -> List[str]:
        """
        Run program text line by line and return the output log.

        While a loop is open every line except its terminator is buffered
        verbatim. The first failing line aborts the run; its error propagates
        after an ``Error:`` line has been added to the output.
        """
        lines = split_program(source)
        self.state.output = []
        log.info("running %d line(s)", len(lines))
        for line in lines:
            if self.state.loop.active and not is_loop_terminator(line):
                self.state.loop.body.append(line)
                continue
            self.executor.execute(classify_line(line), self.state)
        return list(self.state.output)

    @property
    def output(self) -> List[str]:
        return list(self.state.output)

    def snapshot(self) -> Dict[str, Any]:
        """Deep copy of the current state, safe to serialize or mutate."""
        return self.state.to_dict()

    def reset(self) -> None:
        self.state = ProgramState()

    def to_speech(self) -> str:
        return state_to_speech(self.state)

    def from_speech(self, speech: str) -> str:
        return speech_to_program(speech)
