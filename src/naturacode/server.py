"""
FastAPI surface for NaturaCode.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import NaturaConfig, load_config
from .errors import NaturaCodeError
from .observability.log_buffer import LogBuffer, log_event
from .runtime.interpreter import Interpreter
from .version import __version__

EMPTY_SPEECH = "No state to convert to speech yet."


class RunRequest(BaseModel):
    code: str = ""


class ToSpeechRequest(BaseModel):
    context: Dict[str, Any] = {}


class FromSpeechRequest(BaseModel):
    speech: str = ""


def create_app(config: Optional[NaturaConfig] = None, log_buffer: Optional[LogBuffer] = None) -> FastAPI:
    """Create the FastAPI app. Every request gets its own interpreter."""

    cfg = config or load_config()
    logs = log_buffer or LogBuffer()
    app = FastAPI(title="NaturaCode", version=__version__)

    @app.get("/health")
    def health() -> Dict[str, str]:
        log_event(logs, "health_ping", level="info")
        return {
            "status": "ok",
            "message": "NaturaCode server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.post("/run")
    def run_program(payload: RunRequest) -> Dict[str, Any]:
        if not payload.code.strip():
            return {"success": False, "error": "No code provided"}
        interpreter = Interpreter(config=cfg)
        started_at = time.time()
        try:
            output = interpreter.run(payload.code)
        except NaturaCodeError as exc:
            log_event(logs, "run_failed", level="warn", code=exc.code, line=exc.line)
            return {
                "success": False,
                "error": str(exc),
                "kind": exc.code,
                "diagnostics": exc.diagnostics,
                "output": interpreter.output,
            }
        snapshot = interpreter.snapshot()
        log_event(logs, "run_completed", level="info", lines=len(output), duration=time.time() - started_at)
        return {
            "success": True,
            "output": output,
            "context": {
                "variables": snapshot["variables"],
                "tasks": snapshot["tasks"],
                "api_response": snapshot["api_response"],
            },
        }

    @app.post("/to-speech")
    def to_speech(payload: ToSpeechRequest) -> Dict[str, Any]:
        try:
            interpreter = Interpreter.from_snapshot(payload.context, config=cfg)
        except (KeyError, TypeError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=f"Invalid context: {exc}") from exc
        speech = interpreter.to_speech()
        return {"success": True, "speech": speech or EMPTY_SPEECH}

    @app.post("/from-speech")
    def from_speech(payload: FromSpeechRequest) -> Dict[str, Any]:
        if not payload.speech.strip():
            return {"success": False, "error": "No speech provided"}
        interpreter = Interpreter(config=cfg)
        return {"success": True, "code": interpreter.from_speech(payload.speech)}

    @app.get("/api/logs")
    def api_logs(limit: int = 50) -> Dict[str, Any]:
        return {"events": logs.history(limit)}

    return app
