"""
Command-line interface for NaturaCode (natura).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import NaturaConfig, load_config
from .errors import NaturaCodeError
from .runtime.interpreter import Interpreter
from .runtime.state import format_value
from .version import __version__

PROMPT = "natura> "


def build_cli_parser() -> argparse.ArgumentParser:
    cli = argparse.ArgumentParser(prog="natura", description="NaturaCode: programming in plain English")
    cli.add_argument(
        "--version",
        action="version",
        version=f"NaturaCode {__version__} (Python {sys.version.split()[0]})",
    )
    cli.add_argument("--log-level", help="Logging level (defaults to NATURA_LOG_LEVEL or WARNING)")
    sub = cli.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run a .nat program file")
    run_cmd.add_argument("file", type=Path)
    run_cmd.add_argument("--json", action="store_true", help="Print output and final state as JSON")

    sub.add_parser("repl", help="Start an interactive NaturaCode prompt")

    to_speech_cmd = sub.add_parser("to-speech", help="Run a program and describe its final state in sentences")
    to_speech_cmd.add_argument("file", type=Path)

    from_speech_cmd = sub.add_parser("from-speech", help="Turn sentences back into program lines")
    from_speech_cmd.add_argument("text")

    serve_cmd = sub.add_parser("serve", help="Start the FastAPI server")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=3000)
    serve_cmd.add_argument("--dry-run", action="store_true", help="Build app but do not start server")
    return cli


def _interpreter(config: NaturaConfig) -> Interpreter:
    # The CLI prints the output log itself.
    return Interpreter(config=replace(config, echo=False))


def _read_program(path: Path) -> str:
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    return path.read_text(encoding="utf-8")


def _print_final_state(interpreter: Interpreter) -> None:
    snapshot = interpreter.snapshot()
    if snapshot["variables"]:
        print("\nFinal variables:")
        for name, value in snapshot["variables"].items():
            print(f"   {name}: {format_value(value)}")
    if snapshot["tasks"]:
        print("\nFinal tasks:")
        for task in snapshot["tasks"]:
            marker = "[x]" if task["status"] == "complete" else "[ ]"
            print(f"   {marker} {task['name']} ({task['status']})")


def _run_file(args: argparse.Namespace, config: NaturaConfig) -> None:
    source = _read_program(args.file)
    interpreter = _interpreter(config)
    try:
        output = interpreter.run(source)
    except NaturaCodeError as exc:
        if args.json:
            print(json.dumps({"status": "error", "error": str(exc), "kind": exc.code, "output": interpreter.output}, indent=2))
        else:
            for line in interpreter.output:
                print(line)
        raise SystemExit(1) from exc
    if args.json:
        print(json.dumps({"status": "ok", "output": output, "state": interpreter.snapshot()}, indent=2))
        return
    for line in output:
        print(line)
    _print_final_state(interpreter)


def _repl(config: NaturaConfig, stdin=None) -> None:
    stream = stdin or sys.stdin
    interpreter = _interpreter(config)
    print("NaturaCode interactive shell. Type 'exit' to quit.")
    while True:
        print(PROMPT, end="", flush=True)
        raw = stream.readline()
        if not raw:
            break
        line = raw.strip()
        if line.lower() == "exit":
            print("Goodbye!")
            break
        if not line:
            continue
        try:
            for out in interpreter.run(line):
                print(out)
        except NaturaCodeError:
            for out in interpreter.output:
                print(out)
            print("Try rephrasing the sentence.")


def main(argv: list[str] | None = None) -> None:
    cli = build_cli_parser()
    args = cli.parse_args(argv)
    config = load_config()
    logging.basicConfig(level=(args.log_level or config.log_level).upper())

    if args.command == "run":
        _run_file(args, config)
        return

    if args.command == "repl":
        _repl(config)
        return

    if args.command == "to-speech":
        interpreter = _interpreter(config)
        try:
            interpreter.run(_read_program(args.file))
        except NaturaCodeError as exc:
            raise SystemExit(f"Error: {exc}") from exc
        print(interpreter.to_speech())
        return

    if args.command == "from-speech":
        print(_interpreter(config).from_speech(args.text))
        return

    if args.command == "serve":
        from .server import create_app

        app = create_app(config=config)
        if args.dry_run:
            print(json.dumps({"status": "ready", "host": args.host, "port": args.port}, indent=2))
            return
        try:
            import uvicorn
        except ImportError as exc:  # pragma: no cover - runtime check
            raise SystemExit("uvicorn is required to run the server") from exc
        uvicorn.run(app, host=args.host, port=args.port)
        return


if __name__ == "__main__":  # pragma: no cover
    main()
