from pathlib import Path

from naturacode import Interpreter
from naturacode.ai.providers import NLP_BENEFITS_REPLY

EXAMPLES = Path(__file__).resolve().parents[1] / "examples"


def run_example(name: str) -> Interpreter:
    natura = Interpreter()
    natura.run((EXAMPLES / name).read_text(encoding="utf-8"))
    return natura


def test_first_conversation_example():
    natura = run_example("first_conversation.nat")
    assert natura.state.variables["budget"] == 800
    assert natura.state.variables["spent"] == 200
    assert "Budget looks good" in natura.output
    assert natura.output[-1] == "counter: 3"
    assert all(task.status == "complete" for task in natura.state.tasks)


def test_llm_mcp_example():
    natura = run_example("llm_mcp_example.nat")
    assert natura.state.variables["answer"] == NLP_BENEFITS_REPLY
    assert natura.state.variables["answer_length"] == len(NLP_BENEFITS_REPLY)
    assert natura.state.mcp_servers == {}
