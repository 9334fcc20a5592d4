from naturacode import Interpreter
from naturacode.speech import speech_to_program, state_to_speech
from naturacode.runtime.state import ProgramState, Task


def test_state_to_speech_lists_creation_sentences():
    state = ProgramState(
        variables={"owner": "Ada", "count": 3, "ratio": 2.5},
        tasks=[Task("Ship release", "pending")],
        api_endpoint="https://api.example.com",
    )
    assert state_to_speech(state) == (
        'Create a string called owner with value "Ada". '
        "Create a number called count with value 3. "
        "Create a number called ratio with value 2.5. "
        'Create a task called "Ship release" with status "pending". '
        'Connect to the API at "https://api.example.com".'
    )


def test_empty_state_has_no_speech():
    assert state_to_speech(ProgramState()) == ""


def test_speech_to_program_lowercases_outside_quotes():
    speech = 'Create a number called Score with value 10. Show "Hello World".'
    assert speech_to_program(speech) == 'create a number called score with value 10\nshow "Hello World"'


def test_speech_to_program_skips_empty_sentences():
    assert speech_to_program("  ") == ""
    assert speech_to_program("Show total.  ") == "show total"


def test_speech_round_trip_rebuilds_state():
    source = Interpreter()
    source.run(
        "create a number called total with value 12\n"
        'create a string called owner with value "Grace Hopper"\n'
        'create a task called "Review PR" with status "pending"\n'
        'connect to API at "https://api.example.com"'
    )
    program = source.from_speech(source.to_speech())
    rebuilt = Interpreter()
    rebuilt.run(program)
    assert rebuilt.state.variables == source.state.variables
    assert rebuilt.state.tasks == source.state.tasks
    assert rebuilt.state.api_endpoint == source.state.api_endpoint
