import pytest

from naturacode import errors

ERROR_CODES = {
    errors.UndefinedVariable: "NC-RUN-101",
    errors.DivisionByZero: "NC-RUN-102",
    errors.TaskNotFound: "NC-RUN-103",
    errors.LoopOverrun: "NC-RUN-104",
    errors.NoActiveLoop: "NC-RUN-105",
    errors.NoMockConnection: "NC-RUN-106",
    errors.UnrecognizedCommand: "NC-RUN-107",
    errors.LoopAlreadyOpen: "NC-RUN-108",
    errors.InvalidOperand: "NC-RUN-109",
}


@pytest.mark.parametrize("error_cls, code", ERROR_CODES.items())
def test_error_codes_are_stable(error_cls, code):
    err = error_cls("boom")
    assert err.code == code
    assert isinstance(err, errors.NaturaCodeError)
    assert str(err) == "boom"


def test_diagnostics_carry_code_and_line():
    err = errors.TaskNotFound("missing", line='mark task "x" as done')
    assert err.diagnostics == [
        {"code": "NC-RUN-103", "message": "missing", "severity": "error", "line": 'mark task "x" as done'}
    ]


def test_describe_includes_line_when_known():
    assert errors.NoActiveLoop("Not in a loop!").describe() == "Not in a loop!"
    assert errors.NoActiveLoop("Not in a loop!", line="end").describe() == 'Not in a loop! (line "end")'


def test_executor_records_failing_line(natura):
    with pytest.raises(errors.DivisionByZero) as excinfo:
        natura.run("create a number called x with value 4\ndivide x by 0")
    assert excinfo.value.line == "divide x by 0"
    assert excinfo.value.reported is True


def test_runtime_failure_diagnostics_name_the_failing_line(natura):
    with pytest.raises(errors.UndefinedVariable) as excinfo:
        natura.run("create a number called x with value 1\nshow y")
    assert excinfo.value.diagnostics[0]["line"] == "show y"
    assert excinfo.value.diagnostics[0]["code"] == "NC-RUN-101"


def test_diagnostics_point_at_innermost_line(natura):
    with pytest.raises(errors.TaskNotFound) as excinfo:
        natura.run('create a number called x with value 1\nif x is above 0, mark task "Ghost" as done')
    assert excinfo.value.diagnostics[0]["line"] == 'mark task "Ghost" as done'
