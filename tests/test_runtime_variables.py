import pytest

from naturacode.errors import DivisionByZero, InvalidOperand, UndefinedVariable


@pytest.mark.parametrize("literal, expected", [("42", 42), ("-10", -10), ("3.14159", 3.14159), ("0", 0)])
def test_created_number_round_trips_through_show(natura, literal, expected):
    output = natura.run(f"create a number called x with value {literal}\nshow x")
    assert natura.state.variables["x"] == expected
    assert output == [f"Created number x with value {literal}", f"x: {literal}"]


def test_create_string_keeps_casing(natura):
    natura.run('create a string called greeting with value "Hello World"')
    assert natura.state.variables["greeting"] == "Hello World"
    assert natura.output == ['Created string greeting with value "Hello World"']


def test_redefinition_overwrites(natura):
    natura.run('create a number called x with value 1\ncreate a string called x with value "one"')
    assert natura.state.variables == {"x": "one"}


def test_arithmetic_sequence(natura):
    natura.run("create a number called x with value 10\nadd 5 to x\nmultiply x by 2\nsubtract 10 from x")
    assert natura.state.variables["x"] == 20
    assert natura.output[1:] == [
        "Added 5 to x. New value: 15",
        "Multiplied x by 2. New value: 30",
        "Subtracted 10 from x. New value: 20",
    ]


def test_division_uses_float_semantics(natura):
    natura.run("create a number called x with value 7\ndivide x by 2")
    assert natura.state.variables["x"] == 3.5
    assert natura.output[-1] == "Divided x by 2. New value: 3.5"


def test_whole_division_displays_without_fraction(natura):
    natura.run("create a number called x with value 10\ndivide x by 2\nshow x")
    assert natura.state.variables["x"] == 5
    assert natura.output[-1] == "x: 5"


@pytest.mark.parametrize("divisor", ["0", "0.0", "-0"])
def test_divide_by_zero_always_fails(natura, divisor):
    natura.run("create a number called x with value 10")
    with pytest.raises(DivisionByZero, match="Cannot divide by zero"):
        natura.run(f"divide x by {divisor}")
    assert natura.state.variables["x"] == 10


def test_divide_by_zero_checked_before_missing_variable(natura):
    with pytest.raises(DivisionByZero):
        natura.run("divide ghost by 0")


@pytest.mark.parametrize(
    "line",
    [
        "add 5 to ghost",
        "subtract 5 from ghost",
        "multiply ghost by 2",
        "divide ghost by 2",
        "show ghost",
        "if ghost is above 3, show \"yes\"",
        "measure length of ghost and store in size",
    ],
)
def test_undefined_variable_in_every_context(natura, line):
    with pytest.raises(UndefinedVariable, match="Variable ghost doesn't exist yet"):
        natura.run(line)


def test_undefined_variable_suggests_close_name(natura):
    natura.run("create a number called counter with value 1")
    with pytest.raises(UndefinedVariable) as excinfo:
        natura.run("show countr")
    assert "Did you mean counter?" in str(excinfo.value)


def test_arithmetic_on_text_is_rejected(natura):
    natura.run('create a string called name with value "Ada"')
    with pytest.raises(InvalidOperand):
        natura.run("add 1 to name")
    assert natura.state.variables["name"] == "Ada"


def test_measure_length_of_string_and_number(natura):
    natura.run(
        'create a string called name with value "Grace"\n'
        "create a number called big with value 12345\n"
        "measure length of name and store in n\n"
        "measure length of big and store in m"
    )
    assert natura.state.variables["n"] == 5
    assert natura.state.variables["m"] == 5
    assert "Measured length of name: 5 characters" in natura.output


def test_show_string_and_comments(natura):
    output = natura.run('note: greet the user\nshow "Hello, friend"\nnote:')
    assert output == ["Hello, friend"]
