import pytest

from naturacode.errors import TaskNotFound
from naturacode.runtime.state import Task


def test_create_task_allows_duplicates(natura):
    natura.run(
        'create a task called "Write tests" with status "pending"\n'
        'create a task called "Write tests" with status "blocked"'
    )
    assert natura.state.tasks == [Task("Write tests", "pending"), Task("Write tests", "blocked")]


@pytest.mark.parametrize("word", ["complete", "done", "finished"])
def test_mark_complete_normalizes_status(natura, word):
    natura.run(f'create a task called "Ship it" with status "pending"\nmark task "Ship it" as {word}')
    assert natura.state.tasks[0].status == "complete"
    assert natura.output[-1] == 'Marked task "Ship it" as complete'


def test_mark_complete_updates_first_match_only(natura):
    natura.run(
        'create a task called "Dup" with status "pending"\n'
        'create a task called "Dup" with status "pending"\n'
        'mark task "Dup" as complete'
    )
    assert [t.status for t in natura.state.tasks] == ["complete", "pending"]


def test_mark_missing_task_fails_and_leaves_tasks_alone(natura):
    natura.run('create a task called "Real" with status "pending"')
    before = natura.snapshot()["tasks"]
    with pytest.raises(TaskNotFound, match='Task "Nonexistent" not found'):
        natura.run('mark task "Nonexistent" as complete')
    assert natura.snapshot()["tasks"] == before


def test_show_tasks_empty_and_filled(natura):
    assert natura.run("show tasks") == ["No tasks yet. Create some tasks to get started!"]
    output = natura.run(
        'create a task called "A" with status "pending"\n'
        'create a task called "B" with status "complete"\n'
        "show all tasks"
    )
    assert output[-3:] == ["All tasks:", "  • A (pending)", "  • B (complete)"]


def test_show_tasks_filtered(natura):
    output = natura.run(
        'create a task called "Task 1" with status "pending"\n'
        'create a task called "Task 2" with status "complete"\n'
        'create a task called "Task 3" with status "pending"\n'
        'show tasks where status is "pending"\n'
        'show tasks where status is "archived"'
    )
    assert output[-4:] == [
        'Tasks with status "pending":',
        "  • Task 1",
        "  • Task 3",
        'No tasks with status "archived"',
    ]
