from datetime import date

import pytest
import yaml

from core import Priority, Task
from infrastructure.cluster_codec import ClusterCodec


def test_dumps_writes_todos_document():
    task = Task(id="t1", text="Buy milk", due_date=date(2026, 10, 19), created_at=1760000000, priority=Priority.HIGH)
    task.subtasks = [Task(id="t2", text="Oat", completed=True)]

    document = yaml.safe_load(ClusterCodec.dumps([task]))

    assert list(document) == ["todos"]
    entry = document["todos"][0]
    assert entry["due_date"] == "2026-10-19"
    assert entry["priority"] == "High"
    assert entry["is_section"] is False
    assert entry["subtasks"][0]["completed"] is True
    assert entry["subtasks"][0]["due_date"] is None


def test_loads_tolerates_partial_entries():
    raw = b"""
todos:
  - text: no id here
    priority: mid
    due_date: 2026-10-19
  - id: abc
    text: Work
    is_section: true
    subtasks:
      - id: child
        text: nested
"""
    tasks = ClusterCodec.loads(raw)

    assert tasks[0].id
    assert tasks[0].priority is Priority.MEDIUM
    assert tasks[0].due_date == date(2026, 10, 19)
    assert tasks[1].is_section
    assert tasks[1].subtasks[0].id == "child"


def test_loads_empty_document():
    assert ClusterCodec.loads(b"") == []
    assert ClusterCodec.loads(b"todos:\n") == []


@pytest.mark.parametrize(
    "raw",
    [
        b"- a\n- b\n",
        b"todos: nope\n",
        b"todos:\n  - just a string\n",
        b"todos:\n  - text: x\n    subtasks: 3\n",
        b"todos:\n  - text: x\n    due_date: not-a-date\n",
        b"todos:\n  - &a {text: loop, subtasks: [{text: inner, subtasks: [*a]}]}\n",
    ],
)
def test_loads_rejects_malformed_documents(raw):
    with pytest.raises(ValueError):
        ClusterCodec.loads(raw)


def test_loads_accepts_repeated_alias_outside_its_own_subtree():
    tasks = ClusterCodec.loads(b"todos:\n  - &a {text: shared}\n  - {text: holder, subtasks: [*a, *a]}\n")
    assert [t.text for t in tasks] == ["shared", "holder"]
    assert [t.text for t in tasks[1].subtasks] == ["shared", "shared"]


def test_loads_clamps_unrepresentable_timestamps():
    tasks = ClusterCodec.loads(b"todos:\n  - {text: x, created_at: .inf}\n  - {text: y, created_at: .nan}\n")
    assert [t.created_at for t in tasks] == [0, 0]
