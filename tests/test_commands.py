from datetime import date

from application.task_store import TaskStore
from core import Priority, Task
from interface.commands import complete_command, execute_command
from interface.keybindings import Keybindings
from infrastructure.file_blob_store import FileBlobStore
from interface.session import VIEW_CALENDAR, VIEW_LIST, Mode, ModalSession, SessionContext

TODAY = date(2026, 10, 14)


def _session(storage, cluster="work", tasks=None) -> ModalSession:
    store = TaskStore(storage, cluster, tasks or [])
    return ModalSession(store, Keybindings.default(), today=lambda: TODAY)


def _run(session, line, ctx=None):
    ctx = (ctx or SessionContext()).evolve(mode=Mode.COMMAND, entry_text=":")
    return session.commit(ctx, line)


def test_ls_lists_clusters(memory_storage):
    session = _session(memory_storage)
    ctx = _run(session, ":ls")
    assert ctx.notification.text == "No clusters found"

    TaskStore(memory_storage, "home").save()
    TaskStore(memory_storage, "work").save()
    ctx = _run(session, ":ls")
    assert ctx.notification.text == "Clusters: home, work"
    assert not ctx.notification.error


def test_open_missing_cluster_reports_error(memory_storage):
    session = _session(memory_storage)
    ctx = _run(session, ":e nowhere")
    assert ctx.notification.error
    assert "nowhere" in ctx.notification.text
    assert session.store.cluster_name == "work"


def test_new_then_open_cluster(memory_storage):
    session = _session(memory_storage, tasks=[Task.new("first")])
    session.store.save()
    ctx = _run(session, ":n home")
    assert session.store.cluster_name == "home"
    assert session.store.todos == []
    assert ctx.notification.text == "Created cluster 'home'"
    assert "home" in memory_storage.blobs

    session.store.add(Task.new("laundry"))
    ctx = _run(session, ":e work", ctx.evolve(selected=3))
    assert session.store.cluster_name == "work"
    assert [t.text for t in session.store.todos] == ["first"]
    assert ctx.selected == 0
    assert ctx.mode is Mode.NORMAL


def test_new_cluster_with_unusable_name_keeps_current_cluster(tmp_path):
    storage = FileBlobStore(tmp_path / "data")
    session = _session(storage, tasks=[Task.new("first")])
    for line in (":n ../evil", ":n .hidden", ":n a/b"):
        ctx = _run(session, line)
        assert ctx.notification.error
        assert ctx.notification.text.startswith("Could not create cluster")
        assert session.store.cluster_name == "work"
        assert [t.text for t in session.store.todos] == ["first"]
    assert not (tmp_path / "evil.yaml").exists()
    assert storage.list() == []


def test_new_cluster_write_failure_keeps_current_cluster(failing_storage):
    session = _session(failing_storage)
    ctx = _run(session, ":n home")
    assert ctx.notification.error
    assert "home" in ctx.notification.text
    assert session.store.cluster_name == "work"


def test_calendar_and_list_views(memory_storage):
    session = _session(memory_storage)
    ctx = _run(session, ":e calendar")
    assert ctx.view == VIEW_CALENDAR
    assert ctx.calendar_day == TODAY
    assert _run(session, ":e list", ctx).view == VIEW_LIST
    assert _run(session, ":e cal").view == VIEW_CALENDAR


def test_sort_keeps_selection_on_same_task(memory_storage):
    tasks = [Task.new("b"), Task.new("a", priority=Priority.HIGH), Task.new("c")]
    session = _session(memory_storage, tasks=tasks)
    ctx = _run(session, ":sort", SessionContext(selected=2))
    assert [t.text for t in session.store.todos] == ["a", "b", "c"]
    assert ctx.selected == 2
    assert ctx.notification.text == "Tasks sorted"


def test_display_start_toggles(memory_storage):
    session = _session(memory_storage)
    ctx = _run(session, ":display_start")
    assert ctx.display.show_start_date
    assert not _run(session, ":display_start", ctx).display.show_start_date


def test_unknown_commands_are_ignored(memory_storage):
    session = _session(memory_storage)
    ctx = SessionContext(selected=0)
    assert execute_command(session, ctx, ":frobnicate") == ctx
    assert execute_command(session, ctx, ":e ") == ctx


def test_complete_command():
    assert complete_command(":s", []) == ":sort"
    assert complete_command(":d", []) == ":display_start"
    assert complete_command(":e c", ["cooking"]) == ":e calendar"
    assert complete_command(":e wo", ["home", "work"]) == ":e work"
    assert complete_command(":n h", ["home"]) == ":n home"
    assert complete_command(":sort", []) is None
    assert complete_command(":e work", ["work"]) is None
