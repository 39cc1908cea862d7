#!/usr/bin/env python3
"""Unit tests for TaskTrackerTUI glue (no real terminal)."""

from datetime import date

import pytest
from prompt_toolkit.application import create_app_session
from prompt_toolkit.input import DummyInput
from prompt_toolkit.output import DummyOutput

from application.task_store import TaskStore
from core import Task
from interface.keybindings import KeyEvent, Keybindings
from interface.session import VIEW_CALENDAR, Mode, ModalSession, Notification
from interface.tui_app import TaskTrackerTUI


@pytest.fixture
def tui(memory_storage):
    store = TaskStore(memory_storage, "work", [Task.new("alpha"), Task.new("beta")])
    session = ModalSession(store, Keybindings.default(), today=lambda: date(2026, 10, 14))
    with create_app_session(input=DummyInput(), output=DummyOutput()):
        yield TaskTrackerTUI(session, notification_ttl=2.0)


def _text(fragments) -> str:
    return "".join(text for _, text in fragments)


def test_key_presses_drive_session(tui):
    tui.apply_key(KeyEvent("j"))
    assert tui.ctx.selected == 1
    assert "work" in _text(tui.get_status_text())


def test_insert_mode_uses_entry_buffer(tui):
    tui.apply_key(KeyEvent("i"))
    assert tui.ctx.mode is Mode.INSERT
    assert "New task" in _text(tui.get_prompt_text())

    tui.edit_buffer.text = "gamma [p:max]"
    tui.commit_entry()

    assert tui.ctx.mode is Mode.NORMAL
    assert tui.edit_buffer.text == ""
    assert [t.text for t in tui.session.store.todos] == ["alpha", "beta", "gamma"]
    assert "gamma" in _text(tui.get_body_text())


def test_edit_prefills_buffer(tui):
    tui.apply_key(KeyEvent("e"))
    assert tui.edit_buffer.text == "alpha"
    tui.apply_key(KeyEvent("Escape"))
    assert tui.ctx.mode is Mode.NORMAL


def test_notification_expires_without_touching_tree(tui):
    tui._set_context(tui.ctx.evolve(notification=Notification("Tasks sorted")))
    assert "Tasks sorted" in _text(tui.get_status_text())

    tui.notification_expires = 0.0
    assert "Tasks sorted" not in _text(tui.get_status_text())
    assert tui.ctx.notification is None
    assert len(tui.session.store.todos) == 2


def test_calendar_view_renders_agenda(tui):
    tui.session.store.todos[0].due_date = date(2026, 10, 14)
    tui._set_context(tui.ctx.evolve(view=VIEW_CALENDAR, calendar_day=date(2026, 10, 14)))
    body = _text(tui.get_body_text())
    assert "October 14 2026" in body
    assert "alpha" in body
    assert "beta" not in body
