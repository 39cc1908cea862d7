"""Modal input state machine.

All session state lives in an immutable ``SessionContext``; every handler on
``ModalSession`` takes the current context and returns the next one. The
session itself only holds the resources the handlers act on: the open
``TaskStore`` and the ``Keybindings`` resolver.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Callable, List, Optional

from application.task_store import TaskStore
from core import FlatRow, Priority, Task, TaskPath, parse_date, parse_entry, parse_priority
from interface.i18n import translate
from interface.keybindings import Action, KeyEvent, Keybindings

logger = logging.getLogger("zap.session")

SECTION_SIGIL = "/section "

VIEW_LIST = "list"
VIEW_CALENDAR = "calendar"


class Mode(Enum):
    NORMAL = "MODE_NORMAL"
    INSERT = "MODE_INSERT"
    INSERT_SUBTASK = "MODE_INSERT_SUBTASK"
    EDIT = "MODE_EDIT"
    COMMAND = "MODE_COMMAND"
    INSERT_DATED = "MODE_INSERT_DATED"


@dataclass(frozen=True)
class Notification:
    text: str
    error: bool = False


@dataclass(frozen=True)
class DisplaySettings:
    show_start_date: bool = False


@dataclass(frozen=True)
class SessionContext:
    mode: Mode = Mode.NORMAL
    # Frozen when the mode is entered; never re-resolved while it is active.
    anchor: Optional[TaskPath] = None
    anchor_date: Optional[date] = None
    pending_key: Optional[str] = None
    selected: int = 0
    entry_text: str = ""
    display: DisplaySettings = DisplaySettings()
    view: str = VIEW_LIST
    calendar_day: Optional[date] = None
    notification: Optional[Notification] = None

    def evolve(self, **changes) -> "SessionContext":
        return replace(self, **changes)


def format_entry(task: Task) -> str:
    """Task text with its metadata spelled back as directives, for the edit line."""
    parts = [task.text]
    if task.priority is not Priority.NONE:
        parts.append(f"[p:{task.priority.label.lower()}]")
    if task.due_date:
        due = task.due_date
        parts.append(f"[d:{due.month}/{due.day}/{due.year}]")
    return " ".join(parts)


class ModalSession:
    def __init__(self, store: TaskStore, keybindings: Keybindings, today: Callable[[], date] = date.today):
        self.store = store
        self.keybindings = keybindings
        self._today = today

    # -------------------- outward views --------------------
    def rows(self) -> List[FlatRow]:
        return self.store.flatten()

    def selected_row(self, ctx: SessionContext) -> Optional[FlatRow]:
        rows = self.rows()
        if not rows:
            return None
        return rows[_clamp(ctx.selected, len(rows))]

    def mode_label(self, ctx: SessionContext) -> str:
        return translate(ctx.mode.value)

    def status_text(self, ctx: SessionContext) -> str:
        parts = [self.mode_label(ctx)]
        if ctx.pending_key:
            parts.append(translate("PENDING_KEY", key=ctx.pending_key))
        parts.append(self.store.cluster_name)
        if ctx.view == VIEW_CALENDAR:
            parts.append(f"[{VIEW_CALENDAR}]")
        return "  ".join(parts)

    def calendar_day(self, ctx: SessionContext) -> date:
        return ctx.calendar_day or self._today()

    # -------------------- key events --------------------
    def handle_key(self, ctx: SessionContext, event: KeyEvent) -> SessionContext:
        if ctx.mode is not Mode.NORMAL:
            if self.keybindings.action_for_event(event) is Action.CANCEL:
                return self.cancel(ctx)
            return ctx
        if ctx.view == VIEW_CALENDAR:
            return self._handle_calendar_key(ctx, event)

        if ctx.pending_key is not None:
            action = self.keybindings.sequence_action(ctx.pending_key, event.key)
            ctx = ctx.evolve(pending_key=None)
            if action is not None:
                return self.dispatch(ctx, action)

        if self.keybindings.is_sequence_start(event.key):
            return ctx.evolve(pending_key=event.key)

        action = self.keybindings.action_for_event(event)
        if action is not None:
            return self.dispatch(ctx, action)
        return ctx

    def _handle_calendar_key(self, ctx: SessionContext, event: KeyEvent) -> SessionContext:
        day = self.calendar_day(ctx)
        key = event.key
        if event.ctrl and not event.shift and not event.alt:
            if key == "Left":
                return ctx.evolve(calendar_day=_shift_month(day, -1))
            if key == "Right":
                return ctx.evolve(calendar_day=_shift_month(day, 1))
            return ctx
        moves = {"h": -1, "Left": -1, "l": 1, "Right": 1, "k": -7, "Up": -7, "j": 7, "Down": 7}
        if key in moves:
            target = day + timedelta(days=moves[key])
            # Selection stays inside the displayed month.
            if (target.year, target.month) != (day.year, day.month):
                return ctx.evolve(calendar_day=day)
            return ctx.evolve(calendar_day=target)
        if key == "i":
            return self.begin_dated_insert(ctx, day)
        if self.keybindings.action_for_event(event) is Action.COMMAND_MODE:
            return self.dispatch(ctx, Action.COMMAND_MODE)
        return ctx

    # -------------------- actions --------------------
    def dispatch(self, ctx: SessionContext, action: Action) -> SessionContext:
        rows = self.rows()
        count = len(rows)
        row = rows[_clamp(ctx.selected, count)] if rows else None

        if action is Action.MOVE_DOWN:
            return ctx.evolve(selected=_clamp(ctx.selected + 1, count))
        if action is Action.MOVE_UP:
            return ctx.evolve(selected=_clamp(ctx.selected - 1, count))
        if action is Action.JUMP_TO_FIRST:
            return ctx.evolve(selected=0)
        if action is Action.JUMP_TO_LAST:
            return ctx.evolve(selected=max(0, count - 1))
        if action is Action.INSERT:
            return ctx.evolve(mode=Mode.INSERT, entry_text="", anchor=None)
        if action is Action.COMMAND_MODE:
            return ctx.evolve(mode=Mode.COMMAND, entry_text=":")
        if action is Action.CANCEL:
            return ctx.evolve(pending_key=None)

        if row is None:
            return ctx

        if action is Action.TOGGLE_COMPLETE:
            self.store.toggle_at(row.path)
            return self.reselect(ctx, row.task.id)
        if action is Action.DELETE:
            self.store.remove_at(row.path)
            return ctx.evolve(selected=_clamp(ctx.selected, len(self.rows())))
        if action is Action.MOVE_TASK_DOWN:
            if self.store.move_down(row.path):
                return self.reselect(ctx, row.task.id)
            return ctx
        if action is Action.MOVE_TASK_UP:
            if self.store.move_up(row.path):
                return self.reselect(ctx, row.task.id)
            return ctx
        if action is Action.TOGGLE_FOLD:
            self.store.toggle_fold(row.task.id)
            return self.reselect(ctx, row.task.id)
        if action is Action.INSERT_SUBTASK:
            return ctx.evolve(mode=Mode.INSERT_SUBTASK, anchor=row.path, entry_text="")
        if action is Action.EDIT:
            return ctx.evolve(mode=Mode.EDIT, anchor=row.path, entry_text=format_entry(row.task))
        return ctx

    def reselect(self, ctx: SessionContext, task_id: Optional[str]) -> SessionContext:
        rows, index = self.store.locate(task_id)
        if index is None:
            index = _clamp(ctx.selected, len(rows))
        return ctx.evolve(selected=index)

    # -------------------- mode transitions --------------------
    def cancel(self, ctx: SessionContext) -> SessionContext:
        return ctx.evolve(mode=Mode.NORMAL, anchor=None, anchor_date=None, entry_text="", pending_key=None)

    def begin_dated_insert(self, ctx: SessionContext, day: date) -> SessionContext:
        return ctx.evolve(mode=Mode.INSERT_DATED, anchor_date=day, calendar_day=day, entry_text="", pending_key=None)

    def commit(self, ctx: SessionContext, line: str) -> SessionContext:
        """Apply the entered line for the active mode and return to Normal."""
        mode, anchor, anchor_date = ctx.mode, ctx.anchor, ctx.anchor_date
        base = self.cancel(ctx).evolve(notification=None)
        if not line.strip():
            return base
        if mode is Mode.INSERT:
            return self._commit_insert(base, line, parent=None)
        if mode is Mode.INSERT_SUBTASK and anchor is not None:
            return self._commit_insert(base, line, parent=anchor)
        if mode is Mode.EDIT and anchor is not None:
            return self._commit_edit(base, line, anchor)
        if mode is Mode.INSERT_DATED and anchor_date is not None:
            return self._commit_dated(base, line, anchor_date)
        if mode is Mode.COMMAND:
            from interface.commands import execute_command

            return execute_command(self, base, line)
        return base

    def _build_task(self, line: str, allow_section: bool) -> Optional[Task]:
        stripped = line.strip()
        if allow_section and stripped.startswith(SECTION_SIGIL):
            name = stripped[len(SECTION_SIGIL):].strip()
            return Task.new_section(name) if name else None
        entry = parse_entry(line, self._today())
        if not entry.text.strip():
            return None
        return Task.new(entry.text, entry.due_date, entry.priority)

    def _commit_insert(self, ctx: SessionContext, line: str, parent: Optional[TaskPath]) -> SessionContext:
        # Sections exist only at the top level.
        task = self._build_task(line, allow_section=parent is None)
        if task is None:
            return ctx
        if parent is None:
            self.store.add(task)
        elif not self.store.add_subtask(parent, task):
            logger.debug("Subtask anchor %s no longer resolves; entry dropped", parent)
            return ctx
        return self.reselect(ctx, task.id)

    def _commit_edit(self, ctx: SessionContext, line: str, path: TaskPath) -> SessionContext:
        entry = parse_entry(line, self._today())
        if not entry.text.strip():
            return ctx
        self.store.update_at(path, entry.text, entry.due_date, entry.priority)
        return ctx

    def _commit_dated(self, ctx: SessionContext, line: str, day: date) -> SessionContext:
        text, priority = parse_priority(line)
        # The anchored day wins over any date directive typed in the line.
        text, _ = parse_date(text, self._today())
        if not text.strip():
            return ctx
        task = Task.new(text, day, priority)
        self.store.add(task)
        return self.reselect(ctx, task.id)


def _clamp(index: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


def _shift_month(day: date, delta: int) -> date:
    month_index = day.year * 12 + (day.month - 1) + delta
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))
