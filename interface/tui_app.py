#!/usr/bin/env python3
"""TUI application - TaskTrackerTUI class and cmd_tui command."""

import os
import time
from datetime import date
from typing import Optional

from prompt_toolkit.application import Application
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import ConditionalContainer, HSplit, Layout, Window
from prompt_toolkit.layout.controls import BufferControl, FormattedTextControl

from application.task_store import TaskStore
from config import get_data_dir, get_default_cluster, get_keybindings_path, get_notification_ttl
from infrastructure.file_blob_store import FileBlobStore
from interface.commands import complete_command
from interface.i18n import translate
from interface.keybindings import KeyEvent, load_keybindings
from interface.session import VIEW_CALENDAR, Mode, ModalSession, SessionContext
from interface.tui_keys import translate_key
from interface.tui_render import render_agenda, render_status, render_task_list
from interface.tui_themes import build_style

PLACEHOLDERS = {
    Mode.INSERT: "PLACEHOLDER_TASK",
    Mode.INSERT_SUBTASK: "PLACEHOLDER_SUBTASK",
}


class TaskTrackerTUI:
    def __init__(self, session: ModalSession, notification_ttl: float = 3.0):
        self.session = session
        self.ctx = SessionContext()
        self.notification_ttl = notification_ttl
        self.notification_expires = 0.0

        self.edit_buffer = Buffer(multiline=False)
        normal_mode = Condition(lambda: self.ctx.mode is Mode.NORMAL)
        entry_active = ~normal_mode
        command_active = Condition(lambda: self.ctx.mode is Mode.COMMAND)

        kb = KeyBindings()
        kb.timeout = 0

        @kb.add("c-c")
        @kb.add("c-q")
        def _(event):
            event.app.exit()

        @kb.add("escape", eager=True)
        def _(event):
            self.apply_key(KeyEvent("Escape"))

        @kb.add("enter", filter=entry_active)
        def _(event):
            self.commit_entry()

        @kb.add("tab", filter=command_active)
        def _(event):
            completion = complete_command(self.edit_buffer.text, self.session.store.list_clusters())
            if completion:
                self.edit_buffer.text = completion
                self.edit_buffer.cursor_position = len(completion)

        @kb.add(Keys.Any, filter=normal_mode)
        @kb.add("enter", filter=normal_mode)
        @kb.add("c-j", filter=normal_mode)
        @kb.add("up", filter=normal_mode)
        @kb.add("down", filter=normal_mode)
        @kb.add("left", filter=normal_mode)
        @kb.add("right", filter=normal_mode)
        @kb.add("c-left", filter=normal_mode)
        @kb.add("c-right", filter=normal_mode)
        def _(event):
            press = event.key_sequence[0]
            key_event = translate_key(press.key, press.data)
            if key_event is not None:
                self.apply_key(key_event)

        self.status_bar = Window(content=FormattedTextControl(self.get_status_text), height=1, always_hide_cursor=True)
        self.main_window = Window(content=FormattedTextControl(self.get_body_text, focusable=True), always_hide_cursor=True, wrap_lines=False)
        self.prompt_window = Window(content=FormattedTextControl(self.get_prompt_text), height=1, dont_extend_width=True)
        self.edit_field = Window(content=BufferControl(buffer=self.edit_buffer), height=1)
        entry_row = ConditionalContainer(HSplit([self.prompt_window, self.edit_field]), filter=entry_active)

        root = HSplit([self.main_window, entry_row, self.status_bar])
        self.app = Application(
            layout=Layout(root, focused_element=self.main_window),
            key_bindings=kb,
            style=build_style(),
            full_screen=True,
            refresh_interval=0.5,
        )
        try:
            self.app.ttimeoutlen = max(0.0, float(os.getenv("ZAP_TUI_TTIMEOUTLEN", "0.05")))
        except ValueError:
            self.app.ttimeoutlen = 0.05

    # -------------------- state transitions --------------------
    def _set_context(self, ctx: SessionContext) -> None:
        previous_mode = self.ctx.mode
        previous_notice = self.ctx.notification
        self.ctx = ctx
        if ctx.notification is not None and ctx.notification is not previous_notice:
            self.notification_expires = time.time() + self.notification_ttl
        if ctx.mode is not previous_mode:
            if ctx.mode is Mode.NORMAL:
                self.edit_buffer.text = ""
                self.app.layout.focus(self.main_window)
            else:
                self.edit_buffer.text = ctx.entry_text
                self.edit_buffer.cursor_position = len(ctx.entry_text)
                self.app.layout.focus(self.edit_field)
        self.force_render()

    def apply_key(self, event: KeyEvent) -> None:
        self._set_context(self.session.handle_key(self.ctx, event))

    def commit_entry(self) -> None:
        self._set_context(self.session.commit(self.ctx, self.edit_buffer.text))

    def force_render(self) -> None:
        app = getattr(self, "app", None)
        if app:
            app.invalidate()

    # -------------------- rendering --------------------
    def _expire_notification(self) -> None:
        # Display only: the timer never touches the tree.
        if self.ctx.notification is not None and time.time() >= self.notification_expires:
            self.ctx = self.ctx.evolve(notification=None)

    def get_status_text(self) -> FormattedText:
        self._expire_notification()
        label = self.session.mode_label(self.ctx)
        detail = self.session.status_text(self.ctx)[len(label):].strip()
        return render_status(self.ctx.mode, label, detail, self.ctx.notification)

    def get_body_text(self) -> FormattedText:
        today = date.today()
        if self.ctx.view == VIEW_CALENDAR:
            day = self.session.calendar_day(self.ctx)
            return render_agenda(day, self.session.store.due_on(day), today)
        return render_task_list(self.session.rows(), self.ctx.selected, self.ctx.display, today)

    def get_prompt_text(self) -> FormattedText:
        mode = self.ctx.mode
        if mode is Mode.INSERT_DATED and self.ctx.anchor_date:
            hint = translate("PLACEHOLDER_DATED", day=self.ctx.anchor_date.strftime("%b %d"))
        elif mode in PLACEHOLDERS and not self.edit_buffer.text:
            hint = translate(PLACEHOLDERS[mode])
        else:
            hint = ""
        return FormattedText([("class:text.dim", f"{hint} " if hint else "")])

    def run(self):
        self.app.run()


def build_session(cluster: Optional[str] = None, data_dir: Optional[str] = None) -> ModalSession:
    storage = FileBlobStore(data_dir or get_data_dir())
    store = TaskStore.load(storage, cluster or get_default_cluster())
    return ModalSession(store, load_keybindings(get_keybindings_path()))


def cmd_tui(args) -> int:
    tui = TaskTrackerTUI(
        build_session(getattr(args, "cluster", None), getattr(args, "data_dir", None)),
        notification_ttl=get_notification_ttl(),
    )
    tui.run()
    return 0
