"""Formatted-text builders for the task list, agenda and status line."""

from datetime import date, datetime
from typing import List, Optional, Tuple

from prompt_toolkit.formatted_text import FormattedText

from core import FlatRow, Priority, Task
from interface.i18n import translate
from interface.session import DisplaySettings, Mode, Notification

Fragment = Tuple[str, str]

INDENT = "  "
CHEVRON_OPEN = "▾ "
CHEVRON_FOLDED = "▸ "
CHECK_DONE = "[x] "
CHECK_OPEN = "[ ] "
PRIORITY_DOT = "● "

PRIORITY_STYLE = {
    Priority.MAX: "class:priority.max",
    Priority.HIGH: "class:priority.high",
    Priority.MEDIUM: "class:priority.medium",
    Priority.LOW: "class:priority.low",
    Priority.NONE: "class:priority.none",
}

MODE_STYLE = {
    Mode.NORMAL: "class:mode",
    Mode.COMMAND: "class:mode.command",
}


def format_day(day: date, today: date) -> str:
    """``Oct 19`` within the current year, ``Oct 19, 2027`` otherwise."""
    if day.year != today.year:
        return day.strftime("%b %d, %Y")
    return day.strftime("%b %d")


def row_fragments(row: FlatRow, selected: bool, display: DisplaySettings, today: date) -> List[Fragment]:
    task = row.task
    fragments: List[Fragment] = [("", INDENT * row.depth)]
    if row.has_children:
        fragments.append(("class:chevron", CHEVRON_FOLDED if row.folded else CHEVRON_OPEN))
    elif row.depth or task.is_section:
        fragments.append(("", INDENT))

    if task.is_section:
        fragments.append(("class:section", task.text.upper()))
    else:
        fragments.append(("class:text.dim", CHECK_DONE if task.completed else CHECK_OPEN))
        fragments.append((PRIORITY_STYLE[task.priority], PRIORITY_DOT))
        fragments.append(("class:text.done" if task.completed else "class:text", task.text))
        if display.show_start_date and task.created_at:
            started = datetime.fromtimestamp(task.created_at).date()
            fragments.append(("class:start", f"  + {format_day(started, today)}"))
        if task.due_date:
            overdue = task.due_date < today and not task.completed
            fragments.append(("class:due.overdue" if overdue else "class:due", f"  → {format_day(task.due_date, today)}"))

    if selected:
        fragments = [(f"{style} class:selected".strip(), text) for style, text in fragments]
    elif task.priority is Priority.MAX and not task.is_section:
        fragments = [(f"{style} class:row.max".strip(), text) for style, text in fragments]
    fragments.append(("", "\n"))
    return fragments


def render_task_list(rows: List[FlatRow], selected: int, display: DisplaySettings, today: date) -> FormattedText:
    if not rows:
        return FormattedText([("class:text.dim", translate("EMPTY_CLUSTER"))])
    fragments: List[Fragment] = []
    for idx, row in enumerate(rows):
        fragments.extend(row_fragments(row, idx == selected, display, today))
    return FormattedText(fragments)


def render_agenda(day: date, tasks: List[Task], today: date) -> FormattedText:
    fragments: List[Fragment] = [("class:header", day.strftime("%A, %B %d %Y")), ("", "\n\n")]
    if not tasks:
        fragments.append(("class:text.dim", translate("AGENDA_EMPTY", day=format_day(day, today))))
        return FormattedText(fragments)
    for task in tasks:
        fragments.append(("class:text.dim", CHECK_DONE if task.completed else CHECK_OPEN))
        fragments.append((PRIORITY_STYLE[task.priority], PRIORITY_DOT))
        fragments.append(("class:text.done" if task.completed else "class:text", task.text))
        fragments.append(("", "\n"))
    return FormattedText(fragments)


def render_status(mode: Mode, label: str, detail: str, notification: Optional[Notification]) -> FormattedText:
    fragments: List[Fragment] = [
        (MODE_STYLE.get(mode, "class:mode.insert"), f" {label} "),
        ("class:status", f" {detail}"),
    ]
    if notification is not None:
        style = "class:notice.error" if notification.error else "class:notice"
        fragments.append(("", "  "))
        fragments.append((style, notification.text))
    return FormattedText(fragments)
