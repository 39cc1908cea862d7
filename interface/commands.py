"""Command-line (``:``) vocabulary for the modal session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from application.task_store import TaskStore
from interface.i18n import translate
from interface.session import VIEW_CALENDAR, VIEW_LIST, DisplaySettings, Notification, SessionContext

if TYPE_CHECKING:
    from interface.session import ModalSession

COMMANDS: List[str] = [":e ", ":e calendar", ":e list", ":n ", ":ls", ":sort", ":display_start"]
CALENDAR_NAMES = ("calendar", "cal")


def _cmd_display_start(session: "ModalSession", ctx: SessionContext) -> SessionContext:
    display = DisplaySettings(show_start_date=not ctx.display.show_start_date)
    return ctx.evolve(display=display)


def _cmd_list_clusters(session: "ModalSession", ctx: SessionContext) -> SessionContext:
    clusters = session.store.list_clusters()
    if not clusters:
        return ctx.evolve(notification=Notification(translate("CLUSTERS_NONE")))
    return ctx.evolve(notification=Notification(translate("CLUSTERS_LIST", names=", ".join(clusters))))


def _cmd_sort(session: "ModalSession", ctx: SessionContext) -> SessionContext:
    row = session.selected_row(ctx)
    session.store.sort()
    ctx = session.reselect(ctx, row.task.id if row else None)
    return ctx.evolve(notification=Notification(translate("TASKS_SORTED")))


def _open_cluster(session: "ModalSession", ctx: SessionContext, name: str) -> SessionContext:
    if name in CALENDAR_NAMES:
        return ctx.evolve(view=VIEW_CALENDAR, calendar_day=session.calendar_day(ctx))
    if name == VIEW_LIST:
        return ctx.evolve(view=VIEW_LIST)
    if not name:
        return ctx
    if not session.store.cluster_exists(name):
        return ctx.evolve(notification=Notification(translate("CLUSTER_MISSING", name=name), error=True))
    session.store = TaskStore.load(session.store.storage, name)
    return ctx.evolve(view=VIEW_LIST, selected=0)


def _create_cluster(session: "ModalSession", ctx: SessionContext, name: str) -> SessionContext:
    if not name:
        return ctx
    store = TaskStore.load(session.store.storage, name)
    if not store.save():
        return ctx.evolve(notification=Notification(translate("CLUSTER_NOT_CREATED", name=name), error=True))
    session.store = store
    return ctx.evolve(selected=0, notification=Notification(translate("CLUSTER_CREATED", name=name)))


EXACT_COMMANDS: Dict[str, Callable[["ModalSession", SessionContext], SessionContext]] = {
    ":display_start": _cmd_display_start,
    ":ls": _cmd_list_clusters,
    ":sort": _cmd_sort,
}

PREFIX_COMMANDS: Dict[str, Callable[["ModalSession", SessionContext, str], SessionContext]] = {
    ":e ": _open_cluster,
    ":n ": _create_cluster,
}


def execute_command(session: "ModalSession", ctx: SessionContext, line: str) -> SessionContext:
    """Run one command line. Unknown input leaves the context untouched."""
    cmd = line.strip()
    handler = EXACT_COMMANDS.get(cmd)
    if handler is not None:
        return handler(session, ctx)
    for prefix, prefixed in PREFIX_COMMANDS.items():
        if cmd.startswith(prefix):
            return prefixed(session, ctx, cmd[len(prefix):].strip())
    return ctx


def complete_command(text: str, clusters: List[str]) -> Optional[str]:
    """First command or cluster name extending ``text``; None when nothing longer matches."""
    for cmd in COMMANDS:
        if cmd.startswith(text) and cmd != text:
            return cmd
    for prefix in (":e ", ":n "):
        if text.startswith(prefix):
            partial = text[len(prefix):]
            for cluster in clusters:
                if cluster.startswith(partial) and cluster != partial:
                    return f"{prefix}{cluster}"
    return None
