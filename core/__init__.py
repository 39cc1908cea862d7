from .priority import Priority
from .task import FlatRow, Task, TaskPath, new_task_id
from .directives import (
    ParsedEntry,
    parse_date,
    parse_entry,
    parse_priority,
    resolve_date,
    next_weekday,
)

__all__ = [
    "Priority",
    "Task",
    "TaskPath",
    "FlatRow",
    "new_task_id",
    # Directives
    "ParsedEntry",
    "parse_priority",
    "parse_date",
    "parse_entry",
    "resolve_date",
    "next_weekday",
]
