import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from .priority import Priority

# Chain of sibling indices from the cluster root. Valid only until the next
# structural mutation.
TaskPath = Tuple[int, ...]


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Task:
    id: str
    text: str
    completed: bool = False
    due_date: Optional[date] = None
    created_at: int = 0
    priority: Priority = Priority.NONE
    is_section: bool = False
    subtasks: List["Task"] = field(default_factory=list)

    @classmethod
    def new(cls, text: str, due_date: Optional[date] = None, priority: Priority = Priority.NONE) -> "Task":
        return cls(
            id=new_task_id(),
            text=text,
            due_date=due_date,
            created_at=int(time.time()),
            priority=priority,
        )

    @classmethod
    def new_section(cls, text: str) -> "Task":
        return cls(id=new_task_id(), text=text, created_at=int(time.time()), is_section=True)

    def toggle(self) -> None:
        self.completed = not self.completed

    def has_subtasks(self) -> bool:
        return bool(self.subtasks)

    def snapshot(self) -> "Task":
        """Copy of this node without children, for render rows."""
        return Task(
            id=self.id,
            text=self.text,
            completed=self.completed,
            due_date=self.due_date,
            created_at=self.created_at,
            priority=self.priority,
            is_section=self.is_section,
        )

    def sort_key(self) -> tuple:
        return (
            self.is_section,
            self.completed,
            self.priority.rank,
            self.due_date is None,
            self.due_date or date.min,
            self.text.lower(),
        )


@dataclass(frozen=True)
class FlatRow:
    """One renderable line of the flattened tree."""
    task: Task
    depth: int
    path: TaskPath
    has_children: bool
    folded: bool
