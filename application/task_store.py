"""Cluster task tree: path-addressed mutation, folding, flattening and sorting.

Paths are tuples of sibling indices and are only valid until the next
structural mutation. Callers resolve, act and discard; anything that must
survive a mutation is tracked by task id (see ``locate``).
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterator, List, Optional, Set, Tuple

import yaml

from application.ports import BlobStore
from core import FlatRow, Priority, Task, TaskPath
from infrastructure.cluster_codec import ClusterCodec

logger = logging.getLogger("zap.store")


class TaskStore:
    def __init__(self, storage: BlobStore, cluster_name: str, todos: Optional[List[Task]] = None):
        self.storage = storage
        self.cluster_name = cluster_name
        self.todos: List[Task] = list(todos or [])
        self.folded_ids: Set[str] = set()

    # -------------------- persistence --------------------
    @classmethod
    def load(cls, storage: BlobStore, cluster_name: str) -> "TaskStore":
        """Read a whole cluster. Missing or unreadable clusters load empty."""
        todos: List[Task] = []
        try:
            data = storage.read(cluster_name)
            if data is not None:
                todos = ClusterCodec.loads(data)
        except (OSError, UnicodeDecodeError, yaml.YAMLError, ValueError, TypeError, OverflowError, RecursionError) as exc:
            logger.warning("Cluster %r unreadable, starting empty: %s", cluster_name, exc)
            todos = []
        return cls(storage, cluster_name, todos)

    def save(self) -> bool:
        """Rewrite the whole cluster. Failures are logged and reported as False."""
        try:
            self.storage.write(self.cluster_name, ClusterCodec.dumps(self.todos))
        except (OSError, ValueError) as exc:
            logger.warning("Saving cluster %r failed: %s", self.cluster_name, exc)
            return False
        return True

    def list_clusters(self) -> List[str]:
        try:
            return sorted(self.storage.list())
        except OSError as exc:
            logger.warning("Listing clusters failed: %s", exc)
            return []

    def cluster_exists(self, name: str) -> bool:
        return name in self.list_clusters()

    # -------------------- folding / flatten --------------------
    def toggle_fold(self, task_id: str) -> None:
        if task_id in self.folded_ids:
            self.folded_ids.remove(task_id)
        else:
            self.folded_ids.add(task_id)

    def is_folded(self, task_id: str) -> bool:
        return task_id in self.folded_ids

    def flatten(self) -> List[FlatRow]:
        rows: List[FlatRow] = []
        for idx, task in enumerate(self.todos):
            self._flatten_into(task, 0, (idx,), rows)
        return rows

    def _flatten_into(self, task: Task, depth: int, path: TaskPath, rows: List[FlatRow]) -> None:
        folded = self.is_folded(task.id)
        rows.append(
            FlatRow(task=task.snapshot(), depth=depth, path=path, has_children=task.has_subtasks(), folded=folded)
        )
        if folded:
            return
        for idx, child in enumerate(task.subtasks):
            self._flatten_into(child, depth + 1, path + (idx,), rows)

    def locate(self, task_id: Optional[str]) -> Tuple[List[FlatRow], Optional[int]]:
        """Fresh flattened view plus the row index of ``task_id`` (None when hidden or gone)."""
        rows = self.flatten()
        if task_id is None:
            return rows, None
        for idx, row in enumerate(rows):
            if row.task.id == task_id:
                return rows, idx
        return rows, None

    def __len__(self) -> int:
        return len(self.flatten())

    # -------------------- path resolution --------------------
    def resolve(self, path: TaskPath) -> Optional[Task]:
        if not path:
            return None
        siblings = self.todos
        node: Optional[Task] = None
        for idx in path:
            if idx < 0 or idx >= len(siblings):
                return None
            node = siblings[idx]
            siblings = node.subtasks
        return node

    def _parent_list(self, path: TaskPath) -> Optional[Tuple[List[Task], int]]:
        if not path:
            return None
        if len(path) == 1:
            siblings = self.todos
        else:
            parent = self.resolve(path[:-1])
            if parent is None:
                return None
            siblings = parent.subtasks
        idx = path[-1]
        if idx < 0 or idx >= len(siblings):
            return None
        return siblings, idx

    def walk(self) -> Iterator[Tuple[TaskPath, Task]]:
        """Every task with its path in pre-order, folded subtrees included."""
        # frame: (siblings, next index to visit, parent path)
        frames: List[Tuple[List[Task], int, TaskPath]] = [(self.todos, 0, ())]
        while frames:
            siblings, idx, parent = frames.pop()
            if idx >= len(siblings):
                continue
            path = parent + (idx,)
            task = siblings[idx]
            frames.append((siblings, idx + 1, parent))
            yield path, task
            frames.append((task.subtasks, 0, path))

    def find_path(self, task_id: str) -> Optional[TaskPath]:
        for path, task in self.walk():
            if task.id == task_id:
                return path
        return None

    def due_on(self, day: date) -> List[Task]:
        return [task for _, task in self.walk() if task.due_date == day]

    # -------------------- mutation --------------------
    def add(self, task: Task) -> None:
        self.todos.append(task)
        self.save()

    def add_subtask(self, path: TaskPath, task: Task) -> bool:
        parent = self.resolve(path)
        if parent is None:
            return False
        parent.subtasks.append(task)
        self.save()
        return True

    def update_at(self, path: TaskPath, text: str, due_date: Optional[date], priority: Priority) -> bool:
        task = self.resolve(path)
        if task is None:
            return False
        task.text = text
        task.due_date = due_date
        task.priority = priority
        self.save()
        return True

    def remove_at(self, path: TaskPath) -> Optional[Task]:
        located = self._parent_list(path)
        if located is None:
            return None
        siblings, idx = located
        removed = siblings.pop(idx)
        self.save()
        return removed

    def toggle_at(self, path: TaskPath) -> Optional[int]:
        """Flip completion. A task that becomes completed moves to the end of its siblings.

        Returns the task's new sibling index when it moved, otherwise None.
        """
        located = self._parent_list(path)
        if located is None:
            return None
        siblings, idx = located
        task = siblings[idx]
        task.toggle()
        new_index: Optional[int] = None
        if task.completed:
            siblings.append(siblings.pop(idx))
            new_index = len(siblings) - 1
        self.save()
        return new_index

    def move_up(self, path: TaskPath) -> bool:
        located = self._parent_list(path)
        if located is None:
            return False
        siblings, idx = located
        if idx == 0:
            return False
        siblings[idx - 1], siblings[idx] = siblings[idx], siblings[idx - 1]
        self.save()
        return True

    def move_down(self, path: TaskPath) -> bool:
        located = self._parent_list(path)
        if located is None:
            return False
        siblings, idx = located
        if idx + 1 >= len(siblings):
            return False
        siblings[idx], siblings[idx + 1] = siblings[idx + 1], siblings[idx]
        self.save()
        return True

    def sort(self) -> None:
        """Sections last, then completed last, priority, due date (undated last), text."""
        self._sort_level(self.todos)
        self.save()

    @classmethod
    def _sort_level(cls, siblings: List[Task]) -> None:
        for task in siblings:
            if task.subtasks:
                cls._sort_level(task.subtasks)
        siblings.sort(key=Task.sort_key)
