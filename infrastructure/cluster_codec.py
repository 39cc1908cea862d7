from datetime import date, datetime
from typing import Any, Dict, FrozenSet, List, Optional

import yaml

from core import Priority, Task, new_task_id


class ClusterCodec:
    """YAML document <-> task tree.

    Only the persisted fields of each task are written; fold state and the
    cluster name belong to the session and never reach the document.
    """

    ROOT_KEY = "todos"

    @staticmethod
    def _coerce_date(value: Any) -> Optional[date]:
        """Accept ISO strings as well as dates already resolved by the YAML loader."""
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        return date.fromisoformat(str(value).strip())

    @staticmethod
    def _coerce_timestamp(value: Any) -> int:
        if isinstance(value, datetime):
            return int(value.timestamp())
        try:
            return int(value or 0)
        except (TypeError, ValueError, OverflowError):
            return 0

    @classmethod
    def task_from_dict(cls, raw: Dict[str, Any], _ancestors: FrozenSet[int] = frozenset()) -> Task:
        if not isinstance(raw, dict):
            raise ValueError(f"task entry must be a mapping, got {type(raw).__name__}")
        # YAML anchors can make an entry its own descendant
        if id(raw) in _ancestors:
            raise ValueError("task entry contains itself through its subtasks")
        lineage = _ancestors | {id(raw)}
        children = raw.get("subtasks") or []
        if not isinstance(children, list):
            raise ValueError("subtasks must be a list")
        return Task(
            id=str(raw.get("id") or new_task_id()),
            text=str(raw.get("text", "") or ""),
            completed=bool(raw.get("completed", False)),
            due_date=cls._coerce_date(raw.get("due_date")),
            created_at=cls._coerce_timestamp(raw.get("created_at")),
            priority=Priority.from_string(str(raw.get("priority") or "")),
            is_section=bool(raw.get("is_section", False)),
            subtasks=[cls.task_from_dict(child, lineage) for child in children],
        )

    @classmethod
    def task_to_dict(cls, task: Task) -> Dict[str, Any]:
        return {
            "id": task.id,
            "text": task.text,
            "completed": task.completed,
            "due_date": task.due_date.isoformat() if task.due_date else None,
            "created_at": task.created_at,
            "priority": task.priority.label,
            "is_section": task.is_section,
            "subtasks": [cls.task_to_dict(child) for child in task.subtasks],
        }

    @classmethod
    def loads(cls, data: bytes) -> List[Task]:
        """Parse a cluster document. Raises on malformed input; callers decide how to degrade."""
        document = yaml.safe_load(data.decode("utf-8"))
        if document is None:
            return []
        if not isinstance(document, dict):
            raise ValueError("cluster document must be a mapping")
        raw_tasks = document.get(cls.ROOT_KEY) or []
        if not isinstance(raw_tasks, list):
            raise ValueError(f"'{cls.ROOT_KEY}' must be a list")
        return [cls.task_from_dict(raw) for raw in raw_tasks]

    @classmethod
    def dumps(cls, tasks: List[Task]) -> bytes:
        document = {cls.ROOT_KEY: [cls.task_to_dict(task) for task in tasks]}
        return yaml.safe_dump(document, allow_unicode=True, sort_keys=False).encode("utf-8")
