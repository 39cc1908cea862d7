from typing import Dict

MESSAGES: Dict[str, str] = {
    "MODE_NORMAL": "NORMAL",
    "MODE_INSERT": "INSERT",
    "MODE_INSERT_SUBTASK": "INSERT (subtask)",
    "MODE_EDIT": "EDIT",
    "MODE_COMMAND": "COMMAND",
    "MODE_INSERT_DATED": "INSERT (calendar)",
    "PENDING_KEY": "{key}-",
    "CLUSTERS_NONE": "No clusters found",
    "CLUSTERS_LIST": "Clusters: {names}",
    "CLUSTER_MISSING": "Cluster '{name}' does not exist. Use :n to create.",
    "CLUSTER_CREATED": "Created cluster '{name}'",
    "CLUSTER_NOT_CREATED": "Could not create cluster '{name}'",
    "TASKS_SORTED": "Tasks sorted",
    "PLACEHOLDER_TASK": "New task...",
    "PLACEHOLDER_SUBTASK": "New subtask...",
    "PLACEHOLDER_DATED": "Task for {day}...",
    "EMPTY_CLUSTER": "No tasks yet. Press i to add one.",
    "AGENDA_EMPTY": "Nothing due on {day}",
}


def translate(key: str, /, **kwargs) -> str:
    """Look up a message template and format it; unknown keys render as themselves."""
    template = MESSAGES.get(key, key)
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return template
