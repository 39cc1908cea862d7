"""Key -> Action resolution.

Bindings are declared by name (``move_down``, ``delete`` ...) and compiled once
into two read-only tables: direct presses keyed by (key, shift, ctrl, alt) and
two-key sequences keyed by (prefix, key). Reconfiguring builds a new resolver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

logger = logging.getLogger("zap.keybindings")


class Action(Enum):
    # Navigation
    MOVE_DOWN = "move_down"
    MOVE_UP = "move_up"
    JUMP_TO_FIRST = "jump_to_first"
    JUMP_TO_LAST = "jump_to_last"
    # Task operations
    TOGGLE_COMPLETE = "toggle_complete"
    DELETE = "delete"
    MOVE_TASK_DOWN = "move_task_down"
    MOVE_TASK_UP = "move_task_up"
    TOGGLE_FOLD = "toggle_fold"
    # Mode switches
    INSERT = "insert"
    INSERT_SUBTASK = "insert_subtask"
    EDIT = "edit"
    COMMAND_MODE = "command_mode"
    CANCEL = "cancel"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    shift: bool = False
    ctrl: bool = False
    alt: bool = False


@dataclass(frozen=True)
class KeyBinding:
    key: str
    action: Action
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    # First key of a two-key sequence ("g" for gg, "z" for za)
    pending: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "KeyBinding":
        if not isinstance(raw, Mapping):
            raise ValueError(f"binding must be a mapping: {raw!r}")
        try:
            action = Action(str(raw["action"]))
        except (KeyError, ValueError) as exc:
            raise ValueError(f"binding needs a known action: {raw!r}") from exc
        key = str(raw.get("key", "") or "")
        if not key:
            raise ValueError(f"binding needs a key: {raw!r}")
        pending = raw.get("pending")
        return cls(
            key=key,
            action=action,
            shift=bool(raw.get("shift", False)),
            ctrl=bool(raw.get("ctrl", False)),
            alt=bool(raw.get("alt", False)),
            pending=str(pending) if pending else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "shift": self.shift,
            "ctrl": self.ctrl,
            "alt": self.alt,
            "action": self.action.value,
            "pending": self.pending,
        }


@dataclass(frozen=True)
class KeybindingsConfig:
    bindings: Mapping[str, KeyBinding] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "KeybindingsConfig":
        return cls(bindings=dict(DEFAULT_BINDINGS))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "KeybindingsConfig":
        entries = raw.get("bindings") if isinstance(raw, Mapping) else None
        if not isinstance(entries, Mapping):
            raise ValueError("keybindings document needs a 'bindings' mapping")
        return cls(bindings={str(name): KeyBinding.from_dict(entry) for name, entry in entries.items()})

    def to_dict(self) -> Dict[str, Any]:
        return {"bindings": {name: binding.to_dict() for name, binding in sorted(self.bindings.items())}}


DEFAULT_BINDINGS: Dict[str, KeyBinding] = {
    "move_down": KeyBinding("j", Action.MOVE_DOWN),
    "move_up": KeyBinding("k", Action.MOVE_UP),
    "jump_to_first": KeyBinding("g", Action.JUMP_TO_FIRST, pending="g"),
    "jump_to_last": KeyBinding("G", Action.JUMP_TO_LAST, shift=True),
    "toggle_complete": KeyBinding("Return", Action.TOGGLE_COMPLETE),
    "delete": KeyBinding("d", Action.DELETE, pending="d"),
    "move_task_down": KeyBinding("J", Action.MOVE_TASK_DOWN, shift=True),
    "move_task_up": KeyBinding("K", Action.MOVE_TASK_UP, shift=True),
    "toggle_fold": KeyBinding("a", Action.TOGGLE_FOLD, pending="z"),
    "insert": KeyBinding("i", Action.INSERT),
    "insert_subtask": KeyBinding("Return", Action.INSERT_SUBTASK, shift=True),
    "edit": KeyBinding("e", Action.EDIT),
    "command_mode": KeyBinding("colon", Action.COMMAND_MODE, shift=True),
    "cancel": KeyBinding("Escape", Action.CANCEL),
}


class Keybindings:
    def __init__(
        self,
        single_key: Mapping[Tuple[str, bool, bool, bool], Action],
        sequences: Mapping[Tuple[str, str], Action],
    ):
        self._single_key = MappingProxyType(dict(single_key))
        self._sequences = MappingProxyType(dict(sequences))
        self._prefixes = frozenset(prefix for prefix, _ in self._sequences)

    @classmethod
    def from_config(cls, config: KeybindingsConfig) -> "Keybindings":
        single_key: Dict[Tuple[str, bool, bool, bool], Action] = {}
        sequences: Dict[Tuple[str, str], Action] = {}
        for binding in config.bindings.values():
            if binding.pending:
                sequences[(binding.pending, binding.key)] = binding.action
            else:
                single_key[(binding.key, binding.shift, binding.ctrl, binding.alt)] = binding.action
        return cls(single_key, sequences)

    @classmethod
    def default(cls) -> "Keybindings":
        return cls.from_config(KeybindingsConfig.default())

    def reconfigure(self, config: KeybindingsConfig) -> "Keybindings":
        return type(self).from_config(config)

    def action_for(self, key: str, shift: bool = False, ctrl: bool = False, alt: bool = False) -> Optional[Action]:
        return self._single_key.get((key, shift, ctrl, alt))

    def action_for_event(self, event: KeyEvent) -> Optional[Action]:
        return self.action_for(event.key, event.shift, event.ctrl, event.alt)

    def sequence_action(self, pending: str, key: str) -> Optional[Action]:
        return self._sequences.get((pending, key))

    def is_sequence_start(self, key: str) -> bool:
        return key in self._prefixes


def load_keybindings(path: Path) -> Keybindings:
    """Load bindings from YAML; write the defaults when the file is missing."""
    if not path.exists():
        config = KeybindingsConfig.default()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(yaml.safe_dump(config.to_dict(), sort_keys=False), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write default keybindings to %s: %s", path, exc)
        return Keybindings.from_config(config)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return Keybindings.from_config(KeybindingsConfig.from_dict(raw))
    except (OSError, yaml.YAMLError, ValueError, TypeError) as exc:
        logger.warning("Invalid keybindings file %s, using defaults: %s", path, exc)
        return Keybindings.default()
