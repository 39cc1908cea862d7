from __future__ import annotations

import os
import yaml
from pathlib import Path
from typing import Dict, Any

USER_CONFIG_PATH = Path.home() / ".zap_config.yaml"

DEFAULT_CLUSTER = "default"
DEFAULT_NOTIFICATION_TTL = 3.0
DEFAULT_LOG_LEVEL = "INFO"


def _load_config() -> Dict[str, Any]:
    if not USER_CONFIG_PATH.exists():
        return {}
    try:
        data = yaml.safe_load(USER_CONFIG_PATH.read_text()) or {}
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _save_config(data: Dict[str, Any]) -> None:
    if not data:
        if USER_CONFIG_PATH.exists():
            USER_CONFIG_PATH.unlink()
        return
    USER_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    USER_CONFIG_PATH.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")


def _xdg_dir(env_name: str, fallback: Path) -> Path:
    raw = os.environ.get(env_name, "").strip()
    return Path(raw).expanduser() if raw else fallback


def get_data_dir() -> Path:
    """Directory holding one file per cluster (ZAP_DATA_DIR > config > XDG default)."""
    env_dir = os.environ.get("ZAP_DATA_DIR", "").strip()
    if env_dir:
        return Path(env_dir).expanduser()
    configured = str(_load_config().get("data_dir", "") or "").strip()
    if configured:
        return Path(configured).expanduser()
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share") / "zap"


def set_data_dir(value: str) -> None:
    data = _load_config()
    value = (value or "").strip()
    if value:
        data["data_dir"] = value
    else:
        data.pop("data_dir", None)
    _save_config(data)


def get_config_dir() -> Path:
    env_dir = os.environ.get("ZAP_CONFIG_DIR", "").strip()
    if env_dir:
        return Path(env_dir).expanduser()
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config") / "zap"


def get_keybindings_path() -> Path:
    return get_config_dir() / "keybindings.yaml"


def get_default_cluster() -> str:
    return str(_load_config().get("default_cluster", "") or "").strip() or DEFAULT_CLUSTER


def set_default_cluster(value: str) -> None:
    data = _load_config()
    value = (value or "").strip()
    if value:
        data["default_cluster"] = value
    else:
        data.pop("default_cluster", None)
    _save_config(data)


def get_notification_ttl() -> float:
    raw = _load_config().get("notification_ttl", DEFAULT_NOTIFICATION_TTL)
    try:
        ttl = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_NOTIFICATION_TTL
    return ttl if ttl > 0 else DEFAULT_NOTIFICATION_TTL


def get_log_level() -> str:
    return str(_load_config().get("log_level", "") or "").strip().upper() or DEFAULT_LOG_LEVEL


def get_log_file() -> Path:
    configured = str(_load_config().get("log_file", "") or "").strip()
    if configured:
        return Path(configured).expanduser()
    return _xdg_dir("XDG_STATE_HOME", Path.home() / ".local" / "state") / "zap" / "zap.log"
