from pathlib import Path

import pytest

import config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(config, "USER_CONFIG_PATH", tmp_path / "zap_config.yaml")
    for name in ("ZAP_DATA_DIR", "ZAP_CONFIG_DIR", "XDG_DATA_HOME", "XDG_CONFIG_HOME", "XDG_STATE_HOME"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_defaults():
    assert config.get_default_cluster() == "default"
    assert config.get_notification_ttl() == 3.0
    assert config.get_log_level() == "INFO"
    assert config.get_data_dir().parts[-3:] == (".local", "share", "zap")


def test_data_dir_precedence(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    assert config.get_data_dir() == tmp_path / "xdg" / "zap"

    config.set_data_dir(str(tmp_path / "configured"))
    assert config.get_data_dir() == tmp_path / "configured"

    monkeypatch.setenv("ZAP_DATA_DIR", str(tmp_path / "env"))
    assert config.get_data_dir() == tmp_path / "env"


def test_set_and_clear_default_cluster(tmp_path: Path):
    config.set_default_cluster("work")
    assert config.get_default_cluster() == "work"
    assert (tmp_path / "zap_config.yaml").exists()

    config.set_default_cluster("")
    assert config.get_default_cluster() == "default"
    assert not (tmp_path / "zap_config.yaml").exists()


def test_keybindings_path_follows_config_dir(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("ZAP_CONFIG_DIR", str(tmp_path / "cfg"))
    assert config.get_keybindings_path() == tmp_path / "cfg" / "keybindings.yaml"


def test_bad_values_fall_back(tmp_path: Path):
    (tmp_path / "zap_config.yaml").write_text("notification_ttl: soon\nlog_level: debug\n")
    assert config.get_notification_ttl() == 3.0
    assert config.get_log_level() == "DEBUG"

    (tmp_path / "zap_config.yaml").write_text("[not, a, mapping]\n")
    assert config.get_default_cluster() == "default"
