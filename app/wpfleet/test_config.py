import json
import logging

import pytest

from wpfleet import config, log


def test_mainwp_settings_default_dashboard(monkeypatch):
    monkeypatch.delenv("MAINWP_DASHBOARD_URL", raising=False)
    monkeypatch.setenv("WP_MANAGE_CONSUMER_KEY", "ck")
    monkeypatch.setenv("WP_MANAGE_SECRET_KEY", "cs")

    settings = config.mainwp_settings()

    assert settings["base_url"] == config.DEFAULT_MAINWP_DASHBOARD_URL
    assert settings["consumer_key"] == "ck"


def test_virtualmin_port_override(monkeypatch):
    monkeypatch.setenv("VIRTUALMIN_PORT", "10443")
    assert config.virtualmin_settings()["port"] == 10443
    monkeypatch.delenv("VIRTUALMIN_PORT")
    assert config.virtualmin_settings()["port"] == 10000


def test_notion_settings_reads_named_database(monkeypatch):
    monkeypatch.setenv("NOTION_API_KEY", "secret")
    monkeypatch.setenv("NOTION_DATABASE_GIT_ID", "gitdb")
    assert config.notion_settings("NOTION_DATABASE_GIT_ID") == {"api_key": "secret", "database_id": "gitdb"}


def test_require_exits_on_missing(caplog):
    with caplog.at_level(logging.CRITICAL), pytest.raises(SystemExit):
        config.require({"token": ""}, "token")
    assert "token" in caplog.text


def test_load_config_and_derived_values(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"poll_interval_seconds": 2, "gitlab": {"per_page": 50}}))
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", str(path))

    cfg = config.load_config()

    assert config.poll_interval(cfg) == 2.0
    assert config.gitlab_settings(cfg)["per_page"] == 50


def test_load_config_missing_or_broken(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", str(tmp_path / "absent.json"))
    assert config.load_config() == {}

    broken = tmp_path / "broken.json"
    broken.write_text("{")
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", str(broken))
    assert config.load_config() == {}


def test_log_level_from_env(monkeypatch):
    monkeypatch.setenv("WPFLEET_LOG_LEVEL", "debug")
    assert log.resolve_log_level() == logging.DEBUG
    monkeypatch.setenv("WPFLEET_LOG_LEVEL", "chatty")
    assert log.resolve_log_level() == logging.INFO
