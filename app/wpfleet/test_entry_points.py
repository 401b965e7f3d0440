import io

import pytest
import requests
from rich.console import Console

from wpfleet import config, live_domains, sync_domains, sync_git

PANEL_ENV = {"SERVER_IP": "10.0.0.1", "LIVE_SERVER_USERNAME": "root", "LIVE_SERVER_PASSWORD": "pw"}
MAINWP_ENV = {"WP_MANAGE_CONSUMER_KEY": "ck", "WP_MANAGE_SECRET_KEY": "cs"}
NOTION_ENV = {"NOTION_API_KEY": "secret", "NOTION_DATABASE_ID": "db", "NOTION_DATABASE_GIT_ID": "gitdb"}


@pytest.fixture
def env(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", str(tmp_path / "missing.json"))

    def apply(*groups):
        for group in groups:
            for key, value in group.items():
                monkeypatch.setenv(key, value)

    return apply


def _console():
    buf = io.StringIO()
    return Console(file=buf, force_terminal=False, width=200), buf


def _counts(**kw):
    counts = {"created": 0, "updated": 0, "failed": 0}
    counts.update(kw)
    return counts


def test_live_domains_panel_failure_exits_1(env, monkeypatch):
    env(PANEL_ENV)

    def down(settings):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(live_domains.virtualmin, "fetch_domains", down)
    console, _ = _console()

    assert live_domains.main([], console=console) == 1


def test_live_domains_list_only_prints_names(env, monkeypatch):
    env(PANEL_ENV)
    payload = {"data": [{"name": "example.com  example"}, {"name": "shop.example.org"}]}
    monkeypatch.setattr(live_domains.virtualmin, "fetch_domains", lambda settings: payload)
    console, buf = _console()

    assert live_domains.main(["--list-only"], console=console) == 0
    out = buf.getvalue()
    assert "2 domains found on server." in out
    assert "shop.example.org" in out


def test_live_domains_without_panel_credentials_exits(env, monkeypatch):
    env(PANEL_ENV)
    monkeypatch.delenv("LIVE_SERVER_PASSWORD")
    console, _ = _console()

    with pytest.raises(SystemExit) as exc:
        live_domains.main([], console=console)
    assert exc.value.code == 1


def test_sync_domains_runs_with_configured_clients(env, monkeypatch):
    env(PANEL_ENV, MAINWP_ENV, NOTION_ENV)
    seen = {}

    def fake_sync(mainwp, notion, panel_cfg):
        seen.update(database=notion.database_id, server=panel_cfg["server"])
        return _counts(created=2)

    monkeypatch.setattr(sync_domains, "run_domain_sync", fake_sync)

    assert sync_domains.main([]) == 0
    assert seen == {"database": "db", "server": "10.0.0.1"}


def test_sync_domains_without_notion_key_exits(env, monkeypatch):
    env(PANEL_ENV, MAINWP_ENV, NOTION_ENV)
    monkeypatch.delenv("NOTION_API_KEY")
    monkeypatch.setattr(sync_domains, "run_domain_sync", lambda *a: pytest.fail("sync ran"))

    with pytest.raises(SystemExit) as exc:
        sync_domains.main([])
    assert exc.value.code == 1


def test_sync_git_uses_git_database(env, monkeypatch):
    env(NOTION_ENV, {"GITLAB_TOKEN": "glpat"})
    seen = {}

    def fake_sync(gitlab, notion):
        seen["database"] = notion.database_id
        return _counts(updated=1)

    monkeypatch.setattr(sync_git, "run_repo_sync", fake_sync)

    assert sync_git.main([]) == 0
    assert seen == {"database": "gitdb"}


def test_sync_git_without_token_exits(env, monkeypatch):
    env(NOTION_ENV)
    monkeypatch.delenv("GITLAB_TOKEN", raising=False)

    with pytest.raises(SystemExit) as exc:
        sync_git.main([])
    assert exc.value.code == 1
