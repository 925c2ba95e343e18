import json
from dataclasses import replace

import pytest

import main
from storage.migrations import LATEST_VERSION


def test_init_db_reports_schema_version(capsys):
    assert main.main(["init-db"]) == 0
    assert f"schema version {LATEST_VERSION}" in capsys.readouterr().out


def test_demo_summary_prints_dashboard_json(capsys):
    assert main.main(["summary", "--owner", "cli@example.com", "--demo", "--today", "2026-01-12"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["summary"]["total"] == 4
    assert payload["summary"]["dueToday"] == 1
    assert payload["errors"] == []


def test_colors_lists_saved_preferences(capsys):
    assert main.main(["colors", "--owner", "nobody@example.com"]) == 0
    assert json.loads(capsys.readouterr().out) == {}


def test_summary_without_token_or_demo_is_rejected(capsys, monkeypatch):
    monkeypatch.setattr(main, "DASHBOARD", replace(main.DASHBOARD, demo_mode=False))
    with pytest.raises(SystemExit) as exited:
        main.main(["summary", "--owner", "cli@example.com"])

    assert exited.value.code == 2
    assert "--token" in capsys.readouterr().err
