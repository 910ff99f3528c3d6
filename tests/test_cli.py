"""Tests for the command-line interface."""

from __future__ import annotations

import json
import sys

import pytest
import responses

from quotesync import config, main


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "STATE_DB", tmp_path / "state.db")
    monkeypatch.setattr(config, "EXPORT_DIR", tmp_path / "exports")


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["quotesync", *args])
    with pytest.raises(SystemExit) as exc:
        main.main()
    return exc.value.code


class TestCli:
    def test_show(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "show") == 0
        assert " — " in capsys.readouterr().out

    def test_show_unknown_category(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "show", "--category", "Nope") == 1
        assert "No quotes available" in capsys.readouterr().out

    def test_add_then_categories(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "add", "Stay hungry.", "Tech") == 0
        assert run_cli(monkeypatch, "categories") == 0
        assert "Tech" in capsys.readouterr().out

    def test_add_rejects_empty(self, monkeypatch):
        assert run_cli(monkeypatch, "add", " ", "Tech") == 1

    def test_filter_persists(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "filter", "Life") == 0
        assert run_cli(monkeypatch, "filter") == 0
        assert "Showing 1 quotes in 'Life'" in capsys.readouterr().out

    def test_export_and_import(self, monkeypatch, tmp_path):
        assert run_cli(monkeypatch, "export") == 0
        exported = tmp_path / "exports" / "quotes.json"
        assert len(json.loads(exported.read_text(encoding="utf-8"))) == 3

        assert run_cli(monkeypatch, "import", str(exported)) == 0
        assert run_cli(monkeypatch, "import", str(tmp_path / "missing.json")) == 1

    def test_status(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "status") == 0
        assert "Quotes: 3" in capsys.readouterr().out

    @responses.activate
    @pytest.mark.parametrize("flag, expected", [
        ("--keep-server", "Server"),
        ("--keep-local", "Philosophy"),
    ])
    def test_sync_resolves_with_flag(self, monkeypatch, capsys, flag, expected):
        url = "https://quotes.example.test/posts"
        monkeypatch.setattr(config, "REMOTE_URL", url)
        responses.add(responses.GET, url, json=[{"id": 1, "title": "Happiness depends upon ourselves."}])

        assert run_cli(monkeypatch, "sync", flag) == 0
        capsys.readouterr()
        assert run_cli(monkeypatch, "show", "--category", expected) == 0
        assert "Happiness depends upon ourselves." in capsys.readouterr().out
