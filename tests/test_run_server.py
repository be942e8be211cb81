"""Tests for the Uvicorn launcher options."""
from __future__ import annotations

import pytest

import run_server
from run_server import server_options


def test_defaults_bind_everywhere_with_reload_in_development():
    assert server_options({}) == {
        "app": "mindcanvus.main:app",
        "host": "0.0.0.0",
        "port": 8000,
        "reload": True,
        "log_level": "info",
    }


def test_production_disables_reload_unless_asked():
    assert server_options({"ENVIRONMENT": "production"})["reload"] is False
    assert server_options({"ENVIRONMENT": "production", "UVICORN_RELOAD": "yes"})["reload"] is True
    assert server_options({"UVICORN_RELOAD": "false"})["reload"] is False


def test_host_port_and_log_level_overrides():
    options = server_options({"MINDCANVUS_HOST": "127.0.0.1", "MINDCANVUS_PORT": "9100", "UVICORN_LOG_LEVEL": "DEBUG"})

    assert options["host"] == "127.0.0.1"
    assert options["port"] == 9100
    assert options["log_level"] == "debug"


def test_bad_port_exits_with_message():
    with pytest.raises(SystemExit, match="MINDCANVUS_PORT"):
        server_options({"MINDCANVUS_PORT": "eighty"})


def test_main_hands_options_to_uvicorn(monkeypatch):
    captured: dict = {}
    monkeypatch.setattr(run_server.uvicorn, "run", lambda **kwargs: captured.update(kwargs))
    monkeypatch.setenv("MINDCANVUS_PORT", "8123")
    monkeypatch.setenv("UVICORN_RELOAD", "0")

    run_server.main()

    assert captured["app"] == "mindcanvus.main:app"
    assert captured["port"] == 8123
    assert captured["reload"] is False
