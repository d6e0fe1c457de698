"""Tests for engine and settings defaults."""

from skillbarter.config import Settings
from skillbarter.database import engine


def test_sql_statements_are_not_echoed_by_default(monkeypatch):
    monkeypatch.delenv("SQL_ECHO", raising=False)

    assert Settings(_env_file=None, DEBUG=True).SQL_ECHO is False
    assert not engine.sync_engine.echo


def test_sql_echo_can_be_enabled(monkeypatch):
    monkeypatch.setenv("SQL_ECHO", "true")

    assert Settings(_env_file=None).SQL_ECHO is True
