import pytest

from gdziestoja.db import sqlite_connector


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    """Point the connector at a fresh database file for the duration of a test."""
    path = tmp_path / "raw.sqlite"
    monkeypatch.setenv("GDZIESTOJA_DB_PATH", str(path))
    sqlite_connector.close_connection()
    yield path
    sqlite_connector.close_connection()
