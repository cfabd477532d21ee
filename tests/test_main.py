"""
Entrypoint tests: startup validation and process lifecycle.
"""

import os
from unittest.mock import patch

import pytest

from sormbot import main as entrypoint
from sormbot.core.db import Database


@pytest.fixture(autouse=True)
def no_log_file(monkeypatch):
    monkeypatch.setenv("LOG_FILE", "")


def test_init_db_creates_tables(tmp_path):
    db_path = tmp_path / "nested" / "bot.db"

    assert entrypoint.main(["--db-path", str(db_path), "init-db"]) == 0
    assert os.path.exists(db_path)
    assert Database(str(db_path)).health_check() is True


def test_run_without_token_exits(tmp_path, monkeypatch):
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)

    with pytest.raises(SystemExit) as exc_info:
        entrypoint.main(["--db-path", str(tmp_path / "bot.db"), "run"])

    assert exc_info.value.code == 1


def test_unopenable_database_exits(tmp_path):
    # A directory cannot be opened as a database file
    with pytest.raises(SystemExit) as exc_info:
        entrypoint.main(["--db-path", str(tmp_path), "init-db"])

    assert exc_info.value.code == 1


def test_run_closes_context_on_exit(tmp_path, monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123456:TEST-TOKEN")

    with patch("sormbot.bot.telegram_bot.SormBot.run") as mock_run, \
            patch("sormbot.core.context.BotContext.close") as mock_close:
        assert entrypoint.main(["--db-path", str(tmp_path / "bot.db"), "run"]) == 0

    mock_run.assert_called_once()
    mock_close.assert_called_once()


def test_serve_passes_settings_to_uvicorn(tmp_path):
    with patch("uvicorn.run") as mock_uvicorn:
        entrypoint.main(["--db-path", str(tmp_path / "bot.db"), "serve", "--port", "8123"])

    _, kwargs = mock_uvicorn.call_args
    assert kwargs["port"] == 8123
