import pytest

from sormbot.core.config import Settings
from sormbot.core.context import build_context
from sormbot.util.logging import StructuredLogger


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway database, no log file."""
    return Settings(
        db_path=str(tmp_path / "data" / "bot.db"),
        db_timeout_sec=5,
        telegram_bot_token="123456:TEST-TOKEN",
        log_level="DEBUG",
        log_file=None,
    )


@pytest.fixture
def context(settings):
    """Fully wired bot context on a fresh database."""
    ctx = build_context(settings, StructuredLogger(name="sormbot.test", level="DEBUG"))
    yield ctx
    ctx.close()


@pytest.fixture
def store(context):
    return context.store
