"""
Dispatcher tests: classification, reply texts, and the per-message error boundary.
"""

import logging
from unittest.mock import patch

import pytest

from sormbot.core import messages
from sormbot.core.dispatcher import Dispatcher
from sormbot.core.errors import PersistenceError


@pytest.fixture
def dispatcher(context):
    return Dispatcher(context)


class TestHandleMessage:

    def test_teach_command(self, dispatcher, context):
        reply = dispatcher.handle_message(1, "alice", "!teach Foo | Bar")

        assert reply.text == "✅ Learned: 'foo' → 'Bar'"
        assert reply.parse_mode is None
        assert context.store.get("foo").answer == "Bar"

    def test_question_after_teach(self, dispatcher):
        dispatcher.handle_message(1, "alice", "!teach Foo | Bar")
        reply = dispatcher.handle_message(2, "bob", "  foo ")
        assert reply.text == "Bar"

    def test_builtin_question(self, dispatcher):
        assert dispatcher.handle_message(1, "alice", "Hi").text == "Hi there! What can I do for you?"

    def test_unknown_question(self, dispatcher):
        reply = dispatcher.handle_message(1, "alice", "what is the meaning of life")
        assert reply.text == messages.UNKNOWN_ANSWER_TEXT
        assert reply.parse_mode == messages.HTML

    def test_invalid_teach(self, dispatcher):
        reply = dispatcher.handle_message(1, "alice", "!teach onlyquestion")
        assert reply.text == "❌ Invalid format. Use: !teach question | answer"

    def test_builtin_conflict(self, dispatcher):
        reply = dispatcher.handle_message(1, "alice", "!teach who are you | override")
        assert reply.text == "This is built-in knowledge and cannot be changed."

    def test_rejections_are_not_logged_as_errors(self, dispatcher, caplog):
        with caplog.at_level(logging.INFO):
            dispatcher.handle_message(1, "alice", "!teach onlyquestion")
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_empty_message_is_ignored(self, dispatcher, context):
        assert dispatcher.handle_message(1, "alice", "   ") is None
        assert dispatcher.handle_message(1, "alice", None) is None
        assert context.interactions.count() == 0

    def test_every_message_is_logged(self, dispatcher, context):
        dispatcher.handle_message(1, None, "  hello  ")
        dispatcher.handle_message(1, "alice", "!teach a | b")

        with context.database.get_db() as conn:
            rows = conn.execute("SELECT user_id, username, message FROM logs ORDER BY id").fetchall()

        assert [tuple(r) for r in rows] == [(1, "Unknown", "hello"), (1, "alice", "!teach a | b")]

    def test_log_failure_does_not_block_reply(self, dispatcher, context):
        with patch.object(context.interactions, "record", side_effect=PersistenceError("locked")):
            reply = dispatcher.handle_message(1, "alice", "hello")
        assert reply.text == "Hello! How can I help you today?"

    def test_teach_persistence_failure(self, dispatcher, context, caplog):
        with patch.object(context.store, "upsert", side_effect=PersistenceError("readonly")):
            with caplog.at_level(logging.ERROR):
                reply = dispatcher.handle_message(1, "alice", "!teach foo | bar")

        assert reply.text == messages.SAVE_FAILED_TEXT
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_resolve_persistence_failure(self, dispatcher, context):
        with patch.object(context.store, "get", side_effect=PersistenceError("disk I/O error")):
            reply = dispatcher.handle_message(1, "alice", "foo")
        assert reply.text == messages.GENERIC_ERROR_TEXT

    def test_unexpected_error_is_contained(self, dispatcher, context):
        with patch.object(context.resolver, "resolve", side_effect=RuntimeError("boom")):
            reply = dispatcher.handle_message(1, "alice", "foo")
        assert reply.text == messages.GENERIC_ERROR_TEXT


class TestCommands:

    def test_help(self, dispatcher):
        reply = dispatcher.help()
        assert "!teach question | answer" in reply.text
        assert "/stats" in reply.text
        assert reply.parse_mode == messages.HTML

    def test_stats(self, dispatcher):
        dispatcher.handle_message(1, "alice", "!teach foo | bar")
        dispatcher.handle_message(1, "alice", "foo")

        reply = dispatcher.stats()

        assert "• Learned responses: 1" in reply.text
        assert "• Total interactions: 2" in reply.text
        assert "1. foo (used 1 times)" in reply.text

    def test_stats_failure(self, dispatcher, context):
        with patch.object(context.store, "count_entries", side_effect=PersistenceError("locked")):
            reply = dispatcher.stats()
        assert reply.text == messages.STATS_FAILED_TEXT
