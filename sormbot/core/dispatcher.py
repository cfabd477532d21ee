"""
Per-message handling shared by the Telegram transport and the HTTP API.

Every failure is caught here; callers always get a Reply (or None for
messages that need no answer).
"""

from typing import Optional

from . import messages
from .errors import PersistenceError
from .schema import Learned, Reply

TEACH_PREFIX = "!teach"


class Dispatcher:

    def __init__(self, context):
        self.context = context
        self.logger = context.logger

    def is_teach_command(self, text: str) -> bool:
        return text.startswith(TEACH_PREFIX)

    def handle_message(self, user_id: Optional[int], username: Optional[str], text: str) -> Optional[Reply]:
        """Record an inbound message, then teach or resolve it."""
        message = (text or "").strip()
        if not message:
            return None

        username = username or "Unknown"
        try:
            self.context.interactions.record(user_id, username, message)
        except PersistenceError as e:
            self.logger.error(f"Error saving log: {e}")

        try:
            if self.is_teach_command(message):
                return self._teach(message[len(TEACH_PREFIX):])
            return self._answer(message)
        except Exception as e:
            self.logger.error(f"Unexpected error handling message from {user_id}: {e}", exc_info=True)
            return Reply(messages.GENERIC_ERROR_TEXT)

    def _teach(self, payload: str) -> Reply:
        try:
            result = self.context.teacher.teach(payload)
        except PersistenceError as e:
            self.logger.error(f"Error teaching question: {e}")
            return Reply(messages.SAVE_FAILED_TEXT)

        if isinstance(result, Learned):
            return messages.learned_reply(result)
        return messages.rejected_reply(result)

    def _answer(self, message: str) -> Reply:
        try:
            resolution = self.context.resolver.resolve(message)
        except PersistenceError as e:
            self.logger.error(f"Error fetching answer: {e}")
            return Reply(messages.GENERIC_ERROR_TEXT)

        if resolution is None:
            return messages.unknown_answer_reply()
        return Reply(resolution.answer)

    def help(self) -> Reply:
        return messages.help_reply()

    def stats(self) -> Reply:
        try:
            statistics = self.context.stats.report()
        except PersistenceError as e:
            self.logger.error(f"Error getting statistics: {e}")
            return Reply(messages.STATS_FAILED_TEXT)
        return messages.stats_reply(statistics)
