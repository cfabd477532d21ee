"""
Answer lookup: built-in knowledge first, then learned entries.
"""

from typing import Optional

from .builtin_knowledge import get_builtin_answer, normalize_question
from .dao import KnowledgeStore
from .errors import PersistenceError
from .schema import AnswerSource, Resolution
from ..util.logging import StructuredLogger


class Resolver:

    def __init__(self, store: KnowledgeStore, logger: StructuredLogger = None):
        self.store = store
        self.logger = logger or store.logger

    def resolve(self, raw_text: str) -> Optional[Resolution]:
        """
        Resolve raw message text to an answer, or None when nothing matches.

        Built-in answers never touch the store. A learned hit bumps the entry's
        usage count; a failed bump is logged and does not affect the result.
        Raises PersistenceError only when the store read itself fails.
        """
        question = normalize_question(raw_text)

        builtin = get_builtin_answer(question)
        if builtin is not None:
            return Resolution(question=question, answer=builtin, source=AnswerSource.BUILTIN)

        entry = self.store.get(question)
        if entry is None:
            return None

        try:
            self.store.increment_usage(question)
        except PersistenceError as e:
            self.logger.error(f"Usage count not updated for '{question}': {e}")

        return Resolution(question=question, answer=entry.answer, source=AnswerSource.LEARNED)
