"""
Teach path: parse "question | answer", validate, and upsert into the store.
"""

from typing import Optional, Tuple

from .builtin_knowledge import is_builtin, normalize_question
from .dao import KnowledgeStore
from .schema import Learned, Rejected, RejectionReason, TeachResult
from ..util.logging import StructuredLogger

SEPARATOR = "|"
INVALID_FORMAT_MESSAGE = "Invalid format. Use: !teach question | answer"
BUILTIN_CONFLICT_MESSAGE = "This is built-in knowledge and cannot be changed."


def parse_teach_input(raw_input: str) -> Optional[Tuple[str, str]]:
    """Split on the first separator only. Returns None when there is no separator."""
    question, separator, answer = (raw_input or "").partition(SEPARATOR)
    if not separator:
        return None
    return question.strip(), answer.strip()


class Teacher:

    def __init__(self, store: KnowledgeStore, logger: StructuredLogger = None):
        self.store = store
        self.logger = logger or store.logger

    def teach(self, raw_input: str) -> TeachResult:
        """
        Learn a question/answer pair from "question | answer".

        Returns Learned with the normalized question and trimmed answer, or
        Rejected for malformed input and for questions owned by the built-in
        table. Raises PersistenceError when the write fails.
        """
        parsed = parse_teach_input(raw_input)
        if parsed is None or not parsed[0] or not parsed[1]:
            self.logger.log_rejection(RejectionReason.INVALID_FORMAT.value, raw_input or "")
            return Rejected(RejectionReason.INVALID_FORMAT, INVALID_FORMAT_MESSAGE)

        question = normalize_question(parsed[0])
        answer = parsed[1]

        if is_builtin(question):
            self.logger.log_rejection(RejectionReason.BUILTIN_CONFLICT.value, raw_input)
            return Rejected(RejectionReason.BUILTIN_CONFLICT, BUILTIN_CONFLICT_MESSAGE)

        self.store.upsert(question, answer)
        return Learned(question=question, answer=answer)
