"""
Data access for learned knowledge and the interaction log.
Keys passed to KnowledgeStore must already be normalized.
"""

import sqlite3
from datetime import datetime
from typing import List, Optional

from .db import Database
from .errors import PersistenceError
from .schema import KnowledgeEntry
from ..util.logging import StructuredLogger


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def _row_to_entry(row: sqlite3.Row) -> KnowledgeEntry:
    return KnowledgeEntry(
        question=row['question'],
        answer=row['answer'],
        created_at=_parse_timestamp(row['created_at']),
        usage_count=row['usage_count'] or 0
    )


class KnowledgeStore:
    """Question -> answer rows in the `memory` table, with usage counters."""

    def __init__(self, database: Database, logger: StructuredLogger = None):
        self.database = database
        self.logger = logger or StructuredLogger()

    def get(self, question: str) -> Optional[KnowledgeEntry]:
        """Get an entry by its normalized question."""
        try:
            with self.database.get_db() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT question, answer, created_at, usage_count FROM memory WHERE question = ?",
                    (question,)
                )
                row = cursor.fetchone()
                return _row_to_entry(row) if row else None
        except sqlite3.Error as e:
            self.logger.error(f"Error fetching answer for '{question}': {e}")
            raise PersistenceError(f"Failed to read '{question}'") from e

    def increment_usage(self, question: str) -> None:
        """Bump usage_count for a question. No-op when the question is absent."""
        try:
            with self.database.get_db() as conn:
                conn.execute(
                    "UPDATE memory SET usage_count = usage_count + 1 WHERE question = ?",
                    (question,)
                )
                conn.commit()
        except sqlite3.Error as e:
            self.logger.error(f"Error updating usage count for '{question}': {e}")
            raise PersistenceError(f"Failed to update usage count for '{question}'") from e

    def upsert(self, question: str, answer: str) -> None:
        """Insert a new entry or replace the answer of an existing one.

        usage_count and created_at of an existing row are left untouched.
        """
        try:
            with self.database.get_db() as conn:
                conn.execute(
                    """INSERT INTO memory (question, answer) VALUES (?, ?)
                       ON CONFLICT(question) DO UPDATE SET answer = excluded.answer""",
                    (question, answer)
                )
                conn.commit()
        except sqlite3.Error as e:
            self.logger.log_knowledge_operation("upsert", question, answer, status="failed", error=e)
            raise PersistenceError(f"Failed to save '{question}'") from e

        self.logger.log_knowledge_operation("upsert", question, answer)

    def count_entries(self) -> int:
        """Get count of learned entries."""
        try:
            with self.database.get_db() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) FROM memory")
                result = cursor.fetchone()
                return result[0] if result else 0
        except sqlite3.Error as e:
            self.logger.error(f"Error getting memory count: {e}")
            raise PersistenceError("Failed to count knowledge entries") from e

    def top_entries(self, n: int) -> List[KnowledgeEntry]:
        """Most-used entries first; equal counts are ordered by question."""
        if n <= 0:
            return []

        try:
            with self.database.get_db() as conn:
                cursor = conn.cursor()
                cursor.execute('''
                    SELECT question, answer, created_at, usage_count
                    FROM memory
                    ORDER BY usage_count DESC, question ASC
                    LIMIT ?
                ''', (n,))
                return [_row_to_entry(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            self.logger.error(f"Error getting top questions: {e}")
            raise PersistenceError("Failed to list top questions") from e


class InteractionLog:
    """Append-only record of inbound messages in the `logs` table."""

    def __init__(self, database: Database, logger: StructuredLogger = None):
        self.database = database
        self.logger = logger or StructuredLogger()

    def record(self, user_id: Optional[int], username: str, message: str) -> None:
        """Append one inbound message."""
        try:
            with self.database.get_db() as conn:
                conn.execute(
                    "INSERT INTO logs (user_id, username, message) VALUES (?, ?, ?)",
                    (user_id, username, message)
                )
                conn.commit()
        except sqlite3.Error as e:
            self.logger.log_interaction(user_id, username, message, status="failed", error=e)
            raise PersistenceError(f"Failed to save log for user {user_id}") from e

        self.logger.log_interaction(user_id, username, message)

    def count(self) -> int:
        try:
            with self.database.get_db() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) FROM logs")
                result = cursor.fetchone()
                return result[0] if result else 0
        except sqlite3.Error as e:
            self.logger.error(f"Error getting log count: {e}")
            raise PersistenceError("Failed to count interactions") from e
