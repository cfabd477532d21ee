"""
SQLite connection management and schema for the knowledge store.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator

from .config import DB_PATH, DB_TIMEOUT_SEC, ensure_db_directory
from .errors import PersistenceError

REQUIRED_TABLES = ('memory', 'logs', 'users')


class Database:
    """Opens one short-lived connection per operation against a SQLite file."""

    def __init__(self, path: str = DB_PATH, timeout: float = DB_TIMEOUT_SEC):
        self.path = path
        self.timeout = timeout
        self.closed = False

    @contextmanager
    def get_db(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a SQLite database connection."""
        if self.closed:
            raise PersistenceError(f"Database {self.path} is closed")

        conn = sqlite3.connect(self.path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def init_db(self):
        """Initialize the database with required tables."""
        ensure_db_directory(self.path)

        with self.get_db() as conn:
            cursor = conn.cursor()

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS memory (
                    question TEXT PRIMARY KEY,
                    answer TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    usage_count INTEGER DEFAULT 0
                )
            ''')

            cursor.execute('''
                CREATE TABLE IF NOT EXISTS logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER,
                    username TEXT,
                    message TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            # Created for compatibility with existing databases; nothing reads or writes it.
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS users (
                    user_id INTEGER PRIMARY KEY,
                    username TEXT,
                    first_name TEXT,
                    last_name TEXT,
                    is_admin BOOLEAN DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')

            cursor.execute('CREATE INDEX IF NOT EXISTS idx_memory_usage ON memory(usage_count DESC, question)')

            conn.commit()

    def health_check(self) -> bool:
        """Check database health."""
        try:
            with self.get_db() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
                table_names = [row[0] for row in cursor.fetchall()]
                return all(table in table_names for table in REQUIRED_TABLES)
        except (sqlite3.Error, PersistenceError):
            return False

    def close(self):
        """Refuse further operations. Connections are per-operation, so none stay open."""
        self.closed = True
