"""
Process-wide wiring. The entry point builds one BotContext and closes it on exit.
"""

from dataclasses import dataclass

from .config import Settings, load_settings
from .dao import InteractionLog, KnowledgeStore
from .db import Database
from .resolver import Resolver
from .stats import StatisticsReporter
from .teacher import Teacher
from ..util.logging import StructuredLogger


@dataclass
class BotContext:
    settings: Settings
    logger: StructuredLogger
    database: Database
    store: KnowledgeStore
    interactions: InteractionLog
    resolver: Resolver
    teacher: Teacher
    stats: StatisticsReporter

    def close(self):
        self.database.close()
        self.logger.info("Database closed")


def build_context(settings: Settings = None, logger: StructuredLogger = None) -> BotContext:
    """Open the database, create tables, and wire every component.

    Raises sqlite3.Error or PersistenceError when the database cannot be initialized.
    """
    settings = settings or load_settings()
    logger = logger or StructuredLogger(level=settings.log_level, log_file=settings.log_file)

    database = Database(settings.db_path, timeout=settings.db_timeout_sec)
    database.init_db()
    logger.info(f"Connected to the SQLite database at {settings.db_path}")

    store = KnowledgeStore(database, logger)
    interactions = InteractionLog(database, logger)

    return BotContext(
        settings=settings,
        logger=logger,
        database=database,
        store=store,
        interactions=interactions,
        resolver=Resolver(store, logger),
        teacher=Teacher(store, logger),
        stats=StatisticsReporter(store, interactions, top_limit=settings.stats_top_limit),
    )
