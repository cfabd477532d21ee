"""Read-only statistics over the knowledge store and interaction log."""

from .dao import InteractionLog, KnowledgeStore
from .schema import Statistics


class StatisticsReporter:

    def __init__(self, store: KnowledgeStore, interactions: InteractionLog, top_limit: int = 5):
        self.store = store
        self.interactions = interactions
        self.top_limit = top_limit

    def report(self, limit: int = None) -> Statistics:
        """Collect counts and the most-used questions.

        Any failed read raises PersistenceError; nothing partial is returned.
        """
        limit = self.top_limit if limit is None else limit
        entry_count = self.store.count_entries()
        interaction_count = self.interactions.count()
        top_questions = self.store.top_entries(limit)

        return Statistics(
            entry_count=entry_count,
            interaction_count=interaction_count,
            top_questions=top_questions
        )
