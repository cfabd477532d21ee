"""
Typed records and results for the knowledge core.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union


@dataclass
class KnowledgeEntry:
    question: str
    answer: str
    created_at: Optional[datetime]
    usage_count: int = 0


class AnswerSource(str, Enum):
    BUILTIN = "builtin"
    LEARNED = "learned"


@dataclass
class Resolution:
    question: str
    answer: str
    source: AnswerSource


class RejectionReason(str, Enum):
    INVALID_FORMAT = "invalid_format"
    BUILTIN_CONFLICT = "builtin_conflict"


@dataclass
class Learned:
    question: str
    answer: str


@dataclass
class Rejected:
    reason: RejectionReason
    message: str


TeachResult = Union[Learned, Rejected]


@dataclass
class Statistics:
    entry_count: int
    interaction_count: int
    top_questions: List[KnowledgeEntry] = field(default_factory=list)


@dataclass
class Reply:
    """One outbound message. parse_mode is None for plain text."""
    text: str
    parse_mode: Optional[str] = None
