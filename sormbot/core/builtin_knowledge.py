"""
Built-in knowledge: fixed question/answer pairs that always win over learned entries.
"""

from types import MappingProxyType
from typing import Mapping, Optional

DEFAULT_KNOWLEDGE: Mapping[str, str] = MappingProxyType({
    "who are you": "I am SormGPT, your helpful assistant.",
    "who is your developer": "@l9shx is my developer.",
    "hello": "Hello! How can I help you today?",
    "hi": "Hi there! What can I do for you?",
    "help": "You can ask me anything or teach me new things using:\n\n!teach question | answer",
})


def normalize_question(text: str) -> str:
    """Canonical store key: surrounding whitespace trimmed, lower-cased."""
    return (text or "").strip().lower()


def get_builtin_answer(question: str) -> Optional[str]:
    """Look up an already-normalized question in the built-in table."""
    return DEFAULT_KNOWLEDGE.get(question)


def is_builtin(question: str) -> bool:
    return question in DEFAULT_KNOWLEDGE
