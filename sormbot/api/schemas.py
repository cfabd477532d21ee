"""
Request and response models for the HTTP API.
"""

from typing import List, Optional

from pydantic import BaseModel, field_validator


class ChatRequest(BaseModel):
    message: str
    user_id: Optional[int] = None
    username: Optional[str] = None

    @field_validator('message')
    @classmethod
    def message_must_not_be_too_long(cls, v):
        if len(v) > 4096:
            raise ValueError('message cannot exceed 4096 characters')
        return v


class ChatResponse(BaseModel):
    reply: Optional[str]
    parse_mode: Optional[str] = None


class TopQuestion(BaseModel):
    question: str
    usage_count: int


class StatsResponse(BaseModel):
    entry_count: int
    interaction_count: int
    top_questions: List[TopQuestion]


class HealthResponse(BaseModel):
    status: str
    version: str
    db_health: bool
    entry_count: int
