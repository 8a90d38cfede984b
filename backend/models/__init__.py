"""Data models for the AI Book Assistant."""
from .knowledge import KnowledgeEntry
from .conversation import Sender, Turn, SessionState
from .api import (
    MessageRequest, SessionRequest, ResolveResponse, TurnModel, SessionModel, SubmitResponse,
    TopicsResponse
)

__all__ = [
    "KnowledgeEntry",
    "Sender",
    "Turn",
    "SessionState",
    "MessageRequest",
    "SessionRequest",
    "ResolveResponse",
    "TurnModel",
    "SessionModel",
    "SubmitResponse",
    "TopicsResponse",
]
