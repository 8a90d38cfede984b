"""API request/response models for the AI Book Assistant."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from models.conversation import SessionState, Turn


class MessageRequest(BaseModel):
    """Body of a message submission or a stateless resolve call."""
    text: str = Field(default="", description="Raw user input")


class SessionRequest(BaseModel):
    """Optional body of POST /sessions."""
    session_id: Optional[str] = Field(default=None, description="Live session to resume")


class ResolveResponse(BaseModel):
    """Result of resolving one input against the knowledge base."""
    response: str
    rule_triggered: str
    keyword: Optional[str] = None


class TurnModel(BaseModel):
    """Serialized chat turn."""
    id: str
    text: str
    sender: str
    timestamp: datetime

    @classmethod
    def from_turn(cls, turn: Turn) -> "TurnModel":
        return cls(
            id=turn.id,
            text=turn.text,
            sender=turn.sender.value,
            timestamp=turn.timestamp
        )


class SessionModel(BaseModel):
    """Serialized session snapshot."""
    session_id: str
    pending: bool
    draft_input: str
    turns: List[TurnModel]

    @classmethod
    def from_state(cls, session_id: str, state: SessionState) -> "SessionModel":
        return cls(
            session_id=session_id,
            pending=state.pending,
            draft_input=state.draft_input,
            turns=[TurnModel.from_turn(turn) for turn in state.turns]
        )


class SubmitResponse(BaseModel):
    """Outcome of a message submission."""
    accepted: bool
    session: SessionModel


class TopicsResponse(BaseModel):
    """Knowledge base keywords in match order."""
    topics: List[str]
