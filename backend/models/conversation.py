"""Conversation data models."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Tuple


class Sender(str, Enum):
    """Who produced a turn."""
    USER = "user"
    BOT = "bot"


@dataclass(frozen=True)
class Turn:
    """Represents a single message in a chat session."""
    id: str
    text: str
    sender: Sender
    timestamp: datetime


@dataclass(frozen=True)
class SessionState:
    """Point-in-time snapshot of a chat session."""
    turns: Tuple[Turn, ...]
    pending: bool
    draft_input: str = ""

    @property
    def last_turn(self) -> Turn:
        return self.turns[-1]
