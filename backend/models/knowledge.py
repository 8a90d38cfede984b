"""Knowledge base data models."""
from dataclasses import dataclass


@dataclass(frozen=True)
class KnowledgeEntry:
    """A single keyword → canned answer rule."""
    keyword: str  # Always lowercase, matched as a substring
    response: str
