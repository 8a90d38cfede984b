"""
Resolver for the AI Book Assistant.

This module maps raw user input to a canned answer using first-match-wins
substring lookup over the ordered knowledge base, with a two-tier fallback
(topic menu for questions, generic reply otherwise).
"""

from dataclasses import dataclass
import logging
from typing import Optional, Sequence, Tuple

from models.knowledge import KnowledgeEntry
from services.knowledge_base import KNOWLEDGE_BASE, MENU_RESPONSE, FALLBACK_RESPONSE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """
    Result of resolving one input.

    Attributes:
        response: The text the bot replies with
        rule_triggered: "keyword", "menu" or "fallback"
        keyword: The matched keyword, when rule_triggered is "keyword"
    """
    response: str
    rule_triggered: str
    keyword: Optional[str] = None


class Resolver:
    """
    Deterministic keyword matcher producing bot replies.

    Lookup is plain substring containment on the lowercased input, scanned in
    table order. The first entry whose keyword occurs anywhere in the input
    wins, even when a later keyword would be a longer or closer match.
    """

    # Rule names
    KEYWORD = "keyword"
    MENU = "menu"
    FALLBACK = "fallback"

    QUESTION_MARK = "?"

    def __init__(
        self,
        knowledge_base: Sequence[KnowledgeEntry] = KNOWLEDGE_BASE,
        menu_response: str = MENU_RESPONSE,
        fallback_response: str = FALLBACK_RESPONSE
    ):
        """
        Initialize the resolver.

        Args:
            knowledge_base: Ordered entries; earlier entries take priority
            menu_response: Reply for unmatched inputs containing "?"
            fallback_response: Reply for every other unmatched input
        """
        self.knowledge_base: Tuple[KnowledgeEntry, ...] = tuple(knowledge_base)
        self.menu_response = menu_response
        self.fallback_response = fallback_response

    def resolve(self, text: Optional[str]) -> str:
        """Return the bot reply for ``text``. Never raises."""
        return self.match(text).response

    def match(self, text: Optional[str]) -> Resolution:
        """
        Resolve input and report which rule produced the reply.

        The rules apply in this order:
        1. Keyword: first entry whose keyword is contained in the input
        2. Menu: input contains a question mark
        3. Fallback: everything else, including empty input

        Args:
            text: Raw user input (None is treated as empty)

        Returns:
            Resolution with response text and the rule that fired
        """
        text_lower = (text or "").lower()

        # Rule 1: Keyword lookup
        for entry in self.knowledge_base:
            if entry.keyword in text_lower:
                logger.info(
                    f"Resolution: {self.KEYWORD} ({entry.keyword}) - {text_lower[:50]}",
                    extra={"rule_triggered": self.KEYWORD}
                )
                return Resolution(
                    response=entry.response,
                    rule_triggered=self.KEYWORD,
                    keyword=entry.keyword
                )

        # Rule 2: Unmatched question
        if self.QUESTION_MARK in text_lower:
            logger.info(f"Resolution: {self.MENU} - {text_lower[:50]}", extra={"rule_triggered": self.MENU})
            return Resolution(response=self.menu_response, rule_triggered=self.MENU)

        # Rule 3: Default
        logger.info(f"Resolution: {self.FALLBACK} - {text_lower[:50]}", extra={"rule_triggered": self.FALLBACK})
        return Resolution(response=self.fallback_response, rule_triggered=self.FALLBACK)

    def topics(self) -> Tuple[str, ...]:
        """Keywords in match-priority order."""
        return tuple(entry.keyword for entry in self.knowledge_base)
