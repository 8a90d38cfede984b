"""
Unit tests for Resolver class.

Tests the first-match keyword lookup and the two-tier fallback.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import pytest
from services.resolver import Resolver, Resolution
from services.knowledge_base import (
    KNOWLEDGE_BASE, MENU_RESPONSE, FALLBACK_RESPONSE, build_knowledge_base
)


def response_for(keyword: str) -> str:
    """Look up the configured response of a reference keyword."""
    for entry in KNOWLEDGE_BASE:
        if entry.keyword == keyword:
            return entry.response
    raise KeyError(keyword)


class TestResolver:
    """Test suite for Resolver class."""

    @pytest.fixture
    def resolver(self):
        """Create a Resolver over the reference knowledge base."""
        return Resolver()

    # Rule 1: Keyword Tests

    def test_first_match_in_table_order(self, resolver):
        """Test that 'spec-driven' wins over 'spec' because it comes first."""
        result = resolver.match("Tell me about spec-driven basics")
        assert result.rule_triggered == Resolver.KEYWORD
        assert result.keyword == "spec-driven"
        assert result.response == response_for("spec-driven")

    def test_keyword_beats_question_mark(self, resolver):
        """Test that the keyword scan runs before the question-mark check."""
        result = resolver.match("What are the best practices?")
        assert result.rule_triggered == Resolver.KEYWORD
        assert result.keyword == "best practices"
        assert result.response == response_for("best practices")

    def test_matching_is_case_insensitive(self, resolver):
        """Test that uppercase input still matches lowercase keywords."""
        assert resolver.resolve("TESTING") == response_for("testing")
        assert resolver.resolve("Which Tools should I use") == response_for("tools")

    def test_substring_match_is_not_word_bounded(self, resolver):
        """Test that 'specification' matches the 'spec' keyword."""
        result = resolver.match("what is a specification")
        assert result.keyword == "spec"

    def test_multi_word_keyword(self, resolver):
        """Test multi-word keywords such as 'how to start'."""
        assert resolver.resolve("so, how to start?") == response_for("how to start")

    def test_earlier_keyword_wins_over_later(self, resolver):
        """Test that 'examples' beats 'learn' when both are present."""
        result = resolver.match("I want to learn from examples")
        assert result.keyword == "examples"

    def test_punctuation_is_not_stripped(self, resolver):
        """Test that punctuation inside a keyword breaks the match."""
        result = resolver.match("best-practices")
        assert result.rule_triggered == Resolver.FALLBACK

    @pytest.mark.parametrize("entry", KNOWLEDGE_BASE, ids=lambda e: e.keyword)
    def test_every_keyword_resolves_to_its_response(self, resolver, entry):
        """Test each reference keyword on its own."""
        assert resolver.resolve(entry.keyword) == entry.response

    # Rule 2: Menu Tests

    def test_unmatched_question_returns_menu(self, resolver):
        """Test that 'asdf???' gets the topic menu."""
        result = resolver.match("asdf???")
        assert result.rule_triggered == Resolver.MENU
        assert result.keyword is None
        assert result.response == MENU_RESPONSE

    # Rule 3: Fallback Tests

    def test_empty_input_returns_fallback(self, resolver):
        """Test that an empty string gets the generic fallback."""
        result = resolver.match("")
        assert result == Resolution(response=FALLBACK_RESPONSE, rule_triggered=Resolver.FALLBACK)

    def test_none_input_returns_fallback(self, resolver):
        """Test that None is treated as empty input."""
        assert resolver.resolve(None) == FALLBACK_RESPONSE

    def test_unmatched_statement_returns_fallback(self, resolver):
        """Test that text with no keyword and no '?' gets the fallback."""
        assert resolver.resolve("hello there") == FALLBACK_RESPONSE

    # Totality and purity

    @pytest.mark.parametrize("text", [
        "hi",
        "   x   ",
        "?",
        "🤖",
        "AI BOOK",
        "a" * 10000,
    ])
    def test_resolve_is_total(self, resolver, text):
        """Test that any non-blank input yields a non-empty reply."""
        reply = resolver.resolve(text)
        assert isinstance(reply, str)
        assert reply

    def test_resolve_is_idempotent(self, resolver):
        """Test that resolving twice gives the same answer."""
        text = "What are the benefits?"
        assert resolver.resolve(text) == resolver.resolve(text)

    # Custom tables

    def test_custom_knowledge_base_order(self):
        """Test that a custom table is scanned in its own order."""
        kb = build_knowledge_base([("ai", "short"), ("ai book", "long")])
        resolver = Resolver(knowledge_base=kb, menu_response="menu", fallback_response="fallback")

        assert resolver.resolve("the ai book") == "short"
        assert resolver.resolve("why?") == "menu"
        assert resolver.resolve("nothing") == "fallback"

    def test_topics_in_match_order(self, resolver):
        """Test that topics lists keywords in table order."""
        topics = resolver.topics()
        assert len(topics) == 11
        assert topics[0] == "spec-driven"
        assert topics[1] == "spec"
        assert topics[-1] == "learn"
