"""Unit tests for the knowledge base."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import dataclasses
import pytest
from models.knowledge import KnowledgeEntry
from services.knowledge_base import (
    KNOWLEDGE_BASE, KnowledgeBaseError, build_knowledge_base, GREETING, MENU_RESPONSE, FALLBACK_RESPONSE
)


def test_reference_table_order():
    """Test that the reference table keeps its match order."""
    assert [entry.keyword for entry in KNOWLEDGE_BASE] == [
        "spec-driven",
        "spec",
        "ai generation",
        "how to start",
        "examples",
        "testing",
        "best practices",
        "tools",
        "benefits",
        "ai book",
        "learn",
    ]


def test_reference_keywords_are_lowercase_and_unique():
    """Test the invariants of the reference table."""
    keywords = [entry.keyword for entry in KNOWLEDGE_BASE]
    assert all(keyword == keyword.lower() for keyword in keywords)
    assert len(set(keywords)) == len(keywords)


def test_spec_driven_precedes_spec():
    """Test that the longer overlapping keyword is scanned first."""
    keywords = [entry.keyword for entry in KNOWLEDGE_BASE]
    assert keywords.index("spec-driven") < keywords.index("spec")


def test_fixed_texts_are_non_empty():
    """Test the greeting, menu and fallback texts."""
    assert GREETING.startswith("Hi! I'm the AI Book Assistant.")
    assert MENU_RESPONSE.startswith("Great question!")
    assert FALLBACK_RESPONSE.startswith("That's interesting!")


def test_entries_are_immutable():
    """Test that a KnowledgeEntry cannot be modified."""
    entry = KNOWLEDGE_BASE[0]
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.keyword = "other"


def test_build_preserves_order():
    """Test that build_knowledge_base keeps the given order."""
    kb = build_knowledge_base([("b", "2"), ("a", "1")])
    assert kb == (KnowledgeEntry("b", "2"), KnowledgeEntry("a", "1"))


def test_build_rejects_duplicate_keyword():
    """Test that duplicate keywords are refused."""
    with pytest.raises(KnowledgeBaseError, match="Duplicate keyword"):
        build_knowledge_base([("spec", "one"), ("spec", "two")])


def test_build_rejects_uppercase_keyword():
    """Test that keywords must be stored lowercase."""
    with pytest.raises(KnowledgeBaseError, match="lowercase"):
        build_knowledge_base([("Spec", "one")])


def test_build_rejects_empty_keyword_or_response():
    """Test that empty keywords and responses are refused."""
    with pytest.raises(KnowledgeBaseError):
        build_knowledge_base([("", "one")])
    with pytest.raises(KnowledgeBaseError):
        build_knowledge_base([("spec", "")])


def test_knowledge_base_error_is_value_error():
    """Test that KnowledgeBaseError can be caught as ValueError."""
    assert issubclass(KnowledgeBaseError, ValueError)
