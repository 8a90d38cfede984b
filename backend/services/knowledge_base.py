"""
Knowledge base for the AI Book Assistant.

Holds the ordered keyword → response rule table together with the fixed
greeting, menu and fallback texts. Entry order decides match priority, so the
table is an explicit tuple rather than a mapping.
"""
import logging
from typing import Iterable, Tuple

from models.knowledge import KnowledgeEntry

logger = logging.getLogger(__name__)


class KnowledgeBaseError(ValueError):
    """Raised when a rule table violates the knowledge base invariants."""


GREETING = (
    "Hi! I'm the AI Book Assistant. I can help you learn about AI & "
    "Spec-Driven Software Development. What would you like to know?"
)

MENU_RESPONSE = (
    "Great question! I can help you with: specs, AI generation, spec-driven "
    "development, how to start, examples, testing, best practices, tools, "
    "benefits, the AI book, and learning resources. What interests you?"
)

FALLBACK_RESPONSE = (
    "That's interesting! I can provide more specific help with topics like "
    "specifications, AI code generation, spec-driven development, testing "
    "strategies, and best practices. Feel free to ask!"
)

# "spec-driven" must stay ahead of "spec", which it contains
REFERENCE_RULES: Tuple[Tuple[str, str], ...] = (
    (
        "spec-driven",
        "Spec-Driven Development is a modern approach where you write clear "
        "specifications and AI generates the code. This creates "
        "self-documenting systems with automatic testing."
    ),
    (
        "spec",
        "A specification is a formal, machine-readable description of what "
        "your code should do. It includes inputs, outputs, rules, and "
        "examples. Specs serve as the source of truth for your system."
    ),
    (
        "ai generation",
        "AI code generation uses machine learning models to automatically "
        "create implementations from your specifications. This saves time and "
        "reduces boilerplate code writing."
    ),
    (
        "how to start",
        "To get started with spec-driven development: 1) Write a clear "
        "specification with examples, 2) Use an AI assistant to generate "
        "code, 3) Run the auto-generated tests, 4) Review and deploy."
    ),
    (
        "examples",
        "Check the documentation for practical examples! We have examples of "
        "functions, API endpoints, and data processing pipelines. Visit "
        "/docs/ai-spec-driven-development for detailed walkthroughs."
    ),
    (
        "testing",
        "Tests are auto-generated from your specification examples. Each "
        "example in your spec becomes a test case, ensuring your generated "
        "code meets requirements."
    ),
    (
        "best practices",
        "Best practices include: Write clear specs with concrete examples, "
        "Include edge cases and error conditions, Use proper data types and "
        "constraints, Iterate on specs when needed."
    ),
    (
        "tools",
        "You can use AI assistants like Claude, ChatGPT, Copilot, and others. "
        "We provide guidance on how to structure prompts for each tool."
    ),
    (
        "benefits",
        "Benefits of spec-driven + AI development include: Fewer bugs, "
        "Self-documenting code, Faster development, Clear requirements, "
        "Better code quality, and easier onboarding."
    ),
    (
        "ai book",
        "Welcome to AI-Book-by-Docusaurus! This is a comprehensive guide to "
        "AI & Spec-Driven Software Development. Explore our documentation, "
        "chapters, and blog posts."
    ),
    (
        "learn",
        "Start by reading the Introduction (/docs/intro) or jump to AI & "
        "Spec-Driven Development (/docs/ai-spec-driven-development). We also "
        "have 5 chapters covering different aspects."
    ),
)


def build_knowledge_base(rules: Iterable[Tuple[str, str]]) -> Tuple[KnowledgeEntry, ...]:
    """
    Build an ordered knowledge base from (keyword, response) pairs.

    Args:
        rules: Pairs in match-priority order

    Returns:
        Tuple of KnowledgeEntry preserving the given order

    Raises:
        KnowledgeBaseError: If a keyword is empty, not lowercase or repeated,
            or a response is empty
    """
    entries = []
    seen = set()

    for keyword, response in rules:
        if not keyword:
            raise KnowledgeBaseError("Knowledge base keywords cannot be empty")
        if keyword != keyword.lower():
            raise KnowledgeBaseError(f"Keyword must be lowercase: {keyword!r}")
        if keyword in seen:
            raise KnowledgeBaseError(f"Duplicate keyword: {keyword!r}")
        if not response:
            raise KnowledgeBaseError(f"Keyword {keyword!r} has an empty response")

        seen.add(keyword)
        entries.append(KnowledgeEntry(keyword=keyword, response=response))

    logger.debug(f"Built knowledge base with {len(entries)} entries")
    return tuple(entries)


KNOWLEDGE_BASE: Tuple[KnowledgeEntry, ...] = build_knowledge_base(REFERENCE_RULES)
