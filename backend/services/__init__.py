"""Services for the AI Book Assistant."""
from .knowledge_base import KNOWLEDGE_BASE, KnowledgeBaseError, build_knowledge_base
from .resolver import Resolver, Resolution
from .scheduler import AsyncioScheduler
from .chat_session import ChatSession
from .session_registry import SessionRegistry

__all__ = ['KNOWLEDGE_BASE', 'KnowledgeBaseError', 'build_knowledge_base', 'Resolver', 'Resolution', 'AsyncioScheduler', 'ChatSession', 'SessionRegistry']
