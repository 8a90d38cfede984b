"""Session registry for the chat HTTP service."""
import logging
import time
from typing import Any, Callable, Dict, Optional

from config import SESSION_TTL_SECONDS, MAX_SESSIONS
from services.chat_session import ChatSession
from services.resolver import Resolver

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Keeps live chat sessions in memory. Nothing outlives the process.

    Sessions idle longer than ``ttl_seconds`` are closed whenever a session is
    created or looked up, and creating a session beyond ``max_sessions``
    closes the least recently used one. Eviction always goes through
    ``ChatSession.close()`` so pending replies are cancelled.
    """

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        reply_delay: Optional[float] = None,
        scheduler: Optional[Any] = None,
        ttl_seconds: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the registry.

        Args:
            resolver: Resolver shared by every session (it holds no state)
            reply_delay: Reply delay in seconds for new sessions
            scheduler: Scheduler for new sessions (defaults to asyncio)
            ttl_seconds: Idle time before a session is evicted
                (defaults to SESSION_TTL_SECONDS; 0 disables idle eviction)
            max_sessions: Live session cap (defaults to MAX_SESSIONS)
            clock: Monotonic time source in seconds

        Raises:
            ValueError: If max_sessions is less than 1
        """
        self.resolver = resolver or Resolver()
        self.reply_delay = reply_delay
        self.scheduler = scheduler
        self.ttl_seconds = SESSION_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.max_sessions = MAX_SESSIONS if max_sessions is None else max_sessions
        if self.max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")

        self._clock = clock
        self._sessions: Dict[str, ChatSession] = {}
        self._last_activity: Dict[str, float] = {}
        logger.info(
            f"SessionRegistry initialized (ttl={self.ttl_seconds}s, max_sessions={self.max_sessions})"
        )

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(self) -> ChatSession:
        """Create and register a new session, evicting to stay under the cap."""
        self.evict_idle()
        while len(self._sessions) >= self.max_sessions:
            oldest_id = min(self._last_activity, key=self._last_activity.get)
            logger.info(f"Session limit {self.max_sessions} reached, evicting {oldest_id}")
            self.close_session(oldest_id)

        session = ChatSession(
            resolver=self.resolver,
            reply_delay=self.reply_delay,
            scheduler=self.scheduler
        )
        self._sessions[session.session_id] = session
        self._last_activity[session.session_id] = self._clock()
        logger.info(f"Created new session: {session.session_id}")
        return session

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        """Return the live session with this ID, if any, and mark it active."""
        self.evict_idle()
        session = self._sessions.get(session_id)
        if session is not None:
            self._last_activity[session_id] = self._clock()
        return session

    def get_or_create_session(self, session_id: Optional[str] = None) -> ChatSession:
        """
        Get existing session or create new one.

        Args:
            session_id: Optional existing session ID

        Returns:
            The live session, or a fresh one when the ID is missing or unknown
        """
        if session_id:
            session = self.get_session(session_id)
            if session is not None:
                logger.info(f"Retrieved existing session: {session_id}")
                return session
            logger.warning(f"Session {session_id} not found, creating new one")

        return self.create_session()

    def evict_idle(self) -> int:
        """
        Close sessions idle for longer than the TTL.

        Returns:
            Number of sessions evicted
        """
        if self.ttl_seconds <= 0:
            return 0

        cutoff = self._clock() - self.ttl_seconds
        expired = [sid for sid, last in self._last_activity.items() if last < cutoff]
        for session_id in expired:
            logger.info(f"Evicting idle session {session_id}")
            self.close_session(session_id)
        return len(expired)

    def close_session(self, session_id: str) -> bool:
        """
        Close and forget a session.

        Returns:
            True if the session existed
        """
        self._last_activity.pop(session_id, None)
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        return True

    def close_all(self) -> None:
        """Close every session, cancelling pending replies."""
        count = len(self._sessions)
        for session in list(self._sessions.values()):
            session.close()
        self._sessions.clear()
        self._last_activity.clear()
        logger.info(f"Closed {count} sessions")
