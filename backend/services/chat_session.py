"""Chat session state machine: sequences user and bot turns."""
import logging
import uuid
from datetime import datetime
from typing import Any, Callable, List, Optional

from config import REPLY_DELAY_MS
from models.conversation import SessionState, Sender, Turn
from services.knowledge_base import GREETING
from services.resolver import Resolver
from services.scheduler import AsyncioScheduler

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]


def generate_session_id() -> str:
    """Generate a unique session ID."""
    return f"sess_{uuid.uuid4().hex[:12]}"


class ChatSession:
    """
    One conversation between a user and the assistant.

    The session is either idle or awaiting a reply. Submitting text while idle
    appends a user turn and schedules the bot reply after ``reply_delay``
    seconds; further submissions are ignored until the reply lands. Every
    session starts with a bot greeting already in place.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        resolver: Optional[Resolver] = None,
        reply_delay: Optional[float] = None,
        scheduler: Optional[Any] = None,
        greeting: str = GREETING
    ):
        """
        Initialize a chat session.

        Args:
            session_id: Optional ID (generated when omitted)
            resolver: Resolver producing bot replies
            reply_delay: Seconds between a submission and its reply
                (defaults to REPLY_DELAY_MS from config)
            scheduler: Object with call_later(delay, callback) returning a
                cancellable handle (defaults to the running asyncio loop)
            greeting: Text of the seeded bot turn
        """
        self.session_id = session_id or generate_session_id()
        self.resolver = resolver or Resolver()
        self.reply_delay = REPLY_DELAY_MS / 1000 if reply_delay is None else reply_delay
        self.scheduler = scheduler or AsyncioScheduler()

        self._turns: List[Turn] = [self._make_turn(greeting, Sender.BOT)]
        self._pending = False
        self._draft_input = ""
        self._reply_handle = None
        self._listeners: List[Listener] = []
        self._closed = False

        logger.info(f"Started chat session {self.session_id}", extra={"session_id": self.session_id})

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def draft_input(self) -> str:
        return self._draft_input

    def get_state(self) -> SessionState:
        """Return an immutable snapshot of the session."""
        return SessionState(
            turns=tuple(self._turns),
            pending=self._pending,
            draft_input=self._draft_input
        )

    def set_draft(self, text: str) -> None:
        """Record the text currently typed but not yet submitted."""
        self._draft_input = text or ""

    def submit(self, text: str) -> bool:
        """
        Submit user text.

        Blank text, a submission while a reply is pending and a submission to
        a closed session are ignored rather than raised.

        Args:
            text: Raw user input

        Returns:
            True if a user turn was appended and a reply scheduled
        """
        reason = self._rejection_reason(text)
        if reason:
            logger.debug(f"Ignoring submission to session {self.session_id}: {reason}")
            return False

        self._reply_handle = self.scheduler.call_later(
            self.reply_delay,
            lambda: self._resolve_timeout(text)
        )

        turn = self._append_turn(text, Sender.USER)
        self._draft_input = ""
        self._pending = True

        logger.info(
            f"Accepted user turn {turn.id} in session {self.session_id}",
            extra={"session_id": self.session_id, "turn_id": turn.id, "sender": turn.sender.value}
        )
        self._notify()
        return True

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call ``listener`` with a fresh snapshot whenever turns or pending change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Tear the session down, discarding any scheduled reply."""
        if self._closed:
            return

        self._closed = True
        if self._reply_handle is not None:
            self._reply_handle.cancel()
            self._reply_handle = None
            logger.info(f"Cancelled pending reply for session {self.session_id}")
        self._pending = False
        self._listeners.clear()

        logger.info(f"Closed chat session {self.session_id}", extra={"session_id": self.session_id})

    def _rejection_reason(self, text: Optional[str]) -> Optional[str]:
        if self._closed:
            return "session is closed"
        if not text or not text.strip():
            return "blank input"
        if self._pending:
            return "reply already pending"
        return None

    def _resolve_timeout(self, text: str) -> None:
        """Deliver the bot reply for ``text``."""
        self._reply_handle = None
        if self._closed:
            return

        reply = self.resolver.resolve(text)
        turn = self._append_turn(reply, Sender.BOT)
        self._pending = False

        logger.info(
            f"Delivered bot turn {turn.id} in session {self.session_id}",
            extra={"session_id": self.session_id, "turn_id": turn.id, "sender": turn.sender.value}
        )
        self._notify()

    def _append_turn(self, text: str, sender: Sender) -> Turn:
        turn = self._make_turn(text, sender)
        self._turns.append(turn)
        return turn

    def _make_turn(self, text: str, sender: Sender) -> Turn:
        return Turn(
            id=f"turn_{uuid.uuid4().hex[:12]}",
            text=text,
            sender=sender,
            timestamp=datetime.now()
        )

    def _notify(self) -> None:
        state = self.get_state()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Session listener failed in {self.session_id}: {e}", exc_info=True)
