"""Main entry point for the AI Book Assistant API."""
import asyncio
import json
import logging
from typing import Optional
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from config import PORT, LOG_LEVEL, LOG_FORMAT, CORS_ORIGINS, SERVICE_NAME, SERVICE_VERSION
from logger import setup_logging
from models.api import (
    MessageRequest, ResolveResponse, SessionModel, SessionRequest, SubmitResponse, TopicsResponse,
    TurnModel
)
from models.conversation import Sender
from services.chat_session import ChatSession
from services.resolver import Resolver
from services.session_registry import SessionRegistry

if LOG_FORMAT == "json":
    setup_logging(LOG_LEVEL)

# Initialize logging
logger = logging.getLogger(__name__)

# Extra seconds a stream waits for a reply beyond the session's reply delay
STREAM_GRACE_SECONDS = 5.0

# Initialize FastAPI app
app = FastAPI(
    title="AI Book Assistant",
    description="Keyword-driven assistant for the AI & Spec-Driven Development book",
    version=SERVICE_VERSION
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
resolver: Resolver = None
session_registry: SessionRegistry = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global resolver, session_registry

    logger.info("Initializing AI Book Assistant services...")

    resolver = Resolver()
    logger.info(f"Initialized Resolver with {len(resolver.topics())} topics")

    session_registry = SessionRegistry(resolver=resolver)
    logger.info("All services initialized successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Tear down live sessions so no scheduled reply fires after shutdown."""
    if session_registry is not None:
        session_registry.close_all()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "AI Book Assistant API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION
    }


@app.get("/topics", response_model=TopicsResponse)
async def topics() -> TopicsResponse:
    """List knowledge base keywords in match order."""
    return TopicsResponse(topics=list(resolver.topics()))


@app.post("/resolve", response_model=ResolveResponse)
async def resolve_endpoint(request: MessageRequest) -> ResolveResponse:
    """Resolve one input without touching any session."""
    resolution = resolver.match(request.text)
    return ResolveResponse(
        response=resolution.response,
        rule_triggered=resolution.rule_triggered,
        keyword=resolution.keyword
    )


@app.post("/sessions", response_model=SessionModel, status_code=201)
async def create_session(request: Optional[SessionRequest] = None) -> SessionModel:
    """
    Start a chat session seeded with the greeting, or resume a live one.

    Args:
        request: Optional body with the session_id to resume; an unknown or
            evicted ID starts a new session with a fresh ID

    Returns:
        SessionModel of the resumed or newly created session
    """
    session_id = request.session_id if request else None
    session = session_registry.get_or_create_session(session_id)
    return SessionModel.from_state(session.session_id, session.get_state())


@app.get("/sessions/{session_id}", response_model=SessionModel)
async def get_session(session_id: str) -> SessionModel:
    """Return the current state of a session."""
    session = _require_session(session_id)
    return SessionModel.from_state(session.session_id, session.get_state())


@app.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str) -> Response:
    """Tear a session down, cancelling any pending reply."""
    if not session_registry.close_session(session_id):
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return Response(status_code=204)


@app.post("/sessions/{session_id}/messages", response_model=SubmitResponse)
async def submit_message(session_id: str, request: MessageRequest) -> SubmitResponse:
    """
    Submit user text to a session.

    The bot reply is delivered after the session's reply delay; poll
    GET /sessions/{session_id} or use the streaming variant to receive it.
    Blank text, or text sent while a reply is pending, is ignored and
    reported as ``accepted: false``.

    Args:
        session_id: ID of the session
        request: MessageRequest with the user text

    Returns:
        SubmitResponse with the acceptance flag and session state

    Raises:
        HTTPException: 404 for unknown sessions, 500 for unexpected failures
    """
    session = _require_session(session_id)

    try:
        accepted = session.submit(request.text)
        return SubmitResponse(
            accepted=accepted,
            session=SessionModel.from_state(session.session_id, session.get_state())
        )
    except Exception as e:
        logger.error(f"Unexpected error submitting to session {session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(e)}"
        )


@app.post("/sessions/{session_id}/messages/stream")
async def submit_message_stream(session_id: str, request: MessageRequest):
    """
    Submit user text and stream the exchange as Server-Sent Events (SSE).

    Returns:
        StreamingResponse with SSE format:
        - data: {type: "turn", data: {...}} for the user turn, then the bot turn
        - data: {type: "done", data: {...}} with the final session state
        - data: {type: "rejected", data: {...}} if the submission was ignored
        - data: {type: "error", error: {...}} with code SESSION_CLOSED if the
          session was torn down before the stream started, REPLY_TIMEOUT if
          the reply never arrives (e.g. the session is deleted mid-stream)

    Raises:
        HTTPException: 404 for unknown sessions, 500 if the submission fails
    """
    session = _require_session(session_id)
    known_turns = len(session.get_state().turns)

    try:
        accepted = session.submit(request.text)
    except Exception as e:
        logger.error(f"Unexpected error submitting to session {session_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(e)}"
        )

    async def generate_stream():
        """Generator function for streaming the exchange."""
        nonlocal known_turns

        if not accepted:
            yield _sse_event("rejected", _session_payload(session))
            return

        # Subscribe only once the body is being sent; no await until the
        # snapshot below, so no notification can slip between the two
        queue: asyncio.Queue = asyncio.Queue()
        unsubscribe = session.subscribe(queue.put_nowait)

        try:
            state = session.get_state()
            timeout = session.reply_delay + STREAM_GRACE_SECONDS
            while True:
                for turn in state.turns[known_turns:]:
                    yield _sse_event("turn", TurnModel.from_turn(turn).model_dump(mode="json"))
                known_turns = len(state.turns)

                if not state.pending and state.last_turn.sender == Sender.BOT:
                    yield _sse_event("done", _session_payload(session))
                    return
                if session.closed:
                    yield _sse_error("SESSION_CLOSED", "Session was closed before it replied")
                    return

                try:
                    state = await asyncio.wait_for(queue.get(), timeout=timeout)
                except asyncio.TimeoutError:
                    logger.warning(f"No reply from session {session.session_id} within {timeout:.1f}s")
                    yield _sse_error("REPLY_TIMEOUT", "Session did not deliver a reply")
                    return
        except Exception as e:
            logger.error(f"Unexpected error during streaming: {e}", exc_info=True)
            yield _sse_error("UNKNOWN_ERROR", f"Internal server error: {str(e)}")
        finally:
            unsubscribe()

    return StreamingResponse(
        generate_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no"  # Disable buffering in nginx
        }
    )


def _require_session(session_id: str) -> ChatSession:
    session = session_registry.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return session


def _session_payload(session: ChatSession) -> dict:
    return SessionModel.from_state(session.session_id, session.get_state()).model_dump(mode="json")


def _sse_event(event_type: str, data: dict) -> bytes:
    return f"data: {json.dumps({'type': event_type, 'data': data})}\n\n".encode('utf-8')


def _sse_error(code: str, message: str) -> bytes:
    error_data = {
        "type": "error",
        "error": {
            "code": code,
            "message": message
        }
    }
    return f"data: {json.dumps(error_data)}\n\n".encode('utf-8')


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting AI Book Assistant API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
