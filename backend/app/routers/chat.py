"""
Chat router exposing the agent over HTTP and WebSocket.

This router:
1. Receives user messages (POST /chat or one JSON frame per message on /ws)
2. Resolves the session's conversation memory
3. Runs one agent turn in the threadpool
4. Returns the reply with its reasoning log and referenced products
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from agents.agent_executor import AgentExecutor, AgentResult
from agents.deepseek_client import DeepseekClient
from app.config.settings import settings
from app.models.schemas import ChatRequest, ChatResponse, ResponseMessage
from app.services.rate_limiter import RateLimiter
from app.services.session_store import SessionStore
from catalog.search_engine import SearchEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["chat"])

# Singletons, created lazily
_search_engine = None
_agent_executor = None
_session_store = None
_rate_limiter = None


def get_search_engine() -> SearchEngine:
    global _search_engine
    if _search_engine is None:
        _search_engine = SearchEngine()
    return _search_engine


def get_agent_executor() -> AgentExecutor:
    """Get or create AgentExecutor instance."""
    global _agent_executor
    if _agent_executor is None:
        logger.info("Initializing AgentExecutor...")
        deepseek = None
        if settings.llm_api_key:
            deepseek = DeepseekClient(
                api_key=settings.llm_api_key,
                model=settings.llm_model,
                base_url=settings.llm_base_url,
                timeout=settings.llm_timeout,
                max_retries=settings.llm_max_retries,
            )
        else:
            logger.info("No LLM API key configured, running in deterministic mode")
        _agent_executor = AgentExecutor(
            deepseek_client=deepseek,
            synthesis_enabled=settings.llm_synthesis_enabled,
            search_engine=get_search_engine(),
            search_default_limit=settings.search_default_limit,
            search_max_limit=settings.search_max_limit,
        )
    return _agent_executor


def get_session_store() -> SessionStore:
    global _session_store
    if _session_store is None:
        _session_store = SessionStore(
            ttl_seconds=settings.session_ttl_seconds,
            context_window=settings.context_window,
        )
    return _session_store


def get_rate_limiter() -> RateLimiter:
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter(
            max_requests=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
    return _rate_limiter


def _client_key(host: Optional[str]) -> str:
    return host or "unknown"


def enforce_rate_limit(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)) -> None:
    """Reject the request with 429 once the client is over its limit."""
    if not limiter.allow(_client_key(request.client.host if request.client else None)):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests, please slow down.",
        )


def _to_chat_response(session_id: str, result: AgentResult) -> ChatResponse:
    payload = result.to_dict()
    return ChatResponse(
        session_id=session_id,
        message=ResponseMessage(
            content=payload["response"],
            metadata={
                "intent": payload["intent"],
                "decision_source": payload["decision_source"],
                "tool_used": payload["tool_used"],
            },
        ),
        reasoning=payload["reasoning"] or None,
        products=payload["products"] or None,
        error=payload["error"],
    )


async def _run_turn(
    chat_request: ChatRequest,
    executor: AgentExecutor,
    store: SessionStore
) -> ChatResponse:
    seed: Optional[List[Dict[str, str]]] = None
    if chat_request.context:
        seed = [m.model_dump() for m in chat_request.context]

    def turn() -> ChatResponse:
        with store.session(chat_request.session_id, seed=seed) as conversation:
            result = executor.process_user_input(chat_request.message, conversation)
            return _to_chat_response(conversation.conversation_id, result)

    return await run_in_threadpool(turn)


@router.post("/chat", response_model=ChatResponse, dependencies=[Depends(enforce_rate_limit)])
async def chat(
    chat_request: ChatRequest,
    executor: AgentExecutor = Depends(get_agent_executor),
    store: SessionStore = Depends(get_session_store)
) -> ChatResponse:
    """
    Run one agent turn.

    The agent itself never raises; anything escaping here is a transport
    failure and is reported without internals.
    """
    try:
        logger.info(f"Chat request for session {chat_request.session_id or '<new>'}")
        return await _run_turn(chat_request, executor, store)
    except Exception as e:
        logger.error(f"Chat error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error processing request",
        )


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket) -> None:
    """One JSON ChatRequest per frame, one chat_response event per reply."""
    await websocket.accept()
    executor = get_agent_executor()
    store = get_session_store()
    limiter = get_rate_limiter()
    client = _client_key(websocket.client.host if websocket.client else None)

    try:
        while True:
            frame = await websocket.receive_text()
            try:
                chat_request = ChatRequest.model_validate_json(frame)
            except ValidationError as e:
                await websocket.send_json({
                    "event": "error",
                    "data": {"detail": e.errors(include_url=False, include_context=False, include_input=False)},
                })
                continue

            if not limiter.allow(client):
                await websocket.send_json({"event": "error", "data": {"detail": "Too many requests, please slow down."}})
                continue

            response = await _run_turn(chat_request, executor, store)
            await websocket.send_json({"event": "chat_response", "data": response.model_dump(mode="json")})
    except WebSocketDisconnect:
        logger.info(f"WebSocket client {client} disconnected")


@router.get("/health")
async def health_check(
    live: bool = False,
    executor: AgentExecutor = Depends(get_agent_executor),
    engine: SearchEngine = Depends(get_search_engine)
) -> Dict[str, Any]:
    """
    Health check for the agent system.

    Args:
        live: Also ping the LLM API (one billed call)

    Returns:
        Status, gateway configuration (no secrets) and catalog statistics
    """
    health = await run_in_threadpool(executor.check_health, live)
    return {
        "status": "healthy",
        "mode": "gateway_assisted" if health["llm"].get("configured") else "deterministic",
        "tools": health["tools"],
        "llm": health["llm"],
        "catalog": engine.stats(),
    }


@router.get("/tools")
async def list_tools(executor: AgentExecutor = Depends(get_agent_executor)) -> Dict[str, Any]:
    """Tool catalog: name, description and input schema of each tool."""
    return {"tools": executor.registry.describe()}


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)) -> Dict[str, Any]:
    """Summary of a conversation."""
    conversation = store.get(session_id)
    if conversation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return conversation.summary()


@router.delete("/sessions/{session_id}")
async def reset_session(session_id: str, store: SessionStore = Depends(get_session_store)) -> Dict[str, Any]:
    """Forget a conversation."""
    if not store.reset(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return {"session_id": session_id, "status": "reset"}
