"""Chatbot assistant endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import StreamingResponse

from ...core.errors import ServiceError
from ...schemas import ChatMessageCreate, ChatSessionRead
from ...services.assistant_service import ChatSessionRegistry, get_assistant, get_chat_sessions

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("/sessions", response_model=ChatSessionRead, status_code=status.HTTP_201_CREATED)
def open_session(
    assistant=Depends(get_assistant),
    sessions: ChatSessionRegistry = Depends(get_chat_sessions),
) -> ChatSessionRead:
    """Start a conversation; ``available`` is false when the assistant is down."""

    session_id, greeting, available = sessions.open(assistant)
    return ChatSessionRead(session_id=session_id, greeting=greeting, available=available)


@router.post("/sessions/{session_id}/messages", response_class=StreamingResponse)
def send_message(
    session_id: str,
    payload: ChatMessageCreate,
    sessions: ChatSessionRegistry = Depends(get_chat_sessions),
) -> StreamingResponse:
    """Stream the reply as plain-text chunks."""

    try:
        chunks = sessions.stream_reply(session_id, payload.message.strip())
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def close_session(
    session_id: str,
    sessions: ChatSessionRegistry = Depends(get_chat_sessions),
) -> Response:
    try:
        sessions.close(session_id)
    except ServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
