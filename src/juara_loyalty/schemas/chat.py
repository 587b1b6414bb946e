"""Pydantic schemas for the chatbot assistant."""

from pydantic import BaseModel, Field


class ChatSessionRead(BaseModel):
    session_id: str
    greeting: str
    available: bool


class ChatMessageCreate(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)
