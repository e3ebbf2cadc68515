"""Pydantic models for REST API request/response validation."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from todo_assistant.application.sessions import DEFAULT_SESSION_ID


# --- Todos ---

class TodoOut(BaseModel):
    id: int
    todo: str


# --- Chat ---

class ChatBody(BaseModel):
    message: str = Field(..., min_length=1)
    session_id: str = Field(default=DEFAULT_SESSION_ID, min_length=1, max_length=128)


class ChatOut(BaseModel):
    reply: str


# --- Errors ---

class ErrorOut(BaseModel):
    error: str
    message: Optional[str] = None
    details: Optional[str] = None
