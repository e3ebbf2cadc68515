"""Chat endpoint: one request runs one full agent turn."""

import logging

from fastapi import APIRouter, Depends

from todo_assistant.adapters.rest.dependencies import get_session_manager
from todo_assistant.adapters.rest.schemas import ChatBody, ChatOut, ErrorOut
from todo_assistant.application.sessions import SessionManager

router = APIRouter(tags=["chat"])
logger = logging.getLogger(__name__)


@router.post(
    "/chat",
    response_model=ChatOut,
    responses={500: {"model": ErrorOut}, 503: {"model": ErrorOut}},
)
async def chat(
    body: ChatBody,
    sessions: SessionManager = Depends(get_session_manager),
):
    """Run one agent turn and return the model's reply.

    Blocks until the turn completes, including any model retries. Failures
    are turned into JSON error responses by the app's exception handlers.
    """
    logger.info("POST /chat session=%s | %s", body.session_id, body.message[:200])
    result = await sessions.run_turn(body.session_id, body.message)
    return ChatOut(reply=result.reply)
