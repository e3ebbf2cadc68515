"""
agent.gateway - The single point of contact with the remote chat model.

ModelGateway owns one Conversation and exposes converse(text): append the
text as a user turn, call the model with the whole history (retrying on
transient overload), append the raw reply as a model turn, then parse it.

Conversation history is append-only from here: a reply that later fails to
parse is still recorded, and a failed call leaves the user turn in place.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional

from todo_assistant.agent.conversation import Conversation
from todo_assistant.agent.parser import parse_agent_message
from todo_assistant.domain.exceptions import (
    ModelServiceError,
    ServiceUnavailable,
    TransientServiceError,
)
from todo_assistant.domain.models import AgentMessage
from todo_assistant.domain.ports import ChatModelPort
from todo_assistant.infrastructure.llm.retry import (
    exponential_delays,
    is_transient_overload,
    retry_async,
)

logger = logging.getLogger(__name__)

DEFAULT_RETRY_DELAYS = exponential_delays(3)


class ModelGateway:
    """Wraps the remote model's conversational call for one session."""

    def __init__(
        self,
        llm: ChatModelPort,
        conversation: Conversation,
        retry_delays: Iterable[float] = DEFAULT_RETRY_DELAYS,
        is_transient: Callable[[BaseException], bool] = is_transient_overload,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._llm = llm
        self._conversation = conversation
        self._retry_delays = tuple(retry_delays)
        self._is_transient = is_transient
        self._sleep = sleep

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def max_attempts(self) -> int:
        return len(self._retry_delays) + 1

    async def converse(self, text: str) -> AgentMessage:
        """Send one user turn and return the model's parsed reply.

        Raises:
            ServiceUnavailable: The model stayed overloaded through every retry.
            ModelServiceError:  The model call failed for any other reason.
            ContractViolation:  The reply does not decode into an AgentMessage.
        """
        self._conversation.add_user_turn(text)

        try:
            raw = await retry_async(
                self._invoke_once,
                delays=self._retry_delays,
                is_retryable=lambda e: isinstance(e, TransientServiceError),
                sleep=self._sleep,
                label="Model call",
            )
        except TransientServiceError as e:
            logger.error(
                "Model still overloaded after %d attempt(s): %s",
                self.max_attempts, e,
            )
            raise ServiceUnavailable(
                f"AI model unavailable after {self.max_attempts} attempts: {e}",
                attempts=self.max_attempts,
            ) from e

        self._conversation.add_model_turn(raw)
        logger.debug("Model reply: %s", raw[:200])
        return parse_agent_message(raw)

    async def _invoke_once(self) -> str:
        """One remote call, with provider errors classified for the retry loop."""
        try:
            response = await self._llm.ainvoke(self._conversation.to_messages())
        except Exception as e:
            if self._is_transient(e):
                raise TransientServiceError(str(e)) from e
            logger.exception("Model call failed with a non-transient error")
            raise ModelServiceError(f"AI model call failed: {e}") from e
        return _extract_text(response)


def _extract_text(response: Any) -> str:
    """Return the text of a chat model response.

    Some providers return content as a list of parts ({"type": "text", ...}
    dicts or plain strings) instead of a single string.
    """
    content: Optional[Any] = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return str(content)
