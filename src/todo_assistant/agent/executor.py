"""
agent.executor - Agent execution engine.

Runs one conversational turn as a small state machine:

    AWAITING_USER_TEXT -> MODEL_REPLIED -> OUTPUT
                                        -> DISPATCHING -> MODEL_REPLIED_TO_OBSERVATION -> OUTPUT

A turn makes one gateway exchange when the model answers directly and
exactly two when it asks for an action. The protocol is one-hop: a second
action in reply to an observation is a contract violation.

No component construction, no global state. Everything the turn touches
(conversation, tools) is injected by the factory.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from todo_assistant.agent.conversation import Conversation
from todo_assistant.agent.gateway import ModelGateway
from todo_assistant.agent.tools.registry import ToolRegistry
from todo_assistant.application.context import SessionContext
from todo_assistant.domain.exceptions import ChainedActionError
from todo_assistant.domain.models import ActionMessage, AgentMessage, OutputMessage

logger = logging.getLogger(__name__)


class TurnState(str, Enum):
    AWAITING_USER_TEXT = "awaiting_user_text"
    MODEL_REPLIED = "model_replied"
    DISPATCHING = "dispatching"
    MODEL_REPLIED_TO_OBSERVATION = "model_replied_to_observation"
    OUTPUT = "output"


@dataclass
class TurnResult:
    """Outcome of one turn.

    reply:        Natural-language text for the user.
    action:       The action dispatched this turn, if any.
    observation:  What the tool returned, if an action ran.
    exchanges:    Number of gateway round-trips (1 or 2).
    """
    reply: str
    action: Optional[ActionMessage] = None
    observation: Any = None
    exchanges: int = 1


def format_observation(value: Any) -> str:
    """The fixed wrapper the model receives after a tool runs."""
    return json.dumps({"observation": value})


class AgentExecutor:
    """Runs the one-hop LLM + tool loop for a single session.

    Constructed by factory.py with all dependencies injected.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        tools: ToolRegistry,
        rollback_on_failure: bool = False,
    ):
        self._gateway = gateway
        self._tools = tools
        self._rollback_on_failure = rollback_on_failure

    @property
    def conversation(self) -> Conversation:
        return self._gateway.conversation

    async def run(self, ctx: SessionContext, user_input: str) -> TurnResult:
        """Process a user message and return the turn's result.

        Args:
            ctx:        Session context (session id, request id).
            user_input: The user's message text.

        Raises:
            ContractViolation, ServiceUnavailable, ModelServiceError, StoreError:
                The turn failed; nothing was returned to the user.
        """
        logger.info(
            "Agent processing (session=%s, request=%s): %s",
            ctx.session_id, ctx.request_id, user_input[:80],
        )
        mark = self.conversation.checkpoint()
        try:
            result = await self._run_turn(ctx, user_input)
        except (Exception, asyncio.CancelledError):
            if self._rollback_on_failure:
                self.conversation.rollback(mark)
            raise

        logger.info(
            "Agent finished (session=%s): %d exchange(s), action=%s, reply starts with: %s",
            ctx.session_id,
            result.exchanges,
            result.action.function if result.action else None,
            result.reply[:80],
        )
        return result

    async def _run_turn(self, ctx: SessionContext, user_input: str) -> TurnResult:
        state = TurnState.AWAITING_USER_TEXT
        message: AgentMessage = await self._gateway.converse(user_input)
        state = TurnState.MODEL_REPLIED
        logger.debug("Turn %s: %s (%s)", ctx.request_id, state.value, message.type)

        if isinstance(message, OutputMessage):
            return TurnResult(reply=message.output, exchanges=1)

        action = message
        state = TurnState.DISPATCHING
        logger.debug("Turn %s: %s %s(%r)", ctx.request_id, state.value, action.function, action.input)
        result = await self._tools.dispatch(action, ctx)

        follow_up = await self._gateway.converse(format_observation(result.observation))
        state = TurnState.MODEL_REPLIED_TO_OBSERVATION
        logger.debug("Turn %s: %s (%s)", ctx.request_id, state.value, follow_up.type)

        if isinstance(follow_up, ActionMessage):
            logger.warning(
                "Model chained a second action (%s) after an observation; "
                "only one action per turn is supported",
                follow_up.function,
            )
            raise ChainedActionError(
                f"Model requested a second action '{follow_up.function}' in one turn",
                raw=follow_up.model_dump_json(),
            )

        return TurnResult(
            reply=follow_up.output,
            action=action,
            observation=result.observation,
            exchanges=2,
        )
