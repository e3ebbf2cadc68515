"""
agent.conversation - Per-session, append-only conversation.

Holds plain Turn records and converts them to LangChain messages for every
model call. The system turn is seeded once and is never trimmed or mutated.
"""

from __future__ import annotations

import logging

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from todo_assistant.domain.models import MODEL_ROLE, SYSTEM_ROLE, USER_ROLE, Turn

logger = logging.getLogger(__name__)


class Conversation:
    """Ordered (role, content) history for one session.

    NOT global. Each session gets its own instance, owned by its
    ModelGateway.
    """

    def __init__(self, system_prompt: str):
        self._turns: list[Turn] = [Turn(role=SYSTEM_ROLE, content=system_prompt)]

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def system_prompt(self) -> str:
        return self._turns[0].content

    def __len__(self) -> int:
        return len(self._turns)

    def add_user_turn(self, content: str) -> None:
        self._turns.append(Turn(role=USER_ROLE, content=content))

    def add_model_turn(self, content: str) -> None:
        self._turns.append(Turn(role=MODEL_ROLE, content=content))

    def checkpoint(self) -> int:
        """Return a mark that rollback() can return to."""
        return len(self._turns)

    def rollback(self, mark: int) -> int:
        """Drop every turn appended after ``mark``. Returns how many were dropped.

        The system turn always survives.
        """
        mark = max(mark, 1)
        dropped = len(self._turns) - mark
        if dropped > 0:
            del self._turns[mark:]
            logger.info("Rolled back %d conversation turn(s)", dropped)
        return max(dropped, 0)

    def to_messages(self) -> list[BaseMessage]:
        """Render the history as LangChain messages for a chat model call."""
        messages: list[BaseMessage] = []
        for turn in self._turns:
            if turn.role == SYSTEM_ROLE:
                messages.append(SystemMessage(content=turn.content))
            elif turn.role == USER_ROLE:
                messages.append(HumanMessage(content=turn.content))
            else:
                messages.append(AIMessage(content=turn.content))
        return messages
