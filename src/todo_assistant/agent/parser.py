"""
agent.parser - Decode a raw model reply into an AgentMessage.

Anything that is not exactly one of the two AgentMessage variants raises
ContractViolation. Markdown code fences are tolerated because several
models wrap JSON in ```json blocks even when told not to.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import TypeAdapter, ValidationError

from todo_assistant.domain.exceptions import ContractViolation
from todo_assistant.domain.models import AgentMessage

logger = logging.getLogger(__name__)

_AGENT_MESSAGE = TypeAdapter(AgentMessage)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any."""
    text = raw.strip()
    text = _FENCE_OPEN.sub("", text)
    text = _FENCE_CLOSE.sub("", text)
    return text.strip()


def parse_agent_message(raw: str) -> AgentMessage:
    """Parse the model's raw reply text.

    Raises:
        ContractViolation: The reply is not JSON, or does not match either
            variant of the AgentMessage union.
    """
    text = strip_code_fences(raw)
    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("Model reply is not JSON: %s", raw[:200])
        raise ContractViolation(f"Model reply is not valid JSON: {e}", raw=raw) from e

    try:
        return _AGENT_MESSAGE.validate_python(payload)
    except ValidationError as e:
        logger.warning("Model reply does not match the reply contract: %s", raw[:200])
        raise ContractViolation(
            f"Model reply does not match the action/output contract: {e.error_count()} error(s)",
            raw=raw,
        ) from e
