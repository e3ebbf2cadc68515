"""
application.context - Request-scoped session context.

Every layer receives its context explicitly. Two concurrent sessions get two
different SessionContext instances, so nothing is shared between them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4


@dataclass
class SessionContext:
    """Per-session context passed through the agent and its tools.

    Attributes:
        session_id:  Key of the session in the SessionManager.
        request_id:  Unique per turn, for tracing/logging.
    """
    session_id: str
    request_id: str = field(default_factory=lambda: uuid4().hex)

    def new_request(self) -> None:
        """Start a new turn within the same session."""
        self.request_id = uuid4().hex
