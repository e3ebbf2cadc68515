"""
domain.entities - Persistence-aware types (have IDs).

Decoupled from any persistence strategy: no SQL concerns, no DB imports.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Task:
    """A single to-do item. The id is assigned by the store."""
    id: int
    todo: str

    def to_dict(self) -> dict[str, Any]:
        """Wire shape shared by the model observations and the REST API."""
        return asdict(self)
