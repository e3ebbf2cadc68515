"""
domain.exceptions - Custom exception hierarchy for the to-do assistant.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed. Every error is scoped to a single
conversational turn; none of them is meant to stop the process.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""


class StoreError(DomainError):
    """Raised when the task store is unreachable or rejects an operation."""


class TransientServiceError(DomainError):
    """Raised when the remote model reports a transient overload.

    Retried by the model gateway; never reaches the caller directly.
    """


class ServiceUnavailable(DomainError):
    """Raised when the remote model stays unavailable after every retry."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class ModelServiceError(DomainError):
    """Raised when the remote model call fails for a non-transient reason."""


class ContractViolation(DomainError):
    """Raised when the model's reply breaks the structured reply contract.

    Attributes:
        raw: The offending model reply (or fragment), when available.
    """

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class UnknownToolError(ContractViolation):
    """Raised when the model names a tool that is not registered."""


class ToolInputError(ContractViolation):
    """Raised when an action's input cannot be coerced for its tool."""


class ChainedActionError(ContractViolation):
    """Raised when the model answers an observation with another action."""
