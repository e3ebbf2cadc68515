"""
infrastructure.llm.retry - Bounded retry with deterministic backoff.

retry_async() is parameterised by a delay sequence and a retryable-error
predicate: one initial attempt, then one retry per delay. The last error is
re-raised unchanged once the delays run out, so callers decide what
exhaustion means.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Status codes that mean "overloaded / try again later".
TRANSIENT_STATUS_CODES = frozenset({429, 503, 529})

_TRANSIENT_MARKERS = (
    "overloaded",
    "service unavailable",
    "resource exhausted",
    "resource_exhausted",
    "rate limit",
)


def exponential_delays(
    retries: int,
    base: float = 1.0,
    factor: float = 2.0,
    cap: Optional[float] = None,
) -> tuple[float, ...]:
    """Return ``retries`` delays: base, base*factor, base*factor**2, ...

    >>> exponential_delays(3)
    (1.0, 2.0, 4.0)
    """
    delays = []
    for n in range(max(retries, 0)):
        delay = float(base) * (factor ** n)
        if cap is not None:
            delay = min(delay, cap)
        delays.append(delay)
    return tuple(delays)


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    *,
    delays: Iterable[float],
    is_retryable: Callable[[BaseException], bool],
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    label: str = "operation",
) -> T:
    """Call ``fn`` until it succeeds, a non-retryable error occurs, or the
    delays are exhausted.

    Args:
        fn:           Zero-argument coroutine factory, called once per attempt.
        delays:       Seconds to wait before each retry.
        is_retryable: Predicate deciding whether an error is worth retrying.
        sleep:        Injectable sleep (tests pass a recorder).
        label:        Name used in log lines.

    Raises:
        The first non-retryable error, or the last retryable one.
    """
    pending = list(delays)
    attempt = 0
    while True:
        attempt += 1
        try:
            return await fn()
        except Exception as e:
            if not is_retryable(e) or not pending:
                raise
            delay = pending.pop(0)
            logger.warning(
                "%s failed (attempt %d): %s; retrying in %.1fs",
                label, attempt, e, delay,
            )
            await sleep(delay)


def is_transient_overload(exc: BaseException) -> bool:
    """Best-effort check for a provider's "overloaded, retry later" signal.

    Provider SDKs expose the HTTP status differently: openai/groq errors carry
    ``status_code``, google api_core errors carry ``code``, httpx errors carry
    it on ``response``. Fall back to the message text.
    """
    for candidate in (
        getattr(exc, "status_code", None),
        getattr(exc, "code", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    ):
        if isinstance(candidate, int) and candidate in TRANSIENT_STATUS_CODES:
            return True

    message = str(exc).lower()
    if any(marker in message for marker in _TRANSIENT_MARKERS):
        return True
    return any(f"[{code}" in message or f"{code} " in message for code in ("503", "529"))
