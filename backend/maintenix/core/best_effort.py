"""Result-discarding wrapper for best-effort side effects.

Assignment emails and blob deletes must never change the outcome of the
write that triggered them. Callers hand the side effect to
run_best_effort() so the swallow-and-log contract is explicit where the
call is made.
"""

from collections.abc import Awaitable, Callable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


async def run_best_effort(
    operation: Callable[[], Awaitable[Any]],
    event: str,
    **context: Any,
) -> bool:
    """Await ``operation()`` and report whether it succeeded.

    Any exception is logged as a warning under ``event`` (with the given
    context) and discarded.

    Returns:
        True if the operation completed, False if it raised.
    """
    try:
        await operation()
    except Exception as exc:
        logger.warning(
            event,
            error=str(exc),
            error_type=type(exc).__name__,
            **context,
        )
        return False
    return True
