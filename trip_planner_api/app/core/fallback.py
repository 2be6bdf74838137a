"""
Ordered fallback over fallible async operations.

``first_success`` awaits a sequence of operations one after another
and returns the first result that is accepted.  Each attempt runs
under ``asyncio.wait_for``, so an operation still pending at the
timeout is cancelled before the next one starts.  Operations are never
retried within one call.  When nothing succeeds the ``fallback``
callable provides the result.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

Operation = Tuple[str, Callable[[], Awaitable[T]]]


async def first_success(
    operations: Sequence[Operation],
    *,
    timeout: float,
    fallback: Callable[[], T],
    accept: Optional[Callable[[T], bool]] = None,
) -> T:
    """Return the first accepted result of ``operations`` or ``fallback()``.

    Parameters
    ----------
    operations : sequence of (name, factory)
        ``factory`` is called lazily to create the awaitable; ``name``
        is only used for logging.
    timeout : float
        Seconds allowed for each operation independently.
    fallback : callable
        Produces the result when every operation fails.
    accept : callable, optional
        Predicate applied to each result; rejected results count as
        failures.
    """
    for name, factory in operations:
        try:
            result = await asyncio.wait_for(factory(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Provider timed out after %.1fs: %s", timeout, name)
            continue
        except Exception as exc:
            logger.warning("Provider failed: %s (%s)", name, exc)
            continue
        if accept is None or accept(result):
            return result
        logger.warning("Provider returned an unusable payload: %s", name)
    return fallback()
