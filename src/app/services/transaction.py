"""
Retry-on-conflict transaction runner.

Runs one business operation inside a fresh tenant unit of work, commits it,
and repeats the whole attempt when the storage layer reports a transient
conflict. Business errors are never retried.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Type, TypeVar

from src.app.services.unit_of_work import TenantUnitOfWork
from src.domain.errors import ConflictError, FulfillmentConflict, TransientConflict

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_INITIAL_DELAY = 0.05


async def run_atomic(
    uow_factory: Callable[[], TenantUnitOfWork],
    operation: Callable[[TenantUnitOfWork], Awaitable[T]],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    conflict_error: Type[ConflictError] = FulfillmentConflict,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    label: str = "transaction",
) -> T:
    """
    Execute operation(uow) atomically with bounded retries.

    Args:
        uow_factory: builds a new, not yet entered, unit of work per attempt
        operation: business logic; reads and writes only through the uow
        max_attempts: total attempts including the first one
        initial_delay: backoff before the second attempt, doubled afterwards
        conflict_error: raised once every attempt hit a transient conflict
        sleep: awaitable used for backoff
        label: operation name for logs

    Returns:
        Whatever operation returned on the committed attempt

    Raises:
        StorefrontError subclasses from operation, unchanged
        conflict_error when the retry budget is spent
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    delay = initial_delay
    last_conflict = None

    for attempt in range(1, max_attempts + 1):
        uow = uow_factory()
        async with uow:
            try:
                result = await operation(uow)
                await uow.commit()
                if attempt > 1:
                    logger.info(f"{label} committed on attempt {attempt}/{max_attempts}")
                return result
            except Exception as exc:
                if not isinstance(exc, TransientConflict) and not uow.is_transient(exc):
                    raise
                last_conflict = exc

        logger.warning(
            f"{label} hit a transient conflict on attempt {attempt}/{max_attempts}: {last_conflict}"
        )
        if attempt < max_attempts:
            await sleep(delay)
            delay *= 2

    logger.error(f"{label} failed after {max_attempts} attempts due to concurrent modifications")
    raise conflict_error(max_attempts) from last_conflict
