"""
Deadlines for store and crypto calls.

Anything that can block on I/O or burn CPU (database round-trips, bcrypt)
is awaited through one of these helpers so a stuck dependency surfaces as
``Timeout`` / ``StoreUnavailable`` instead of a hung request.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

from config.settings import config
from core.errors import StoreUnavailable, Timeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_deadline(aw: Awaitable[T], seconds: float, operation: str) -> T:
    """Await ``aw`` for at most ``seconds``; raise ``Timeout`` otherwise."""
    try:
        return await asyncio.wait_for(aw, timeout=seconds)
    except asyncio.TimeoutError:
        logger.warning("%s timed out after %.1fs", operation, seconds)
        raise Timeout(f"{operation} timed out") from None


async def run_crypto(func: Callable[..., T], *args: Any) -> T:
    """Run a CPU-bound crypto call in a worker thread under the crypto deadline."""
    return await with_deadline(
        asyncio.to_thread(func, *args),
        config.crypto_timeout_seconds,
        func.__name__,
    )


def store_call(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Decorator for data-store helpers.

    Applies the store deadline and turns driver connectivity failures into
    ``StoreUnavailable``.  Integrity errors and domain errors pass through.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await with_deadline(
                func(*args, **kwargs),
                config.store_timeout_seconds,
                func.__name__,
            )
        except (OperationalError, InterfaceError) as exc:
            logger.error("%s: store unavailable: %s", func.__name__, exc)
            raise StoreUnavailable() from exc
        except DBAPIError as exc:
            if exc.connection_invalidated:
                logger.error("%s: connection lost: %s", func.__name__, exc)
                raise StoreUnavailable() from exc
            raise

    return wrapper
