"""Decorator utilities for cross-cutting concerns."""
import time
import logging
import functools
from typing import Any, Callable, TypeVar, cast

from files_manager.errors import FilesManagerError

# Setup logging
logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def log_task_execution(kind: str) -> Callable[[F], F]:
    """Decorator to log how long an async task processor took.

    Expected failures (domain errors) log at INFO, anything else at ERROR.
    Payloads are never logged since they carry passwords and file data.

    Args:
        kind: Task kind reported in the log line

    Returns:
        Decorator for an async processor
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except FilesManagerError as e:
                duration = time.perf_counter() - start_time
                logger.info(f"{kind} rejected after {duration:.3f}s: {type(e).__name__}")
                raise
            except Exception as e:
                duration = time.perf_counter() - start_time
                logger.error(f"{kind} failed after {duration:.3f}s: {type(e).__name__}: {e}")
                raise
            duration = time.perf_counter() - start_time
            logger.info(f"{kind} completed in {duration:.3f}s")
            return result
        return cast(F, wrapper)
    return decorator
