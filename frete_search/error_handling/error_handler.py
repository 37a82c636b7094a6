"""
Error handler with fallback and degradation logic for the freight search engine.

Implements the auth -> public fallback for the listings source and graceful
degradation for enrichment data (registry, geocoding) that must never block
the listing view.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Tuple, Type

import aiohttp

from .errors import FreteSearchError


# Configure logging
logger = logging.getLogger(__name__)


# Failures that count as "transient collaborator failure"
TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (
    FreteSearchError,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ValueError,
)


class ErrorHandler:
    """
    Error handler with fallback and degradation strategies.

    Nothing handled here is fatal to the hosting application: primary content
    failures surface as exceptions after a single fallback, enrichment failures
    degrade to a default value.

    Attributes:
        transient_errors: Exception types treated as transient failures
    """

    def __init__(
        self,
        transient_errors: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS
    ):
        """
        Initialize error handler.

        Args:
            transient_errors: Exception types caught by ``with_fallback`` and
                ``degrade`` (default: collaborator and network failures)
        """
        self.transient_errors = transient_errors

    async def with_fallback(
        self,
        primary: Callable[[], Awaitable[Any]],
        fallback: Callable[[], Awaitable[Any]]
    ) -> Any:
        """
        Run ``primary``; on a transient failure, log it and run ``fallback``.

        There is no further retry: if the fallback fails, its exception
        propagates to the caller.

        Args:
            primary: Async callable tried first
            fallback: Async callable tried once if primary fails

        Returns:
            Result of whichever callable succeeded
        """
        try:
            return await primary()
        except self.transient_errors as e:
            self._log_error(operation_name=_name_of(primary), error=e, level=logging.WARNING)
            logger.info(f"Falling back to {_name_of(fallback)}")
        return await fallback()

    async def degrade(
        self,
        operation: Callable[..., Awaitable[Any]],
        *args,
        default: Any = None,
        label: str = "",
        **kwargs
    ) -> Any:
        """
        Run ``operation`` and return ``default`` on a transient failure.

        Args:
            operation: Async callable to execute
            *args: Positional arguments for the operation
            default: Value returned when the operation fails
            label: Human readable description for the log line
            **kwargs: Keyword arguments for the operation

        Returns:
            The operation result, or ``default`` on failure
        """
        try:
            return await operation(*args, **kwargs)
        except self.transient_errors as e:
            self._log_error(
                operation_name=label or _name_of(operation),
                error=e,
                level=logging.WARNING,
                args=args,
                kwargs=kwargs
            )
            return default

    def _log_error(
        self,
        operation_name: str,
        error: BaseException,
        level: int = logging.ERROR,
        args: tuple = (),
        kwargs: dict = None
    ) -> None:
        """
        Log error with timestamp, context, and diagnostic data.

        Args:
            operation_name: Name of the operation that failed
            error: The exception that occurred
            level: Log level for the summary line
            args: Positional arguments passed to the operation
            kwargs: Keyword arguments passed to the operation
        """
        context = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation_name,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'args': str(args) if args else 'None',
            'kwargs': {k: str(v) for k, v in kwargs.items()} if kwargs else {}
        }

        logger.log(
            level,
            f"Operation failed: {operation_name} | "
            f"Error: {type(error).__name__}: {str(error)}"
        )
        logger.debug(f"Full error context: {context}")


def _name_of(operation: Callable) -> str:
    return getattr(operation, '__name__', None) or repr(operation)
