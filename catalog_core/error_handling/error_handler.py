"""
Retry logic for the backend-facing collaborators.

Source adapters and catalog loaders wrap their HTTP calls in
``ErrorHandler.retry_with_backoff``. The aggregator and the selection engine
never retry on their own.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict
from datetime import datetime


logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """
    Attempt budget and backoff schedule.

    Attributes:
        max_retries: Total number of attempts, including the first
        base_delay_seconds: Wait after the first failed attempt
    """
    max_retries: int = 3
    base_delay_seconds: float = 0.5

    def get_backoff_delay(self, attempt: int) -> float:
        """
        Seconds to wait after a failed attempt.

        The wait doubles with each attempt: ``base_delay_seconds * 2 ** attempt``.

        Args:
            attempt: Index of the attempt that just failed (0-indexed)

        Returns:
            Delay in seconds
        """
        return self.base_delay_seconds * (2 ** attempt)


class ErrorHandler:
    """
    Runs an async backend call until it succeeds or the attempt budget is spent.

    Attributes:
        config: Retry configuration
    """

    def __init__(self, max_retries: int = 3, base_delay_seconds: float = 0.5):
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        self.config = RetryConfig(max_retries=max_retries, base_delay_seconds=base_delay_seconds)

    async def retry_with_backoff(
        self,
        operation: Callable[..., Awaitable[Any]],
        *args,
        **kwargs
    ) -> Any:
        """
        Await ``operation(*args, **kwargs)``, retrying failures with backoff.

        Cancellation is never retried. Each failed attempt is logged at WARNING
        with its diagnostic context at DEBUG.

        Args:
            operation: Async callable, usually a fetch bound to one endpoint
            *args: Positional arguments for the operation
            **kwargs: Keyword arguments for the operation

        Returns:
            Whatever the first successful attempt returns

        Raises:
            Exception: The error of the final attempt when every attempt fails
        """
        name = getattr(operation, '__name__', repr(operation))
        attempts = self.config.max_retries
        failure = None

        for attempt in range(attempts):
            try:
                return await operation(*args, **kwargs)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                failure = e
                self._log_error(name, attempt + 1, e, args)

            if attempt + 1 < attempts:
                delay = self.config.get_backoff_delay(attempt)
                logger.debug(f"Retrying {name} in {delay:.2f}s")
                await asyncio.sleep(delay)

        logger.error(f"{name} gave up after {attempts} attempt(s): {type(failure).__name__}: {failure}")
        raise failure

    def _log_error(self, name: str, attempt: int, error: Exception, args: tuple) -> None:
        context: Dict[str, str] = {
            'timestamp': datetime.now().isoformat(),
            'operation': name,
            'attempt': f"{attempt}/{self.config.max_retries}",
            'error_type': type(error).__name__,
            'error_message': str(error),
            'args': repr(args) if args else 'None',
        }
        logger.warning(
            f"{name} failed (attempt {context['attempt']}): "
            f"{context['error_type']}: {context['error_message']}"
        )
        logger.debug(f"Error context: {context}")
