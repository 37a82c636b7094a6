"""
Rate limiter for the geocoding prefetch batch.

The third-party place lookup service allows roughly one request per second
per client, so the prefetch batch is serialized with a fixed pause between
requests and capped in size.
"""

import asyncio
from typing import Awaitable, Callable, List, Sequence, TypeVar


T = TypeVar('T')


class RateLimiter:
    """
    Fixed-delay throttle with a batch size cap.

    Attributes:
        delay_seconds: Pause after each request in seconds
        max_batch_size: Maximum number of requests in one batch
        request_count: Number of requests recorded so far
    """

    def __init__(
        self,
        delay_seconds: float = 0.35,
        max_batch_size: int = 80,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize rate limiter with configuration.

        Args:
            delay_seconds: Pause after each request (default: 0.35)
            max_batch_size: Batch cap (default: 80)
            sleep: Awaitable sleep function, replaceable in tests
        """
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        if max_batch_size < 0:
            raise ValueError("max_batch_size must be >= 0")
        self.delay_seconds = delay_seconds
        self.max_batch_size = max_batch_size
        self.request_count = 0
        self._sleep = sleep

    async def wait_between_requests(self) -> None:
        """
        Pause for the configured delay.

        Uses a non-blocking sleep so the event loop keeps serving the UI.
        """
        await self._sleep(self.delay_seconds)

    def record_request(self) -> None:
        """
        Record that a request was issued.

        Should be called after each throttled request.
        """
        self.request_count += 1

    def limit_batch(self, items: Sequence[T]) -> List[T]:
        """
        Cap a batch to ``max_batch_size`` items, preserving order.

        Returns:
            The first ``max_batch_size`` items
        """
        return list(items[:self.max_batch_size])
