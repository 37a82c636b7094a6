"""
Rate limiting module.

Throttles outbound geocoding requests issued by the radius prefetch batch.
"""

from .rate_limiter import RateLimiter

__all__ = ['RateLimiter']
