"""
Search session module.

Owns the per-screen state of a listing search: loaded data, the current
criteria snapshot, the geocoding cache and the background radius prefetch.
"""

from .search_session import LISTINGS_ERROR_MESSAGE, SearchSession

__all__ = ['LISTINGS_ERROR_MESSAGE', 'SearchSession']
