"""
Location hierarchy module.

Resolves regions, states and cities used by the listing filters, with an
offline fallback for the state registry.
"""

from .hierarchy import GeographicRegistry, LocationHierarchy
from .offline_states import OFFLINE_STATES

__all__ = ['GeographicRegistry', 'LocationHierarchy', 'OFFLINE_STATES']
