"""
Location hierarchy resolver.

Maps states to their macro-region, regions to member states, and states to
their cities. The state table comes from the geographic registry or, when the
registry is unreachable, from the offline fallback table.
"""

import logging
from typing import Dict, Iterable, List, Optional, Protocol

from frete_search.error_handling import ErrorHandler
from frete_search.location.offline_states import OFFLINE_STATES
from frete_search.models import State
from frete_search.text_matching import equals_loose, normalize


logger = logging.getLogger(__name__)


class GeographicRegistry(Protocol):
    """The registry collaborator (IBGE in production)."""

    async def fetch_states(self) -> List[State]:
        ...

    async def fetch_cities(self, state_code: str) -> List[str]:
        ...


class LocationHierarchy:
    """Resolves the country -> region -> state -> city hierarchy.

    Attributes:
        states: Loaded state records
        offline: True when ``states`` is the hardcoded fallback table
    """

    def __init__(
        self,
        states: Iterable[State],
        offline: bool = False,
        registry: Optional[GeographicRegistry] = None,
        error_handler: Optional[ErrorHandler] = None
    ):
        self.states: List[State] = list(states)
        self.offline = offline
        self.registry = registry
        self.error_handler = error_handler or ErrorHandler()
        self._by_code: Dict[str, State] = {}
        self._by_name: Dict[str, State] = {}
        for state in self.states:
            self._by_code.setdefault(state.code.strip().upper(), state)
            self._by_name.setdefault(normalize(state.name), state)

    @classmethod
    async def load(
        cls,
        registry: Optional[GeographicRegistry],
        error_handler: Optional[ErrorHandler] = None
    ) -> 'LocationHierarchy':
        """Load the state table from the registry, falling back to offline data.

        Never raises: any registry failure yields the offline table.
        """
        handler = error_handler or ErrorHandler()
        states = None
        if registry is not None:
            states = await handler.degrade(
                registry.fetch_states,
                default=None,
                label="load states from registry"
            )
        if not states:
            logger.warning("State registry unavailable, using offline state table")
            return cls(OFFLINE_STATES, offline=True, registry=registry, error_handler=handler)
        logger.info(f"Loaded {len(states)} states from registry")
        return cls(states, offline=False, registry=registry, error_handler=handler)

    def regions(self) -> List[str]:
        """Distinct region names, sorted ascending."""
        return sorted({state.region.name for state in self.states})

    def states_in(self, region: str) -> List[State]:
        """States belonging to ``region``, sorted by code."""
        members = [s for s in self.states if equals_loose(s.region.name, region)]
        return sorted(members, key=lambda s: s.code)

    def find_state(self, code_or_name: Optional[str]) -> Optional[State]:
        """Find a state by exact code (case-insensitive) or loose name."""
        text = (code_or_name or "").strip()
        if not text:
            return None
        return self._by_code.get(text.upper()) or self._by_name.get(normalize(text))

    def match_state(self, code_or_name: Optional[str], target: Optional[str]) -> bool:
        """Whether two state references denote the same state.

        True on an exact match, or when ``code_or_name`` resolves to a state
        whose full name (loosely) or code equals ``target``. Unresolvable
        references fall back to a loose text comparison.
        """
        a = (code_or_name or "").strip()
        b = (target or "").strip()
        if not a or not b:
            return False
        if a == b:
            return True
        state = self.find_state(a)
        if state is None:
            return equals_loose(a, b)
        return equals_loose(state.name, b) or state.code.upper() == b.upper()

    def region_of(self, state_text: Optional[str]) -> Optional[str]:
        """Region name for a state code or name, None if unknown."""
        state = self.find_state(state_text)
        return state.region.name if state else None

    async def cities_of(self, state_code: str) -> List[str]:
        """City names for a state, fetched on demand.

        Returns an empty list on any failure; the caller falls back to
        free-text city entry.
        """
        if not state_code or self.registry is None:
            return []
        cities = await self.error_handler.degrade(
            self.registry.fetch_cities,
            state_code,
            default=[],
            label=f"load cities for {state_code}"
        )
        return list(cities or [])
