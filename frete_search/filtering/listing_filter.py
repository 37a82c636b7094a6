"""
Attribute filter pipeline for freight listings.

This module applies the location hierarchy, cargo type and vehicle/body tag
predicates to a listing collection. The pipeline is pure and order-preserving:
the same listings and criteria always produce the same result.
"""

from typing import FrozenSet, Iterable, List

from frete_search.location import LocationHierarchy
from frete_search.models import FilterCriteria, Listing, parse_location
from frete_search.text_matching import equals_loose, normalize


class ListingFilter:
    """Filters listings against a ``FilterCriteria`` snapshot.

    Predicates run in a fixed order and stop at the first failure: country,
    region, state, city, destination, cargo type, vehicle tags, body tags.
    Malformed location strings never raise; missing segments compare as
    empty strings.

    Attributes:
        hierarchy: Loaded state/region table used for region and state matching
        home_country: Country whose regions and states the registry knows
    """

    def __init__(self, hierarchy: LocationHierarchy, home_country: str = "Brasil"):
        self.hierarchy = hierarchy
        self.home_country = home_country

    def filter_listings(
        self,
        listings: Iterable[Listing],
        criteria: FilterCriteria,
        radius_center_resolved: bool = False
    ) -> List[Listing]:
        """Filter a collection, keeping input order.

        Args:
            listings: Listings to filter
            criteria: Immutable criteria snapshot
            radius_center_resolved: True once the radius origin has a
                coordinate; the origin city and state then act as the radius
                center instead of exact-match predicates

        Returns:
            Listings that pass every predicate
        """
        relax_origin = radius_center_resolved and self.radius_requested(criteria)
        return [
            listing for listing in listings
            if self.matches(listing, criteria, relax_origin=relax_origin)
        ]

    def matches(
        self,
        listing: Listing,
        criteria: FilterCriteria,
        relax_origin: bool = False
    ) -> bool:
        """Check if a listing passes all filter criteria."""
        origin = listing.origin_parts
        destination = listing.destination_parts

        # Country
        if not self._country_matches(criteria.origin_country, origin.country):
            return False
        if not self._country_matches(criteria.destination_country, destination.country):
            return False

        # Region (only meaningful inside the home country)
        if not self._region_matches(criteria.origin_country, criteria.origin_region, origin.state):
            return False
        if not self._region_matches(
            criteria.destination_country, criteria.destination_region, destination.state
        ):
            return False

        # Origin state and city
        if not relax_origin:
            if not self._state_matches(criteria.origin_state_query, origin.state):
                return False
            if not self._city_matches(criteria.origin_city_query, origin.city):
                return False

        # Destination state and city
        if not self._state_matches(criteria.destination_state.strip(), destination.state):
            return False
        destination_city = parse_location(criteria.destination_city).city
        if not self._city_matches(destination_city, destination.city):
            return False

        # Cargo type
        if criteria.cargo_type_selected and not equals_loose(listing.cargo_type, criteria.cargo_type):
            return False

        # Vehicle and body tags, OR semantics
        if not self._any_tag(criteria.vehicles, listing.vehicles):
            return False
        if not self._any_tag(criteria.bodies, listing.bodies):
            return False

        return True

    def radius_requested(self, criteria: FilterCriteria) -> bool:
        """True when the criteria ask for a radius search in the home country."""
        return (
            bool(criteria.radius_km)
            and criteria.radius_km > 0
            and equals_loose(criteria.origin_country, self.home_country)
        )

    def _country_matches(self, wanted: str, actual: str) -> bool:
        # Listings without a country are never excluded by country
        if not wanted or not actual:
            return True
        return equals_loose(wanted, actual)

    def _region_matches(self, country: str, region: str, state_text: str) -> bool:
        if not region or not equals_loose(country, self.home_country):
            return True
        listing_region = self.hierarchy.region_of(state_text)
        # Unresolved states are not excluded by region
        if listing_region is None:
            return True
        return equals_loose(listing_region, region)

    def _state_matches(self, wanted: str, actual: str) -> bool:
        if not wanted:
            return True
        return self.hierarchy.match_state(wanted, actual)

    def _city_matches(self, wanted: str, actual: str) -> bool:
        if not wanted:
            return True
        return equals_loose(actual, wanted)

    def _any_tag(self, selected: FrozenSet[str], declared: Iterable[str]) -> bool:
        if not selected:
            return True
        wanted = {normalize(tag) for tag in selected}
        return any(normalize(tag) in wanted for tag in (declared or ()))
