"""Result ordering for freight listings."""

from enum import Enum
from typing import Iterable, List, Union

from frete_search.models import Listing


class SortMode(str, Enum):
    """Available result orderings."""
    DEFAULT = "default"
    PRICE = "price"
    RECENT = "recent"


def _price_key(listing: Listing):
    # Negotiable listings after every priced one
    price = listing.get_price_value()
    return (1, 0.0) if price is None else (0, price)


def _recent_key(listing: Listing):
    # Listings without a timestamp count as oldest
    if listing.created_at is None:
        return (0, 0.0)
    return (1, listing.created_at.timestamp())


def order_listings(
    listings: Iterable[Listing],
    mode: Union[SortMode, str] = SortMode.DEFAULT
) -> List[Listing]:
    """Stable sort of a listing collection.

    Args:
        listings: Listings to order
        mode: ``default`` keeps input order, ``price`` sorts ascending with
            negotiable prices last, ``recent`` sorts newest first

    Returns:
        A new ordered list

    Raises:
        ValueError: If ``mode`` is not a known sort mode
    """
    mode = SortMode(mode)
    listings = list(listings)
    if mode is SortMode.PRICE:
        return sorted(listings, key=_price_key)
    if mode is SortMode.RECENT:
        # reverse=True keeps ties in input order
        return sorted(listings, key=_recent_key, reverse=True)
    return listings
