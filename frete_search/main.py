"""
Main entry point and CLI for the freight listing search.

Loads the open listings, applies the criteria given on the command line,
waits for the radius prefetch when a radius is requested, and prints the
ordered result set.
"""

import asyncio
import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from frete_search.config import SearchSettings, get_search_settings
from frete_search.filtering import SortMode
from frete_search.formatting import price_label, price_note, relative_age, weight_label
from frete_search.models import CargoType, FilterCriteria, Listing
from frete_search.services import IBGERegistryClient, ListingsClient, NominatimGeocoder
from frete_search.session import SearchSession


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def format_listing(listing: Listing) -> str:
    """
    Format a listing card for console output.

    Args:
        listing: Listing to format

    Returns:
        Formatted multi-line string
    """
    lines = []

    lines.append(f"🚚 {listing.origin or '[sem origem]'}")
    lines.append(f"   → {listing.destination or '[sem destino]'}")
    lines.append(f"   ID: {listing.id}")

    badges = [b for b in (listing.product, weight_label(listing), listing.cargo_type) if b]
    if badges:
        lines.append(f"   {' | '.join(badges)}")

    note = price_note(listing)
    lines.append(f"   Preço: {price_label(listing)}" + (f" ({note})" if note else ""))

    if listing.vehicles:
        lines.append(f"   Veículos: {', '.join(listing.vehicles)}")
    if listing.bodies:
        lines.append(f"   Carrocerias: {', '.join(listing.bodies)}")

    age = relative_age(listing.created_at)
    if age:
        lines.append(f"   {age}")

    lines.append("")

    return "\n".join(lines)


def format_results(listings: List[Listing], limit: Optional[int] = None) -> str:
    """
    Format a result list for console output.

    Args:
        listings: Listings to print
        limit: Print at most this many cards

    Returns:
        Formatted string representation of all listings
    """
    if not listings:
        return "Nenhum frete encontrado para os filtros escolhidos.\n"

    shown = listings[:limit] if limit else listings
    output = []
    output.append(f"\n{'='*60}\n")
    output.append(f"{len(listings)} frete(s) encontrado(s)\n")
    output.append(f"{'='*60}\n\n")
    for listing in shown:
        output.append(format_listing(listing))
        output.append("\n")
    if len(shown) < len(listings):
        output.append(f"... e mais {len(listings) - len(shown)}\n")
    output.append(f"{'='*60}\n")

    return "".join(output)


def build_criteria(args: argparse.Namespace) -> FilterCriteria:
    """Build the criteria snapshot from parsed arguments."""
    return FilterCriteria(
        origin_country=args.country,
        origin_region=args.region or "",
        origin_state=(args.state or "").upper(),
        origin_city=args.city or "",
        search_text=args.search or "",
        destination_country=args.dest_country or "",
        destination_region=args.dest_region or "",
        destination_state=(args.dest_state or "").upper(),
        destination_city=args.dest_city or "",
        cargo_type=args.cargo_type,
        vehicles=frozenset(args.vehicle or ()),
        bodies=frozenset(args.body or ()),
        radius_km=args.radius,
    )


async def run_search(
    args: argparse.Namespace,
    settings: Optional[SearchSettings] = None
) -> int:
    """
    Execute one search.

    Args:
        args: Parsed command-line arguments
        settings: Search settings (default: from environment)

    Returns:
        Exit code (0 for success, 1 when listings could not be loaded)
    """
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    settings = settings or get_search_settings(reload=True)
    if args.token:
        settings.api.auth_token = args.token

    session = SearchSession(
        listings_source=ListingsClient(settings.api),
        registry=IBGERegistryClient(settings.registry),
        geocoder=NominatimGeocoder(settings.geocoding),
        settings=settings,
    )
    try:
        await session.load()
        if session.error_message:
            print(session.error_message)
            return 1
        if session.hierarchy.offline:
            logger.warning("Using offline state table")

        criteria = build_criteria(args)
        if criteria.origin_state:
            cities = await session.select_origin_state(criteria.origin_state)
            logger.debug(f"{len(cities)} cities loaded for {criteria.origin_state}")

        results = await session.apply(criteria, sort_mode=args.sort)
        if session.radius_active():
            logger.info("Calculando distâncias…")
            session.subscribe(lambda listings: logger.info(f"{len(listings)} fretes no raio"))
            await session.wait_for_prefetch()
            results = session.results()

        print(format_results(results, limit=args.limit))
        return 0
    finally:
        await session.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frete-search",
        description="Search freight listings by location, vehicle, cargo and distance."
    )
    parser.add_argument("--search", help='Free-text origin: "Cidade" or "Cidade, UF"')
    parser.add_argument("--country", default="Brasil", help="Origin country (default: Brasil)")
    parser.add_argument("--region", help="Origin macro-region, e.g. Sul")
    parser.add_argument("--state", help="Origin state code, e.g. PR")
    parser.add_argument("--city", help="Origin city")
    parser.add_argument("--dest-country", help="Destination country")
    parser.add_argument("--dest-region", help="Destination macro-region")
    parser.add_argument("--dest-state", help="Destination state code")
    parser.add_argument("--dest-city", help="Destination city")
    parser.add_argument(
        "--cargo-type",
        default=CargoType.ALL.value,
        choices=[c.value for c in CargoType],
        help="Cargo type (default: todos)"
    )
    parser.add_argument("--vehicle", action="append", help="Accepted vehicle (repeatable)")
    parser.add_argument("--body", action="append", help="Accepted body type (repeatable)")
    parser.add_argument("--radius", type=float, help="Radius in km around the origin city")
    parser.add_argument(
        "--sort",
        default=SortMode.DEFAULT.value,
        choices=[m.value for m in SortMode],
        help="Result ordering (default: default)"
    )
    parser.add_argument("--limit", type=int, help="Print at most N listings")
    parser.add_argument("--token", help="Bearer token for the listings API")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def cli(argv: Optional[List[str]] = None) -> None:
    """Console script entry point."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        exit_code = asyncio.run(run_search(args))
    except KeyboardInterrupt:
        print("\nInterrupted")
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
