"""Display helpers for listing cards."""

from datetime import datetime, timezone
from typing import Optional

from frete_search.models import Listing, WeightUnit


NEGOTIABLE_LABEL = "A combinar"


def format_brl(value: float) -> str:
    """Format a value as Brazilian reais, e.g. ``R$ 1.234,50``."""
    text = f"{value:,.2f}"
    # 1,234.50 -> 1.234,50
    text = text.replace(",", "\x00").replace(".", ",").replace("\x00", ".")
    return f"R$ {text}"


def price_label(listing: Listing) -> str:
    """Price text; zero and negotiable prices read "A combinar"."""
    price = listing.get_price_value()
    if not price:
        return NEGOTIABLE_LABEL
    return format_brl(price)


def price_note(listing: Listing) -> str:
    """Per-ton and toll note shown under the price."""
    if not listing.get_price_value():
        return ""
    unit = (listing.weight_unit or "").lower()
    if unit == WeightUnit.TONS.value:
        return "Preço por tonelada" + (" + pedágio" if listing.pays_toll else "")
    if unit == WeightUnit.KILOGRAMS.value and listing.pays_toll:
        return "Pedágio incluso"
    return ""


def weight_label(listing: Listing) -> str:
    if listing.total_weight is None:
        return ""
    unit = "ton" if (listing.weight_unit or "").lower() == WeightUnit.TONS.value else "kg"
    return f"{listing.total_weight:g} {unit}"


def relative_age(created_at: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Age of a listing in Portuguese, e.g. ``"Há 3 horas"`` or ``"Há 1 dia"``."""
    if created_at is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    hours = max(0, int((now - created_at).total_seconds() // 3600))
    if hours < 24:
        return f"Há {hours} hora{'' if hours == 1 else 's'}"
    days = hours // 24
    return f"Há {days} dia{'' if days == 1 else 's'}"
