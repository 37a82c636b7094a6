"""
Locale-insensitive text matching.

City and state names arrive from listings, the registry and user input with
inconsistent accents, casing and spacing ("São Paulo", "sao  paulo"). Every
comparison in the search engine goes through ``normalize``.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Optional


_WHITESPACE = re.compile(r'\s+')

# "Cidade" or "Cidade, UF"
_SEARCH_PATTERN = re.compile(r'^(.+?)(?:,\s*([A-Za-z]{2}))?$')


def normalize(text: Optional[str]) -> str:
    """Strip diacritics, collapse whitespace, lowercase and trim.

    Args:
        text: Any string; None is treated as empty

    Returns:
        Normalized form suitable for equality checks

    Examples:
        >>> normalize("  São   Paulo ")
        'sao paulo'
    """
    if not text:
        return ""
    # Lowercase first: lower() can itself emit combining marks ("İ")
    decomposed = unicodedata.normalize('NFD', text.lower())
    stripped = ''.join(ch for ch in decomposed if unicodedata.category(ch) != 'Mn')
    return _WHITESPACE.sub(' ', stripped).strip()


def equals_loose(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two strings ignoring accents, case and extra whitespace."""
    return normalize(a) == normalize(b)


@dataclass(frozen=True)
class SearchText:
    """Free-text search split into city and optional state code."""
    city: str = ""
    state: str = ""


def parse_search_text(text: Optional[str]) -> SearchText:
    """Parse the free-text search box.

    Accepts ``"Cidade"`` or ``"Cidade, UF"``; the state code is upper-cased.
    Anything else after a comma stays part of the city.
    """
    clean = (text or "").strip()
    if not clean:
        return SearchText()
    match = _SEARCH_PATTERN.match(clean)
    if not match:
        return SearchText(city=clean)
    return SearchText(
        city=(match.group(1) or "").strip(),
        state=(match.group(2) or "").strip().upper(),
    )
