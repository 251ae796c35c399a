# pages/slugs.py
from django.utils.text import slugify

SLUG_MAX_LENGTH = 255
FALLBACK_SLUG = "page"


def base_slug(source: str, separator: str = "-") -> str:
    """Slug for `source` before sibling suffixes; never empty."""
    return slugify(source or "")[:SLUG_MAX_LENGTH].strip(separator) or FALLBACK_SLUG


def unique_slug(page, source: str, separator: str = "-") -> str:
    """
    Slugify `source` and append -1, -2, ... until no sibling of `page`
    (same parent) uses it.
    """
    base = base_slug(source, separator)
    slug = base
    counter = 1
    while page.slug_exists(slug):
        suffix = f"{separator}{counter}"
        slug = f"{base[:SLUG_MAX_LENGTH - len(suffix)]}{suffix}"
        counter += 1
    return slug
