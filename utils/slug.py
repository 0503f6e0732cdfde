# storefront/utils/slug.py
import re

from services.models import Editing

_NON_SLUG_CHARS = re.compile(r'[^a-z0-9]+')


def normalize_slug(title: str) -> str:
    """Converts a human-readable title into a URL-safe slug.

    "Home Decor!!" becomes "home-decor".
    """
    slug = _NON_SLUG_CHARS.sub('-', title.lower())
    if slug.startswith('-'):
        slug = slug[1:]
    if slug.endswith('-'):
        slug = slug[:-1]
    return slug


def auto_slug(title, mode, current_slug=""):
    """
    Returns the value the slug field should hold after the title changed.
    :param title: The new title typed into the form.
    :param mode: The form mode. Editing never regenerates, so a manual slug survives.
    :param current_slug: What the slug field currently holds.
    """
    if isinstance(mode, Editing) or not title:
        return current_slug
    return normalize_slug(title)
