"""Tests for slug normalization and auto-regeneration."""

import re

import pytest

from services.models import Creating, Editing
from utils.slug import auto_slug, normalize_slug

SAMPLE_TITLES = [
    "",
    "Home Decor!!",
    "  --Leading",
    "Trailing--  ",
    "Wall Art & Paintings",
    "ALL CAPS 2024",
    "already-a-slug",
    "---",
    "!!!",
    "Brass   Lamps / Diyas",
    "Café Crème",
    "a",
    "-a-",
    "tab\tand\nnewline",
    "100% Handmade",
]


class TestNormalizeSlug:
    """Tests for normalize_slug."""

    def test_documented_examples(self) -> None:
        """Known titles map to their expected slugs."""
        assert normalize_slug("Home Decor!!") == "home-decor"
        assert normalize_slug("  --Leading") == "leading"
        assert normalize_slug("") == ""

    def test_collapses_runs_of_separators(self) -> None:
        """Every run of non-alphanumerics becomes one hyphen."""
        assert normalize_slug("Brass   Lamps / Diyas") == "brass-lamps-diyas"
        assert normalize_slug("Wall Art & Paintings") == "wall-art-paintings"

    def test_keeps_digits(self) -> None:
        """Digits survive normalization."""
        assert normalize_slug("100% Handmade") == "100-handmade"
        assert normalize_slug("ALL CAPS 2024") == "all-caps-2024"

    def test_punctuation_only_is_empty(self) -> None:
        """A title with no letters or digits produces an empty slug."""
        assert normalize_slug("!!!") == ""
        assert normalize_slug("---") == ""

    def test_non_ascii_letters_become_separators(self) -> None:
        """Accented letters are outside [a-z0-9] and act as separators."""
        assert normalize_slug("Café Crème") == "caf-cr-me"

    @pytest.mark.parametrize("title", SAMPLE_TITLES)
    def test_output_alphabet(self, title: str) -> None:
        """Output only contains lowercase letters, digits and single inner hyphens."""
        slug = normalize_slug(title)
        assert re.fullmatch(r"[a-z0-9-]*", slug)
        assert not slug.startswith("-")
        assert not slug.endswith("-")
        assert "--" not in slug

    @pytest.mark.parametrize("title", SAMPLE_TITLES)
    def test_idempotent(self, title: str) -> None:
        """Normalizing a slug again leaves it unchanged."""
        once = normalize_slug(title)
        assert normalize_slug(once) == once


class TestAutoSlug:
    """Tests for auto_slug regeneration rules."""

    def test_creating_regenerates_from_title(self) -> None:
        """While creating, the slug follows the title."""
        assert auto_slug("Home Decor", Creating(), "old") == "home-decor"

    def test_editing_keeps_manual_slug(self) -> None:
        """While editing, a manually set slug is never overwritten."""
        mode = Editing(record_id="42", original_slug="decor")
        assert auto_slug("Home Decor", mode, "my-custom-slug") == "my-custom-slug"

    def test_empty_title_leaves_slug_alone(self) -> None:
        """Clearing the title does not wipe the slug field."""
        assert auto_slug("", Creating(), "home-decor") == "home-decor"
        assert auto_slug(None, Creating(), "home-decor") == "home-decor"
