"""Slug derivation for album titles."""
from slugify import slugify

# Applied before transliteration
SLUG_REPLACEMENTS = [
    ["&", " and "],
    ["_", ""],
]


def create_slug(title: str) -> str:
    """
    Convert an album title into a URL-safe slug.

    Non-ASCII letters are transliterated, everything is lowercased,
    punctuation is dropped and words are joined with single hyphens.
    Slugifying a slug returns it unchanged.

    Args:
        title: Album title

    Returns:
        Slug (may be empty if the title has no letters or digits)
    """
    return slugify(str(title), lowercase=True, replacements=SLUG_REPLACEMENTS)
