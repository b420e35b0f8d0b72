# src/storefront/core/slugs.py
import re
import unicodedata

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(name: str) -> str:
    """Turn a display name into a lowercase, hyphenated, ASCII identifier.

    Every create and update path goes through this function so the same
    name always yields the same slug.
    """
    value = unicodedata.normalize("NFD", name.lower())
    value = "".join(ch for ch in value if not unicodedata.combining(ch))
    value = _DISALLOWED.sub("", value)
    value = _WHITESPACE.sub("-", value)
    value = _HYPHENS.sub("-", value)
    return value.strip("-")
