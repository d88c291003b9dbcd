"""
Slug helpers
"""
import re
from typing import Optional

from sqlalchemy.orm import Session

FALLBACK_SLUG = "untitled"

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """
    Deterministic URL slug: "Science Fiction!" -> "science-fiction"

    Lowercases, drops everything that is not a word character, whitespace or
    hyphen, turns whitespace runs into one hyphen, collapses repeated hyphens
    and trims leading/trailing hyphens.
    """
    slug = (text or "").lower()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _REPEATED_HYPHENS.sub("-", slug)
    return slug.strip("-")


def generate_unique_slug(
    db: Session,
    model,
    text: str,
    exclude_id: Optional[int] = None
) -> str:
    """
    Slug for ``text`` that is free in ``model``'s table

    Appends -1, -2, ... to the base slug until no row with that slug exists.
    ``exclude_id`` lets a row keep probing without colliding with itself.
    """
    base_slug = slugify(text) or FALLBACK_SLUG

    def is_taken(candidate: str) -> bool:
        query = db.query(model.id).filter(model.slug == candidate)
        if exclude_id is not None:
            query = query.filter(model.id != exclude_id)
        return query.first() is not None

    slug = base_slug
    counter = 1
    while is_taken(slug):
        slug = f"{base_slug}-{counter}"
        counter += 1

    return slug
