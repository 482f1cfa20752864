"""Workspace slug generation."""
import re
from typing import Collection

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

DEFAULT_SLUG = "workspace"


def generate_slug(name: str) -> str:
    """
    Turn a display name into a URL-friendly slug.

    Lowercases, collapses every run of characters outside ``[a-z0-9]`` into a
    single hyphen and strips hyphens from both ends. ``"My Workspace!"``
    becomes ``"my-workspace"``. A name with no usable characters falls back
    to ``DEFAULT_SLUG``.
    """
    slug = _NON_ALNUM_RE.sub("-", name.strip().lower()).strip("-")
    return slug or DEFAULT_SLUG


def generate_unique_slug(base_slug: str, taken: Collection[str]) -> str:
    """
    Return ``base_slug``, or the first ``base_slug-N`` (N >= 2) not in ``taken``.

    Args:
        base_slug: Slug derived from the name
        taken: Slugs already in use

    Returns:
        A slug not present in ``taken``
    """
    if base_slug not in taken:
        return base_slug
    counter = 2
    while f"{base_slug}-{counter}" in taken:
        counter += 1
    return f"{base_slug}-{counter}"
