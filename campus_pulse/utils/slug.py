"""
URL slug helpers
"""

import re
from typing import Iterable

def slugify(text: str) -> str:
    """Lowercase, spaces to hyphens, non-word characters stripped, no stray hyphens"""
    slug = str(text).lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^\w\-]+", "", slug, flags=re.ASCII)
    slug = re.sub(r"--+", "-", slug)
    return slug.strip("-")

def unique_slug(text: str, taken: Iterable[str]) -> str:
    """Slugify `text`, appending -2, -3, ... until it clashes with nothing in `taken`"""
    taken = set(taken)
    base = slugify(text) or "untitled"
    candidate = base
    suffix = 2
    while candidate in taken:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate
