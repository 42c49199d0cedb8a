"""Public character slug helpers."""

from __future__ import annotations

import re
from typing import Awaitable, Callable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lowercase ``name`` and collapse every run of other characters into ``-``.

    >>> slugify("Sir Galahad, the Pure!")
    'sir-galahad-the-pure'
    """
    slug = _NON_ALNUM.sub("-", name.lower()).strip("-")
    return slug or "character"


async def unique_slug(name: str, is_taken: Callable[[str], Awaitable[bool]]) -> str:
    """Return ``slugify(name)``, suffixed with ``-1``, ``-2``... until ``is_taken`` reports it free."""
    base = slugify(name)
    candidate = base
    counter = 1
    while await is_taken(candidate):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
