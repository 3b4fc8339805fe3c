"""Unique store slug generation."""

from __future__ import annotations

from typing import Optional

from django.utils.text import slugify


def unique_store_slug(name: str, exclude_id: Optional[object] = None) -> str:
    """Slugify ``name`` and append ``-1``, ``-2``... until it is unused."""
    from modules.stores.models import Store

    base = slugify(name) or "store"
    taken = Store.objects.filter(slug__startswith=base)
    if exclude_id is not None:
        taken = taken.exclude(id=exclude_id)
    existing = set(taken.values_list("slug", flat=True))

    candidate, counter = base, 1
    while candidate in existing:
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
