"""Helpers for choosing file names."""

import os.path
import re
from typing import Collection

import shortuuid


def find_available_name(dest: str, unavailable: Collection[str] = ()) -> str:
    """Returns ``dest`` if nothing exists there, or else ``dest`` with a UUID inserted before the extension.

    Paths in ``unavailable`` are treated as taken even if they don't exist yet.
    For example, if ``/notes/2024-01-02.txt`` exists, this might return
    ``/notes/2024-01-02_Vh3kTqPnmA6WbzK4hLkJ8C.txt``.
    """
    candidate = dest
    base, suffix = os.path.splitext(dest)
    while candidate in unavailable or os.path.exists(candidate):
        candidate = f'{base}_{shortuuid.uuid()}{suffix}'
    return candidate


def slugify(name: str) -> str:
    """Converts a query or template name to something usable as a filename.

    Letters are lower-cased, anything other than a-z and 0-9 becomes a dash, and runs of dashes are collapsed
    and trimmed. ``"Work: this month!"`` becomes ``"work-this-month"``. An empty result becomes ``"unnamed"``.
    """
    slug = re.sub(r'[^a-z0-9]', '-', (name or '').lower())
    slug = re.sub(r'-+', '-', slug).strip('-')
    return slug or 'unnamed'
