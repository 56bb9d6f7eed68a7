"""Slug helpers and the basename → slug lookup used for short wikilinks."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Mapping

# Anything that is not a word character, whitespace, or hyphen is dropped
_STRIP_RE = re.compile(r"[^\w\s-]")
_SPACE_RE = re.compile(r"\s")


def slugify(text: str) -> str:
    """Return a URL-safe slug for a single path segment.

    Diacritics are stripped, case is folded, punctuation removed and every
    whitespace character becomes a hyphen (``"Café Notes!"`` → ``"cafe-notes"``).
    """
    decomposed = unicodedata.normalize("NFKD", text)
    plain = "".join(c for c in decomposed if not unicodedata.combining(c))
    plain = _STRIP_RE.sub("", plain.strip().casefold())
    return _SPACE_RE.sub("-", plain)


def slugify_path(path: str) -> str:
    """Slugify each ``/``-separated segment independently.

    ``"My Folder/My Note"`` → ``"my-folder/my-note"``
    """
    return "/".join(slugify(part) for part in path.strip("/").split("/"))


def basename_of(slug: str) -> str:
    """Final path segment of *slug*."""
    return slug.rsplit("/", 1)[-1]


def folder_of(slug: str) -> str:
    """Folder part of *slug*; empty for notes at the vault root."""
    return slug.rsplit("/", 1)[0] if "/" in slug else ""


class SlugIndex:
    """Maps unambiguous basenames to full slugs.

    A basename shared by two or more distinct slugs is left out entirely, so
    short references to it stay unresolved and must use a full path.
    """

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        self._map: dict[str, str] = dict(mapping or {})

    @classmethod
    def build(cls, slugs: Iterable[str]) -> "SlugIndex":
        candidates: dict[str, str] = {}
        ambiguous: set[str] = set()
        for slug in slugs:
            name = basename_of(slug)
            if name in ambiguous:
                continue
            existing = candidates.get(name)
            if existing is not None and existing != slug:
                del candidates[name]
                ambiguous.add(name)
            else:
                candidates[name] = slug
        return cls(candidates)

    def resolve_basename(self, name: str) -> str | None:
        return self._map.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._map

    def __len__(self) -> int:
        return len(self._map)

    def as_dict(self) -> dict[str, str]:
        return dict(self._map)
