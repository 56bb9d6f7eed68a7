"""Wikilink extraction and resolution.

Recognised forms::

    [[Page]]  [[Page#Heading]]  [[Page|Alias]]  [[Page#Heading|Alias]]
    [[#Heading]]       (heading in the current note)
    [[Folder/Page]]    (full path, bypasses the basename lookup)
    ![[image.png]]     (embed)

An alias separator may be escaped as ``\\|`` so links survive inside
markdown tables.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from vaultgraph.slugs import SlugIndex, slugify_path

_WIKILINK_RE = re.compile(r"!?\[\[([^\[\]|#\\]+)?(#+[^\[\]|#\\]+)?(\\?\|[^\[\]#]*)?\]\]")


@dataclass(frozen=True)
class RawRef:
    """One wikilink occurrence, before resolution."""

    target: str | None = None
    heading: str | None = None
    alias: str | None = None
    is_embed: bool = False


def extract_references(body: str) -> list[RawRef]:
    """Return every wikilink in *body*, in document order."""
    refs: list[RawRef] = []
    if not body:
        return refs
    for m in _WIKILINK_RE.finditer(body):
        raw_target, raw_heading, raw_alias = m.groups()
        target = raw_target.strip() if raw_target else ""
        heading = raw_heading.lstrip("#").strip() if raw_heading else ""
        alias = raw_alias.lstrip("\\").lstrip("|").strip() if raw_alias else ""
        refs.append(
            RawRef(
                target=target or None,
                heading=heading or None,
                alias=alias or None,
                is_embed=m.group(0).startswith("!"),
            )
        )
    return refs


def extract_embeds(body: str) -> list[str]:
    """Targets of ``![[embed]]`` references, in document order."""
    return [ref.target for ref in extract_references(body) if ref.is_embed and ref.target]


def resolve_reference(ref: RawRef, slug_index: SlugIndex) -> str | None:
    """Resolve *ref* to a canonical slug.

    Heading-only references point at the current note and yield ``None``.
    Unknown or ambiguous short names fall back to their own slugified form,
    so a broken link still has a stable target.
    """
    if not ref.target:
        return None
    name = ref.target
    if name.lower().endswith(".md"):
        name = name[:-3]
    slug = slugify_path(name)
    if not slug:
        return None
    if "/" in slug:
        return slug
    return slug_index.resolve_basename(slug) or slug


class LinkResolver:
    """Resolves the wikilinks of note bodies against one :class:`SlugIndex`."""

    def __init__(self, slug_index: SlugIndex) -> None:
        self.slug_index = slug_index

    def resolve_ref(self, ref: RawRef) -> str | None:
        return resolve_reference(ref, self.slug_index)

    def resolve(self, body: str) -> list[str]:
        """Resolved targets of *body* in first-seen order, without duplicates."""
        targets: dict[str, None] = {}
        for ref in extract_references(body):
            slug = self.resolve_ref(ref)
            if slug is not None:
                targets.setdefault(slug, None)
        return list(targets)
