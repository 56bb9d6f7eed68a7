"""Core Note dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

from vaultgraph.slugs import basename_of, folder_of, slugify_path


def slug_from_id(note_id: str) -> str:
    """Canonical slug for a note id (vault-relative path, extension dropped)."""
    path = PurePosixPath(note_id.replace("\\", "/"))
    stem = str(path.with_suffix("")) if path.suffix == ".md" else str(path)
    return slugify_path(stem)


def normalise_tags(raw: Any) -> list[str]:
    """Frontmatter ``tags`` as a de-duplicated list without leading ``#``."""
    if not raw:
        return []
    if isinstance(raw, str):
        raw = [t for t in raw.split(",")]
    if not isinstance(raw, (list, tuple)):
        raw = [raw]
    tags = (str(t).strip().lstrip("#") for t in raw if t is not None)
    return list(dict.fromkeys(t for t in tags if t))


@dataclass(frozen=True)
class Note:
    """A single markdown note in the vault.

    ``slug`` is derived from ``id`` once, when the note is created, unless
    the loader supplies one explicitly.
    """

    id: str
    body: str = ""
    frontmatter: dict[str, Any] = field(default_factory=dict)
    slug: str = ""

    def __post_init__(self) -> None:
        if not self.slug:
            object.__setattr__(self, "slug", slug_from_id(self.id))

    # frontmatter is a dict, so hash on identity fields only
    def __hash__(self) -> int:
        return hash((self.id, self.slug))

    @property
    def title(self) -> str:
        return str(self.frontmatter.get("title") or basename_of(self.slug))

    @property
    def tags(self) -> list[str]:
        return normalise_tags(self.frontmatter.get("tags"))

    @property
    def folder(self) -> str:
        return folder_of(self.slug)

    @property
    def basename(self) -> str:
        return basename_of(self.slug)

    @property
    def date(self) -> Any:
        return self.frontmatter.get("date")

    @property
    def updated(self) -> Any:
        return self.frontmatter.get("updated")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "body": self.body,
            "tags": self.tags,
            "frontmatter": self.frontmatter,
        }
