"""VaultIndex: in-memory snapshot of all notes and their relationships."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from vaultgraph.bases.filter import query_view
from vaultgraph.bases.parser import load_base_file
from vaultgraph.bases.types import BaseConfig, BaseView, FilterResult
from vaultgraph.config import VaultConfig, should_publish
from vaultgraph.errors import BaseFileError
from vaultgraph.graph import LinkGraph
from vaultgraph.links import LinkResolver
from vaultgraph.note import Note
from vaultgraph.parser import iter_notes
from vaultgraph.related import RelatedNote, RelatednessScorer
from vaultgraph.slugs import SlugIndex

logger = logging.getLogger(__name__)


class VaultIndex:
    """Scans a vault directory and builds slug, link, tag, and relatedness indexes.

    Every derived structure belongs to one snapshot of the note set; call
    :meth:`build` again whenever notes are added, removed or renamed.
    """

    def __init__(self, vault_dir: Path | None = None, config: VaultConfig | None = None) -> None:
        self.vault_dir = Path(vault_dir) if vault_dir is not None else None
        self.config = config or VaultConfig()
        self.notes: dict[str, Note] = {}
        self.tags: dict[str, list[str]] = {}
        self.slug_index = SlugIndex()
        self.resolver = LinkResolver(self.slug_index)
        self.graph = LinkGraph()
        self.scorer = RelatednessScorer([], self.graph, self.config.related)
        self.bases: dict[str, BaseConfig] = {}
        self.base_errors: dict[str, BaseFileError] = {}

    @classmethod
    def from_notes(cls, notes: Iterable[Note], config: VaultConfig | None = None) -> "VaultIndex":
        """Index an already-loaded corpus."""
        index = cls(config=config)
        index._index_notes(notes)
        return index

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def build(self) -> None:
        """(Re-)scan the vault and rebuild all indexes."""
        if self.vault_dir is None:
            raise RuntimeError("VaultIndex has no vault_dir; use VaultIndex.from_notes for in-memory corpora.")
        self._index_notes(iter_notes(self.vault_dir))
        self._load_bases(self.vault_dir)

    def _index_notes(self, notes: Iterable[Note]) -> None:
        self.notes = {}
        for note in notes:
            if not should_publish(note, self.config.publish_mode):
                continue
            if note.slug in self.notes:
                logger.warning("Duplicate slug %r: %s replaces %s", note.slug, note.id, self.notes[note.slug].id)
            self.notes[note.slug] = note

        corpus = list(self.notes.values())
        self.slug_index = SlugIndex.build(self.notes)
        self.resolver = LinkResolver(self.slug_index)
        self.graph = LinkGraph.build(corpus, self.resolver)
        self._build_tags()
        self.scorer = RelatednessScorer(corpus, self.graph, self.config.related)

    def _build_tags(self) -> None:
        self.tags = {}
        for slug, note in self.notes.items():
            for tag in note.tags:
                self.tags.setdefault(tag, [])
                if slug not in self.tags[tag]:
                    self.tags[tag].append(slug)

    def _load_bases(self, vault_dir: Path) -> None:
        self.bases = {}
        self.base_errors = {}
        for path in sorted(vault_dir.glob("**/*.base")):
            key = path.relative_to(vault_dir).as_posix()
            try:
                self.bases[key] = load_base_file(path)
            except BaseFileError as exc:
                logger.warning("Skipping invalid base file %s: %s", key, exc)
                self.base_errors[key] = exc

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def edges(self) -> list[tuple[str, str]]:
        """Return ``(source_slug, target_slug)`` pairs for every resolved wikilink."""
        return self.graph.edges()

    def backlinks(self, slug: str) -> list[dict[str, str]]:
        """Return a list of ``{slug, title}`` dicts for notes that link to *slug*."""
        return [{"slug": s, "title": self.notes[s].title} for s in self.graph.backlinks(slug) if s in self.notes]

    def search(self, query: str) -> list[Note]:
        """Case-insensitive full-text search across title and body."""
        q = query.lower()
        return [n for n in self.notes.values() if q in n.title.lower() or q in n.body.lower()]

    def notes_with_tag(self, tag: str) -> list[Note]:
        slugs = self.tags.get(tag, [])
        return [self.notes[s] for s in slugs if s in self.notes]

    def related(self, slug: str, limit: int | None = None) -> list[RelatedNote]:
        """Notes related to *slug*, best first."""
        return self.scorer.find_related(self.notes[slug], limit)

    def query(self, base: BaseConfig | str, view: BaseView | str | None = None) -> FilterResult:
        """Run a view of *base* (a parsed config or a ``.base`` key) over the corpus."""
        config = self.bases[base] if isinstance(base, str) else base
        return query_view(config, view, self.notes.values(), links=self.graph.outgoing)
