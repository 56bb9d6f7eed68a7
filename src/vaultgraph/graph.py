"""Link graph: outgoing and incoming adjacency over the whole corpus.

Construction is two-pass. Every note's outgoing targets are collected
first; ``incoming`` is then derived by inverting those edges, so it never
exists independently of ``outgoing``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import networkx as nx

    from vaultgraph.links import LinkResolver
    from vaultgraph.note import Note

logger = logging.getLogger(__name__)


def invert(outgoing: Mapping[str, Iterable[str]]) -> dict[str, tuple[str, ...]]:
    """Derive incoming adjacency from *outgoing*, in edge discovery order."""
    incoming: dict[str, list[str]] = {slug: [] for slug in outgoing}
    for source, targets in outgoing.items():
        for target in targets:
            sources = incoming.setdefault(target, [])
            if source not in sources:
                sources.append(source)
    return {slug: tuple(sources) for slug, sources in incoming.items()}


@dataclass(frozen=True)
class LinkGraph:
    """Bidirectional adjacency keyed by slug.

    Both mappings cover every note of the corpus, including notes without
    links. ``broken`` keeps, per source note, targets that resolved to a
    slug outside the corpus; they never appear in ``outgoing``.
    """

    outgoing: dict[str, tuple[str, ...]] = field(default_factory=dict)
    incoming: dict[str, tuple[str, ...]] = field(default_factory=dict)
    broken: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def build(cls, notes: Iterable["Note"], resolver: "LinkResolver") -> "LinkGraph":
        notes = list(notes)
        corpus = {note.slug for note in notes}

        outgoing: dict[str, tuple[str, ...]] = {}
        broken: dict[str, tuple[str, ...]] = {}
        for note in notes:
            kept: list[str] = []
            missing: list[str] = []
            for target in resolver.resolve(note.body):
                if target == note.slug:
                    continue
                if target in corpus:
                    kept.append(target)
                else:
                    missing.append(target)
            outgoing[note.slug] = tuple(kept)
            if missing:
                broken[note.slug] = tuple(missing)

        graph = cls(outgoing=outgoing, incoming=invert(outgoing), broken=broken)
        logger.debug(
            "Built link graph: %d notes, %d edges, %d broken targets",
            len(outgoing),
            graph.edge_count,
            sum(len(t) for t in broken.values()),
        )
        return graph

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.outgoing.values())

    def edges(self) -> list[tuple[str, str]]:
        """Return ``(source_slug, target_slug)`` pairs for every link."""
        return [(src, tgt) for src, targets in self.outgoing.items() for tgt in targets]

    def links(self, slug: str) -> tuple[str, ...]:
        return self.outgoing.get(slug, ())

    def backlinks(self, slug: str) -> tuple[str, ...]:
        return self.incoming.get(slug, ())

    def links_to(self, source: str, target: str) -> bool:
        return target in self.outgoing.get(source, ())

    def is_bidirectional(self, a: str, b: str) -> bool:
        return self.links_to(a, b) and self.links_to(b, a)

    def orphans(self) -> list[str]:
        """Notes with neither outgoing nor incoming links."""
        return [slug for slug, targets in self.outgoing.items() if not targets and not self.incoming.get(slug)]

    def to_networkx(self) -> "nx.DiGraph":
        """Return the graph as a :class:`networkx.DiGraph` (one node per note)."""
        import networkx as nx

        G: nx.DiGraph = nx.DiGraph()
        G.add_nodes_from(self.outgoing)
        G.add_edges_from(self.edges())
        return G
