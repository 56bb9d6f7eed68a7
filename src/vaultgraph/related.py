"""Related-notes scoring.

Ranking runs in two phases so that the expensive content comparison only
touches plausible candidates:

1. *Metadata score* for every other note: shared tags weighted by IDF,
   folder proximity, and link adjacency. Notes scoring zero are dropped.
2. *Content similarity*: cosine similarity of term-frequency vectors of the
   two bodies. Candidates below the similarity floor are dropped.

``score = metadata * 0.6 + cosine * 100 * 0.4`` with the default weights.
"""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from vaultgraph.config import RelatedConfig

if TYPE_CHECKING:
    from vaultgraph.graph import LinkGraph
    from vaultgraph.note import Note


@dataclass(frozen=True)
class RelatedNote:
    slug: str
    score: float
    reasons: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Corpus-wide weights and vectors
# ---------------------------------------------------------------------------


def compute_tag_weights(notes: Iterable["Note"]) -> dict[str, float]:
    """Return ``tag -> ln(total_notes / notes_with_tag)`` for the corpus."""
    notes = list(notes)
    counts: Counter[str] = Counter()
    for note in notes:
        counts.update(set(note.tags))
    total = len(notes)
    return {tag: math.log(total / n) for tag, n in counts.items()}


def tokenize(text: str, min_length: int = 4) -> list[str]:
    """Whitespace tokens, case-folded, shorter than *min_length* dropped."""
    return [tok for tok in text.casefold().split() if len(tok) >= min_length]


def term_frequencies(text: str, min_length: int = 4) -> Counter[str]:
    return Counter(tokenize(text, min_length))


def cosine_similarity(a: Mapping[str, int], b: Mapping[str, int]) -> float:
    """Cosine similarity of two sparse term-frequency vectors."""
    if not a or not b:
        return 0.0
    if len(b) < len(a):
        a, b = b, a
    dot = sum(count * b.get(term, 0) for term, count in a.items())
    if not dot:
        return 0.0
    norm_a = math.sqrt(sum(c * c for c in a.values()))
    norm_b = math.sqrt(sum(c * c for c in b.values()))
    return dot / (norm_a * norm_b)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def _folder_relation(current: str, other: str) -> str | None:
    if not current or not other:
        return None
    if current == other:
        return "same folder"
    if other.startswith(current + "/") or current.startswith(other + "/"):
        return "related folder"
    return None


def _metadata_score(
    note: "Note",
    other: "Note",
    tag_weights: Mapping[str, float],
    graph: "LinkGraph | None",
    config: RelatedConfig,
) -> tuple[float, list[str]]:
    score = 0.0
    reasons: list[str] = []

    other_tags = set(other.tags)
    shared = [tag for tag in note.tags if tag in other_tags]
    if shared:
        score += sum(tag_weights.get(tag, 0.0) for tag in shared) * config.tag_idf_scale
        reasons.append(f"{len(shared)} shared tag{'s' if len(shared) > 1 else ''}")

    relation = _folder_relation(note.folder, other.folder)
    if relation == "same folder":
        score += config.same_folder
        reasons.append(relation)
    elif relation == "related folder":
        score += config.related_folder
        reasons.append(relation)

    if graph is not None:
        out = graph.links_to(note.slug, other.slug)
        back = graph.links_to(other.slug, note.slug)
        if out and back:
            score += config.bidirectional_link
            reasons.append("bidirectional link")
        elif out:
            score += config.unidirectional_link
            reasons.append("links to")
        elif back:
            score += config.unidirectional_link
            reasons.append("linked from")

    return score, reasons


def find_related(
    note: "Note",
    corpus: Sequence["Note"],
    tag_weights: Mapping[str, float],
    limit: int | None = None,
    *,
    graph: "LinkGraph | None" = None,
    config: RelatedConfig | None = None,
    vectors: Mapping[str, Mapping[str, int]] | None = None,
) -> list[RelatedNote]:
    """Rank *corpus* by relatedness to *note*.

    *vectors* may hold precomputed term frequencies keyed by slug; missing
    entries are computed on demand.
    """
    config = config or RelatedConfig()
    limit = config.limit if limit is None else limit
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")

    def vector(n: "Note") -> Mapping[str, int]:
        if vectors is not None and n.slug in vectors:
            return vectors[n.slug]
        return term_frequencies(n.body, config.min_token_length)

    candidates: list[tuple["Note", float, list[str]]] = []
    for other in corpus:
        if other.slug == note.slug:
            continue
        meta, reasons = _metadata_score(note, other, tag_weights, graph, config)
        if meta > 0:
            candidates.append((other, meta, reasons))

    if not candidates:
        return []

    current_vector = vector(note)
    related: list[RelatedNote] = []
    for other, meta, reasons in candidates:
        similarity = cosine_similarity(current_vector, vector(other))
        if similarity < config.similarity_floor:
            continue
        if similarity > config.high_similarity:
            reasons.append("high content similarity")
        elif similarity > config.similar_content:
            reasons.append("similar content")
        score = meta * config.metadata_weight + similarity * 100 * config.content_weight
        related.append(RelatedNote(slug=other.slug, score=score, reasons=tuple(reasons)))

    related.sort(key=lambda r: r.score, reverse=True)
    return related[:limit]


def notes_in_same_folder(note: "Note", corpus: Iterable["Note"]) -> list["Note"]:
    """Other notes sharing *note*'s (non-root) folder."""
    if not note.folder:
        return []
    return [n for n in corpus if n.slug != note.slug and n.folder == note.folder]


class RelatednessScorer:
    """Scores related notes over one corpus snapshot.

    The IDF table and term-frequency vectors are computed once, at
    construction, since they are corpus-global.
    """

    def __init__(
        self,
        notes: Iterable["Note"],
        graph: "LinkGraph | None" = None,
        config: RelatedConfig | None = None,
    ) -> None:
        self.notes: list["Note"] = list(notes)
        self.graph = graph
        self.config = config or RelatedConfig()
        self.tag_weights = compute_tag_weights(self.notes)
        self._vectors = {n.slug: term_frequencies(n.body, self.config.min_token_length) for n in self.notes}

    def find_related(self, note: "Note", limit: int | None = None) -> list[RelatedNote]:
        return find_related(
            note,
            self.notes,
            self.tag_weights,
            limit,
            graph=self.graph,
            config=self.config,
            vectors=self._vectors,
        )
