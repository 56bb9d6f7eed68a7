"""Broken-link diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vaultgraph.index import VaultIndex


@dataclass(frozen=True)
class BrokenLink:
    source: str
    target: str


def find_broken_links(index: "VaultIndex") -> list[BrokenLink]:
    """Every wikilink whose resolved target is not a note in the corpus."""
    return [
        BrokenLink(source, target)
        for source, targets in index.graph.broken.items()
        for target in targets
    ]


def format_report(broken: list[BrokenLink], note_count: int) -> str:
    """Human-readable report, grouped by source note."""
    if not broken:
        return f"All links are valid ({note_count} notes checked)."

    by_source: dict[str, list[str]] = {}
    for link in broken:
        by_source.setdefault(link.source, []).append(link.target)

    lines = [f"Found {len(broken)} broken link(s):", ""]
    for source, targets in by_source.items():
        lines.append(f"  {source}:")
        lines.extend(f"    -> [[{target}]] (not found)" for target in targets)
    lines.append("")
    lines.append(f"Total: {len(broken)} broken links in {len(by_source)} files")
    return "\n".join(lines)
