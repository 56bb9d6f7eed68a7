"""Inline tag and YAML-frontmatter parser, plus the ``.md`` note loader."""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from vaultgraph.note import Note, normalise_tags

# Inline #tags (not inside code-spans or URLs)
_TAG_RE = re.compile(r"(?<![`\w/#])#([\w/-]+)")
# YAML front-matter block
_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(.*?)\n?---[ \t]*(?:\n|$)", re.DOTALL)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text.

    Returns ``(metadata_dict, body)``; ``metadata_dict`` is empty when there
    is no front-matter block or when the block is not a YAML mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content
    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError:
        meta = {}
    if not isinstance(meta, dict):
        meta = {}
    return meta, content[match.end() :]


def parse_tags(text: str) -> list[str]:
    """Return all ``#tag`` values found in *text* (de-duped, ordered)."""
    seen: set[str] = set()
    result: list[str] = []
    for m in _TAG_RE.finditer(text):
        tag = m.group(1)
        if tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def parse_note(path: Path, root: Path | None = None) -> Note:
    """Read a ``.md`` file and return a fully-populated :class:`Note`.

    The note id is the path relative to *root* (the vault directory) in
    POSIX form; inline ``#tags`` are merged after the frontmatter ``tags``.
    """
    content = path.read_text(encoding="utf-8")
    frontmatter, body = parse_frontmatter(content)

    all_tags = list(dict.fromkeys(normalise_tags(frontmatter.get("tags")) + parse_tags(body)))
    if all_tags:
        frontmatter = {**frontmatter, "tags": all_tags}

    note_id = path.relative_to(root).as_posix() if root is not None else path.name
    return Note(id=note_id, body=body, frontmatter=frontmatter)


def iter_notes(vault_dir: Path) -> Iterator[Note]:
    """Yield every ``.md`` note under *vault_dir* in sorted path order."""
    vault_dir = Path(vault_dir)
    for path in sorted(vault_dir.glob("**/*.md")):
        yield parse_note(path, vault_dir)
