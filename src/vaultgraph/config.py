"""Engine configuration.

Settings live in an optional ``vaultgraph.toml``::

    [vault]
    publish_mode = "draft"     # or "publish"
    log_level    = "WARNING"

    [related]
    limit       = 10
    same_folder = 8.0
    ...

Environment variables (all optional; they override the file):
    VAULTGRAPH_PUBLISH_MODE   – ``draft`` or ``publish``
    VAULTGRAPH_LOG_LEVEL      – logging level name used by the CLI
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from vaultgraph.note import Note

PUBLISH_MODES = ("draft", "publish")
CONFIG_FILENAME = "vaultgraph.toml"


@dataclass(frozen=True)
class RelatedConfig:
    """Weights and thresholds of the related-notes scorer."""

    limit: int = 10
    tag_idf_scale: float = 10.0
    same_folder: float = 8.0
    related_folder: float = 4.0
    bidirectional_link: float = 50.0
    unidirectional_link: float = 25.0
    similarity_floor: float = 0.05
    high_similarity: float = 0.3
    similar_content: float = 0.15
    metadata_weight: float = 0.6
    content_weight: float = 0.4
    #: Shorter tokens are ignored by the content similarity (stop-word proxy)
    min_token_length: int = 4


@dataclass(frozen=True)
class VaultConfig:
    publish_mode: str = "draft"
    log_level: str = "WARNING"
    related: RelatedConfig = field(default_factory=RelatedConfig)

    def __post_init__(self) -> None:
        if self.publish_mode not in PUBLISH_MODES:
            raise ValueError(f"publish_mode must be one of {', '.join(PUBLISH_MODES)}; got {self.publish_mode!r}")


def _section(cls: type, data: dict[str, Any], name: str) -> dict[str, Any]:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown key(s) in [{name}]: {', '.join(unknown)}")
    return data


def config_from_dict(data: dict[str, Any]) -> VaultConfig:
    """Build a :class:`VaultConfig` from parsed TOML data."""
    vault = _section(VaultConfig, dict(data.get("vault", {})), "vault")
    vault.pop("related", None)
    related = _section(RelatedConfig, dict(data.get("related", {})), "related")
    return VaultConfig(**vault, related=RelatedConfig(**related))


def load_config(path: Path | str | None = None) -> VaultConfig:
    """Load configuration from *path* (if it exists) and the environment."""
    data: dict[str, Any] = {}
    if path is not None and Path(path).is_file():
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    config = config_from_dict(data)

    overrides: dict[str, str] = {}
    if mode := os.getenv("VAULTGRAPH_PUBLISH_MODE"):
        overrides["publish_mode"] = mode.strip().lower()
    if level := os.getenv("VAULTGRAPH_LOG_LEVEL"):
        overrides["log_level"] = level.strip().upper()
    return replace(config, **overrides) if overrides else config


def should_publish(note: "Note", mode: str = "draft") -> bool:
    """Whether *note* is part of the published corpus.

    ``draft`` hides notes marked ``draft: true``; ``publish`` keeps only
    notes marked ``publish: true``.
    """
    if mode == "draft":
        return note.frontmatter.get("draft") is not True
    return note.frontmatter.get("publish") is True
