"""vaultgraph: link graph, related notes, and Bases filtering for a note vault."""

from vaultgraph.bases import BaseConfig, BaseView, Filter, FilterResult, filter_notes, parse_base_file
from vaultgraph.config import RelatedConfig, VaultConfig, load_config
from vaultgraph.graph import LinkGraph
from vaultgraph.index import VaultIndex
from vaultgraph.links import LinkResolver, RawRef, extract_references, resolve_reference
from vaultgraph.note import Note
from vaultgraph.parser import parse_frontmatter, parse_note
from vaultgraph.related import RelatedNote, RelatednessScorer, compute_tag_weights, find_related
from vaultgraph.slugs import SlugIndex, slugify, slugify_path

__all__ = [
    "BaseConfig",
    "BaseView",
    "Filter",
    "FilterResult",
    "LinkGraph",
    "LinkResolver",
    "Note",
    "RawRef",
    "RelatedConfig",
    "RelatedNote",
    "RelatednessScorer",
    "SlugIndex",
    "VaultConfig",
    "VaultIndex",
    "compute_tag_weights",
    "extract_references",
    "filter_notes",
    "find_related",
    "load_config",
    "parse_base_file",
    "parse_frontmatter",
    "parse_note",
    "resolve_reference",
    "slugify",
    "slugify_path",
]
