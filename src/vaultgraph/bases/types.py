"""Data types for Bases views and filters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal, Union

if TYPE_CHECKING:
    from vaultgraph.note import Note

ViewType = Literal["table", "cards", "list", "map"]
VIEW_TYPES: tuple[str, ...] = ("table", "cards", "list", "map")
CONJUNCTIONS: tuple[str, ...] = ("and", "or", "not")


# ---------------------------------------------------------------------------
# Filter tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Leaf:
    """A predicate expression such as ``status == "active"``."""

    expression: str


@dataclass(frozen=True)
class And:
    children: tuple["Filter", ...]


@dataclass(frozen=True)
class Or:
    children: tuple["Filter", ...]


@dataclass(frozen=True)
class Not:
    """True when *none* of the children is true (n-ary NOR)."""

    children: tuple["Filter", ...]


Filter = Union[Leaf, And, Or, Not]
Conjunction = Union[And, Or, Not]


def conjunction_key(node: Conjunction) -> str:
    return {And: "and", Or: "or", Not: "not"}[type(node)]


def filter_to_raw(node: Filter | None) -> Any:
    """Serialise a filter back to its YAML shape (strings and one-key dicts)."""
    if node is None:
        return None
    if isinstance(node, Leaf):
        return node.expression
    return {conjunction_key(node): [filter_to_raw(child) for child in node.children]}


# ---------------------------------------------------------------------------
# View configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PropertyConfig:
    display_name: str | None = None


@dataclass(frozen=True)
class BaseView:
    type: str
    name: str
    limit: int | None = None
    filters: Filter | None = None
    #: Property names to display, in order
    order: tuple[str, ...] | None = None
    # Card view options
    image: str | None = None
    image_fit: str | None = None
    image_aspect_ratio: float | None = None
    card_size: int | None = None


@dataclass(frozen=True)
class BaseConfig:
    views: tuple[BaseView, ...]
    filters: Filter | None = None
    formulas: dict[str, str] = field(default_factory=dict)
    properties: dict[str, PropertyConfig] = field(default_factory=dict)
    source: str | None = None

    def view(self, name: str | None = None) -> BaseView:
        """Return the view called *name*, or the first view."""
        if name is None:
            return self.views[0]
        for view in self.views:
            if view.name == name:
                return view
        raise KeyError(f"No view named {name!r}")

    def display_name(self, prop: str) -> str:
        config = self.properties.get(prop)
        return config.display_name if config and config.display_name else prop


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileProperties:
    """Read-only file view of a note, as seen by filter expressions."""

    name: str
    basename: str
    path: str
    folder: str
    extension: str
    tags: tuple[str, ...] = ()
    links: tuple[str, ...] = ()
    embeds: tuple[str, ...] = ()
    ctime: datetime | None = None
    mtime: datetime | None = None
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def ext(self) -> str:
        return self.extension


@dataclass(frozen=True)
class EvaluationContext:
    file: FileProperties
    note: dict[str, Any]
    formulas: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FilterResult:
    notes: list["Note"]
    #: Matches before the limit was applied
    filtered_count: int
    total_count: int
