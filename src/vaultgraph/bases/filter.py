"""Filter evaluation over notes.

Leaf predicates are evaluated with :mod:`simpleeval`. Expressions may use
the Bases operators ``&&``, ``||`` and ``!`` and the literals ``true``,
``false`` and ``null``; these are rewritten to Python before evaluation.

Names in scope for an expression:

* ``file`` – wrapped file properties plus ``hasTag``, ``inFolder``,
  ``hasProperty`` and ``hasLink`` methods
* ``note`` – the frontmatter, also exposed key-by-key at top level
* ``formula`` – the view's formulas, evaluated on access
* functions ``hasTag``, ``inFolder``, ``hasProperty``, ``hasLink``,
  ``contains``, ``startsWith``, ``endsWith``, ``now``, ``today``, ``date``

Any error raised while evaluating a predicate is logged and the predicate
counts as false, so a malformed filter hides notes instead of failing the
build.
"""

from __future__ import annotations

import functools
import json
import logging
import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import date, datetime
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from simpleeval import EvalWithCompoundTypes

from vaultgraph.bases.functions import (
    file_has_link,
    file_has_property,
    file_has_tag,
    file_in_folder,
    is_truthy,
    now,
    parse_date,
    string_contains,
    string_ends_with,
    string_starts_with,
    today,
)
from vaultgraph.bases.parser import combine_filters, normalize_filter
from vaultgraph.bases.types import (
    And,
    BaseConfig,
    BaseView,
    EvaluationContext,
    FileProperties,
    Filter,
    FilterResult,
    Leaf,
    Not,
    Or,
)
from vaultgraph.bases.wrappers import DateWrapper, ListWrapper, StringWrapper, to_datetime, unwrap, wrap_value
from vaultgraph.links import extract_embeds

if TYPE_CHECKING:
    from vaultgraph.note import Note

logger = logging.getLogger(__name__)

LinkMap = Mapping[str, Sequence[str]]

# String literals are left untouched by operator rewriting
_STRING_RE = re.compile(r"""("(?:\\.|[^"\\])*"|'(?:\\.|[^'\\])*')""")
_REWRITES = (
    (re.compile(r"==="), "=="),
    (re.compile(r"!=="), "!="),
    (re.compile(r"&&"), " and "),
    (re.compile(r"\|\|"), " or "),
    (re.compile(r"!(?!=)"), " not "),
)


@functools.lru_cache(maxsize=1024)
def translate_expression(expression: str) -> str:
    """Rewrite Bases operators to their Python spelling."""
    parts = _STRING_RE.split(expression)
    for i in range(0, len(parts), 2):
        for pattern, replacement in _REWRITES:
            parts[i] = pattern.sub(replacement, parts[i])
    return "".join(parts).strip()


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


def _as_strings(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value if v is not None)


def create_file_properties(note: "Note", links: Sequence[str] | None = None) -> FileProperties:
    """Build the ``file`` view of *note*.

    *links* are the note's resolved outgoing slugs (usually taken from the
    link graph); without them the frontmatter ``links`` list is used.
    """
    fm = note.frontmatter
    suffix = PurePosixPath(note.id).suffix
    return FileProperties(
        name=note.title,
        basename=note.basename,
        path=note.slug,
        folder=note.folder,
        extension=suffix.lstrip(".") if suffix else "md",
        tags=tuple(note.tags),
        links=tuple(links) if links is not None else _as_strings(fm.get("links")),
        embeds=tuple(extract_embeds(note.body)),
        ctime=to_datetime(fm.get("created") or fm.get("date")),
        mtime=to_datetime(fm.get("modified") or fm.get("updated") or fm.get("date")),
        properties=dict(fm),
    )


def create_context(
    note: "Note",
    links: LinkMap | None = None,
    formulas: Mapping[str, str] | None = None,
) -> EvaluationContext:
    note_links = links.get(note.slug, ()) if links is not None else None
    return EvaluationContext(
        file=create_file_properties(note, note_links),
        note=dict(note.frontmatter),
        formulas=dict(formulas or {}),
    )


class FileView:
    """``file`` as seen by an expression: wrapped properties and helpers."""

    def __init__(self, props: FileProperties, note: Mapping[str, Any]) -> None:
        self._props = props
        self._note = note
        self.name = StringWrapper(props.name)
        self.basename = StringWrapper(props.basename)
        self.path = StringWrapper(props.path)
        self.folder = StringWrapper(props.folder)
        self.extension = StringWrapper(props.extension)
        self.ext = self.extension
        self.tags = ListWrapper(props.tags)
        self.links = ListWrapper(props.links)
        self.embeds = ListWrapper(props.embeds)
        self.ctime = DateWrapper(props.ctime)
        self.mtime = DateWrapper(props.mtime)
        self.properties = props.properties

    def hasTag(self, tag: Any) -> bool:  # noqa: N802
        return file_has_tag(self._props, tag)

    def inFolder(self, folder: Any) -> bool:  # noqa: N802
        return file_in_folder(self._props, folder)

    def hasProperty(self, name: Any) -> bool:  # noqa: N802
        return file_has_property(self._note, name)

    def hasLink(self, link: Any) -> bool:  # noqa: N802
        return file_has_link(self._props, link)


class _Scope(dict):
    """Expression names; unknown names read as ``null``."""

    def __missing__(self, key: str) -> None:
        return None


class _Formulas(Mapping):
    """Formula values, evaluated lazily against one context."""

    def __init__(self, context: EvaluationContext) -> None:
        self._context = context
        self._active: set[str] = set()

    def __getitem__(self, key: str) -> Any:
        expression = self._context.formulas[key]
        if key in self._active:
            raise ValueError(f"Formula {key!r} refers to itself")
        self._active.add(key)
        try:
            return _evaluate(expression, self._context, self)
        finally:
            self._active.discard(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._context.formulas)

    def __len__(self) -> int:
        return len(self._context.formulas)


def _evaluator(context: EvaluationContext, formulas: _Formulas) -> EvalWithCompoundTypes:
    file_view = FileView(context.file, context.note)
    fields = {k: wrap_value(v) for k, v in context.note.items() if isinstance(k, str)}
    names = _Scope(fields)
    names.update(
        file=file_view,
        note=fields,
        formula=formulas,
        true=True,
        false=False,
        null=None,
    )
    functions = {
        "hasTag": file_view.hasTag,
        "inFolder": file_view.inFolder,
        "hasProperty": file_view.hasProperty,
        "hasLink": file_view.hasLink,
        "contains": string_contains,
        "startsWith": string_starts_with,
        "endsWith": string_ends_with,
        "now": now,
        "today": today,
        "date": parse_date,
    }
    return EvalWithCompoundTypes(names=names, functions=functions)


def _evaluate(expression: str, context: EvaluationContext, formulas: _Formulas | None = None) -> Any:
    evaluator = _evaluator(context, formulas or _Formulas(context))
    return evaluator.eval(translate_expression(expression))


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def evaluate_expression(expression: str, context: EvaluationContext) -> bool:
    """Evaluate one predicate; errors count as false."""
    try:
        return is_truthy(_evaluate(expression, context))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Error evaluating expression %r on %s: %s", expression, context.file.path, exc)
        return False


def evaluate_value(expression: str, context: EvaluationContext) -> Any:
    """Evaluate an expression for its value (formulas); errors give ``None``."""
    try:
        return unwrap(_evaluate(expression, context))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Error evaluating formula %r on %s: %s", expression, context.file.path, exc)
        return None


def evaluate_filter(node: Filter | None, context: EvaluationContext) -> bool:
    """Evaluate a filter tree for one note.

    ``None`` matches everything. ``and`` and ``or`` short-circuit; ``not``
    is true only when none of its children is true.
    """
    if node is None:
        return True
    if isinstance(node, Leaf):
        return evaluate_expression(node.expression, context)
    if isinstance(node, And):
        return all(evaluate_filter(child, context) for child in node.children)
    if isinstance(node, Or):
        return any(evaluate_filter(child, context) for child in node.children)
    if isinstance(node, Not):
        return not any(evaluate_filter(child, context) for child in node.children)
    raise TypeError(f"Not a filter node: {node!r}")


def filter_notes(
    notes: Iterable["Note"],
    filter: Any = None,
    limit: int | None = None,
    *,
    links: LinkMap | None = None,
    formulas: Mapping[str, str] | None = None,
) -> FilterResult:
    """Apply *filter* to *notes*, keeping corpus order, then cut to *limit*.

    ``filtered_count`` is the number of matches before the limit, and
    ``total_count`` the size of the corpus.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")
    notes = list(notes)
    node = normalize_filter(filter)
    if node is None:
        matched = notes
    else:
        matched = [note for note in notes if evaluate_filter(node, create_context(note, links, formulas))]
    filtered_count = len(matched)
    if limit is not None:
        matched = matched[:limit]
    return FilterResult(notes=list(matched), filtered_count=filtered_count, total_count=len(notes))


def query_view(
    config: BaseConfig,
    view: BaseView | str | None,
    notes: Iterable["Note"],
    *,
    links: LinkMap | None = None,
) -> FilterResult:
    """Run one view of a base: global and view filters AND-ed, view limit applied."""
    if not isinstance(view, BaseView):
        view = config.view(view)
    return filter_notes(
        notes,
        combine_filters(config.filters, view.filters),
        view.limit,
        links=links,
        formulas=config.formulas,
    )


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def get_property_value(
    note: "Note",
    name: str,
    *,
    links: LinkMap | None = None,
    formulas: Mapping[str, str] | None = None,
) -> Any:
    """Value of a display property (``file.*``, ``note.*``, ``formula.*`` or a bare key)."""
    if name.startswith("file."):
        note_links = links.get(note.slug, ()) if links is not None else None
        props = create_file_properties(note, note_links)
        return getattr(props, name[5:], None)
    if name.startswith("formula."):
        key = name[8:]
        if not formulas or key not in formulas:
            return None
        return evaluate_value(formulas[key], create_context(note, links, formulas))
    if name.startswith("note."):
        name = name[5:]
    return note.frontmatter.get(name)


def format_property_value(value: Any) -> str:
    """Render a property value as display text."""
    value = unwrap(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return f"{value:%b} {value.day}, {value.year}"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_property_value(v) for v in value)
    if isinstance(value, Mapping):
        return json.dumps(value, default=str)
    return str(value)
