"""``.base`` file loading, filter normalisation and validation.

A ``.base`` file is YAML::

    filters:                       # global, AND-ed with each view's filters
      and:
        - file.hasTag("book")
    formulas:
      pages_left: "pages - read"
    properties:
      status: {displayName: Status}
    views:
      - type: table                # table | cards | list | map
        name: Reading
        limit: 20
        order: [file.name, status]
        filters:
          not:
            - status == "done"
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from vaultgraph.bases.types import (
    CONJUNCTIONS,
    VIEW_TYPES,
    And,
    BaseConfig,
    BaseView,
    Filter,
    Leaf,
    Not,
    Or,
    PropertyConfig,
)
from vaultgraph.errors import BaseFileError, FilterError

_NODE_TYPES = {"and": And, "or": Or, "not": Not}


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def normalize_filter(raw: Any) -> Filter | None:
    """Validate a raw filter and return it as a :data:`Filter` tree.

    Strings become :class:`Leaf` nodes. A mapping must hold exactly one of
    ``and``, ``or`` or ``not``. Absent children are pruned, and a
    conjunction left without children normalises to ``None`` (match all).
    """
    if raw is None:
        return None

    if isinstance(raw, Leaf):
        return normalize_filter(raw.expression)
    if isinstance(raw, (And, Or, Not)):
        return _build_node(type(raw), raw.children)

    if isinstance(raw, str):
        expression = raw.strip()
        return Leaf(expression) if expression else None

    if isinstance(raw, Mapping):
        if not raw:
            return None
        keys = list(raw)
        invalid = [k for k in keys if k not in CONJUNCTIONS]
        if invalid:
            raise FilterError(
                f"Invalid filter conjunction {invalid[0]!r}. Must be one of: {', '.join(CONJUNCTIONS)}"
            )
        if len(keys) > 1:
            raise FilterError(f"A filter node must use a single conjunction; got {', '.join(keys)}")
        key = keys[0]
        value = raw[key]
        children = value if isinstance(value, (list, tuple)) else [value]
        return _build_node(_NODE_TYPES[key], children)

    raise FilterError(f"A filter must be a string or a mapping, not {type(raw).__name__}")


def _build_node(node_type: type, children: Sequence[Any]) -> Filter | None:
    kept = tuple(child for child in (normalize_filter(c) for c in children) if child is not None)
    if not kept:
        return None
    return node_type(kept)


def combine_filters(global_filter: Filter | None, view_filter: Filter | None) -> Filter | None:
    """AND the base-level filter with a view's own filter."""
    if global_filter is None:
        return view_filter
    if view_filter is None:
        return global_filter
    return And((global_filter, view_filter))


def validate_order(order: Any) -> None:
    """Check that *order* is a list of non-empty property names."""
    if order is None:
        return
    if not isinstance(order, (list, tuple)):
        raise BaseFileError("order must be an array of strings", field="order")
    for index, prop in enumerate(order):
        if not isinstance(prop, str) or not prop.strip():
            raise BaseFileError("must be a non-empty string", field=f"order[{index}]")


# ---------------------------------------------------------------------------
# .base files
# ---------------------------------------------------------------------------


def _number(value: Any, field: str, source: str | None, kind: type) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise BaseFileError(f"must be a number, got {value!r}", source=source, field=field)
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise BaseFileError(f"must be a number, got {value!r}", source=source, field=field) from None


def _filters(raw: Any, field: str, source: str | None) -> Filter | None:
    try:
        return normalize_filter(raw)
    except FilterError as exc:
        raise BaseFileError(str(exc), source=source, field=field) from exc


def _parse_view(raw: Any, index: int, source: str | None) -> BaseView:
    where = f"views[{index}]"
    if not isinstance(raw, Mapping):
        raise BaseFileError("view must be an object", source=source, field=where)

    view_type = raw.get("type")
    if view_type not in VIEW_TYPES:
        raise BaseFileError(
            f"must have a valid type ({', '.join(VIEW_TYPES)}), got {view_type!r}",
            source=source,
            field=f"{where}.type",
        )

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise BaseFileError("must have a non-empty string name", source=source, field=f"{where}.name")

    order = raw.get("order")
    try:
        validate_order(order)
    except BaseFileError as exc:
        raise BaseFileError(exc.message, source=source, field=f"{where}.{exc.field}") from None

    limit = _number(raw.get("limit"), f"{where}.limit", source, int)
    if limit is not None and limit < 0:
        raise BaseFileError("must not be negative", source=source, field=f"{where}.limit")

    image_fit = raw.get("imageFit")
    return BaseView(
        type=view_type,
        name=name,
        limit=limit,
        filters=_filters(raw.get("filters"), f"{where}.filters", source),
        order=tuple(order) if order is not None else None,
        image=raw.get("image"),
        image_fit=image_fit if image_fit else None,
        image_aspect_ratio=_number(raw.get("imageAspectRatio"), f"{where}.imageAspectRatio", source, float),
        card_size=_number(raw.get("cardSize"), f"{where}.cardSize", source, int),
    )


def _property_config(raw: Any) -> PropertyConfig:
    if not isinstance(raw, Mapping):
        return PropertyConfig()
    display_name = raw.get("displayName")
    return PropertyConfig(display_name=str(display_name) if display_name else None)


def parse_base_file(content: str, source: str | None = None) -> BaseConfig:
    """Parse and validate the YAML text of a ``.base`` file.

    Raises :class:`~vaultgraph.errors.BaseFileError` naming *source* and the
    offending field when the structure is invalid.
    """
    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise BaseFileError(f"Invalid YAML in base file: {exc}", source=source) from exc

    if not isinstance(parsed, Mapping):
        raise BaseFileError("Base file must contain a valid YAML object", source=source)

    views = parsed.get("views")
    if not isinstance(views, list) or not views:
        raise BaseFileError(
            'Base file must contain at least one view in the "views" array',
            source=source,
            field="views",
        )

    formulas = parsed.get("formulas") or {}
    if not isinstance(formulas, Mapping):
        raise BaseFileError("must be a mapping of name to expression", source=source, field="formulas")

    properties = parsed.get("properties") or {}
    if not isinstance(properties, Mapping):
        raise BaseFileError("must be a mapping", source=source, field="properties")

    return BaseConfig(
        views=tuple(_parse_view(view, i, source) for i, view in enumerate(views)),
        filters=_filters(parsed.get("filters"), "filters", source),
        formulas={str(k): str(v) for k, v in formulas.items()},
        properties={str(k): _property_config(v) for k, v in properties.items()},
        source=source,
    )


def load_base_file(path: Path | str) -> BaseConfig:
    """Read and parse a ``.base`` file from disk."""
    path = Path(path)
    return parse_base_file(path.read_text(encoding="utf-8"), source=str(path))
