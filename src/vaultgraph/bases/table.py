"""Tabular projection of a view, as a Polars DataFrame."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import polars as pl

from vaultgraph.bases.filter import LinkMap, format_property_value, get_property_value, query_view
from vaultgraph.bases.types import BaseConfig, BaseView

if TYPE_CHECKING:
    from vaultgraph.note import Note

DEFAULT_COLUMNS: tuple[str, ...] = ("file.name",)


def view_table(
    config: BaseConfig,
    view: BaseView | str | None,
    notes: Iterable["Note"],
    *,
    links: LinkMap | None = None,
) -> pl.DataFrame:
    """Return the view's matching notes with one text column per ``order`` property.

    Column headers use the ``displayName`` from the base's ``properties``
    section when one is set.
    """
    if not isinstance(view, BaseView):
        view = config.view(view)
    result = query_view(config, view, notes, links=links)

    props = list(dict.fromkeys(view.order or DEFAULT_COLUMNS))
    columns = _column_names(config, props)
    data: dict[str, list[str]] = {c: [] for c in columns}
    for note in result.notes:
        for prop, column in zip(props, columns):
            value = get_property_value(note, prop, links=links, formulas=config.formulas)
            data[column].append(format_property_value(value))
    return pl.DataFrame(data, schema={c: pl.Utf8 for c in data})


def _column_names(config: BaseConfig, props: list[str]) -> list[str]:
    """One unique header per property.

    A display name shared by several properties is replaced by the raw
    property name on every one of them.
    """
    display = [config.display_name(p) for p in props]
    counts = {name: display.count(name) for name in display}
    names = [name if counts[name] == 1 else prop for prop, name in zip(props, display)]
    used: set[str] = set()
    unique: list[str] = []
    for name in names:
        candidate, n = name, 2
        while candidate in used:
            candidate = f"{name} ({n})"
            n += 1
        used.add(candidate)
        unique.append(candidate)
    return unique
