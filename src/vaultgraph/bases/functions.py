"""Built-in functions available to filter expressions."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from vaultgraph.bases.wrappers import DateWrapper, unwrap, to_datetime

if TYPE_CHECKING:
    from vaultgraph.bases.types import FileProperties


def _strip_slashes(path: str) -> str:
    return path.strip("/")


def file_has_tag(file: "FileProperties", tag: Any) -> bool:
    """Exact tag match, or any tag nested under it.

    ``hasTag("parent")`` matches ``parent`` and ``parent/child`` but not
    ``parentish``. A leading ``#`` is ignored on both sides.
    """
    wanted = str(unwrap(tag)).lstrip("#")
    if not wanted:
        return False
    for t in file.tags:
        t = t.lstrip("#")
        if t == wanted or t.startswith(wanted + "/"):
            return True
    return False


def file_in_folder(file: "FileProperties", folder: Any) -> bool:
    """The note lives in *folder* or one of its descendants."""
    wanted = _strip_slashes(str(unwrap(folder)))
    current = _strip_slashes(file.folder)
    if not wanted:
        return not current
    return current == wanted or current.startswith(wanted + "/")


def file_has_property(note: Mapping[str, Any], name: Any) -> bool:
    """The frontmatter defines *name* with a non-null value."""
    return note.get(str(unwrap(name))) is not None


def _strip_md(link: str) -> str:
    return link[:-3] if link.endswith(".md") else link


def file_has_link(file: "FileProperties", link: Any) -> bool:
    """The note links to *link*, matched exactly or as a path suffix."""
    wanted = _strip_md(str(unwrap(link)))
    if not wanted:
        return False
    for existing in file.links:
        existing = _strip_md(existing)
        if existing == wanted or existing.endswith("/" + wanted):
            return True
    return False


def string_contains(value: Any, substring: Any, case_sensitive: bool = False) -> bool:
    value, substring = unwrap(value), unwrap(substring)
    if not value or not substring:
        return False
    if isinstance(value, (list, tuple)):
        return substring in value
    value, substring = str(value), str(substring)
    if case_sensitive:
        return substring in value
    return substring.casefold() in value.casefold()


def string_starts_with(value: Any, prefix: Any, case_sensitive: bool = False) -> bool:
    value, prefix = unwrap(value), unwrap(prefix)
    if not value or not prefix:
        return False
    value, prefix = str(value), str(prefix)
    if case_sensitive:
        return value.startswith(prefix)
    return value.casefold().startswith(prefix.casefold())


def string_ends_with(value: Any, suffix: Any, case_sensitive: bool = False) -> bool:
    value, suffix = unwrap(value), unwrap(suffix)
    if not value or not suffix:
        return False
    value, suffix = str(value), str(suffix)
    if case_sensitive:
        return value.endswith(suffix)
    return value.casefold().endswith(suffix.casefold())


def parse_date(value: Any) -> DateWrapper:
    """``date("2024-05-01")``; unparseable input gives an empty date."""
    return DateWrapper(to_datetime(value))


def now() -> DateWrapper:
    return DateWrapper(datetime.now())


def today() -> DateWrapper:
    return DateWrapper(datetime.now().replace(hour=0, minute=0, second=0, microsecond=0))


def is_truthy(value: Any) -> bool:
    """Truthiness of an expression result (empty strings/lists/mappings are false)."""
    value = unwrap(value)
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) > 0
    return bool(value)
