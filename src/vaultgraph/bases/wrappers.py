"""Typed property wrappers exposed to filter expressions.

Each wrapper has a fixed set of capabilities, so expressions can chain
calls such as ``file.name.contains("draft")`` or ``file.ctime.year``:

* :class:`StringWrapper` – text helpers and case folding
* :class:`ListWrapper` – membership helpers
* :class:`DateWrapper` – calendar field accessors and ordering

Method names follow the Bases filter syntax (camelCase).
"""

from __future__ import annotations

import functools
from datetime import date, datetime, timezone
from typing import Any


def unwrap(value: Any) -> Any:
    """Return the plain Python value behind a wrapper (or *value* itself)."""
    if isinstance(value, (StringWrapper, ListWrapper, DateWrapper)):
        return value.value
    return value


class StringWrapper:
    __slots__ = ("value",)

    def __init__(self, value: str | None) -> None:
        self.value = "" if value is None else str(value)

    def contains(self, search: Any) -> bool:
        return str(unwrap(search)) in self.value

    def containsAny(self, *values: Any) -> bool:  # noqa: N802
        return any(str(unwrap(v)) in self.value for v in values)

    def containsAll(self, *values: Any) -> bool:  # noqa: N802
        return all(str(unwrap(v)) in self.value for v in values)

    def startsWith(self, prefix: Any) -> bool:  # noqa: N802
        return self.value.startswith(str(unwrap(prefix)))

    def endsWith(self, suffix: Any) -> bool:  # noqa: N802
        return self.value.endswith(str(unwrap(suffix)))

    def isEmpty(self) -> bool:  # noqa: N802
        return not self.value

    def lower(self) -> "StringWrapper":
        return StringWrapper(self.value.lower())

    def upper(self) -> "StringWrapper":
        return StringWrapper(self.value.upper())

    def trim(self) -> "StringWrapper":
        return StringWrapper(self.value.strip())

    @property
    def length(self) -> int:
        return len(self.value)

    def __len__(self) -> int:
        return len(self.value)

    def __bool__(self) -> bool:
        return bool(self.value)

    def __contains__(self, item: Any) -> bool:
        return str(unwrap(item)) in self.value

    def __eq__(self, other: object) -> bool:
        return self.value == unwrap(other)

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __lt__(self, other: Any) -> bool:
        return self.value < unwrap(other)

    def __le__(self, other: Any) -> bool:
        return self.value <= unwrap(other)

    def __gt__(self, other: Any) -> bool:
        return self.value > unwrap(other)

    def __ge__(self, other: Any) -> bool:
        return self.value >= unwrap(other)

    def __add__(self, other: Any) -> "StringWrapper":
        return StringWrapper(self.value + str(unwrap(other)))

    def __radd__(self, other: Any) -> "StringWrapper":
        return StringWrapper(str(unwrap(other)) + self.value)

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"StringWrapper({self.value!r})"


class ListWrapper:
    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        if value is None:
            value = []
        elif isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
            value = [value]
        self.value = [unwrap(v) for v in value]

    def contains(self, item: Any) -> bool:
        return unwrap(item) in self.value

    def containsAny(self, *items: Any) -> bool:  # noqa: N802
        return any(unwrap(i) in self.value for i in items)

    def containsAll(self, *items: Any) -> bool:  # noqa: N802
        return all(unwrap(i) in self.value for i in items)

    def isEmpty(self) -> bool:  # noqa: N802
        return not self.value

    def join(self, separator: Any = ",") -> StringWrapper:
        return StringWrapper(str(unwrap(separator)).join(str(v) for v in self.value))

    @property
    def length(self) -> int:
        return len(self.value)

    def __len__(self) -> int:
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def __contains__(self, item: Any) -> bool:
        return unwrap(item) in self.value

    def __getitem__(self, index: int) -> Any:
        return wrap_value(self.value[index])

    def __bool__(self) -> bool:
        return bool(self.value)

    def __eq__(self, other: object) -> bool:
        other = unwrap(other)
        if not isinstance(other, (list, tuple)):
            return False
        return self.value == list(other)

    def __ne__(self, other: object) -> bool:
        return not self == other

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return ",".join(str(v) for v in self.value)

    def __repr__(self) -> str:
        return f"ListWrapper({self.value!r})"


def to_datetime(value: Any) -> datetime | None:
    """Coerce dates, datetimes, ISO strings and wrappers to a naive datetime."""
    value = unwrap(value)
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return to_datetime(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


@functools.total_ordering
class DateWrapper:
    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = to_datetime(value)

    @property
    def year(self) -> int:
        return self.value.year if self.value else 0

    @property
    def month(self) -> int:
        return self.value.month if self.value else 0

    @property
    def day(self) -> int:
        return self.value.day if self.value else 0

    @property
    def hour(self) -> int:
        return self.value.hour if self.value else 0

    @property
    def minute(self) -> int:
        return self.value.minute if self.value else 0

    @property
    def second(self) -> int:
        return self.value.second if self.value else 0

    @property
    def millisecond(self) -> int:
        return self.value.microsecond // 1000 if self.value else 0

    def isEmpty(self) -> bool:  # noqa: N802
        return self.value is None

    def _other(self, other: Any) -> datetime:
        other_dt = to_datetime(other)
        if self.value is None or other_dt is None:
            raise TypeError("Cannot compare an empty or unparseable date")
        return other_dt

    def __eq__(self, other: object) -> bool:
        other_dt = to_datetime(other)
        return self.value is not None and self.value == other_dt

    def __lt__(self, other: Any) -> bool:
        return self.value < self._other(other)  # type: ignore[operator]

    def __hash__(self) -> int:
        return hash(self.value)

    def __bool__(self) -> bool:
        return self.value is not None

    def __str__(self) -> str:
        return self.value.isoformat() if self.value else ""

    def __repr__(self) -> str:
        return f"DateWrapper({self.value!r})"


def wrap_value(value: Any) -> Any:
    """Wrap strings, lists and dates; leave numbers, booleans and mappings as-is."""
    if isinstance(value, (StringWrapper, ListWrapper, DateWrapper)):
        return value
    if isinstance(value, str):
        return StringWrapper(value)
    if isinstance(value, (date, datetime)):
        return DateWrapper(value)
    if isinstance(value, (list, tuple)):
        return ListWrapper(value)
    return value
