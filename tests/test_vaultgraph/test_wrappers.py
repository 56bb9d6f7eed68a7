"""Unit tests for vaultgraph.bases.wrappers and the expression helper functions."""

from datetime import date, datetime, timedelta, timezone

import pytest

from vaultgraph.bases.functions import file_has_tag, file_in_folder, is_truthy, parse_date
from vaultgraph.bases.types import FileProperties
from vaultgraph.bases.wrappers import DateWrapper, ListWrapper, StringWrapper, to_datetime, unwrap, wrap_value

# ---------------------------------------------------------------------------
# StringWrapper
# ---------------------------------------------------------------------------


class TestStringWrapper:
    def test_contains_is_case_sensitive(self):
        s = StringWrapper("Project Notes")
        assert s.contains("Notes")
        assert not s.contains("notes")

    def test_contains_any_and_all(self):
        s = StringWrapper("alpha beta")
        assert s.containsAny("zeta", "beta")
        assert not s.containsAll("alpha", "zeta")

    def test_case_helpers_chain(self):
        assert StringWrapper("  Mixed ").trim().lower() == "mixed"
        assert StringWrapper("a").upper().length == 1

    def test_none_is_empty(self):
        s = StringWrapper(None)
        assert s.isEmpty()
        assert not s

    def test_compares_with_plain_strings(self):
        assert StringWrapper("b") > "a"
        assert StringWrapper("b") == StringWrapper("b")
        assert StringWrapper("b") != "c"


# ---------------------------------------------------------------------------
# ListWrapper
# ---------------------------------------------------------------------------


class TestListWrapper:
    def test_scalar_becomes_single_item(self):
        assert ListWrapper("solo").value == ["solo"]
        assert ListWrapper(None).isEmpty()

    def test_membership(self):
        items = ListWrapper(["a", "b"])
        assert items.contains("a")
        assert items.containsAny("x", "b")
        assert not items.containsAll("a", "x")
        assert "b" in items

    def test_join_and_index(self):
        items = ListWrapper(["a", "b"])
        assert items.join(" | ") == "a | b"
        assert isinstance(items[0], StringWrapper)

    def test_equality_with_sequences(self):
        assert ListWrapper(("a",)) == ["a"]
        assert ListWrapper(["a"]) != "a"


# ---------------------------------------------------------------------------
# DateWrapper
# ---------------------------------------------------------------------------


class TestDateWrapper:
    def test_fields(self):
        d = DateWrapper("2024-03-09T14:05:06.250")
        assert (d.year, d.month, d.day) == (2024, 3, 9)
        assert (d.hour, d.minute, d.second, d.millisecond) == (14, 5, 6, 250)

    def test_ordering(self):
        assert DateWrapper(date(2024, 1, 1)) < DateWrapper("2024-06-01")
        assert DateWrapper("2024-01-01") == date(2024, 1, 1)

    def test_empty_date(self):
        d = DateWrapper("not a date")
        assert d.isEmpty()
        assert d.year == 0
        with pytest.raises(TypeError):
            d < DateWrapper("2024-01-01")

    def test_utc_suffix(self):
        assert to_datetime("2024-01-01T10:00:00Z") == datetime(2024, 1, 1, 10)

    def test_aware_datetime_converted_to_utc(self):
        aware = datetime(2024, 1, 1, 12, tzinfo=timezone(timedelta(hours=2)))
        assert to_datetime(aware) == datetime(2024, 1, 1, 10)

    def test_parse_date(self):
        assert parse_date("2024-05-01").month == 5


# ---------------------------------------------------------------------------
# wrap_value / unwrap / is_truthy
# ---------------------------------------------------------------------------


class TestWrapping:
    def test_wrap_value(self):
        assert isinstance(wrap_value("x"), StringWrapper)
        assert isinstance(wrap_value(["x"]), ListWrapper)
        assert isinstance(wrap_value(date(2024, 1, 1)), DateWrapper)
        assert wrap_value(3) == 3
        assert wrap_value({"a": 1}) == {"a": 1}

    def test_unwrap(self):
        assert unwrap(StringWrapper("x")) == "x"
        assert unwrap(5) == 5

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, False),
            ("", False),
            (StringWrapper(""), False),
            (ListWrapper([]), False),
            ({}, False),
            (0, False),
            ("x", True),
            (ListWrapper(["a"]), True),
            (1, True),
        ],
    )
    def test_is_truthy(self, value, expected):
        assert is_truthy(value) is expected


# ---------------------------------------------------------------------------
# file helpers
# ---------------------------------------------------------------------------


def _file(tags=(), folder="") -> FileProperties:
    return FileProperties(name="n", basename="n", path="n", folder=folder, extension="md", tags=tuple(tags))


class TestFileHelpers:
    @pytest.mark.parametrize(
        "tags, wanted, expected",
        [
            (["parent"], "parent", True),
            (["parent/child"], "parent", True),
            (["parentish"], "parent", False),
            (["#parent"], "#parent", True),
            (["parent"], "parent/child", False),
            (["parent"], "", False),
        ],
    )
    def test_has_tag(self, tags, wanted, expected):
        assert file_has_tag(_file(tags=tags), wanted) is expected

    def test_in_folder_ignores_surrounding_slashes(self):
        assert file_in_folder(_file(folder="a/b"), "/a/")
        assert not file_in_folder(_file(folder="ab"), "a")
