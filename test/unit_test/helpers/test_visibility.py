from types import SimpleNamespace

import pytest

from expertpress.helpers.utils import is_disabled, lookup, parse_int
from expertpress.helpers.visibility import filter_by_visibility, parse_visibility


class TestParseVisibility:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ["public"]),
            ("", ["public"]),
            ("members", ["members"]),
            ("public, members ,paid", ["public", "members", "paid"]),
            (["paid", " members"], ["paid", "members"]),
            (" , ", ["public"]),
        ],
    )
    def test_parse(self, value, expected):
        assert parse_visibility(value) == expected


class TestFilterByVisibility:
    items = [
        {"name": "a", "visibility": "public"},
        {"name": "b", "visibility": "members"},
        {"name": "c"},
    ]

    def test_default_is_public(self):
        assert [item["name"] for item in filter_by_visibility(self.items)] == ["a", "c"]

    def test_multiple_values(self):
        kept = filter_by_visibility(self.items, "public,members", lambda item: item["name"])

        assert kept == ["a", "b", "c"]

    def test_all(self):
        assert len(filter_by_visibility(self.items, "all")) == 3

    def test_mapping_keeps_keys(self):
        kept = filter_by_visibility(dict(enumerate(self.items)), "members", lambda item: item["name"])

        assert kept == {1: "b", 2: "c"}

    def test_objects(self):
        items = [SimpleNamespace(visibility="paid"), SimpleNamespace(visibility="public")]

        assert filter_by_visibility(items, "paid") == [items[0]]

    def test_none(self):
        assert filter_by_visibility(None) == []


class TestUtils:
    def test_lookup(self):
        assert lookup({"a": 1}, "a") == 1
        assert lookup(SimpleNamespace(a=2), "a") == 2
        assert lookup(None, "a", "x") == "x"
        assert lookup({}, "a") is None

    @pytest.mark.parametrize(("value", "expected"), [("3", 3), (" 4 ", 4), (5, 5), ("", None), (0, None), (None, None)])
    def test_parse_int(self, value, expected):
        assert parse_int(value) == expected

    @pytest.mark.parametrize(("flag", "expected"), [(False, True), ("false", True), (True, False), ("true", False), (None, False)])
    def test_is_disabled(self, flag, expected):
        assert is_disabled(flag) is expected
