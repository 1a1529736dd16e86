"""
Tests for the template helper library.
"""

import pytest
from jinja2 import Undefined

from fieldlog.core.templates.helpers import (
    HELPERS,
    compact, dash, underscore, trim, downcase, upcase, titlecase, first8,
    join, join_space, join_comma, join_comma_compact,
    or_, and_, eq, ne, gt, ge, lt, le, includes, starts_with, ends_with,
)


class TestStringHelpers:
    """Test the string transformation helpers."""

    def test_compact(self):
        assert compact("2025-01-01") == "20250101"
        assert compact("K-1234 / Example Park!") == "K1234ExamplePark"

    def test_dash(self):
        assert dash("Example  Park / K-1234") == "Example-Park-K-1234"
        assert dash("N0CALL", "K-1234") == "N0CALL-K-1234"
        assert dash("--edge--") == "edge"

    def test_underscore(self):
        assert underscore("Example Park", "K-1234") == "Example_Park_K_1234"
        assert underscore("__edge__") == "edge"

    def test_trim(self):
        assert trim("  lots   of \n space ") == "lots of space"

    def test_case_helpers(self):
        assert downcase("N0CALL") == "n0call"
        assert upcase("n0call") == "N0CALL"
        assert titlecase("example national park") == "Example National Park"

    def test_first8(self):
        assert first8("a1b2c3d4-e5f6-4789") == "a1b2c3d4"
        assert first8("short") == "short"

    @pytest.mark.parametrize("helper", [compact, dash, underscore, trim, downcase, upcase, titlecase, first8])
    def test_missing_inputs_are_ignored(self, helper):
        assert helper(None) == ""
        assert helper(Undefined()) == ""
        assert helper("") == ""

    def test_missing_inputs_are_skipped_between_values(self):
        assert dash("N0CALL", None, "", "K-1234") == "N0CALL-K-1234"
        assert downcase(None, "POTA") == "pota"


class TestJoinHelpers:
    """Test list joining helpers."""

    def test_join_singleton_returns_item(self):
        assert join(["K-1234"]) == "K-1234"

    def test_join_two_items_uses_final_separator_only(self):
        assert join(["K-1234", "K-5678"]) == "K-1234 and K-5678"

    def test_join_many_items(self):
        assert join(["A", "B", "C"]) == "A, B and C"
        assert join(["A", "B", "C"], " / ", " & ") == "A / B & C"

    def test_join_skips_empty_items(self):
        assert join(["A", None, "", "B"]) == "A and B"

    def test_join_non_list(self):
        assert join("K-1234") == "K-1234"
        assert join(None) == ""
        assert join([]) == ""

    def test_fixed_separator_joins(self):
        items = ["A", None, "B", "C"]
        assert join_space(items) == "A B C"
        assert join_comma(items) == "A, B, C"
        assert join_comma_compact(items) == "A,B,C"


class TestLogicHelpers:
    """Test boolean and comparison helpers."""

    def test_or_returns_first_non_empty(self):
        assert or_(None, "", "K-1234", "K-5678") == "K-1234"
        assert or_(None, Undefined()) == ""

    def test_and_returns_last_when_all_present(self):
        assert and_("N0CALL", "K-1234") == "K-1234"
        assert and_("N0CALL", None) is False
        assert and_() is False

    def test_equality(self):
        assert eq("adif", "adif")
        assert ne("adif", "qson")

    def test_ordering(self):
        assert gt(3, 2)
        assert ge(2, 2)
        assert lt("1", 2)
        assert le(2, "2.0")
        assert not gt(None, 1)
        assert not lt("abc", 2)

    def test_includes(self):
        assert includes("Example Park", "Park")
        assert includes(["adif", "qson"], "qson")
        assert not includes(None, "x")
        assert not includes(["adif"], Undefined())

    def test_starts_and_ends_with(self):
        assert starts_with("K-1234", "K-")
        assert ends_with("log.adi", ".adi")
        assert not starts_with(None, "K")


class TestHelperTable:
    """Test the helper name table."""

    def test_template_names(self):
        expected = {
            'compact', 'dash', 'underscore', 'trim', 'downcase', 'upcase', 'titlecase', 'first8',
            'join', 'joinSpace', 'joinComma', 'joinCommaCompact',
            'or', 'and', 'eq', 'ne', 'gt', 'ge', 'lt', 'le', 'includes', 'startsWith', 'endsWith',
        }
        assert set(HELPERS) == expected
        assert HELPERS['startsWith'] is starts_with
