"""
Unit tests for the query engine.

Covers filtering, multi-key ordering and both pagination shapes.
"""

import math

import pytest

from apps.api.services.dictionary.query_engine import (
    BrowseParams,
    apply_filter,
    apply_order,
    paginate,
    parse_order,
    parse_positive_int,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def rows():
    return [
        {"COD": "B", "DESC": "Shopee", "GRP": "1"},
        {"COD": "A", "DESC": "Mercado Livre", "GRP": "2"},
        {"COD": "C", "DESC": "Amazon", "GRP": "1"},
        {"COD": "D", "DESC": "Magalu", "GRP": "2"},
    ]


class TestApplyFilter:
    """Test free-text filtering."""

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_filter_is_identity(self, rows, text):
        """Blank text returns the rows unchanged."""
        assert apply_filter(rows, text) == rows

    def test_case_insensitive_substring_on_any_column(self, rows):
        """Text matches any column, ignoring case."""
        result = apply_filter(rows, "LIVRE")
        assert [row["COD"] for row in result] == ["A"]

    def test_matches_string_form_of_numbers(self):
        """Numeric values match on their string form."""
        result = apply_filter([{"N": 120}, {"N": 7}], "12")
        assert result == [{"N": 120}]

    def test_none_values_never_match(self):
        """None does not match the text 'none'."""
        assert apply_filter([{"X": None}], "none") == []


class TestApplyOrder:
    """Test order spec parsing and stable sorting."""

    def test_parse_mixed_conventions(self):
        """Minus prefix, DESC/ASC qualifiers and commas combine."""
        assert parse_order("name,-created_at") == [("name", False), ("created_at", True)]
        assert parse_order("Z10_COD DESC") == [("Z10_COD", True)]
        assert parse_order("A DESC, B ASC C") == [("A", True), ("B", False), ("C", False)]

    def test_empty_spec_keeps_order(self, rows):
        assert apply_order(rows, "") == rows
        assert apply_order(rows, None) == rows

    def test_descending_with_minus(self, rows):
        result = apply_order(rows, "-COD")
        assert [row["COD"] for row in result] == ["D", "C", "B", "A"]

    def test_descending_with_qualifier(self, rows):
        result = apply_order(rows, "COD DESC")
        assert [row["COD"] for row in result] == ["D", "C", "B", "A"]

    def test_multi_key(self, rows):
        """Secondary key breaks ties of the first."""
        result = apply_order(rows, "GRP,-DESC")
        assert [row["COD"] for row in result] == ["B", "C", "A", "D"]

    def test_stable_for_equal_keys(self, rows):
        """Equal keys keep their original relative order."""
        result = apply_order(rows, "GRP")
        assert [row["COD"] for row in result] == ["B", "C", "A", "D"]

    def test_lexicographic_comparison(self):
        """Values compare as strings, so 10 sorts before 9."""
        result = apply_order([{"N": 9}, {"N": 10}], "N")
        assert [row["N"] for row in result] == [10, 9]

    def test_missing_values_sort_as_empty(self):
        result = apply_order([{"K": "b"}, {}, {"K": "a"}], "K")
        assert result == [{}, {"K": "a"}, {"K": "b"}]

    def test_does_not_mutate_input(self, rows):
        before = list(rows)
        apply_order(rows, "-COD")
        assert rows == before


class TestPaginate:
    """Test pagination and its two response shapes."""

    def test_first_page(self, rows):
        page = paginate(rows, 1, 3)
        assert [row["COD"] for row in page.items] == ["B", "A", "C"]
        assert page.has_next is True
        assert page.total == 4
        assert page.remaining_records == 1

    def test_last_page(self, rows):
        page = paginate(rows, 2, 3)
        assert len(page.items) == 1
        assert page.has_next is False
        assert page.remaining_records == 0

    def test_exact_boundary_has_no_next(self, rows):
        page = paginate(rows, 1, 4)
        assert page.has_next is False

    def test_page_beyond_end_is_empty(self, rows):
        page = paginate(rows, 5, 3)
        assert page.items == []
        assert page.has_next is False
        assert page.remaining_records == 0

    @pytest.mark.parametrize(
        "raw,expected",
        [("0", 10), ("abc", 10), (None, 10), ("-4", 1), ("7", 7), ("3x", 3), (0, 10), (-2, 1)],
    )
    def test_page_size_parsing(self, raw, expected):
        assert parse_positive_int(raw, 10) == expected

    def test_shapes(self, rows):
        page = paginate(rows, 1, 2)
        assert page.with_total() == {"hasNext": True, "total": 4, "items": rows[:2]}
        assert page.with_remaining() == {"hasNext": True, "remainingRecords": 2, "items": rows[:2]}

    @pytest.mark.parametrize("page_size", [1, 3, 10])
    @pytest.mark.parametrize("count", [0, 1, 3, 5, 10, 11])
    def test_pages_cover_every_row_once(self, count, page_size):
        rows = [{"COD": f"R{i:02d}"} for i in range(count)]
        expected_pages = math.ceil(count / page_size)

        collected = []
        for number in range(1, expected_pages + 1):
            page = paginate(rows, number, page_size)
            assert page.items
            assert page.has_next is (number < expected_pages)
            assert page.remaining_records == count - len(collected) - len(page.items)
            collected.extend(page.items)

        assert collected == rows
        assert paginate(rows, expected_pages + 1, page_size).items == []


class TestBrowseParams:
    """Test request argument parsing."""

    def test_from_args_defaults(self):
        params = BrowseParams.from_args({})
        assert params == BrowseParams(page=1, page_size=10, filter="", order="")

    def test_dollar_order_preferred_for_browse(self):
        params = BrowseParams.from_args({"$order": "A DESC", "order": "B"})
        assert params.order == "A DESC"

    def test_order_keys_can_be_reordered(self):
        params = BrowseParams.from_args({"$order": "A", "order": "-B"}, order_keys=("order", "$order"))
        assert params.order == "-B"

    def test_run_filters_orders_and_pages(self, rows):
        params = BrowseParams(page=1, page_size=1, filter="a", order="-COD")
        page = params.run(rows)
        # Mercado Livre, Amazon, Magalu contain "a"; Shopee does not
        assert page.total == 3
        assert page.items == [{"COD": "D", "DESC": "Magalu", "GRP": "2"}]
        assert page.remaining_records == 2
