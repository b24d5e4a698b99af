"""Unit tests for record identity and positioned lookup."""

import json
from urllib.parse import quote

import pytest

from apps.api.services.dictionary.resolver import (
    find_positioned,
    parse_positioned_payload,
    primary_identity_field,
    resolve_id,
)

pytestmark = pytest.mark.unit


class TestResolveId:
    """Test per-alias identity rules."""

    @pytest.mark.parametrize("alias", ["Z10", "Z11", "Z00", "Z02", "Z04"])
    def test_code_field_aliases(self, alias):
        assert resolve_id(alias, {f"{alias}_COD": "X1"}) == "X1"

    def test_alias_is_case_insensitive(self):
        assert resolve_id("z10", {"Z10_COD": "PLAT001"}) == "PLAT001"

    def test_product_bindings_prefer_erp_product(self):
        row = {"Z01_COD": "3", "Z01_PRDERP": "PRD002"}
        assert resolve_id("Z01", row) == "PRD002"

    def test_product_bindings_fall_back_to_code(self):
        assert resolve_id("Z01", {"Z01_COD": 7}) == "7"

    def test_identity_is_coerced_to_string(self):
        assert resolve_id("Z11", {"Z11_COD": 12}) == "12"

    @pytest.mark.parametrize("row", [{}, {"OTHER": "x"}, {"Z10_COD": ""}, {"Z10_COD": None}, None, "text"])
    def test_missing_identity_is_empty_sentinel(self, row):
        """Missing identity never raises."""
        assert resolve_id("Z10", row) == ""

    def test_blank_alias(self):
        assert resolve_id("", {"_COD": "x"}) == ""

    def test_primary_identity_field(self):
        assert primary_identity_field("Z01") == "Z01_PRDERP"
        assert primary_identity_field("z11") == "Z11_COD"


class TestParsePositionedPayload:
    """Test decoding of URL-embedded JSON payloads."""

    def test_item_sub_object(self):
        segment = quote(json.dumps({"item": {"Z10_COD": "PLAT002"}}))
        assert parse_positioned_payload(segment) == {"Z10_COD": "PLAT002"}

    def test_whole_payload_without_item(self):
        segment = quote(json.dumps({"Z10_COD": "PLAT002"}))
        assert parse_positioned_payload(segment) == {"Z10_COD": "PLAT002"}

    def test_trailing_brace_runs_collapse(self):
        segment = quote('{"Z10_COD":"PLAT002"}}}') + "%20"
        assert parse_positioned_payload(segment) == {"Z10_COD": "PLAT002"}

    def test_nested_item_keeps_its_closing_braces(self):
        segment = quote('{"item":{"Z10_COD":"PLAT002"}}')
        assert parse_positioned_payload(segment) == {"Z10_COD": "PLAT002"}

    def test_nested_item_with_surplus_braces(self):
        segment = quote('{"item":{"Z10_COD":"PLAT002"}}}}')
        assert parse_positioned_payload(segment) == {"Z10_COD": "PLAT002"}

    @pytest.mark.parametrize("segment", ["", None, "not-json", quote("[1,2]"), quote("{broken")])
    def test_unparseable_yields_none(self, segment):
        assert parse_positioned_payload(segment) is None


class TestFindPositioned:
    """Test positioned lookup with first-row fallback."""

    @pytest.fixture
    def rows(self):
        return [
            {"Z10_COD": "PLAT001", "Z10_DESC": "Mercado Livre"},
            {"Z10_COD": "PLAT002", "Z10_DESC": "Shopee"},
        ]

    def test_match_by_identity(self, rows):
        segment = quote(json.dumps({"item": {"Z10_COD": "PLAT002"}}))
        assert find_positioned("Z10", rows, segment)["Z10_DESC"] == "Shopee"

    def test_no_match_falls_back_to_first_row(self, rows):
        segment = quote(json.dumps({"item": {"Z10_COD": "NOPE"}}))
        assert find_positioned("Z10", rows, segment) == rows[0]

    def test_parse_failure_falls_back_to_first_row(self, rows):
        assert find_positioned("Z10", rows, "garbage") == rows[0]

    def test_no_rows_yields_empty_object(self):
        assert find_positioned("Z10", [], quote('{"Z10_COD":"PLAT001"}')) == {}

    def test_product_bindings_match_by_erp_product(self):
        rows = [{"Z01_COD": "1", "Z01_PRDERP": "PRD001"}, {"Z01_COD": "3", "Z01_PRDERP": "PRD002"}]
        segment = quote(json.dumps({"item": {"Z01_PRDERP": "PRD002"}}))
        assert find_positioned("Z01", rows, segment) == rows[1]
