"""
查询构建测试
"""

import pytest

from restaurant_api.core.exceptions import ValidationError
from restaurant_api.services.query_builder import (
    build_list_query,
    build_user_search_query,
    resolve_sort_field,
)

SEARCH_FIELDS = ("customer_name", "customer_email")


class TestBuildListQuery:

    def test_defaults(self):
        query = build_list_query(SEARCH_FIELDS)
        assert query.equals == {}
        assert query.contains_any == []
        assert query.sort_field == "created_at"
        assert query.descending is True

    def test_status_filter(self):
        query = build_list_query(SEARCH_FIELDS, filters={"status": "pending"})
        assert query.equals == {"status": "pending"}

    @pytest.mark.parametrize("value", [None, "", "all", "  all  "])
    def test_status_filter_skipped(self, value):
        query = build_list_query(SEARCH_FIELDS, filters={"status": value})
        assert query.equals == {}

    def test_boolean_filter_kept(self):
        query = build_list_query(("name",), filters={"available": False})
        assert query.equals == {"available": False}

    def test_search_spans_all_fields(self):
        query = build_list_query(SEARCH_FIELDS, search=" jane ")
        assert query.contains_any == [("customer_name", "jane"), ("customer_email", "jane")]

    def test_ascending_order(self):
        assert build_list_query(SEARCH_FIELDS, order="asc").descending is False
        assert build_list_query(SEARCH_FIELDS, order="anything").descending is False
        assert build_list_query(SEARCH_FIELDS, order="DESC").descending is True


class TestResolveSortField:

    def test_alias(self):
        assert resolve_sort_field("createdAt", ()) == "created_at"
        assert resolve_sort_field("updatedAt", ()) == "updated_at"

    def test_whitelisted(self):
        assert resolve_sort_field("total", ("total",)) == "total"

    def test_unknown_falls_back(self):
        assert resolve_sort_field("doc; DROP TABLE", ("total",)) == "created_at"


class TestBuildUserSearchQuery:

    def test_requires_a_parameter(self):
        with pytest.raises(ValidationError) as exc:
            build_user_search_query()
        assert "At least one search parameter" in exc.value.message

    def test_blank_parameters_ignored(self):
        with pytest.raises(ValidationError):
            build_user_search_query(name="  ", email="")

    def test_only_supplied_fields(self):
        query = build_user_search_query(phone="555")
        assert query.contains_any == [("customer_phone", "555")]
        assert query.sort_field == "created_at"
        assert query.descending is True

    def test_multiple_fields(self):
        query = build_user_search_query(name="Jane", email="jane@")
        assert query.contains_any == [("customer_name", "Jane"), ("customer_email", "jane@")]
