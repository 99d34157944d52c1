"""Tests for content_cache/keys.py - deterministic key derivation."""

from datetime import date

import pytest

from content_cache.errors import ErrorCode, ValidationError
from content_cache.keys import (
    FilterId,
    LiteralId,
    as_identifier,
    derive_key,
    namespace_of,
    namespace_prefix,
)


class TestLiteralKeys:
    def test_string_identifier(self):
        assert derive_key("post-detail", "hello-world") == "post-detail:hello-world"

    def test_empty_string_identifier(self):
        assert derive_key("categories", "") == "categories:"

    def test_identifier_may_contain_separator(self):
        key = derive_key("post-detail", "2024:recap")
        assert key == "post-detail:2024:recap"
        assert namespace_of(key) == "post-detail"

    def test_explicit_literal_id(self):
        assert derive_key("tags", LiteralId("all")) == "tags:all"


class TestFilterKeys:
    def test_filter_is_compact_sorted_json(self):
        key = derive_key("post-list", {"page": 2, "category": "news"})
        assert key == 'post-list:{"category":"news","page":2}'

    def test_insertion_order_does_not_matter(self):
        a = {"page": 1, "category": "news", "sort": "recent"}
        b = {"sort": "recent", "category": "news", "page": 1}
        assert derive_key("post-list", a) == derive_key("post-list", b)

    def test_none_values_match_absent_keys(self):
        assert derive_key("post-list", {"a": 1, "b": None}) == derive_key("post-list", {"a": 1})

    def test_different_values_differ(self):
        assert derive_key("post-list", {"page": 1}) != derive_key("post-list", {"page": 2})

    def test_same_filter_different_namespace_differs(self):
        filters = {"page": 1}
        assert derive_key("post-list", filters) != derive_key("search", filters)

    def test_nested_mappings_are_canonical(self):
        a = {"where": {"status": "published", "author": "ana"}}
        b = {"where": {"author": "ana", "status": "published"}}
        assert derive_key("post-list", a) == derive_key("post-list", b)

    def test_empty_filter(self):
        assert derive_key("services-list", {}) == "services-list:{}"

    def test_non_string_keys_are_stringified(self):
        assert derive_key("post-list", {1: "x"}) == derive_key("post-list", {"1": "x"})

    def test_dates_serialize(self):
        key = derive_key("post-list", {"since": date(2024, 5, 1)})
        assert key == 'post-list:{"since":"2024-05-01"}'

    def test_integral_float_matches_int(self):
        assert derive_key("post-list", {"page": 1.0}) == derive_key("post-list", {"page": 1})
        assert derive_key("post-list", {"page": 1.0}) == 'post-list:{"page":1}'

    def test_integral_floats_normalized_when_nested(self):
        a = {"where": {"limit": 10.0}, "ids": [1.0, 2.0]}
        b = {"where": {"limit": 10}, "ids": [1, 2]}
        assert derive_key("post-list", a) == derive_key("post-list", b)

    def test_fractional_float_kept(self):
        assert derive_key("post-list", {"score": 1.5}) == 'post-list:{"score":1.5}'

    def test_bool_is_not_an_int(self):
        assert derive_key("post-list", {"x": True}) != derive_key("post-list", {"x": 1})

    def test_nested_none_values_match_absent_keys(self):
        assert derive_key("post-list", {"a": {"b": None}}) == derive_key("post-list", {"a": {}})

    @pytest.mark.parametrize("filters", [{1: "a", "1": "b"}, {"1": "b", 1: "a"}])
    def test_keys_colliding_after_stringify_raise(self, filters):
        with pytest.raises(ValidationError) as exc_info:
            derive_key("post-list", filters)
        assert exc_info.value.code == ErrorCode.VAL_INVALID_IDENTIFIER
        assert exc_info.value.details["field"] == "1"

    def test_nested_key_collision_raises(self):
        with pytest.raises(ValidationError):
            derive_key("post-list", {"where": {2: "a", "2": "b"}})

    def test_unserializable_value_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            derive_key("post-list", {"page": 1, "callback": object()})
        assert exc_info.value.code == ErrorCode.VAL_UNSERIALIZABLE
        assert exc_info.value.details["field"] == "callback"


class TestIdentifierVariant:
    def test_string_becomes_literal(self):
        assert as_identifier("abc") == LiteralId("abc")

    def test_mapping_becomes_sorted_filter(self):
        ident = as_identifier({"b": 2, "a": 1, "c": None})
        assert ident == FilterId((("a", 1), ("b", 2)))

    def test_existing_variant_passes_through(self):
        ident = FilterId((("a", 1),))
        assert as_identifier(ident) is ident

    @pytest.mark.parametrize("bad", [42, 3.5, ["a"], None, ("a", 1)])
    def test_other_types_rejected(self, bad):
        with pytest.raises(ValidationError) as exc_info:
            as_identifier(bad)
        assert exc_info.value.code == ErrorCode.VAL_INVALID_IDENTIFIER


class TestNamespaceHelpers:
    def test_prefix(self):
        assert namespace_prefix("search") == "search:"

    def test_namespace_of_rejects_unprefixed_key(self):
        with pytest.raises(ValueError):
            namespace_of("no-separator")
