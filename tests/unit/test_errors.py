"""Tests for the content cache exception hierarchy."""

import pytest

from content_cache.errors import (
    ConfigurationError,
    ContentCacheError,
    ErrorCode,
    RegistryError,
    UnknownMutationError,
    UnknownNamespaceError,
    ValidationError,
    duplicate_filter_key,
    invalid_identifier,
    unknown_mutation,
    unknown_namespace,
    unserializable_filter,
)


class TestErrorCode:
    def test_codes_are_strings(self):
        assert ErrorCode.CFG_INVALID == "CFG_INVALID"
        assert ErrorCode.REG_UNKNOWN_NAMESPACE.value == "REG_UNKNOWN_NAMESPACE"


class TestContentCacheError:
    def test_defaults(self):
        error = ContentCacheError()
        assert error.message == "An error occurred"
        assert error.code == ErrorCode.UNKNOWN
        assert error.details == {}
        assert error.cause is None

    def test_custom_message(self):
        error = ContentCacheError("Something broke", code=ErrorCode.CFG_MISSING)
        assert str(error) == "Something broke"
        assert error.code == ErrorCode.CFG_MISSING

    def test_cause_is_chained(self):
        original = OSError("disk")
        error = ContentCacheError("wrapped", cause=original)
        assert error.__cause__ is original

    def test_repr_includes_non_default_parts(self):
        error = ContentCacheError("x", code=ErrorCode.CFG_INVALID, details={"a": 1})
        text = repr(error)
        assert "code='CFG_INVALID'" in text
        assert "details={'a': 1}" in text

    def test_to_dict(self):
        error = ConfigurationError("bad ttl", config_key="search")
        assert error.to_dict() == {
            "error": "ConfigurationError",
            "code": "CFG_INVALID",
            "detail": "bad ttl",
            "details": {"config_key": "search"},
        }

    def test_to_dict_without_details(self):
        assert "details" not in ContentCacheError("x").to_dict()


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_class",
        [ConfigurationError, RegistryError, UnknownNamespaceError, UnknownMutationError, ValidationError],
    )
    def test_all_inherit_from_base(self, error_class):
        assert issubclass(error_class, ContentCacheError)

    def test_registry_errors(self):
        assert issubclass(UnknownNamespaceError, RegistryError)
        assert issubclass(UnknownMutationError, RegistryError)

    def test_default_codes(self):
        assert UnknownNamespaceError().code == ErrorCode.REG_UNKNOWN_NAMESPACE
        assert UnknownMutationError().code == ErrorCode.REG_UNKNOWN_MUTATION
        assert ValidationError().code == ErrorCode.VAL_INVALID_IDENTIFIER
        assert ConfigurationError().code == ErrorCode.CFG_INVALID


class TestFactories:
    def test_unknown_namespace(self):
        error = unknown_namespace("post-detial", ["search", "post-detail"])
        assert isinstance(error, UnknownNamespaceError)
        assert "post-detial" in error.message
        assert error.details == {"name": "post-detial", "known": ["post-detail", "search"]}

    def test_unknown_mutation(self):
        error = unknown_mutation("planet-mutated", ["post-mutated"])
        assert isinstance(error, UnknownMutationError)
        assert error.details["name"] == "planet-mutated"

    def test_invalid_identifier(self):
        error = invalid_identifier(42)
        assert error.code == ErrorCode.VAL_INVALID_IDENTIFIER
        assert error.details == {"field": "identifier", "value_type": "int"}

    def test_unserializable_filter(self):
        cause = TypeError("Type is not JSON serializable")
        error = unserializable_filter("callback", cause)
        assert error.code == ErrorCode.VAL_UNSERIALIZABLE
        assert error.details["field"] == "callback"
        assert error.__cause__ is cause

    def test_duplicate_filter_key(self):
        error = duplicate_filter_key("1")
        assert isinstance(error, ValidationError)
        assert error.code == ErrorCode.VAL_INVALID_IDENTIFIER
        assert error.details == {"field": "1"}
