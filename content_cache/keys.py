"""Deterministic cache key derivation.

An identifier is either a literal string (a slug, an id) or a filter mapping
(``{"page": 2, "category": "news"}``). Filter mappings are canonicalized so
that equal key/value pairs always produce the same key, whatever order the
caller built the mapping in.

Key format::

    post-detail:my-first-post
    post-list:{"category":"news","page":2}
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import orjson

from content_cache.errors import duplicate_filter_key, invalid_identifier, unserializable_filter
from content_cache.registry import KEY_SEPARATOR

_CANONICAL_OPTS = orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS

# Integral floats past 2**53 are not exact, leave them as floats
_MAX_EXACT_INT = 2**53


@dataclass(frozen=True, slots=True)
class LiteralId:
    """A plain string identifier, used verbatim in the key."""

    value: str


def _string_keyed(mapping: Mapping[Any, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for k, v in mapping.items():
        if v is None:
            continue
        name = str(k)
        if name in result:
            raise duplicate_filter_key(name)
        result[name] = _normalize(v)
    return result


def _normalize(value: Any) -> Any:
    """Canonical form of a filter value, applied at every nesting level."""
    if isinstance(value, Mapping):
        return _string_keyed(value)
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    # 1.0 == 1 in Python, so both must render as 1
    if isinstance(value, float) and value.is_integer() and abs(value) < _MAX_EXACT_INT:
        return int(value)
    return value


@dataclass(frozen=True, slots=True)
class FilterId:
    """A filter identifier as sorted ``(key, value)`` pairs.

    ``from_mapping`` normalizes the mapping so that equal filters build equal
    identifiers:

    - pairs whose value is None are dropped, at every nesting level (an
      explicit None and a missing key mean the same filter);
    - keys are stringified, and keys that collide once stringified
      (``1`` and ``"1"``) raise ValidationError;
    - integral floats become ints (``1.0`` and ``1`` are the same page).
    """

    items: tuple[tuple[str, Any], ...]

    @classmethod
    def from_mapping(cls, filters: Mapping[Any, Any]) -> FilterId:
        pairs = _string_keyed(filters).items()
        return cls(tuple(sorted(pairs, key=lambda kv: kv[0])))

    def canonical(self) -> str:
        """Compact JSON form with sorted keys, nested mappings included."""
        try:
            return orjson.dumps(dict(self.items), option=_CANONICAL_OPTS).decode("utf-8")
        except TypeError as e:
            # orjson.JSONEncodeError subclasses TypeError; find the offending pair
            for key, value in self.items:
                try:
                    orjson.dumps(value, option=_CANONICAL_OPTS)
                except TypeError:
                    raise unserializable_filter(key, e) from e
            raise unserializable_filter("<filter>", e) from e


Identifier = LiteralId | FilterId


def as_identifier(raw: str | Mapping[Any, Any] | Identifier) -> Identifier:
    """Coerce a caller-supplied identifier into the tagged variant."""
    if isinstance(raw, (LiteralId, FilterId)):
        return raw
    if isinstance(raw, str):
        return LiteralId(raw)
    if isinstance(raw, Mapping):
        return FilterId.from_mapping(raw)
    raise invalid_identifier(raw)


def derive_key(namespace: str, identifier: str | Mapping[Any, Any] | Identifier) -> str:
    """Build the cache key for (namespace, identifier).

    The namespace is not checked against a registry here; ContentCache does
    that before calling in.
    """
    ident = as_identifier(identifier)
    if isinstance(ident, LiteralId):
        suffix = ident.value
    else:
        suffix = ident.canonical()
    return f"{namespace}{KEY_SEPARATOR}{suffix}"


def namespace_prefix(namespace: str) -> str:
    return f"{namespace}{KEY_SEPARATOR}"


def namespace_of(key: str) -> str:
    """Return the namespace part of a derived key."""
    namespace, sep, _ = key.partition(KEY_SEPARATOR)
    if not sep:
        raise ValueError(f"Not a namespaced cache key: {key!r}")
    return namespace
