"""Parameter source normalizer: merge request value sources into one tree.

Precedence, lowest to highest: query, body, route. Only top-level keys
override; a nested object supplied by a later source replaces the earlier
one wholesale.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from paramguard.domain.values import as_mapping


def merge_params(
    query: Mapping[str, Any] | None = None,
    body: Any = None,
    route: Mapping[str, Any] | None = None,
) -> Mapping[str, Any]:
    """Return a read-only merged value tree.

    *body* may be a mapping, a :class:`~paramguard.domain.values.MarkupElement`
    (its children become top-level keys), or anything else, which
    contributes no keys. Missing sources count as empty.

    Examples:
        >>> dict(merge_params({"a": "1", "b": "q"}, {"b": "body"}, {"a": "r"}))
        {'a': 'r', 'b': 'body'}
    """
    merged: dict[str, Any] = {}
    for source in (query, body, route):
        merged.update(as_mapping(source))
    return MappingProxyType(merged)
