"""Tree matcher: walk a rule tree and collect failures by dotted path.

Traversal mirrors the rule tree, not the value tree. Every leaf re-resolves
its full path from the root of the value tree, so a missing or non-container
value at any depth simply yields Absent for everything beneath it.

INVARIANT: A path appears in the error map iff the leaf rule at that path
rejected its resolved value. Only :class:`RuleViolation` is intercepted;
any other exception raised by a rule propagates to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from paramguard.domain.rules import MessageFormatter, RuleViolation
from paramguard.domain.tree import Leaf, RuleTree
from paramguard.domain.values import ABSENT, child_value, is_array_like

ErrorMap = dict[str, list[str]]


def resolve_path(values: Any, keys: Sequence[str]) -> Any:
    """Descend into *values* one key at a time.

    Returns the value at the end of *keys* (possibly a sub-tree), or
    :data:`ABSENT` as soon as a step hits a non-container or a missing key.

    Examples:
        >>> resolve_path({"a": {"b": 1}}, ["a", "b"])
        1
        >>> resolve_path({"a": 1}, ["a", "b"])
        ABSENT
    """
    current = values
    for key in keys:
        if not is_array_like(current):
            return ABSENT
        current = child_value(current, key)
        if current is ABSENT:
            return ABSENT
    return current


def match_tree(
    values: Mapping[str, Any],
    tree: RuleTree,
    formatter: MessageFormatter | None = None,
) -> ErrorMap:
    """Apply every leaf of *tree* to *values* and return the error map."""
    errors: ErrorMap = {}
    _walk(values, tree, [], errors, formatter or MessageFormatter())
    return errors


def _walk(
    values: Mapping[str, Any],
    tree: RuleTree,
    keys: list[str],
    errors: ErrorMap,
    formatter: MessageFormatter,
) -> None:
    for field, node in tree:
        keys.append(field)
        if isinstance(node, Leaf):
            value = resolve_path(values, keys)
            try:
                node.rule.assert_valid(value, formatter)
            except RuleViolation as exc:
                errors[".".join(keys)] = list(exc.messages)
        else:
            _walk(values, node.tree, keys, errors, formatter)
        keys.pop()
