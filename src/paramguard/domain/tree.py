"""Rule trees: field names mapped to rules or to nested rule trees.

The node kind is decided once, when the tree is built from a plain nested
mapping. Traversal never inspects node types again.

INVARIANT: A RuleTree is immutable and finite. Replacing the rules of a
:class:`paramguard.services.validation.Validation` swaps the whole tree.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from paramguard.domain.rules import Rule
from paramguard.errors import ConfigurationError


@dataclass(frozen=True)
class Leaf:
    """A rule applied to the value resolved at this node's path."""

    rule: Rule


@dataclass(frozen=True)
class Subtree:
    """A nested tree whose leaves extend this node's path."""

    tree: RuleTree


RuleNode = Leaf | Subtree


@dataclass(frozen=True)
class RuleTree:
    """Ordered ``(field name, node)`` entries of one tree level."""

    entries: tuple[tuple[str, RuleNode], ...] = ()

    @classmethod
    def build(cls, rules: RuleTree | Mapping[str, Any] | None) -> RuleTree:
        """Build a tree from a nested mapping of rules.

        ``None`` yields an empty tree; an existing RuleTree is returned as is.
        Raises :class:`ConfigurationError` for any node that is neither a
        :class:`Rule` nor a mapping.
        """
        if rules is None:
            return cls()
        if isinstance(rules, RuleTree):
            return rules
        if not isinstance(rules, Mapping):
            msg = f"Rule tree must be a mapping, got {type(rules).__name__}"
            raise ConfigurationError(msg)
        return cls._from_mapping(rules, ())

    @classmethod
    def _from_mapping(cls, rules: Mapping[str, Any], path: tuple[str, ...]) -> RuleTree:
        entries: list[tuple[str, RuleNode]] = []
        for key, node in rules.items():
            field = str(key)
            node_path = (*path, field)
            if isinstance(node, Rule):
                entries.append((field, Leaf(node)))
            elif isinstance(node, RuleTree):
                entries.append((field, Subtree(node)))
            elif isinstance(node, Mapping):
                entries.append((field, Subtree(cls._from_mapping(node, node_path))))
            else:
                dotted = ".".join(node_path)
                msg = f"Rule tree node '{dotted}' must be a Rule or a mapping, got {type(node).__name__}"
                raise ConfigurationError(msg)
        return cls(tuple(entries))

    def __iter__(self) -> Iterator[tuple[str, RuleNode]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def leaf_paths(self) -> list[str]:
        """Dotted paths of every leaf, in traversal order."""
        paths: list[str] = []
        for field, node in self.entries:
            if isinstance(node, Leaf):
                paths.append(field)
            else:
                paths.extend(f"{field}.{sub}" for sub in node.tree.leaf_paths())
        return paths
