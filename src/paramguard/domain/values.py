"""Value tree primitives: the Absent sentinel and array-like containers.

Two container shapes can be descended into when resolving a dotted path:
- ordinary key-ordered mappings (query strings, JSON objects, form fields)
- markup elements (a parsed XML document, children addressed by tag name)

Everything else (scalars, lists, Absent) is a leaf for path resolution.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Mapping
from enum import Enum
from functools import cached_property
from typing import Any

ATTRIBUTES_KEY = "@attributes"


class Absent(Enum):
    """Result of resolving a path that does not exist in the value tree.

    Distinct from ``None`` (a JSON ``null`` is a real value) and from the
    string ``"null"``.
    """

    ABSENT = "absent"

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = Absent.ABSENT


class MarkupElement:
    """Read-only view of a parsed XML element as a tree of named children.

    Child lookup follows the usual "XML as array" conversion:
    - a child with no sub-elements and no attributes becomes its text
    - any other child becomes a nested :class:`MarkupElement`
    - repeated tags collapse into a list, in document order
    - the element's own attributes appear under ``"@attributes"``
    """

    def __init__(self, element: ET.Element) -> None:
        self._element = element

    @classmethod
    def from_string(cls, document: str | bytes) -> MarkupElement:
        """Parse *document* and wrap its root element.

        Raises :class:`xml.etree.ElementTree.ParseError` on malformed input.
        """
        return cls(ET.fromstring(document))

    @property
    def tag(self) -> str:
        return self._element.tag

    @property
    def text(self) -> str:
        return self._element.text or ""

    @property
    def attributes(self) -> dict[str, str]:
        return dict(self._element.attrib)

    @cached_property
    def children(self) -> dict[str, Any]:
        """Children keyed by tag name, in first-occurrence order."""
        result: dict[str, Any] = {}
        if self._element.attrib:
            result[ATTRIBUTES_KEY] = dict(self._element.attrib)
        for child in self._element:
            value = _convert_child(child)
            if child.tag not in result:
                result[child.tag] = value
            elif isinstance(existing := result[child.tag], list):
                existing.append(value)
            else:
                result[child.tag] = [existing, value]
        return result

    def __contains__(self, key: object) -> bool:
        return key in self.children

    def __repr__(self) -> str:
        return f"MarkupElement(<{self.tag}>)"


def _convert_child(child: ET.Element) -> Any:
    if len(child) == 0 and not child.attrib:
        return child.text or ""
    return MarkupElement(child)


def is_array_like(value: Any) -> bool:
    """Return True if a path segment can be looked up inside *value*."""
    return isinstance(value, (Mapping, MarkupElement))


def child_value(container: Any, key: str) -> Any:
    """Look up *key* in an array-like *container*.

    Returns :data:`ABSENT` when *container* is not array-like or has no
    such key.
    """
    if isinstance(container, MarkupElement):
        return container.children.get(key, ABSENT)
    if isinstance(container, Mapping):
        if key not in container:
            return ABSENT
        return container[key]
    return ABSENT


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Top-level keys of a value source; non-containers contribute nothing."""
    if isinstance(value, MarkupElement):
        return value.children
    if isinstance(value, Mapping):
        return value
    return {}
