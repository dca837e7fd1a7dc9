"""Rule capability: the contract every leaf of a rule tree implements.

A rule answers one question about one value. Rejections are reported
through :class:`RuleViolation`, the only exception the tree matcher
intercepts; anything else a rule raises is a bug and propagates.

Messages are built from ``{{placeholder}}`` templates. The template is
first passed through the active translator (if any), then placeholders
are rendered. The translator travels with each call inside a
:class:`MessageFormatter`; there is no process-wide message state.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Self

from paramguard.domain.values import Absent, MarkupElement

Translator = Callable[[str], str]

_PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


class RuleViolation(Exception):
    """Structured rejection raised by :meth:`Rule.assert_valid`."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages = messages


def stringify(value: Any) -> str:
    """Render a value for use inside a failure message.

    Examples:
        >>> stringify("davidepastore")
        '"davidepastore"'
        >>> stringify(89)
        '89'
        >>> stringify(None)
        'null'
    """
    if value is None or isinstance(value, Absent):
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, MarkupElement):
        return f"`<{value.tag}>`"
    if isinstance(value, Mapping):
        return "{ " + ", ".join(f"{stringify(k)}: {stringify(v)}" for k, v in value.items()) + " }"
    if isinstance(value, (list, tuple, set, frozenset)):
        return "{ " + ", ".join(stringify(v) for v in value) + " }"
    return f"`{value!r}`"


class MessageFormatter:
    """Translate and render failure message templates."""

    def __init__(self, translator: Translator | None = None) -> None:
        self.translator = translator

    def format(self, template: str, params: Mapping[str, Any]) -> str:
        """Render *template* with *params*.

        ``params["name"]`` is inserted verbatim; every other parameter is
        stringified. Unknown placeholders are left untouched.
        """
        text = self.translator(template) if self.translator is not None else template

        def _replace(match: re.Match[str]) -> str:
            key = match.group(1)
            if key not in params:
                return match.group(0)
            if key == "name":
                return str(params[key])
            return stringify(params[key])

        return _PLACEHOLDER_PATTERN.sub(_replace, text)


DEFAULT_FORMATTER = MessageFormatter()


class Rule(ABC):
    """Base class for all rules.

    Subclasses implement :meth:`validate` and declare a ``template``.
    Rules that need extra placeholders override :meth:`params`.

    Usage::

        class Even(Rule):
            template = "{{name}} must be an even number"

            def validate(self, value: Any) -> bool:
                return isinstance(value, int) and value % 2 == 0
    """

    template: ClassVar[str] = "{{name}} must be valid"
    negative_template: ClassVar[str] = "{{name}} must not be valid"

    name: str | None = None

    @abstractmethod
    def validate(self, value: Any) -> bool:
        """Return True if *value* is accepted."""
        ...

    def params(self) -> dict[str, Any]:
        """Extra template placeholders for this rule."""
        return {}

    def named(self, name: str) -> Self:
        """Use *name* instead of the input value for ``{{name}}``."""
        self.name = name
        return self

    def messages(
        self,
        value: Any,
        formatter: MessageFormatter,
        name: str | None = None,
    ) -> list[str]:
        """Return the failure messages for *value* (empty when accepted).

        *name* is the display name inherited from an enclosing rule; the
        rule's own name takes precedence.
        """
        if self.validate(value):
            return []
        return [self.render(self.template, value, formatter, name)]

    def render(
        self,
        template: str,
        value: Any,
        formatter: MessageFormatter,
        name: str | None = None,
    ) -> str:
        display = self.name or name
        params = {**self.params(), "name": display if display else stringify(value)}
        return formatter.format(template, params)

    def check(self, value: Any, formatter: MessageFormatter | None = None) -> list[str]:
        """Return the failure messages for *value*; an empty list means accepted."""
        return self.messages(value, formatter or DEFAULT_FORMATTER)

    def assert_valid(self, value: Any, formatter: MessageFormatter | None = None) -> None:
        """Raise :class:`RuleViolation` if *value* is rejected."""
        failures = self.check(value, formatter)
        if failures:
            raise RuleViolation(failures)

    def __and__(self, other: Rule) -> Rule:
        from paramguard.domain.validators import AllOf

        return AllOf(self, other)

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.params().items())
        return f"{type(self).__name__}({params})"
