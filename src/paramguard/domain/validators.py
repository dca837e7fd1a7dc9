"""Concrete rules and the factory functions used to build rule trees.

Factories are the public surface::

    from paramguard.domain import validators as v

    rules = {
        "username": v.alnum() & v.no_whitespace() & v.length(1, 15),
        "age": v.numeric_val() & v.positive() & v.between(1, 100),
        "nickname": v.optional(v.alpha()),
    }

Rules never coerce the value they are given. Numeric comparisons accept
numeric strings (query strings and XML carry numbers as text), but the
value handed to the next rule is always the original one.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Collection, Iterable, Mapping, Sized
from typing import Any

from email_validator import EmailNotValidError, validate_email

from paramguard.domain.rules import MessageFormatter, Rule
from paramguard.domain.values import Absent, MarkupElement

_ALNUM_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")
_ALPHA_PATTERN = re.compile(r"^[a-zA-Z]+$")
_DIGIT_PATTERN = re.compile(r"^[0-9]+$")
_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def _as_number(value: Any) -> float | int | None:
    """Numeric view of *value* for comparisons, or None if not numeric.

    Strings must be finite decimal literals: ``"nan"``, ``"inf"`` and
    ``"1_000"`` are not numbers here even though ``float()`` takes them.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not _NUMBER_PATTERN.match(text):
            return None
        number = float(text)
        return number if math.isfinite(number) else None
    return None


def _is_blank(value: Any) -> bool:
    return value is None or isinstance(value, Absent) or value == ""


# ---------------------------------------------------------------------------
# Composite rules
# ---------------------------------------------------------------------------


class AllOf(Rule):
    """Every child must pass; each failing child reports its own message."""

    template = "All of the required rules must pass for {{name}}"

    def __init__(self, *rules: Rule) -> None:
        self.rules: list[Rule] = list(rules)

    def validate(self, value: Any) -> bool:
        return all(rule.validate(value) for rule in self.rules)

    def messages(
        self,
        value: Any,
        formatter: MessageFormatter,
        name: str | None = None,
    ) -> list[str]:
        inherited = self.name or name
        failures: list[str] = []
        for rule in self.rules:
            failures.extend(rule.messages(value, formatter, inherited))
        return failures

    def __and__(self, other: Rule) -> Rule:
        return AllOf(*self.rules, other)

    def __repr__(self) -> str:
        return f"AllOf({', '.join(repr(r) for r in self.rules)})"


class Optional(Rule):
    """Accept absent, ``None`` and empty-string values; otherwise defer."""

    def __init__(self, rule: Rule) -> None:
        self.rule = rule

    def validate(self, value: Any) -> bool:
        return _is_blank(value) or self.rule.validate(value)

    def messages(
        self,
        value: Any,
        formatter: MessageFormatter,
        name: str | None = None,
    ) -> list[str]:
        if _is_blank(value):
            return []
        return self.rule.messages(value, formatter, self.name or name)

    def __repr__(self) -> str:
        return f"Optional({self.rule!r})"


class Not(Rule):
    """Invert a rule, reporting the inner rule's negative template."""

    def __init__(self, rule: Rule) -> None:
        self.rule = rule

    def validate(self, value: Any) -> bool:
        return not self.rule.validate(value)

    def messages(
        self,
        value: Any,
        formatter: MessageFormatter,
        name: str | None = None,
    ) -> list[str]:
        if self.validate(value):
            return []
        return [self.rule.render(self.rule.negative_template, value, formatter, self.name or name)]

    def __repr__(self) -> str:
        return f"Not({self.rule!r})"


# ---------------------------------------------------------------------------
# Type rules
# ---------------------------------------------------------------------------


class StringType(Rule):
    template = "{{name}} must be a string"
    negative_template = "{{name}} must not be a string"

    def validate(self, value: Any) -> bool:
        return isinstance(value, str)


class IntType(Rule):
    template = "{{name}} must be an integer"
    negative_template = "{{name}} must not be an integer"

    def validate(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)


class NumericVal(Rule):
    template = "{{name}} must be numeric"
    negative_template = "{{name}} must not be numeric"

    def validate(self, value: Any) -> bool:
        return _as_number(value) is not None


# ---------------------------------------------------------------------------
# Character class rules
# ---------------------------------------------------------------------------


class _PatternRule(Rule):
    pattern: re.Pattern[str]

    def validate(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            return False
        return self.pattern.match(str(value)) is not None


class Alnum(_PatternRule):
    template = "{{name}} must contain only letters (a-z) and digits (0-9)"
    negative_template = "{{name}} must not contain letters (a-z) or digits (0-9)"
    pattern = _ALNUM_PATTERN


class Alpha(_PatternRule):
    template = "{{name}} must contain only letters (a-z)"
    negative_template = "{{name}} must not contain letters (a-z)"
    pattern = _ALPHA_PATTERN


class Digit(_PatternRule):
    template = "{{name}} must contain only digits (0-9)"
    negative_template = "{{name}} must not contain digits (0-9)"
    pattern = _DIGIT_PATTERN


class Email(Rule):
    """Syntactically valid address; no DNS deliverability lookup."""

    template = "{{name}} must be valid email"
    negative_template = "{{name}} must not be an email"

    def validate(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            return False
        return True


class Regex(Rule):
    template = "{{name}} must validate against {{regex}}"
    negative_template = "{{name}} must not validate against {{regex}}"

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self.pattern = re.compile(pattern)

    def validate(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return False
        return self.pattern.search(str(value)) is not None

    def params(self) -> dict[str, Any]:
        return {"regex": self.pattern.pattern}


class NoWhitespace(Rule):
    template = "{{name}} must not contain whitespace"
    negative_template = "{{name}} must contain whitespace"

    def validate(self, value: Any) -> bool:
        if _is_blank(value):
            return True
        if isinstance(value, (MarkupElement, Mapping, list, tuple)):
            return False
        return not any(ch.isspace() for ch in str(value))


class NotEmpty(Rule):
    template = "{{name}} must not be empty"
    negative_template = "{{name}} must be empty"

    def validate(self, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip() != ""
        if isinstance(value, MarkupElement):
            return bool(value.children) or value.text.strip() != ""
        if isinstance(value, Sized):
            return len(value) > 0
        return not _is_blank(value) and value is not False


# ---------------------------------------------------------------------------
# Size and range rules
# ---------------------------------------------------------------------------


class Length(Rule):
    """Length of a string or collection within inclusive bounds.

    Integers are measured by their decimal string form, so ``12345`` has
    length 5. Floats, booleans and other scalars are rejected.
    """

    negative_template = "{{name}} must not have a length between {{minValue}} and {{maxValue}}"

    def __init__(self, min_value: int | None = None, max_value: int | None = None) -> None:
        self.min_value = min_value
        self.max_value = max_value

    @property
    def template(self) -> str:  # type: ignore[override]
        if self.min_value is not None and self.max_value is None:
            return "{{name}} must have a length greater than {{minValue}}"
        if self.min_value is None and self.max_value is not None:
            return "{{name}} must have a length lower than {{maxValue}}"
        return "{{name}} must have a length between {{minValue}} and {{maxValue}}"

    def validate(self, value: Any) -> bool:
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, Collection):
            return False
        size = len(value)
        if self.min_value is not None and size < self.min_value:
            return False
        return self.max_value is None or size <= self.max_value

    def params(self) -> dict[str, Any]:
        return {"minValue": self.min_value, "maxValue": self.max_value}


class Between(Rule):
    """Numeric value within inclusive bounds."""

    template = "{{name}} must be between {{minValue}} and {{maxValue}}"
    negative_template = "{{name}} must not be between {{minValue}} and {{maxValue}}"

    def __init__(self, min_value: float, max_value: float) -> None:
        self.min_value = min_value
        self.max_value = max_value

    def validate(self, value: Any) -> bool:
        number = _as_number(value)
        return number is not None and self.min_value <= number <= self.max_value

    def params(self) -> dict[str, Any]:
        return {"minValue": self.min_value, "maxValue": self.max_value}


class Min(Rule):
    template = "{{name}} must be greater than or equal to {{compareTo}}"
    negative_template = "{{name}} must be less than {{compareTo}}"

    def __init__(self, compare_to: float) -> None:
        self.compare_to = compare_to

    def validate(self, value: Any) -> bool:
        number = _as_number(value)
        return number is not None and number >= self.compare_to

    def params(self) -> dict[str, Any]:
        return {"compareTo": self.compare_to}


class Max(Rule):
    template = "{{name}} must be less than or equal to {{compareTo}}"
    negative_template = "{{name}} must be greater than {{compareTo}}"

    def __init__(self, compare_to: float) -> None:
        self.compare_to = compare_to

    def validate(self, value: Any) -> bool:
        number = _as_number(value)
        return number is not None and number <= self.compare_to

    def params(self) -> dict[str, Any]:
        return {"compareTo": self.compare_to}


class Positive(Rule):
    template = "{{name}} must be positive"
    negative_template = "{{name}} must not be positive"

    def validate(self, value: Any) -> bool:
        number = _as_number(value)
        return number is not None and number > 0


class Negative(Rule):
    template = "{{name}} must be negative"
    negative_template = "{{name}} must not be negative"

    def validate(self, value: Any) -> bool:
        number = _as_number(value)
        return number is not None and number < 0


class In(Rule):
    template = "{{name}} must be in {{haystack}}"
    negative_template = "{{name}} must not be in {{haystack}}"

    def __init__(self, haystack: Iterable[Any]) -> None:
        self.haystack = list(haystack)

    def validate(self, value: Any) -> bool:
        return value in self.haystack

    def params(self) -> dict[str, Any]:
        return {"haystack": self.haystack}


class Callback(Rule):
    """Wrap a predicate as a rule with its own message template."""

    def __init__(self, predicate: Callable[[Any], bool], template: str = "{{name}} must be valid") -> None:
        self.predicate = predicate
        self.template = template  # type: ignore[misc]

    def validate(self, value: Any) -> bool:
        return bool(self.predicate(value))


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def all_of(*rules: Rule) -> AllOf:
    return AllOf(*rules)


def optional(rule: Rule) -> Optional:
    return Optional(rule)


def not_(rule: Rule) -> Not:
    return Not(rule)


def string_type() -> StringType:
    return StringType()


def int_type() -> IntType:
    return IntType()


def numeric_val() -> NumericVal:
    return NumericVal()


def alnum() -> Alnum:
    return Alnum()


def alpha() -> Alpha:
    return Alpha()


def digit() -> Digit:
    return Digit()


def email() -> Email:
    return Email()


def regex(pattern: str | re.Pattern[str]) -> Regex:
    return Regex(pattern)


def no_whitespace() -> NoWhitespace:
    return NoWhitespace()


def not_empty() -> NotEmpty:
    return NotEmpty()


def length(min_value: int | None = None, max_value: int | None = None) -> Length:
    return Length(min_value, max_value)


def between(min_value: float, max_value: float) -> Between:
    return Between(min_value, max_value)


def min_(compare_to: float) -> Min:
    return Min(compare_to)


def max_(compare_to: float) -> Max:
    return Max(compare_to)


def positive() -> Positive:
    return Positive()


def negative() -> Negative:
    return Negative()


def in_(haystack: Iterable[Any]) -> In:
    return In(haystack)


def callback(predicate: Callable[[Any], bool], template: str = "{{name}} must be valid") -> Callback:
    return Callback(predicate, template)
