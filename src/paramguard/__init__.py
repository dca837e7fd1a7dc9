"""paramguard: tree-shaped request parameter validation.

A caller-supplied tree of rules is matched against a merged tree of
request values; every failing leaf is reported under its dotted path.
"""

from __future__ import annotations

from paramguard.domain.rules import MessageFormatter, Rule, RuleViolation
from paramguard.domain.tree import RuleTree
from paramguard.domain.values import ABSENT, MarkupElement
from paramguard.services.result import ValidationResult
from paramguard.services.validation import Validation

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
    "MarkupElement",
    "MessageFormatter",
    "Rule",
    "RuleTree",
    "RuleViolation",
    "Validation",
    "ValidationResult",
    "__version__",
]
