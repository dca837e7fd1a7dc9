"""Exception hierarchy for paramguard.

Rule rejections are not errors: they are reported through
:class:`paramguard.domain.rules.RuleViolation` and collected into the
error map. The classes here signal misuse of the library itself.
"""

from __future__ import annotations


class ParamGuardError(Exception):
    """Base class for all paramguard failures."""


class ConfigurationError(ParamGuardError):
    """Invalid rule tree, settings value, or config file."""
