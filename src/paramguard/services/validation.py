"""Validation: rule tree and translator configuration plus one pass per call.

A Validation instance holds configuration that persists across passes
(the rule tree and the translator) and the error map of its most recent
pass. The error map is rebuilt from empty on every call.

Each pass builds its error map in local state and hands it back as a
:class:`ValidationResult`; callers that share one instance across
concurrent requests must publish from that result, not from the
instance accessors, which only reflect whichever pass finished last.
Replacing the rule tree or translator while a pass is in flight is not
supported. Translators are scoped to the instance, so instances with
different translators can share a process.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from paramguard.config.models import AttributeNames
from paramguard.domain.matcher import match_tree
from paramguard.domain.params import merge_params
from paramguard.domain.rules import MessageFormatter, Translator
from paramguard.domain.tree import RuleTree
from paramguard.services.result import ValidationResult

logger = logging.getLogger(__name__)


class Validation:
    """Validate value trees against a configurable rule tree.

    Usage::

        validation = Validation({"username": v.alnum() & v.length(1, 15)})
        result = validation.process(query={"username": "davidepastore"})
        if result.has_errors:
            ...
    """

    def __init__(
        self,
        validators: RuleTree | Mapping[str, Any] | None = None,
        translator: Translator | None = None,
        *,
        attribute_names: AttributeNames | None = None,
    ) -> None:
        self._validators: RuleTree | Mapping[str, Any] = {} if validators is None else validators
        self._tree = self._build_tree(validators)
        self._translator = translator
        self._formatter = MessageFormatter(translator)
        self._errors: dict[str, list[str]] = {}
        self.attribute_names = attribute_names or AttributeNames()

    # --- configuration ---

    @property
    def validators(self) -> RuleTree | Mapping[str, Any]:
        """The rule tree as supplied by the caller."""
        return self._validators

    def set_validators(self, validators: RuleTree | Mapping[str, Any] | None) -> None:
        """Replace the whole rule tree used by subsequent passes."""
        self._tree = self._build_tree(validators)
        self._validators = {} if validators is None else validators

    @staticmethod
    def _build_tree(validators: RuleTree | Mapping[str, Any] | None) -> RuleTree:
        tree = RuleTree.build(validators)
        logger.debug("Rule tree covers %s", ", ".join(tree.leaf_paths()) or "no fields")
        return tree

    @property
    def translator(self) -> Translator | None:
        return self._translator

    def set_translator(self, translator: Translator | None) -> None:
        """Replace the translator used to render messages from now on."""
        self._translator = translator
        self._formatter = MessageFormatter(translator)

    # --- validation pass ---

    def validate(self, values: Mapping[str, Any]) -> ValidationResult:
        """Match *values* against the rule tree and record the error map.

        The returned result belongs to this pass alone, even if another pass
        on the same instance finishes first.
        """
        self._errors = {}
        errors = match_tree(values, self._tree, self._formatter)
        logger.debug("Validation pass finished with %d failing path(s)", len(errors))
        self._errors = errors
        return ValidationResult(errors=errors)

    def process(
        self,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        route: Mapping[str, Any] | None = None,
    ) -> ValidationResult:
        """Merge the request value sources and run one validation pass."""
        return self.validate(merge_params(query, body, route))

    # --- outputs of the most recent pass ---

    @property
    def errors(self) -> dict[str, list[str]]:
        return self._errors

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def attributes(
        self,
        result: ValidationResult | None = None,
        names: AttributeNames | None = None,
    ) -> dict[str, Any]:
        """The four pass outputs keyed by attribute name.

        With *result*, errors come from that pass instead of the most recent
        one. *names* overrides :attr:`attribute_names` for this call only.
        """
        names = names or self.attribute_names
        errors = self.errors if result is None else result.errors
        return {
            names.errors: errors,
            names.has_errors: bool(errors),
            names.validators: self.validators,
            names.translator: self.translator,
        }
