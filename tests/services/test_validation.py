"""Tests for the Validation service: passes, configuration, translators."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from paramguard.config.models import AttributeNames
from paramguard.domain import validators as v
from paramguard.domain.tree import RuleTree
from paramguard.domain.values import MarkupElement
from paramguard.errors import ConfigurationError
from paramguard.services.result import ValidationResult
from paramguard.services.validation import Validation

QUERY = {"username": "davidepastore", "age": "89"}


class TestScenarios:
    def test_passes(self) -> None:
        validation = Validation({"username": v.alnum() & v.no_whitespace() & v.length(1, 15)})
        result = validation.process(query=QUERY)
        assert result == ValidationResult(errors={})
        assert validation.has_errors is False
        assert validation.errors == {}

    def test_fails(self) -> None:
        validation = Validation({"username": v.alnum() & v.no_whitespace() & v.length(1, 5)})
        result = validation.process(query=QUERY)
        assert result.has_errors is True
        assert result.errors == {"username": ['"davidepastore" must have a length between 1 and 5']}
        assert validation.errors == result.errors

    def test_optional_missing_parameter(self) -> None:
        validation = Validation({"notExisting": v.optional(v.alpha())})
        assert validation.process(query=QUERY).has_errors is False

    def test_required_missing_parameter(self) -> None:
        validation = Validation({"notExisting": v.alpha()})
        result = validation.process(query=QUERY)
        assert result.errors == {"notExisting": ["null must contain only letters (a-z)"]}

    def test_without_validators(self) -> None:
        validation = Validation()
        result = validation.process(query=QUERY)
        assert result.has_errors is False
        assert validation.validators == {}

    def test_multiple_failures(self) -> None:
        validation = Validation(
            {
                "username": v.alnum() & v.no_whitespace() & v.length(1, 5),
                "age": v.numeric_val() & v.positive() & v.between(1, 60),
            }
        )
        result = validation.process(query=QUERY)
        assert result.errors == {
            "username": ['"davidepastore" must have a length between 1 and 5'],
            "age": ['"89" must be between 1 and 60'],
        }

    def test_json_nested(self) -> None:
        body = {
            "type": "emails",
            "objectid": "1",
            "email": {"id": 1, "enable_mapping": "1", "name": "rq3r"},
        }
        validation = Validation(
            {
                "type": v.alnum() & v.no_whitespace() & v.length(3, 5),
                "email": {"name": v.alnum() & v.no_whitespace() & v.length(1, 2)},
            }
        )
        result = validation.process(body=body)
        assert result.errors == {
            "type": ['"emails" must have a length between 3 and 5'],
            "email.name": ['"rq3r" must have a length between 1 and 2'],
        }

    def test_xml_body(self) -> None:
        body = MarkupElement.from_string(
            "<person><type>emails</type><email><id>1</id><name>rq3r</name></email></person>"
        )
        validation = Validation(
            {
                "type": v.alnum() & v.no_whitespace() & v.length(3, 8),
                "email": {
                    "id": v.numeric_val() & v.positive() & v.between(1, 20),
                    "name": v.alnum() & v.no_whitespace() & v.length(1, 5),
                },
            }
        )
        assert validation.process(body=body).has_errors is False

    def test_route_overrides_query(self) -> None:
        validation = Validation({"routeParam": v.alnum() & v.no_whitespace() & v.length(1, 5)})
        result = validation.process(query={"routeParam": "test"}, route={"routeParam": "davidepastore"})
        assert result.errors == {"routeParam": ['"davidepastore" must have a length between 1 and 5']}


class TestErrorState:
    def test_no_leakage_between_passes(self) -> None:
        validation = Validation({"username": v.length(1, 5)})
        assert validation.process(query=QUERY).has_errors is True
        result = validation.process(query={"username": "ok"})
        assert result.has_errors is False
        assert validation.errors == {}

    def test_idempotent(self) -> None:
        validation = Validation({"username": v.length(1, 5), "age": v.between(1, 60)})
        first = validation.validate(QUERY)
        second = validation.validate(QUERY)
        assert first == second

    def test_non_violation_error_propagates(self) -> None:
        validation = Validation({"username": v.callback(lambda value: value.nope)})
        with pytest.raises(AttributeError):
            validation.process(query=QUERY)
        assert validation.errors == {}


class TestConfiguration:
    def test_set_validators(self) -> None:
        validation = Validation(
            {
                "username": v.alnum() & v.no_whitespace() & v.length(1, 20),
                "age": v.numeric_val() & v.positive() & v.between(1, 100),
            }
        )
        new_validators = {
            "username": v.alnum() & v.no_whitespace() & v.length(1, 10),
            "age": v.numeric_val() & v.positive() & v.between(1, 20),
        }
        validation.set_validators(new_validators)
        result = validation.process(query=QUERY)
        assert validation.validators is new_validators
        assert result.errors == {
            "username": ['"davidepastore" must have a length between 1 and 10'],
            "age": ['"89" must be between 1 and 20'],
        }

    def test_accepts_rule_tree(self) -> None:
        tree = RuleTree.build({"username": v.length(1, 5)})
        validation = Validation(tree)
        assert validation.validators is tree
        assert validation.process(query=QUERY).has_errors is True

    def test_invalid_validators(self) -> None:
        with pytest.raises(ConfigurationError):
            Validation({"username": "length(1, 5)"})

    def test_failed_set_validators_keeps_previous(self) -> None:
        original = {"username": v.length(1, 5)}
        validation = Validation(original)
        with pytest.raises(ConfigurationError):
            validation.set_validators({"username": 5})
        assert validation.validators is original

    def test_attributes_default_names(self) -> None:
        rules = {"username": v.length(1, 5)}
        validation = Validation(rules)
        validation.process(query=QUERY)
        assert validation.attributes() == {
            "errors": {"username": ['"davidepastore" must have a length between 1 and 5']},
            "has_errors": True,
            "validators": rules,
            "translator": None,
        }

    def test_attributes_custom_names(self) -> None:
        names = AttributeNames(errors="validation_errors", has_errors="invalid")
        validation = Validation(attribute_names=names)
        attrs = validation.attributes()
        assert set(attrs) == {"validation_errors", "invalid", "validators", "translator"}

    def test_attributes_names_override_per_call(self) -> None:
        validation = Validation(attribute_names=AttributeNames(errors="validation_errors"))
        attrs = validation.attributes(names=AttributeNames(errors="problems"))
        assert "problems" in attrs
        assert validation.attribute_names.errors == "validation_errors"

    def test_interleaved_passes_keep_their_own_result(self) -> None:
        inner: list[ValidationResult] = []

        def start_inner_pass(value: object) -> bool:
            if value == "outer":
                inner.append(validation.process(query={"username": "inner"}))
            return value == "inner"

        validation = Validation({"username": v.callback(start_inner_pass)})
        outer = validation.process(query={"username": "outer"})
        assert inner[0].has_errors is False
        assert outer.errors == {"username": ['"outer" must be valid']}
        assert validation.attributes(outer)["errors"] == {"username": ['"outer" must be valid']}
        assert validation.attributes(outer)["has_errors"] is True
        assert validation.attributes(inner[0])["has_errors"] is False
        assert validation.attributes(inner[0])["errors"] == {}


class TestTranslator:
    def test_translated_messages(self, italian_translator: Callable[[str], str]) -> None:
        validation = Validation({"username": v.alnum() & v.no_whitespace() & v.length(1, 5)}, italian_translator)
        result = validation.process(body={"username": "davidepastore"})
        assert validation.translator is italian_translator
        assert result.errors == {
            "username": ['"davidepastore" deve avere una dimensione di caratteri compresa tra 1 e 5'],
        }

    def test_set_translator(
        self,
        italian_translator: Callable[[str], str],
        italian_translator_v2: Callable[[str], str],
    ) -> None:
        validation = Validation({"username": v.length(1, 5)}, italian_translator)
        first = validation.process(query=QUERY)
        validation.set_translator(italian_translator_v2)
        second = validation.process(query=QUERY)
        assert validation.translator is italian_translator_v2
        assert first.errors["username"] == [
            '"davidepastore" deve avere una dimensione di caratteri compresa tra 1 e 5'
        ]
        assert second.errors["username"] == [
            '"davidepastore" deve avere una dimensione di caratteri compresa tra 1 e 5 (nuovo)'
        ]

    def test_clearing_translator(self, italian_translator: Callable[[str], str]) -> None:
        validation = Validation({"username": v.length(1, 5)}, italian_translator)
        validation.set_translator(None)
        result = validation.process(query=QUERY)
        assert result.errors == {"username": ['"davidepastore" must have a length between 1 and 5']}

    def test_instances_isolated(self, italian_translator: Callable[[str], str]) -> None:
        rules = {"username": v.length(1, 5)}
        translated = Validation(rules, italian_translator)
        plain = Validation(rules)
        assert translated.process(query=QUERY).errors != plain.process(query=QUERY).errors
        assert plain.errors == {"username": ['"davidepastore" must have a length between 1 and 5']}

    def test_missing_translation_propagates(self, italian_translator: Callable[[str], str]) -> None:
        validation = Validation({"notExisting": v.alpha()}, italian_translator)
        with pytest.raises(KeyError):
            validation.process(query=QUERY)
