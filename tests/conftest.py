"""Shared pytest fixtures for paramguard tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

ITALIAN = {
    "These rules must pass for {{name}}": "Queste regole devono passare per {{name}}",
    "{{name}} must be a string": "{{name}} deve essere una stringa",
    "{{name}} must have a length between {{minValue}} and {{maxValue}}": (
        "{{name}} deve avere una dimensione di caratteri compresa tra {{minValue}} e {{maxValue}}"
    ),
}


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host environment variables out of settings resolution."""
    monkeypatch.delenv("PARAMGUARD_CONFIG", raising=False)
    monkeypatch.delenv("PARAMGUARD_VERBOSE", raising=False)
    monkeypatch.delenv("PARAMGUARD_LOG_JSON", raising=False)


@pytest.fixture
def italian_translator() -> Callable[[str], str]:
    """Translator that fails loudly on templates it does not know."""

    def translate(message: str) -> str:
        return ITALIAN[message]

    return translate


@pytest.fixture
def italian_translator_v2() -> Callable[[str], str]:
    """Second translator differing from the first on every template."""

    def translate(message: str) -> str:
        return ITALIAN[message] + " (nuovo)"

    return translate
