"""ValidationResult: the outcome of one validation pass.

INVARIANT: ``has_errors`` is True iff ``errors`` is non-empty.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator


class ValidationResult(BaseModel):
    """Error map and flag produced by :meth:`Validation.validate`.

    Attributes:
        errors: Failure messages keyed by dotted field path.
        has_errors: Whether any rule rejected its value.
    """

    model_config = {"frozen": True}

    errors: dict[str, list[str]] = Field(default_factory=dict)
    has_errors: bool = False

    @model_validator(mode="before")
    @classmethod
    def _derive_flag(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = {**data, "has_errors": bool(data.get("errors"))}
        return data

    @property
    def ok(self) -> bool:
        return not self.has_errors

    def messages_for(self, path: str) -> list[str]:
        """Messages recorded at *path*, or an empty list."""
        return list(self.errors.get(path, []))
