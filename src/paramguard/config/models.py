"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, paramguard.toml only contains
overrides. A fresh deployment needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- paramguard.toml sections ---


class AttributeNames(BaseModel):
    """[attributes] section: names of the published pass outputs."""

    model_config = {"frozen": True}

    errors: str = "errors"
    has_errors: str = "has_errors"
    validators: str = "validators"
    translator: str = "translator"


class MiddlewareConfig(BaseModel):
    """[middleware] section."""

    model_config = {"frozen": True}

    max_body_bytes: int = Field(default=1024 * 1024, ge=0)
    json_content_types: list[str] = Field(default_factory=lambda: ["application/json"])
    xml_content_types: list[str] = Field(
        default_factory=lambda: ["application/xml", "text/xml"],
    )
    form_content_types: list[str] = Field(
        default_factory=lambda: ["application/x-www-form-urlencoded", "multipart/form-data"],
    )
