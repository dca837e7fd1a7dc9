"""Request value sources read from a Starlette request.

JSON objects and forms decode to mappings; XML documents decode to the
root :class:`~paramguard.domain.values.MarkupElement`. Anything that cannot
be decoded is reported as ``None`` and contributes no parameters.
"""

from __future__ import annotations

import json
import logging
import xml.etree.ElementTree as ET
from typing import Any

from python_multipart.multipart import parse_options_header
from starlette.requests import Request

from paramguard.config.models import MiddlewareConfig
from paramguard.domain.values import MarkupElement

logger = logging.getLogger(__name__)


def media_type(content_type: str | None) -> str:
    """Lowercased media type without parameters.

    Examples:
        >>> media_type("application/json;charset=utf8")
        'application/json'
    """
    kind, _ = parse_options_header(content_type or "")
    return kind.decode("latin-1").strip().lower()


def query_params(request: Request) -> dict[str, str]:
    """Flat query parameters; the last occurrence of a key wins."""
    return dict(request.query_params)


async def read_body(request: Request, config: MiddlewareConfig | None = None) -> Any:
    """Decode the body of *request* according to its content type.

    Returns a mapping, a MarkupElement, or None when the body is empty,
    too large, of an unknown type, or malformed. The body stays readable
    for whatever handles the request next.
    """
    config = config or MiddlewareConfig()
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > config.max_body_bytes:
        logger.warning("Request body of %s bytes exceeds limit; not validated", declared)
        return None

    raw = await request.body()
    if not raw:
        return None
    if len(raw) > config.max_body_bytes:
        logger.warning("Request body of %d bytes exceeds limit; not validated", len(raw))
        return None

    kind = media_type(request.headers.get("content-type"))

    if kind in config.json_content_types or kind.endswith("+json"):
        try:
            decoded = await request.json()
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Ignoring undecodable JSON body (%d bytes)", len(raw))
            return None
        return decoded if isinstance(decoded, dict) else None

    if kind in config.xml_content_types or kind.endswith("+xml"):
        try:
            return MarkupElement.from_string(raw)
        except ET.ParseError:
            logger.warning("Ignoring undecodable XML body (%d bytes)", len(raw))
            return None

    if kind in config.form_content_types:
        form = await request.form()
        return dict(form)

    logger.debug("No decoder for content type %r", kind)
    return None
