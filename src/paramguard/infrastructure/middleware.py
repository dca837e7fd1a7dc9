"""Starlette middleware: one validation pass per request.

The endpoint finds the pass outputs on ``request.state`` under the names
configured in ``[attributes]``, e.g. ``request.state.errors``.

Route captures come from ``request.path_params``, which Starlette fills in
only once a route has matched. Attach the middleware to the route to have
captures validated::

    Route(
        "/hello/{routeParam}",
        hello,
        middleware=[Middleware(ValidationMiddleware, validation=validation)],
    )

Added to the application instead, it sees query and body values only.
"""

from __future__ import annotations

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from paramguard.config.settings import ParamGuardSettings
from paramguard.infrastructure.body import query_params, read_body
from paramguard.services.validation import Validation

logger = logging.getLogger(__name__)


class ValidationMiddleware(BaseHTTPMiddleware):
    """Validate request parameters before handing the request on."""

    def __init__(
        self,
        app: ASGIApp,
        validation: Validation,
        *,
        settings: ParamGuardSettings | None = None,
    ) -> None:
        super().__init__(app)
        self.validation = validation
        self.settings = settings or ParamGuardSettings.load()

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        query = query_params(request)
        body = await read_body(request, self.settings.middleware)
        route = dict(request.path_params)

        result = self.validation.process(query=query, body=body, route=route)
        if result.has_errors:
            logger.debug("%s %s failed validation on %s", request.method, request.url.path, ", ".join(result.errors))

        for name, value in self.validation.attributes(result, self.settings.attributes).items():
            setattr(request.state, name, value)
        return await call_next(request)
