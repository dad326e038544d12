from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Exceptions
# -----------------------------------------------------------------------------
class HypermediaError(Exception):
    """Base class for every error raised while building links."""


class InvalidArgumentError(HypermediaError, ValueError):
    """Caller supplied a null, blank or malformed argument."""


class MalformedLinkRequestError(InvalidArgumentError):
    """A pipe-delimited link request could not be parsed unambiguously."""


class TooManyPartsError(MalformedLinkRequestError):
    pass


class DuplicateKeyError(MalformedLinkRequestError):
    pass


class MultipleIdValuesError(MalformedLinkRequestError):
    pass


class RouteNotFoundError(HypermediaError, LookupError):
    """The requested route name is not registered in the route table."""


class LinkResolutionError(HypermediaError, RuntimeError):
    """A collaborator (resolver, route table, provider) returned an unusable value."""


class ContextValueTypeError(HypermediaError, TypeError):
    """A context value exists but is not of the requested type."""


def must_not_be_blank(value, name: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(f"Parameter '{name}' must not be null or empty.")
    return value


def must_not_be_none(value, name: str):
    if value is None:
        raise InvalidArgumentError(f"Parameter '{name}' must not be null.")
    return value


# -----------------------------------------------------------------------------
# HTTP edge
# -----------------------------------------------------------------------------
async def hypermedia_error_handler(request: Request, exc: HypermediaError) -> JSONResponse:
    logger.error("Link building failed for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HypermediaError, hypermedia_error_handler)
