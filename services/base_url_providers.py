from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

from services.routing import RequestContext
from utils.errors import InvalidArgumentError
from utils.uri import is_absolute_http_url, is_well_formed_uri


class BaseUrlProvider(ABC):

    @abstractmethod
    def provide(self, context: Optional[RequestContext] = None) -> Optional[str]:
        """Return the prefix placed in front of every URL path."""


class CurrentRequestBaseUrlProvider(BaseUrlProvider):
    """Absolute hrefs based on the scheme and host of the request being served."""

    def provide(self, context: Optional[RequestContext] = None) -> Optional[str]:
        if context is None or not context.scheme or not context.host:
            raise InvalidArgumentError(
                "A request context with a scheme and host is required to build absolute URLs."
            )
        return f"{context.scheme}://{context.host}"


class CustomBaseUrlProvider(BaseUrlProvider):

    def __init__(self, base_url: str) -> None:
        if not base_url or not base_url.strip() or not self._is_valid(base_url):
            raise InvalidArgumentError(
                "Parameter 'base_url' must not be null or empty and must be a valid base URL."
            )
        self._base_url = base_url

    @staticmethod
    def _is_valid(base_url: str) -> bool:
        if base_url.startswith("/"):
            return is_well_formed_uri(base_url)
        return is_absolute_http_url(base_url)

    def provide(self, context: Optional[RequestContext] = None) -> Optional[str]:
        return self._base_url


class EmptyBaseUrlProvider(BaseUrlProvider):
    """Host-relative hrefs."""

    def provide(self, context: Optional[RequestContext] = None) -> Optional[str]:
        return ""
