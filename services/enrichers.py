from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from models.link_request import TEMPLATED_KEY, LinkRequest
from services.link_factories import HTTP_METHOD_KEY, LinkFactoryContext
from services.routing import RouteTable
from utils.errors import must_not_be_blank, must_not_be_none


class LinkDataWriter:
    """Write-only view of a link factory context handed to enrichers."""

    def __init__(self, context: LinkFactoryContext) -> None:
        self._context = must_not_be_none(context, "context")

    def write(self, key: str, value: Any) -> "LinkDataWriter":
        must_not_be_blank(key, "key")
        must_not_be_none(value, "value")
        self._context.set(key, value)
        return self


class LinkDataEnricher(ABC):

    @abstractmethod
    def enrich(self, request: LinkRequest, writer: LinkDataWriter) -> None:
        """Write extra link data derived from the request."""


class HttpMethodEnricher(LinkDataEnricher):

    def __init__(self, route_table: RouteTable) -> None:
        self._route_table = must_not_be_none(route_table, "route_table")

    def enrich(self, request: LinkRequest, writer: LinkDataWriter) -> None:
        must_not_be_none(request, "request")
        must_not_be_none(writer, "writer")

        http_method = self._get_http_method(request.get_route_name())
        if http_method and http_method.strip():
            writer.write(HTTP_METHOD_KEY, http_method)

    def select_http_method(self, http_methods: Sequence[str]) -> str:
        return http_methods[0]

    def _get_http_method(self, route_name: Optional[str]) -> Optional[str]:
        if not route_name:
            return None

        entry = self._route_table.lookup_by_name(route_name)
        if entry is None or not entry.http_methods:
            return None
        return self.select_http_method(entry.http_methods)


class IsTemplatedEnricher(LinkDataEnricher):

    def enrich(self, request: LinkRequest, writer: LinkDataWriter) -> None:
        must_not_be_none(request, "request")
        must_not_be_none(writer, "writer")

        if request.is_templated():
            writer.write(TEMPLATED_KEY, True)
